"""Naming conventions used by every generator.

Pure string helpers that turn arbitrarily-cased user input into the derived
names a template needs: PascalCase class identifiers, snake_case file stems,
camelCase variables, kebab-case slugs and pluralised table/resource names.
Also hosts the qualified-name parser (``"Admin/Dashboard"``) and the suffix
policy that guarantees a generator's conventional suffix appears exactly once.

None of the case helpers raise; empty input yields empty output.
"""

from __future__ import annotations

import re
from dataclasses import dataclass


# ---------------------------------------------------------------------------
# Case transformation
# ---------------------------------------------------------------------------

_SEPARATORS = re.compile(r"[-\s]+")
_UPPER_BOUNDARY = re.compile(r"(?<=[^_])(?=[A-Z])")

# Irregular plurals, matched case-insensitively and returned lowercase.
_IRREGULAR_PLURALS: dict[str, str] = {
    "person": "people",
    "child": "children",
    "man": "men",
    "woman": "women",
}


def to_snake_case(value: str) -> str:
    """Convert ``UserProfile``, ``userProfile`` or ``user-profile`` to ``user_profile``.

    Every uppercase letter after the first character starts a new segment, so
    acronyms are split letter by letter: ``APIController`` becomes
    ``a_p_i_controller``.  Hyphens and whitespace collapse to ``_``.
    """
    if not value:
        return ""
    snake = _SEPARATORS.sub("_", value)
    snake = _UPPER_BOUNDARY.sub("_", snake)
    return snake.lower()


def to_pascal_case(value: str) -> str:
    """Convert any casing to ``PascalCase`` by way of snake_case.

    Each segment is capitalised and the rest of it lowercased.  Runs of
    single-letter segments (what an acronym turns into) are joined into one
    word first, so ``APIController`` comes back as ``ApiController``.  The
    rule cannot tell an acronym from genuine one-letter words, so those are
    joined too: ``add_x_y_columns`` becomes ``AddXyColumns``.
    """
    if not value:
        return ""
    words: list[str] = []
    letters = ""
    for part in to_snake_case(value).split("_"):
        if len(part) == 1 and part.isalpha():
            letters += part
            continue
        if letters:
            words.append(letters)
            letters = ""
        if part:
            words.append(part)
    if letters:
        words.append(letters)
    return "".join(word[0].upper() + word[1:].lower() for word in words)


def to_camel_case(value: str) -> str:
    """Convert any casing to ``camelCase``."""
    pascal = to_pascal_case(value)
    if not pascal:
        return ""
    return pascal[0].lower() + pascal[1:]


def to_kebab_case(value: str) -> str:
    """Convert any casing to ``kebab-case``."""
    return to_snake_case(value).replace("_", "-")


def to_words(value: str) -> str:
    """Convert ``StoreMonitor`` to ``store monitor`` for prose placeholders."""
    return to_snake_case(value).replace("_", " ")


def to_plural(value: str) -> str:
    """Pluralise an English noun.

    Examples::

        to_plural("category") -> "categories"
        to_plural("box")      -> "boxes"
        to_plural("Person")   -> "people"
    """
    if not value:
        return ""

    lower = value.lower()
    irregular = _IRREGULAR_PLURALS.get(lower)
    if irregular is not None:
        return irregular

    if lower.endswith("y") and not re.search(r"[aeiou]y$", lower):
        return value[:-1] + "ies"
    if lower.endswith(("s", "x", "z", "ch", "sh")):
        return value + "es"
    return value + "s"


# ---------------------------------------------------------------------------
# Qualified name parsing
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ParsedName:
    """A qualified name split into its directory and leaf parts.

    ``directory`` never contains the leaf segment; each of its segments is
    snake_cased.  ``identifier`` keeps the caller's casing.
    """

    directory: str
    identifier: str
    file_stem: str


def parse_name(value: str) -> ParsedName:
    """Parse ``"Api/V1/UserController"`` into directory and leaf parts.

    Returns:
        ``ParsedName(directory="api/v1", identifier="UserController",
        file_stem="user_controller")``.  Empty input gives all-empty fields.
    """
    if not value:
        return ParsedName(directory="", identifier="", file_stem="")

    *parents, identifier = value.split("/")
    directory = "/".join(to_snake_case(segment) for segment in parents)
    return ParsedName(
        directory=directory,
        identifier=identifier,
        file_stem=to_snake_case(identifier),
    )


# ---------------------------------------------------------------------------
# Suffix policy
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class SuffixPolicy:
    """Guarantees an identifier ends with *suffix* exactly once.

    Matching is a case-sensitive exact suffix match.  The policy only ever
    touches the leaf identifier; use :meth:`normalize_qualified` for a full
    ``Dir/Name`` input.
    """

    suffix: str

    def normalize(self, identifier: str) -> str:
        """``User`` -> ``UserFactory``; ``UserFactory`` is returned unchanged."""
        if identifier.endswith(self.suffix):
            return identifier
        return identifier + self.suffix

    def strip(self, identifier: str) -> str:
        """Recover the base name: ``MonitorFactory`` -> ``Monitor``.

        Identifiers without the suffix are returned unchanged, as is the bare
        suffix itself (there is no base name to recover from it).  This makes
        ``strip`` a left inverse of :meth:`normalize` for every non-empty
        identifier that lacks the suffix.  The empty string is the exception:
        ``strip(normalize(""))`` is the suffix itself.  Generators never see
        an empty identifier.
        """
        if identifier.endswith(self.suffix) and len(identifier) > len(self.suffix):
            return identifier[: -len(self.suffix)]
        return identifier

    def normalize_qualified(self, name: str) -> str:
        """``Admin/Dashboard`` -> ``Admin/DashboardController``."""
        head, sep, leaf = name.rpartition("/")
        return f"{head}{sep}{self.normalize(leaf)}"


CONTROLLER = SuffixPolicy("Controller")
VIEW = SuffixPolicy("View")
FACTORY = SuffixPolicy("Factory")
SEEDER = SuffixPolicy("Seeder")
POLICY = SuffixPolicy("Policy")
REQUEST = SuffixPolicy("Request")
SERVICE_PROVIDER = SuffixPolicy("ServiceProvider")
