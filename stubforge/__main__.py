"""Allow ``python -m stubforge``."""

from stubforge.cli import main

if __name__ == "__main__":
    main()
