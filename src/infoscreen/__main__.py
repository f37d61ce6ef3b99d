"""Entry point for ``python -m infoscreen``."""

from .cli import main

if __name__ == "__main__":
    main()
