"""Module entrypoint for ``python -m slingshot``."""

from .cli import main


if __name__ == "__main__":
    main()
