"""Module entrypoint for ``python -m dirstamp``."""

from dirstamp.cli import app

if __name__ == "__main__":
    app()
