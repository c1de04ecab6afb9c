"""Allow ``python -m unwind``."""

from unwind.cli.app import app

if __name__ == "__main__":
    app()
