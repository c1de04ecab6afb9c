"""unwind CLI: the ``unwind`` console script and ``python -m unwind``."""

from unwind.cli.app import app

__all__ = ["app"]
