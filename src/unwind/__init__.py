"""
Unwind - error values, deferred cleanup and abort recovery for Python.

- unwind.core: runtime primitives (ErrorRecord, Result, Frame, DeferredStack)
- unwind.lessons: fallible example operations and the guided walkthrough
- unwind.cli: command line interface
"""

__version__ = "0.1.0"

from unwind.core import *  # noqa
