"""Exceptions raised by betty.

Document content never raises: malformed markup degrades to text or to the
root scope.  These errors report mistakes made by the calling code.
"""

from __future__ import annotations


class BettyError(Exception):
    """Base class for all betty errors."""


class OptionsError(BettyError, TypeError):
    """Raised when parse options or the input text are malformed."""


class SerializationError(BettyError, ValueError):
    """Raised when a tree cannot be written back as ArchieML text."""
