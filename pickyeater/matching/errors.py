from __future__ import annotations


class InvalidArgument(ValueError):
    """Raised when a caller breaks the matching contract (e.g. a negative page)."""
