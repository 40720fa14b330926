from __future__ import annotations


class PasteError(Exception):
    """Base class for paste-related errors."""


class BackendError(PasteError):
    """Raised when the key-value backend fails or times out."""
