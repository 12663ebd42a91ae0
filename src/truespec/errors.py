"""Exceptions raised while loading documents.

The comparator itself never raises; these errors only come from the
collaborators that read and dereference input documents.
"""


class TrueSpecError(Exception):
    """Base exception for TrueSpec errors."""


class DocumentLoadError(TrueSpecError):
    """Raised when a document cannot be read, fetched or parsed."""

    def __init__(self, source: str, reason: str):
        super().__init__(f"Failed to load {source}: {reason}")
        self.source = source
        self.reason = reason


class RefResolutionError(TrueSpecError):
    """Raised when a $ref cannot be resolved."""

    def __init__(self, ref: str, reason: str):
        super().__init__(f"Cannot resolve $ref '{ref}': {reason}")
        self.ref = ref
        self.reason = reason
