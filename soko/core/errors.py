"""Domain error taxonomy.

Every expected, user-actionable failure raised by the engine derives from
``SokoError`` so that callers can separate it from unexpected internal
exceptions.  Infrastructure failures are wrapped in ``StorageError`` with
the original exception chained as ``__cause__``.
"""

from __future__ import annotations


class SokoError(RuntimeError):
    """Base class for known, user-actionable failures."""


class ArtifactValidationError(SokoError):
    """Raised for malformed documents, input paths or reference strings."""


class ArtifactNotFoundError(SokoError):
    """Raised when a tag, id or generated document does not exist."""


class TagConflictError(SokoError):
    """Raised when pushing a tag that already exists without ``force``."""


class StorageError(SokoError):
    """Raised when a storage provider fails during a phase that cannot
    tolerate partial failure (listing, setup, upload)."""
