"""Soko: versioned, content-addressed storage for compiled contract artifacts.

Artifacts are immutable build-info documents addressed by a digest of
their content and optionally aliased by a mutable, per-project tag.
  - Publisher: derive the id, guard existing tags, upload
  - Synchronizer: reconcile a local store with a remote one
  - Differencer: contract-by-contract comparison with a release
  - SummaryBuilder: contract/release indices with version-aware dedup
"""

__version__ = "0.1.0"

from soko.config import SokoSettings
from soko.core.diff import Differencer
from soko.core.errors import SokoError
from soko.core.pull import Synchronizer
from soko.core.push import Publisher
from soko.core.summary import SummaryBuilder

__all__ = [
    "Differencer",
    "Publisher",
    "SokoError",
    "SokoSettings",
    "SummaryBuilder",
    "Synchronizer",
    "__version__",
]
