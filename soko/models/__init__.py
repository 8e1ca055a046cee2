"""Soko data models — all Pydantic v2, all frozen (immutable)."""

from soko.models.artifacts import (
    SUPPORTED_BUILD_INFO_FORMAT,
    BuildInfo,
    CompilerInput,
    CompilerOutput,
    ContractKey,
    ContractOutput,
)
from soko.models.releases import (
    ArtifactReference,
    ReleaseName,
    is_valid_segment,
    parse_semantic_version,
)
from soko.models.results import (
    ArtifactListing,
    ContractDifference,
    DiffStatus,
    PullResult,
    StoredEntry,
)
from soko.models.summary import ReleasesSummary

__all__ = [
    # artifacts
    "SUPPORTED_BUILD_INFO_FORMAT",
    "BuildInfo",
    "CompilerInput",
    "CompilerOutput",
    "ContractKey",
    "ContractOutput",
    # releases
    "ArtifactReference",
    "ReleaseName",
    "is_valid_segment",
    "parse_semantic_version",
    # results
    "ArtifactListing",
    "ContractDifference",
    "DiffStatus",
    "PullResult",
    "StoredEntry",
    # summary
    "ReleasesSummary",
]
