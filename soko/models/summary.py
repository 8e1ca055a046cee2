"""Persisted contract/release index."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class ReleasesSummary(BaseModel):
    """Derived index over every retained release.

    ``contracts`` maps ``"<path>:<name>"`` to the releases that carry it,
    ``releases`` maps each release to its contracts.  The document is always
    regenerable and never authoritative.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    contracts: dict[str, list[str]] = {}
    releases: dict[str, list[str]] = {}
