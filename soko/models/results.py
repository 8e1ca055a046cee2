"""Result models returned by the pull, diff and list operations."""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict


class DiffStatus(str, Enum):
    """How a contract differs from the reference artifact."""

    ADDED = "added"
    REMOVED = "removed"
    CHANGED = "changed"


class ContractDifference(BaseModel):
    model_config = ConfigDict(frozen=True)

    path: str
    name: str
    status: DiffStatus


class PullResult(BaseModel):
    """Outcome of a pull.

    ``remote_*`` is the full remote listing, whatever was selected.
    ``pulled_*`` and ``failed_*`` follow the order of the candidate list,
    not the order in which downloads completed.
    """

    model_config = ConfigDict(frozen=True)

    remote_tags: list[str]
    remote_ids: list[str]
    pulled_tags: list[str] = []
    pulled_ids: list[str] = []
    failed_tags: list[str] = []
    failed_ids: list[str] = []

    @property
    def has_failures(self) -> bool:
        return bool(self.failed_tags or self.failed_ids)


class StoredEntry(BaseModel):
    """A file in the local store with its last modification time."""

    model_config = ConfigDict(frozen=True)

    name: str
    last_modified_at: datetime


class ArtifactListing(BaseModel):
    """One row of the local artifact listing."""

    model_config = ConfigDict(frozen=True)

    project: str
    artifact_id: str
    tag: str | None = None
    last_modified_at: datetime
