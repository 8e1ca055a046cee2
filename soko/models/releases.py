"""Artifact references and release names."""

from __future__ import annotations

import re

from pydantic import BaseModel, ConfigDict

_SEGMENT_RE = re.compile(r"^[A-Za-z0-9][A-Za-z0-9._-]*$")
_SEMVER_RE = re.compile(r"^v?(\d+)(?:\.(\d+))?(?:\.(\d+))?$")


def is_valid_segment(value: str) -> bool:
    """Whether ``value`` is usable as a project, tag or id path segment."""
    return bool(_SEGMENT_RE.match(value))


class ArtifactReference(BaseModel):
    """``<project>`` (every artifact) or ``<project>:<tagOrId>`` (one artifact)."""

    model_config = ConfigDict(frozen=True)

    project: str
    tag_or_id: str | None = None

    def __str__(self) -> str:
        if self.tag_or_id is None:
            return self.project
        return f"{self.project}:{self.tag_or_id}"


def parse_semantic_version(name: str) -> tuple[int, int, int] | None:
    """Parse ``[v]MAJOR[.MINOR[.PATCH]]``; missing components count as 0.

    Returns None for anything else (``latest``, ``v1.0.0-rc1``, ``1.2.3.4``).
    """
    match = _SEMVER_RE.match(name)
    if match is None:
        return None
    major, minor, patch = (int(part) if part else 0 for part in match.groups())
    return major, minor, patch


class ReleaseName(BaseModel):
    """A release as it appears in the summary indices.

    A release is either semantic-version shaped (``version`` is set) and
    ordered by that version, or opaque and ordered by name after every
    semantic version of the same project.  Opaque releases are never
    considered duplicates of one another.
    """

    model_config = ConfigDict(frozen=True)

    project: str
    tag: str
    label: str
    version: tuple[int, int, int] | None = None

    @classmethod
    def from_tag(cls, project: str, tag: str, *, qualified: bool = False) -> ReleaseName:
        return cls(
            project=project,
            tag=tag,
            label=f"{project}:{tag}" if qualified else tag,
            version=parse_semantic_version(tag),
        )

    @property
    def is_semantic(self) -> bool:
        return self.version is not None

    def sort_key(self) -> tuple[str, int, tuple[int, int, int], str]:
        if self.version is not None:
            return (self.project, 0, self.version, self.tag)
        return (self.project, 1, (0, 0, 0), self.tag)
