"""Listing of the artifacts held in the local store."""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from soko.core.hasher import derive_artifact_id
from soko.models.results import ArtifactListing
from soko.storage.local import LocalStorageProvider

logger = logging.getLogger(__name__)


async def list_local_artifacts(local: LocalStorageProvider) -> list[ArtifactListing]:
    """One row per local tag, then one per id not already reached by a tag.

    The id of a tagged artifact is derived from the tag's content, so a tag
    whose id file was never pulled still reports its real identity.
    """
    listings: list[ArtifactListing] = []
    for project in await local.list_projects():
        visited: set[str] = set()
        for entry in await local.list_tag_entries(project):
            content = await local.download_by_tag(project, entry.name)
            artifact_id = derive_artifact_id(content)
            listings.append(
                ArtifactListing(
                    project=project,
                    artifact_id=artifact_id,
                    tag=entry.name,
                    last_modified_at=entry.last_modified_at,
                )
            )
            visited.add(artifact_id)
        for entry in await local.list_id_entries(project):
            if entry.name in visited:
                continue
            listings.append(
                ArtifactListing(
                    project=project,
                    artifact_id=entry.name,
                    last_modified_at=entry.last_modified_at,
                )
            )
            visited.add(entry.name)
    logger.debug("Listed %d local artifacts", len(listings))
    return listings


def time_ago(moment: datetime, now: datetime | None = None) -> str:
    """Render ``moment`` relative to ``now`` (``3d ago``, ``5h ago`` ...)."""
    now = now or datetime.now(timezone.utc)
    seconds = int((now - moment).total_seconds())
    minutes, hours, days = seconds // 60, seconds // 3600, seconds // 86400
    if days > 0:
        return f"{days}d ago"
    if hours > 0:
        return f"{hours}h ago"
    if minutes > 0:
        return f"{minutes}m ago"
    return "Less than a minute ago"
