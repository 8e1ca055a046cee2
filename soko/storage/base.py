"""Storage provider capability shared by the local and remote stores.

Both implementations expose the same operations over ``(project, tag)``
and ``(project, id)`` keys.  No operation is transactional across calls:
after ``upload`` with a tag, an observer may briefly see the id without
the tag.
"""

from __future__ import annotations

import abc


class StorageProvider(abc.ABC):
    """Abstract base for artifact stores."""

    @abc.abstractmethod
    async def list_tags(self, project: str) -> set[str]:
        """Return every tag of the project."""

    @abc.abstractmethod
    async def list_ids(self, project: str) -> set[str]:
        """Return every artifact id of the project."""

    @abc.abstractmethod
    async def has_by_tag(self, project: str, tag: str) -> bool:
        """Check if a tag exists."""

    @abc.abstractmethod
    async def has_by_id(self, project: str, artifact_id: str) -> bool:
        """Check if an artifact id exists."""

    @abc.abstractmethod
    async def upload(
        self, project: str, artifact_id: str, tag: str | None, content: bytes
    ) -> None:
        """Store ``content`` under ``artifact_id``; point ``tag`` at it if given."""

    @abc.abstractmethod
    async def download_by_tag(self, project: str, tag: str) -> bytes:
        """Retrieve the artifact a tag resolves to.

        Raises ``ArtifactNotFoundError`` if the tag does not exist.
        """

    @abc.abstractmethod
    async def download_by_id(self, project: str, artifact_id: str) -> bytes:
        """Retrieve an artifact by id.

        Raises ``ArtifactNotFoundError`` if the id does not exist.
        """

    @abc.abstractmethod
    async def ensure_project_setup(self, project: str) -> None:
        """Create whatever structure the project needs.  Idempotent."""

    async def download(self, project: str, tag_or_id: str) -> bytes:
        """Retrieve an artifact by tag, falling back to id."""
        if await self.has_by_tag(project, tag_or_id):
            return await self.download_by_tag(project, tag_or_id)
        return await self.download_by_id(project, tag_or_id)
