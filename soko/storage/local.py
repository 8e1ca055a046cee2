"""Local filesystem store.

Layout::

    {root}/{project}/tags/{tag}.json
    {root}/{project}/ids/{id}.json
    {root}/generated/summary.json

``generated`` is reserved for derived output and is never a project.
Every write goes through a temporary file and ``os.replace`` so a reader
never observes a half-written artifact, and replacing a tag never touches
the id file it was linked from.
"""

from __future__ import annotations

import asyncio
import logging
import os
import shutil
import uuid
from datetime import datetime, timezone
from pathlib import Path

from soko.core.errors import ArtifactNotFoundError
from soko.models.results import StoredEntry
from soko.storage.base import StorageProvider

logger = logging.getLogger(__name__)

GENERATED_DIRECTORY = "generated"
SUMMARY_FILENAME = "summary.json"


class LocalStorageProvider(StorageProvider):
    """Artifact store rooted at a local directory.

    Parameters
    ----------
    root:
        Root directory of the store.  Created lazily.
    """

    def __init__(self, root: Path | str) -> None:
        self.root = Path(root)

    # ------------------------------------------------------------------
    # Paths
    # ------------------------------------------------------------------

    def _tags_dir(self, project: str) -> Path:
        return self.root / project / "tags"

    def _ids_dir(self, project: str) -> Path:
        return self.root / project / "ids"

    def tag_path(self, project: str, tag: str) -> Path:
        return self._tags_dir(project) / f"{tag}.json"

    def id_path(self, project: str, artifact_id: str) -> Path:
        return self._ids_dir(project) / f"{artifact_id}.json"

    @property
    def generated_dir(self) -> Path:
        return self.root / GENERATED_DIRECTORY

    @property
    def summary_path(self) -> Path:
        return self.generated_dir / SUMMARY_FILENAME

    # ------------------------------------------------------------------
    # Synchronous helpers (run in a worker thread)
    # ------------------------------------------------------------------

    @staticmethod
    def _list_names(directory: Path) -> set[str]:
        if not directory.is_dir():
            return set()
        return {p.stem for p in directory.glob("*.json") if p.is_file()}

    @staticmethod
    def _list_entries(directory: Path) -> list[StoredEntry]:
        if not directory.is_dir():
            return []
        entries = [
            StoredEntry(
                name=p.stem,
                last_modified_at=datetime.fromtimestamp(
                    p.stat().st_mtime, tz=timezone.utc
                ),
            )
            for p in directory.glob("*.json")
            if p.is_file()
        ]
        return sorted(entries, key=lambda entry: entry.name)

    @staticmethod
    def _read(path: Path, what: str) -> bytes:
        try:
            return path.read_bytes()
        except FileNotFoundError as exc:
            raise ArtifactNotFoundError(f"{what} not found locally") from exc

    @staticmethod
    def _write_atomic(target: Path, content: bytes) -> None:
        target.parent.mkdir(parents=True, exist_ok=True)
        tmp = target.with_name(f".{target.name}.{uuid.uuid4().hex}.tmp")
        try:
            tmp.write_bytes(content)
            os.replace(tmp, target)
        finally:
            tmp.unlink(missing_ok=True)

    @staticmethod
    def _link_atomic(source: Path, target: Path) -> None:
        target.parent.mkdir(parents=True, exist_ok=True)
        tmp = target.with_name(f".{target.name}.{uuid.uuid4().hex}.tmp")
        try:
            try:
                os.link(source, tmp)
            except OSError:
                # Filesystem without hard links.
                shutil.copyfile(source, tmp)
            os.replace(tmp, target)
        finally:
            tmp.unlink(missing_ok=True)

    def _upload(
        self, project: str, artifact_id: str, tag: str | None, content: bytes
    ) -> None:
        id_path = self.id_path(project, artifact_id)
        if not id_path.exists():
            self._write_atomic(id_path, content)
        if tag is not None:
            self._link_atomic(id_path, self.tag_path(project, tag))

    def _ensure_project_setup(self, project: str) -> None:
        self._tags_dir(project).mkdir(parents=True, exist_ok=True)
        self._ids_dir(project).mkdir(parents=True, exist_ok=True)

    # ------------------------------------------------------------------
    # StorageProvider
    # ------------------------------------------------------------------

    async def list_tags(self, project: str) -> set[str]:
        return await asyncio.to_thread(self._list_names, self._tags_dir(project))

    async def list_ids(self, project: str) -> set[str]:
        return await asyncio.to_thread(self._list_names, self._ids_dir(project))

    async def has_by_tag(self, project: str, tag: str) -> bool:
        return await asyncio.to_thread(self.tag_path(project, tag).is_file)

    async def has_by_id(self, project: str, artifact_id: str) -> bool:
        return await asyncio.to_thread(self.id_path(project, artifact_id).is_file)

    async def upload(
        self, project: str, artifact_id: str, tag: str | None, content: bytes
    ) -> None:
        await asyncio.to_thread(self._upload, project, artifact_id, tag, content)
        logger.debug("Stored %s:%s locally (tag=%s)", project, artifact_id, tag)

    async def download_by_tag(self, project: str, tag: str) -> bytes:
        return await asyncio.to_thread(
            self._read, self.tag_path(project, tag), f'Tag "{project}:{tag}"'
        )

    async def download_by_id(self, project: str, artifact_id: str) -> bytes:
        return await asyncio.to_thread(
            self._read,
            self.id_path(project, artifact_id),
            f'ID "{project}:{artifact_id}"',
        )

    async def ensure_project_setup(self, project: str) -> None:
        await asyncio.to_thread(self._ensure_project_setup, project)

    # ------------------------------------------------------------------
    # Local-only operations
    # ------------------------------------------------------------------

    async def write_by_tag(self, project: str, tag: str, content: bytes) -> None:
        """Write pulled content under a tag, replacing any previous one."""
        await asyncio.to_thread(
            self._write_atomic, self.tag_path(project, tag), content
        )

    async def write_by_id(self, project: str, artifact_id: str, content: bytes) -> None:
        """Write pulled content under an id."""
        await asyncio.to_thread(
            self._write_atomic, self.id_path(project, artifact_id), content
        )

    async def list_projects(self) -> list[str]:
        """Projects present locally, sorted, excluding reserved directories."""

        def _scan() -> list[str]:
            if not self.root.is_dir():
                return []
            return sorted(
                entry.name
                for entry in self.root.iterdir()
                if entry.is_dir()
                and entry.name != GENERATED_DIRECTORY
                and not entry.name.startswith(".")
            )

        return await asyncio.to_thread(_scan)

    async def list_tag_entries(self, project: str) -> list[StoredEntry]:
        return await asyncio.to_thread(self._list_entries, self._tags_dir(project))

    async def list_id_entries(self, project: str) -> list[StoredEntry]:
        return await asyncio.to_thread(self._list_entries, self._ids_dir(project))

    async def write_summary(self, content: bytes) -> Path:
        """Persist the generated summary document and return its path."""
        await asyncio.to_thread(self._write_atomic, self.summary_path, content)
        return self.summary_path

    async def read_summary(self) -> bytes:
        return await asyncio.to_thread(
            self._read, self.summary_path, "Generated summary"
        )
