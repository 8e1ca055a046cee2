"""Publisher — push a fresh build-info artifact to the remote store."""

from __future__ import annotations

import logging
from pathlib import Path

from soko.core.build_info import load_build_info
from soko.core.errors import StorageError, TagConflictError
from soko.core.hasher import derive_artifact_id
from soko.core.references import validate_segment
from soko.storage.base import StorageProvider

logger = logging.getLogger(__name__)


class Publisher:
    """Derives an artifact id and uploads the artifact under it.

    A tag that already exists remotely is only moved with ``force``.
    Moving a tag never deletes the content it previously resolved to:
    that content stays reachable through its id.
    """

    def __init__(self, remote: StorageProvider) -> None:
        self.remote = remote

    async def push(
        self,
        artifact_path: Path,
        project: str,
        tag: str | None = None,
        *,
        force: bool = False,
    ) -> str:
        """Push the build info at ``artifact_path`` and return its artifact id.

        Raises
        ------
        ArtifactValidationError
            If the path holds no build info, several candidates, or an
            invalid document.
        TagConflictError
            If ``tag`` already exists remotely and ``force`` is False.
        StorageError
            If checking the tag or uploading fails.
        """
        validate_segment(project, "project")
        if tag is not None:
            validate_segment(tag, "tag")
        content, _ = load_build_info(Path(artifact_path))

        if tag is not None:
            try:
                tag_exists = await self.remote.has_by_tag(project, tag)
            except Exception as exc:
                raise StorageError(
                    f'Error checking if the tag "{project}:{tag}" exists on the storage'
                ) from exc
            if tag_exists:
                if not force:
                    raise TagConflictError(
                        f'The tag "{project}:{tag}" already exists on the storage. '
                        "Please use a different tag name or force the push."
                    )
                logger.warning(
                    'The tag "%s:%s" already exists on the storage. Forcing the push.',
                    project,
                    tag,
                )

        artifact_id = derive_artifact_id(content)

        try:
            await self.remote.ensure_project_setup(project)
            await self.remote.upload(project, artifact_id, tag, content)
        except Exception as exc:
            raise StorageError(
                f'Error pushing the artifact "{project}:{tag or artifact_id}" to the storage'
            ) from exc

        logger.info("Pushed %s:%s (tag=%s)", project, artifact_id, tag)
        return artifact_id
