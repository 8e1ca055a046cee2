"""Synchronizer — reconcile the local store with the remote one.

Listing the remote is fatal on failure.  Downloads then run concurrently,
bounded by a semaphore, and each item settles independently: a failed
download or write is recorded in the result and never aborts the others.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable

from soko.core.errors import ArtifactNotFoundError, StorageError
from soko.core.references import validate_segment
from soko.models.results import PullResult
from soko.storage.base import StorageProvider
from soko.storage.local import LocalStorageProvider

logger = logging.getLogger(__name__)

DEFAULT_PULL_CONCURRENCY = 8


class Synchronizer:
    """Pulls artifacts of a project from a remote provider into the local store.

    Parameters
    ----------
    local:
        Destination store.
    remote:
        Source store.
    concurrency:
        Maximum number of downloads in flight.
    """

    def __init__(
        self,
        local: LocalStorageProvider,
        remote: StorageProvider,
        *,
        concurrency: int = DEFAULT_PULL_CONCURRENCY,
    ) -> None:
        if concurrency < 1:
            raise ValueError("concurrency must be at least 1")
        self.local = local
        self.remote = remote
        self.concurrency = concurrency

    async def pull(
        self, project: str, tag_or_id: str | None = None, *, force: bool = False
    ) -> PullResult:
        """Pull the missing artifacts of ``project``.

        With ``tag_or_id``, only that artifact is considered; it is looked up
        among remote tags first, then remote ids.  With ``force``, artifacts
        already present locally are downloaded again.

        Raises
        ------
        StorageError
            If the remote (or, without ``force``, the local) listing fails.
        ArtifactNotFoundError
            If ``tag_or_id`` matches neither a remote tag nor a remote id.
        ArtifactValidationError
            If ``project`` is not a valid, unreserved project name.
        """
        validate_segment(project, "project")
        try:
            remote_tags, remote_ids = await asyncio.gather(
                self.remote.list_tags(project), self.remote.list_ids(project)
            )
        except Exception as exc:
            raise StorageError("Error listing the remote tags and IDs") from exc

        tags_to_pull, ids_to_pull = self._select(
            remote_tags, remote_ids, project, tag_or_id
        )

        if not force:
            try:
                local_tags, local_ids = await asyncio.gather(
                    self.local.list_tags(project), self.local.list_ids(project)
                )
            except Exception as exc:
                raise StorageError("Error listing the local tags and IDs") from exc
            tags_to_pull = [tag for tag in tags_to_pull if tag not in local_tags]
            ids_to_pull = [i for i in ids_to_pull if i not in local_ids]

        result = PullResult(remote_tags=sorted(remote_tags), remote_ids=sorted(remote_ids))
        if not tags_to_pull and not ids_to_pull:
            logger.info("Project %s is up to date", project)
            return result

        logger.info(
            "Found %d missing artifacts for %s, starting to pull",
            len(tags_to_pull) + len(ids_to_pull),
            project,
        )
        try:
            await self.local.ensure_project_setup(project)
        except Exception as exc:
            raise StorageError(f'Error preparing the local project "{project}"') from exc

        semaphore = asyncio.Semaphore(self.concurrency)
        tag_outcomes, id_outcomes = await asyncio.gather(
            asyncio.gather(
                *(
                    self._transfer(
                        semaphore,
                        f"{project}:{tag}",
                        lambda tag=tag: self.remote.download_by_tag(project, tag),
                        lambda content, tag=tag: self.local.write_by_tag(
                            project, tag, content
                        ),
                    )
                    for tag in tags_to_pull
                )
            ),
            asyncio.gather(
                *(
                    self._transfer(
                        semaphore,
                        f"{project}:{artifact_id}",
                        lambda artifact_id=artifact_id: self.remote.download_by_id(
                            project, artifact_id
                        ),
                        lambda content, artifact_id=artifact_id: self.local.write_by_id(
                            project, artifact_id, content
                        ),
                    )
                    for artifact_id in ids_to_pull
                )
            ),
        )

        return result.model_copy(
            update={
                "pulled_tags": [t for t, ok in zip(tags_to_pull, tag_outcomes) if ok],
                "failed_tags": [t for t, ok in zip(tags_to_pull, tag_outcomes) if not ok],
                "pulled_ids": [i for i, ok in zip(ids_to_pull, id_outcomes) if ok],
                "failed_ids": [i for i, ok in zip(ids_to_pull, id_outcomes) if not ok],
            }
        )

    @staticmethod
    def _select(
        remote_tags: set[str],
        remote_ids: set[str],
        project: str,
        tag_or_id: str | None,
    ) -> tuple[list[str], list[str]]:
        if tag_or_id is None:
            return sorted(remote_tags), sorted(remote_ids)
        if tag_or_id in remote_tags:
            return [tag_or_id], []
        if tag_or_id in remote_ids:
            return [], [tag_or_id]
        raise ArtifactNotFoundError(
            f'The tag or ID "{project}:{tag_or_id}" does not exist in the storage'
        )

    @staticmethod
    async def _transfer(
        semaphore: asyncio.Semaphore,
        label: str,
        download: Callable[[], Awaitable[bytes]],
        write: Callable[[bytes], Awaitable[None]],
    ) -> bool:
        """Download then write one artifact.  Returns False on any failure."""
        async with semaphore:
            try:
                content = await download()
            except Exception as exc:  # noqa: BLE001
                logger.error('Error downloading "%s": %s', label, exc)
                logger.debug("Download failure detail", exc_info=True)
                return False
            try:
                await write(content)
            except Exception as exc:  # noqa: BLE001
                logger.error('Error storing "%s" locally: %s', label, exc)
                logger.debug("Write failure detail", exc_info=True)
                return False
        logger.info('Successfully pulled artifact "%s"', label)
        return True
