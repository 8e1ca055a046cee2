"""Differencer — compare a fresh compilation against a stored release.

Contracts are matched by ``(path, name)`` and compared by digest::

    only in fresh         -> added
    only in reference     -> removed
    in both, digests !=   -> changed
    in both, digests ==   -> no row

A reference that cannot be found locally is not an error: every fresh
contract is reported as added.
"""

from __future__ import annotations

import logging
from pathlib import Path

from soko.core.build_info import contract_digests, load_build_info, parse_build_info
from soko.core.errors import ArtifactNotFoundError, ArtifactValidationError
from soko.models.artifacts import BuildInfo, ContractKey
from soko.models.releases import ArtifactReference
from soko.models.results import ContractDifference, DiffStatus
from soko.storage.base import StorageProvider

logger = logging.getLogger(__name__)


def diff_digests(
    fresh: dict[ContractKey, str], reference: dict[ContractKey, str]
) -> list[ContractDifference]:
    """Classify every contract key present in either map, sorted by key."""
    differences: list[ContractDifference] = []
    for key in sorted(fresh.keys() | reference.keys()):
        if key not in reference:
            status = DiffStatus.ADDED
        elif key not in fresh:
            status = DiffStatus.REMOVED
        elif fresh[key] != reference[key]:
            status = DiffStatus.CHANGED
        else:
            continue
        differences.append(ContractDifference(path=key.path, name=key.name, status=status))
    return differences


def diff_build_infos(fresh: BuildInfo, reference: BuildInfo) -> list[ContractDifference]:
    return diff_digests(contract_digests(fresh), contract_digests(reference))


class Differencer:
    """Diffs build infos against releases held in ``store``."""

    def __init__(self, store: StorageProvider) -> None:
        self.store = store

    async def diff(
        self, fresh: BuildInfo, reference: ArtifactReference
    ) -> list[ContractDifference]:
        """Diff ``fresh`` against the artifact designated by ``reference``."""
        if reference.tag_or_id is None:
            raise ArtifactValidationError(
                f'Reference "{reference}" must designate a single artifact'
            )
        fresh_digests = contract_digests(fresh)

        try:
            content = await self.store.download(reference.project, reference.tag_or_id)
        except ArtifactNotFoundError:
            logger.warning(
                'The "%s" release has not been found locally. If this is not '
                "expected, please run the `pull` command first.",
                reference,
            )
            return diff_digests(fresh_digests, {})

        stored = parse_build_info(content, source=f'"{reference}"')
        return diff_digests(fresh_digests, contract_digests(stored))

    async def diff_path(
        self, artifact_path: Path, reference: ArtifactReference
    ) -> list[ContractDifference]:
        """Load the build info at ``artifact_path`` and diff it."""
        _, fresh = load_build_info(Path(artifact_path))
        return await self.diff(fresh, reference)
