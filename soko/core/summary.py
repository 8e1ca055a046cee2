"""Summary builder — contract/release indices over the local releases.

Every tag of the local store is a release.  For each contract, the
releases carrying it are ordered (semantic versions by version, then
opaque names by name) and, when similar contracts are filtered, a
semantic-version release is dropped if its digest equals the digest of
the last retained semantic-version release of the same project.  Opaque
releases such as ``latest`` are always retained and never move that
cursor.

The persisted document is derived state: it can be deleted and rebuilt
at any time.
"""

from __future__ import annotations

import json
import logging
from collections import defaultdict
from pathlib import Path

from pydantic import ValidationError

from soko.core.build_info import contract_digests, parse_build_info
from soko.core.errors import ArtifactValidationError, SokoError, StorageError
from soko.core.references import validate_segment
from soko.models.artifacts import ContractKey
from soko.models.releases import ReleaseName
from soko.models.summary import ReleasesSummary
from soko.storage.local import LocalStorageProvider

logger = logging.getLogger(__name__)

ReleaseDigests = tuple[ReleaseName, dict[ContractKey, str]]


def filter_similar_releases(entries: list[tuple[ReleaseName, str]]) -> list[ReleaseName]:
    """Drop semantic-version releases that re-release identical code.

    ``entries`` must already be ordered by ``ReleaseName.sort_key``.
    """
    kept: list[ReleaseName] = []
    cursor: str | None = None
    cursor_project: str | None = None
    for release, digest in entries:
        if not release.is_semantic:
            kept.append(release)
            continue
        if release.project != cursor_project:
            cursor, cursor_project = None, release.project
        if digest == cursor:
            continue
        kept.append(release)
        cursor = digest
    return kept


def build_indices(
    releases: list[ReleaseDigests], *, filter_similar: bool
) -> ReleasesSummary:
    """Build both indices from per-release contract digests."""
    per_contract: dict[ContractKey, list[tuple[ReleaseName, str]]] = defaultdict(list)
    for release, digests in releases:
        for key, digest in digests.items():
            per_contract[key].append((release, digest))

    contracts: dict[str, list[str]] = {}
    ordered_releases = sorted((release for release, _ in releases), key=ReleaseName.sort_key)
    releases_index: dict[str, list[str]] = {release.label: [] for release in ordered_releases}

    for key in sorted(per_contract):
        entries = sorted(per_contract[key], key=lambda entry: entry[0].sort_key())
        if filter_similar:
            kept = filter_similar_releases(entries)
        else:
            kept = [release for release, _ in entries]
        contracts[str(key)] = [release.label for release in kept]
        for release in kept:
            releases_index[release.label].append(str(key))

    return ReleasesSummary(contracts=contracts, releases=releases_index)


class SummaryBuilder:
    """Builds and persists the summary of the releases in a local store.

    Parameters
    ----------
    local:
        The local store holding the releases; the summary is written to
        its ``generated`` directory.
    filter_similar:
        Collapse semantic-version releases carrying an unchanged contract.
    """

    def __init__(self, local: LocalStorageProvider, *, filter_similar: bool = True) -> None:
        self.local = local
        self.filter_similar = filter_similar

    async def enumerate_releases(self, project: str | None = None) -> list[ReleaseName]:
        """Releases of ``project``, or of every local project when None."""
        if project is not None:
            validate_segment(project, "project")
        projects = [project] if project is not None else await self.local.list_projects()
        releases: list[ReleaseName] = []
        for name in projects:
            for tag in await self.local.list_tags(name):
                releases.append(
                    ReleaseName.from_tag(name, tag, qualified=project is None)
                )
        return sorted(releases, key=ReleaseName.sort_key)

    async def _load_digests(self, release: ReleaseName) -> dict[ContractKey, str]:
        try:
            content = await self.local.download_by_tag(release.project, release.tag)
        except SokoError:
            raise
        except Exception as exc:
            raise StorageError(f'Error reading the release "{release.label}"') from exc
        build_info = parse_build_info(content, source=f'of release "{release.label}"')
        return contract_digests(build_info)

    async def build(self, project: str | None = None) -> ReleasesSummary:
        """Compute the indices.  Any unreadable release aborts the build."""
        releases = await self.enumerate_releases(project)
        if not releases:
            logger.warning("No local releases have been found. Generating an empty summary.")
            return ReleasesSummary()
        loaded = [(release, await self._load_digests(release)) for release in releases]
        return build_indices(loaded, filter_similar=self.filter_similar)

    async def generate(self, project: str | None = None) -> Path:
        """Build the indices and persist them as ``generated/summary.json``."""
        summary = await self.build(project)
        content = json.dumps(summary.model_dump(), indent=4).encode("utf-8")
        path = await self.local.write_summary(content)
        logger.info(
            "Wrote summary of %d releases and %d contracts to %s",
            len(summary.releases),
            len(summary.contracts),
            path,
        )
        return path


async def load_summary(local: LocalStorageProvider) -> ReleasesSummary:
    """Read back the persisted summary.

    Raises
    ------
    ArtifactNotFoundError
        If no summary has been generated yet.
    ArtifactValidationError
        If the document is not a valid summary.
    """
    content = await local.read_summary()
    try:
        return ReleasesSummary.model_validate_json(content)
    except ValidationError as exc:
        raise ArtifactValidationError(
            f"The generated summary at {local.summary_path} is invalid. "
            "Please run the `summary` command again."
        ) from exc
