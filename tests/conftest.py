"""Shared test fixtures for Soko."""

from __future__ import annotations

import json
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest

from soko.core.errors import ArtifactNotFoundError
from soko.storage.base import StorageProvider
from soko.storage.local import LocalStorageProvider


# ---------------------------------------------------------------------------
# In-memory remote
# ---------------------------------------------------------------------------


class InMemoryStorageProvider(StorageProvider):
    """Dict-backed provider with failure injection for engine tests."""

    def __init__(self) -> None:
        self.tags: dict[tuple[str, str], bytes] = {}
        self.ids: dict[tuple[str, str], bytes] = {}
        self.fail_listing = False
        self.failing_downloads: set[str] = set()
        self.download_calls: list[str] = []
        self.setup_projects: list[str] = []

    async def list_tags(self, project: str) -> set[str]:
        if self.fail_listing:
            raise ConnectionError("listing unavailable")
        return {tag for (p, tag) in self.tags if p == project}

    async def list_ids(self, project: str) -> set[str]:
        if self.fail_listing:
            raise ConnectionError("listing unavailable")
        return {i for (p, i) in self.ids if p == project}

    async def has_by_tag(self, project: str, tag: str) -> bool:
        return (project, tag) in self.tags

    async def has_by_id(self, project: str, artifact_id: str) -> bool:
        return (project, artifact_id) in self.ids

    async def upload(
        self, project: str, artifact_id: str, tag: str | None, content: bytes
    ) -> None:
        self.ids.setdefault((project, artifact_id), content)
        if tag is not None:
            self.tags[(project, tag)] = self.ids[(project, artifact_id)]

    async def download_by_tag(self, project: str, tag: str) -> bytes:
        self.download_calls.append(tag)
        if tag in self.failing_downloads:
            raise ConnectionError(f"cannot download {tag}")
        try:
            return self.tags[(project, tag)]
        except KeyError:
            raise ArtifactNotFoundError(f"Tag {tag} not found") from None

    async def download_by_id(self, project: str, artifact_id: str) -> bytes:
        self.download_calls.append(artifact_id)
        if artifact_id in self.failing_downloads:
            raise ConnectionError(f"cannot download {artifact_id}")
        try:
            return self.ids[(project, artifact_id)]
        except KeyError:
            raise ArtifactNotFoundError(f"ID {artifact_id} not found") from None

    async def ensure_project_setup(self, project: str) -> None:
        self.setup_projects.append(project)


# ---------------------------------------------------------------------------
# Build info factories
# ---------------------------------------------------------------------------


def _contract(
    *,
    abi: list[dict[str, Any]] | None = None,
    bytecode: str = "6080604052",
    metadata: str = '{"compiler":{"version":"0.8.24"}}',
    **extra: Any,
) -> dict[str, Any]:
    """A compiled contract output with sensible defaults."""
    contract: dict[str, Any] = {
        "abi": abi
        if abi is not None
        else [
            {"type": "function", "name": "increment", "inputs": [], "outputs": []},
            {"type": "function", "name": "count", "inputs": [], "outputs": []},
        ],
        "evm": {
            "bytecode": {"object": bytecode, "sourceMap": "1:2:3"},
            "deployedBytecode": {"object": bytecode[::-1]},
        },
        "metadata": metadata,
    }
    contract.update(extra)
    return contract


def _build_info(contracts: dict[str, dict[str, dict[str, Any]]] | None = None) -> dict[str, Any]:
    """A minimal ``hh-sol-build-info-1`` document."""
    if contracts is None:
        contracts = {"contracts/Counter.sol": {"Counter": _contract()}}
    return {
        "_format": "hh-sol-build-info-1",
        "id": "0123456789abcdef",
        "solcVersion": "0.8.24",
        "solcLongVersion": "0.8.24+commit.e11b9ed9",
        "input": {
            "language": "Solidity",
            "sources": {path: {"content": "// source"} for path in contracts},
            "settings": {"optimizer": {"enabled": False}},
        },
        "output": {"contracts": contracts, "sources": {}},
    }


def _to_bytes(document: dict[str, Any]) -> bytes:
    return json.dumps(document, indent=2).encode("utf-8")


@pytest.fixture
def make_contract() -> Callable[..., dict[str, Any]]:
    """Factory fixture: a compiled contract output."""
    return _contract


@pytest.fixture
def make_build_info() -> Callable[..., dict[str, Any]]:
    """Factory fixture: a build info document keyed by path then contract name."""
    return _build_info


@pytest.fixture
def to_bytes() -> Callable[[dict[str, Any]], bytes]:
    """Serialize a document the way a compiler would write it."""
    return _to_bytes


@pytest.fixture
def build_info_doc() -> dict[str, Any]:
    return _build_info()


@pytest.fixture
def write_build_info(tmp_path: Path) -> Callable[..., Path]:
    """Factory fixture: write a build info into its own build-info folder."""
    counter = {"n": 0}

    def _factory(document: dict[str, Any] | None = None, name: str = "build.json") -> Path:
        counter["n"] += 1
        folder = tmp_path / f"build-info-{counter['n']}"
        folder.mkdir()
        path = folder / name
        path.write_bytes(_to_bytes(document or _build_info()))
        return path

    return _factory


# ---------------------------------------------------------------------------
# Stores
# ---------------------------------------------------------------------------


@pytest.fixture
def local_store(tmp_path: Path) -> LocalStorageProvider:
    """Provide a fresh LocalStorageProvider in a temp directory."""
    return LocalStorageProvider(tmp_path / "local")


@pytest.fixture
def remote_store() -> InMemoryStorageProvider:
    """Provide an empty in-memory remote."""
    return InMemoryStorageProvider()
