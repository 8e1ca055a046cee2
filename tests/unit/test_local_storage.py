"""Tests for LocalStorageProvider — layout, round trips, tag semantics."""

from __future__ import annotations

import pytest

from soko.core.errors import ArtifactNotFoundError
from soko.core.hasher import derive_artifact_id
from soko.storage.local import LocalStorageProvider

CONTENT = b'{"_format":"hh-sol-build-info-1"}'


class TestLocalStorageProvider:
    @pytest.mark.asyncio
    async def test_upload_round_trip(self, local_store: LocalStorageProvider):
        artifact_id = derive_artifact_id(CONTENT)
        await local_store.upload("core", artifact_id, "v1", CONTENT)
        assert await local_store.download_by_id("core", artifact_id) == CONTENT
        assert await local_store.download_by_tag("core", "v1") == CONTENT

    @pytest.mark.asyncio
    async def test_layout(self, local_store: LocalStorageProvider):
        await local_store.upload("core", "abc123def456", "v1.0.0", CONTENT)
        assert (local_store.root / "core" / "ids" / "abc123def456.json").is_file()
        assert (local_store.root / "core" / "tags" / "v1.0.0.json").is_file()

    @pytest.mark.asyncio
    async def test_listing(self, local_store: LocalStorageProvider):
        await local_store.upload("core", "id1", "v1.0.0", CONTENT)
        await local_store.upload("core", "id2", None, b"other")
        assert await local_store.list_tags("core") == {"v1.0.0"}
        assert await local_store.list_ids("core") == {"id1", "id2"}

    @pytest.mark.asyncio
    async def test_listing_unknown_project_is_empty(self, local_store: LocalStorageProvider):
        assert await local_store.list_tags("nope") == set()
        assert await local_store.list_ids("nope") == set()

    @pytest.mark.asyncio
    async def test_has(self, local_store: LocalStorageProvider):
        await local_store.upload("core", "id1", "v1", CONTENT)
        assert await local_store.has_by_tag("core", "v1") is True
        assert await local_store.has_by_id("core", "id1") is True
        assert await local_store.has_by_tag("core", "v2") is False
        assert await local_store.has_by_id("core", "id2") is False

    @pytest.mark.asyncio
    async def test_download_missing_raises_not_found(self, local_store: LocalStorageProvider):
        with pytest.raises(ArtifactNotFoundError):
            await local_store.download_by_tag("core", "v1")
        with pytest.raises(ArtifactNotFoundError):
            await local_store.download_by_id("core", "id1")

    @pytest.mark.asyncio
    async def test_download_falls_back_to_id(self, local_store: LocalStorageProvider):
        await local_store.upload("core", "id1", None, CONTENT)
        assert await local_store.download("core", "id1") == CONTENT

    @pytest.mark.asyncio
    async def test_moving_tag_keeps_previous_id_content(self, local_store: LocalStorageProvider):
        await local_store.upload("core", "id1", "v1", b"first")
        await local_store.upload("core", "id2", "v1", b"second")
        assert await local_store.download_by_tag("core", "v1") == b"second"
        assert await local_store.download_by_id("core", "id1") == b"first"

    @pytest.mark.asyncio
    async def test_write_by_tag_does_not_touch_linked_id(self, local_store: LocalStorageProvider):
        await local_store.upload("core", "id1", "v1", b"first")
        await local_store.write_by_tag("core", "v1", b"replaced")
        assert await local_store.download_by_id("core", "id1") == b"first"
        assert await local_store.download_by_tag("core", "v1") == b"replaced"

    @pytest.mark.asyncio
    async def test_existing_id_is_never_rewritten(self, local_store: LocalStorageProvider):
        await local_store.upload("core", "id1", None, b"first")
        await local_store.upload("core", "id1", None, b"second")
        assert await local_store.download_by_id("core", "id1") == b"first"

    @pytest.mark.asyncio
    async def test_ensure_project_setup_idempotent(self, local_store: LocalStorageProvider):
        await local_store.ensure_project_setup("core")
        await local_store.ensure_project_setup("core")
        assert (local_store.root / "core" / "tags").is_dir()
        assert (local_store.root / "core" / "ids").is_dir()

    @pytest.mark.asyncio
    async def test_no_temporary_files_left(self, local_store: LocalStorageProvider):
        await local_store.upload("core", "id1", "v1", CONTENT)
        await local_store.write_by_id("core", "id2", CONTENT)
        leftovers = [p for p in local_store.root.rglob("*") if p.name.endswith(".tmp")]
        assert leftovers == []

    @pytest.mark.asyncio
    async def test_list_projects_skips_generated(self, local_store: LocalStorageProvider):
        await local_store.ensure_project_setup("core")
        await local_store.ensure_project_setup("periphery")
        await local_store.write_summary(b"{}")
        assert await local_store.list_projects() == ["core", "periphery"]

    @pytest.mark.asyncio
    async def test_list_entries(self, local_store: LocalStorageProvider):
        await local_store.upload("core", "id1", "v1", CONTENT)
        tags = await local_store.list_tag_entries("core")
        ids = await local_store.list_id_entries("core")
        assert [entry.name for entry in tags] == ["v1"]
        assert [entry.name for entry in ids] == ["id1"]
        assert tags[0].last_modified_at.tzinfo is not None

    @pytest.mark.asyncio
    async def test_summary_round_trip(self, local_store: LocalStorageProvider):
        with pytest.raises(ArtifactNotFoundError):
            await local_store.read_summary()
        path = await local_store.write_summary(b'{"contracts":{},"releases":{}}')
        assert path == local_store.root / "generated" / "summary.json"
        assert await local_store.read_summary() == b'{"contracts":{},"releases":{}}'
