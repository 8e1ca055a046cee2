"""Tests for the local artifact listing."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from soko.core.hasher import derive_artifact_id
from soko.core.listing import list_local_artifacts, time_ago


class TestListLocalArtifacts:
    @pytest.mark.asyncio
    async def test_tags_then_untagged_ids(self, local_store):
        tagged = b"tagged"
        untagged = b"untagged"
        await local_store.upload("core", derive_artifact_id(tagged), "v1", tagged)
        await local_store.upload("core", derive_artifact_id(untagged), None, untagged)

        listings = await list_local_artifacts(local_store)
        assert [(item.tag, item.artifact_id) for item in listings] == [
            ("v1", derive_artifact_id(tagged)),
            (None, derive_artifact_id(untagged)),
        ]

    @pytest.mark.asyncio
    async def test_tag_without_id_file_reports_real_id(self, local_store):
        await local_store.write_by_tag("core", "latest", b"content")
        listings = await list_local_artifacts(local_store)
        assert len(listings) == 1
        assert listings[0].artifact_id == derive_artifact_id(b"content")

    @pytest.mark.asyncio
    async def test_projects_grouped(self, local_store):
        await local_store.upload("periphery", derive_artifact_id(b"b"), None, b"b")
        await local_store.upload("core", derive_artifact_id(b"a"), None, b"a")
        await local_store.write_summary(b"{}")
        listings = await list_local_artifacts(local_store)
        assert [item.project for item in listings] == ["core", "periphery"]

    @pytest.mark.asyncio
    async def test_empty_store(self, local_store):
        assert await list_local_artifacts(local_store) == []


class TestTimeAgo:
    NOW = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)

    @pytest.mark.parametrize(
        "delta, expected",
        [
            (timedelta(seconds=30), "Less than a minute ago"),
            (timedelta(minutes=5), "5m ago"),
            (timedelta(hours=3, minutes=59), "3h ago"),
            (timedelta(days=2, hours=5), "2d ago"),
        ],
    )
    def test_rendering(self, delta, expected):
        assert time_ago(self.NOW - delta, now=self.NOW) == expected
