"""S3 / MinIO bucket store.

Keys mirror the local layout under an optional prefix::

    {prefix}/{project}/tags/{tag}.json
    {prefix}/{project}/ids/{id}.json

boto3 is blocking; every call is dispatched to a worker thread so that
concurrent pulls interleave on the event loop.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

import boto3
from botocore.exceptions import ClientError

from soko.core.errors import ArtifactNotFoundError
from soko.storage.base import StorageProvider

logger = logging.getLogger(__name__)

_MISSING_KEY_CODES = frozenset({"404", "NoSuchKey", "NotFound"})


def _is_missing(exc: ClientError) -> bool:
    return exc.response.get("Error", {}).get("Code") in _MISSING_KEY_CODES


class S3BucketProvider(StorageProvider):
    """Store artifacts in an S3-compatible bucket.

    Usage::

        provider = S3BucketProvider(
            bucket_name="my-artifacts",
            region_name="eu-west-1",
            prefix="soko",
            aws_access_key_id="...",
            aws_secret_access_key="...",
        )

    Parameters
    ----------
    client:
        Pre-built boto3 S3 client.  Built lazily from the other arguments
        when omitted.
    """

    def __init__(
        self,
        bucket_name: str,
        *,
        region_name: str | None = None,
        prefix: str = "",
        aws_access_key_id: str | None = None,
        aws_secret_access_key: str | None = None,
        endpoint_url: str | None = None,
        client: Any = None,
    ) -> None:
        self.bucket_name = bucket_name
        self.prefix = prefix.strip("/")
        self._region_name = region_name
        self._aws_access_key_id = aws_access_key_id
        self._aws_secret_access_key = aws_secret_access_key
        self._endpoint_url = endpoint_url
        self._client = client

    def _get_client(self) -> Any:
        if self._client is None:
            kwargs: dict[str, Any] = {}
            if self._region_name:
                kwargs["region_name"] = self._region_name
            if self._endpoint_url:
                kwargs["endpoint_url"] = self._endpoint_url
            if self._aws_access_key_id:
                kwargs["aws_access_key_id"] = self._aws_access_key_id
            if self._aws_secret_access_key:
                kwargs["aws_secret_access_key"] = self._aws_secret_access_key
            self._client = boto3.client("s3", **kwargs)
        return self._client

    # ------------------------------------------------------------------
    # Keys
    # ------------------------------------------------------------------

    def _folder(self, project: str, kind: str) -> str:
        parts = [self.prefix, project, kind] if self.prefix else [project, kind]
        return "/".join(parts) + "/"

    def _key(self, project: str, kind: str, name: str) -> str:
        return f"{self._folder(project, kind)}{name}.json"

    # ------------------------------------------------------------------
    # Blocking calls
    # ------------------------------------------------------------------

    def _list_names(self, project: str, kind: str) -> set[str]:
        folder = self._folder(project, kind)
        paginator = self._get_client().get_paginator("list_objects_v2")
        names: set[str] = set()
        for page in paginator.paginate(Bucket=self.bucket_name, Prefix=folder):
            for obj in page.get("Contents", []):
                relative = obj["Key"][len(folder):]
                if "/" in relative or not relative.endswith(".json"):
                    continue
                names.add(relative[: -len(".json")])
        return names

    def _exists(self, key: str) -> bool:
        try:
            self._get_client().head_object(Bucket=self.bucket_name, Key=key)
        except ClientError as exc:
            if _is_missing(exc):
                return False
            raise
        return True

    def _get(self, key: str, what: str) -> bytes:
        try:
            response = self._get_client().get_object(Bucket=self.bucket_name, Key=key)
        except ClientError as exc:
            if _is_missing(exc):
                raise ArtifactNotFoundError(f"{what} not found in the storage") from exc
            raise
        return response["Body"].read()

    def _upload(
        self, project: str, artifact_id: str, tag: str | None, content: bytes
    ) -> None:
        client = self._get_client()
        id_key = self._key(project, "ids", artifact_id)
        client.put_object(
            Bucket=self.bucket_name,
            Key=id_key,
            Body=content,
            ContentType="application/json",
        )
        if tag is not None:
            client.copy_object(
                Bucket=self.bucket_name,
                Key=self._key(project, "tags", tag),
                CopySource={"Bucket": self.bucket_name, "Key": id_key},
            )

    # ------------------------------------------------------------------
    # StorageProvider
    # ------------------------------------------------------------------

    async def list_tags(self, project: str) -> set[str]:
        return await asyncio.to_thread(self._list_names, project, "tags")

    async def list_ids(self, project: str) -> set[str]:
        return await asyncio.to_thread(self._list_names, project, "ids")

    async def has_by_tag(self, project: str, tag: str) -> bool:
        return await asyncio.to_thread(self._exists, self._key(project, "tags", tag))

    async def has_by_id(self, project: str, artifact_id: str) -> bool:
        return await asyncio.to_thread(
            self._exists, self._key(project, "ids", artifact_id)
        )

    async def upload(
        self, project: str, artifact_id: str, tag: str | None, content: bytes
    ) -> None:
        await asyncio.to_thread(self._upload, project, artifact_id, tag, content)
        logger.info(
            "Uploaded s3://%s/%s", self.bucket_name, self._key(project, "ids", artifact_id)
        )

    async def download_by_tag(self, project: str, tag: str) -> bytes:
        return await asyncio.to_thread(
            self._get, self._key(project, "tags", tag), f'Tag "{project}:{tag}"'
        )

    async def download_by_id(self, project: str, artifact_id: str) -> bytes:
        return await asyncio.to_thread(
            self._get,
            self._key(project, "ids", artifact_id),
            f'ID "{project}:{artifact_id}"',
        )

    async def ensure_project_setup(self, project: str) -> None:
        # Object stores have no directories; prefixes exist implicitly.
        logger.debug("No setup needed for s3://%s/%s", self.bucket_name, project)
