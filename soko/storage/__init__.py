"""Artifact storage providers.

``LocalStorageProvider`` backs the local store; the remote store is either
an ``S3BucketProvider`` or, for shared drives and tests, another
``LocalStorageProvider`` rooted elsewhere.
"""

from __future__ import annotations

from soko.config import SokoSettings
from soko.core.errors import ArtifactValidationError
from soko.storage.base import StorageProvider
from soko.storage.local import LocalStorageProvider
from soko.storage.s3 import S3BucketProvider


def build_local_provider(settings: SokoSettings) -> LocalStorageProvider:
    return LocalStorageProvider(settings.local_root)


def build_remote_provider(settings: SokoSettings) -> StorageProvider:
    """Build the remote provider selected by ``settings.storage_type``.

    Raises
    ------
    ArtifactValidationError
        If the settings required by the selected remote are missing.
    """
    missing = settings.missing_remote_settings()
    if missing:
        names = ", ".join(f"SOKO_{name.upper()}" for name in missing)
        raise ArtifactValidationError(
            f"Remote storage ({settings.storage_type}) is not configured: set {names}."
        )
    if settings.storage_type == "local":
        if settings.remote_root is None:
            raise ArtifactValidationError(
                "Remote storage (local) is not configured: set SOKO_REMOTE_ROOT."
            )
        return LocalStorageProvider(settings.remote_root)
    return S3BucketProvider(
        bucket_name=settings.bucket_name,
        region_name=settings.bucket_region,
        prefix=settings.remote_prefix,
        aws_access_key_id=settings.access_key_id,
        aws_secret_access_key=settings.secret_access_key,
        endpoint_url=settings.endpoint_url,
    )


__all__ = [
    "LocalStorageProvider",
    "S3BucketProvider",
    "StorageProvider",
    "build_local_provider",
    "build_remote_provider",
]
