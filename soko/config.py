"""Runtime configuration — env-driven settings for Soko.

Reads from a .env file and SOKO_* environment variables.  A single
``SokoSettings`` instance is built by the CLI for each invocation and
handed to the components that need it; nothing reads configuration from
module state.
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class SokoSettings(BaseSettings):
    """Soko configuration with environment variable overrides.

    Examples
    --------
    Remote bucket::

        export SOKO_BUCKET_NAME=my-artifacts
        export SOKO_BUCKET_REGION=eu-west-1
        export SOKO_ACCESS_KEY_ID=...
        export SOKO_SECRET_ACCESS_KEY=...

    Filesystem remote (shared drive, tests)::

        SOKO_STORAGE_TYPE=local
        SOKO_REMOTE_ROOT=/mnt/shared/soko
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="SOKO_",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Runtime
    debug: bool = False
    log_level: str = "INFO"

    # Local store
    local_root: Path = Path(".soko")

    # Remote store
    storage_type: Literal["s3", "local"] = "s3"
    bucket_name: str = ""
    bucket_region: str = ""
    access_key_id: str = ""
    secret_access_key: str = ""
    endpoint_url: str | None = None
    remote_prefix: str = ""
    remote_root: Path | None = None

    # Engine
    pull_concurrency: int = Field(default=8, ge=1)
    filter_similar_contracts: bool = True

    @property
    def effective_log_level(self) -> str:
        """Log level after applying the debug override."""
        return "DEBUG" if self.debug else self.log_level.upper()

    def missing_remote_settings(self) -> list[str]:
        """Names of the settings required by the selected remote but unset."""
        if self.storage_type == "local":
            return [] if self.remote_root is not None else ["remote_root"]
        required = {
            "bucket_name": self.bucket_name,
            "bucket_region": self.bucket_region,
            "access_key_id": self.access_key_id,
            "secret_access_key": self.secret_access_key,
        }
        return [name for name, value in required.items() if not value]
