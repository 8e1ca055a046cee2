"""Loading and validating build-info documents."""

from __future__ import annotations

import json
import logging
from pathlib import Path

from pydantic import ValidationError

from soko.core.errors import ArtifactValidationError
from soko.core.hasher import hash_contract
from soko.models.artifacts import BuildInfo, ContractKey

logger = logging.getLogger(__name__)

DEFAULT_BUILD_INFO_DIR = Path("artifacts/build-info")


def _format_validation_errors(exc: ValidationError) -> str:
    return "\n".join(
        f"  - {'.'.join(str(part) for part in error['loc'])}: "
        f"{error['msg']} ({error['type']})"
        for error in exc.errors()
    )


def parse_build_info(content: bytes | str, *, source: str = "<memory>") -> BuildInfo:
    """Parse and validate a serialized build-info document.

    Raises
    ------
    ArtifactValidationError
        If the content is not JSON or does not match the supported schema.
    """
    try:
        raw = json.loads(content)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise ArtifactValidationError(
            f"Build info {source} is not valid JSON: {exc}"
        ) from exc
    try:
        return BuildInfo.model_validate(raw)
    except ValidationError as exc:
        raise ArtifactValidationError(
            f"Build info {source} does not match the supported schema:\n"
            + _format_validation_errors(exc)
        ) from exc


def resolve_build_info_path(path: Path) -> Path:
    """Resolve ``path`` to exactly one build-info file.

    A file is used as is.  A directory must contain exactly one ``*.json``
    file; zero or several candidates is a validation error.
    """
    if path.is_file():
        return path
    if not path.is_dir():
        raise ArtifactValidationError(f"No build info found at {path}")
    candidates = sorted(p for p in path.glob("*.json") if p.is_file())
    if not candidates:
        raise ArtifactValidationError(f"No build info file found in {path}")
    if len(candidates) > 1:
        names = ", ".join(p.name for p in candidates)
        raise ArtifactValidationError(
            f"Expected a unique build info file in {path}, found {len(candidates)}: "
            f"{names}. Please clean the folder and compile again."
        )
    return candidates[0]


def load_build_info(path: Path) -> tuple[bytes, BuildInfo]:
    """Read a build-info document from disk.

    Returns the raw bytes (the content that gets addressed and uploaded)
    together with the validated document.
    """
    file_path = resolve_build_info_path(Path(path))
    content = file_path.read_bytes()
    build_info = parse_build_info(content, source=str(file_path))
    logger.debug("Loaded build info %s (%d bytes)", file_path, len(content))
    return content, build_info


def contract_digests(build_info: BuildInfo) -> dict[ContractKey, str]:
    """Digest every compiled contract of a build-info document."""
    return {
        key: hash_contract(contract)
        for key, contract in build_info.contract_outputs().items()
    }
