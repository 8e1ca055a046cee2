"""Content addressing for artifacts and compiled contracts.

Artifact ids are the first 12 characters of the lowercase hex SHA-256 of
the artifact's raw bytes.  Hex is used so ids are valid file names and
object keys everywhere.
"""

from __future__ import annotations

import hashlib
import json
from typing import Any

from soko.models.artifacts import ContractOutput

ARTIFACT_ID_LENGTH = 12


def canonical_json_bytes(obj: Any) -> bytes:
    """Produce canonical JSON bytes — deterministic, sorted, compact."""
    return json.dumps(
        obj, sort_keys=True, separators=(",", ":"), ensure_ascii=True
    ).encode("utf-8")


def sha256_hex(data: bytes) -> str:
    """Return the SHA-256 hex digest of raw bytes."""
    return hashlib.sha256(data).hexdigest()


def derive_artifact_id(content: bytes) -> str:
    """Derive the content identifier of a serialized artifact."""
    return sha256_hex(content)[:ARTIFACT_ID_LENGTH]


def _abi_sort_key(member: dict[str, Any]) -> tuple[str, bytes]:
    # Unnamed members (constructor, fallback, receive) sort first.
    return (member.get("name") or "", canonical_json_bytes(member))


def hash_contract(contract: ContractOutput) -> str:
    """Digest the semantically relevant part of a compiled contract.

    Fed in order: each ABI member (sorted by name, canonical JSON), the
    creation bytecode object, then the metadata string.  Debug data,
    deployed bytecode and documentation do not contribute.
    """
    digest = hashlib.sha256()
    for member in sorted(contract.abi, key=_abi_sort_key):
        digest.update(canonical_json_bytes(member))
    digest.update(contract.evm.bytecode.object.encode("utf-8"))
    digest.update(contract.metadata.encode("utf-8"))
    return digest.hexdigest()
