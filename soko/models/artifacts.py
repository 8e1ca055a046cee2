"""Build-info document schema (Hardhat ``hh-sol-build-info-1``).

Only ``abi``, ``evm.bytecode.object`` and ``metadata`` of each compiled
contract are read by the engine.  The rest of each contract output passes
through untouched, but the top-level shape and its ``_format`` marker are
strict: an unrecognized producer format is rejected up front.
"""

from __future__ import annotations

from typing import Any, Literal, NamedTuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

SUPPORTED_BUILD_INFO_FORMAT = "hh-sol-build-info-1"


class ContractKey(NamedTuple):
    """Identity of a compiled contract inside one artifact."""

    path: str
    name: str

    def __str__(self) -> str:
        return f"{self.path}:{self.name}"

    @classmethod
    def parse(cls, text: str) -> ContractKey:
        """Parse the ``"<path>:<name>"`` rendering used in summary documents.

        Contract names are Solidity identifiers and never contain ``:``, so
        the split happens on the last separator.
        """
        path, sep, name = text.rpartition(":")
        if not sep or not path or not name:
            raise ValueError(f"Invalid contract key: {text!r}")
        return cls(path, name)


class Bytecode(BaseModel):
    model_config = ConfigDict(frozen=True, extra="allow")

    object: str


class EvmOutput(BaseModel):
    model_config = ConfigDict(frozen=True, extra="allow", populate_by_name=True)

    bytecode: Bytecode
    deployed_bytecode: dict[str, Any] | None = Field(
        default=None, alias="deployedBytecode"
    )


class ContractOutput(BaseModel):
    """Compiler output for a single contract."""

    model_config = ConfigDict(frozen=True, extra="allow")

    abi: list[dict[str, Any]]
    evm: EvmOutput
    metadata: str

    @field_validator("abi")
    @classmethod
    def _members_have_type(cls, value: list[dict[str, Any]]) -> list[dict[str, Any]]:
        for index, member in enumerate(value):
            if not isinstance(member.get("type"), str):
                raise ValueError(f"ABI member #{index} has no 'type'")
        return value


class CompilerInput(BaseModel):
    model_config = ConfigDict(frozen=True, extra="allow")

    language: str
    sources: dict[str, Any]
    settings: dict[str, Any] = {}


class CompilerOutput(BaseModel):
    model_config = ConfigDict(frozen=True, extra="allow")

    contracts: dict[str, dict[str, ContractOutput]] = {}
    sources: dict[str, Any] = {}
    errors: list[dict[str, Any]] = []


class BuildInfo(BaseModel):
    """A compilation artifact as produced by Hardhat.

    Unknown top-level fields are rejected; nested compiler sections accept
    extra keys since the compiler adds output selections over time.
    """

    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)

    format_version: Literal["hh-sol-build-info-1"] = Field(alias="_format")
    id: str | None = None
    solc_version: str | None = Field(default=None, alias="solcVersion")
    solc_long_version: str | None = Field(default=None, alias="solcLongVersion")
    input: CompilerInput
    output: CompilerOutput

    def contract_outputs(self) -> dict[ContractKey, ContractOutput]:
        """Flatten ``output.contracts`` into a map keyed by ``ContractKey``."""
        return {
            ContractKey(path, name): contract
            for path, contracts in self.output.contracts.items()
            for name, contract in contracts.items()
        }
