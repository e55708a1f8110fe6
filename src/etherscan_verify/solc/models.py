"""Pydantic models for the compiler output stored in build-info files."""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class BytecodeOffset(BaseModel):
    model_config = ConfigDict(extra="ignore")
    start: int
    length: int


LinkReferences = Dict[str, Dict[str, List[BytecodeOffset]]]
ImmutableReferences = Dict[str, List[BytecodeOffset]]


class CompilerOutputBytecode(BaseModel):
    """`evm.bytecode` / `evm.deployedBytecode` entry of a contract output."""
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    object: str = ""
    link_references: LinkReferences = Field(default_factory=dict, alias="linkReferences")
    immutable_references: ImmutableReferences = Field(default_factory=dict, alias="immutableReferences")


class CompilerOutputEvm(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    bytecode: CompilerOutputBytecode = Field(default_factory=CompilerOutputBytecode)
    deployed_bytecode: CompilerOutputBytecode = Field(
        default_factory=CompilerOutputBytecode, alias="deployedBytecode"
    )


class ContractOutput(BaseModel):
    model_config = ConfigDict(extra="ignore")

    abi: List[Dict[str, Any]] = Field(default_factory=list)
    evm: CompilerOutputEvm = Field(default_factory=CompilerOutputEvm)


class BuildInfo(BaseModel):
    """
    A Hardhat build-info file: the full solc standard-json input plus its output.

    The input is kept as a plain dict since it is sent back verbatim to
    the block explorer.
    """
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    id: Optional[str] = None
    solc_version: str = Field(alias="solcVersion")
    solc_long_version: str = Field(alias="solcLongVersion")
    input: Dict[str, Any]
    output: Dict[str, Any]

    def get_contract_output(self, source_name: str, contract_name: str) -> Optional[ContractOutput]:
        raw = self.output.get("contracts", {}).get(source_name, {}).get(contract_name)
        if raw is None:
            return None
        return ContractOutput.model_validate(raw)
