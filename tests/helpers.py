"""Fixture builders: runtime code with CBOR metadata and Hardhat artifact trees."""

import json
from pathlib import Path
from typing import Any, Dict, List, Optional

import cbor2

LIBRARY_PLACEHOLDER = "__$" + "1" * 34 + "$__"


def with_metadata(executable: str, solc_version: Optional[tuple] = (0, 8, 19), ipfs_seed: int = 0x11) -> str:
    """Append a solc-style CBOR trailer and its 2-byte length to executable code."""
    metadata: Dict[str, Any] = {"ipfs": bytes([0x12, 0x20]) + bytes([ipfs_seed]) * 32}
    if solc_version is not None:
        metadata["solc"] = bytes(solc_version)
    encoded = cbor2.dumps(metadata)
    return executable + encoded.hex() + len(encoded).to_bytes(2, "big").hex()


def contract_output(
    deployed_object: str,
    bytecode_object: str = "6080",
    abi: Optional[List[Dict[str, Any]]] = None,
    link_references: Optional[Dict] = None,
    deployed_link_references: Optional[Dict] = None,
    immutable_references: Optional[Dict] = None,
) -> Dict[str, Any]:
    """A `contracts.<source>.<name>` entry of solc standard-json output."""
    return {
        "abi": abi or [],
        "evm": {
            "bytecode": {
                "object": bytecode_object,
                "linkReferences": link_references or {},
            },
            "deployedBytecode": {
                "object": deployed_object,
                "linkReferences": deployed_link_references or {},
                "immutableReferences": immutable_references or {},
            },
        },
    }


def compiler_input(sources: Dict[str, str], remappings: Optional[List[str]] = None) -> Dict[str, Any]:
    settings: Dict[str, Any] = {"optimizer": {"enabled": True, "runs": 200}}
    if remappings:
        settings["remappings"] = remappings
    return {
        "language": "Solidity",
        "sources": {name: {"content": content} for name, content in sources.items()},
        "settings": settings,
    }


def write_build(
    artifacts_dir: Path,
    build_id: str,
    solc_version: str,
    sources: Dict[str, str],
    contracts: Dict[str, Dict[str, Dict[str, Any]]],
    output_sources: Optional[Dict[str, Any]] = None,
) -> None:
    """
    Write one Hardhat compilation: its build-info file plus an artifact and
    a debug file per contract.

    Args:
        artifacts_dir: Root of the artifacts tree
        build_id: Build-info file name without extension
        solc_version: Short solc version, e.g. "0.8.19"
        sources: sourceName -> Solidity source
        contracts: sourceName -> contractName -> contract output
        output_sources: `output.sources` of the compilation
    """
    build_info_dir = artifacts_dir / "build-info"
    build_info_dir.mkdir(parents=True, exist_ok=True)

    build_info = {
        "id": build_id,
        "solcVersion": solc_version,
        "solcLongVersion": f"{solc_version}+commit.7dd6d404",
        "input": compiler_input(sources),
        "output": {
            "contracts": contracts,
            "sources": output_sources or {},
        },
    }
    with open(build_info_dir / f"{build_id}.json", "w") as f:
        json.dump(build_info, f)

    for source_name, source_contracts in contracts.items():
        contract_dir = artifacts_dir / source_name
        contract_dir.mkdir(parents=True, exist_ok=True)
        relative_build_info = Path(*[".."] * len(Path(source_name).parts), "build-info", f"{build_id}.json")
        for contract_name, output in source_contracts.items():
            with open(contract_dir / f"{contract_name}.json", "w") as f:
                json.dump({
                    "_format": "hh-sol-artifact-1",
                    "contractName": contract_name,
                    "sourceName": source_name,
                    "abi": output["abi"],
                    "deployedBytecode": "0x" + output["evm"]["deployedBytecode"]["object"],
                }, f)
            with open(contract_dir / f"{contract_name}.dbg.json", "w") as f:
                json.dump({"_format": "hh-sol-dbg-1", "buildInfo": relative_build_info.as_posix()}, f)


class FakeProvider:
    """Stands in for NetworkProvider with fixed code per address."""

    def __init__(self, name: str = "sepolia", chain_id: int = 11155111, code: Optional[Dict[str, str]] = None):
        self.name = name
        self.chain_id = chain_id
        self.code = {address.lower(): value for address, value in (code or {}).items()}
        self.calls = []

    def get_code(self, address: str) -> str:
        self.calls.append(address)
        return self.code.get(address.lower(), "")
