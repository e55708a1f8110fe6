"""Build artifact lookup and bytecode-to-contract matching."""

import json
import logging
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from pydantic import ValidationError

from ..errors import (
    AmbiguousBytecodeError,
    DeployedBytecodeNotMatchingAnyContractError,
    InvalidBuildInfoError,
)
from .bytecode import Bytecode
from .models import BuildInfo, ContractOutput

logger = logging.getLogger(__name__)

BUILD_INFO_DIR_NAME = "build-info"
DEBUG_FILE_SUFFIX = ".dbg.json"


def is_fully_qualified_name(name: str) -> bool:
    return ":" in name


def parse_fully_qualified_name(fqn: str) -> Tuple[str, str]:
    """Split "contracts/A.sol:Foo" into ("contracts/A.sol", "Foo")."""
    source_name, _, contract_name = fqn.rpartition(":")
    return source_name, contract_name


def get_fully_qualified_name(source_name: str, contract_name: str) -> str:
    return f"{source_name}:{contract_name}"


@dataclass(frozen=True)
class ContractInformation:
    """The local contract whose compiled code matches the deployed code."""
    compiler_input: Dict[str, Any]
    solc_long_version: str
    source_name: str
    contract_name: str
    contract_output: ContractOutput
    deployed_bytecode: str
    output_sources: Optional[Dict[str, Any]] = None


class Artifacts:
    """
    Read-only view over a Hardhat-style artifacts directory.

    Layout:
        <artifacts>/<sourceName>/<ContractName>.json
        <artifacts>/<sourceName>/<ContractName>.dbg.json  -> {"buildInfo": "<relative path>"}
        <artifacts>/build-info/<id>.json
    """

    def __init__(self, artifacts_dir: Path):
        self.artifacts_dir = Path(artifacts_dir)
        self._build_info_cache: Dict[Path, BuildInfo] = {}
        self._cache_lock = threading.Lock()


    def _artifact_path(self, fqn: str) -> Path:
        source_name, contract_name = parse_fully_qualified_name(fqn)
        return self.artifacts_dir / source_name / f"{contract_name}.json"


    def artifact_exists(self, fqn: str) -> bool:
        return self._artifact_path(fqn).is_file()


    def get_all_fully_qualified_names(self) -> List[str]:
        """Every contract with an artifact, sorted."""
        names = set()
        build_info_dir = self.artifacts_dir / BUILD_INFO_DIR_NAME
        for path in self.artifacts_dir.rglob("*.json"):
            if path.name.endswith(DEBUG_FILE_SUFFIX) or build_info_dir in path.parents:
                continue
            try:
                with open(path, 'r') as f:
                    artifact = json.load(f)
            except (OSError, json.JSONDecodeError) as e:
                logger.warning(f"Skipping unreadable artifact {path}: {e}")
                continue
            if not isinstance(artifact, dict):
                continue
            source_name = artifact.get('sourceName')
            contract_name = artifact.get('contractName')
            if source_name and contract_name:
                names.add(get_fully_qualified_name(source_name, contract_name))

        logger.debug(f"Found {len(names)} artifacts under {self.artifacts_dir}")
        return sorted(names)


    def get_build_info(self, fqn: str) -> Optional[BuildInfo]:
        """
        Load the build info that produced an artifact.

        Args:
            fqn: Fully qualified contract name

        Returns:
            Parsed build info, or None when the debug file or the build-info
            file it points to is missing

        Raises:
            InvalidBuildInfoError: If either file exists but cannot be parsed
        """
        artifact_path = self._artifact_path(fqn)
        dbg_path = artifact_path.with_name(artifact_path.name[: -len(".json")] + DEBUG_FILE_SUFFIX)
        if not dbg_path.is_file():
            logger.debug(f"No debug file for {fqn} at {dbg_path}")
            return None

        try:
            with open(dbg_path, 'r') as f:
                dbg = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise InvalidBuildInfoError(fqn, dbg_path, str(e)) from e
        if not isinstance(dbg, dict):
            raise InvalidBuildInfoError(fqn, dbg_path, "expected a JSON object")

        build_info_ref = dbg.get('buildInfo')
        if not build_info_ref:
            return None

        build_info_path = (dbg_path.parent / build_info_ref).resolve()
        with self._cache_lock:
            cached = self._build_info_cache.get(build_info_path)
        if cached is not None:
            return cached

        if not build_info_path.is_file():
            logger.debug(f"Build info {build_info_path} referenced by {fqn} does not exist")
            return None

        try:
            with open(build_info_path, 'r') as f:
                build_info = BuildInfo.model_validate(json.load(f))
        except (OSError, json.JSONDecodeError, ValidationError) as e:
            raise InvalidBuildInfoError(fqn, build_info_path, str(e)) from e

        with self._cache_lock:
            self._build_info_cache[build_info_path] = build_info
        return build_info


def extract_matching_contract_information(
    fqn: str,
    build_info: BuildInfo,
    deployed_bytecode: Bytecode,
) -> Optional[ContractInformation]:
    """Return the contract information if its compiled runtime code matches the deployed code."""
    source_name, contract_name = parse_fully_qualified_name(fqn)
    try:
        contract_output = build_info.get_contract_output(source_name, contract_name)
    except ValidationError as e:
        raise InvalidBuildInfoError(fqn, build_info.id or "its build info", str(e)) from e
    if contract_output is None:
        return None

    if not deployed_bytecode.compare(contract_output.evm.deployed_bytecode):
        return None

    return ContractInformation(
        compiler_input=build_info.input,
        solc_long_version=build_info.solc_long_version,
        source_name=source_name,
        contract_name=contract_name,
        contract_output=contract_output,
        deployed_bytecode=deployed_bytecode.stringify(),
        output_sources=build_info.output.get('sources'),
    )


def lookup_matching_bytecode(
    artifacts: Artifacts,
    matching_compiler_versions: List[str],
    deployed_bytecode: Bytecode,
) -> List[ContractInformation]:
    """Every local contract compiled with a candidate version whose code matches."""
    contract_matches = []
    for fqn in artifacts.get_all_fully_qualified_names():
        try:
            build_info = artifacts.get_build_info(fqn)
        except InvalidBuildInfoError as e:
            logger.warning(f"Skipping {fqn}, its build info is unreadable: {e.path}")
            continue
        if build_info is None:
            continue

        if build_info.solc_version not in matching_compiler_versions and not deployed_bytecode.is_ovm():
            continue

        try:
            contract_information = extract_matching_contract_information(fqn, build_info, deployed_bytecode)
        except InvalidBuildInfoError as e:
            logger.warning(f"Skipping {fqn}, its compiler output is malformed: {e.path}")
            continue
        if contract_information is not None:
            logger.info(f"✓ {fqn} matches the deployed bytecode")
            contract_matches.append(contract_information)

    return contract_matches


def extract_inferred_contract_information(
    artifacts: Artifacts,
    network: str,
    matching_compiler_versions: List[str],
    deployed_bytecode: Bytecode,
) -> ContractInformation:
    """
    Find the unique local contract matching the deployed code.

    Raises:
        DeployedBytecodeNotMatchingAnyContractError: If nothing matches
        AmbiguousBytecodeError: If more than one contract matches
    """
    contract_matches = lookup_matching_bytecode(artifacts, matching_compiler_versions, deployed_bytecode)

    if len(contract_matches) == 0:
        raise DeployedBytecodeNotMatchingAnyContractError(network)

    if len(contract_matches) > 1:
        fqn_matches = [
            get_fully_qualified_name(match.source_name, match.contract_name)
            for match in contract_matches
        ]
        raise AmbiguousBytecodeError(fqn_matches, network)

    return contract_matches[0]
