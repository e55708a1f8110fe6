"""Pipeline stage: find the local contract behind the deployed bytecode."""

import logging
from typing import Dict, List, Optional

from ...errors import (
    BuildInfoCompilerVersionMismatchError,
    BuildInfoNotFoundError,
    ContractNotFoundError,
    DeployedBytecodeMismatchError,
)
from ...solc import (
    Bytecode,
    ExtendedContractInformation,
    extend_contract_information,
    extract_inferred_contract_information,
    extract_matching_contract_information,
    get_library_information,
)

logger = logging.getLogger(__name__)


class VerifierContractInformationMixin:
    def get_contract_information(
        self,
        deployed_bytecode: Bytecode,
        matching_compiler_versions: List[str],
        libraries: Dict[str, str],
        contract_fqn: Optional[str] = None,
    ) -> ExtendedContractInformation:
        """
        Resolve the source contract and its library links.

        With a fully qualified name only that contract is checked, otherwise
        every artifact compiled with a matching version is compared and
        exactly one must match.

        Args:
            deployed_bytecode: Code read from chain
            matching_compiler_versions: Candidate solc versions
            libraries: User-supplied library addresses
            contract_fqn: Optional "sourceName:ContractName"

        Returns:
            ExtendedContractInformation including the solc libraries setting
        """
        if contract_fqn is not None:
            if not self.artifacts.artifact_exists(contract_fqn):
                raise ContractNotFoundError(contract_fqn)

            build_info = self.artifacts.get_build_info(contract_fqn)
            if build_info is None:
                raise BuildInfoNotFoundError(contract_fqn)

            if build_info.solc_version not in matching_compiler_versions and not deployed_bytecode.is_ovm():
                raise BuildInfoCompilerVersionMismatchError(
                    contract_fqn,
                    deployed_bytecode.get_version(),
                    deployed_bytecode.has_version_range(),
                    build_info.solc_version,
                    self.network_name,
                )

            contract_information = extract_matching_contract_information(
                contract_fqn, build_info, deployed_bytecode
            )
            if contract_information is None:
                raise DeployedBytecodeMismatchError(self.network_name, contract_fqn)
        else:
            logger.info(f"Inferring contract among artifacts compiled with {matching_compiler_versions}")
            contract_information = extract_inferred_contract_information(
                self.artifacts,
                self.network_name,
                matching_compiler_versions,
                deployed_bytecode,
            )

        logger.info(
            f"Matched {contract_information.source_name}:{contract_information.contract_name} "
            f"(solc {contract_information.solc_long_version})"
        )

        library_information = get_library_information(contract_information, libraries)
        return extend_contract_information(contract_information, library_information)
