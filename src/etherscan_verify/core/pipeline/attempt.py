"""Pipeline stages: minimal input derivation and a single submit-and-poll attempt."""

import copy
import json
import logging
import time
from typing import Any, Dict

from ...clients import Etherscan
from ...errors import VerificationAPIUnexpectedMessageError
from ...solc import ExtendedContractInformation, get_minimal_input
from ..models import VerificationResponse

logger = logging.getLogger(__name__)


class VerifierAttemptMixin:
    def get_minimal_input(self, contract_information: ExtendedContractInformation) -> Dict[str, Any]:
        """Compiler input restricted to the contract's source file and its imports."""
        return get_minimal_input(
            contract_information.source_name,
            contract_information.compiler_input,
            contract_information.output_sources,
        )


    def attempt_verification(
        self,
        address: str,
        compiler_input: Dict[str, Any],
        contract_information: ExtendedContractInformation,
        verification_interface: Etherscan,
        encoded_constructor_arguments: str,
    ) -> VerificationResponse:
        """
        Submit one compiler input and wait for the explorer's verdict.

        Args:
            address: Contract address
            compiler_input: Minimal or full solc standard-json input
            contract_information: Matched contract with its library links
            verification_interface: Explorer client
            encoded_constructor_arguments: ABI-encoded constructor arguments

        Returns:
            VerificationResponse with the explorer's final message

        Raises:
            VerificationAPIUnexpectedMessageError: If the final status is
                neither a success nor a failure
        """
        # The submitted input must carry the linking table
        compiler_input = copy.deepcopy(compiler_input)
        compiler_input.setdefault('settings', {})['libraries'] = contract_information.libraries

        contract_fqn = f"{contract_information.source_name}:{contract_information.contract_name}"
        response = verification_interface.verify(
            address,
            json.dumps(compiler_input),
            contract_fqn,
            f"v{contract_information.solc_long_version}",
            encoded_constructor_arguments,
        )

        if response.is_already_verified():
            verification_status = response
        else:
            print(
                f"Successfully submitted source code for contract\n"
                f"{contract_fqn} at {address}\n"
                f"for verification on the block explorer. Waiting for verification result...\n"
            )
            time.sleep(self.status_check_delay)
            verification_status = verification_interface.get_verification_status(response.message)

        if not (verification_status.is_failure() or verification_status.is_success()):
            raise VerificationAPIUnexpectedMessageError(verification_status.message)

        if verification_status.is_success():
            contract_url = verification_interface.get_contract_url(address)
            print(
                f"Successfully verified contract {contract_information.contract_name} on the block explorer.\n"
                f"{contract_url}\n"
            )
        else:
            logger.warning(f"Verification of {contract_fqn} failed: {verification_status.message}")

        return VerificationResponse(
            success=verification_status.is_success(),
            message=verification_status.message,
        )
