"""Pipeline orchestrator combining the staged verification flow."""

import logging

from ...errors import CompilerVersionsMismatchError, ContractVerificationFailedError
from ...solc import Bytecode
from ..encoding import encode_arguments
from ..models import VerificationRequest, VerificationResult
from .arguments import VerifierArgumentsMixin
from .attempt import VerifierAttemptMixin
from .batch import VerifierBatchMixin
from .information import VerifierContractInformationMixin

logger = logging.getLogger(__name__)


class VerifierPipelineMixin(
    VerifierArgumentsMixin,
    VerifierContractInformationMixin,
    VerifierAttemptMixin,
    VerifierBatchMixin,
):
    """Verification pipeline split by arguments/matching/attempt/batch flows."""

    def verify(self, request: VerificationRequest) -> VerificationResult:
        """
        Verify one deployed contract.

        Steps run strictly in order: argument validation, already-verified
        check, bytecode fetch, compiler version matching, contract and
        library resolution, then a submission with the minimal input
        followed by one with the full input if the first fails.

        Args:
            request: What to verify

        Returns:
            VerificationResult with the explorer URL of the contract

        Raises:
            VerifyError: Any typed failure of the stages above
        """
        args = self.resolve_arguments(request)
        etherscan = self.get_etherscan()

        if etherscan.is_verified(args.address):
            contract_url = etherscan.get_contract_url(args.address)
            print(f"The contract {args.address} has already been verified.\n{contract_url}")
            return VerificationResult(address=args.address, contract_url=contract_url, already_verified=True)

        deployed_bytecode = Bytecode.get_deployed_contract_bytecode(args.address, self.provider, self.network_name)

        matching_compiler_versions = deployed_bytecode.get_matching_versions(self.compiler_versions)
        # OVM bytecode gives no usable version, so let contract matching decide
        if not matching_compiler_versions and not deployed_bytecode.is_ovm():
            raise CompilerVersionsMismatchError(
                self.compiler_versions,
                deployed_bytecode.get_version(),
                self.network_name,
            )

        contract_information = self.get_contract_information(
            deployed_bytecode,
            matching_compiler_versions,
            args.libraries,
            args.contract_fqn,
        )
        contract_fqn = f"{contract_information.source_name}:{contract_information.contract_name}"

        minimal_input = self.get_minimal_input(contract_information)

        encoded_constructor_arguments = encode_arguments(
            contract_information.contract_output.abi,
            contract_information.source_name,
            contract_information.contract_name,
            args.constructor_args,
        )

        minimal_input_response = self.attempt_verification(
            args.address,
            minimal_input,
            contract_information,
            etherscan,
            encoded_constructor_arguments,
        )
        if minimal_input_response.success:
            return VerificationResult(
                address=args.address,
                contract_url=etherscan.get_contract_url(args.address),
                contract_fqn=contract_fqn,
            )

        print(
            f"We tried verifying your contract {contract_information.contract_name} without including any "
            f"unrelated one, but it failed.\n"
            f"Trying again with the full solc input used to compile and deploy it.\n"
            f"This means that unrelated contracts may be displayed on the block explorer...\n"
        )

        full_input_response = self.attempt_verification(
            args.address,
            contract_information.compiler_input,
            contract_information,
            etherscan,
            encoded_constructor_arguments,
        )
        if full_input_response.success:
            return VerificationResult(
                address=args.address,
                contract_url=etherscan.get_contract_url(args.address),
                contract_fqn=contract_fqn,
                used_full_input=True,
            )

        raise ContractVerificationFailedError(
            full_input_response.message,
            list(contract_information.undetectable_libraries),
        )
