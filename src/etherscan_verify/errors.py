"""Typed errors raised by the verification workflow."""

from typing import Iterable, List, Optional


class VerifyError(Exception):
    """Base class for every error surfaced to the user."""

    def __init__(self, message: str, parent: Optional[BaseException] = None):
        super().__init__(message)
        self.message = message
        self.parent = parent


def _bullets(items: Iterable[str]) -> str:
    return "\n".join(f"  * {item}" for item in items)


# ============================================================================
# Input errors
# ============================================================================

class MissingAddressError(VerifyError):
    def __init__(self):
        super().__init__(
            "You didn't provide any address. Please re-run the verification "
            "with the address of the contract you want to verify."
        )


class InvalidAddressError(VerifyError):
    def __init__(self, address: str):
        super().__init__(f"{address} is an invalid address.")


class InvalidContractNameError(VerifyError):
    def __init__(self, contract_name: str):
        super().__init__(
            f"A valid fully qualified name was expected. Fully qualified names look like this: "
            f"\"contracts/AContract.sol:TheContract\"\n"
            f"Instead, this name was received: {contract_name}"
        )


class ExclusiveConstructorArgumentsError(VerifyError):
    def __init__(self):
        super().__init__(
            "The parameters constructor_args and constructor_args_file are mutually exclusive.\n"
            "Please provide only one of them."
        )


class ImportingModuleError(VerifyError):
    def __init__(self, module: str, parent: Optional[BaseException] = None):
        super().__init__(f"Importing the module for the {module} failed.\nReason: {parent}", parent)


class InvalidConstructorArgumentsModuleError(VerifyError):
    def __init__(self, path: str):
        super().__init__(
            f"The module {path} doesn't export a list. The module should look like this:\n\n"
            f"  constructor_args = [50, \"a string argument\"]\n\n"
            f"or, for a JSON file:\n\n"
            f"  [50, \"a string argument\"]"
        )


class InvalidConstructorArgumentsError(VerifyError):
    def __init__(self):
        super().__init__("The constructor arguments should be a list of values.")


class InvalidLibrariesModuleError(VerifyError):
    def __init__(self, path: str):
        super().__init__(
            f"The module {path} doesn't export a dictionary. The module should look like this:\n\n"
            f"  libraries = {{\"SomeLibrary\": \"0x...\"}}"
        )


class InvalidLibrariesError(VerifyError):
    def __init__(self):
        super().__init__("The libraries should be a dictionary mapping library names to addresses.")


# ============================================================================
# Configuration and network errors
# ============================================================================

class InvalidConfigError(VerifyError):
    def __init__(self, path, reason: str):
        super().__init__(f"The config file {path} is invalid.\nReason: {reason}")


class InvalidBatchFileError(VerifyError):
    def __init__(self, path, reason: str):
        super().__init__(f"The batch file {path} is invalid.\nReason: {reason}")


class DuplicatedRequestAddressError(VerifyError):
    def __init__(self, address: str):
        super().__init__(
            f"The address {address} appears more than once in the batch. "
            f"Each contract can only be verified once per run."
        )


class MissingApiKeyError(VerifyError):
    def __init__(self, network: str):
        super().__init__(
            f"You are trying to verify a contract in '{network}', but no API token was found for this network. "
            f"Please provide one in your config file under etherscan.apiKey.{network} "
            f"or set the ETHERSCAN_API_KEY environment variable."
        )


class ChainConfigNotFoundError(VerifyError):
    def __init__(self, chain_id: int):
        super().__init__(
            f"Trying to verify a contract in a network with chain id {chain_id}, but it is not recognized "
            f"as a supported chain.\n\nYou can manually add support for it by following these instructions: "
            f"add an entry to etherscan.customChains in your config file.\n\n"
            f"To see the list of supported networks, run: verify-contract --list-networks"
        )


class LocalNetworkNotSupportedError(VerifyError):
    def __init__(self, network: str, chain_id: int):
        super().__init__(
            f"The selected network is \"{network}\" (chain id {chain_id}). Please select another network "
            f"and try again, local development networks can't be verified on a block explorer."
        )


class MissingNetworkError(VerifyError):
    def __init__(self, network: str):
        super().__init__(
            f"No RPC url configured for network \"{network}\". Add networks.{network}.url to your config file, "
            f"set {network.upper()}_RPC_URL, or pass --rpc-url."
        )


class DeployedBytecodeNotFoundError(VerifyError):
    def __init__(self, address: str, network: str):
        super().__init__(
            f"The address {address} has no bytecode. Is the contract deployed to this network?\n"
            f"The selected network is {network}."
        )


# ============================================================================
# Resolution errors
# ============================================================================

class CompilerVersionsMismatchError(VerifyError):
    def __init__(self, configured_versions: List[str], inferred_version: str, network: str):
        versions_detail = (
            f"versions are: {', '.join(configured_versions)}"
            if len(configured_versions) > 1
            else f"version is: {', '.join(configured_versions)}"
        )
        super().__init__(
            f"The contract you want to verify was compiled with solidity {inferred_version}, "
            f"but your configured compiler {versions_detail}.\n\n"
            f"Possible causes are:\n"
            f"  - You are not in the same commit that was used to deploy the contract.\n"
            f"  - Wrong compiler version selected in your config file.\n"
            f"  - The given address is wrong.\n"
            f"  - The selected network ({network}) is wrong."
        )


class ContractNotFoundError(VerifyError):
    def __init__(self, contract_fqn: str):
        super().__init__(
            f"The contract {contract_fqn} is not present in your project.\n"
            f"Make sure your build artifacts are up to date."
        )


class BuildInfoNotFoundError(VerifyError):
    def __init__(self, contract_fqn: str):
        super().__init__(
            f"The contract {contract_fqn} is present in your project, but we couldn't find its sources.\n"
            f"Please make sure that it has been compiled and that its build-info file still exists."
        )


class InvalidBuildInfoError(VerifyError):
    def __init__(self, contract_fqn: str, path, reason: str):
        super().__init__(
            f"The build information of {contract_fqn} could not be read from {path}.\n"
            f"Reason: {reason}\n"
            f"Please compile the project again to regenerate its artifacts."
        )
        self.path = path


class BuildInfoCompilerVersionMismatchError(VerifyError):
    def __init__(
        self,
        contract_fqn: str,
        compiler_version: str,
        is_version_range: bool,
        build_info_compiler_version: str,
        network: str,
    ):
        version_details = (
            f"a solidity version in the range {compiler_version}"
            if is_version_range
            else f"the solidity version {compiler_version}"
        )
        super().__init__(
            f"The contract {contract_fqn} is being compiled with {build_info_compiler_version}.\n"
            f"However, the contract found in the address provided as argument has its bytecode marked with "
            f"{version_details}.\n\n"
            f"Possible causes are:\n"
            f"  - Solidity compiler version settings were modified after the deployment was executed.\n"
            f"  - The given address is wrong.\n"
            f"  - The selected network ({network}) is wrong."
        )


class DeployedBytecodeMismatchError(VerifyError):
    def __init__(self, network: str, contract_fqn: Optional[str] = None):
        contract_details = (
            f"the contract {contract_fqn}."
            if contract_fqn is not None
            else "any of your local contracts."
        )
        super().__init__(
            f"The address provided as argument contains a contract, but its bytecode doesn't match {contract_details}\n\n"
            f"Possible causes are:\n"
            f"  - The artifact for that contract is outdated or missing. You can try compiling the project again "
            f"and rerunning the verification.\n"
            f"  - The contract's code changed after the deployment was executed. Sometimes this happens by changes "
            f"in seemingly unrelated contracts.\n"
            f"  - The solidity compiler settings were modified after the deployment was executed (like the "
            f"optimizer, target EVM, etc.)\n"
            f"  - The given address is wrong.\n"
            f"  - The selected network ({network}) is wrong."
        )


class DeployedBytecodeNotMatchingAnyContractError(DeployedBytecodeMismatchError):
    def __init__(self, network: str):
        super().__init__(network)


class AmbiguousBytecodeError(ContractNotFoundError):
    def __init__(self, matches: List[str], network: str):
        VerifyError.__init__(
            self,
            f"More than one contract was found to match the deployed bytecode.\n"
            f"Please use the contract parameter with one of the following contracts:\n"
            f"{_bullets(matches)}\n\n"
            f"For example:\n\n"
            f"  verify-contract --contract contracts/Example.sol:ExampleContract <other args>\n\n"
            f"If you are running the verification from a script, pass the fully qualified name as contract "
            f"(selected network: {network})."
        )
        self.matches = matches


class UnexpectedNumberOfFilesError(VerifyError):
    def __init__(self, source_name: str):
        super().__init__(
            f"The dependency graph was expected to have exactly one file for {source_name}. "
            f"Please report this issue with the contents of your build-info file."
        )


# ============================================================================
# Linking errors
# ============================================================================

class InvalidLibraryAddressError(VerifyError):
    def __init__(self, contract_name: str, library_name: str, library_address: str):
        super().__init__(
            f"You gave a link for the contract {contract_name} with the library {library_name}, "
            f"which is not a valid address: {library_address}."
        )


class LibraryNotFoundError(VerifyError):
    def __init__(
        self,
        contract_name: str,
        library_name: str,
        all_libraries: List[str],
        detectable_libraries: List[str],
        undetectable_libraries: List[str],
    ):
        if all_libraries:
            available = (
                f"This contract uses the following external libraries:\n"
                f"{_bullets(undetectable_libraries)}\n"
                f"{_bullets(f'{lib} (optional)' for lib in detectable_libraries)}"
            ).rstrip()
        else:
            available = "This contract doesn't use any external libraries."
        super().__init__(
            f"You gave an address for the library {library_name} in the libraries dictionary, "
            f"which is not one of the libraries of contract {contract_name}.\n{available}"
        )


class LibraryMultipleMatchesError(VerifyError):
    def __init__(self, contract_name: str, library_name: str, fq_library_names: List[str]):
        super().__init__(
            f"The library name {library_name} is ambiguous for the contract {contract_name}.\n"
            f"It may resolve to one of the following libraries:\n{_bullets(fq_library_names)}\n\n"
            f"To fix this, choose one of these fully qualified library names and replace it in your "
            f"libraries dictionary."
        )


class DuplicatedLibraryError(VerifyError):
    def __init__(self, library_name: str, library_fqn: str):
        super().__init__(
            f"The library names {library_name} and {library_fqn} refer to the same library and were given as "
            f"two separate library links.\nRemove one of them and review your libraries dictionary before "
            f"proceeding."
        )


class MissingLibrariesError(VerifyError):
    def __init__(self, contract_name: str, missing_libraries: List[str]):
        self.missing_libraries = missing_libraries
        super().__init__(
            f"The contract {contract_name} has one or more library addresses that cannot be detected from "
            f"deployed bytecode.\nThis can occur if the library is only called in the contract constructor. "
            f"The missing libraries are:\n{_bullets(missing_libraries)}"
        )


class LibraryAddressesMismatchError(VerifyError):
    def __init__(self, conflicts: List[dict]):
        details = "\n".join(
            f"  * {c['library']}\n    given address: {c['input_address']}\n    detected address: {c['detected_address']}"
            for c in conflicts
        )
        super().__init__(
            f"The following detected library addresses are different from the ones provided:\n{details}\n\n"
            f"You can either fix these addresses in your libraries dictionary or simply remove them to let the "
            f"verifier autodetect them."
        )


# ============================================================================
# Constructor argument encoding errors
# ============================================================================

class ABIArgumentLengthError(VerifyError):
    def __init__(self, source_name: str, contract_name: str, expected: int, received: int):
        super().__init__(
            f"The constructor for {source_name}:{contract_name} has {expected} parameters\n"
            f"but {received} arguments were provided instead."
        )


class ABIArgumentTypeError(VerifyError):
    def __init__(self, argument: str, value, reason: str):
        super().__init__(f"Value {value} cannot be encoded for the parameter {argument}.\nEncoder error reason: {reason}")


class ABIArgumentOverflowError(VerifyError):
    def __init__(self, argument: str, value, abi_type: str):
        super().__init__(
            f"Value {value} is not a safe integer and cannot be encoded as {abi_type} "
            f"for the parameter {argument}.\nUse a smaller value or a string with the decimal representation."
        )


# ============================================================================
# Protocol errors
# ============================================================================

class ContractVerificationRequestError(VerifyError):
    def __init__(self, url: str, parent: BaseException):
        super().__init__(f"Failed to send contract verification request.\nEndpoint URL: {url}\nReason: {parent}", parent)


class ContractVerificationInvalidStatusCodeError(VerifyError):
    def __init__(self, url: str, status_code: int, response_text: str):
        super().__init__(
            f"Failed to send contract verification request.\nEndpoint URL: {url}\n"
            f"The HTTP server response is not ok. Status code: {status_code} Response text: {response_text}"
        )


class ContractVerificationInvalidResponseError(VerifyError):
    def __init__(self, url: str, response_text: str):
        super().__init__(
            f"The block explorer sent a response that is not valid JSON.\nEndpoint URL: {url}\n"
            f"Response text: {response_text[:500]}"
        )


class ContractVerificationMissingBytecodeError(VerifyError):
    def __init__(self, url: str, address: str):
        super().__init__(
            f"Failed to send contract verification request.\nEndpoint URL: {url}\n"
            f"Reason: The block explorer responded that the address {address} does not have bytecode.\n"
            f"This can happen if the contract was recently deployed and this fact hasn't propagated to the "
            f"backend yet. Try waiting for a minute before verifying your contract."
        )


class ContractVerificationRejectedError(VerifyError):
    def __init__(self, message: str):
        super().__init__(f"The block explorer rejected the verification request.\nReason: {message}")


class ContractStatusPollingInvalidStatusCodeError(VerifyError):
    def __init__(self, status_code: int, response_text: str):
        super().__init__(
            f"The HTTP server response is not ok. Status code: {status_code} Response text: {response_text}"
        )


class ContractStatusPollingTimeoutError(VerifyError):
    def __init__(self, guid: str, attempts: int):
        super().__init__(
            f"The verification request {guid} was still pending after {attempts} status checks.\n"
            f"Check the block explorer later to see whether the verification went through."
        )


class VerificationAPIUnexpectedMessageError(VerifyError):
    def __init__(self, message: str):
        super().__init__(
            f"The API responded with an unexpected message.\n"
            f"Please report this issue and include the following information:\nMessage: {message}"
        )


class ContractStatusPollingResponseNotOkError(VerificationAPIUnexpectedMessageError):
    def __init__(self, message: str):
        VerifyError.__init__(self, f"The block explorer's API responded with an unexpected message: {message}")


class ContractVerificationFailedError(VerifyError):
    def __init__(self, message: str, undetectable_libraries: List[str]):
        self.undetectable_libraries = undetectable_libraries
        hint = ""
        if undetectable_libraries:
            hint = (
                f"\n\nThis contract makes use of libraries whose addresses cannot be detected from the deployed code.\n"
                f"Keep in mind that this verification failure may be due to passing in the wrong\n"
                f"address for one of these libraries:\n{_bullets(undetectable_libraries)}"
            )
        super().__init__(f"The contract verification failed.\nReason: {message}{hint}")
