"""Library link resolution for contracts using external libraries."""

import logging
from dataclasses import dataclass, field, fields
from typing import Dict, List, Tuple

from eth_utils import is_address, to_checksum_address

from ..errors import (
    DuplicatedLibraryError,
    InvalidLibraryAddressError,
    LibraryAddressesMismatchError,
    LibraryMultipleMatchesError,
    LibraryNotFoundError,
    MissingLibrariesError,
)
from .artifacts import ContractInformation, get_fully_qualified_name
from .models import LinkReferences

logger = logging.getLogger(__name__)

# library identifier (bare or fully qualified) -> address
LibraryToAddress = Dict[str, str]
# sourceName -> libraryName -> address, the shape of solc's settings.libraries
SourceToLibraryToAddress = Dict[str, Dict[str, str]]


@dataclass(frozen=True)
class LibraryInformation:
    libraries: SourceToLibraryToAddress
    undetectable_libraries: List[str]


@dataclass(frozen=True)
class ExtendedContractInformation(ContractInformation):
    libraries: SourceToLibraryToAddress = field(default_factory=dict)
    undetectable_libraries: Tuple[str, ...] = ()


def extend_contract_information(
    contract_information: ContractInformation,
    library_information: LibraryInformation,
) -> ExtendedContractInformation:
    base = {f.name: getattr(contract_information, f.name) for f in fields(ContractInformation)}
    return ExtendedContractInformation(
        **base,
        libraries=library_information.libraries,
        undetectable_libraries=tuple(library_information.undetectable_libraries),
    )


def get_library_fq_names(link_references: LinkReferences) -> List[str]:
    return [
        get_fully_qualified_name(source_name, library_name)
        for source_name, libraries in link_references.items()
        for library_name in libraries
    ]


def get_detected_library_addresses(
    link_references: LinkReferences,
    deployed_bytecode: str,
) -> SourceToLibraryToAddress:
    """Read the linked addresses back out of the deployed code."""
    detected: SourceToLibraryToAddress = {}
    for source_name, libraries in link_references.items():
        for library_name, references in libraries.items():
            if not references:
                continue
            reference = references[0]
            begin = reference.start * 2
            address = "0x" + deployed_bytecode[begin: begin + reference.length * 2]
            detected.setdefault(source_name, {})[library_name] = to_checksum_address(address)
    return detected


def lookup_library(
    all_libraries: List[str],
    detectable_libraries: List[str],
    undetectable_libraries: List[str],
    library_name: str,
    contract_name: str,
) -> Tuple[str, str]:
    """
    Resolve a user-given library identifier to the (sourceName, libraryName) it refers to.

    Bare names are accepted only when a single declared library carries them.
    """
    matching_libraries = [
        library for library in all_libraries
        if library == library_name or library.rpartition(":")[2] == library_name
    ]

    if len(matching_libraries) == 0:
        raise LibraryNotFoundError(
            contract_name, library_name, all_libraries, detectable_libraries, undetectable_libraries
        )

    if len(matching_libraries) > 1:
        raise LibraryMultipleMatchesError(contract_name, library_name, matching_libraries)

    source_name, _, resolved_name = matching_libraries[0].rpartition(":")
    return source_name, resolved_name


def normalize_libraries(
    all_libraries: List[str],
    detectable_libraries: List[str],
    undetectable_libraries: List[str],
    libraries: LibraryToAddress,
    contract_name: str,
) -> SourceToLibraryToAddress:
    """Map user-given library entries onto the contract's declared library slots."""
    library_fqns = set()
    normalized_libraries: SourceToLibraryToAddress = {}

    for linked_library_name, linked_library_address in libraries.items():
        if not isinstance(linked_library_address, str) or not is_address(linked_library_address):
            raise InvalidLibraryAddressError(contract_name, linked_library_name, str(linked_library_address))

        source_name, library_name = lookup_library(
            all_libraries, detectable_libraries, undetectable_libraries, linked_library_name, contract_name
        )
        library_fqn = get_fully_qualified_name(source_name, library_name)

        # Only reachable when the same library is given both by bare and by fully qualified name
        if library_fqn in library_fqns:
            raise DuplicatedLibraryError(library_name, library_fqn)

        library_fqns.add(library_fqn)
        normalized_libraries.setdefault(source_name, {})[library_name] = to_checksum_address(linked_library_address)

    missing_libraries = [library for library in undetectable_libraries if library not in library_fqns]
    if missing_libraries:
        raise MissingLibrariesError(contract_name, missing_libraries)

    return normalized_libraries


def merge_libraries(
    normalized_libraries: SourceToLibraryToAddress,
    detected_libraries: SourceToLibraryToAddress,
) -> SourceToLibraryToAddress:
    conflicts = []
    for source_name, libraries in normalized_libraries.items():
        for library_name, input_address in libraries.items():
            detected_address = detected_libraries.get(source_name, {}).get(library_name)
            if detected_address is not None and detected_address.lower() != input_address.lower():
                conflicts.append({
                    'library': get_fully_qualified_name(source_name, library_name),
                    'detected_address': detected_address,
                    'input_address': input_address,
                })

    if conflicts:
        raise LibraryAddressesMismatchError(conflicts)

    merged: SourceToLibraryToAddress = {}
    for source in (normalized_libraries, detected_libraries):
        for source_name, libraries in source.items():
            merged.setdefault(source_name, {}).update(libraries)
    return merged


def get_library_information(
    contract_information: ContractInformation,
    libraries: LibraryToAddress,
) -> LibraryInformation:
    """
    Build the linking table for a matched contract.

    Libraries linked into the runtime code are read from the deployed
    bytecode. Libraries only referenced by the constructor leave no trace
    there and must be supplied by the user.

    Args:
        contract_information: The matched contract
        libraries: User-supplied library identifier -> address

    Returns:
        LibraryInformation with the merged solc libraries setting and the
        fully qualified names of the undetectable libraries
    """
    evm = contract_information.contract_output.evm
    all_libraries = get_library_fq_names(evm.bytecode.link_references)
    detectable_libraries = get_library_fq_names(evm.deployed_bytecode.link_references)
    undetectable_libraries = [library for library in all_libraries if library not in detectable_libraries]

    if undetectable_libraries:
        logger.info(f"Undetectable libraries for {contract_information.contract_name}: {undetectable_libraries}")

    normalized_libraries = normalize_libraries(
        all_libraries,
        detectable_libraries,
        undetectable_libraries,
        libraries,
        contract_information.contract_name,
    )

    detected_libraries = get_detected_library_addresses(
        evm.deployed_bytecode.link_references,
        contract_information.deployed_bytecode,
    )

    merged_libraries = merge_libraries(normalized_libraries, detected_libraries)

    return LibraryInformation(
        libraries=merged_libraries,
        undetectable_libraries=undetectable_libraries,
    )
