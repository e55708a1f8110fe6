"""Bytecode analysis, artifact matching and compiler input helpers."""

from .artifacts import (
    Artifacts,
    ContractInformation,
    extract_inferred_contract_information,
    extract_matching_contract_information,
    is_fully_qualified_name,
    parse_fully_qualified_name,
)
from .bytecode import Bytecode, normalize_bytecode
from .dependencies import DependencyGraph, get_minimal_input
from .libraries import (
    ExtendedContractInformation,
    LibraryInformation,
    extend_contract_information,
    get_library_information,
)
from .models import BuildInfo, CompilerOutputBytecode, ContractOutput

__all__ = [
    "Artifacts",
    "BuildInfo",
    "Bytecode",
    "CompilerOutputBytecode",
    "ContractInformation",
    "ContractOutput",
    "DependencyGraph",
    "ExtendedContractInformation",
    "LibraryInformation",
    "extend_contract_information",
    "extract_inferred_contract_information",
    "extract_matching_contract_information",
    "get_library_information",
    "get_minimal_input",
    "is_fully_qualified_name",
    "normalize_bytecode",
    "parse_fully_qualified_name",
]
