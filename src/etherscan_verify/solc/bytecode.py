"""Deployed bytecode wrapper: metadata stripping, normalization and comparison."""

import logging
from typing import List, Optional

from ..errors import DeployedBytecodeNotFoundError
from .metadata import (
    VERSION_RANGES,
    infer_compiler_version,
    metadata_section_length,
)
from .models import BytecodeOffset, CompilerOutputBytecode, ImmutableReferences, LinkReferences

logger = logging.getLogger(__name__)

# Concatenation of the opcodes injected by the OVM safety checker. No regular
# solc output contains this sequence.
OVM_MARKER = "336000905af158601d01573d60011458600c01573d6000803e3d621234565260ea61109c52"


def strip_hex_prefix(value: str) -> str:
    return value[2:] if value.startswith(("0x", "0X")) else value


def executable_section(bytecode: str) -> str:
    """Bytecode hex string without its metadata trailer."""
    return bytecode[: len(bytecode) - metadata_section_length(bytecode) * 2]


def normalize_bytecode(
    bytecode: str,
    link_references: Optional[LinkReferences] = None,
    immutable_references: Optional[ImmutableReferences] = None,
) -> str:
    """
    Zero out every library link and immutable slot in a bytecode hex string.

    The same offsets hold an unlinked `__$...$__` placeholder in compiler
    output and a concrete address in deployed code, so after this both
    forms compare equal.

    Args:
        bytecode: Bytecode hex string without 0x prefix
        link_references: sourceName -> libraryName -> offsets, either
            BytecodeOffset models or plain solc JSON dicts
        immutable_references: AST id -> offsets, same forms

    Returns:
        Lowercase normalized hex string of the same length
    """
    offsets = []
    for libraries in (link_references or {}).values():
        for references in libraries.values():
            offsets.extend(references)
    for references in (immutable_references or {}).values():
        offsets.extend(references)

    chars = bytearray(bytecode.encode("ascii"))
    for offset in offsets:
        if not isinstance(offset, BytecodeOffset):
            offset = BytecodeOffset.model_validate(offset)
        begin = offset.start * 2
        if begin >= len(chars):
            continue
        end = min(begin + offset.length * 2, len(chars))
        chars[begin:end] = b"0" * (end - begin)

    return chars.decode("ascii").lower()


class Bytecode:
    """Runtime bytecode read from chain. Immutable after construction."""

    def __init__(self, bytecode: str):
        self._bytecode = strip_hex_prefix(bytecode).lower()
        self._version = infer_compiler_version(self._bytecode)
        self._executable_section = executable_section(self._bytecode)
        self._is_ovm = OVM_MARKER in self._bytecode


    @classmethod
    def get_deployed_contract_bytecode(cls, address: str, provider, network: str) -> "Bytecode":
        """
        Fetch the runtime code at an address.

        Args:
            address: Contract address
            provider: Object exposing get_code(address) -> hex string
            network: Network name, used in error messages

        Raises:
            DeployedBytecodeNotFoundError: If there is no code at the address
        """
        deployed_bytecode = strip_hex_prefix(provider.get_code(address))
        if deployed_bytecode == "":
            raise DeployedBytecodeNotFoundError(address, network)
        logger.info(f"Fetched {len(deployed_bytecode) // 2} bytes of runtime code for {address} on {network}")
        return cls(deployed_bytecode)


    def get_matching_versions(self, versions: List[str]) -> List[str]:
        """
        Narrow the configured compiler versions using the metadata tag.

        An exact tag keeps only the equal versions. A range, or no tag at
        all, keeps every version and leaves the decision to bytecode
        comparison.
        """
        if self.has_version_range():
            return list(versions)
        return [version for version in versions if version == self._version]

    def get_version(self) -> str:
        return self._version

    def has_version_range(self) -> bool:
        return self._version in VERSION_RANGES

    def is_ovm(self) -> bool:
        return self._is_ovm

    def get_executable_section(self) -> str:
        return self._executable_section

    def stringify(self) -> str:
        return self._bytecode


    def compare(self, compiled: CompilerOutputBytecode) -> bool:
        """
        Check whether compiler output reproduces this deployed code.

        Metadata trailers are ignored on both sides, and library links and
        immutables are zeroed using the compiler's own offsets.
        """
        reference = strip_hex_prefix(compiled.object)
        reference_executable = executable_section(reference)

        # OVM code carries no trailer, so lengths are not comparable
        if len(self._executable_section) != len(reference_executable) and not self._is_ovm:
            return False

        normalized_deployed = normalize_bytecode(
            self._executable_section, compiled.link_references, compiled.immutable_references
        )
        normalized_reference = normalize_bytecode(
            reference_executable, compiled.link_references, compiled.immutable_references
        )
        return normalized_deployed == normalized_reference
