"""
Solidity metadata trailer decoding.

solc appends a CBOR map to the runtime code, followed by its length as a
2-byte big-endian integer:

    <executable code><cbor metadata><2-byte length>

Compilers before 0.4.7 emit no trailer, 0.4.7 - 0.5.8 emit a trailer
without the "solc" key, later ones include it as 3 bytes (major, minor,
patch) or as a string for prerelease builds.
"""

import logging
from typing import Any, Dict

import cbor2

logger = logging.getLogger(__name__)

METADATA_LENGTH_SIZE = 2
METADATA_PRESENT_SOLC_NOT_FOUND_VERSION_RANGE = "0.4.7 - 0.5.8"
METADATA_ABSENT_VERSION_RANGE = "<0.4.7"

VERSION_RANGES = (
    METADATA_PRESENT_SOLC_NOT_FOUND_VERSION_RANGE,
    METADATA_ABSENT_VERSION_RANGE,
)


class MetadataDecodeError(ValueError):
    """The code does not end with a decodable CBOR trailer."""


def decode_solc_metadata(bytecode: str) -> Dict[str, Any]:
    """
    Decode the CBOR metadata trailer of a bytecode hex string.

    Only the trailer itself has to be valid hex, so unlinked compiler output
    with `__$...$__` placeholders is accepted.

    Args:
        bytecode: Bytecode hex string without 0x prefix

    Returns:
        Decoded metadata map

    Raises:
        MetadataDecodeError: If there is no decodable trailer
    """
    length_chars = METADATA_LENGTH_SIZE * 2
    if len(bytecode) < length_chars:
        raise MetadataDecodeError("Bytecode too short to contain metadata")

    try:
        metadata_length = int(bytecode[-length_chars:], 16)
    except ValueError as e:
        raise MetadataDecodeError(f"Invalid metadata length suffix: {e}") from e

    section_chars = (metadata_length + METADATA_LENGTH_SIZE) * 2
    if metadata_length == 0 or section_chars > len(bytecode):
        raise MetadataDecodeError(f"Metadata length {metadata_length} exceeds bytecode size")

    try:
        metadata = cbor2.loads(bytes.fromhex(bytecode[-section_chars:-length_chars]))
    except (cbor2.CBORDecodeError, ValueError) as e:
        raise MetadataDecodeError(f"Failed to decode CBOR metadata: {e}") from e

    if not isinstance(metadata, dict):
        raise MetadataDecodeError(f"Metadata is a {type(metadata).__name__}, expected a map")

    return metadata


def metadata_section_length(bytecode: str) -> int:
    """Length in bytes of the metadata trailer (CBOR plus length suffix), 0 if there is none."""
    try:
        decode_solc_metadata(bytecode)
    except MetadataDecodeError:
        return 0
    return int(bytecode[-METADATA_LENGTH_SIZE * 2:], 16) + METADATA_LENGTH_SIZE


def infer_compiler_version(bytecode: str) -> str:
    """
    Infer the solc version that produced a bytecode from its metadata.

    Returns an exact version ("0.8.19") when the trailer carries one,
    otherwise one of the VERSION_RANGES.
    """
    try:
        metadata = decode_solc_metadata(bytecode)
    except MetadataDecodeError as e:
        logger.debug(f"No metadata trailer found: {e}")
        return METADATA_ABSENT_VERSION_RANGE

    solc = metadata.get("solc")
    if isinstance(solc, bytes) and len(solc) == 3:
        return f"{solc[0]}.{solc[1]}.{solc[2]}"
    if isinstance(solc, str) and solc:
        return solc

    return METADATA_PRESENT_SOLC_NOT_FOUND_VERSION_RANGE
