"""ABI encoding of constructor arguments."""

import json
import logging
from typing import Any, Dict, List

from eth_abi import encode
from eth_abi.exceptions import EncodingError, ValueOutOfBounds
from eth_abi.grammar import TupleType, parse
from eth_utils import is_address, to_checksum_address

from ..errors import ABIArgumentLengthError, ABIArgumentOverflowError, ABIArgumentTypeError

logger = logging.getLogger(__name__)


def abi_type_string(param: Dict[str, Any]) -> str:
    """Canonical type string for an ABI parameter, expanding tuples."""
    param_type = param['type']
    if param_type.startswith('tuple'):
        inner = ",".join(abi_type_string(component) for component in param.get('components', []))
        return f"({inner}){param_type[len('tuple'):]}"
    return param_type


def _parse_int(value: str) -> int:
    value = value.strip()
    if value.lower().startswith(('0x', '-0x')):
        return int(value, 16)
    return int(value)


def coerce_argument(abi_type, value: Any) -> Any:
    """
    Convert command-line style values (strings) to what eth_abi expects.

    Arrays and tuples may be given as JSON strings, integers as decimal or
    0x-prefixed strings, bytes as hex strings.
    """
    if abi_type.arrlist:
        if isinstance(value, str):
            value = json.loads(value)
        return [coerce_argument(abi_type.item_type, item) for item in value]

    if isinstance(abi_type, TupleType):
        if isinstance(value, str):
            value = json.loads(value)
        if isinstance(value, dict):
            value = list(value.values())
        return tuple(coerce_argument(component, item) for component, item in zip(abi_type.components, value))

    base = abi_type.base
    if base in ('uint', 'int') and isinstance(value, str):
        return _parse_int(value)
    if base == 'bool' and isinstance(value, str):
        lowered = value.strip().lower()
        if lowered not in ('true', 'false', '1', '0'):
            raise ValueError(f"{value!r} is not a boolean")
        return lowered in ('true', '1')
    if base == 'bytes' and isinstance(value, str):
        return bytes.fromhex(value[2:] if value.startswith('0x') else value)
    if base == 'address' and isinstance(value, str) and is_address(value):
        return to_checksum_address(value)
    return value


def encode_arguments(
    abi: List[Dict[str, Any]],
    source_name: str,
    contract_name: str,
    constructor_args: List[Any],
) -> str:
    """
    ABI-encode constructor arguments the way they were appended to the creation code.

    Args:
        abi: Contract ABI
        source_name: Source file of the contract, for error messages
        contract_name: Contract name, for error messages
        constructor_args: Positional constructor arguments

    Returns:
        Encoded arguments as a hex string without 0x prefix
    """
    constructor = next((item for item in abi if item.get('type') == 'constructor'), None)
    inputs = constructor.get('inputs', []) if constructor else []

    if len(inputs) != len(constructor_args):
        raise ABIArgumentLengthError(source_name, contract_name, len(inputs), len(constructor_args))

    types = []
    values = []
    for index, (param, value) in enumerate(zip(inputs, constructor_args)):
        type_string = abi_type_string(param)
        argument = param.get('name') or f"#{index}"
        try:
            coerced = coerce_argument(parse(type_string), value)
            encode([type_string], [coerced])
        except ValueOutOfBounds as e:
            raise ABIArgumentOverflowError(argument, value, type_string) from e
        except (EncodingError, ValueError, TypeError) as e:
            raise ABIArgumentTypeError(argument, value, str(e)) from e
        types.append(type_string)
        values.append(coerced)

    encoded = encode(types, values).hex()
    logger.debug(f"Encoded {len(values)} constructor arguments for {source_name}:{contract_name}")
    return encoded
