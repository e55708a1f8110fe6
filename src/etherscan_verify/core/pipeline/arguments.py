"""Pipeline stage: validate user input and load argument files."""

import importlib.util
import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from eth_utils import is_address

from ...errors import (
    ExclusiveConstructorArgumentsError,
    ImportingModuleError,
    InvalidAddressError,
    InvalidConstructorArgumentsError,
    InvalidConstructorArgumentsModuleError,
    InvalidContractNameError,
    InvalidLibrariesError,
    InvalidLibrariesModuleError,
    MissingAddressError,
)
from ...solc import is_fully_qualified_name
from ..models import LibrariesFile, LibrariesInput, LibraryAddresses, VerificationArgs, VerificationRequest

logger = logging.getLogger(__name__)

CONSTRUCTOR_ARGS_EXPORT = "constructor_args"
LIBRARIES_EXPORT = "libraries"


def load_exported_value(path: Path, export_name: str, description: str) -> Any:
    """
    Read a value from a .json file or a variable of a .py module.

    Args:
        path: File to load
        export_name: Module-level variable holding the value in .py files
        description: What is being loaded, for error messages
    """
    path = Path(path)
    try:
        if path.suffix == ".json":
            with open(path, 'r') as f:
                return json.load(f)

        spec = importlib.util.spec_from_file_location(f"_verify_{export_name}", path)
        if spec is None or spec.loader is None:
            raise ImportError(f"cannot load {path} as a Python module")
        module = importlib.util.module_from_spec(spec)
        spec.loader.exec_module(module)
    except Exception as e:
        raise ImportingModuleError(description, e) from e

    return getattr(module, export_name, None)


def resolve_constructor_arguments(constructor_args: List[Any], constructor_args_file: Optional[Path]) -> List[Any]:
    if constructor_args_file is None:
        if not isinstance(constructor_args, (list, tuple)):
            raise InvalidConstructorArgumentsError()
        return list(constructor_args)

    if constructor_args:
        raise ExclusiveConstructorArgumentsError()

    loaded = load_exported_value(constructor_args_file, CONSTRUCTOR_ARGS_EXPORT, "constructor arguments list")
    if not isinstance(loaded, list):
        raise InvalidConstructorArgumentsModuleError(str(constructor_args_file))
    return loaded


def resolve_libraries(libraries: Optional[LibrariesInput]) -> Dict[str, str]:
    if libraries is None:
        return {}

    if isinstance(libraries, LibraryAddresses):
        if not isinstance(libraries.addresses, dict):
            raise InvalidLibrariesError()
        return dict(libraries.addresses)

    if isinstance(libraries, LibrariesFile):
        loaded = load_exported_value(libraries.path, LIBRARIES_EXPORT, "libraries dictionary")
        if not isinstance(loaded, dict):
            raise InvalidLibrariesModuleError(str(libraries.path))
        return loaded

    raise InvalidLibrariesError()


class VerifierArgumentsMixin:
    def resolve_arguments(self, request: VerificationRequest) -> VerificationArgs:
        """
        Validate a request before anything touches the network.

        Args:
            request: Raw user input

        Returns:
            VerificationArgs with constructor arguments and libraries loaded
        """
        if request.address is None:
            raise MissingAddressError()

        if not is_address(request.address):
            raise InvalidAddressError(request.address)

        if request.contract is not None and not is_fully_qualified_name(request.contract):
            raise InvalidContractNameError(request.contract)

        constructor_args = resolve_constructor_arguments(request.constructor_args, request.constructor_args_file)
        libraries = resolve_libraries(request.libraries)

        logger.info(
            f"Resolved arguments for {request.address}: {len(constructor_args)} constructor args, "
            f"{len(libraries)} libraries, contract={request.contract}"
        )

        return VerificationArgs(
            address=request.address,
            constructor_args=constructor_args,
            libraries=libraries,
            contract_fqn=request.contract,
        )
