"""Match deployed bytecode to local build artifacts and verify it on Etherscan."""

from .config import ProjectConfig, load_config
from .core import (
    ContractVerifier,
    LibrariesFile,
    LibraryAddresses,
    VerificationRequest,
    VerificationResult,
)
from .errors import VerifyError

__version__ = "0.1.0"

__all__ = [
    "ContractVerifier",
    "LibrariesFile",
    "LibraryAddresses",
    "ProjectConfig",
    "VerificationRequest",
    "VerificationResult",
    "VerifyError",
    "load_config",
]
