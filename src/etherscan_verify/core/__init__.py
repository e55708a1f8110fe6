"""Verifier flow package."""

from .encoding import encode_arguments
from .engine import ContractVerifier
from .models import (
    LibrariesFile,
    LibraryAddresses,
    VerificationArgs,
    VerificationRequest,
    VerificationResponse,
    VerificationResult,
)

__all__ = [
    "ContractVerifier",
    "LibrariesFile",
    "LibraryAddresses",
    "VerificationArgs",
    "VerificationRequest",
    "VerificationResponse",
    "VerificationResult",
    "encode_arguments",
]
