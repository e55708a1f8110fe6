"""Inputs and outcomes of a verification run."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Union


@dataclass(frozen=True)
class LibraryAddresses:
    """Library identifier (bare or fully qualified name) -> address, given inline."""
    addresses: Dict[str, str]


@dataclass(frozen=True)
class LibrariesFile:
    """A .json or .py file exporting the library addresses."""
    path: Path


LibrariesInput = Union[LibraryAddresses, LibrariesFile]


@dataclass
class VerificationRequest:
    """What the user asked to verify, before validation."""
    address: Optional[str]
    constructor_args: List[Any] = field(default_factory=list)
    constructor_args_file: Optional[Path] = None
    libraries: Optional[LibrariesInput] = None
    contract: Optional[str] = None


@dataclass(frozen=True)
class VerificationArgs:
    address: str
    constructor_args: List[Any]
    libraries: Dict[str, str]
    contract_fqn: Optional[str] = None


@dataclass(frozen=True)
class VerificationResponse:
    """Outcome of one submit-and-poll cycle."""
    success: bool
    message: str


@dataclass(frozen=True)
class VerificationResult:
    address: str
    contract_url: str
    already_verified: bool = False
    contract_fqn: Optional[str] = None
    used_full_input: bool = False
