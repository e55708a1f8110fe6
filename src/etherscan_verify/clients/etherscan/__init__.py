"""Etherscan verification client package split by request flow."""

from .client import Etherscan
from .constants import BUILTIN_CHAINS
from .response import EtherscanResponse

__all__ = ["BUILTIN_CHAINS", "Etherscan", "EtherscanResponse"]
