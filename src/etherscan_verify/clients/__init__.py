"""External service clients."""

from .etherscan import Etherscan, EtherscanResponse
from .network import NetworkProvider

__all__ = ["Etherscan", "EtherscanResponse", "NetworkProvider"]
