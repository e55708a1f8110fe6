"""Public Etherscan client composed from focused mixins."""

from .base import EtherscanBaseMixin
from .verification import EtherscanVerificationMixin


class Etherscan(
    EtherscanBaseMixin,
    EtherscanVerificationMixin,
):
    """Etherscan-compatible contract verification client."""

    pass
