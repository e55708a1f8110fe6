"""JSON-RPC access to the network a contract is deployed on."""

import logging
from functools import cached_property

from web3 import Web3

from ..errors import InvalidAddressError

logger = logging.getLogger(__name__)


class NetworkProvider:
    """Thin web3 wrapper exposing the two calls verification needs."""

    def __init__(self, name: str, rpc_url: str, request_timeout: float = 30):
        self.name = name
        self.rpc_url = rpc_url
        self.w3 = Web3(Web3.HTTPProvider(rpc_url, request_kwargs={'timeout': request_timeout}))


    @cached_property
    def chain_id(self) -> int:
        chain_id = self.w3.eth.chain_id
        logger.info(f"Connected to {self.name} (chain id {chain_id})")
        return chain_id


    def get_code(self, address: str) -> str:
        """Runtime code at an address as a hex string without 0x prefix."""
        if not Web3.is_address(address):
            raise InvalidAddressError(address)
        code = self.w3.eth.get_code(Web3.to_checksum_address(address), 'latest')
        return bytes(code).hex()
