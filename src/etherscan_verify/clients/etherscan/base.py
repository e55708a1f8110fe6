"""Client state, chain resolution and explorer URLs."""

import logging
from typing import Dict, List, Optional, Union

from ...config import ChainConfig
from ...errors import ChainConfigNotFoundError, LocalNetworkNotSupportedError, MissingApiKeyError
from .constants import BUILTIN_CHAINS, LOCAL_CHAIN_IDS

logger = logging.getLogger(__name__)


def resolve_api_key(api_key: Union[str, Dict[str, str], None], network: str) -> str:
    if isinstance(api_key, str):
        if api_key:
            return api_key
        raise MissingApiKeyError(network)

    key = (api_key or {}).get(network)
    if not key:
        raise MissingApiKeyError(network)
    return key


class EtherscanBaseMixin:
    def __init__(
        self,
        api_key: str,
        api_url: str,
        browser_url: str,
        poll_interval: float = 3.0,
        max_poll_attempts: int = 20,
        request_timeout: float = 30,
    ):
        """
        Initialize the client.

        Args:
            api_key: Explorer API key
            api_url: Contract API endpoint (may carry a chainid query parameter)
            browser_url: Explorer website root
            poll_interval: Seconds between status checks while pending
            max_poll_attempts: Status checks before giving up on a pending request
            request_timeout: HTTP timeout in seconds
        """
        self.api_key = api_key
        self.api_url = api_url
        self.browser_url = browser_url
        self.poll_interval = poll_interval
        self.max_poll_attempts = max_poll_attempts
        self.request_timeout = request_timeout


    @classmethod
    def from_chain_config(cls, api_key: Union[str, Dict[str, str], None], chain_config: ChainConfig, **kwargs):
        resolved_api_key = resolve_api_key(api_key, chain_config.network)
        return cls(resolved_api_key, chain_config.urls.api_url, chain_config.urls.browser_url, **kwargs)


    @staticmethod
    def get_current_chain_config(
        network_name: str,
        provider,
        custom_chains: Optional[List[ChainConfig]] = None,
    ) -> ChainConfig:
        """
        Find the explorer configuration for the network the provider is connected to.

        Custom chains take precedence over built-in ones, and the last custom
        entry for a chain id wins.
        """
        chain_id = int(provider.chain_id)

        for chain_config in reversed(custom_chains or []):
            if chain_config.chain_id == chain_id:
                logger.info(f"Using custom chain config '{chain_config.network}' for chain {chain_id}")
                return chain_config

        for chain_config in BUILTIN_CHAINS:
            if chain_config.chain_id == chain_id:
                return chain_config

        if chain_id in LOCAL_CHAIN_IDS:
            raise LocalNetworkNotSupportedError(network_name, chain_id)

        raise ChainConfigNotFoundError(chain_id)


    @staticmethod
    def get_supported_chains(custom_chains: Optional[List[ChainConfig]] = None) -> List[ChainConfig]:
        return list(BUILTIN_CHAINS) + list(custom_chains or [])


    def get_contract_url(self, address: str) -> str:
        return f"{self.browser_url.rstrip('/')}/address/{address}#code"
