"""Base verifier state and shared configuration."""

import logging
import threading
from typing import Optional

from ..clients import Etherscan, NetworkProvider
from ..config import ProjectConfig, get_compiler_versions
from ..errors import MissingNetworkError
from ..solc import Artifacts

logger = logging.getLogger(__name__)


class VerifierBase:
    """Holds everything one network's verification runs share."""

    # Compilation on the explorer side is not instantaneous
    status_check_delay = 0.7

    def __init__(
        self,
        config: ProjectConfig,
        provider,
        artifacts: Artifacts,
        etherscan: Optional[Etherscan] = None,
        poll_interval: float = 3.0,
        max_poll_attempts: int = 20,
    ):
        self.config = config
        self.provider = provider
        self.network_name = provider.name
        self.artifacts = artifacts
        self.poll_interval = poll_interval
        self.max_poll_attempts = max_poll_attempts
        self.compiler_versions = get_compiler_versions(config.solidity)

        self._etherscan = etherscan
        self._etherscan_lock = threading.Lock()


    @classmethod
    def from_config(cls, config: ProjectConfig, network: str, rpc_url: Optional[str] = None, **kwargs):
        """Build a verifier for a configured network."""
        rpc_url = rpc_url or config.get_rpc_url(network)
        if not rpc_url:
            raise MissingNetworkError(network)

        return cls(
            config=config,
            provider=NetworkProvider(network, rpc_url),
            artifacts=Artifacts(config.artifacts_dir),
            **kwargs,
        )


    def get_etherscan(self) -> Etherscan:
        """Explorer client for the connected chain, resolved on first use."""
        with self._etherscan_lock:
            if self._etherscan is None:
                chain_config = Etherscan.get_current_chain_config(
                    self.network_name,
                    self.provider,
                    self.config.etherscan.custom_chains,
                )
                self._etherscan = Etherscan.from_chain_config(
                    self.config.etherscan.api_key,
                    chain_config,
                    poll_interval=self.poll_interval,
                    max_poll_attempts=self.max_poll_attempts,
                )
                logger.info(f"Using explorer {chain_config.urls.browser_url} for {self.network_name}")
            return self._etherscan
