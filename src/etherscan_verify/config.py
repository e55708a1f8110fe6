"""Project configuration: compilers, block explorer settings and networks."""

import json
import logging
import os
from pathlib import Path
from typing import Dict, List, Optional, Union

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .errors import InvalidConfigError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = "verify.config.json"
DEFAULT_ARTIFACTS_DIR = "artifacts"


class ChainUrls(BaseModel):
    model_config = ConfigDict(extra="forbid", populate_by_name=True)
    api_url: str = Field(alias="apiURL")
    browser_url: str = Field(alias="browserURL")


class ChainConfig(BaseModel):
    model_config = ConfigDict(extra="forbid", populate_by_name=True)
    network: str
    chain_id: int = Field(alias="chainId")
    urls: ChainUrls


class SolcCompilerConfig(BaseModel):
    model_config = ConfigDict(extra="allow")
    version: str
    settings: Dict = Field(default_factory=dict)


class SolidityConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")
    compilers: List[SolcCompilerConfig] = Field(default_factory=list)
    overrides: Dict[str, SolcCompilerConfig] = Field(default_factory=dict)


class EtherscanConfig(BaseModel):
    model_config = ConfigDict(extra="forbid", populate_by_name=True)
    api_key: Union[str, Dict[str, str]] = Field(default="", alias="apiKey")
    custom_chains: List[ChainConfig] = Field(default_factory=list, alias="customChains")


class NetworkConfig(BaseModel):
    model_config = ConfigDict(extra="allow")
    url: Optional[str] = None


class PathsConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")
    artifacts: str = DEFAULT_ARTIFACTS_DIR


class ProjectConfig(BaseModel):
    """Validated contents of verify.config.json."""
    model_config = ConfigDict(extra="ignore")

    solidity: SolidityConfig = Field(default_factory=SolidityConfig)
    etherscan: EtherscanConfig = Field(default_factory=EtherscanConfig)
    networks: Dict[str, NetworkConfig] = Field(default_factory=dict)
    paths: PathsConfig = Field(default_factory=PathsConfig)

    # Directory the config was loaded from, relative paths resolve against it
    base_dir: Path = Field(default_factory=Path.cwd, exclude=True)


    @property
    def artifacts_dir(self) -> Path:
        return (self.base_dir / self.paths.artifacts).resolve()


    def get_rpc_url(self, network: str) -> Optional[str]:
        """RPC url for a network: environment first, then the config file."""
        env_url = os.getenv(f"{network.upper()}_RPC_URL")
        if env_url:
            return env_url
        network_config = self.networks.get(network)
        return network_config.url if network_config else None



def get_compiler_versions(solidity: SolidityConfig) -> List[str]:
    """Distinct compiler versions configured for the project, in declaration order."""
    versions = [compiler.version for compiler in solidity.compilers]
    versions.extend(override.version for override in solidity.overrides.values())
    return list(dict.fromkeys(versions))


def load_config(config_file: Optional[Path] = None) -> ProjectConfig:
    """
    Load the project configuration.

    Environment variables from a .env file are loaded first. A set
    ETHERSCAN_API_KEY replaces the explorer API key of the config file,
    so the environment takes priority over the file.

    Args:
        config_file: Path to the JSON config (default: ./verify.config.json)

    Returns:
        ProjectConfig (defaults only if the file does not exist)
    """
    load_dotenv(override=True)

    path = Path(config_file) if config_file else Path(DEFAULT_CONFIG_FILE)
    data = {}
    if path.is_file():
        logger.info(f"Loading configuration from {path}")
        try:
            with open(path, 'r') as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise InvalidConfigError(path, str(e)) from e
    elif config_file:
        raise InvalidConfigError(path, "file does not exist")
    else:
        logger.info(f"No {DEFAULT_CONFIG_FILE} found, using defaults")

    try:
        config = ProjectConfig.model_validate({**data, 'base_dir': path.resolve().parent})
    except ValidationError as e:
        raise InvalidConfigError(path, str(e)) from e

    env_api_key = os.getenv('ETHERSCAN_API_KEY')
    if env_api_key:
        config.etherscan.api_key = env_api_key

    return config
