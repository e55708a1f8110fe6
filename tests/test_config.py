import json
import os
import shutil
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from etherscan_verify.config import ProjectConfig, get_compiler_versions, load_config
from etherscan_verify.errors import InvalidConfigError


class TestLoadConfig(unittest.TestCase):
    def setUp(self):
        self.tmp = Path(tempfile.mkdtemp())

    def tearDown(self):
        shutil.rmtree(self.tmp)

    def write_config(self, data):
        path = self.tmp / "verify.config.json"
        path.write_text(json.dumps(data))
        return path

    @mock.patch("etherscan_verify.config.load_dotenv")
    def test_full_config(self, _load_dotenv):
        path = self.write_config({
            "solidity": {
                "compilers": [{"version": "0.8.19"}, {"version": "0.7.6", "settings": {"optimizer": {"enabled": True}}}],
                "overrides": {"contracts/Old.sol": {"version": "0.7.6"}},
            },
            "etherscan": {
                "apiKey": {"sepolia": "SEPOLIA_KEY"},
                "customChains": [{
                    "network": "mychain",
                    "chainId": 4242,
                    "urls": {"apiURL": "https://api.mychain.example/api", "browserURL": "https://mychain.example"},
                }],
            },
            "networks": {"sepolia": {"url": "https://rpc.sepolia.example"}},
            "paths": {"artifacts": "build/artifacts"},
        })

        with mock.patch.dict(os.environ, {}, clear=True):
            config = load_config(path)
            self.assertEqual(config.get_rpc_url("sepolia"), "https://rpc.sepolia.example")
            self.assertIsNone(config.get_rpc_url("mainnet"))

        self.assertEqual(get_compiler_versions(config.solidity), ["0.8.19", "0.7.6"])
        self.assertEqual(config.etherscan.api_key, {"sepolia": "SEPOLIA_KEY"})
        self.assertEqual(config.etherscan.custom_chains[0].chain_id, 4242)
        self.assertEqual(config.artifacts_dir, (self.tmp / "build" / "artifacts").resolve())

    @mock.patch("etherscan_verify.config.load_dotenv")
    def test_environment_fills_gaps(self, _load_dotenv):
        path = self.write_config({"networks": {"sepolia": {"url": "https://rpc.sepolia.example"}}})

        env = {"ETHERSCAN_API_KEY": "ENV_KEY", "SEPOLIA_RPC_URL": "https://env.sepolia.example"}
        with mock.patch.dict(os.environ, env, clear=True):
            config = load_config(path)
            self.assertEqual(config.etherscan.api_key, "ENV_KEY")
            self.assertEqual(config.get_rpc_url("sepolia"), "https://env.sepolia.example")

    @mock.patch("etherscan_verify.config.load_dotenv")
    def test_environment_overrides_config_file(self, _load_dotenv):
        path = self.write_config({"etherscan": {"apiKey": {"sepolia": "FILE_KEY"}}})

        with mock.patch.dict(os.environ, {"ETHERSCAN_API_KEY": "ENV_KEY"}, clear=True):
            self.assertEqual(load_config(path).etherscan.api_key, "ENV_KEY")

        with mock.patch.dict(os.environ, {}, clear=True):
            self.assertEqual(load_config(path).etherscan.api_key, {"sepolia": "FILE_KEY"})

    @mock.patch("etherscan_verify.config.load_dotenv")
    def test_invalid_files(self, _load_dotenv):
        with self.assertRaises(InvalidConfigError):
            load_config(self.tmp / "missing.json")

        broken = self.tmp / "broken.json"
        broken.write_text("{not json")
        with self.assertRaises(InvalidConfigError):
            load_config(broken)

        with self.assertRaises(InvalidConfigError):
            load_config(self.write_config({"etherscan": {"unknownField": 1}}))

    def test_defaults(self):
        config = ProjectConfig()
        self.assertEqual(get_compiler_versions(config.solidity), [])
        self.assertEqual(config.paths.artifacts, "artifacts")
        self.assertEqual(config.etherscan.custom_chains, [])


if __name__ == '__main__':
    unittest.main()
