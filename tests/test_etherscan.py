import unittest
from unittest import mock

import requests

from etherscan_verify.clients import Etherscan, EtherscanResponse
from etherscan_verify.config import ChainConfig
from etherscan_verify.errors import (
    ChainConfigNotFoundError,
    ContractStatusPollingResponseNotOkError,
    ContractStatusPollingTimeoutError,
    ContractVerificationInvalidResponseError,
    ContractVerificationInvalidStatusCodeError,
    ContractVerificationMissingBytecodeError,
    ContractVerificationRejectedError,
    ContractVerificationRequestError,
    LocalNetworkNotSupportedError,
    MissingApiKeyError,
    VerificationAPIUnexpectedMessageError,
)

from helpers import FakeProvider

API_URL = "https://api.etherscan.io/v2/api?chainid=11155111"
ADDRESS = "0x" + "12" * 20


def http_response(payload, status_code=200):
    response = mock.Mock()
    response.ok = status_code < 400
    response.status_code = status_code
    response.text = str(payload)
    response.json.return_value = payload
    return response


def make_client(**kwargs):
    return Etherscan("KEY", API_URL, "https://sepolia.etherscan.io", poll_interval=0, **kwargs)


class TestEtherscanResponse(unittest.TestCase):
    def test_classification(self):
        self.assertTrue(EtherscanResponse({"status": "0", "result": "Pending in queue"}).is_pending())
        self.assertTrue(EtherscanResponse({"status": "1", "result": "Pass - Verified"}).is_success())
        failure = EtherscanResponse({"status": "0", "result": "Fail - Unable to verify. Bytecode mismatch"})
        self.assertTrue(failure.is_failure())
        self.assertFalse(failure.is_ok())
        already = EtherscanResponse({"status": "0", "result": "Contract source code already verified"})
        self.assertTrue(already.is_already_verified())
        self.assertTrue(already.is_success())
        unknown = EtherscanResponse({"status": "1", "result": "Unknown response"})
        self.assertFalse(unknown.is_success() or unknown.is_failure())


class TestEtherscanVerification(unittest.TestCase):
    @mock.patch("etherscan_verify.clients.etherscan.verification.requests.post")
    def test_submission_form(self, post):
        post.return_value = http_response({"status": "1", "message": "OK", "result": "guid-1"})

        response = make_client().verify(ADDRESS, "{}", "contracts/Token.sol:Token", "v0.8.19+commit.7dd6d404", "00ff")

        self.assertEqual(response.message, "guid-1")
        args, kwargs = post.call_args
        self.assertEqual(args[0], API_URL)
        data = kwargs["data"]
        self.assertEqual(data["action"], "verifysourcecode")
        self.assertEqual(data["codeformat"], "solidity-standard-json-input")
        self.assertEqual(data["contractname"], "contracts/Token.sol:Token")
        self.assertEqual(data["compilerversion"], "v0.8.19+commit.7dd6d404")
        self.assertEqual(data["constructorArguements"], "00ff")
        self.assertEqual(data["apikey"], "KEY")

    @mock.patch("etherscan_verify.clients.etherscan.verification.requests.post")
    def test_submission_errors(self, post):
        client = make_client()
        args = (ADDRESS, "{}", "a.sol:A", "v0.8.19", "")

        post.return_value = http_response({}, status_code=502)
        with self.assertRaises(ContractVerificationInvalidStatusCodeError):
            client.verify(*args)

        post.return_value = http_response({"status": "0", "result": f"Unable to locate ContractCode at {ADDRESS}"})
        with self.assertRaises(ContractVerificationMissingBytecodeError):
            client.verify(*args)

        post.return_value = http_response({"status": "0", "result": "Invalid API Key"})
        with self.assertRaises(ContractVerificationRejectedError):
            client.verify(*args)

        post.side_effect = requests.ConnectionError("boom")
        with self.assertRaises(ContractVerificationRequestError):
            client.verify(*args)

    @mock.patch("etherscan_verify.clients.etherscan.verification.requests.post")
    def test_already_verified_submission_is_returned(self, post):
        post.return_value = http_response({"status": "0", "result": "Already Verified"})
        response = make_client().verify(ADDRESS, "{}", "a.sol:A", "v0.8.19", "")
        self.assertTrue(response.is_already_verified())

    @mock.patch("etherscan_verify.clients.etherscan.verification.requests.get")
    def test_polling_waits_while_pending(self, get):
        get.side_effect = [
            http_response({"status": "0", "result": "Pending in queue"}),
            http_response({"status": "0", "result": "Pending in queue"}),
            http_response({"status": "1", "result": "Pass - Verified"}),
        ]
        status = make_client().get_verification_status("guid-1")
        self.assertTrue(status.is_success())
        self.assertEqual(get.call_count, 3)
        self.assertEqual(get.call_args.kwargs["params"]["guid"], "guid-1")
        self.assertEqual(get.call_args.kwargs["params"]["action"], "checkverifystatus")

    @mock.patch("etherscan_verify.clients.etherscan.verification.requests.get")
    def test_polling_returns_failures(self, get):
        get.return_value = http_response({"status": "0", "result": "Fail - Unable to verify"})
        self.assertTrue(make_client().get_verification_status("guid-1").is_failure())

    @mock.patch("etherscan_verify.clients.etherscan.verification.requests.get")
    def test_polling_is_bounded(self, get):
        get.return_value = http_response({"status": "0", "result": "Pending in queue"})
        with self.assertRaises(ContractStatusPollingTimeoutError):
            make_client(max_poll_attempts=3).get_verification_status("guid-1")
        self.assertEqual(get.call_count, 3)

    @mock.patch("etherscan_verify.clients.etherscan.verification.requests.get")
    def test_polling_error_answer(self, get):
        get.return_value = http_response({"status": "0", "result": "Invalid GUID"})
        with self.assertRaises(ContractStatusPollingResponseNotOkError) as ctx:
            make_client().get_verification_status("guid-1")
        self.assertIsInstance(ctx.exception, VerificationAPIUnexpectedMessageError)

    @mock.patch("etherscan_verify.clients.etherscan.verification.requests.get")
    def test_is_verified(self, get):
        client = make_client()

        get.return_value = http_response({"status": "1", "message": "OK", "result": [{"SourceCode": "contract A {}"}]})
        self.assertTrue(client.is_verified(ADDRESS))

        get.return_value = http_response({"status": "1", "message": "OK", "result": [{"SourceCode": ""}]})
        self.assertFalse(client.is_verified(ADDRESS))

        get.return_value = http_response({"status": "0", "message": "NOTOK", "result": "Invalid API Key"})
        self.assertFalse(client.is_verified(ADDRESS))

    @mock.patch("etherscan_verify.clients.etherscan.verification.requests.post")
    @mock.patch("etherscan_verify.clients.etherscan.verification.requests.get")
    def test_non_json_answers_raise_typed_errors(self, get, post):
        client = make_client()
        rate_limited = http_response("<html>Too many requests</html>")
        rate_limited.json.side_effect = ValueError("Expecting value: line 1 column 1 (char 0)")
        get.return_value = rate_limited
        post.return_value = rate_limited

        with self.assertRaises(ContractVerificationInvalidResponseError) as ctx:
            client.is_verified(ADDRESS)
        self.assertIn("Too many requests", ctx.exception.message)

        with self.assertRaises(ContractVerificationInvalidResponseError):
            client.verify(ADDRESS, "{}", "a.sol:A", "v0.8.19", "")

        with self.assertRaises(ContractVerificationInvalidResponseError):
            client.get_verification_status("guid-1")

        get.return_value = http_response(["not", "an", "object"])
        with self.assertRaises(ContractVerificationInvalidResponseError):
            client.is_verified(ADDRESS)


class TestChainResolution(unittest.TestCase):
    def custom_chain(self, network, chain_id):
        return ChainConfig.model_validate({
            "network": network,
            "chainId": chain_id,
            "urls": {"apiURL": f"https://api.{network}.example/api", "browserURL": f"https://{network}.example"},
        })

    def test_builtin_chain(self):
        chain_config = Etherscan.get_current_chain_config("sepolia", FakeProvider(chain_id=11155111))
        self.assertEqual(chain_config.network, "sepolia")
        self.assertEqual(chain_config.urls.api_url, API_URL)

    def test_custom_chains_take_precedence(self):
        custom = [self.custom_chain("first", 11155111), self.custom_chain("second", 11155111)]
        chain_config = Etherscan.get_current_chain_config("sepolia", FakeProvider(chain_id=11155111), custom)
        self.assertEqual(chain_config.network, "second")

    def test_local_and_unknown_chains(self):
        with self.assertRaises(LocalNetworkNotSupportedError):
            Etherscan.get_current_chain_config("hardhat", FakeProvider(name="hardhat", chain_id=31337))
        with self.assertRaises(ChainConfigNotFoundError):
            Etherscan.get_current_chain_config("devnet", FakeProvider(name="devnet", chain_id=987654321))

    def test_api_key_per_network(self):
        chain_config = self.custom_chain("mychain", 4242)
        client = Etherscan.from_chain_config({"mychain": "K1"}, chain_config)
        self.assertEqual(client.api_key, "K1")
        self.assertEqual(client.get_contract_url(ADDRESS), f"https://mychain.example/address/{ADDRESS}#code")
        with self.assertRaises(MissingApiKeyError):
            Etherscan.from_chain_config({"other": "K2"}, chain_config)
        with self.assertRaises(MissingApiKeyError):
            Etherscan.from_chain_config("", chain_config)


if __name__ == '__main__':
    unittest.main()
