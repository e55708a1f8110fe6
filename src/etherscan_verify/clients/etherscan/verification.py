"""Contract verification requests: status lookup, submission and polling."""

import logging
import time
from typing import Any, Dict

import requests

from ...errors import (
    ContractStatusPollingInvalidStatusCodeError,
    ContractStatusPollingResponseNotOkError,
    ContractStatusPollingTimeoutError,
    ContractVerificationInvalidResponseError,
    ContractVerificationInvalidStatusCodeError,
    ContractVerificationMissingBytecodeError,
    ContractVerificationRejectedError,
    ContractVerificationRequestError,
)
from .response import EtherscanResponse

logger = logging.getLogger(__name__)


class EtherscanVerificationMixin:
    def _get(self, params: Dict[str, Any]) -> requests.Response:
        try:
            return requests.get(self.api_url, params={'apikey': self.api_key, **params}, timeout=self.request_timeout)
        except requests.RequestException as e:
            raise ContractVerificationRequestError(self.api_url, e) from e

    def _decode(self, response: requests.Response) -> Dict[str, Any]:
        """Parse an API answer, which is always a JSON object."""
        try:
            data = response.json()
        except ValueError as e:
            raise ContractVerificationInvalidResponseError(self.api_url, response.text) from e
        if not isinstance(data, dict):
            raise ContractVerificationInvalidResponseError(self.api_url, response.text)
        return data


    def is_verified(self, address: str) -> bool:
        """
        Check whether the explorer already has verified source for an address.

        Args:
            address: Contract address

        Returns:
            True if source code is published for the address
        """
        response = self._get({
            'module': 'contract',
            'action': 'getsourcecode',
            'address': address,
        })
        if not response.ok:
            raise ContractVerificationInvalidStatusCodeError(self.api_url, response.status_code, response.text)

        data = self._decode(response)
        if data.get('message') != 'OK':
            logger.debug(f"getsourcecode for {address} answered: {data.get('message')} / {data.get('result')}")
            return False

        result = data.get('result')
        if not isinstance(result, list) or not result:
            return False
        source_code = result[0].get('SourceCode')
        return bool(source_code)


    def verify(
        self,
        contract_address: str,
        source_code: str,
        contract_name: str,
        compiler_version: str,
        constructor_arguments: str,
    ) -> EtherscanResponse:
        """
        Submit a standard-json input for verification.

        Args:
            contract_address: Address of the deployed contract
            source_code: JSON-serialized solc standard-json input
            contract_name: "sourceName:contractName"
            compiler_version: "v"-prefixed solc long version
            constructor_arguments: ABI-encoded constructor arguments, no 0x prefix

        Returns:
            Response whose message is the tracking guid (or an
            already-verified notice)
        """
        data = {
            'apikey': self.api_key,
            'module': 'contract',
            'action': 'verifysourcecode',
            'contractaddress': contract_address,
            'sourceCode': source_code,
            'codeformat': 'solidity-standard-json-input',
            'contractname': contract_name,
            'compilerversion': compiler_version,
            # Misspelled on purpose, this is the parameter name the API expects
            'constructorArguements': constructor_arguments,
        }

        try:
            response = requests.post(self.api_url, data=data, timeout=self.request_timeout)
        except requests.RequestException as e:
            raise ContractVerificationRequestError(self.api_url, e) from e

        if not response.ok:
            raise ContractVerificationInvalidStatusCodeError(self.api_url, response.status_code, response.text)

        etherscan_response = EtherscanResponse(self._decode(response))
        logger.info(f"verifysourcecode for {contract_name} at {contract_address}: {etherscan_response}")

        if etherscan_response.is_bytecode_missing_in_network_error():
            raise ContractVerificationMissingBytecodeError(self.api_url, contract_address)

        if etherscan_response.is_already_verified():
            return etherscan_response

        if not etherscan_response.is_ok():
            raise ContractVerificationRejectedError(etherscan_response.message)

        return etherscan_response


    def get_verification_status(self, guid: str) -> EtherscanResponse:
        """
        Poll a submitted verification until it leaves the queue.

        Pending answers are retried every `poll_interval` seconds, at most
        `max_poll_attempts` times in total.

        Args:
            guid: Tracking identifier returned by verify()

        Returns:
            A terminal response (success or failure)

        Raises:
            ContractStatusPollingResponseNotOkError: On an error answer that
                is not a verification failure
            ContractStatusPollingTimeoutError: If still pending after every attempt
        """
        for attempt in range(1, self.max_poll_attempts + 1):
            response = self._get({
                'module': 'contract',
                'action': 'checkverifystatus',
                'guid': guid,
            })
            if not response.ok:
                raise ContractStatusPollingInvalidStatusCodeError(response.status_code, response.text)

            etherscan_response = EtherscanResponse(self._decode(response))
            logger.info(f"checkverifystatus {guid} (attempt {attempt}/{self.max_poll_attempts}): {etherscan_response}")

            if etherscan_response.is_pending():
                if attempt < self.max_poll_attempts:
                    time.sleep(self.poll_interval)
                continue

            if etherscan_response.is_verification_failure() or etherscan_response.is_already_verified():
                return etherscan_response

            if not etherscan_response.is_ok():
                raise ContractStatusPollingResponseNotOkError(etherscan_response.message)

            return etherscan_response

        raise ContractStatusPollingTimeoutError(guid, self.max_poll_attempts)
