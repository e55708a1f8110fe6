"""Classification of Etherscan API responses."""

from typing import Any, Dict

PENDING_MESSAGE = "Pending in queue"
VERIFICATION_SUCCESS_MESSAGE = "Pass - Verified"
VERIFICATION_FAILURE_PREFIX = "Fail - Unable to verify"
BYTECODE_MISSING_PREFIX = "Unable to locate ContractCode at"
ALREADY_VERIFIED_PREFIXES = (
    "Contract source code already verified",
    "Already Verified",
)


class EtherscanResponse:
    """
    A `{"status", "message", "result"}` answer from the contract module.

    The human readable payload (guid or verification status) lives in
    `result`, exposed here as `message`.
    """

    def __init__(self, response: Dict[str, Any]):
        try:
            self.status = int(response.get('status', 0))
        except (TypeError, ValueError):
            self.status = 0
        result = response.get('result')
        self.message = result if isinstance(result, str) else str(result)

    def __repr__(self) -> str:
        return f"EtherscanResponse(status={self.status}, message={self.message!r})"

    def is_pending(self) -> bool:
        return self.message == PENDING_MESSAGE

    def is_verification_failure(self) -> bool:
        return self.message.startswith(VERIFICATION_FAILURE_PREFIX)

    def is_verification_success(self) -> bool:
        return self.message == VERIFICATION_SUCCESS_MESSAGE

    def is_already_verified(self) -> bool:
        return self.message.startswith(ALREADY_VERIFIED_PREFIXES)

    def is_bytecode_missing_in_network_error(self) -> bool:
        return self.message.startswith(BYTECODE_MISSING_PREFIX)

    def is_ok(self) -> bool:
        return self.status == 1

    def is_success(self) -> bool:
        return self.is_verification_success() or self.is_already_verified()

    def is_failure(self) -> bool:
        return self.is_verification_failure()
