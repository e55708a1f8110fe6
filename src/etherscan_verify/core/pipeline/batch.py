"""Pipeline stage: independent verification runs executed concurrently."""

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Dict, List, Union

from ...errors import DuplicatedRequestAddressError, VerifyError
from ..models import VerificationRequest, VerificationResult

logger = logging.getLogger(__name__)


class VerifierBatchMixin:
    def verify_many(
        self,
        requests: List[VerificationRequest],
        max_concurrent: int = 4,
    ) -> Dict[str, Union[VerificationResult, VerifyError]]:
        """
        Verify several contracts, each in its own sequential run.

        Runs share nothing but the read-only artifacts and the explorer
        client, so a failure in one does not affect the others.

        Args:
            requests: One request per address
            max_concurrent: Maximum runs in flight

        Returns:
            Address -> result, or the VerifyError that ended its run.
            Requests without an address are keyed by their position,
            as "#<index>".

        Raises:
            DuplicatedRequestAddressError: If two requests share an address
        """
        outcomes: Dict[str, Union[VerificationResult, VerifyError]] = {}
        if not requests:
            return outcomes

        keys = []
        seen = set()
        for index, request in enumerate(requests):
            if not request.address:
                keys.append(f"#{index}")
                continue
            if request.address.lower() in seen:
                raise DuplicatedRequestAddressError(request.address)
            seen.add(request.address.lower())
            keys.append(request.address)

        max_workers = max(1, min(max_concurrent, len(requests)))
        logger.info(f"Verifying {len(requests)} contracts with {max_workers} workers")

        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            futures = {executor.submit(self.verify, request): key for key, request in zip(keys, requests)}
            for future in as_completed(futures):
                key = futures[future]
                try:
                    outcomes[key] = future.result()
                    logger.info(f"✓ {key} verified")
                except VerifyError as e:
                    logger.error(f"✗ {key}: {e.message.splitlines()[0]}")
                    outcomes[key] = e

        return outcomes
