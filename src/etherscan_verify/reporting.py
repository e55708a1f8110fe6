"""
Console and JSON reporting for verification runs.
"""

import json
import logging
from pathlib import Path
from typing import Dict, List, Optional, Union

from .clients import Etherscan
from .config import ChainConfig
from .core import VerificationResult
from .errors import VerifyError

logger = logging.getLogger(__name__)


def print_supported_networks(custom_chains: Optional[List[ChainConfig]] = None) -> None:
    """Print every network the explorer client can verify on."""
    chains = Etherscan.get_supported_chains(custom_chains)
    custom_ids = {chain.chain_id for chain in custom_chains or []}

    name_width = max(len(chain.network) for chain in chains)
    print("Networks supported by the verification service:\n")
    print(f"{'network':<{name_width}}  {'chain id':>10}  explorer")
    print(f"{'-' * name_width}  {'-' * 10}  {'-' * 8}")
    for chain in sorted(chains, key=lambda c: c.chain_id):
        suffix = "  (custom)" if chain.chain_id in custom_ids else ""
        print(f"{chain.network:<{name_width}}  {chain.chain_id:>10}  {chain.urls.browser_url}{suffix}")
    print(f"\nCustom chains can be added under etherscan.customChains in the config file.")


def print_verification_errors(errors: Dict[str, VerifyError]) -> None:
    """Print the errors of the runs that failed, one block per address."""
    if not errors:
        return

    print(f"\n{len(errors)} contract(s) could not be verified:\n")
    for address, error in errors.items():
        print(f"{'=' * 60}")
        print(address)
        print(f"{'=' * 60}")
        print(f"{error.message}\n")


def save_json_results(
    outcomes: Dict[str, Union[VerificationResult, VerifyError]],
    output_file: Path,
) -> None:
    """
    Save per-address outcomes of a batch run to a JSON file.

    Args:
        outcomes: Address -> result or error, as returned by verify_many
        output_file: Destination path
    """
    report = {}
    for address, outcome in outcomes.items():
        if isinstance(outcome, VerifyError):
            report[address] = {
                'verified': False,
                'error': type(outcome).__name__,
                'message': outcome.message,
            }
        else:
            report[address] = {
                'verified': True,
                'already_verified': outcome.already_verified,
                'contract': outcome.contract_fqn,
                'used_full_input': outcome.used_full_input,
                'url': outcome.contract_url,
            }

    output_file.parent.mkdir(parents=True, exist_ok=True)
    with open(output_file, 'w') as f:
        json.dump(report, f, indent=2)

    logger.info(f"Results saved to {output_file}")
