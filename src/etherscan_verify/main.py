#!/usr/bin/env python3
"""
Command-line entry point for contract source verification.

This script orchestrates the verification workflow:
1. Parse command-line arguments
2. Load the project configuration
3. Connect to the network and build the verifier
4. Verify one contract, or a batch of them
"""

import argparse
import json
import logging
import os
import sys
from datetime import datetime
from pathlib import Path
from typing import List

from .config import load_config
from .core import ContractVerifier, LibrariesFile, VerificationRequest
from .errors import DuplicatedRequestAddressError, InvalidBatchFileError, VerifyError
from .reporting import print_supported_networks, print_verification_errors, save_json_results

logger = logging.getLogger(__name__)

OUTPUT_DIR = Path("output")


def configure_logging(debug: bool) -> None:
    if debug:
        OUTPUT_DIR.mkdir(exist_ok=True)

        logging.basicConfig(
            level=logging.INFO,
            format='%(asctime)s - %(levelname)s - %(message)s',
            handlers=[
                logging.FileHandler(OUTPUT_DIR / 'verify.log')
            ]
        )
    else:
        # Diagnostics are only kept in debug mode
        logging.basicConfig(
            level=logging.CRITICAL,
            format='%(asctime)s - %(levelname)s - %(message)s',
            handlers=[
                logging.NullHandler()
            ]
        )


def load_batch_requests(batch_file: Path) -> List[VerificationRequest]:
    """
    Read a batch file: a JSON list of objects with an "address" and
    optional "constructorArgs", "contract" and "libraries" (path) keys.

    Raises:
        InvalidBatchFileError: If the file is unreadable or malformed
        DuplicatedRequestAddressError: If an address is listed twice
    """
    try:
        with open(batch_file, 'r') as f:
            entries = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise InvalidBatchFileError(batch_file, str(e)) from e

    if not isinstance(entries, list):
        raise InvalidBatchFileError(batch_file, "expected a JSON list of contracts")

    requests = []
    seen = set()
    for index, entry in enumerate(entries):
        if not isinstance(entry, dict):
            raise InvalidBatchFileError(batch_file, f"entry #{index} is not an object")

        address = entry.get('address')
        if address:
            if address.lower() in seen:
                raise DuplicatedRequestAddressError(address)
            seen.add(address.lower())

        libraries = entry.get('libraries')
        requests.append(VerificationRequest(
            address=address,
            constructor_args=entry.get('constructorArgs', []),
            contract=entry.get('contract'),
            libraries=LibrariesFile(Path(libraries)) if libraries else None,
        ))
    return requests


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='verify-contract',
        description='Verify the source code of a deployed contract on an Etherscan-compatible block explorer',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Environment Variables (can also be set in .env file):
  ETHERSCAN_API_KEY     Block explorer API key
  NETWORK               Network to verify on (default: mainnet)
  <NETWORK>_RPC_URL     JSON-RPC url of a network, e.g. SEPOLIA_RPC_URL

Priority: Command-line arguments > Environment variables > Config file > Defaults
        """
    )
    parser.add_argument(
        'address',
        nargs='?',
        help='Address of the deployed contract'
    )
    parser.add_argument(
        'constructor_args',
        nargs='*',
        help='Constructor arguments the contract was deployed with'
    )
    parser.add_argument(
        '--network',
        default=os.getenv('NETWORK', 'mainnet'),
        help='Network the contract is deployed on (env: NETWORK, default: mainnet)'
    )
    parser.add_argument(
        '--config',
        type=Path,
        default=None,
        help='Path to the project config file (default: ./verify.config.json)'
    )
    parser.add_argument(
        '--api-key',
        default=None,
        help='Block explorer API key, overrides ETHERSCAN_API_KEY and the config file'
    )
    parser.add_argument(
        '--rpc-url',
        default=None,
        help='JSON-RPC url, overrides <NETWORK>_RPC_URL and the config file'
    )
    parser.add_argument(
        '--contract',
        default=None,
        help='Fully qualified name of the contract, e.g. contracts/Token.sol:Token'
    )
    parser.add_argument(
        '--constructor-args',
        dest='constructor_args_file',
        type=Path,
        default=None,
        help='.json or .py file exporting the constructor arguments as "constructor_args"'
    )
    parser.add_argument(
        '--libraries',
        type=Path,
        default=None,
        help='.json or .py file exporting the library addresses as "libraries"'
    )
    parser.add_argument(
        '--batch',
        type=Path,
        default=None,
        help='JSON file listing several contracts to verify concurrently'
    )
    parser.add_argument(
        '--max-concurrent',
        type=int,
        default=4,
        help='Maximum concurrent verifications in batch mode (default: 4)'
    )
    parser.add_argument(
        '--list-networks',
        action='store_true',
        default=False,
        help='Print the supported networks and exit'
    )
    parser.add_argument(
        '--debug',
        action='store_true',
        default=False,
        help='Enable debug mode to log to file (default: False)'
    )
    return parser


def main(argv=None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    configure_logging(args.debug)

    try:
        config = load_config(args.config)
        if args.api_key:
            config.etherscan.api_key = args.api_key

        if args.list_networks:
            print_supported_networks(config.etherscan.custom_chains)
            return 0

        verifier = ContractVerifier.from_config(config, args.network, rpc_url=args.rpc_url)

        if args.batch:
            requests = load_batch_requests(args.batch)
            outcomes = verifier.verify_many(requests, max_concurrent=args.max_concurrent)

            timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
            results_file = OUTPUT_DIR / f"verification_{args.network}_{timestamp}.json"
            save_json_results(outcomes, results_file)
            print(f"Results saved to {results_file}")

            errors = {address: outcome for address, outcome in outcomes.items() if isinstance(outcome, VerifyError)}
            print_verification_errors(errors)
            return 1 if errors else 0

        request = VerificationRequest(
            address=args.address,
            constructor_args=args.constructor_args,
            constructor_args_file=args.constructor_args_file,
            libraries=LibrariesFile(args.libraries) if args.libraries else None,
            contract=args.contract,
        )
        verifier.verify(request)
        return 0

    except VerifyError as e:
        logger.error(f"Verification failed: {e.message}")
        print(f"Error: {e.message}", file=sys.stderr)
        return 1


if __name__ == '__main__':
    sys.exit(main())
