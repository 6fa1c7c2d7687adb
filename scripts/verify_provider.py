#!/usr/bin/env python3
"""Verify a running System service against a pact file."""

import argparse
import sys

import httpx
import structlog

from libs.common.config import ContractConfig, InventoryConfig
from libs.common.logging import configure_logging
from libs.contract import ContractError, Pact, ProviderVerifier

logger = structlog.get_logger("verify_provider")


def verify(pact_file: str, base_url: str, timeout: float) -> bool:
    """Replay every interaction in ``pact_file`` against ``base_url``."""
    pact = Pact.load(pact_file)
    with httpx.Client(base_url=base_url, timeout=timeout) as client:
        results = ProviderVerifier(client).verify_pact(pact)

    for result in results:
        status = "PASS" if result.passed else "FAIL"
        print(f"{status}  {result.description} (given {result.provider_state})")
        for mismatch in result.mismatches:
            print(f"      {mismatch.describe()}")
    return all(result.passed for result in results)


def main():
    """Main function for CLI."""
    contract_config = ContractConfig()
    inventory_config = InventoryConfig()
    default_pact = f"{contract_config.sp_pact_dir}/{contract_config.sp_pact_consumer}-{contract_config.sp_pact_provider}.json"

    parser = argparse.ArgumentParser(description="Verify the System service against consumer pacts")
    parser.add_argument("--pact-file", default=default_pact, help="Pact file to replay")
    parser.add_argument("--base-url", default=inventory_config.sp_system_service_url, help="System service URL")
    parser.add_argument("--timeout", type=float, default=inventory_config.sp_http_timeout, help="Request timeout")

    args = parser.parse_args()

    configure_logging("verify_provider", contract_config.sp_log_level, contract_config.sp_log_format)

    try:
        success = verify(args.pact_file, args.base_url, args.timeout)
    except (ContractError, httpx.HTTPError) as e:
        logger.error("Provider verification could not run", pact_file=args.pact_file, error=str(e))
        sys.exit(2)

    sys.exit(0 if success else 1)


if __name__ == "__main__":
    main()
