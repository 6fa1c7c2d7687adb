"""Fixtures for contract tests."""

import os

import pytest

from libs.common.config import ContractConfig
from libs.contract import MockProvider, PactBuilder


@pytest.fixture(scope="session")
def contract_config():
    """Get contract configuration."""
    return ContractConfig()


@pytest.fixture(scope="session")
def pact_dir(contract_config, tmp_path_factory):
    """Pact output directory.

    Uses ``SP_PACT_DIR`` when set so a contract run can publish its pacts;
    otherwise pacts go to a throwaway directory.
    """
    if os.environ.get("SP_PACT_DIR"):
        return contract_config.sp_pact_dir
    return str(tmp_path_factory.mktemp("pacts"))


@pytest.fixture
def pact_builder(contract_config):
    return PactBuilder(contract_config.sp_pact_consumer, contract_config.sp_pact_provider)


@pytest.fixture
def mock_provider(contract_config, pact_dir):
    """Isolated stand-in server for one test; writes verified pacts on teardown."""
    provider = MockProvider(
        consumer=contract_config.sp_pact_consumer,
        provider=contract_config.sp_pact_provider,
        host=contract_config.sp_mock_host,
        pact_dir=pact_dir,
        startup_timeout=contract_config.sp_mock_startup_timeout,
    )
    with provider:
        yield provider
    provider.write_pact()
