"""Provider verification of the Inventory pacts against the System service."""

import pytest
from fastapi.testclient import TestClient

from libs.common.config import SystemConfig
from libs.common.metrics import MetricsCollector
from libs.contract import MismatchKind, Pact, ProviderVerifier
from service_system.app.main import create_app
from service_system.app.properties import PropertyTable
from tests.contract.system_pacts import (
    DEFAULT_DIRECTORY_STATE,
    SERVER_NAME_STATE,
    default_directory_pact,
    invalid_property_pact,
    server_name_pact,
    version_pact,
)

VERSION_PATH = "$.body['system.properties.version']"


@pytest.fixture
def system_app():
    config = SystemConfig(sp_server_name="someOtherServer", sp_user_dir_is_default=False)
    return create_app(
        config,
        properties=PropertyTable({"java.vendor": "none"}),
        metrics_collector=MetricsCollector("test-system"),
    )


@pytest.fixture
def verifier(system_app):
    """Verifier whose state handlers swap in the table each state needs."""

    def server_is_default():
        config = SystemConfig(sp_server_name="defaultServer")
        system_app.state.properties = PropertyTable.from_config(config)

    def directory_is_default():
        config = SystemConfig(sp_user_dir_is_default=True)
        system_app.state.properties = PropertyTable.from_config(config)

    return ProviderVerifier(
        TestClient(system_app),
        state_handlers={
            SERVER_NAME_STATE: server_is_default,
            DEFAULT_DIRECTORY_STATE: directory_is_default,
        },
    )


@pytest.mark.contract
class TestSystemProviderPact:
    """Replaying consumer contracts against the real property resource."""

    def test_server_name_verified(self, verifier, pact_builder):
        result = verifier.verify_interaction(server_name_pact(pact_builder))
        assert result.passed, result.mismatches

    def test_default_directory_verified(self, verifier, pact_builder):
        result = verifier.verify_interaction(default_directory_pact(pact_builder))
        assert result.passed, result.mismatches

    def test_invalid_property_verified(self, verifier, pact_builder):
        result = verifier.verify_interaction(invalid_property_pact(pact_builder))
        assert result.passed, result.mismatches

    def test_state_handler_required_for_server_name(self, system_app, pact_builder):
        result = ProviderVerifier(TestClient(system_app)).verify_interaction(server_name_pact(pact_builder))

        assert not result.passed
        assert [m.kind for m in result.mismatches] == [MismatchKind.STATUS, MismatchKind.BODY]

    def test_version_contract_fails_against_resource(self, verifier, pact_builder):
        """The resource reports an empty version while consumers expect 1.1."""
        result = verifier.verify_interaction(version_pact(pact_builder))

        assert not result.passed
        mismatches = result.mismatches_at(VERSION_PATH)
        assert len(mismatches) == 1
        assert mismatches[0].kind == MismatchKind.BODY
        assert mismatches[0].actual == ""
        assert [m.kind for m in result.mismatches] == [MismatchKind.BODY]

        with pytest.raises(AssertionError, match="a request for the version"):
            result.raise_for_mismatches()

    def test_written_pact_verifies_from_file(self, verifier, pact_builder, tmp_path):
        pact = pact_builder.build(
            server_name_pact(pact_builder),
            default_directory_pact(pact_builder),
            version_pact(pact_builder),
            invalid_property_pact(pact_builder),
        )
        loaded = Pact.load(pact.write(tmp_path))

        results = {r.description: r.passed for r in verifier.verify_pact(loaded)}

        assert results == {
            "a request for server name": True,
            "a request to check for the default directory": True,
            "a request for the version": False,
            "a request with an invalid property": True,
        }
