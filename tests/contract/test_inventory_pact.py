"""Consumer contract tests for the Inventory client against a stand-in System."""

import json

import httpx
import pytest

from libs.contract import Pact
from service_inventory.app import InventoryClient
from tests.contract.system_pacts import (
    default_directory_pact,
    invalid_property_pact,
    server_name_pact,
    version_pact,
)


@pytest.mark.contract
class TestInventoryPact:
    """The Inventory client receives exactly what each contract promises."""

    def test_server_name(self, mock_provider, pact_builder):
        with mock_provider.verifying(server_name_pact(pact_builder)):
            with InventoryClient(mock_provider.uri) as client:
                server_name = client.get_server_name()

        assert server_name == '[{"wlp.server.name":"defaultServer"}]', \
            "Expected server name does not match"

    def test_edition(self, mock_provider, pact_builder):
        with mock_provider.verifying(default_directory_pact(pact_builder)):
            with InventoryClient(mock_provider.uri) as client:
                edition = client.get_edition()

        assert edition == '[{"wlp.user.dir.isDefault":"true"}]', \
            "Expected edition does not match"

    def test_version(self, mock_provider, pact_builder):
        with mock_provider.verifying(version_pact(pact_builder)):
            with InventoryClient(mock_provider.uri) as client:
                version = client.get_version()

        assert version == '{"system.properties.version":1.1}', \
            "Expected version does not match"

    def test_version_is_numeric_not_string(self, mock_provider, pact_builder):
        with mock_provider.verifying(version_pact(pact_builder)):
            with InventoryClient(mock_provider.uri) as client:
                version = client.get_version()

        assert version != '{"system.properties.version":"1.1"}'
        assert isinstance(json.loads(version)["system.properties.version"], float)

    def test_invalid_property(self, mock_provider, pact_builder):
        with mock_provider.verifying(invalid_property_pact(pact_builder)):
            with InventoryClient(mock_provider.uri) as client:
                invalid = client.get_invalid_property()
            response = httpx.get(f"{mock_provider.uri}/properties/invalidProperty")

        assert invalid == "", "Expected invalid property response does not match"
        assert response.status_code == 404
        assert response.content == b""

    def test_json_content_type_declared(self, mock_provider, pact_builder):
        with mock_provider.verifying(server_name_pact(pact_builder)):
            response = httpx.get(f"{mock_provider.uri}/properties/key/wlp.server.name")

        assert response.headers["content-type"] == "application/json"

    def test_canned_response_replays_identically(self, mock_provider, pact_builder):
        with mock_provider.verifying(server_name_pact(pact_builder)):
            with InventoryClient(mock_provider.uri) as client:
                bodies = [client.get_server_name() for _ in range(5)]

        assert len(set(bodies)) == 1
        assert bodies[0] == '[{"wlp.server.name":"defaultServer"}]'


@pytest.mark.contract
def test_verified_interactions_written_to_pact_file(mock_provider, pact_builder, tmp_path):
    with mock_provider.verifying(server_name_pact(pact_builder), version_pact(pact_builder)):
        with InventoryClient(mock_provider.uri) as client:
            client.get_server_name()
            client.get_version()

    mock_provider.pact_dir = str(tmp_path)
    pact_file = mock_provider.write_pact()

    assert pact_file.name == "Inventory-System.json"
    pact = Pact.load(pact_file)
    assert pact.consumer == "Inventory"
    assert pact.provider == "System"
    version = pact.interaction("a request for the version")
    assert version.provider_state == "version is 1.1"
    assert version.matching_rules == {"$.body['system.properties.version']": {"match": "decimal"}}

    raw = json.loads(pact_file.read_text())
    assert raw["metadata"]["pactSpecification"]["version"] == "2.0.0"
