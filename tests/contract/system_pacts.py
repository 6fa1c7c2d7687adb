"""Contracts the Inventory consumer holds the System provider to."""

from libs.contract import Interaction, PactBuilder, decimal_type

JSON_HEADERS = {"Content-Type": "application/json"}

SERVER_NAME_STATE = "server name is defaultServer"
DEFAULT_DIRECTORY_STATE = "default directory is true"
VERSION_STATE = "version is 1.1"
INVALID_PROPERTY_STATE = "invalid property"


def server_name_pact(builder: PactBuilder) -> Interaction:
    return (
        builder.given(SERVER_NAME_STATE)
        .upon_receiving("a request for server name")
        .with_request("GET", "/properties/key/wlp.server.name")
        .will_respond_with(
            200,
            headers=JSON_HEADERS,
            body=[{"wlp.server.name": "defaultServer"}],
        )
    )


def default_directory_pact(builder: PactBuilder) -> Interaction:
    return (
        builder.given(DEFAULT_DIRECTORY_STATE)
        .upon_receiving("a request to check for the default directory")
        .with_request("GET", "/properties/key/wlp.user.dir.isDefault")
        .will_respond_with(
            200,
            headers=JSON_HEADERS,
            body=[{"wlp.user.dir.isDefault": "true"}],
        )
    )


def version_pact(builder: PactBuilder) -> Interaction:
    return (
        builder.given(VERSION_STATE)
        .upon_receiving("a request for the version")
        .with_request("GET", "/properties/version")
        .will_respond_with(
            200,
            headers=JSON_HEADERS,
            body={"system.properties.version": decimal_type(1.1)},
        )
    )


def invalid_property_pact(builder: PactBuilder) -> Interaction:
    return (
        builder.given(INVALID_PROPERTY_STATE)
        .upon_receiving("a request with an invalid property")
        .with_request("GET", "/properties/invalidProperty")
        .will_respond_with(404)
    )


ALL_PACTS = (server_name_pact, default_directory_pact, version_pact, invalid_property_pact)
