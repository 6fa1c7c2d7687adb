"""Fluent builders for contracts.

Usage
>>> builder = PactBuilder("Inventory", "System")
>>> interaction = (
...     builder.given("server name is defaultServer")
...     .upon_receiving("a request for server name")
...     .with_request("GET", "/properties/key/wlp.server.name")
...     .will_respond_with(200, body=[{"wlp.server.name": "defaultServer"}])
... )

Every step returns a new builder, so a partially built chain can be reused
without one scenario leaking into another.
"""

from dataclasses import dataclass, replace
from typing import Any, Mapping, Optional

from .errors import ContractError
from .matchers import extract
from .models import Interaction, Pact

SUPPORTED_METHODS = ("GET",)


@dataclass(frozen=True)
class InteractionBuilder:
    """Accumulates one interaction; finished by ``will_respond_with``."""
    consumer: str
    provider: str
    provider_state: Optional[str] = None
    description: Optional[str] = None
    method: Optional[str] = None
    path: Optional[str] = None
    query: Optional[str] = None

    def given(self, provider_state: str) -> "InteractionBuilder":
        return replace(self, provider_state=provider_state)

    def upon_receiving(self, description: str) -> "InteractionBuilder":
        return replace(self, description=description)

    def with_request(self, method: str, path: str, query: Optional[str] = None) -> "InteractionBuilder":
        method = method.upper()
        if method not in SUPPORTED_METHODS:
            raise ContractError(f"Unsupported request method {method}; expected one of {SUPPORTED_METHODS}")
        if not path.startswith("/"):
            raise ContractError(f"Request path must be absolute, got {path!r}")
        return replace(self, method=method, path=path, query=query)

    def will_respond_with(
        self,
        status: int,
        headers: Optional[Mapping[str, str]] = None,
        body: Any = None,
    ) -> Interaction:
        """Finish the interaction with its canned response.

        ``body`` may contain matchers; they are split into the example body
        and the matching rules here.
        """
        if not self.description:
            raise ContractError("Interaction needs a description; call upon_receiving() first")
        if self.method is None or self.path is None:
            raise ContractError(f"Interaction '{self.description}' has no request; call with_request() first")

        example, rules = (None, {}) if body is None else extract(body)
        return Interaction(
            description=self.description,
            provider_state=self.provider_state,
            request_method=self.method,
            request_path=self.path,
            request_query=self.query,
            response_status=status,
            response_headers=dict(headers or {}),
            response_body=example,
            matching_rules=rules,
        )


class PactBuilder:
    """Entry point binding a consumer and provider pair."""

    def __init__(self, consumer: str, provider: str):
        self.consumer = consumer
        self.provider = provider

    def _start(self) -> InteractionBuilder:
        return InteractionBuilder(self.consumer, self.provider)

    def given(self, provider_state: str) -> InteractionBuilder:
        return self._start().given(provider_state)

    def upon_receiving(self, description: str) -> InteractionBuilder:
        return self._start().upon_receiving(description)

    def build(self, *interactions: Interaction) -> Pact:
        pact = Pact(self.consumer, self.provider)
        for interaction in interactions:
            pact = pact.with_interaction(interaction)
        return pact
