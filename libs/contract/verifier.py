"""Provider-side verification.

Replays recorded interactions against a real provider and reports, per
interaction, whether the provider's response honours the contract. Works
with any ``httpx.Client``: FastAPI's ``TestClient`` for an in-process app or
a plain client pointed at a deployed service.
"""

import json
from typing import Callable, List, Mapping, Optional

import httpx
import structlog

from .matchers import compare_body
from .models import Interaction, Mismatch, MismatchKind, Pact, VerificationResult

logger = structlog.get_logger("contract.verifier")

StateHandler = Callable[[], None]


def _media_type(value: str) -> str:
    return value.split(";", 1)[0].strip().lower()


def compare_response(
    interaction: Interaction,
    status: int,
    headers: Mapping[str, str],
    body: bytes,
) -> List[Mismatch]:
    """Compare an observed response with the interaction's expectations.

    Only headers named by the contract are checked; ``Content-Type`` is
    compared by media type so charset parameters do not count. A contract
    without a body does not constrain the observed body.
    """
    mismatches: List[Mismatch] = []

    if status != interaction.response_status:
        mismatches.append(Mismatch(
            MismatchKind.STATUS,
            f"Expected status {interaction.response_status} but got {status}",
            expected=interaction.response_status,
            actual=status,
        ))

    observed_headers = {name.lower(): value for name, value in headers.items()}
    for name, expected_value in interaction.response_headers.items():
        actual_value = observed_headers.get(name.lower())
        if name.lower() == "content-type" and actual_value is not None:
            matched = _media_type(actual_value) == _media_type(expected_value)
        else:
            matched = actual_value == expected_value
        if not matched:
            mismatches.append(Mismatch(
                MismatchKind.HEADER,
                f"Expected header {name}: {expected_value} but got {actual_value!r}",
                path=name,
                expected=expected_value,
                actual=actual_value,
            ))

    if not interaction.has_body:
        return mismatches

    if not body:
        mismatches.append(Mismatch(
            MismatchKind.BODY,
            "Expected a body but the response was empty",
            path="$.body",
            expected=interaction.expected_body(),
            actual="",
        ))
        return mismatches

    try:
        actual_body = json.loads(body)
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        mismatches.append(Mismatch(
            MismatchKind.BODY,
            f"Response body is not valid JSON: {e}",
            path="$.body",
            expected=interaction.expected_body(),
            actual=body.decode("utf-8", errors="replace"),
        ))
        return mismatches

    mismatches.extend(compare_body(interaction.expected_body(), actual_body, interaction.matching_rules))
    return mismatches


class ProviderVerifier:
    """Replays interactions against a provider.

    Parameters
    - client: HTTP client whose base URL points at the provider
    - state_handlers: Provider state label -> callable that puts the provider
      into that state before the request is sent
    """

    def __init__(
        self,
        client: httpx.Client,
        state_handlers: Optional[Mapping[str, StateHandler]] = None,
    ):
        self.client = client
        self.state_handlers = dict(state_handlers or {})

    def _enter_state(self, state: Optional[str]) -> None:
        if not state:
            return
        handler = self.state_handlers.get(state)
        if handler is None:
            logger.warning("No handler for provider state", provider_state=state)
            return
        handler()

    def verify_interaction(self, interaction: Interaction) -> VerificationResult:
        self._enter_state(interaction.provider_state)

        url = interaction.request_path
        if interaction.request_query:
            url = f"{url}?{interaction.request_query}"
        response = self.client.request(interaction.request_method, url)

        mismatches = compare_response(
            interaction,
            response.status_code,
            response.headers,
            response.content,
        )
        result = VerificationResult(
            description=interaction.description,
            provider_state=interaction.provider_state,
            mismatches=tuple(mismatches),
        )

        if result.passed:
            logger.info("Interaction verified", description=interaction.description)
        else:
            logger.warning(
                "Interaction failed verification",
                description=interaction.description,
                provider_state=interaction.provider_state,
                mismatches=[m.describe() for m in mismatches],
            )
        return result

    def verify_pact(self, pact: Pact) -> List[VerificationResult]:
        logger.info(
            "Verifying pact",
            consumer=pact.consumer,
            provider=pact.provider,
            interactions=len(pact.interactions),
        )
        return [self.verify_interaction(interaction) for interaction in pact.interactions]
