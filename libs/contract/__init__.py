"""Consumer-driven contract tooling.

- ``builder``: fluent ``PactBuilder`` producing immutable interactions.
- ``matchers``: type and decimal matchers plus body comparison.
- ``mock_provider``: stand-in HTTP server used by consumer tests.
- ``verifier``: replays interactions against a real provider.
"""

from .builder import PactBuilder
from .errors import ContractError, MockServerError, PactVerificationError
from .matchers import decimal_type, integer_type, like
from .mock_provider import MockProvider
from .models import Interaction, Mismatch, MismatchKind, Pact, VerificationResult
from .verifier import ProviderVerifier

__all__ = [
    "ContractError",
    "Interaction",
    "Mismatch",
    "MismatchKind",
    "MockProvider",
    "MockServerError",
    "Pact",
    "PactBuilder",
    "PactVerificationError",
    "ProviderVerifier",
    "VerificationResult",
    "decimal_type",
    "integer_type",
    "like",
]
