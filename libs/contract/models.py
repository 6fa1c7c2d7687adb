"""Contract data model.

An ``Interaction`` is one expected request and the canned response the
provider owes for it. A ``Pact`` groups the interactions one consumer expects
from one provider and round-trips through the Pact v2 JSON file format.
``Mismatch`` and ``VerificationResult`` describe what happened when traffic
was checked against those expectations.

All records are frozen; builders in ``libs.contract.builder`` create them and
nothing mutates them afterwards.
"""

import copy
import json
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

import structlog

from .errors import ContractError, PactVerificationError

logger = structlog.get_logger("contract.models")

PACT_SPECIFICATION_VERSION = "2.0.0"
JSON_CONTENT_TYPE = "application/json"


class MismatchKind(Enum):
    """Categories of contract violations."""
    STATUS = "status"
    HEADER = "header"
    BODY = "body"
    REQUEST = "request"
    MISSING = "missing"


@dataclass(frozen=True)
class Mismatch:
    """One difference between expected and observed traffic."""
    kind: MismatchKind
    message: str
    path: str = ""
    expected: Any = None
    actual: Any = None

    def describe(self) -> str:
        location = f" at {self.path}" if self.path else ""
        return f"[{self.kind.value}]{location} {self.message}"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind.value,
            "message": self.message,
            "path": self.path,
            "expected": self.expected,
            "actual": self.actual,
        }


@dataclass(frozen=True)
class Interaction:
    """An expected request paired with its canned response.

    ``response_body`` holds the example body (``None`` when the contract
    declares no body). ``matching_rules`` maps JSON paths such as
    ``$.body['system.properties.version']`` to Pact v2 rules that relax exact
    comparison for that node.
    """
    description: str
    provider_state: Optional[str]
    request_method: str
    request_path: str
    response_status: int
    request_query: Optional[str] = None
    response_headers: Mapping[str, str] = field(default_factory=dict)
    response_body: Any = None
    matching_rules: Mapping[str, Mapping[str, str]] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "request_method", self.request_method.upper())
        object.__setattr__(self, "response_headers", MappingProxyType(dict(self.response_headers)))
        object.__setattr__(
            self,
            "matching_rules",
            MappingProxyType({path: dict(rule) for path, rule in self.matching_rules.items()}),
        )
        object.__setattr__(self, "response_body", copy.deepcopy(self.response_body))
        # Replay and comparison read this snapshot, never the live body object.
        try:
            rendered = b"" if self.response_body is None else json.dumps(
                self.response_body,
                ensure_ascii=False,
                separators=(",", ":"),
            ).encode("utf-8")
        except (TypeError, ValueError) as e:
            raise ContractError(f"Response body of '{self.description}' is not JSON: {e}") from e
        object.__setattr__(self, "_rendered_body", rendered)

    @property
    def has_body(self) -> bool:
        return self.response_body is not None

    def expected_body(self) -> Any:
        """A fresh copy of the body as it was when the interaction was built."""
        if not self.has_body:
            return None
        return json.loads(self._rendered_body)

    def matches_request(self, method: str, path: str, query: Optional[str] = None) -> bool:
        """Whether a request is the one this interaction describes.

        Method and path must be equal. The query string only takes part when
        the interaction declares one.
        """
        if method.upper() != self.request_method or path != self.request_path:
            return False
        if self.request_query is not None:
            return (query or "") == self.request_query
        return True

    def render_body(self) -> bytes:
        """Serialize the canned body exactly as the stand-in server sends it."""
        return self._rendered_body

    def render_headers(self) -> Dict[str, str]:
        headers = dict(self.response_headers)
        if self.has_body and not any(name.lower() == "content-type" for name in headers):
            headers["Content-Type"] = JSON_CONTENT_TYPE
        return headers

    def to_dict(self) -> Dict[str, Any]:
        """Pact v2 representation of the interaction."""
        request: Dict[str, Any] = {"method": self.request_method, "path": self.request_path}
        if self.request_query is not None:
            request["query"] = self.request_query

        response: Dict[str, Any] = {"status": self.response_status}
        if self.response_headers:
            response["headers"] = dict(self.response_headers)
        if self.has_body:
            response["body"] = self.expected_body()
        if self.matching_rules:
            response["matchingRules"] = {path: dict(rule) for path, rule in self.matching_rules.items()}

        data: Dict[str, Any] = {"description": self.description}
        if self.provider_state:
            data["providerState"] = self.provider_state
        data["request"] = request
        data["response"] = response
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Interaction":
        try:
            request = data["request"]
            response = data["response"]
            return cls(
                description=data["description"],
                provider_state=data.get("providerState"),
                request_method=request["method"],
                request_path=request["path"],
                request_query=request.get("query"),
                response_status=int(response["status"]),
                response_headers=response.get("headers", {}),
                response_body=response.get("body"),
                matching_rules=response.get("matchingRules", {}),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise ContractError(f"Malformed interaction: {e}") from e


@dataclass(frozen=True)
class Pact:
    """The interactions one consumer expects from one provider."""
    consumer: str
    provider: str
    interactions: Tuple[Interaction, ...] = ()

    @property
    def file_name(self) -> str:
        return f"{self.consumer}-{self.provider}.json"

    def with_interaction(self, interaction: Interaction) -> "Pact":
        """Return a copy holding ``interaction``, replacing any with the same description."""
        kept = tuple(i for i in self.interactions if i.description != interaction.description)
        return Pact(self.consumer, self.provider, kept + (interaction,))

    def interaction(self, description: str) -> Interaction:
        for candidate in self.interactions:
            if candidate.description == description:
                return candidate
        raise KeyError(description)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "consumer": {"name": self.consumer},
            "provider": {"name": self.provider},
            "interactions": [i.to_dict() for i in self.interactions],
            "metadata": {"pactSpecification": {"version": PACT_SPECIFICATION_VERSION}},
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), indent=2, ensure_ascii=False)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Pact":
        try:
            consumer = data["consumer"]["name"]
            provider = data["provider"]["name"]
            raw_interactions = data.get("interactions", [])
        except (KeyError, TypeError) as e:
            raise ContractError(f"Malformed pact: {e}") from e
        return cls(consumer, provider, tuple(Interaction.from_dict(i) for i in raw_interactions))

    @classmethod
    def load(cls, pact_file: Union[str, Path]) -> "Pact":
        """Read a pact file written by ``write``."""
        path = Path(pact_file)
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            raise ContractError(f"Cannot read pact file {path}: {e}") from e
        return cls.from_dict(data)

    def write(self, pact_dir: Union[str, Path]) -> Path:
        """Write the pact into ``pact_dir``, merging with an existing file.

        Interactions already on disk are kept unless this pact carries one
        with the same description.
        """
        directory = Path(pact_dir)
        directory.mkdir(parents=True, exist_ok=True)
        path = directory / self.file_name

        merged = Pact(self.consumer, self.provider)
        if path.exists():
            merged = Pact.load(path)
        for interaction in self.interactions:
            merged = merged.with_interaction(interaction)

        path.write_text(merged.to_json() + "\n", encoding="utf-8")
        logger.info(
            "Pact file written",
            path=str(path),
            consumer=self.consumer,
            provider=self.provider,
            interactions=len(merged.interactions),
        )
        return path


@dataclass(frozen=True)
class VerificationResult:
    """Outcome of checking one interaction against observed traffic."""
    description: str
    provider_state: Optional[str]
    mismatches: Tuple[Mismatch, ...] = ()

    @property
    def passed(self) -> bool:
        return not self.mismatches

    def mismatches_at(self, path: str) -> List[Mismatch]:
        return [m for m in self.mismatches if m.path == path]

    def raise_for_mismatches(self) -> None:
        if self.mismatches:
            raise PactVerificationError(
                f"Verification failed for '{self.description}'",
                self.mismatches,
            )
