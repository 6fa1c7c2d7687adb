"""Body matchers and comparison.

Templates passed to ``will_respond_with`` are ordinary JSON values that may
contain ``Matcher`` nodes. ``extract`` splits a template into the example
body the stand-in server sends and the Pact v2 matching rules the provider is
held to. ``compare_body`` checks an observed body against an example plus
rules.

Comparison semantics
- objects: every expected key must be present; extra keys are allowed
- arrays: same length, compared element by element
- scalars: same JSON type and equal value, unless a rule relaxes it
"""

import re
from typing import Any, Dict, List, Mapping, Tuple

from .errors import ContractError
from .models import Mismatch, MismatchKind

_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


class Matcher:
    """A template node matched by rule instead of by value."""

    rule: Dict[str, str] = {}

    def __init__(self, example: Any):
        self.example = example

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.example!r})"


class Like(Matcher):
    """Any value of the same JSON type as the example."""
    rule = {"match": "type"}


class DecimalType(Matcher):
    """Any number with a fractional representation."""
    rule = {"match": "decimal"}

    def __init__(self, example: float):
        if isinstance(example, bool) or not isinstance(example, (int, float)):
            raise ContractError(f"decimal_type needs a number, got {example!r}")
        super().__init__(float(example))


class IntegerType(Matcher):
    """Any integral number."""
    rule = {"match": "integer"}

    def __init__(self, example: int):
        if isinstance(example, bool) or not isinstance(example, int):
            raise ContractError(f"integer_type needs an int, got {example!r}")
        super().__init__(example)


def like(example: Any) -> Like:
    return Like(example)


def decimal_type(example: float) -> DecimalType:
    return DecimalType(example)


def integer_type(example: int) -> IntegerType:
    return IntegerType(example)


def json_type(value: Any) -> str:
    """Name of the JSON type ``value`` would serialize as."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, (list, tuple)):
        return "array"
    if isinstance(value, Mapping):
        return "object"
    raise ContractError(f"Value {value!r} is not JSON-shaped")


def child_path(parent: str, key: Any) -> str:
    """JSON path of a child node, using bracket notation for non-identifiers."""
    if isinstance(key, int):
        return f"{parent}[{key}]"
    if _IDENTIFIER.match(key):
        return f"{parent}.{key}"
    escaped = key.replace("'", "\\'")
    return f"{parent}['{escaped}']"


def extract(template: Any, path: str = "$.body") -> Tuple[Any, Dict[str, Dict[str, str]]]:
    """Split a body template into an example body and its matching rules."""
    rules: Dict[str, Dict[str, str]] = {}

    def walk(node: Any, node_path: str) -> Any:
        if isinstance(node, Matcher):
            rules[node_path] = dict(node.rule)
            return walk(node.example, node_path)
        if isinstance(node, Mapping):
            return {key: walk(value, child_path(node_path, key)) for key, value in node.items()}
        if isinstance(node, (list, tuple)):
            return [walk(value, child_path(node_path, index)) for index, value in enumerate(node)]
        json_type(node)
        return node

    example = walk(template, path)
    return example, rules


def rule_accepts(rule: Mapping[str, str], expected: Any, actual: Any) -> bool:
    match = rule.get("match")
    if match == "type":
        return json_type(expected) == json_type(actual)
    if match == "decimal":
        return isinstance(actual, float)
    if match == "integer":
        return isinstance(actual, int) and not isinstance(actual, bool)
    raise ContractError(f"Unsupported matching rule {dict(rule)!r}")


def compare_body(
    expected: Any,
    actual: Any,
    rules: Mapping[str, Mapping[str, str]],
    path: str = "$.body",
) -> List[Mismatch]:
    """Compare an observed body with an example body and its rules."""
    rule = rules.get(path)
    if rule is not None and rule.get("match") != "type":
        if rule_accepts(rule, expected, actual):
            return []
        return [Mismatch(
            MismatchKind.BODY,
            f"Expected a value matching {rule.get('match')} but got {actual!r}",
            path=path,
            expected=expected,
            actual=actual,
        )]

    expected_type = json_type(expected)
    actual_type = json_type(actual)
    if expected_type != actual_type:
        return [Mismatch(
            MismatchKind.BODY,
            f"Expected {expected_type} but got {actual_type} ({actual!r})",
            path=path,
            expected=expected,
            actual=actual,
        )]

    if expected_type == "object":
        mismatches: List[Mismatch] = []
        for key, value in expected.items():
            key_path = child_path(path, key)
            if key not in actual:
                mismatches.append(Mismatch(
                    MismatchKind.BODY,
                    f"Missing key {key!r}",
                    path=key_path,
                    expected=value,
                ))
                continue
            mismatches.extend(compare_body(value, actual[key], rules, key_path))
        return mismatches

    if expected_type == "array":
        if len(expected) != len(actual):
            return [Mismatch(
                MismatchKind.BODY,
                f"Expected {len(expected)} element(s) but got {len(actual)}",
                path=path,
                expected=expected,
                actual=actual,
            )]
        mismatches = []
        for index, (item, observed) in enumerate(zip(expected, actual)):
            mismatches.extend(compare_body(item, observed, rules, child_path(path, index)))
        return mismatches

    if rule is not None or expected == actual:
        return []
    return [Mismatch(
        MismatchKind.BODY,
        f"Expected {expected!r} but got {actual!r}",
        path=path,
        expected=expected,
        actual=actual,
    )]
