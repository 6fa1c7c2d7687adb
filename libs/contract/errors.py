"""Exceptions raised by the contract tooling."""

from typing import Iterable, Tuple, TYPE_CHECKING

if TYPE_CHECKING:
    from .models import Mismatch


class ContractError(Exception):
    """A contract could not be built, loaded or served."""


class MockServerError(ContractError):
    """The stand-in server failed to start or stop."""


class PactVerificationError(AssertionError):
    """Observed traffic disagreed with the registered contracts.

    Subclasses ``AssertionError`` so pytest reports it as a plain test
    failure. ``mismatches`` keeps the individual findings for callers that
    want to inspect them.
    """

    def __init__(self, message: str, mismatches: Iterable["Mismatch"] = ()):
        self.mismatches: Tuple["Mismatch", ...] = tuple(mismatches)
        details = "\n".join(f"  - {mismatch.describe()}" for mismatch in self.mismatches)
        super().__init__(f"{message}\n{details}" if details else message)
