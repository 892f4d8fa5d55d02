"""
Explicit success/failure values for algorithmic entry points.

Algorithms return Ok(value) or Err(GraphError) instead of raising, so a
caller can tell a structurally invalid request (Err) apart from a valid
request with an empty answer (Ok(None)) and a present answer (Ok(value)).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Generic, TypeVar, Union

T = TypeVar("T")


class ErrorKind(str, Enum):
    """Error taxonomy shared by all algorithmic components."""

    NOT_FOUND = "not-found"
    INVALID_CONFIGURATION = "invalid-configuration"
    EXTRACTION_PARTIAL_FAILURE = "extraction-partial-failure"


@dataclass(frozen=True)
class GraphError:
    """
    Describes why a request could not be served.

    Attributes:
        kind: Error category
        message: Human-readable description
        ids: Offending node ids, if any
    """

    kind: ErrorKind
    message: str
    ids: tuple[str, ...] = field(default_factory=tuple)

    @classmethod
    def not_found(cls, *ids: str, role: str = "Node") -> GraphError:
        quoted = ", ".join(f"'{i}'" for i in ids)
        return cls(ErrorKind.NOT_FOUND, f"{role} {quoted} not found in graph", tuple(ids))

    @classmethod
    def invalid(cls, message: str) -> GraphError:
        return cls(ErrorKind.INVALID_CONFIGURATION, message)


@dataclass(frozen=True)
class Ok(Generic[T]):
    """Successful result carrying a value (which may itself be None)."""

    value: T
    ok: bool = field(default=True, init=False)

    def unwrap(self) -> T:
        return self.value


@dataclass(frozen=True)
class Err:
    """Failed result carrying a GraphError."""

    error: GraphError
    ok: bool = field(default=False, init=False)

    def unwrap(self):
        raise ValueError(f"Called unwrap() on Err: {self.error.message}")


Result = Union[Ok[T], Err]
