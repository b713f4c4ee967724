"""
Error taxonomy for the library refresh pipeline.

Collaborators (catalog search, remote listing) report failures through
the tagged ``Result`` type instead of raising; the exceptions below are
reserved for the orchestrator's own control flow.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Generic, Optional, TypeVar

T = TypeVar("T")


class ErrorKind(str, Enum):
    """Classification of collaborator failures."""

    NOT_FOUND = "not_found"  # Request succeeded, nothing matched
    HTTP_ERROR = "http_error"  # Non-success HTTP / API status
    NETWORK_ERROR = "network_error"  # Connection failures, timeouts
    UNAUTHORIZED = "unauthorized"  # Bad credentials or API key
    INVALID_RESPONSE = "invalid_response"  # Payload could not be parsed


class OpenShelfError(Exception):
    """Base class for all OpenShelf errors."""


class ConfigurationError(OpenShelfError):
    """Storage backend or catalog credentials are missing or incomplete."""


class ListingError(OpenShelfError):
    """The remote directory listing returned a non-success response."""

    def __init__(self, message: str, code: Optional[int] = None, page: Optional[int] = None):
        super().__init__(message)
        self.code = code
        self.page = page


class ResolutionFailure(OpenShelfError):
    """A single folder could not be matched against the catalog."""

    def __init__(self, folder_name: str, message: str):
        super().__init__(f"{folder_name}: {message}")
        self.folder_name = folder_name


class SeasonLookupFailure(ResolutionFailure):
    """Season details could not be fetched; series-level data is kept."""


class PersistenceError(OpenShelfError):
    """Writing the finished index or its side effects failed."""


@dataclass(frozen=True)
class Result(Generic[T]):
    """
    Tagged result returned at collaborator boundaries.

    Either ``value`` is set (success) or ``kind``/``message`` describe
    the failure.
    """

    value: Optional[T] = None
    kind: Optional[ErrorKind] = None
    message: str = ""

    @property
    def is_ok(self) -> bool:
        return self.kind is None and self.value is not None

    @classmethod
    def ok(cls, value: T) -> "Result[T]":
        return cls(value=value)

    @classmethod
    def err(cls, kind: ErrorKind, message: str = "") -> "Result[T]":
        return cls(kind=kind, message=message or kind.value)

    def __repr__(self) -> str:
        if self.is_ok:
            return f"Result.ok({self.value!r})"
        return f"Result.err({self.kind}, {self.message!r})"
