"""
Base protocols and errors for the connector's adapters.

Adapters stay narrow: the API client performs the single HTTP call, the
credential store persists two strings. Orchestration (field resolution,
mapping, error translation) lives in the service layer.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Optional, Protocol


class AdapterError(RuntimeError):
    """Raised when an adapter or service encounters a non-recoverable error."""


class CredentialError(AdapterError):
    """Raised when data is requested without a complete username/token pair."""


class RequestError(AdapterError):
    """Raised when a host request is malformed."""


class ServiceCommunicationError(AdapterError):
    """
    Terminal failure of a fetch.

    ``user_message`` is safe to show to any user; ``debug_message`` carries the
    underlying cause and is reserved for admins and logs.
    """

    def __init__(self, user_message: str, debug_message: str) -> None:
        super().__init__(user_message)
        self.user_message = user_message
        self.debug_message = debug_message

    def to_dict(self, *, include_debug: bool = False) -> Mapping[str, str]:
        payload = {"errorCode": "SERVICE_COMMUNICATION", "message": self.user_message}
        if include_debug:
            payload["debug"] = self.debug_message
        return payload


@dataclass(slots=True)
class VerificationResult:
    """
    Structured response returned by adapter verification routines.

    Attributes
    ----------
    success:
        Indicates whether the verification succeeded.
    message:
        Human-readable summary.
    details:
        Optional structured metadata such as the number of audits seen.
    """

    success: bool
    message: str
    details: Optional[Mapping[str, object]] = None


class DataSourceAdapter(Protocol):
    """Protocol implemented by data source adapters."""

    def verify(self) -> VerificationResult:
        """Perform a lightweight connectivity check."""

    @property
    def source_id(self) -> str:
        """Identifier of the upstream source."""
