"""
Columbo reporting API client and verification adapter.

The audits endpoint lives at ``<base_url>/<account id>/audits`` and is
authenticated with HTTP Basic using the account's username and API token.
"""

from __future__ import annotations

import base64
from dataclasses import dataclass, field
from typing import Any, List, MutableMapping, Optional

from ...config import DEFAULT_BASE_URL
from ..base import DataSourceAdapter, VerificationResult
from .base import DEFAULT_MAX_ATTEMPTS, DEFAULT_TIMEOUT, APIError, BaseAPIClient


def basic_auth_header(username: str, token: str) -> str:
    """Return the ``Authorization`` header value for ``username:token``."""

    encoded = base64.b64encode(f"{username}:{token}".encode("utf-8")).decode("ascii")
    return f"Basic {encoded}"


def build_audits_url(base_url: str, account_id: str) -> str:
    # The account id is concatenated verbatim, without percent-encoding.
    return base_url + "/" + account_id + "/audits"


class ColumboClient(BaseAPIClient):
    """Client for the Columbo audits endpoint."""

    def __init__(
        self,
        *,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        default_headers: Optional[MutableMapping[str, str]] = None,
        transport: Any = None,
    ) -> None:
        headers: MutableMapping[str, str] = {"Accept": "application/json", "User-Agent": "columbo-connector"}
        if default_headers:
            headers.update(default_headers)
        super().__init__(
            base_url=base_url.rstrip("/"),
            timeout=timeout,
            max_attempts=max_attempts,
            default_headers=headers,
            transport=transport,
        )

    def audits_url(self, account_id: str) -> str:
        return build_audits_url(self.base_url, account_id)

    def list_audits(self, account_id: str, *, username: str, token: str) -> List[Any]:
        """
        Fetch every audit of ``account_id``.

        Raises :class:`APIError` on transport failures, error statuses, an
        undecodable body or a body that is not a JSON array.
        """

        payload = self._get_json(
            self.audits_url(account_id),
            headers={"Authorization": basic_auth_header(username, token)},
        )
        if not isinstance(payload, list):
            raise APIError(f"Unexpected payload from Columbo audits endpoint: expected a list, got {type(payload).__name__}.")
        return payload


@dataclass(slots=True)
class ColumboAdapter(DataSourceAdapter):
    """Connectivity check for an account using stored credentials."""

    account_id: str
    username: str
    token: str
    source_id: str = "columbo"
    client: ColumboClient = field(default_factory=ColumboClient)

    def verify(self) -> VerificationResult:
        try:
            audits = self.client.list_audits(self.account_id, username=self.username, token=self.token)
        except APIError as exc:
            return VerificationResult(success=False, message=f"Columbo API verification failed: {exc}")

        details: dict[str, object] = {"account": self.account_id, "audit_count": len(audits)}
        first = audits[0] if audits else None
        if isinstance(first, dict) and isinstance(first.get("name"), str):
            details["sample_audit"] = first["name"]
        return VerificationResult(success=True, message="Columbo API reachable.", details=details)
