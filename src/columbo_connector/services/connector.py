"""
Host-facing connector service.

:class:`ColumboConnector` is the façade a reporting host drives: it declares
the auth type, configuration and schema, stores credentials through the
:class:`~columbo_connector.services.auth.AuthGate`, and answers data requests
by resolving the requested fields, fetching the account's audits once and
mapping them into rows. Collaborators (credential store, HTTP client,
settings) are injected so hosts and tests can substitute them.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from logging import LoggerAdapter
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from ..adapters.api.base import APIError
from ..adapters.api.columbo import ColumboClient
from ..adapters.base import CredentialError, RequestError, ServiceCommunicationError
from ..config import ConnectorSettings
from ..core.catalog import list_fields
from ..core.context import ExecutionContext
from ..core.logging import get_logger, log_progress
from ..core.mapper import RecordMappingError, ResponseEnvelope, map_records
from ..core.resolver import parse_requested_ids, resolve_fields
from .auth import AuthGate, SetCredentialsResult, UserCredentials, is_authorized

FETCH_FAILED_MESSAGE = "Unable to fetch data from the Columbo API."


class ReportType(str, Enum):
    """Report variants offered in the configuration form."""

    AUDIT = "audit"
    TEST = "test"
    SCENARIO = "scenario"


REPORT_TYPE_LABELS = {
    ReportType.AUDIT: "Audit summary",
    ReportType.TEST: "Test summary",
    ReportType.SCENARIO: "Scenario summary",
}


def parse_report_type(value: Optional[str]) -> ReportType:
    if value is None or value == "":
        return ReportType.AUDIT
    try:
        return ReportType(str(value).lower())
    except ValueError:
        raise RequestError(f"Unknown report type '{value}'. Expected one of: {', '.join(item.value for item in ReportType)}.") from None


@dataclass(frozen=True, slots=True)
class ConnectorConfig:
    account: str
    report_type: ReportType = ReportType.AUDIT


@dataclass(frozen=True, slots=True)
class DataRequest:
    """Parsed host data request."""

    field_ids: Tuple[str, ...]
    config: ConnectorConfig

    @classmethod
    def from_payload(cls, payload: Any) -> "DataRequest":
        """
        Parse ``{"fields": [{"name": ...}], "configParams": {"account": ..., "reportType": ...}}``.

        Raises :class:`RequestError` when the payload is malformed or when
        ``fields`` or the account id is missing. An empty ``fields`` list is
        allowed and yields zero-column rows.
        """

        if not isinstance(payload, Mapping):
            raise RequestError("Request must be a JSON object.")
        try:
            field_ids = parse_requested_ids(payload["fields"])
        except KeyError:
            raise RequestError("Request is missing 'fields'.") from None
        except ValueError as exc:
            raise RequestError(str(exc)) from exc

        params = payload.get("configParams")
        if not isinstance(params, Mapping):
            raise RequestError("Request is missing 'configParams'.")
        account = params.get("account")
        if not isinstance(account, str) or not account:
            raise RequestError("Request is missing 'configParams.account'.")
        return cls(field_ids=field_ids, config=ConnectorConfig(account=account, report_type=parse_report_type(params.get("reportType"))))


@dataclass(slots=True)
class ColumboConnector:
    """
    Connector façade used by reporting hosts and the CLI.

    Parameters
    ----------
    auth:
        Gate wrapping the credential store.
    settings:
        Endpoint settings; ``static_base_url`` prefixes screenshot URLs.
    client:
        HTTP client. Built from ``settings`` when omitted.
    admin:
        Whether the current user may see debug detail of failures.
    """

    auth: AuthGate
    settings: ConnectorSettings = field(default_factory=ConnectorSettings)
    client: Optional[ColumboClient] = None
    admin: bool = False
    logger: LoggerAdapter = field(init=False, repr=False)

    def __post_init__(self) -> None:
        if self.client is None:
            self.client = ColumboClient(
                base_url=self.settings.base_url,
                timeout=self.settings.timeout,
                max_attempts=self.settings.max_attempts,
            )
        self.logger = get_logger(self.__class__.__name__)

    @classmethod
    def from_context(cls, context: ExecutionContext, auth: AuthGate) -> "ColumboConnector":
        connector = cls(auth=auth, settings=context.settings, admin=context.options.debug)
        connector.logger = context.get_logger(cls.__name__)
        return connector

    # -- auth -----------------------------------------------------------------

    def get_auth_type(self) -> Dict[str, str]:
        return self.auth.get_auth_type()

    def is_auth_valid(self) -> bool:
        return self.auth.is_auth_valid()

    def set_credentials(self, request: Any) -> Dict[str, str]:
        result: SetCredentialsResult = self.auth.set_credentials(UserCredentials.from_payload(request))
        return result.to_dict()

    def reset_auth(self) -> None:
        self.auth.reset_auth()

    def is_admin_user(self) -> bool:
        return self.admin

    # -- schema ---------------------------------------------------------------

    def get_config(self) -> Dict[str, Any]:
        return {
            "configParams": [
                {
                    "type": "TEXTINFO",
                    "name": "instructions",
                    "text": "Enter the Columbo account id and choose the report to import.",
                },
                {
                    "type": "TEXTINPUT",
                    "name": "account",
                    "displayName": "Account id",
                    "placeholder": "acct_123",
                },
                {
                    "type": "SELECT_SINGLE",
                    "name": "reportType",
                    "displayName": "Report type",
                    "options": [{"label": REPORT_TYPE_LABELS[item], "value": item.value} for item in ReportType],
                },
            ],
            "dateRangeRequired": False,
        }

    def get_schema(self, request: Any = None) -> Dict[str, List[Dict[str, object]]]:
        return {"schema": list_fields().to_schema()}

    # -- data -----------------------------------------------------------------

    def get_data(self, request: Any) -> Dict[str, Any]:
        """Answer a host data request with ``{"schema": [...], "rows": [...]}``."""

        data_request = DataRequest.from_payload(request)
        credentials = self.auth.stored_credentials()
        if not is_authorized(credentials):
            raise CredentialError("Columbo credentials are missing. Store a username and token first.")
        envelope = self.fetch_data(
            data_request.config.account,
            data_request.field_ids,
            credentials,
            report_type=data_request.config.report_type,
        )
        return envelope.to_dict()

    def fetch_data(
        self,
        account_id: str,
        requested_ids: Sequence[str],
        credentials: UserCredentials,
        *,
        report_type: ReportType = ReportType.AUDIT,
    ) -> ResponseEnvelope:
        """
        Resolve ``requested_ids``, fetch the account's audits and map them.

        Unknown field ids raise :class:`~columbo_connector.core.resolver.UnresolvedFieldError`
        before any HTTP call. Transport, decoding and mapping failures raise
        :class:`ServiceCommunicationError`; no partial envelope is returned.
        """

        resolved = resolve_fields(list_fields(), requested_ids)
        if report_type is not ReportType.AUDIT:
            self.logger.warning(
                "Report type is not mapped separately; returning audit data",
                extra={"report_type": report_type.value, "account": account_id},
            )

        progress = {"account": account_id, "report_type": report_type.value, "fields": len(resolved)}
        log_progress(self.logger, "Fetching audits", phase="fetch", status="start", extra=progress)
        try:
            records = self.client.list_audits(account_id, username=credentials.username or "", token=credentials.token or "")  # type: ignore[union-attr]
            rows = map_records(resolved, records, static_base_url=self.settings.static_base_url)
        except (APIError, RecordMappingError) as exc:
            log_progress(
                self.logger,
                "Fetch failed",
                phase="fetch",
                status="error",
                level=logging.ERROR,
                extra={**progress, "error": str(exc)},
            )
            raise ServiceCommunicationError(FETCH_FAILED_MESSAGE, f"{type(exc).__name__}: {exc}") from exc

        log_progress(self.logger, "Fetched audits", phase="fetch", status="done", extra={**progress, "rows": len(rows)})
        return ResponseEnvelope(schema=resolved, rows=tuple(rows))
