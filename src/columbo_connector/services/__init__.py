"""
Service layer: presence-only auth and the host-facing connector façade.
"""

from .auth import AuthGate, ErrorCode, SetCredentialsResult, UserCredentials, is_authorized
from .connector import ColumboConnector, ConnectorConfig, DataRequest, ReportType

__all__ = [
    "AuthGate",
    "ColumboConnector",
    "ConnectorConfig",
    "DataRequest",
    "ErrorCode",
    "ReportType",
    "SetCredentialsResult",
    "UserCredentials",
    "is_authorized",
]
