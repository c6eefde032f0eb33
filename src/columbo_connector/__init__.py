"""
Columbo audit report connector.

The package turns audits from the Columbo reporting API into tabular
``{schema, rows}`` responses for reporting hosts. Import
:class:`ColumboConnector` for the host-facing surface, or use the building
blocks directly:

* :func:`list_fields` declares the field catalogue.
* :func:`resolve_fields` picks the requested fields in caller order.
* :func:`map_records` projects raw audits into rows.
"""

from .core import ResponseEnvelope, Row, UnresolvedFieldError, list_fields, map_records, resolve_fields
from .services import AuthGate, ColumboConnector, UserCredentials, is_authorized

__all__ = [
    "AuthGate",
    "ColumboConnector",
    "ResponseEnvelope",
    "Row",
    "UnresolvedFieldError",
    "UserCredentials",
    "is_authorized",
    "list_fields",
    "map_records",
    "resolve_fields",
]
