"""
HTTP API clients for the Columbo reporting service.

* ``Client`` classes wrap the HTTP calls.
* ``Adapter`` classes implement :class:`~columbo_connector.adapters.base.DataSourceAdapter`
  for connectivity checks.
"""

from .base import APIError, BaseAPIClient
from .columbo import ColumboAdapter, ColumboClient, basic_auth_header, build_audits_url

__all__ = [
    "APIError",
    "BaseAPIClient",
    "ColumboAdapter",
    "ColumboClient",
    "basic_auth_header",
    "build_audits_url",
]
