"""
Shared HTTP plumbing for API clients.

A thin synchronous HTTPX wrapper: one client per request, an attempt loop
driven by tenacity, and any request failure raised as :class:`APIError` with the
method, URL and upstream detail in the message.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import LoggerAdapter
from typing import Any, Mapping, MutableMapping, Optional

import httpx
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from ...core.logging import get_logger
from ..base import AdapterError

DEFAULT_TIMEOUT = 30.0
DEFAULT_MAX_ATTEMPTS = 1


class APIError(AdapterError):
    """Raised when an HTTP API call fails."""


@dataclass(slots=True)
class BaseAPIClient:
    """
    Base synchronous HTTP client.

    Parameters
    ----------
    base_url:
        Root URL for the upstream service.
    timeout:
        Request timeout in seconds.
    max_attempts:
        Number of attempts per call. Transport errors are retried with
        exponential backoff until the budget is spent; HTTP error statuses
        never are.
    default_headers:
        Headers attached to every request.
    transport:
        Optional HTTPX transport, e.g. :class:`httpx.MockTransport` in tests.
    """

    base_url: str
    timeout: float = DEFAULT_TIMEOUT
    max_attempts: int = DEFAULT_MAX_ATTEMPTS
    default_headers: MutableMapping[str, str] = field(default_factory=dict)
    transport: Optional[httpx.BaseTransport] = field(default=None, repr=False)
    logger: LoggerAdapter = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self.logger = get_logger(
            f"{self.__class__.__module__}.{self.__class__.__name__}",
            extra={"base_url": self.base_url},
        )

    def _build_client(self) -> httpx.Client:
        return httpx.Client(
            timeout=self.timeout,
            headers=dict(self.default_headers),
            follow_redirects=True,
            transport=self.transport,
        )

    @staticmethod
    def _raise_for_status(response: httpx.Response) -> None:
        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise APIError(f"HTTP {exc.response.status_code} error for {exc.request.method} {exc.request.url}: {exc.response.text}") from exc

    def _request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        self.logger.debug("HTTP request", extra={"method": method, "url": url})

        @retry(
            retry=retry_if_exception_type(httpx.TransportError),
            wait=wait_exponential(multiplier=1, min=1, max=8),
            stop=stop_after_attempt(self.max_attempts),
            reraise=True,
        )
        def _send() -> httpx.Response:
            with self._build_client() as client:
                response = client.request(method, url, **kwargs)
                response.read()
                return response

        try:
            response = _send()
        except httpx.InvalidURL as exc:
            self.logger.error("Invalid request URL", extra={"method": method, "url": url, "error": str(exc)})
            raise APIError(f"Invalid URL for {method} {url!r}: {exc}") from exc
        except httpx.HTTPError as exc:
            self.logger.error(
                "HTTP error during request",
                extra={"method": method, "url": url, "attempts": self.max_attempts, "error": str(exc)},
            )
            raise APIError(f"HTTP error while calling {method} {url} ({self.max_attempts} attempt(s)): {exc}") from exc

        self._raise_for_status(response)
        self.logger.debug("HTTP response", extra={"status_code": response.status_code, "url": str(response.url)})
        return response

    def _get_json(self, url: str, *, headers: Optional[Mapping[str, str]] = None) -> Any:
        response = self._request("GET", url, headers=dict(headers or {}))
        try:
            return response.json()
        except ValueError as exc:
            raise APIError(f"Failed to decode JSON from {response.url}: {exc}") from exc
