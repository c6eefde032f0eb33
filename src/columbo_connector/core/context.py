"""
Execution context shared by CLI commands and embedding hosts.

The context bundles the resolved settings, the cache directory holding
persisted credentials, and the runtime flags of the current invocation so
commands do not each re-read configuration.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import LoggerAdapter
from pathlib import Path
from typing import Mapping, Optional, Sequence

from ..config import DEFAULT_CACHE_DIR, ConnectorSettings, load_settings
from .logging import get_logger as _get_logger


@dataclass(slots=True)
class ExecutionOptions:
    """
    Flags controlling how commands behave at runtime.

    Attributes
    ----------
    debug:
        Surface the verbose debug detail of failures to the user. Hosts map
        this to their admin-user check.
    observability_tags:
        Additional tags attached to every log entry of the invocation.
    """

    debug: bool = False
    observability_tags: Sequence[str] = field(default_factory=tuple)


@dataclass(slots=True)
class ExecutionContext:
    """
    Shared execution context across CLI commands.

    Attributes
    ----------
    cache_dir:
        Root directory for persisted state such as the credential file.
    settings:
        Connector settings loaded from the settings file and environment.
    options:
        Runtime flags toggled by the caller.
    """

    cache_dir: Path
    settings: ConnectorSettings
    options: ExecutionOptions = field(default_factory=ExecutionOptions)

    @classmethod
    def build_default(
        cls,
        *,
        cache_dir: Optional[Path] = None,
        options: Optional[ExecutionOptions] = None,
        settings: Optional[ConnectorSettings] = None,
    ) -> "ExecutionContext":
        """
        Construct a context using defaults for anything not supplied.

        ``cache_dir`` defaults to ``.cache/columbo`` under the current working
        directory and is created when missing. ``settings`` defaults to
        :func:`~columbo_connector.config.load_settings`.
        """

        resolved_cache = cache_dir or Path.cwd() / DEFAULT_CACHE_DIR
        resolved_cache.mkdir(parents=True, exist_ok=True)
        return cls(
            cache_dir=resolved_cache,
            settings=settings or load_settings(strict=False),
            options=options or ExecutionOptions(),
        )

    @property
    def credentials_path(self) -> Path:
        return self.settings.resolve_credentials_path(self.cache_dir)

    def get_logger(self, name: str, *, extra: Optional[Mapping[str, object]] = None) -> LoggerAdapter:
        """Return a logger adapter carrying the context's observability tags."""

        tags = tuple(self.options.observability_tags)
        return _get_logger(name, tags=tags if tags else None, extra=extra)
