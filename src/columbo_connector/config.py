"""
Settings for the Columbo connector.

Settings are read from a TOML file. The lookup order is:

1. Explicit ``COLUMBO_SETTINGS_PATH`` environment variable.
2. Project-relative ``.secrets/secret.toml`` (from the CWD and the project root).
3. Project-relative ``.secrets/secrets.toml``.
4. Fallback to ``.secrets/secrets.example.toml`` for scaffolding values.

Only the ``[columbo]`` table is consulted. ``COLUMBO_BASE_URL``,
``COLUMBO_STATIC_BASE_URL`` and ``COLUMBO_CREDENTIALS_PATH`` override the
matching file values. Call :func:`load_settings` to get a
:class:`ConnectorSettings` instance.
"""

from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, Mapping, Optional

DEFAULT_BASE_URL = "https://api.columbo.io"
DEFAULT_STATIC_BASE_URL = "https://static.columbo.io"
DEFAULT_TIMEOUT = 30.0
DEFAULT_MAX_ATTEMPTS = 1
DEFAULT_CACHE_DIR = Path(".cache") / "columbo"
CREDENTIALS_FILENAME = "credentials.json"


@dataclass(slots=True)
class ConnectorSettings:
    """Endpoint and transport settings for the Columbo API."""

    base_url: str = DEFAULT_BASE_URL
    static_base_url: str = DEFAULT_STATIC_BASE_URL
    timeout: float = DEFAULT_TIMEOUT
    max_attempts: int = DEFAULT_MAX_ATTEMPTS
    credentials_path: Optional[Path] = None
    source_path: Optional[Path] = None
    raw: Dict[str, Any] = field(default_factory=dict, repr=False)

    def resolve_credentials_path(self, cache_dir: Optional[Path] = None) -> Path:
        """Credential file location, defaulting to ``<cache_dir>/credentials.json``."""

        if self.credentials_path:
            return self.credentials_path
        return (cache_dir or Path.cwd() / DEFAULT_CACHE_DIR) / CREDENTIALS_FILENAME


def _discover_project_root() -> Optional[Path]:
    current = Path(__file__).resolve()
    for parent in current.parents:
        if (parent / "pyproject.toml").is_file():
            return parent
    return None


def _candidate_paths() -> Iterable[Path]:
    env_override = os.getenv("COLUMBO_SETTINGS_PATH")
    if env_override:
        yield Path(env_override).expanduser()

    search_roots = [Path.cwd()]
    project_root = _discover_project_root()
    if project_root and project_root not in search_roots:
        search_roots.append(project_root)

    for base in search_roots:
        secrets_dir = base / ".secrets"
        for filename in ("secret.toml", "secrets.toml", "secrets.example.toml"):
            yield secrets_dir / filename


def _load_toml(path: Path) -> Dict[str, Any]:
    with path.open("rb") as handle:
        return tomllib.load(handle)


def _optional_str(section: Mapping[str, Any], key: str) -> Optional[str]:
    value = section.get(key)
    return value if isinstance(value, str) and value else None


def _build_settings(raw: Dict[str, Any], source_path: Optional[Path]) -> ConnectorSettings:
    section = raw.get("columbo", {})
    if not isinstance(section, dict):
        section = {}

    base_url = os.getenv("COLUMBO_BASE_URL") or _optional_str(section, "base_url") or DEFAULT_BASE_URL
    static_base_url = os.getenv("COLUMBO_STATIC_BASE_URL") or _optional_str(section, "static_base_url") or DEFAULT_STATIC_BASE_URL
    credentials = os.getenv("COLUMBO_CREDENTIALS_PATH") or _optional_str(section, "credentials_path")

    timeout = section.get("timeout", DEFAULT_TIMEOUT)
    if isinstance(timeout, bool) or not isinstance(timeout, (int, float)) or timeout <= 0:
        raise ValueError(f"columbo.timeout must be a positive number, got {timeout!r}")
    max_attempts = section.get("max_attempts", DEFAULT_MAX_ATTEMPTS)
    if isinstance(max_attempts, bool) or not isinstance(max_attempts, int) or max_attempts < 1:
        raise ValueError(f"columbo.max_attempts must be a positive integer, got {max_attempts!r}")

    return ConnectorSettings(
        base_url=base_url.rstrip("/"),
        static_base_url=static_base_url.rstrip("/"),
        timeout=float(timeout),
        max_attempts=max_attempts,
        credentials_path=Path(credentials).expanduser() if credentials else None,
        source_path=source_path,
        raw=raw,
    )


def load_settings(strict: bool = False) -> ConnectorSettings:
    """
    Load connector settings from the first settings file found.

    Parameters
    ----------
    strict:
        When ``True`` raise ``FileNotFoundError`` if no settings file exists.
        Defaults to ``False`` so the connector runs on built-in defaults.
    """

    for path in _candidate_paths():
        if path.is_file():
            return _build_settings(_load_toml(path), path)

    if strict:
        raise FileNotFoundError("No settings file found. Configure COLUMBO_SETTINGS_PATH or .secrets/secret.toml.")

    return _build_settings({}, None)
