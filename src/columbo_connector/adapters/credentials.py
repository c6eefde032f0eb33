"""
Credential property stores.

The connector persists exactly two string properties, ``username`` and
``token``. Stores expose single-key get/set/delete; callers read the pair
without any transaction, so a store may legitimately hold only one of them.
"""

from __future__ import annotations

import json
import os
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, MutableMapping, Optional, Protocol

from ..core.logging import get_logger
from .base import AdapterError

USERNAME_KEY = "username"
TOKEN_KEY = "token"

logger = get_logger(__name__)


class CredentialStoreError(AdapterError):
    """Raised when the credential file cannot be read or written."""


class CredentialStore(Protocol):
    def get_property(self, key: str) -> Optional[str]:
        ...

    def set_property(self, key: str, value: str) -> None:
        ...

    def delete_property(self, key: str) -> None:
        ...


@dataclass(slots=True)
class InMemoryCredentialStore:
    """Process-local store, used by embedding hosts and tests."""

    properties: MutableMapping[str, str] = field(default_factory=dict)

    def get_property(self, key: str) -> Optional[str]:
        return self.properties.get(key)

    def set_property(self, key: str, value: str) -> None:
        self.properties[key] = value

    def delete_property(self, key: str) -> None:
        self.properties.pop(key, None)


@dataclass(slots=True)
class JsonFileCredentialStore:
    """
    Store backed by a JSON object on disk.

    The file is read on every access so separate CLI invocations observe each
    other's writes. Writes go to an ``0600`` temporary file that atomically
    replaces the target, so a failed write leaves the previous contents.
    """

    path: Path

    def _read(self) -> Dict[str, str]:
        if not self.path.is_file():
            return {}
        try:
            payload = json.loads(self.path.read_text(encoding="utf-8") or "{}")
        except (OSError, ValueError) as exc:
            raise CredentialStoreError(f"Failed to read credentials from '{self.path}': {exc}") from exc
        if not isinstance(payload, dict):
            raise CredentialStoreError(f"Credential file '{self.path}' must contain a JSON object.")
        return {str(key): value for key, value in payload.items() if isinstance(value, str)}

    def _write(self, payload: Dict[str, str]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            # mkstemp creates the file with mode 0600.
            fd, tmp_name = tempfile.mkstemp(prefix=f".{self.path.name}.", dir=self.path.parent)
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as handle:
                    json.dump(payload, handle, indent=2)
                os.replace(tmp_name, self.path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as exc:
            raise CredentialStoreError(f"Failed to write credentials to '{self.path}': {exc}") from exc

    def get_property(self, key: str) -> Optional[str]:
        return self._read().get(key)

    def set_property(self, key: str, value: str) -> None:
        payload = self._read()
        payload[key] = value
        self._write(payload)
        logger.debug("Credential property stored", extra={"key": key, "path": str(self.path)})

    def delete_property(self, key: str) -> None:
        payload = self._read()
        if payload.pop(key, None) is None:
            return
        self._write(payload)
        logger.debug("Credential property deleted", extra={"key": key, "path": str(self.path)})
