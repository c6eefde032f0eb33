"""
Presence-only authentication for the Columbo connector.

The gate checks that a username and token are stored and non-empty. It never
contacts the Columbo API; a bad token surfaces later as a failed fetch.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Mapping, Optional

from ..adapters.credentials import TOKEN_KEY, USERNAME_KEY, CredentialStore
from ..core.logging import get_logger

AUTH_TYPE = "USER_TOKEN"
AUTH_HELP_URL = "https://app.columbo.io/settings/api"

logger = get_logger(__name__)


class ErrorCode(str, Enum):
    NONE = "NONE"
    INVALID_CREDENTIALS = "INVALID_CREDENTIALS"


@dataclass(frozen=True, slots=True)
class UserCredentials:
    username: Optional[str] = None
    token: Optional[str] = None

    @classmethod
    def from_payload(cls, payload: Any) -> "UserCredentials":
        """Build credentials from the host's ``{"userToken": {...}}`` request."""

        section = payload.get("userToken") if isinstance(payload, Mapping) else None
        if not isinstance(section, Mapping):
            return cls()
        username = section.get("username")
        token = section.get("token")
        return cls(
            username=username if isinstance(username, str) else None,
            token=token if isinstance(token, str) else None,
        )

    def __repr__(self) -> str:
        return f"UserCredentials(username={self.username!r}, token={'***' if self.token else None!r})"


@dataclass(frozen=True, slots=True)
class SetCredentialsResult:
    error_code: ErrorCode

    @property
    def accepted(self) -> bool:
        return self.error_code is ErrorCode.NONE

    def to_dict(self) -> Dict[str, str]:
        return {"errorCode": self.error_code.value}


def is_authorized(credentials: UserCredentials) -> bool:
    """True when both username and token are present and non-empty."""

    return bool(credentials.username) and bool(credentials.token)


@dataclass(slots=True)
class AuthGate:
    """Credential checks and persistence on top of a :class:`CredentialStore`."""

    store: CredentialStore

    def get_auth_type(self) -> Dict[str, str]:
        return {"type": AUTH_TYPE, "helpUrl": AUTH_HELP_URL}

    def stored_credentials(self) -> UserCredentials:
        return UserCredentials(
            username=self.store.get_property(USERNAME_KEY),
            token=self.store.get_property(TOKEN_KEY),
        )

    def is_auth_valid(self) -> bool:
        return is_authorized(self.stored_credentials())

    def set_credentials(self, candidate: UserCredentials) -> SetCredentialsResult:
        """Persist ``candidate`` only when it passes :func:`is_authorized`."""

        if not is_authorized(candidate):
            logger.warning("Rejected incomplete credentials", extra={"username": candidate.username or None})
            return SetCredentialsResult(ErrorCode.INVALID_CREDENTIALS)
        self.store.set_property(USERNAME_KEY, candidate.username)  # type: ignore[arg-type]
        self.store.set_property(TOKEN_KEY, candidate.token)  # type: ignore[arg-type]
        logger.info("Credentials stored", extra={"username": candidate.username})
        return SetCredentialsResult(ErrorCode.NONE)

    def reset_auth(self) -> None:
        self.store.delete_property(USERNAME_KEY)
        self.store.delete_property(TOKEN_KEY)
        logger.info("Credentials cleared")
