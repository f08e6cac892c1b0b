from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Mapping, Optional

from ..config import Settings, get_settings
from ..store.persistence import StatePersistence

if TYPE_CHECKING:
    from .client import ApiClient

logger = logging.getLogger(__name__)

AUTH_STATE_KEY = "auth"
REFRESH_PATH = "/api/auth/refresh"


def _token_pair(payload: Any) -> Optional[tuple[str, Optional[str]]]:
    if not isinstance(payload, Mapping):
        return None
    body = payload.get("data") if isinstance(payload.get("data"), Mapping) else payload
    access_token = body.get("access_token") or body.get("accessToken")
    if not access_token:
        return None
    return access_token, body.get("refresh_token") or body.get("refreshToken")


class TokenManager:
    """Bearer token accessor for the current session.

    Tokens set at runtime are persisted under the ``auth`` key so a later
    process picks them up; otherwise the static ``TRUSTAY_ACCESS_TOKEN`` is
    used.
    """

    def __init__(
        self,
        persistence: Optional[StatePersistence] = None,
        settings: Optional[Settings] = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._persistence = persistence
        self._access_token: Optional[str] = None
        self._refresh_token: Optional[str] = None
        self._restore()

    def _restore(self) -> None:
        if self._persistence is None:
            return
        state = self._persistence.load(AUTH_STATE_KEY) or {}
        self._access_token = state.get("accessToken") or None
        self._refresh_token = state.get("refreshToken") or None

    @property
    def refresh_token(self) -> Optional[str]:
        return self._refresh_token

    @property
    def is_authenticated(self) -> bool:
        return self.get_access_token() is not None

    def get_access_token(self) -> Optional[str]:
        return self._access_token or self._settings.access_token or None

    def set_tokens(self, access_token: str, refresh_token: Optional[str] = None) -> None:
        self._access_token = access_token
        self._refresh_token = refresh_token
        if self._persistence is not None:
            self._persistence.save(
                AUTH_STATE_KEY,
                {"accessToken": access_token, "refreshToken": refresh_token},
            )
        logger.debug("Access token updated")

    def clear_tokens(self) -> None:
        self._access_token = None
        self._refresh_token = None
        if self._persistence is not None:
            self._persistence.clear(AUTH_STATE_KEY)

    async def refresh(self, client: "ApiClient") -> bool:
        """Exchange the refresh token for a new pair.

        Nothing calls this automatically; a caller that got a 401 decides
        whether to refresh and re-run its action. A rejected refresh token
        signs the session out.
        """
        if not self._refresh_token:
            return False
        result = await client.request(
            REFRESH_PATH,
            "POST",
            json={"refreshToken": self._refresh_token},
            token=None,
            fallback="Session expired, please sign in again",
        )
        tokens = _token_pair(result.data) if result.success else None
        if tokens is None:
            logger.info("Token refresh failed: %s", result.error if not result.success else "no access token")
            self.clear_tokens()
            return False
        access_token, refresh_token = tokens
        self.set_tokens(access_token, refresh_token or self._refresh_token)
        return True


__all__ = ["TokenManager", "AUTH_STATE_KEY", "REFRESH_PATH"]
