"""Owner login and bearer-token storage.

The token lives in memory on a :class:`TokenStore`. It is only written to or
read from disk when :meth:`TokenStore.save` / :meth:`TokenStore.load` are
called explicitly (on login and at startup).
"""

from __future__ import annotations

import logging
from pathlib import Path

from portfolio_admin.schemas import LoginIn, Session
from portfolio_admin.services.client import ApiError, PortfolioApiClient

logger = logging.getLogger(__name__)


class TokenStore:
    """Holds the bearer token and doubles as the client's token provider."""

    def __init__(self, path: str | Path | None = None, token: str | None = None):
        self.path = Path(path).expanduser() if path else None
        self.token = token

    def __call__(self) -> str | None:
        return self.token

    def load(self) -> str | None:
        if self.path is not None and self.path.exists():
            self.token = self.path.read_text(encoding="utf-8").strip() or None
        return self.token

    def save(self) -> None:
        if self.path is None:
            return
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(self.token or "", encoding="utf-8")
        self.path.chmod(0o600)

    def clear(self) -> None:
        self.token = None
        if self.path is not None and self.path.exists():
            self.path.unlink()


class AuthApi:
    def __init__(self, client: PortfolioApiClient, tokens: TokenStore):
        self.client = client
        self.tokens = tokens

    def login(self, email: str, password: str) -> Session:
        payload = self.client.post(
            "/api/auth/login", json=LoginIn(email=email, password=password).model_dump()
        )
        if not isinstance(payload, dict) or not payload.get("token"):
            raise ApiError("Login response did not include a token")
        session = Session.model_validate(payload)
        self.tokens.token = session.token
        self.tokens.save()
        logger.info("Logged in as %s", session.user.email or email)
        return session

    def logout(self) -> None:
        """Clear the local token even if the server call fails."""
        try:
            self.client.post("/api/auth/logout")
        except ApiError as exc:
            logger.warning("Logout request failed: %s", exc)
        finally:
            self.tokens.clear()
