"""Security related functions."""

import base64
import hashlib
import logging
from datetime import UTC, datetime, timedelta
from typing import Any

import bcrypt
import jwt
from google.auth.transport import requests as google_requests
from google.oauth2 import id_token
from jwt import InvalidTokenError
from starlette.concurrency import run_in_threadpool

from app.core.config import Settings, settings
from app.exceptions.base import UnauthorizedError

logger = logging.getLogger(__name__)


def _prehash(password: str) -> bytes:
    """Pre-hash to avoid bcrypt's 72-byte input limit."""
    digest = hashlib.sha256(password.encode("utf-8")).digest()
    return base64.b64encode(digest)


def hash_password(password: str) -> str:
    """Hash a password with bcrypt."""
    return bcrypt.hashpw(_prehash(password), bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, hashed_password: str) -> bool:
    """Compare a plaintext password against a stored bcrypt hash."""
    if not password or not hashed_password:
        return False
    try:
        return bcrypt.checkpw(_prehash(password), hashed_password.encode("utf-8"))
    except ValueError:
        # Stored value is not a bcrypt hash
        return False


def sign_token(payload: dict[str, Any], config: Settings | None = None) -> str:
    """Sign an access token carrying ``payload``.

    Values are stringified so UUID ids survive the JSON encoding.
    """
    config = config or settings
    claims = {key: str(value) for key, value in payload.items()}
    if config.access_token_expire_minutes > 0:
        claims["exp"] = datetime.now(UTC) + timedelta(minutes=config.access_token_expire_minutes)
    return jwt.encode(claims, config.secret_key, algorithm=config.algorithm)


def verify_token(token: str, config: Settings | None = None) -> dict[str, Any]:
    """Verify an access token and return its claims.

    :raises UnauthorizedError: if the token is malformed, forged or expired.
    """
    config = config or settings
    try:
        return jwt.decode(token, config.secret_key, algorithms=[config.algorithm])
    except InvalidTokenError as e:
        logger.info(f"Rejected access token: {e}")
        raise UnauthorizedError("Invalid token") from e


class GoogleAuthenticator:
    """
    Verifies Google Sign-In ID tokens.

    The google-auth verifier fetches Google's signing certificates over a
    blocking transport, so verification runs in the threadpool.

    :ivar client_id: OAuth client ID the token audience must match.
    :type client_id: str
    """

    def __init__(self, config: Settings | None = None):
        config = config or settings
        self.client_id = config.google_client_id

    def _verify_sync(self, google_token: str) -> dict[str, Any]:
        return id_token.verify_oauth2_token(
            google_token, google_requests.Request(), audience=self.client_id
        )

    async def verify(self, google_token: str) -> dict[str, Any]:
        """Verify ``google_token`` and return its ``sub``, ``email`` and ``name`` claims."""
        try:
            payload = await run_in_threadpool(self._verify_sync, google_token)
        except ValueError as e:
            logger.warning(f"Google token verification failed: {e}")
            raise UnauthorizedError("Invalid Google token") from e

        if not payload.get("sub") or not payload.get("email"):
            raise UnauthorizedError("Invalid Google token")

        return {
            "sub": payload["sub"],
            "email": payload["email"],
            "name": payload.get("name"),
        }
