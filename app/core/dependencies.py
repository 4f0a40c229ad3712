# app/core/dependencies.py
import logging
import uuid

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import Settings, get_settings
from app.core.security import verify_token
from app.database import get_db
from app.domains.user.service import UserService
from app.exceptions.base import UnauthorizedError
from models import User

logger = logging.getLogger(__name__)

# auto_error is off so a missing header yields our 401 instead of FastAPI's 403
security = HTTPBearer(auto_error=False)


async def validate_token(
    token: HTTPAuthorizationCredentials | None = Depends(security),
    config: Settings = Depends(get_settings),
) -> dict:
    """Validate and decode the bearer token.

    Returns:
        dict: Decoded token payload

    Raises:
        UnauthorizedError: If the token is missing, invalid or expired
    """
    if not token or not token.credentials:
        raise UnauthorizedError("Invalid token")

    return verify_token(token.credentials, config)


async def get_current_user(
    request: Request,
    payload: dict = Depends(validate_token),
    db: AsyncSession = Depends(get_db),
) -> User:
    """Resolve the user a bearer token was issued to.

    Raises:
        UnauthorizedError: If the payload has no usable id or the user is gone
    """
    try:
        user_id = uuid.UUID(str(payload.get("id")))
    except ValueError as e:
        raise UnauthorizedError("Invalid token") from e

    user = await UserService(db).get_user_by_id(user_id)
    if not user:
        logger.info(f"Token for unknown user {user_id} rejected")
        raise UnauthorizedError("Invalid token")

    # Add user info to request state for logging
    request.state.user = user
    request.state.user_id = user.id

    return user


__all__ = ["get_db", "get_settings", "validate_token", "get_current_user", "security"]
