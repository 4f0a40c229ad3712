# app/domains/user/service.py
import logging
import secrets
from typing import Any, Optional
from uuid import UUID

from email_validator import EmailNotValidError, validate_email
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import Settings, settings
from app.core.security import GoogleAuthenticator, hash_password, sign_token, verify_password
from app.exceptions.base import BadRequestError
from app.exceptions.user import InvalidCredentialsError, UserValidationError
from models import User

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


class UserService:
    def __init__(
        self,
        db: AsyncSession,
        config: Settings | None = None,
        google_auth: GoogleAuthenticator | None = None,
    ):
        self.db = db
        self.config = config or settings
        self.google_auth = google_auth or GoogleAuthenticator(self.config)

    async def get_user_by_id(self, user_id: UUID) -> Optional[User]:
        """Get a user by ID."""
        result = await self.db.execute(select(User).where(User.id == user_id))
        return result.scalar_one_or_none()

    async def get_user_by_email(self, email: str) -> Optional[User]:
        """Get a user by email."""
        result = await self.db.execute(select(User).where(User.email == email))
        return result.scalar_one_or_none()

    async def get_user_by_google_id(self, google_id: str) -> Optional[User]:
        """Get a user by Google account subject."""
        result = await self.db.execute(select(User).where(User.google_id == google_id))
        return result.scalar_one_or_none()

    async def validate_registration(self, email: Any, password: Any, name: Any) -> str:
        """Check registration data and return the normalized email.

        Rules are checked in a fixed order and the first violation wins.
        """
        if _is_blank(email):
            raise UserValidationError("Email is required")
        try:
            validate_email(str(email), check_deliverability=False)
        except EmailNotValidError as e:
            raise UserValidationError("Invalid email format") from e
        if _is_blank(password):
            raise UserValidationError("Password is required")
        if len(str(password)) < MIN_PASSWORD_LENGTH:
            raise UserValidationError("Password must be at least 6 characters long")
        if _is_blank(name):
            raise UserValidationError("Name is required")

        email = str(email).strip()
        if await self.get_user_by_email(email):
            raise UserValidationError("Email already exists")
        return email

    async def create_user(
        self, email: str, password: str, name: str, google_id: str | None = None
    ) -> User:
        """Insert a user, hashing the password first."""
        user = User(
            email=email,
            password=hash_password(password),
            name=name,
            google_id=google_id,
        )

        try:
            self.db.add(user)
            await self.db.commit()
            await self.db.refresh(user)
            return user
        except IntegrityError as e:
            await self.db.rollback()
            raise UserValidationError("Email already exists") from e
        except SQLAlchemyError:
            await self.db.rollback()
            raise

    async def register(self, email: Any, password: Any, name: Any) -> User:
        """Register a user with email and password."""
        email = await self.validate_registration(email, password, name)
        user = await self.create_user(email=email, password=str(password), name=str(name).strip())
        logger.info(f"Registered user {user.id}")
        return user

    async def login(self, email: Any, password: Any) -> dict[str, Any]:
        """Authenticate with email and password.

        Unknown email and wrong password fail identically so callers cannot
        probe which accounts exist.
        """
        user = None
        if isinstance(email, str) and email:
            user = await self.get_user_by_email(email)

        if not user or not verify_password(password if isinstance(password, str) else "", user.password):
            raise InvalidCredentialsError("Invalid email or password")

        token = sign_token({"id": user.id, "email": user.email}, self.config)
        return {"token": token, "userId": str(user.id), "username": user.name}

    async def google_login(self, google_token: str | None) -> dict[str, str]:
        """Sign in with a Google ID token, linking or creating the account."""
        if not google_token:
            raise BadRequestError("Google Token is required")

        payload = await self.google_auth.verify(google_token)

        user = await self.get_user_by_google_id(payload["sub"])
        if user:
            logger.info(f"Existing user found by Google ID: {user.id}")
        else:
            user = await self.get_user_by_email(payload["email"])
            if user:
                if not user.google_id:
                    await self._link_google_account(user, payload)
            else:
                user = await self.create_user(
                    email=payload["email"],
                    password=secrets.token_urlsafe(32),
                    name=payload.get("name") or payload["email"],
                    google_id=payload["sub"],
                )
                logger.info(f"New user created via Google: {user.id}")

        return {"access_token": sign_token({"id": user.id}, self.config)}

    async def _link_google_account(self, user: User, payload: dict[str, Any]) -> None:
        try:
            user.google_id = payload["sub"]
            if not user.name and payload.get("name"):
                user.name = payload["name"]
            await self.db.commit()
            await self.db.refresh(user)
            logger.info(f"Existing user linked with Google ID: {user.id}")
        except SQLAlchemyError:
            await self.db.rollback()
            raise
