"""User authentication controller endpoints."""

from fastapi import APIRouter, Body, Depends, status
from fastapi.responses import PlainTextResponse
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import Settings, get_settings
from app.database import get_db
from app.domains.user.service import UserService
from app.schemas.user import (
    GoogleLoginRequest,
    GoogleLoginResponse,
    LoginResponse,
    UserLoginRequest,
    UserRegisterRequest,
    UserResponse,
)

router = APIRouter(prefix="/api/authentic", tags=["Authentication"])


def get_user_service(
    db: AsyncSession = Depends(get_db),
    config: Settings = Depends(get_settings),
) -> UserService:
    return UserService(db, config)


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED, include_in_schema=False)
@router.post("/", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def register(
    register_data: UserRegisterRequest | None = Body(None),
    user_service: UserService = Depends(get_user_service),
):
    """Register a new user with email and password.

    The first rule the payload violates is reported as a 400.
    """
    register_data = register_data or UserRegisterRequest()
    user = await user_service.register(
        email=register_data.email,
        password=register_data.password,
        name=register_data.name,
    )
    return UserResponse.model_validate(user)


@router.post("/login", response_model=LoginResponse)
async def login(
    login_data: UserLoginRequest | None = Body(None),
    user_service: UserService = Depends(get_user_service),
):
    """Authenticate with email and password and issue an access token."""
    login_data = login_data or UserLoginRequest()
    result = await user_service.login(login_data.email, login_data.password)
    return LoginResponse(**result)


@router.post("/google", response_model=GoogleLoginResponse)
async def google(
    google_data: GoogleLoginRequest | None = Body(None),
    user_service: UserService = Depends(get_user_service),
):
    """Sign in with a Google ID token.

    Returning Google users are matched by Google ID, existing email accounts
    are linked, and unknown emails get a new account.
    """
    google_data = google_data or GoogleLoginRequest()
    result = await user_service.google_login(google_data.googleToken)
    return GoogleLoginResponse(**result)


@router.get("/tes", response_class=PlainTextResponse)
async def tes():
    return "tes"
