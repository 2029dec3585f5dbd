"""Authentication API endpoints."""

from fastapi import APIRouter, HTTPException, status

from app.api.deps import BearerToken, CurrentUser, DBSession
from app.api.errors import ValidationFailed
from app.models.task import SuccessResponse
from app.models.user import AuthResponse, UserCreate, UserLogin, UserResponse
from app.results import Err
from app.services.auth import (
    authenticate_user,
    create_auth_response,
    register_user,
    revoke_token,
    validate_login,
)

router = APIRouter(prefix="/api", tags=["Auth"])


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register_endpoint(session: DBSession, user_data: UserCreate) -> AuthResponse:
    """Register a new user account and sign it in."""
    result = register_user(session, user_data)
    if isinstance(result, Err):
        raise ValidationFailed(result.error)
    return create_auth_response(session, result.value)


@router.post("/login", response_model=AuthResponse)
def login_endpoint(session: DBSession, credentials: UserLogin) -> AuthResponse:
    """Sign in with email and password."""
    errors = validate_login(credentials)
    if errors:
        raise ValidationFailed(errors)

    user = authenticate_user(session, credentials.email, credentials.password)
    if user is None:
        # Generic error message to prevent enumeration
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
        )

    return create_auth_response(session, user)


@router.post("/logout", response_model=SuccessResponse)
def logout_endpoint(
    session: DBSession, current_user: CurrentUser, token: BearerToken
) -> SuccessResponse:
    """Sign out by revoking the presented token."""
    revoke_token(session, token)
    return SuccessResponse(success="Logged out successfully")


@router.get("/user", response_model=UserResponse)
def current_user_endpoint(current_user: CurrentUser) -> UserResponse:
    """Return the authenticated user."""
    return UserResponse.model_validate(current_user)
