"""Authentication service for user management and token issuance."""

import logging
import re
from datetime import timedelta
from uuid import UUID

import bcrypt
from jose import JWTError, jwt
from sqlmodel import Session, select

from app.config import get_settings
from app.models.access_token import AccessToken
from app.models.base import utc_now
from app.models.user import AuthResponse, User, UserCreate, UserLogin, UserResponse
from app.results import Err, FieldErrors, Ok, Result, add_error

logger = logging.getLogger(__name__)

settings = get_settings()

NAME_MAX_LENGTH = 255
EMAIL_MAX_LENGTH = 255
PASSWORD_MIN_LENGTH = 8
# bcrypt only accepts 72 bytes of input
PASSWORD_MAX_BYTES = 72

# Email validation (RFC 5322 simplified)
EMAIL_PATTERN = re.compile(
    r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$"
)

# Checked when the email is unknown so both login failure paths cost one bcrypt round
_DUMMY_HASH = bcrypt.hashpw(
    b"not-a-real-password", bcrypt.gensalt(rounds=settings.BCRYPT_ROUNDS)
).decode("utf-8")


def hash_password(password: str) -> str:
    """Hash a password using bcrypt."""
    password_bytes = password.encode('utf-8')
    salt = bcrypt.gensalt(rounds=settings.BCRYPT_ROUNDS)
    return bcrypt.hashpw(password_bytes, salt).decode('utf-8')


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash (constant time)."""
    password_bytes = plain_password.encode('utf-8')
    if len(password_bytes) > PASSWORD_MAX_BYTES:
        return False
    hashed_bytes = hashed_password.encode('utf-8')
    return bcrypt.checkpw(password_bytes, hashed_bytes)


def validate_email(email: str) -> bool:
    """Validate email format (RFC 5322 simplified)."""
    return bool(EMAIL_PATTERN.match(email))


def get_user_by_email(session: Session, email: str) -> User | None:
    """Get a user by email address."""
    return session.exec(select(User).where(User.email == email)).first()


def validate_registration(session: Session, user_data: UserCreate) -> FieldErrors:
    """Collect per-field registration errors. An empty map means valid."""
    errors: FieldErrors = {}

    name = (user_data.name or "").strip()
    if not name:
        add_error(errors, "name", "The name field is required.")
    elif len(name) > NAME_MAX_LENGTH:
        add_error(errors, "name", f"The name field must not be greater than {NAME_MAX_LENGTH} characters.")

    email = (user_data.email or "").strip()
    if not email:
        add_error(errors, "email", "The email field is required.")
    else:
        if len(email) > EMAIL_MAX_LENGTH:
            add_error(errors, "email", f"The email field must not be greater than {EMAIL_MAX_LENGTH} characters.")
        if not validate_email(email):
            add_error(errors, "email", "The email field must be a valid email address.")
        elif get_user_by_email(session, email.lower()) is not None:
            add_error(errors, "email", "The email has already been taken.")

    password = user_data.password or ""
    if not password:
        add_error(errors, "password", "The password field is required.")
    else:
        if len(password) < PASSWORD_MIN_LENGTH:
            add_error(errors, "password", f"The password field must be at least {PASSWORD_MIN_LENGTH} characters.")
        elif len(password.encode("utf-8")) > PASSWORD_MAX_BYTES:
            add_error(errors, "password", f"The password field must not be greater than {PASSWORD_MAX_BYTES} bytes.")
        if password != user_data.password_confirmation:
            add_error(errors, "password", "The password field confirmation does not match.")

    return errors


def register_user(session: Session, user_data: UserCreate) -> Result[User, FieldErrors]:
    """Validate and create a new user. No user is created when validation fails."""
    errors = validate_registration(session, user_data)
    if errors:
        return Err(errors)

    user = User(
        name=user_data.name.strip(),
        email=user_data.email.strip().lower(),
        hashed_password=hash_password(user_data.password),
    )
    session.add(user)
    session.commit()
    session.refresh(user)

    logger.info("User registered", extra={"user_id": user.id})
    return Ok(user)


def validate_login(credentials: UserLogin) -> FieldErrors:
    """Check that login credentials are present and well formed."""
    errors: FieldErrors = {}
    if not (credentials.email or "").strip():
        add_error(errors, "email", "The email field is required.")
    elif not validate_email(credentials.email.strip()):
        add_error(errors, "email", "The email field must be a valid email address.")
    if not credentials.password:
        add_error(errors, "password", "The password field is required.")
    return errors


def authenticate_user(session: Session, email: str, password: str) -> User | None:
    """
    Authenticate a user by email and password.
    Returns the user if valid, None otherwise. Callers must not tell the
    two failure cases apart.
    """
    user = get_user_by_email(session, email.strip().lower())
    if user is None:
        verify_password(password, _DUMMY_HASH)
        return None
    if not verify_password(password, user.hashed_password):
        return None
    return user


def issue_token(session: Session, user: User) -> str:
    """
    Issue a new bearer token for the user.
    The token is a signed JWT whose ``jti`` points at an access_tokens row.
    """
    now = utc_now()
    expires_at = None
    if settings.TOKEN_EXPIRATION_HOURS > 0:
        expires_at = now + timedelta(hours=settings.TOKEN_EXPIRATION_HOURS)

    record = AccessToken(user_id=user.id, created_at=now, expires_at=expires_at)
    session.add(record)
    session.commit()
    session.refresh(record)

    payload = {
        "sub": str(user.id),
        "jti": str(record.id),
        "iat": now,
    }
    if expires_at is not None:
        payload["exp"] = expires_at
    return jwt.encode(payload, settings.AUTH_SECRET, algorithm=settings.JWT_ALGORITHM)


def _find_token_record(session: Session, token: str) -> AccessToken | None:
    """Decode a token and load its record. Signature or format problems yield None."""
    try:
        payload = jwt.decode(
            token,
            settings.AUTH_SECRET,
            algorithms=[settings.JWT_ALGORITHM],
        )
        token_id = UUID(payload["jti"])
        user_id = int(payload["sub"])
    except (JWTError, KeyError, TypeError, ValueError):
        return None

    record = session.get(AccessToken, token_id)
    if record is None or record.user_id != user_id:
        return None
    return record


def resolve_token(session: Session, token: str) -> User | None:
    """Resolve a bearer token to its user, or None if missing, invalid, revoked or expired."""
    if not token:
        return None
    record = _find_token_record(session, token)
    if record is None or record.is_revoked or record.is_expired():
        return None
    return session.get(User, record.user_id)


def revoke_token(session: Session, token: str) -> None:
    """Revoke a token. Revoking an unknown or already revoked token is a no-op."""
    record = _find_token_record(session, token)
    if record is None or record.is_revoked:
        return
    record.revoked_at = utc_now()
    session.add(record)
    session.commit()
    logger.info("Token revoked", extra={"user_id": record.user_id})


def create_auth_response(session: Session, user: User) -> AuthResponse:
    """Create an authentication response with a freshly issued token."""
    token = issue_token(session, user)
    return AuthResponse(
        user=UserResponse.model_validate(user),
        token=token,
    )
