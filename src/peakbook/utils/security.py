"""Security utilities for password hashing, JWT handling and authorization."""

from datetime import UTC, datetime, timedelta
from typing import Annotated

import bcrypt
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt

from peakbook.config import get_settings
from peakbook.database import Database, get_db
from peakbook.models.user import Role, User
from peakbook.services.errors import ForbiddenError, InvalidTokenError, UserNotFoundError
from peakbook.services.user_store import UserStore

# Bearer scheme; missing headers are reported by get_current_user, not FastAPI
bearer_scheme = HTTPBearer(auto_error=False)


def hash_password(password: str) -> str:
    """Hash a plain text password using bcrypt."""
    password_bytes = password.encode("utf-8")
    salt = bcrypt.gensalt()
    hashed = bcrypt.hashpw(password_bytes, salt)
    return hashed.decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a plain text password against a hashed password."""
    password_bytes = plain_password.encode("utf-8")
    hashed_bytes = hashed_password.encode("utf-8")
    try:
        return bcrypt.checkpw(password_bytes, hashed_bytes)
    except ValueError:
        # Stored value is not a bcrypt hash
        return False


def create_access_token(data: dict, expires_delta: timedelta | None = None) -> str:
    """Create a JWT access token.

    Args:
        data: Payload data to encode in the token. The "sub" (subject) claim
              must be the user id string (e.g., {"sub": user.id}).
        expires_delta: Optional custom expiration time. Defaults to settings value.

    Returns:
        Encoded JWT token string
    """
    settings = get_settings()
    to_encode = data.copy()

    if expires_delta:
        expire = datetime.now(UTC) + expires_delta
    else:
        expire = datetime.now(UTC) + timedelta(minutes=settings.jwt_access_token_expire_minutes)

    to_encode.update({"exp": expire})
    encoded_jwt = jwt.encode(
        to_encode,
        settings.secret_key,
        algorithm=settings.jwt_algorithm,
    )
    return encoded_jwt


def issue_token(user_id: str) -> str:
    """Issue a bearer token for ``user_id`` with the configured lifetime."""
    return create_access_token(data={"sub": user_id})


def decode_access_token(token: str) -> dict | None:
    """Decode and validate a JWT access token.

    Args:
        token: The JWT token string to decode

    Returns:
        Decoded token payload if valid, None if invalid or expired
    """
    settings = get_settings()
    try:
        payload = jwt.decode(
            token,
            settings.secret_key,
            algorithms=[settings.jwt_algorithm],
        )
        return payload
    except JWTError:
        return None


async def resolve_caller(token: str | None, users: UserStore) -> User:
    """Resolve a bearer token to the authoritative, freshly loaded user record.

    Raises:
        InvalidTokenError: If the token is missing, badly signed, expired or has no subject.
        UserNotFoundError: If the token is valid but its user no longer exists.
    """
    if not token:
        raise InvalidTokenError("Not authorized, no token")

    payload = decode_access_token(token)
    if payload is None:
        raise InvalidTokenError()

    user_id = payload.get("sub")
    if not isinstance(user_id, str) or not user_id:
        raise InvalidTokenError()

    user = await users.find_by_id(user_id)
    if user is None:
        raise UserNotFoundError()
    return user


def require_role(caller: User, role: Role) -> None:
    """Authorization gate for role-restricted operations.

    Raises:
        ForbiddenError: If the caller does not hold ``role``.
    """
    if caller.role != role:
        raise ForbiddenError(f"Not authorized as an {role}")


def ensure_owner_or_admin(caller: User, owner_username: str, action: str = "modify") -> None:
    """Permit admins and the resource owner.

    Raises:
        ForbiddenError: For anyone else.
    """
    if caller.is_admin or caller.username == owner_username:
        return
    raise ForbiddenError(f"Not authorized to {action} this resource.")


async def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
    db: Database = Depends(get_db),
) -> User:
    """Get the current authenticated user from the bearer token.

    This is a FastAPI dependency. The returned record identifies the caller;
    handlers that mutate the caller re-read it inside the store transaction.

    Raises:
        InvalidTokenError: If the token is missing, invalid or expired
        UserNotFoundError: If the token's user no longer exists
    """
    token = credentials.credentials if credentials else None
    return await resolve_caller(token, db.users)


async def get_current_admin(
    current_user: Annotated[User, Depends(get_current_user)],
) -> User:
    """Get the current user, requiring the admin role.

    Raises:
        ForbiddenError: If the user is not an admin
    """
    require_role(current_user, Role.ADMIN)
    return current_user


# Type aliases for use in route dependencies
CurrentUser = Annotated[User, Depends(get_current_user)]
AdminUser = Annotated[User, Depends(get_current_admin)]
