"""Password login, session tokens and role-based access control."""

import logging
import secrets
from collections.abc import Awaitable, Callable, Iterable
from datetime import UTC, datetime, timedelta

import bcrypt
from fastapi import Depends
from fastapi.security import APIKeyHeader
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from runrun.config import settings
from runrun.database import get_db
from runrun.errors import BadRequestError, UnauthorizedError
from runrun.models import User, UserRole

logger = logging.getLogger(__name__)


def generate_token() -> str:
    """Generate a secure random token."""
    return secrets.token_urlsafe(32)


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode(), bcrypt.gensalt()).decode()


def verify_password(password: str, password_hash: str) -> bool:
    return bcrypt.checkpw(password.encode(), password_hash.encode())


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


async def create_user(
    db: AsyncSession,
    username: str,
    password: str,
    role: UserRole = UserRole.RUNNER,
) -> User:
    """Create a user with a hashed password."""
    if not username or not password:
        raise BadRequestError("Invalid username or password")
    user = User(username=username, password_hash=hash_password(password), role=role)
    db.add(user)
    await db.commit()
    return user


async def get_user_by_username(db: AsyncSession, username: str) -> User | None:
    result = await db.execute(select(User).where(User.username == username))
    return result.scalar_one_or_none()


async def get_user_by_token(db: AsyncSession, token: str) -> User | None:
    """Get the user owning *token*, if the token has not expired."""
    result = await db.execute(select(User).where(User.access_token == token))
    user = result.scalar_one_or_none()
    if user is None or user.access_token_expiry is None:
        return None
    if _as_utc(user.access_token_expiry) <= datetime.now(UTC):
        return None
    return user


async def get_user_role(db: AsyncSession, token: str) -> UserRole | None:
    user = await get_user_by_token(db, token)
    return user.role if user else None


async def login(db: AsyncSession, username: str, password: str) -> str:
    """Check credentials and issue a fresh access token.

    The token expires ``settings.session_ttl_minutes`` after issuance and is
    not renewed by use.

    Raises:
        BadRequestError: Empty username or password.
        UnauthorizedError: Unknown user or wrong password.
    """
    if not username or not password:
        raise BadRequestError("Invalid username or password")

    user = await get_user_by_username(db, username)
    if user is None or not verify_password(password, user.password_hash):
        logger.info("Failed login for %r", username)
        raise UnauthorizedError("Login failed")

    user.access_token = generate_token()
    user.access_token_expiry = datetime.now(UTC) + timedelta(minutes=settings.session_ttl_minutes)
    await db.commit()
    return user.access_token


async def logout(db: AsyncSession, token: str) -> None:
    """Invalidate an access token. Unknown tokens are ignored."""
    if not token:
        raise BadRequestError("Invalid access token")

    result = await db.execute(select(User).where(User.access_token == token))
    user = result.scalar_one_or_none()
    if user is not None:
        user.access_token = None
        user.access_token_expiry = None
        await db.commit()


async def authorize(db: AsyncSession, token: str, allowed_roles: Iterable[UserRole]) -> bool:
    """Tell whether *token* belongs to a user with one of *allowed_roles*.

    A valid token with another role yields False, not an error.

    Raises:
        BadRequestError: Empty token.
        UnauthorizedError: Unknown or expired token.
    """
    if not token:
        raise BadRequestError("Invalid access token")
    role = await get_user_role(db, token)
    if role is None:
        raise UnauthorizedError("Failed to authorize user")
    return role in allowed_roles


# =============================================================================
# FastAPI Dependencies
# =============================================================================

token_scheme = APIKeyHeader(name="Token", auto_error=False)


def require_roles(*roles: UserRole) -> Callable[..., Awaitable[None]]:
    """Build a dependency that rejects requests not made by one of *roles*."""

    async def dependency(
        token: str | None = Depends(token_scheme),
        db: AsyncSession = Depends(get_db),
    ) -> None:
        if not await authorize(db, token or "", roles):
            raise UnauthorizedError("User is not authorized for this action")

    return dependency


require_admin = require_roles(UserRole.ADMIN)
require_any_role = require_roles(UserRole.ADMIN, UserRole.RUNNER)
