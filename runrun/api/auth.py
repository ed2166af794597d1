"""Authentication API routes."""

from fastapi import APIRouter, Depends, Request, status
from fastapi.security import HTTPBasic, HTTPBasicCredentials
from sqlalchemy.ext.asyncio import AsyncSession

from runrun.auth import login, logout, token_scheme
from runrun.database import get_db
from runrun.errors import BadRequestError
from runrun.rate_limit import limiter

router = APIRouter()

basic_scheme = HTTPBasic(auto_error=False)


@router.post("/login", response_model=str)
@limiter.limit("10/minute")
async def login_route(
    request: Request,
    credentials: HTTPBasicCredentials | None = Depends(basic_scheme),
    db: AsyncSession = Depends(get_db),
) -> str:
    """Exchange Basic-Auth credentials for an access token."""
    if credentials is None:
        raise BadRequestError("Missing credentials")
    return await login(db, credentials.username, credentials.password)


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
async def logout_route(
    token: str | None = Depends(token_scheme),
    db: AsyncSession = Depends(get_db),
) -> None:
    """Invalidate the access token sent in the Token header."""
    await logout(db, token or "")
