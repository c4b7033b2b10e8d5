"""
FastAPI dependencies for authentication, database, and more.
"""

from collections.abc import Callable
from contextlib import AbstractAsyncContextManager
from typing import Annotated

from fastapi import Cookie, Depends, Header, HTTPException, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from chatbridge.db import get_db, get_db_context
from chatbridge.models import Server, ServerMembership, User
from chatbridge.services.slack import SlackService, slack_service
from chatbridge.services.user_cache import UserInfoCache, user_info_cache

# Type alias for database dependency
DBSession = Annotated[AsyncSession, Depends(get_db)]


async def get_current_user_optional(
    db: DBSession,
    session_token: str | None = Cookie(default=None),
    authorization: str | None = Header(default=None),
) -> User | None:
    """Get current user from the session cookie or a Bearer token (None if not authenticated)."""
    token = session_token
    if not token and authorization and authorization.lower().startswith("bearer "):
        token = authorization[7:].strip()
    if not token:
        return None

    result = await db.execute(
        select(User).where(User.session_token == token)
    )
    user = result.scalar_one_or_none()
    if not user or not user.is_active or not user.is_session_valid():
        return None

    user.update_last_seen()
    return user


async def get_current_user(
    user: Annotated[User | None, Depends(get_current_user_optional)],
) -> User:
    """Get current user (raises 401 if not authenticated)."""
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
        )
    return user


# Type alias for authenticated user dependency
CurrentUser = Annotated[User, Depends(get_current_user)]


async def get_server_by_id(
    server_id: int,
    db: DBSession,
) -> Server:
    """Get server by ID."""
    server = await db.get(Server, server_id)
    if not server:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Server not found",
        )
    return server


async def get_server_membership(
    server_id: int,
    user: User,
    db: AsyncSession,
) -> ServerMembership:
    """Verify user is a member of the server and return membership."""
    result = await db.execute(
        select(ServerMembership).where(
            ServerMembership.server_id == server_id,
            ServerMembership.user_id == user.id,
        )
    )
    membership = result.scalar_one_or_none()

    if not membership:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Not a member of this server",
        )
    return membership


async def require_server_admin(
    server_id: int,
    user: User,
    db: AsyncSession,
) -> ServerMembership:
    """Require user to be admin or owner of the server."""
    membership = await get_server_membership(server_id, user, db)

    if not membership.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required",
        )
    return membership


def get_slack_service() -> SlackService:
    return slack_service


def get_user_cache() -> UserInfoCache:
    return user_info_cache


def get_session_factory() -> Callable[[], AbstractAsyncContextManager[AsyncSession]]:
    """Session factory for work that outlives the request (background tasks)."""
    return get_db_context


SlackClient = Annotated[SlackService, Depends(get_slack_service)]
UserCache = Annotated[UserInfoCache, Depends(get_user_cache)]
SessionFactory = Annotated[
    Callable[[], AbstractAsyncContextManager[AsyncSession]],
    Depends(get_session_factory),
]
