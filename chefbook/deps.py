"""Shared dependencies: get_current_user, require_role."""
from typing import Annotated

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from chefbook.auth.identity import verify_token
from chefbook.database import get_db
from chefbook.errors import Forbidden, Unauthenticated
from chefbook.models.user import User, UserRole

security = HTTPBearer(auto_error=False)


async def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> User:
    """Validate JWT from Authorization: Bearer <token> and return the User. Raises 401 if missing/invalid."""
    if not credentials:
        raise Unauthenticated("Authentication required")
    user_id = verify_token(credentials.credentials)
    if user_id is None:
        raise Unauthenticated("Invalid or expired token")
    result = await db.execute(select(User).where(User.id == user_id))
    user = result.scalar_one_or_none()
    if not user:
        raise Unauthenticated("User not found")
    return user


def require_role(role: UserRole):
    """Dependency factory: current user must have the given role (403 otherwise)."""

    async def _check(current_user: Annotated[User, Depends(get_current_user)]) -> User:
        if current_user.role != role:
            raise Forbidden("Access denied: Insufficient permissions")
        return current_user

    return _check
