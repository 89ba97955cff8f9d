"""Auth routes: register, login, current user (read and update)."""
import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from chefbook.auth.identity import hash_password, issue_token, verify_password
from chefbook.database import get_db
from chefbook.deps import get_current_user
from chefbook.errors import Conflict, Unauthenticated, ValidationFailed
from chefbook.models.user import User
from chefbook.schemas.user import LoginRequest, Token, UserCreate, UserResponse, UserUpdate

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", response_model=Token, status_code=status.HTTP_201_CREATED)
async def register(body: UserCreate, db: AsyncSession = Depends(get_db)):
    """Create a new user (customer or chef) and return a token for it."""
    result = await db.execute(select(User).where(User.email == body.email))
    if result.scalar_one_or_none():
        raise Conflict("Email already registered")
    user = User(
        email=body.email,
        hashed_password=hash_password(body.password),
        name=body.name.strip(),
        role=body.role,
    )
    db.add(user)
    await db.flush()
    await db.refresh(user)
    logger.info(f"Registered user {user.id} as {user.role.value}")
    return Token(access_token=issue_token(user.id), user=UserResponse.model_validate(user))


@router.post("/login", response_model=Token)
async def login(body: LoginRequest, db: AsyncSession = Depends(get_db)):
    """Login with email + password; returns JWT access_token."""
    result = await db.execute(select(User).where(User.email == body.email))
    user = result.scalar_one_or_none()
    if not user or not verify_password(body.password, user.hashed_password):
        raise Unauthenticated("Invalid email or password")
    return Token(access_token=issue_token(user.id), user=UserResponse.model_validate(user))


@router.get("/me", response_model=UserResponse)
async def me(current_user: User = Depends(get_current_user)):
    """Return the currently authenticated user (requires Bearer token)."""
    return current_user


@router.patch("/me", response_model=UserResponse)
async def update_me(
    body: UserUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Update display name and avatar URL. Role and email cannot change here."""
    if body.name is not None:
        name = body.name.strip()
        if not name:
            raise ValidationFailed("Name cannot be blank")
        current_user.name = name
    if body.avatar_url is not None:
        current_user.avatar_url = body.avatar_url.strip() or None
    await db.flush()
    await db.refresh(current_user)
    return current_user
