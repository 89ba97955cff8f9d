"""Chef routes: browse, read, create/update own profile, add review."""
from datetime import date

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from chefbook.database import get_db
from chefbook.deps import get_current_user, require_role
from chefbook.models.user import User, UserRole
from chefbook.schemas.chef import ChefProfileResponse, ChefProfileUpsert, ReviewCreate, chef_to_response
from chefbook.services.chefs import get_chef, search_chefs, upsert_profile
from chefbook.services.reviews import add_review

router = APIRouter(prefix="/chefs", tags=["chefs"])


@router.get("", response_model=list[ChefProfileResponse])
async def list_chefs(
    specialty: list[str] | None = Query(default=None),
    min_rate: float | None = Query(default=None, ge=0),
    max_rate: float | None = Query(default=None, ge=0),
    available_on: date | None = None,
    db: AsyncSession = Depends(get_db),
):
    """Public listing with optional specialty / rate range / availability filters."""
    chefs = await search_chefs(
        db,
        specialties=specialty,
        min_rate=min_rate,
        max_rate=max_rate,
        available_on=available_on,
    )
    return [chef_to_response(c) for c in chefs]


@router.post("/profile", response_model=ChefProfileResponse, status_code=status.HTTP_201_CREATED)
async def save_profile(
    body: ChefProfileUpsert,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_role(UserRole.CHEF)),
):
    """Create or update the current chef's profile."""
    chef = await upsert_profile(
        db,
        current_user,
        specialties=body.specialties,
        experience_years=body.experience_years,
        hourly_rate=body.hourly_rate,
        bio=body.bio,
        available_dates=body.available_dates,
    )
    return chef_to_response(chef)


@router.get("/{chef_id}", response_model=ChefProfileResponse)
async def read_chef(chef_id: int, db: AsyncSession = Depends(get_db)):
    return chef_to_response(await get_chef(db, chef_id))


@router.post("/{chef_id}/reviews", response_model=ChefProfileResponse, status_code=status.HTTP_201_CREATED)
async def review_chef(
    chef_id: int,
    body: ReviewCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Add a review (1-5). Requires a completed booking with this chef."""
    chef = await add_review(db, chef_id, current_user, body.rating, body.comment)
    return chef_to_response(chef)
