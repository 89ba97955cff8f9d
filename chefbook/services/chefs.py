"""Chef profiles: lookup, create/update by the owning chef, and browse filters."""
import logging
from datetime import date

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from chefbook.errors import NotFound
from chefbook.models.chef import ChefProfile
from chefbook.models.user import User

logger = logging.getLogger(__name__)


async def get_chef(db: AsyncSession, chef_id: int, *, for_update: bool = False) -> ChefProfile:
    """Load a profile (with user and reviews) by id. Raises NotFound."""
    q = select(ChefProfile).where(ChefProfile.id == chef_id).execution_options(populate_existing=True)
    if for_update:
        q = q.with_for_update()
    result = await db.execute(q)
    chef = result.scalar_one_or_none()
    if not chef:
        raise NotFound("Chef not found")
    return chef


async def get_profile_for_user(db: AsyncSession, user_id: int) -> ChefProfile | None:
    result = await db.execute(select(ChefProfile).where(ChefProfile.user_id == user_id))
    return result.scalar_one_or_none()


async def upsert_profile(
    db: AsyncSession,
    owner: User,
    *,
    specialties: list[str],
    experience_years: int,
    hourly_rate: float,
    bio: str | None,
    available_dates: list[date],
) -> ChefProfile:
    """Create the owner's profile, or overwrite its editable fields if it exists. Rating and reviews are kept."""
    chef = await get_profile_for_user(db, owner.id)
    dates = sorted({d.isoformat() for d in available_dates})
    if chef is None:
        chef = ChefProfile(user_id=owner.id, rating=0.0)
        db.add(chef)
        logger.info(f"Creating chef profile for user {owner.id}")
    chef.specialties = list(specialties)
    chef.experience_years = experience_years
    chef.hourly_rate = hourly_rate
    chef.bio = bio
    chef.available_dates = dates
    await db.flush()
    return await get_chef(db, chef.id)


async def search_chefs(
    db: AsyncSession,
    *,
    specialties: list[str] | None = None,
    min_rate: float | None = None,
    max_rate: float | None = None,
    available_on: date | None = None,
) -> list[ChefProfile]:
    """
    Filter profiles. specialties matches any-of; available_on keeps chefs with at least
    one available date on or after it. Highest rated first.
    """
    q = select(ChefProfile)
    if min_rate is not None:
        q = q.where(ChefProfile.hourly_rate >= min_rate)
    if max_rate is not None:
        q = q.where(ChefProfile.hourly_rate <= max_rate)
    q = q.order_by(ChefProfile.rating.desc(), ChefProfile.id)
    result = await db.execute(q)
    chefs = list(result.scalars().all())
    # JSON list columns: filtered here so the query stays portable across Postgres and SQLite
    if specialties:
        wanted = {s.strip().lower() for s in specialties if s.strip()}
        chefs = [c for c in chefs if wanted & {s.lower() for s in c.specialties or []}]
    if available_on is not None:
        floor = available_on.isoformat()
        chefs = [c for c in chefs if any(d >= floor for d in c.available_dates or [])]
    return chefs
