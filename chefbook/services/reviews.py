"""Review ledger: append a review to a chef profile and recompute its mean rating."""
import asyncio
import logging
from collections import defaultdict
from contextlib import asynccontextmanager
from typing import AsyncIterator

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from chefbook.errors import Forbidden
from chefbook.models.chef import ChefProfile
from chefbook.models.review import Review
from chefbook.models.user import User
from chefbook.services.bookings import has_completed_booking
from chefbook.services.chefs import get_chef

logger = logging.getLogger(__name__)


class KeyedLock:
    """One asyncio.Lock per key, dropped once nobody holds or waits on it."""

    def __init__(self) -> None:
        self._locks: dict[int, asyncio.Lock] = {}
        self._users: dict[int, int] = defaultdict(int)

    @asynccontextmanager
    async def hold(self, key: int) -> AsyncIterator[None]:
        lock = self._locks.setdefault(key, asyncio.Lock())
        self._users[key] += 1
        try:
            async with lock:
                yield
        finally:
            self._users[key] -= 1
            if not self._users[key]:
                del self._users[key]
                self._locks.pop(key, None)

    def __len__(self) -> int:
        return len(self._locks)


chef_locks = KeyedLock()


async def add_review(
    db: AsyncSession,
    chef_id: int,
    reviewer: User,
    rating: int,
    comment: str,
) -> ChefProfile:
    """
    Append a review and set rating to the mean of all stored ratings.
    Requires a completed booking between reviewer and chef. The append, the recompute
    and the commit run under a per-profile lock with the profile row locked FOR UPDATE,
    so concurrent reviews are each counted once.
    Repeat reviews by the same user are accepted.
    """
    async with chef_locks.hold(chef_id):
        chef = await get_chef(db, chef_id, for_update=True)
        if not await has_completed_booking(db, reviewer.id, chef):
            raise Forbidden("You can only review chefs after a completed booking")
        chef.reviews.append(Review(user_id=reviewer.id, rating=rating, comment=comment))
        await db.flush()
        result = await db.execute(select(func.avg(Review.rating)).where(Review.chef_id == chef.id))
        chef.rating = float(result.scalar_one() or 0.0)
        await db.commit()
        logger.info(f"Review by user {reviewer.id} on chef {chef.id}: {rating}, mean now {chef.rating:.2f}")
    return await get_chef(db, chef_id)
