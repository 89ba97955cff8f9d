"""Booking store: create, read and list bookings, and role-gated status changes."""
import logging
from datetime import datetime, timedelta, timezone

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from chefbook.config import settings
from chefbook.errors import Forbidden, NotFound
from chefbook.models.booking import Booking, BookingStatus
from chefbook.models.chef import ChefProfile
from chefbook.models.user import User, UserRole
from chefbook.services.chefs import get_chef, get_profile_for_user
from chefbook.services.state_machine import check_role, check_transition

logger = logging.getLogger(__name__)


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes; everything is stored in UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


async def _load_booking(db: AsyncSession, booking_id: int) -> Booking:
    result = await db.execute(
        select(Booking).where(Booking.id == booking_id).execution_options(populate_existing=True)
    )
    booking = result.scalar_one_or_none()
    if not booking:
        raise NotFound("Booking not found")
    return booking


def is_party(booking: Booking, user: User) -> bool:
    """True if user is the booking's customer or the user owning the booked chef profile."""
    if booking.customer_id == user.id:
        return True
    return user.role == UserRole.CHEF and booking.chef is not None and booking.chef.user_id == user.id


def party_user_ids(booking: Booking) -> list[int]:
    ids = [booking.customer_id]
    if booking.chef is not None and booking.chef.user_id not in ids:
        ids.append(booking.chef.user_id)
    return ids


async def create_booking(
    db: AsyncSession,
    customer: User,
    *,
    chef_id: int,
    date: datetime,
    duration: int,
    location: str,
    menu: str | None = None,
    special_instructions: str | None = None,
) -> Booking:
    """
    Create a pending booking. total_price is hourly_rate * duration now and is never
    recomputed. No availability check; submitting twice creates two bookings.
    """
    if customer.role != UserRole.CUSTOMER:
        raise Forbidden("Only customers can create bookings")
    chef = await get_chef(db, chef_id)
    booking = Booking(
        customer_id=customer.id,
        chef_id=chef.id,
        date=date,
        duration=duration,
        location=location,
        menu=menu,
        special_instructions=special_instructions,
        status=BookingStatus.PENDING,
        total_price=chef.hourly_rate * duration,
    )
    db.add(booking)
    await db.flush()
    logger.info(f"Booking {booking.id} created: customer {customer.id} -> chef {chef.id}, total {booking.total_price}")
    return await _load_booking(db, booking.id)


async def get_booking(db: AsyncSession, booking_id: int, requester: User) -> Booking:
    booking = await _load_booking(db, booking_id)
    if not is_party(booking, requester):
        raise Forbidden("Access denied")
    return booking


async def list_bookings(
    db: AsyncSession,
    requester: User,
    status: BookingStatus | None = None,
) -> list[Booking]:
    """Chefs see bookings on their own profile, customers see their own. Newest first."""
    q = select(Booking)
    if requester.role == UserRole.CHEF:
        profile = await get_profile_for_user(db, requester.id)
        if not profile:
            raise NotFound("Chef profile not found")
        q = q.where(Booking.chef_id == profile.id)
    else:
        q = q.where(Booking.customer_id == requester.id)
    if status is not None:
        q = q.where(Booking.status == status)
    q = q.order_by(Booking.created_at.desc(), Booking.id.desc())
    result = await db.execute(q)
    return list(result.scalars().all())


async def update_booking_status(
    db: AsyncSession,
    booking_id: int,
    requester: User,
    new_status: BookingStatus,
    *,
    strict: bool | None = None,
) -> Booking:
    """
    Chef: must own the booked profile, may only confirm or cancel.
    Customer: must own the booking, may set any status.
    Strict mode additionally enforces the booking graph (no way out of a terminal state).
    Last write wins; there is no version check.
    """
    booking = await _load_booking(db, booking_id)
    if requester.role == UserRole.CHEF:
        if booking.chef is None or booking.chef.user_id != requester.id:
            raise Forbidden("Access denied")
    elif booking.customer_id != requester.id:
        raise Forbidden("Access denied")
    check_role(requester.role, new_status)
    if strict is None:
        strict = settings.STRICT_BOOKING_TRANSITIONS
    if strict:
        check_transition(booking.status, new_status)
    previous = booking.status
    booking.status = new_status
    await db.flush()
    logger.info(f"Booking {booking.id} status {previous.value} -> {new_status.value} by user {requester.id}")
    return booking


async def complete_booking(db: AsyncSession, booking_id: int) -> Booking:
    """Administrative confirmed -> completed. Not reachable through the user-facing update."""
    booking = await _load_booking(db, booking_id)
    check_transition(booking.status, BookingStatus.COMPLETED, administrative=True)
    booking.status = BookingStatus.COMPLETED
    await db.flush()
    logger.info(f"Booking {booking.id} completed")
    return booking


async def complete_due_bookings(db: AsyncSession, now: datetime | None = None) -> list[Booking]:
    """Complete every confirmed booking whose date + duration has passed. Returns the completed bookings."""
    now = now or datetime.now(timezone.utc)
    result = await db.execute(select(Booking).where(Booking.status == BookingStatus.CONFIRMED))
    completed = []
    for booking in result.scalars().all():
        ends = _as_utc(booking.date) + timedelta(hours=booking.duration)
        if now >= ends:
            check_transition(booking.status, BookingStatus.COMPLETED, administrative=True)
            booking.status = BookingStatus.COMPLETED
            completed.append(booking)
    if completed:
        await db.flush()
        logger.info(f"Auto-completed {len(completed)} booking(s)")
    return completed


async def has_completed_booking(db: AsyncSession, customer_id: int, chef: ChefProfile) -> bool:
    result = await db.execute(
        select(Booking.id)
        .where(Booking.customer_id == customer_id)
        .where(Booking.chef_id == chef.id)
        .where(Booking.status == BookingStatus.COMPLETED)
        .limit(1)
    )
    return result.scalar_one_or_none() is not None
