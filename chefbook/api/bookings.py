"""Booking routes: create, list mine, get one, update status."""
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from chefbook.database import get_db
from chefbook.deps import get_current_user
from chefbook.models.booking import Booking, BookingStatus
from chefbook.models.user import User
from chefbook.schemas.booking import BookingCreate, BookingResponse, BookingStatusUpdate, booking_to_response
from chefbook.services.bookings import (
    create_booking,
    get_booking,
    list_bookings,
    party_user_ids,
    update_booking_status,
)
from chefbook.services.realtime import realtime_manager

router = APIRouter(prefix="/bookings", tags=["bookings"])


async def _commit_and_notify(db: AsyncSession, booking: Booking) -> None:
    await db.commit()
    realtime_manager.dispatch(
        party_user_ids(booking),
        "booking_updated",
        {"bookingId": booking.id, "status": booking.status.value},
    )


@router.post("", response_model=BookingResponse, status_code=status.HTTP_201_CREATED)
async def create(
    body: BookingCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Create a pending booking; total price is frozen at hourly_rate * duration."""
    booking = await create_booking(
        db,
        current_user,
        chef_id=body.chef_id,
        date=body.date,
        duration=body.duration,
        location=body.location,
        menu=body.menu,
        special_instructions=body.special_instructions,
    )
    await _commit_and_notify(db, booking)
    return booking_to_response(booking)


@router.get("", response_model=list[BookingResponse])
async def list_mine(
    status: BookingStatus | None = None,
    expand: bool = True,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Customers: own bookings. Chefs: bookings on their profile. Optional exact status filter."""
    bookings = await list_bookings(db, current_user, status)
    return [booking_to_response(b, expand) for b in bookings]


@router.get("/{booking_id}", response_model=BookingResponse)
async def read(
    booking_id: int,
    expand: bool = True,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    booking = await get_booking(db, booking_id, current_user)
    return booking_to_response(booking, expand)


@router.put("/{booking_id}/status", response_model=BookingResponse)
async def update_status(
    booking_id: int,
    body: BookingStatusUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Chef may confirm or cancel own bookings; customer may update own bookings."""
    booking = await update_booking_status(db, booking_id, current_user, body.status)
    await _commit_and_notify(db, booking)
    return booking_to_response(booking)
