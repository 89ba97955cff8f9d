"""Pydantic schemas for bookings."""
from datetime import datetime

from pydantic import BaseModel, Field

from chefbook.models.booking import Booking, BookingStatus
from chefbook.schemas.refs import ChefRef, UserRef, chef_ref, user_ref


class BookingCreate(BaseModel):
    """Request body for POST /bookings."""
    chef_id: int
    date: datetime
    duration: int = Field(..., ge=1, description="Hours")
    location: str = Field(..., min_length=1, max_length=512)
    menu: str | None = None
    special_instructions: str | None = None


class BookingStatusUpdate(BaseModel):
    """Request body for PUT /bookings/{id}/status."""
    status: BookingStatus


class BookingResponse(BaseModel):
    id: int
    customer: UserRef
    chef: ChefRef
    date: datetime
    duration: int
    location: str
    menu: str | None = None
    special_instructions: str | None = None
    status: BookingStatus
    total_price: float
    created_at: datetime
    updated_at: datetime | None = None


def booking_to_response(booking: Booking, expand: bool = True) -> BookingResponse:
    return BookingResponse(
        id=booking.id,
        customer=user_ref(booking.customer_id, booking.customer, expand),
        chef=chef_ref(booking.chef_id, booking.chef, expand),
        date=booking.date,
        duration=booking.duration,
        location=booking.location,
        menu=booking.menu,
        special_instructions=booking.special_instructions,
        status=booking.status,
        total_price=booking.total_price,
        created_at=booking.created_at,
        updated_at=booking.updated_at,
    )
