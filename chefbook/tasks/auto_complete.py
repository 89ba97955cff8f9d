"""Complete confirmed bookings once their date + duration has passed."""
import asyncio
import logging

from chefbook.config import settings
from chefbook.database import async_session
from chefbook.services.bookings import complete_due_bookings, party_user_ids
from chefbook.services.realtime import realtime_manager

logger = logging.getLogger(__name__)


async def run_auto_complete_once() -> int:
    async with async_session() as db:
        completed = await complete_due_bookings(db)
        await db.commit()
    for booking in completed:
        realtime_manager.dispatch(
            party_user_ids(booking),
            "booking_updated",
            {"bookingId": booking.id, "status": booking.status.value},
        )
    return len(completed)


async def run_auto_complete_loop() -> None:
    while True:
        try:
            await run_auto_complete_once()
        except Exception:
            logger.exception("Auto-complete pass failed")
        await asyncio.sleep(settings.BOOKING_AUTO_COMPLETE_INTERVAL_SECONDS)
