"""Message store: persist direct messages, read conversations, mark messages read."""
import logging

from sqlalchemy import and_, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from chefbook.errors import Forbidden, NotFound, ValidationFailed
from chefbook.models.booking import Booking
from chefbook.models.chef import ChefProfile
from chefbook.models.message import Message
from chefbook.models.user import User

logger = logging.getLogger(__name__)


async def send_message(
    db: AsyncSession,
    sender_id: int,
    receiver_id: int,
    content: str,
    booking_id: int | None = None,
) -> Message:
    """
    Persist a message (read=False, timestamp=now) and return it with its id.
    With a booking id, the sender must be that booking's customer or its chef's user.
    Callers push the stored message to the receiver after committing.
    """
    if not content or not content.strip():
        raise ValidationFailed("Message content is required")
    if booking_id is not None:
        booking = await db.get(Booking, booking_id)
        if not booking:
            raise NotFound("Booking not found")
        chef = await db.get(ChefProfile, booking.chef_id)
        if not chef:
            raise NotFound("Chef not found")
        if sender_id not in (booking.customer_id, chef.user_id):
            raise Forbidden("Access denied")
    receiver = await db.get(User, receiver_id)
    if not receiver:
        raise NotFound("Receiver not found")
    message = Message(
        booking_id=booking_id,
        sender_id=sender_id,
        receiver_id=receiver_id,
        content=content,
        read=False,
    )
    db.add(message)
    await db.flush()
    await db.refresh(message)
    logger.info(f"Message {message.id} stored: {sender_id} -> {receiver_id} (booking {booking_id})")
    return message


async def list_messages(
    db: AsyncSession,
    requester_id: int,
    with_user_id: int | None = None,
    booking_id: int | None = None,
) -> list[Message]:
    """
    booking_id wins over with_user_id. Only messages the requester sent or received are
    returned. Oldest first; id breaks timestamp ties.
    """
    involved = or_(Message.sender_id == requester_id, Message.receiver_id == requester_id)
    q = select(Message)
    if booking_id is not None:
        q = q.where(Message.booking_id == booking_id).where(involved)
    elif with_user_id is not None:
        q = q.where(
            or_(
                and_(Message.sender_id == requester_id, Message.receiver_id == with_user_id),
                and_(Message.sender_id == with_user_id, Message.receiver_id == requester_id),
            )
        )
    else:
        q = q.where(involved)
    q = q.order_by(Message.timestamp.asc(), Message.id.asc())
    result = await db.execute(q)
    return list(result.scalars().all())


async def mark_read(db: AsyncSession, requester_id: int, message_ids: list[int]) -> int:
    """Set read=True on the listed messages the requester received. Other ids are ignored. Returns rows updated."""
    if not message_ids:
        return 0
    result = await db.execute(
        update(Message)
        .where(Message.id.in_(message_ids))
        .where(Message.receiver_id == requester_id)
        .values(read=True)
        .execution_options(synchronize_session="fetch")
    )
    logger.info(f"User {requester_id} marked {result.rowcount} message(s) read")
    return result.rowcount
