"""Message routes: send (persist + live push), list a conversation, mark read."""
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from chefbook.database import get_db
from chefbook.deps import get_current_user
from chefbook.models.user import User
from chefbook.schemas.message import MarkReadRequest, MarkReadResponse, MessageCreate, MessageResponse
from chefbook.services.messages import list_messages, mark_read, send_message
from chefbook.services.realtime import realtime_manager

router = APIRouter(prefix="/messages", tags=["messages"])


@router.post("", response_model=MessageResponse, status_code=status.HTTP_201_CREATED)
async def send(
    body: MessageCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Store the message, then push new_message to the receiver if connected."""
    message = await send_message(db, current_user.id, body.receiver_id, body.content, body.booking_id)
    await db.commit()
    realtime_manager.notify_new_message(message)
    return message


@router.get("", response_model=list[MessageResponse])
async def conversation(
    with_user: int | None = None,
    booking_id: int | None = None,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Messages for a booking, with one user, or all of mine. Oldest first."""
    return await list_messages(db, current_user.id, with_user_id=with_user, booking_id=booking_id)


@router.put("/read", response_model=MarkReadResponse)
async def read(
    body: MarkReadRequest,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Mark messages read. Ids of messages not received by the caller are ignored."""
    updated = await mark_read(db, current_user.id, body.message_ids)
    return MarkReadResponse(updated=updated)
