"""WebSocket chat channel. Frames are JSON: {"event": name, "data": {...}}."""
import json
import logging

from fastapi import APIRouter, WebSocket, WebSocketDisconnect
from pydantic import ValidationError

from chefbook.database import async_session
from chefbook.errors import ServiceError
from chefbook.schemas.message import MessageCreate, TypingEvent
from chefbook.services.messages import send_message
from chefbook.services.realtime import realtime_manager

logger = logging.getLogger(__name__)

router = APIRouter(tags=["ws"])


async def _authenticate(websocket: WebSocket, token: object) -> None:
    user_id = realtime_manager.authenticate(websocket, token)
    if user_id is not None:
        await realtime_manager.send_to(websocket, "authenticated", {"userId": user_id})


async def _send_message(websocket: WebSocket, user_id: int, data: dict) -> None:
    """Persist first, then push new_message to the receiver and ack the sender."""
    try:
        body = MessageCreate.model_validate(data)
    except ValidationError as e:
        await realtime_manager.send_to(websocket, "error", {"message": f"Invalid message: {e.errors()[0]['msg']}"})
        return
    try:
        async with async_session() as db:
            message = await send_message(db, user_id, body.receiver_id, body.content, body.booking_id)
            await db.commit()
    except ServiceError as e:
        await realtime_manager.send_to(websocket, "error", {"message": e.detail})
        return
    realtime_manager.notify_new_message(message)
    await realtime_manager.send_to(websocket, "message_sent", {"messageId": message.id})


async def _typing(websocket: WebSocket, user_id: int | None, data: dict) -> None:
    if user_id is None:
        return
    try:
        body = TypingEvent.model_validate(data)
    except ValidationError:
        await realtime_manager.send_to(websocket, "error", {"message": "Invalid typing event"})
        return
    realtime_manager.relay_typing(user_id, body.receiver_id)


@router.websocket("/ws/chat")
async def chat_ws(websocket: WebSocket):
    """
    Connect, optionally with ?token=JWT, or send {"event": "authenticate", "data": {"token": ...}}.
    Failed authentication is logged and leaves the connection unbound.
    """
    await websocket.accept()
    token = websocket.query_params.get("token")
    if token:
        await _authenticate(websocket, token)
    try:
        while True:
            message = await websocket.receive()
            if message["type"] == "websocket.disconnect":
                raise WebSocketDisconnect(message.get("code", 1000))
            try:
                frame = json.loads(message["text"])
                event = frame["event"]
                data = frame.get("data") or {}
                # Clients may send the bare token string for authenticate
                if event == "authenticate" and isinstance(data, str):
                    data = {"token": data}
                if not isinstance(data, dict):
                    raise TypeError("data must be an object")
            except (KeyError, TypeError, ValueError, AttributeError):
                await realtime_manager.send_to(websocket, "error", {"message": "Malformed event"})
                continue
            user_id = realtime_manager.user_for(websocket)
            if event == "authenticate":
                await _authenticate(websocket, data.get("token"))
            elif event == "send_message":
                if user_id is None:
                    await realtime_manager.send_to(websocket, "error", {"message": "Authentication required"})
                    continue
                await _send_message(websocket, user_id, data)
            elif event == "typing":
                await _typing(websocket, user_id, data)
            else:
                await realtime_manager.send_to(websocket, "error", {"message": f"Unknown event: {event}"})
    except WebSocketDisconnect:
        pass
    finally:
        realtime_manager.disconnect(websocket)
