# routes/messaging.py
"""
Teacher and student messaging.

Conversations are summaries of the latest message exchanged with each contact.
After sending, the thread and the conversation list are fetched again instead
of being patched locally.
"""
from fastapi import APIRouter, HTTPException, Depends
from datetime import datetime, timezone
from typing import Iterable, List, Optional
import logging

from models.message import Conversation, Message, MessageCreate
from .auth import get_current_user
from .backend import BackendClient, BackendError, get_backend, to_http_exception

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

router = APIRouter(prefix="/portal/messages", tags=["messages"])


def latest_message(messages: Iterable[Message]) -> Optional[Message]:
    return max(messages, key=lambda m: m.sent_at, default=None)


def sort_conversations(conversations: List[Conversation]) -> List[Conversation]:
    """Most recent first; conversations with no messages go last."""
    with_messages = [c for c in conversations if c.last_message is not None]
    without = [c for c in conversations if c.last_message is None]
    with_messages.sort(key=lambda c: c.last_message.sent_at, reverse=True)
    return with_messages + without


def filter_conversations(conversations: List[Conversation], search: str = "") -> List[Conversation]:
    term = search.lower()
    return [c for c in conversations if term in c.contact.name.lower()]


def format_time(timestamp: datetime, now: Optional[datetime] = None) -> str:
    """Clock time today, weekday within a week, otherwise month and day."""
    if now is None:
        if timestamp.tzinfo is not None:
            now = datetime.now(timestamp.tzinfo)
        else:
            now = datetime.now(timezone.utc).replace(tzinfo=None)
    hours = (now - timestamp).total_seconds() / 3600
    if hours < 24:
        return timestamp.strftime("%H:%M")
    if hours < 168:
        return timestamp.strftime("%a %H:%M")
    return f"{timestamp:%b} {timestamp.day}"


def thread_view(messages: List[Message], user_id: str) -> List[dict]:
    ordered = sorted(messages, key=lambda m: m.sent_at)
    return [
        {**m.model_dump(mode="json"), "mine": m.sender_id == user_id, "time": format_time(m.sent_at)}
        for m in ordered
    ]


@router.get("")
async def get_conversations(search: str = "",
                            current_user: dict = Depends(get_current_user),
                            backend: BackendClient = Depends(get_backend)):
    try:
        conversations = sort_conversations(await backend.get_conversations())
    except BackendError as e:
        raise to_http_exception(e)
    # A student only ever talks to their teacher.
    teacher = conversations[0].contact if current_user["role"] == "student" and conversations else None
    return {
        "conversations": filter_conversations(conversations, search),
        "teacher": teacher,
    }


@router.get("/{contact_id}")
async def get_thread(contact_id: str,
                     current_user: dict = Depends(get_current_user),
                     backend: BackendClient = Depends(get_backend)):
    try:
        messages = await backend.get_messages(contact_id)
    except BackendError as e:
        raise to_http_exception(e)
    return {
        "contact_id": contact_id,
        "messages": thread_view(messages, current_user["id"]),
        "last_message": latest_message(messages),
    }


@router.post("")
async def send_message(message: MessageCreate,
                       current_user: dict = Depends(get_current_user),
                       backend: BackendClient = Depends(get_backend)):
    content = message.content.strip()
    if not content or not message.recipient_id:
        raise HTTPException(400, "Message cannot be empty")
    try:
        await backend.send_message(MessageCreate(recipient_id=message.recipient_id, content=content))
        messages = await backend.get_messages(message.recipient_id)
        conversations = sort_conversations(await backend.get_conversations())
    except BackendError as e:
        raise to_http_exception(e)
    logger.info(f"User {current_user['id']} sent a message to {message.recipient_id}")
    return {
        "messages": thread_view(messages, current_user["id"]),
        "conversations": conversations,
    }
