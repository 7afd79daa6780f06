# models/message.py
from pydantic import BaseModel, field_validator
from datetime import datetime
from typing import Optional
from models.timestamps import as_utc

class Contact(BaseModel):
    id: str
    name: str

class Message(BaseModel):
    id: Optional[str] = None
    sender_id: str
    recipient_id: str
    content: str
    sent_at: datetime

    _utc_sent_at = field_validator("sent_at")(as_utc)

class Conversation(BaseModel):
    contact: Contact
    last_message: Optional[Message] = None

class MessageCreate(BaseModel):
    recipient_id: str
    content: str
