from pydantic import BaseModel
from typing import Optional, Union

from .person import Identity

class InboundEvent(BaseModel):
    sender: Identity
    chat_id: int
    message_id: Optional[int] = None

class CommandEvent(InboundEvent):
    name: str

class FreeTextEvent(InboundEvent):
    text: str

class LocationShareEvent(InboundEvent):
    latitude: float
    longitude: float

class ContactShareEvent(InboundEvent):
    shared_person_id: int

class ControlPayloadEvent(InboundEvent):
    data: str
    callback_id: Optional[str] = None

AnyInboundEvent = Union[
    CommandEvent,
    FreeTextEvent,
    LocationShareEvent,
    ContactShareEvent,
    ControlPayloadEvent,
]
