from sqlmodel import SQLModel, Field
from typing import Optional
from datetime import datetime, timedelta, timezone
from enum import Enum

class FriendshipStatus(str, Enum):
    FRIENDS = "friends"
    REQUEST_SENT = "request_sent"
    REQUEST_RECEIVED = "request_received"
    NONE = "none"

class PendingRequest(SQLModel):
    sender_id: int
    receiver_id: int
    comment: str = ""
    # receiver-facing message carrying the accept/decline controls
    anchor_message_id: Optional[int] = None
    sent_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def age(self) -> timedelta:
        return datetime.now(timezone.utc) - self.sent_at

    @property
    def key(self) -> tuple[int, int]:
        return (self.sender_id, self.receiver_id)

    # One outstanding request per (sender, receiver)
    def __eq__(self, other):
        if not isinstance(other, PendingRequest):
            return NotImplemented
        return self.key == other.key

    def __hash__(self):
        return hash(self.key)
