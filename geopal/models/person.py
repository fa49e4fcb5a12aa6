from sqlmodel import SQLModel, Field
from typing import Optional

from .friend_request import PendingRequest

class Identity(SQLModel):
    person_id: int
    username: Optional[str] = None
    first_name: str = ""
    last_name: Optional[str] = None

class Person(SQLModel):
    person_id: int
    delivery_address: int
    display_handle: str
    first_name: str = ""
    last_name: Optional[str] = None

    # Relationship edges, keyed by peer person_id
    friends: set[int] = Field(default_factory=set)
    incoming_requests: dict[int, PendingRequest] = Field(default_factory=dict)
    outgoing_requests: dict[int, PendingRequest] = Field(default_factory=dict)

    @classmethod
    def from_identity(cls, identity: Identity, delivery_address: int) -> "Person":
        return cls(
            person_id=identity.person_id,
            delivery_address=delivery_address,
            display_handle=identity.username or identity.first_name or str(identity.person_id),
            first_name=identity.first_name,
            last_name=identity.last_name,
        )

    @property
    def mention(self) -> str:
        return f"@{self.display_handle}"

    @property
    def full_name(self) -> str:
        return " ".join(part for part in (self.first_name, self.last_name) if part)
