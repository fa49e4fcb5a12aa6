from abc import ABC, abstractmethod
from typing import Optional

from ..models.controls import Controls


class Notifier(ABC):
    """
    Outbound side of the chat transport.
    Implementations raise DeliveryFailure when a call does not go through.
    """

    @abstractmethod
    async def notify(self, address: int, text: str, controls: Optional[Controls] = None) -> int:
        """Send a message and return its message id."""
        ...

    @abstractmethod
    async def edit_controls(self, address: int, message_id: int, controls: Controls) -> None:
        ...

    @abstractmethod
    async def delete_message(self, address: int, message_id: int) -> None:
        ...

    async def answer_callback(self, callback_id: str, text: Optional[str] = None) -> None:
        return None

    async def aclose(self) -> None:
        return None
