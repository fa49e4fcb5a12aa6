"""
Test doubles shared by the test modules: a Notifier that records every
outbound call instead of talking to Telegram, and builders for inbound events.
"""

import asyncio
from typing import NamedTuple, Optional

from geopal.errors import DeliveryFailure
from geopal.models.controls import Controls, InlineControls
from geopal.models.events import (
    CommandEvent,
    ContactShareEvent,
    ControlPayloadEvent,
    FreeTextEvent,
    LocationShareEvent,
)
from geopal.models.person import Identity
from geopal.services.geocoding import PlaceName
from geopal.services.notification import KEYBOARD_REMOVAL_PLACEHOLDER
from geopal.services.notifier import Notifier


class SentMessage(NamedTuple):
    address: int
    text: str
    controls: Optional[Controls]
    message_id: int


class RecordingNotifier(Notifier):
    def __init__(self):
        self.sent: list[SentMessage] = []
        self.edits: list[tuple[int, int, Controls]] = []
        self.deleted: list[tuple[int, int]] = []
        self.answered: list[str] = []
        self.fail_addresses: set[int] = set()
        self._next_message_id = 1000

    async def notify(self, address, text, controls=None):
        # yield like a real network call so concurrent dispatches interleave
        await asyncio.sleep(0)
        if address in self.fail_addresses:
            raise DeliveryFailure()
        self._next_message_id += 1
        self.sent.append(SentMessage(address, text, controls, self._next_message_id))
        return self._next_message_id

    async def edit_controls(self, address, message_id, controls):
        await asyncio.sleep(0)
        if address in self.fail_addresses:
            raise DeliveryFailure()
        self.edits.append((address, message_id, controls))

    async def delete_message(self, address, message_id):
        await asyncio.sleep(0)
        if address in self.fail_addresses:
            raise DeliveryFailure()
        self.deleted.append((address, message_id))

    async def answer_callback(self, callback_id, text=None):
        self.answered.append(callback_id)

    def messages_to(self, address: int) -> list[SentMessage]:
        return [m for m in self.sent if m.address == address and m.text != KEYBOARD_REMOVAL_PLACEHOLDER]

    def texts_to(self, address: int) -> list[str]:
        return [m.text for m in self.messages_to(address)]

    def last_to(self, address: int) -> SentMessage:
        return self.messages_to(address)[-1]


def inline_payloads(controls: InlineControls) -> list[list[str]]:
    return [[button.payload for button in row] for row in controls.rows]


def inline_texts(controls: InlineControls) -> list[list[str]]:
    return [[button.text for button in row] for row in controls.rows]


async def fake_resolve_place(latitude: float, longitude: float) -> PlaceName:
    return PlaceName(city="Berlin", country="Germany")


def identity(person_id: int, username: Optional[str] = None) -> Identity:
    return Identity(
        person_id=person_id,
        username=username or f"user{person_id}",
        first_name=(username or f"user{person_id}").capitalize(),
    )


def command(person_id: int, name: str, username: Optional[str] = None, message_id: int = 1) -> CommandEvent:
    return CommandEvent(sender=identity(person_id, username), chat_id=person_id, message_id=message_id, name=name)


def text(person_id: int, value: str, message_id: int = 1) -> FreeTextEvent:
    return FreeTextEvent(sender=identity(person_id), chat_id=person_id, message_id=message_id, text=value)


def contact(person_id: int, shared_person_id: int, message_id: int = 1) -> ContactShareEvent:
    return ContactShareEvent(
        sender=identity(person_id), chat_id=person_id, message_id=message_id, shared_person_id=shared_person_id
    )


def press(person_id: int, data: str, message_id: int = 1) -> ControlPayloadEvent:
    return ControlPayloadEvent(
        sender=identity(person_id), chat_id=person_id, message_id=message_id, data=data, callback_id=f"cb-{message_id}"
    )


def location(person_id: int, latitude: float = 52.52, longitude: float = 13.405) -> LocationShareEvent:
    return LocationShareEvent(
        sender=identity(person_id), chat_id=person_id, message_id=1, latitude=latitude, longitude=longitude
    )
