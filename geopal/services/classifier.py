import logging
from typing import Optional

from ..config import TELEGRAM_BOT_USERNAME
from ..models.events import (
    AnyInboundEvent,
    CommandEvent,
    ContactShareEvent,
    ControlPayloadEvent,
    FreeTextEvent,
    LocationShareEvent,
)
from ..models.person import Identity
from ..models.telegram import TelegramMessage, TelegramUser, Update

logger = logging.getLogger(__name__)

COMMAND_PREFIX = "/"


def identity_of(user: TelegramUser) -> Identity:
    return Identity(
        person_id=user.id,
        username=user.username,
        first_name=user.first_name,
        last_name=user.last_name,
    )


def shared_person_id(message: TelegramMessage) -> Optional[int]:
    if message.users_shared is not None:
        if message.users_shared.users:
            return message.users_shared.users[0].user_id
        if message.users_shared.user_ids:
            return message.users_shared.user_ids[0]
    if message.user_shared is not None:
        return message.user_shared.user_id
    if message.contact is not None:
        return message.contact.user_id
    return None


def command_name(text: str) -> str:
    # "/add_friend@geopal_bot extra" -> "add_friend"
    token = text.split()[0][len(COMMAND_PREFIX):]
    return token.split("@", 1)[0].lower()


def addressed_to_other_bot(text: str, bot_username: str = TELEGRAM_BOT_USERNAME) -> bool:
    token = text.split()[0]
    if "@" not in token:
        return False
    return token.split("@", 1)[1].lower() != bot_username.lower()


def classify(update: Update) -> Optional[AnyInboundEvent]:
    """Turn a raw Update into exactly one inbound event, or None to ignore it."""
    query = update.callback_query
    if query is not None:
        if query.data is None or query.message is None:
            return None
        return ControlPayloadEvent(
            sender=identity_of(query.from_),
            chat_id=query.message.chat.id,
            message_id=query.message.message_id,
            data=query.data,
            callback_id=query.id,
        )

    message = update.message
    if message is None or message.from_ is None:
        return None
    common = {
        "sender": identity_of(message.from_),
        "chat_id": message.chat.id,
        "message_id": message.message_id,
    }

    if message.location is not None:
        return LocationShareEvent(
            latitude=message.location.latitude,
            longitude=message.location.longitude,
            **common,
        )

    shared = shared_person_id(message)
    if shared is not None:
        return ContactShareEvent(shared_person_id=shared, **common)

    if message.text and message.text.strip():
        text = message.text.strip()
        if text.startswith(COMMAND_PREFIX):
            if addressed_to_other_bot(text):
                logger.info("Ignoring command %s addressed to another bot", text.split()[0])
                return None
            return CommandEvent(name=command_name(text), **common)
        return FreeTextEvent(text=message.text, **common)

    logger.info("Ignoring update %s without a supported payload", update.update_id)
    return None
