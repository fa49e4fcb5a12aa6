import logging
from typing import Optional

import httpx

from ..config import TELEGRAM_BOT_URL, TELEGRAM_BOT_TOKEN, HTTP_TIMEOUT_SECONDS
from ..errors import DeliveryFailure
from ..models.controls import Controls, InlineControls, ReplyControls, RemoveReplyControls
from .notifier import Notifier

logger = logging.getLogger(__name__)

# Reply keyboards ask for a single shared user
SHARE_USER_REQUEST_ID = 1


def reply_markup(controls: Controls) -> dict:
    if isinstance(controls, InlineControls):
        return {
            "inline_keyboard": [
                [{"text": button.text, "callback_data": button.payload} for button in row]
                for row in controls.rows
            ]
        }
    if isinstance(controls, ReplyControls):
        keyboard = []
        for row in controls.rows:
            buttons = []
            for button in row:
                entry = {"text": button.text}
                if button.request_user:
                    entry["request_users"] = {
                        "request_id": SHARE_USER_REQUEST_ID,
                        "user_is_bot": False,
                        "max_quantity": 1,
                    }
                if button.request_location:
                    entry["request_location"] = True
                buttons.append(entry)
            keyboard.append(buttons)
        return {
            "keyboard": keyboard,
            "resize_keyboard": True,
            "one_time_keyboard": controls.one_time,
        }
    if isinstance(controls, RemoveReplyControls):
        return {"remove_keyboard": True}
    raise TypeError(f"Unsupported controls: {type(controls).__name__}")


class TelegramNotifier(Notifier):
    def __init__(
        self,
        base_url: str = TELEGRAM_BOT_URL,
        token: str = TELEGRAM_BOT_TOKEN,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self._base_url = base_url
        self._token = token
        self._client = client or httpx.AsyncClient(timeout=HTTP_TIMEOUT_SECONDS)

    async def _call(self, method: str, payload: dict):
        if not self._token:
            logger.error("Telegram bot token is not configured, cannot call %s", method)
            raise DeliveryFailure()
        try:
            response = await self._client.post(f"{self._base_url}/{method}", json=payload)
            body = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.error("Telegram %s to chat %s failed: %s", method, payload.get("chat_id"), e)
            raise DeliveryFailure() from e

        if not body.get("ok"):
            logger.error(
                "Telegram %s to chat %s rejected: %s",
                method, payload.get("chat_id"), body.get("description"),
            )
            raise DeliveryFailure()
        return body.get("result")

    async def notify(self, address: int, text: str, controls: Optional[Controls] = None) -> int:
        payload = {"chat_id": address, "text": text}
        if controls is not None:
            payload["reply_markup"] = reply_markup(controls)
        result = await self._call("sendMessage", payload)
        return result["message_id"]

    async def edit_controls(self, address: int, message_id: int, controls: Controls) -> None:
        await self._call("editMessageReplyMarkup", {
            "chat_id": address,
            "message_id": message_id,
            "reply_markup": reply_markup(controls),
        })

    async def delete_message(self, address: int, message_id: int) -> None:
        await self._call("deleteMessage", {"chat_id": address, "message_id": message_id})

    async def answer_callback(self, callback_id: str, text: Optional[str] = None) -> None:
        payload = {"callback_query_id": callback_id}
        if text:
            payload["text"] = text
        await self._call("answerCallbackQuery", payload)

    async def aclose(self) -> None:
        await self._client.aclose()
