import logging
from functools import lru_cache
from typing import Optional

from fastapi import APIRouter, Depends, Header, HTTPException

from ..config import TELEGRAM_WEBHOOK_SECRET
from ..errors import DeliveryFailure
from ..models.telegram import Update
from ..services.classifier import classify
from ..services.flow import FlowEngine
from ..services.geocoding import resolve_place
from ..services.notification import NotificationService
from ..services.notifier import Notifier
from ..services.registry import IdentityRegistry
from ..services.relationships import RelationshipEngine
from ..services.router import EventRouter
from ..services.telegram import TelegramNotifier

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/telegram",
    tags=["Telegram"]
)

@lru_cache
def get_notifier() -> Notifier:
    return TelegramNotifier()

@lru_cache
def get_event_router() -> EventRouter:
    registry = IdentityRegistry()
    relationships = RelationshipEngine()
    notifications = NotificationService(get_notifier())
    flow = FlowEngine(registry, relationships, notifications)
    return EventRouter(registry, relationships, flow, notifications, resolve_place)

@router.post("/webhook")
async def telegram_webhook(
    update: Update,
    x_telegram_bot_api_secret_token: Optional[str] = Header(default=None),
    notifier: Notifier = Depends(get_notifier),
    event_router: EventRouter = Depends(get_event_router),
):
    if TELEGRAM_WEBHOOK_SECRET and x_telegram_bot_api_secret_token != TELEGRAM_WEBHOOK_SECRET:
        raise HTTPException(status_code=403, detail="Invalid secret token")

    # Stop the client's loading indicator whatever the outcome
    if update.callback_query is not None:
        try:
            await notifier.answer_callback(update.callback_query.id)
        except DeliveryFailure:
            logger.error("Answering callback query %s failed", update.callback_query.id)

    event = classify(update)
    if event is None:
        return {"ok": True, "handled": False}

    handled = await event_router.dispatch(event)
    return {"ok": True, "handled": handled}
