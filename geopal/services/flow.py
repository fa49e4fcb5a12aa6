"""
Add-friend wizard.

    IDLE --/add_friend--> AWAITING_TARGET
    AWAITING_TARGET --registered contact shared--> AWAITING_COMMENT
    AWAITING_TARGET --unregistered contact shared--> IDLE (error notice)
    AWAITING_COMMENT --free text--> AWAITING_CONFIRMATION
    AWAITING_COMMENT --confirm--> SENT (empty comment)
    AWAITING_CONFIRMATION --confirm--> SENT
    any step --abort--> ABORTED

IDLE is the absence of a WizardState; SENT and ABORTED delete it. State is
keyed by the initiator alone, so starting a new wizard supersedes the old one.
"""

import logging
from typing import Optional

from ..errors import DeliveryFailure, NoActiveWizard, PeerNotRegistered, SelfRequest
from ..models.friend_request import FriendshipStatus, PendingRequest
from ..models.person import Person
from ..models.wizard import WizardState, WizardStep
from .notification import NotificationService
from .registry import IdentityRegistry
from .relationships import RelationshipEngine

logger = logging.getLogger(__name__)


class FlowEngine:
    def __init__(
        self,
        registry: IdentityRegistry,
        relationships: RelationshipEngine,
        notifications: NotificationService,
    ):
        self.registry = registry
        self.relationships = relationships
        self.notifications = notifications
        self._wizards: dict[int, WizardState] = {}

    def get(self, initiator_id: int) -> Optional[WizardState]:
        return self._wizards.get(initiator_id)

    def step(self, initiator_id: int) -> Optional[WizardStep]:
        state = self._wizards.get(initiator_id)
        return state.step if state else None

    def has_wizard(self, initiator_id: int) -> bool:
        return initiator_id in self._wizards

    def _require(self, initiator: Person, *steps: WizardStep) -> WizardState:
        state = self._wizards.get(initiator.person_id)
        if state is None or state.step not in steps:
            raise NoActiveWizard()
        return state

    def _finish(self, initiator: Person) -> Optional[WizardState]:
        return self._wizards.pop(initiator.person_id, None)

    async def start(self, initiator: Person) -> WizardState:
        previous = self._finish(initiator)
        if previous is not None:
            logger.warning(
                "%s started a new friend request while one was at %s, superseding it",
                initiator.person_id, previous.step.value,
            )
            await self.notifications.delete_message(initiator, previous.sender_anchor_message_id)

        state = WizardState(sender_id=initiator.person_id)
        self._wizards[initiator.person_id] = state
        try:
            await self.notifications.ask_to_share_friend(initiator)
        except DeliveryFailure:
            self._finish(initiator)
            raise
        logger.info("%s is choosing a friend to add", initiator.person_id)
        return state

    async def select_target(self, initiator: Person, target_id: int) -> Optional[WizardState]:
        state = self._require(initiator, WizardStep.AWAITING_TARGET)

        target = self.registry.lookup(target_id)
        if target is None:
            self._finish(initiator)
            logger.info("%s shared %s, who is not registered", initiator.person_id, target_id)
            raise PeerNotRegistered(target_id)
        if target.person_id == initiator.person_id:
            self._finish(initiator)
            raise SelfRequest()
        if self.relationships.status_between(initiator, target) == FriendshipStatus.FRIENDS:
            self._finish(initiator)
            await self.notifications.send_already_friends(initiator)
            return None

        state.receiver_id = target.person_id
        state.step = WizardStep.AWAITING_COMMENT
        try:
            state.sender_anchor_message_id = await self.notifications.ask_for_comment(initiator)
        except DeliveryFailure:
            self._finish(initiator)
            raise
        logger.info("%s is writing a comment for %s", initiator.person_id, target.person_id)
        return state

    async def set_comment(self, initiator: Person, comment: str) -> WizardState:
        state = self._require(initiator, WizardStep.AWAITING_COMMENT)
        receiver = self.registry.require(state.receiver_id)

        previous_anchor = state.sender_anchor_message_id
        state.comment = comment
        state.sender_anchor_message_id = await self.notifications.send_request_preview(initiator, receiver, comment)
        state.step = WizardStep.AWAITING_CONFIRMATION
        await self.notifications.delete_message(initiator, previous_anchor)
        logger.info("%s has comments: %s", initiator.person_id, comment)
        return state

    async def confirm(self, initiator: Person, pressed_message_id: Optional[int] = None) -> Optional[PendingRequest]:
        self._require(initiator, WizardStep.AWAITING_COMMENT, WizardStep.AWAITING_CONFIRMATION)
        state = self._finish(initiator)
        await self._clear_controls(initiator, state, pressed_message_id)

        receiver = self.registry.require(state.receiver_id)
        # they may have become friends while the wizard was open
        if self.relationships.status_between(initiator, receiver) == FriendshipStatus.FRIENDS:
            logger.info("%s and %s became friends before the request was sent", initiator.person_id, receiver.person_id)
            await self.notifications.send_already_friends(initiator)
            return None

        replaced = receiver.incoming_requests.get(initiator.person_id)
        anchor_message_id = await self.notifications.send_friend_request(initiator, receiver, state.comment)
        request = self.relationships.send_request(initiator, receiver, state.comment, anchor_message_id)
        if replaced is not None:
            await self.notifications.strip_controls(receiver, replaced.anchor_message_id)
        logger.info("%s confirmed sending friend request to %s", initiator.person_id, receiver.person_id)
        await self.notifications.send_request_sent(initiator, receiver)
        return request

    async def abort(self, initiator: Person, pressed_message_id: Optional[int] = None) -> WizardState:
        state = self._finish(initiator)
        if state is None:
            raise NoActiveWizard()
        logger.info("%s aborted friend request at %s", initiator.person_id, state.step.value)
        await self.notifications.send_friend_request_aborted(initiator)
        await self._clear_controls(initiator, state, pressed_message_id)
        return state

    async def discard(self, initiator: Person) -> bool:
        """Drop a live wizard without notice, when another command takes over."""
        state = self._finish(initiator)
        if state is None:
            return False
        logger.info("%s left friend request at %s for another command", initiator.person_id, state.step.value)
        await self._clear_controls(initiator, state)
        return True

    async def _clear_controls(
        self, initiator: Person, state: WizardState, pressed_message_id: Optional[int] = None
    ) -> None:
        await self.notifications.delete_message(initiator, state.sender_anchor_message_id)
        if pressed_message_id is not None and pressed_message_id != state.sender_anchor_message_id:
            await self.notifications.delete_message(initiator, pressed_message_id)
