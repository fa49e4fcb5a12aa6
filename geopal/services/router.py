"""
Event Router
============

Single entry point for inbound events. Each event is matched against an
ordered list of routes; the first route whose predicate holds handles it and
routing stops there. Predicates are structural matches over the typed event
and, for button presses, over the control instruction decoded once up front.

ORDERING:
- Wizard abort/confirm come first, so the wizard tears down its own artifacts
  before the global abort keyword is considered.
- Known commands come before any wizard step and always escape a live wizard.
- Every wizard step ends with a catch-all that answers with a hint.
- Events matching no route are logged and dropped.
"""

import logging
from enum import Enum
from typing import Awaitable, Callable, NamedTuple, Optional

from ..errors import GeoPalError, InvalidControlPayload, NoActiveWizard, NotFriends, PaginationIndexOutOfRange
from ..models.events import (
    AnyInboundEvent,
    CommandEvent,
    ContactShareEvent,
    ControlPayloadEvent,
    FreeTextEvent,
    LocationShareEvent,
)
from ..models.controls import InlineButton
from ..models.person import Person
from ..models.wizard import WizardStep
from .control_payload import (
    AbortFriendRemoval,
    AbortWizard,
    AcceptFriendRequest,
    ConfirmFriendRemoval,
    ConfirmWizard,
    ControlInstruction,
    DeclineFriendRequest,
    SelectFriendToRemove,
    ShowRemovalPage,
    parse_control_payload,
)
from .flow import FlowEngine
from .geocoding import PlaceName
from .keyboards import ABORT_KEYWORD
from .locks import KeyedLocks
from .notification import NotificationService
from .pagination import render_page
from .registry import IdentityRegistry
from .relationships import RelationshipEngine

logger = logging.getLogger(__name__)


class Command(str, Enum):
    START = "start"
    HELP = "help"
    ADD_FRIEND = "add_friend"
    FRIEND_LIST = "friend_list"
    REMOVE_FRIEND = "remove_friend"
    SHARE_LOCATION = "share_location"


class RouteContext(NamedTuple):
    event: AnyInboundEvent
    actor: Person
    instruction: Optional[ControlInstruction]


class Route(NamedTuple):
    name: str
    matches: Callable[[RouteContext], bool]
    action: Callable[[RouteContext], Awaitable[None]]


PlaceResolver = Callable[[float, float], Awaitable[PlaceName]]


class EventRouter:
    def __init__(
        self,
        registry: IdentityRegistry,
        relationships: RelationshipEngine,
        flow: FlowEngine,
        notifications: NotificationService,
        resolve_place: PlaceResolver,
        locks: Optional[KeyedLocks] = None,
    ):
        self.registry = registry
        self.relationships = relationships
        self.flow = flow
        self.notifications = notifications
        self.resolve_place = resolve_place
        self.locks = locks or KeyedLocks()

        self.routes: list[Route] = [
            Route("wizard_abort", self._is_wizard_abort, self._abort_wizard),
            Route("wizard_confirm", self._is_wizard_confirm, self._confirm_wizard),
            Route("add_friend", self._is_command(Command.ADD_FRIEND), self._start_wizard),
            Route("start", self._is_command(Command.START), self._escaping(self._start)),
            Route("help", self._is_command(Command.HELP), self._escaping(self._help)),
            Route("friend_list", self._is_command(Command.FRIEND_LIST), self._escaping(self._friend_list)),
            Route("remove_friend", self._is_command(Command.REMOVE_FRIEND), self._escaping(self._remove_friend)),
            Route("share_location", self._is_command(Command.SHARE_LOCATION), self._escaping(self._ask_location)),
            Route("global_abort", self._is_abort_keyword, self._abort_action),
            Route("wizard_target", self._is_wizard_target, self._select_target),
            Route("wizard_comment", self._is_wizard_comment, self._comment),
            Route("wizard_catch_all", self._is_wizard_input, self._wizard_hint),
            Route("answer_friend_request", self._is_instruction(AcceptFriendRequest, DeclineFriendRequest), self._answer_request),
            Route("removal_page", self._is_instruction(ShowRemovalPage), self._show_removal_page),
            Route("removal_select", self._is_instruction(SelectFriendToRemove), self._select_removal),
            Route("removal_confirm", self._is_instruction(ConfirmFriendRemoval), self._confirm_removal),
            Route("removal_abort", self._is_instruction(AbortFriendRemoval), self._abort_action),
            Route("share_location_reply", self._is_location, self._share_location),
            Route("stale_wizard_control", self._is_instruction(ConfirmWizard, AbortWizard), self._no_active_wizard),
        ]

    async def dispatch(self, event: AnyInboundEvent) -> bool:
        """Route one event. Returns False when no route claimed it."""
        actor = self.registry.get_or_register(event.sender, event.chat_id)
        try:
            instruction = None
            if isinstance(event, ControlPayloadEvent):
                instruction = parse_control_payload(event.data)
            context = RouteContext(event=event, actor=actor, instruction=instruction)

            async with self.locks.hold(*self._involved_ids(context)):
                for route in self.routes:
                    if route.matches(context):
                        logger.info("Routing %s from %s to %s", type(event).__name__, actor.person_id, route.name)
                        await route.action(context)
                        return True
        except GeoPalError as e:
            logger.warning("%s for %s: %s", type(e).__name__, actor.person_id, e)
            await self.notifications.send_error(actor, e)
            return True

        logger.info("No route for %s from %s, dropping it", type(event).__name__, actor.person_id)
        return False

    def _involved_ids(self, context: RouteContext) -> list[int]:
        ids = [context.actor.person_id]
        match context.instruction:
            case (AcceptFriendRequest(sender_id=sender_id, receiver_id=receiver_id)
                  | DeclineFriendRequest(sender_id=sender_id, receiver_id=receiver_id)):
                ids += [sender_id, receiver_id]
            case SelectFriendToRemove(target_id=target_id) | ConfirmFriendRemoval(target_id=target_id):
                ids.append(target_id)
        match context.event:
            case ContactShareEvent(shared_person_id=shared_id):
                ids.append(shared_id)
        state = self.flow.get(context.actor.person_id)
        if state is not None and state.receiver_id is not None:
            ids.append(state.receiver_id)
        return ids

    # Predicates

    def _wizard_step(self, context: RouteContext) -> Optional[WizardStep]:
        return self.flow.step(context.actor.person_id)

    @staticmethod
    def _is_instruction(*kinds) -> Callable[[RouteContext], bool]:
        return lambda context: isinstance(context.instruction, kinds)

    @staticmethod
    def _is_command(command: Command) -> Callable[[RouteContext], bool]:
        return lambda context: isinstance(context.event, CommandEvent) and context.event.name == command.value

    @staticmethod
    def _is_abort_keyword(context: RouteContext) -> bool:
        return isinstance(context.event, FreeTextEvent) and context.event.text.strip() == ABORT_KEYWORD

    @staticmethod
    def _is_location(context: RouteContext) -> bool:
        return isinstance(context.event, LocationShareEvent)

    def _is_wizard_abort(self, context: RouteContext) -> bool:
        if self._wizard_step(context) is None:
            return False
        return isinstance(context.instruction, AbortWizard) or self._is_abort_keyword(context)

    def _is_wizard_confirm(self, context: RouteContext) -> bool:
        return isinstance(context.instruction, ConfirmWizard) and self._wizard_step(context) in (
            WizardStep.AWAITING_COMMENT,
            WizardStep.AWAITING_CONFIRMATION,
        )

    def _is_wizard_target(self, context: RouteContext) -> bool:
        return isinstance(context.event, ContactShareEvent) and self._wizard_step(context) == WizardStep.AWAITING_TARGET

    def _is_wizard_comment(self, context: RouteContext) -> bool:
        return isinstance(context.event, FreeTextEvent) and self._wizard_step(context) == WizardStep.AWAITING_COMMENT

    def _is_wizard_input(self, context: RouteContext) -> bool:
        return self._wizard_step(context) is not None and isinstance(
            context.event, (FreeTextEvent, ContactShareEvent, CommandEvent)
        )

    # Commands

    def _escaping(self, action: Callable[[RouteContext], Awaitable[None]]) -> Callable[[RouteContext], Awaitable[None]]:
        async def escape_then_run(context: RouteContext) -> None:
            await self.flow.discard(context.actor)
            await action(context)
        return escape_then_run

    async def _start(self, context: RouteContext) -> None:
        await self.notifications.send_greeting(context.actor)

    async def _help(self, context: RouteContext) -> None:
        await self.notifications.send_greeting(context.actor)

    async def _friend_list(self, context: RouteContext) -> None:
        await self.notifications.send_friend_list(context.actor, self.friends_of(context.actor))

    async def _remove_friend(self, context: RouteContext) -> None:
        friends = self.friends_of(context.actor)
        if not friends:
            await self.notifications.send_has_no_friends(context.actor)
            return
        page = render_page(self.removal_buttons(friends), 0)
        await self.notifications.send_removal_page(context.actor, page)

    async def _ask_location(self, context: RouteContext) -> None:
        if not context.actor.friends:
            await self.notifications.send_has_no_friends(context.actor)
            return
        await self.notifications.ask_for_location(context.actor)

    async def _abort_action(self, context: RouteContext) -> None:
        await self.notifications.send_action_aborted(context.actor, context.event.message_id)

    # Wizard steps

    async def _start_wizard(self, context: RouteContext) -> None:
        await self.flow.start(context.actor)

    async def _select_target(self, context: RouteContext) -> None:
        await self.flow.select_target(context.actor, context.event.shared_person_id)

    async def _comment(self, context: RouteContext) -> None:
        await self.flow.set_comment(context.actor, context.event.text)

    async def _confirm_wizard(self, context: RouteContext) -> None:
        await self.flow.confirm(context.actor, self._pressed_message(context))

    async def _abort_wizard(self, context: RouteContext) -> None:
        await self.flow.abort(context.actor, self._pressed_message(context))

    async def _wizard_hint(self, context: RouteContext) -> None:
        awaiting_target = self._wizard_step(context) == WizardStep.AWAITING_TARGET
        await self.notifications.send_wizard_hint(context.actor, awaiting_target)

    async def _no_active_wizard(self, context: RouteContext) -> None:
        await self.notifications.delete_message(context.actor, context.event.message_id)
        raise NoActiveWizard()

    @staticmethod
    def _pressed_message(context: RouteContext) -> Optional[int]:
        if isinstance(context.event, ControlPayloadEvent):
            return context.event.message_id
        return None

    # Friend request answers

    async def _answer_request(self, context: RouteContext) -> None:
        instruction = context.instruction
        receiver = context.actor
        if instruction.receiver_id != receiver.person_id:
            logger.warning(
                "%s pressed an answer for a request addressed to %s",
                receiver.person_id, instruction.receiver_id,
            )
            raise InvalidControlPayload(instruction.to_payload(), "You can only answer friend requests sent to you!")

        sender = self.registry.require(instruction.sender_id)
        accepted = isinstance(instruction, AcceptFriendRequest)
        if accepted:
            request = self.relationships.accept(receiver, sender, acting_id=receiver.person_id)
        else:
            request = self.relationships.decline(receiver, sender, acting_id=receiver.person_id)

        if request is None:
            await self.notifications.send_request_no_longer_valid(receiver)
            return

        await self.notifications.strip_controls(receiver, request.anchor_message_id or context.event.message_id)
        if accepted:
            await self.notifications.send_friend_accept(sender, receiver)
        else:
            await self.notifications.send_friend_decline(sender, receiver)

    # Friend removal

    def friends_of(self, person: Person) -> list[Person]:
        friends = [self.registry.lookup(friend_id) for friend_id in person.friends]
        return sorted(
            (friend for friend in friends if friend is not None),
            key=lambda friend: (friend.display_handle.lower(), friend.person_id),
        )

    @staticmethod
    def removal_buttons(friends: list[Person]) -> list[InlineButton]:
        return [
            InlineButton(text=f"{i}) {friend.mention}", payload=SelectFriendToRemove(target_id=friend.person_id).to_payload())
            for i, friend in enumerate(friends, start=1)
        ]

    async def _show_removal_page(self, context: RouteContext) -> None:
        friends = self.friends_of(context.actor)
        if not friends:
            await self.notifications.strip_controls(context.actor, context.event.message_id)
            await self.notifications.send_has_no_friends(context.actor)
            return
        buttons = self.removal_buttons(friends)
        try:
            page = render_page(buttons, context.instruction.start_index)
        except PaginationIndexOutOfRange as e:
            # the list shrank since the page was rendered
            logger.error("Removal list of %s: %s, showing first page", context.actor.person_id, e)
            page = render_page(buttons, 0)
        await self.notifications.send_removal_page(context.actor, page, message_id=context.event.message_id)

    async def _select_removal(self, context: RouteContext) -> None:
        friend = self.registry.require(context.instruction.target_id)
        if friend.person_id not in context.actor.friends:
            raise NotFriends()
        await self.notifications.ask_to_confirm_removal(context.actor, friend)

    async def _confirm_removal(self, context: RouteContext) -> None:
        friend = self.registry.require(context.instruction.target_id)
        self.relationships.remove(context.actor, friend)
        await self.notifications.delete_message(context.actor, context.event.message_id)
        await self.notifications.send_removed(context.actor, friend)

    # Location sharing

    async def _share_location(self, context: RouteContext) -> None:
        friends = self.friends_of(context.actor)
        if not friends:
            await self.notifications.send_has_no_friends(context.actor)
            return
        place = await self.resolve_place(context.event.latitude, context.event.longitude)
        text = f"{context.actor.mention} is now in {place}!"
        await self.notifications.broadcast([friend.delivery_address for friend in friends], text)
        await self.notifications.send_location_result(context.actor)
