import logging
from typing import Iterable, Optional

from ..errors import DeliveryFailure, EmptyBroadcastPayload, GeoPalError, PartialBroadcastFailure
from ..models.controls import Controls, RemoveReplyControls
from ..models.person import Person
from . import keyboards
from .notifier import Notifier
from .pagination import Page

logger = logging.getLogger(__name__)

GREET_MESSAGE = """Welcome to GeoPal, your personal location-sharing assistant on Telegram! With GeoPal, you can easily share your current location with your friends and family on Telegram, and keep tabs on their whereabouts too. Here's what you can do with GeoPal:

- Register with us using the /start command, and let's get started on sharing your location!
- Add friends with the /add_friend command and share your location with them whenever you want.
- Keep track of all your friends using the /friend_list command.
- Need some space? No problem! Use the /remove_friend command to stop sharing your location with someone.
- Share your current location with your friends using the /share_location command, and let them know where you're at in just one click.

GeoPal makes it easy to stay connected with your loved ones, no matter where you are."""

# Placeholder used to carry a reply keyboard removal
KEYBOARD_REMOVAL_PLACEHOLDER = "."


class NotificationService:
    """All user-facing texts of the bot, sent through a Notifier."""

    def __init__(self, notifier: Notifier):
        self.notifier = notifier

    async def send(self, person: Person, text: str, controls: Optional[Controls] = None) -> int:
        return await self.notifier.notify(person.delivery_address, text, controls)

    async def delete_message(self, person: Person, message_id: Optional[int]) -> bool:
        if message_id is None:
            return False
        try:
            await self.notifier.delete_message(person.delivery_address, message_id)
            return True
        except DeliveryFailure:
            logger.error("Deleting message %s for %s failed", message_id, person.person_id)
            return False

    async def strip_controls(self, person: Person, message_id: Optional[int]) -> bool:
        if message_id is None:
            return False
        try:
            await self.notifier.edit_controls(
                person.delivery_address, message_id, keyboards.empty_inline_keyboard()
            )
            return True
        except DeliveryFailure:
            logger.error("Removing controls from message %s for %s failed", message_id, person.person_id)
            return False

    async def remove_reply_keyboard(self, person: Person) -> None:
        # Telegram only removes a reply keyboard together with a new message
        message_id = await self.send(person, KEYBOARD_REMOVAL_PLACEHOLDER, RemoveReplyControls())
        await self.delete_message(person, message_id)

    async def send_error(self, person: Person, error: GeoPalError) -> None:
        try:
            await self.send(person, error.user_message, RemoveReplyControls())
        except DeliveryFailure:
            logger.error("Error notice to %s could not be delivered: %s", person.person_id, error)

    async def send_greeting(self, person: Person) -> int:
        return await self.send(person, GREET_MESSAGE)

    async def send_action_aborted(self, person: Person, abort_message_id: Optional[int] = None) -> int:
        await self.delete_message(person, abort_message_id)
        return await self.send(person, "Action aborted!", RemoveReplyControls())

    # Friend request dialogue

    async def ask_to_share_friend(self, person: Person) -> int:
        logger.info("Sending add friend request to chat %s", person.delivery_address)
        return await self.send(person, "Please share friend you want to add!", keyboards.add_friend_keyboard())

    async def ask_for_comment(self, person: Person) -> int:
        await self.remove_reply_keyboard(person)
        return await self.send(
            person,
            "If you would like to add any comment, that will be attached to the friend request, "
            "you can do it now :) Just send it to me and I will address it to the receiver!",
            keyboards.comment_keyboard(),
        )

    async def send_request_preview(self, sender: Person, receiver: Person, comment: str) -> int:
        text = (
            "Please confirm the sending of friend request!\n"
            f"{receiver.mention} will receive a following message from you:\n\n"
            f"{comment}"
        )
        return await self.send(sender, text, keyboards.confirm_request_keyboard())

    async def send_friend_request(self, sender: Person, receiver: Person, comment: str) -> int:
        text = f"You got new friend request from {sender.mention}"
        if comment:
            text = f"{text}\n\n{comment}"
        return await self.send(
            receiver, text, keyboards.friend_request_keyboard(sender.person_id, receiver.person_id)
        )

    async def send_request_sent(self, sender: Person, receiver: Person) -> int:
        return await self.send(sender, f"You have sent request to: {receiver.mention}")

    async def send_friend_request_aborted(self, sender: Person) -> int:
        return await self.send(sender, "Friend request is aborted!", RemoveReplyControls())

    async def send_already_friends(self, sender: Person) -> int:
        return await self.send(sender, "User is already your friend!", RemoveReplyControls())

    async def send_wizard_hint(self, sender: Person, awaiting_target: bool) -> int:
        if awaiting_target:
            text = f"Please share the friend you want to add with the button below, or send {keyboards.ABORT_KEYWORD} to abort!"
        else:
            text = "Please send or abort your friend request with the buttons of the latest message!"
        return await self.send(sender, text)

    async def send_friend_accept(self, sender: Person, receiver: Person) -> None:
        await self.send(sender, f"{receiver.mention} has accepted your friend request!")
        await self.send(receiver, f"You have accepted {sender.mention} friend request!")

    async def send_friend_decline(self, sender: Person, receiver: Person) -> None:
        await self.send(sender, f"{receiver.mention} has declined your friend request!")
        await self.send(receiver, f"You have declined {sender.mention} friend request!")

    async def send_request_no_longer_valid(self, receiver: Person) -> int:
        return await self.send(receiver, "This friend request was already answered!")

    # Friend list and removal

    async def send_has_no_friends(self, person: Person) -> int:
        return await self.send(
            person,
            "You don't have any friends yet :( You can add them via /add_friend command",
            RemoveReplyControls(),
        )

    async def send_friend_list(self, person: Person, friends: list[Person]) -> int:
        if not friends:
            return await self.send_has_no_friends(person)
        lines = [f"{i}) {friend.full_name} - {friend.mention}" for i, friend in enumerate(friends, start=1)]
        return await self.send(person, "Here are your friends:\n" + "\n".join(lines))

    async def send_removal_page(self, person: Person, page: Page, message_id: Optional[int] = None) -> Optional[int]:
        controls = keyboards.removal_list_keyboard(page)
        if message_id is None:
            return await self.send(person, "Please select friend you want to remove:", controls)
        # navigation edits the list in place
        await self.notifier.edit_controls(person.delivery_address, message_id, controls)
        return message_id

    async def ask_to_confirm_removal(self, person: Person, friend: Person) -> int:
        return await self.send(
            person,
            f"Are you sure you want to remove friend:\n{friend.mention}",
            keyboards.removal_confirm_keyboard(friend.person_id),
        )

    async def send_removed(self, person: Person, friend: Person) -> None:
        await self.send(person, f"Successfully removed {friend.mention} from friends!")
        try:
            await self.send(
                friend,
                f"{person.mention} has removed you from friends. You are no longer sharing location with them! "
                "If you want to add them back to friends - send new /add_friend command!",
            )
        except DeliveryFailure:
            logger.error("Removal notice to %s could not be delivered", friend.person_id)

    # Location sharing

    async def ask_for_location(self, person: Person) -> int:
        logger.info("Sending location request to chat %s", person.delivery_address)
        return await self.send(person, "Please share your location!", keyboards.share_location_keyboard())

    async def broadcast(self, addresses: Iterable[int], text: str) -> int:
        """
        Send ``text`` to every address in order. Stops at the first failed
        delivery and raises PartialBroadcastFailure with the delivered count.
        """
        if not text or not text.strip():
            raise EmptyBroadcastPayload()
        addresses = list(addresses)
        delivered = 0
        for address in addresses:
            try:
                await self.notifier.notify(address, text)
            except DeliveryFailure:
                logger.error("Broadcast stopped at chat %s after %s of %s", address, delivered, len(addresses))
                raise PartialBroadcastFailure(delivered, len(addresses))
            delivered += 1
        return delivered

    async def send_location_result(self, person: Person) -> int:
        return await self.send(person, "Successfully shared location with your geo pals!", RemoveReplyControls())
