import logging
from typing import Optional

from ..errors import NotFriends, SelfRequest
from ..models.friend_request import FriendshipStatus, PendingRequest
from ..models.person import Person

logger = logging.getLogger(__name__)


class RelationshipEngine:
    """Transitions of the friend/request graph kept on Person records."""

    def status_between(self, person: Person, peer: Person) -> FriendshipStatus:
        if peer.person_id in person.friends:
            return FriendshipStatus.FRIENDS
        if peer.person_id in person.outgoing_requests:
            return FriendshipStatus.REQUEST_SENT
        if peer.person_id in person.incoming_requests:
            return FriendshipStatus.REQUEST_RECEIVED
        return FriendshipStatus.NONE

    def send_request(
        self,
        sender: Person,
        receiver: Person,
        comment: str = "",
        anchor_message_id: Optional[int] = None,
    ) -> PendingRequest:
        if sender.person_id == receiver.person_id:
            raise SelfRequest()

        if receiver.person_id in sender.outgoing_requests:
            logger.warning(
                "%s sent a new friend request to %s before the previous one was answered, replacing it",
                sender.person_id, receiver.person_id,
            )

        request = PendingRequest(
            sender_id=sender.person_id,
            receiver_id=receiver.person_id,
            comment=comment,
            anchor_message_id=anchor_message_id,
        )
        sender.outgoing_requests[receiver.person_id] = request
        receiver.incoming_requests[sender.person_id] = request
        return request

    def _resolve(self, receiver: Person, sender: Person, acting_id: Optional[int]) -> Optional[PendingRequest]:
        # Only the receiver may answer a request
        if acting_id is not None and acting_id != receiver.person_id:
            logger.warning(
                "%s tried to answer the friend request from %s to %s, ignoring",
                acting_id, sender.person_id, receiver.person_id,
            )
            return None

        request = receiver.incoming_requests.pop(sender.person_id, None)
        if request is None:
            logger.warning(
                "No pending friend request from %s to %s, answer is stale or duplicate",
                sender.person_id, receiver.person_id,
            )
            return None
        if sender.outgoing_requests.pop(receiver.person_id, None) is None:
            logger.error(
                "Friend request from %s to %s was only recorded on the receiver side",
                sender.person_id, receiver.person_id,
            )
        return request

    def accept(self, receiver: Person, sender: Person, acting_id: Optional[int] = None) -> Optional[PendingRequest]:
        request = self._resolve(receiver, sender, acting_id)
        if request is None:
            return None
        receiver.friends.add(sender.person_id)
        sender.friends.add(receiver.person_id)
        logger.info(
            "%s accepted friend request from %s after %s", receiver.person_id, sender.person_id, request.age
        )
        return request

    def decline(self, receiver: Person, sender: Person, acting_id: Optional[int] = None) -> Optional[PendingRequest]:
        request = self._resolve(receiver, sender, acting_id)
        if request is not None:
            logger.info(
                "%s declined friend request from %s after %s", receiver.person_id, sender.person_id, request.age
            )
        return request

    def remove(self, person: Person, friend: Person) -> None:
        on_person = friend.person_id in person.friends
        on_friend = person.person_id in friend.friends
        if not on_person and not on_friend:
            raise NotFriends()
        if on_person != on_friend:
            logger.error(
                "Friendship between %s and %s was one-sided, removing both sides",
                person.person_id, friend.person_id,
            )
        person.friends.discard(friend.person_id)
        friend.friends.discard(person.person_id)
        logger.info("%s removed %s from friends", person.person_id, friend.person_id)
