import logging
from typing import Optional

from ..errors import PeerNotRegistered
from ..models.person import Identity, Person

logger = logging.getLogger(__name__)


class IdentityRegistry:
    """In-memory arena of every Person that has talked to the bot."""

    def __init__(self):
        self._people: dict[int, Person] = {}

    def get_or_register(self, identity: Identity, delivery_address: int) -> Person:
        person = self._people.get(identity.person_id)
        if person is not None:
            return person
        person = Person.from_identity(identity, delivery_address)
        self._people[person.person_id] = person
        logger.info("Registered %s (%s)", person.person_id, person.mention)
        return person

    def lookup(self, person_id: int) -> Optional[Person]:
        return self._people.get(person_id)

    def require(self, person_id: int) -> Person:
        person = self.lookup(person_id)
        if person is None:
            raise PeerNotRegistered(person_id)
        return person

    def __contains__(self, person_id: int) -> bool:
        return person_id in self._people

    def __len__(self) -> int:
        return len(self._people)
