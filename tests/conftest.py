import asyncio

import pytest

from geopal.models.person import Person
from geopal.services.flow import FlowEngine
from geopal.services.notification import NotificationService
from geopal.services.registry import IdentityRegistry
from geopal.services.relationships import RelationshipEngine
from geopal.services.router import EventRouter
from tests.fixtures import RecordingNotifier, fake_resolve_place, identity


@pytest.fixture
def run():
    return asyncio.run


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def registry():
    return IdentityRegistry()


@pytest.fixture
def relationships():
    return RelationshipEngine()


@pytest.fixture
def notifications(notifier):
    return NotificationService(notifier)


@pytest.fixture
def flow(registry, relationships, notifications):
    return FlowEngine(registry, relationships, notifications)


@pytest.fixture
def event_router(registry, relationships, flow, notifications):
    return EventRouter(registry, relationships, flow, notifications, fake_resolve_place)


@pytest.fixture
def register(registry):
    def register_person(person_id: int, username: str | None = None) -> Person:
        return registry.get_or_register(identity(person_id, username), person_id)
    return register_person


@pytest.fixture
def befriend(relationships):
    def make_friends(a: Person, b: Person) -> None:
        relationships.send_request(a, b)
        relationships.accept(b, a)
    return make_friends
