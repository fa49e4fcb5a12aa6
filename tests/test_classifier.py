from geopal.config import TELEGRAM_BOT_USERNAME
from geopal.models.events import (
    CommandEvent,
    ContactShareEvent,
    ControlPayloadEvent,
    FreeTextEvent,
    LocationShareEvent,
)
from geopal.models.telegram import Update
from geopal.services.classifier import addressed_to_other_bot, classify, command_name

USER = {"id": 1, "is_bot": False, "first_name": "Alice", "username": "alice"}
CHAT = {"id": 1, "type": "private"}


def message_update(**fields) -> Update:
    return Update.model_validate({
        "update_id": 1,
        "message": {"message_id": 10, "from": USER, "chat": CHAT, **fields},
    })


class TestClassify:
    def test_command(self):
        event = classify(message_update(text=f"/add_friend@{TELEGRAM_BOT_USERNAME} now"))

        assert isinstance(event, CommandEvent)
        assert event.name == "add_friend"
        assert event.sender.username == "alice"
        assert (event.chat_id, event.message_id) == (1, 10)

    def test_command_for_another_bot_is_ignored(self):
        assert classify(message_update(text="/start@someone_elses_bot")) is None

    def test_free_text_keeps_original_text(self):
        event = classify(message_update(text="  hi there "))

        assert isinstance(event, FreeTextEvent)
        assert event.text == "  hi there "

    def test_blank_text_is_ignored(self):
        assert classify(message_update(text="   ")) is None

    def test_location(self):
        event = classify(message_update(location={"latitude": 52.5, "longitude": 13.4}))

        assert isinstance(event, LocationShareEvent)
        assert (event.latitude, event.longitude) == (52.5, 13.4)

    def test_users_shared(self):
        event = classify(message_update(users_shared={"request_id": 1, "users": [{"user_id": 42}]}))

        assert isinstance(event, ContactShareEvent)
        assert event.shared_person_id == 42

    def test_legacy_user_ids(self):
        event = classify(message_update(users_shared={"request_id": 1, "user_ids": [43]}))
        assert event.shared_person_id == 43

    def test_user_shared(self):
        event = classify(message_update(user_shared={"request_id": 1, "user_id": 44}))
        assert event.shared_person_id == 44

    def test_contact(self):
        event = classify(message_update(contact={"phone_number": "+100", "user_id": 45}))
        assert event.shared_person_id == 45

    def test_contact_without_account_is_ignored(self):
        assert classify(message_update(contact={"phone_number": "+100"})) is None

    def test_callback_query(self):
        update = Update.model_validate({
            "update_id": 2,
            "callback_query": {
                "id": "cb-1",
                "from": {"id": 2, "first_name": "Bob"},
                "message": {"message_id": 77, "chat": {"id": 2}},
                "data": "accept_friend_request:1:2",
            },
        })

        event = classify(update)

        assert isinstance(event, ControlPayloadEvent)
        assert event.data == "accept_friend_request:1:2"
        assert event.sender.person_id == 2
        assert (event.chat_id, event.message_id, event.callback_id) == (2, 77, "cb-1")

    def test_callback_without_message_is_ignored(self):
        update = Update.model_validate({
            "update_id": 3,
            "callback_query": {"id": "cb-2", "from": {"id": 2}, "data": "confirm"},
        })

        assert classify(update) is None

    def test_update_without_payload(self):
        assert classify(Update(update_id=4)) is None


def test_command_name():
    assert command_name("/Start") == "start"
    assert command_name("/friend_list@bot") == "friend_list"


def test_addressed_to_other_bot():
    assert not addressed_to_other_bot("/start", "geopal_bot")
    assert not addressed_to_other_bot("/start@GeoPal_Bot", "geopal_bot")
    assert addressed_to_other_bot("/start@other_bot", "geopal_bot")
