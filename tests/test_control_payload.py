import pytest

from geopal.errors import InvalidControlPayload
from geopal.services.control_payload import (
    AbortFriendRemoval,
    AbortWizard,
    AcceptFriendRequest,
    ConfirmFriendRemoval,
    ConfirmWizard,
    DeclineFriendRequest,
    SelectFriendToRemove,
    ShowRemovalPage,
    parse_control_payload,
)


class TestParseControlPayload:
    @pytest.mark.parametrize("data, expected", [
        ("confirm", ConfirmWizard()),
        ("abort", AbortWizard()),
        ("accept_friend_request:12:34", AcceptFriendRequest(sender_id=12, receiver_id=34)),
        ("decline_friend_request:12:34", DeclineFriendRequest(sender_id=12, receiver_id=34)),
        ("remove_friend:56", SelectFriendToRemove(target_id=56)),
        ("remove_friend:confirm:56", ConfirmFriendRemoval(target_id=56)),
        ("remove_friend:abort", AbortFriendRemoval()),
        ("remove_friend:index:10", ShowRemovalPage(start_index=10)),
    ])
    def test_known_shapes(self, data, expected):
        assert parse_control_payload(data) == expected

    def test_abort_is_not_a_target_id(self):
        """``remove_friend:abort`` aborts, it never selects a friend."""
        assert isinstance(parse_control_payload("remove_friend:abort"), AbortFriendRemoval)
        assert isinstance(parse_control_payload("remove_friend:7"), SelectFriendToRemove)

    @pytest.mark.parametrize("data", [
        "",
        "confirm:1",
        "Confirm",
        "accept_friend_request:abc",
        "accept_friend_request:1",
        "accept_friend_request:1:abc",
        "accept_friend_request:1:2:3",
        "decline_friend_request::2",
        "remove_friend",
        "remove_friend:",
        "remove_friend:-1",
        "remove_friend:+1",
        "remove_friend: 1",
        "remove_friend:1_000",
        "remove_friend:１",
        "remove_friend:confirm",
        "remove_friend:confirm:x",
        "remove_friend:index:",
        "remove_friend:index:5:6",
        "remove_friend:abort:1",
        "Remove_friend:1",
        "share_location",
    ])
    def test_malformed_payloads_are_rejected(self, data):
        with pytest.raises(InvalidControlPayload) as exc_info:
            parse_control_payload(data)
        assert exc_info.value.data == data


class TestToPayload:
    def test_payload_strings(self):
        assert AcceptFriendRequest(sender_id=1, receiver_id=2).to_payload() == "accept_friend_request:1:2"
        assert DeclineFriendRequest(sender_id=1, receiver_id=2).to_payload() == "decline_friend_request:1:2"
        assert SelectFriendToRemove(target_id=3).to_payload() == "remove_friend:3"
        assert ConfirmFriendRemoval(target_id=3).to_payload() == "remove_friend:confirm:3"
        assert AbortFriendRemoval().to_payload() == "remove_friend:abort"
        assert ShowRemovalPage(start_index=5).to_payload() == "remove_friend:index:5"
        assert ConfirmWizard().to_payload() == "confirm"
        assert AbortWizard().to_payload() == "abort"

    def test_emitted_payload_parses_back(self):
        instruction = ConfirmFriendRemoval(target_id=987654321)
        assert parse_control_payload(instruction.to_payload()) == instruction
