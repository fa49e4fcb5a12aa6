"""
Button payloads exchanged with the chat client.

Every payload is a colon-delimited string ``instruction:arg1[:arg2]``. Payloads
are decoded exactly once, into the typed instructions below, and any shape that
does not match one of them is rejected with ``InvalidControlPayload``.
"""

from pydantic import BaseModel, ConfigDict
from typing import Union

from ..errors import InvalidControlPayload

SEPARATOR = ":"

CONFIRM_TOKEN = "confirm"
ABORT_TOKEN = "abort"
ACCEPT_INSTRUCTION = "accept_friend_request"
DECLINE_INSTRUCTION = "decline_friend_request"
REMOVE_INSTRUCTION = "remove_friend"
INDEX_ARGUMENT = "index"


def assemble(instruction: str, *arguments) -> str:
    return SEPARATOR.join([instruction, *(str(argument) for argument in arguments)])


class Instruction(BaseModel):
    model_config = ConfigDict(frozen=True)

    def to_payload(self) -> str:
        raise NotImplementedError


class AcceptFriendRequest(Instruction):
    sender_id: int
    receiver_id: int

    def to_payload(self) -> str:
        return assemble(ACCEPT_INSTRUCTION, self.sender_id, self.receiver_id)


class DeclineFriendRequest(Instruction):
    sender_id: int
    receiver_id: int

    def to_payload(self) -> str:
        return assemble(DECLINE_INSTRUCTION, self.sender_id, self.receiver_id)


class SelectFriendToRemove(Instruction):
    target_id: int

    def to_payload(self) -> str:
        return assemble(REMOVE_INSTRUCTION, self.target_id)


class ConfirmFriendRemoval(Instruction):
    target_id: int

    def to_payload(self) -> str:
        return assemble(REMOVE_INSTRUCTION, CONFIRM_TOKEN, self.target_id)


class AbortFriendRemoval(Instruction):
    def to_payload(self) -> str:
        return assemble(REMOVE_INSTRUCTION, ABORT_TOKEN)


class ShowRemovalPage(Instruction):
    start_index: int

    def to_payload(self) -> str:
        return assemble(REMOVE_INSTRUCTION, INDEX_ARGUMENT, self.start_index)


class ConfirmWizard(Instruction):
    def to_payload(self) -> str:
        return CONFIRM_TOKEN


class AbortWizard(Instruction):
    def to_payload(self) -> str:
        return ABORT_TOKEN


ControlInstruction = Union[
    AcceptFriendRequest,
    DeclineFriendRequest,
    SelectFriendToRemove,
    ConfirmFriendRemoval,
    AbortFriendRemoval,
    ShowRemovalPage,
    ConfirmWizard,
    AbortWizard,
]


def _number(field: str, data: str) -> int:
    # ASCII digits only: int() would also accept signs, spaces and underscores
    if not field or not (field.isascii() and field.isdigit()):
        raise InvalidControlPayload(data)
    return int(field)


def parse_control_payload(data: str) -> ControlInstruction:
    match data.split(SEPARATOR):
        case [token] if token == CONFIRM_TOKEN:
            return ConfirmWizard()
        case [token] if token == ABORT_TOKEN:
            return AbortWizard()
        case [instruction, sender, receiver] if instruction == ACCEPT_INSTRUCTION:
            return AcceptFriendRequest(sender_id=_number(sender, data), receiver_id=_number(receiver, data))
        case [instruction, sender, receiver] if instruction == DECLINE_INSTRUCTION:
            return DeclineFriendRequest(sender_id=_number(sender, data), receiver_id=_number(receiver, data))
        case [instruction, argument] if instruction == REMOVE_INSTRUCTION and argument == ABORT_TOKEN:
            return AbortFriendRemoval()
        case [instruction, argument, target] if instruction == REMOVE_INSTRUCTION and argument == CONFIRM_TOKEN:
            return ConfirmFriendRemoval(target_id=_number(target, data))
        case [instruction, argument, start] if instruction == REMOVE_INSTRUCTION and argument == INDEX_ARGUMENT:
            return ShowRemovalPage(start_index=_number(start, data))
        case [instruction, target] if instruction == REMOVE_INSTRUCTION:
            return SelectFriendToRemove(target_id=_number(target, data))
    raise InvalidControlPayload(data)
