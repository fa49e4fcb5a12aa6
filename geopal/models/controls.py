from pydantic import BaseModel
from typing import Union

class InlineButton(BaseModel):
    text: str
    payload: str

class InlineControls(BaseModel):
    rows: list[list[InlineButton]] = []

class ReplyButton(BaseModel):
    text: str
    request_user: bool = False
    request_location: bool = False

class ReplyControls(BaseModel):
    rows: list[list[ReplyButton]] = []
    one_time: bool = True

class RemoveReplyControls(BaseModel):
    pass

Controls = Union[InlineControls, ReplyControls, RemoveReplyControls]
