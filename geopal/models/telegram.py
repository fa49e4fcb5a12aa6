from pydantic import BaseModel, ConfigDict, Field
from typing import Optional

# Subset of the Telegram Bot API Update schema the bot reacts to

class TelegramUser(BaseModel):
    id: int
    is_bot: bool = False
    first_name: str = ""
    last_name: Optional[str] = None
    username: Optional[str] = None

class TelegramChat(BaseModel):
    id: int
    type: str = "private"

class TelegramLocation(BaseModel):
    latitude: float
    longitude: float

class SharedUser(BaseModel):
    user_id: int

class UsersShared(BaseModel):
    request_id: int
    users: list[SharedUser] = []
    user_ids: list[int] = []

class UserShared(BaseModel):
    request_id: int
    user_id: int

class TelegramContact(BaseModel):
    phone_number: str
    first_name: str = ""
    user_id: Optional[int] = None

class TelegramMessage(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    message_id: int
    from_: Optional[TelegramUser] = Field(default=None, alias="from")
    chat: TelegramChat
    text: Optional[str] = None
    location: Optional[TelegramLocation] = None
    users_shared: Optional[UsersShared] = None
    user_shared: Optional[UserShared] = None
    contact: Optional[TelegramContact] = None

class CallbackQuery(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    from_: TelegramUser = Field(alias="from")
    message: Optional[TelegramMessage] = None
    data: Optional[str] = None

class Update(BaseModel):
    update_id: int
    message: Optional[TelegramMessage] = None
    callback_query: Optional[CallbackQuery] = None
