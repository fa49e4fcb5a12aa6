from ..models.controls import (
    InlineButton,
    InlineControls,
    ReplyButton,
    ReplyControls,
)
from .control_payload import (
    AbortFriendRemoval,
    AbortWizard,
    AcceptFriendRequest,
    ConfirmFriendRemoval,
    ConfirmWizard,
    DeclineFriendRequest,
)
from .pagination import Page

ABORT_KEYWORD = "❌"

# Friend request buttons
ADD_FRIEND = "Add Friend\U0001F464"
SEND_WITHOUT_COMMENT = "Send without comments✅"
ABORT_SENDING = "Abort friend request❌"
SEND = "Send✅"
ACCEPT = "Accept✅"
DECLINE = "Decline❌"

# Remove friend buttons
CONFIRM_REMOVAL = "Accept✅"
ABORT_REMOVAL = "Abort❌"
PREVIOUS = "« Previous"
NEXT = "Next »"

SHARE_LOCATION = "Share Location\U0001F4CD"


def add_friend_keyboard() -> ReplyControls:
    return ReplyControls(rows=[[
        ReplyButton(text=ADD_FRIEND, request_user=True),
        ReplyButton(text=ABORT_KEYWORD),
    ]])

def share_location_keyboard() -> ReplyControls:
    return ReplyControls(rows=[[
        ReplyButton(text=SHARE_LOCATION, request_location=True),
        ReplyButton(text=ABORT_KEYWORD),
    ]])

def empty_inline_keyboard() -> InlineControls:
    return InlineControls(rows=[])

def friend_request_keyboard(sender_id: int, receiver_id: int) -> InlineControls:
    return InlineControls(rows=[[
        InlineButton(text=ACCEPT, payload=AcceptFriendRequest(sender_id=sender_id, receiver_id=receiver_id).to_payload()),
        InlineButton(text=DECLINE, payload=DeclineFriendRequest(sender_id=sender_id, receiver_id=receiver_id).to_payload()),
    ]])

def comment_keyboard() -> InlineControls:
    return InlineControls(rows=[[
        InlineButton(text=SEND_WITHOUT_COMMENT, payload=ConfirmWizard().to_payload()),
        InlineButton(text=ABORT_SENDING, payload=AbortWizard().to_payload()),
    ]])

def confirm_request_keyboard() -> InlineControls:
    return InlineControls(rows=[[
        InlineButton(text=SEND, payload=ConfirmWizard().to_payload()),
        InlineButton(text=ABORT_SENDING, payload=AbortWizard().to_payload()),
    ]])

def removal_list_keyboard(page: Page) -> InlineControls:
    # one friend per row, then navigation, abort always last
    rows = [[button] for button in page.entries]
    navigation = []
    if page.previous_token is not None:
        navigation.append(InlineButton(text=PREVIOUS, payload=page.previous_token))
    if page.next_token is not None:
        navigation.append(InlineButton(text=NEXT, payload=page.next_token))
    if navigation:
        rows.append(navigation)
    rows.append([InlineButton(text=ABORT_REMOVAL, payload=AbortFriendRemoval().to_payload())])
    return InlineControls(rows=rows)

def removal_confirm_keyboard(target_id: int) -> InlineControls:
    return InlineControls(rows=[[
        InlineButton(text=CONFIRM_REMOVAL, payload=ConfirmFriendRemoval(target_id=target_id).to_payload()),
        InlineButton(text=ABORT_REMOVAL, payload=AbortFriendRemoval().to_payload()),
    ]])
