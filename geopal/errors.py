ERROR_MESSAGE_ENDING = "If error persists, please contact administrator"


class GeoPalError(Exception):
    """Base class for errors recovered at the event router boundary."""

    notice = "Something went wrong!"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.notice)

    @property
    def user_message(self) -> str:
        return f"{self}\n\n{ERROR_MESSAGE_ENDING}"


class PeerNotRegistered(GeoPalError):
    notice = "User is not registered by the bot! Please advise them to register with /start and try again!"

    def __init__(self, person_id: int | None = None, message: str | None = None):
        self.person_id = person_id
        super().__init__(message)


class InvalidControlPayload(GeoPalError):
    notice = "Invalid instruction! Please use the buttons of the latest message."

    def __init__(self, data: str | None = None, message: str | None = None):
        self.data = data
        super().__init__(message)


class NoActiveWizard(GeoPalError):
    notice = "You have no friend request in progress! Start a new one with /add_friend"


class NotFriends(GeoPalError):
    notice = "User is no longer your friend!"


class SelfRequest(GeoPalError):
    notice = "You cannot send a friend request to yourself!"


class DeliveryFailure(GeoPalError):
    notice = "Message delivery failed! Please try again later!"


class PartialBroadcastFailure(DeliveryFailure):
    def __init__(self, delivered: int, total: int):
        self.delivered = delivered
        self.total = total
        super().__init__(
            f"Location sharing failed! It was delivered to {delivered} of {total} friends."
        )


class EmptyBroadcastPayload(GeoPalError):
    notice = "Message text cannot be empty!"


class LookupFailure(GeoPalError):
    notice = "Could not resolve your location! Please try later!"


class MissingCredential(LookupFailure):
    notice = "Location service is not configured!"


class PaginationIndexOutOfRange(AssertionError):
    def __init__(self, start_index: int, size: int):
        self.start_index = start_index
        self.size = size
        super().__init__(f"Start index {start_index} is out of range for a list of {size} entries")
