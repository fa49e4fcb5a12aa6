from typing import Callable, NamedTuple, Optional, Sequence

from ..errors import PaginationIndexOutOfRange
from .control_payload import ShowRemovalPage

PAGE_SIZE = 5


def removal_page_token(start_index: int) -> str:
    return ShowRemovalPage(start_index=start_index).to_payload()


class Page(NamedTuple):
    entries: list
    start_index: int
    next_token: Optional[str]
    previous_token: Optional[str]


def render_page(
    entries: Sequence,
    start_index: int,
    page_size: int = PAGE_SIZE,
    token_for: Callable[[int], str] = removal_page_token,
) -> Page:
    """
    Cut the window of ``entries`` starting at ``start_index`` and build the
    navigation tokens for the neighbouring windows.

    Tokens are only ever produced from a valid window, so an out of range
    start index is a programming error and raises PaginationIndexOutOfRange.
    An empty list has no valid window at all.
    """
    size = len(entries)
    if start_index < 0 or start_index >= size:
        raise PaginationIndexOutOfRange(start_index, size)

    last_index = min(size - 1, start_index + page_size - 1)
    visible = list(entries[start_index:last_index + 1])

    next_token = None if last_index >= size - 1 else token_for(min(size - 1, last_index + 1))
    previous_token = None if start_index < page_size else token_for(max(0, start_index - page_size))

    return Page(entries=visible, start_index=start_index, next_token=next_token, previous_token=previous_token)
