"""
Page-token driven aggregation of Drive listings.
"""

import threading
from typing import Callable, List, Optional, Sequence, Tuple, TypeVar

import requests

from .errors import AuditCancelled, DriveAPIError

T = TypeVar("T")

# fetch_page(page_token) -> (items, next_page_token)
PageFetcher = Callable[[str], Tuple[Sequence[T], Optional[str]]]


def fetch_all(fetch_page: PageFetcher, operation: str, target: Optional[str] = None,
              cancel_event: Optional[threading.Event] = None) -> List[T]:
    """
    Call fetch_page repeatedly, following page tokens until none is returned.

    Args:
        fetch_page: Function taking a page token ("" for the first page) and
            returning the page's items plus the next page token
        operation: Description used in error messages (e.g. "list files")
        target: Entity the listing is about, such as a file ID
        cancel_event: Checked before every page fetch

    Returns:
        All items in the order they were received

    Raises:
        AuditCancelled: cancel_event was set; `partial` holds the items so far
        DriveAPIError: a page fetch failed; nothing is returned in that case
    """
    all_items: List[T] = []
    page_token = ""

    while True:
        if cancel_event is not None and cancel_event.is_set():
            raise AuditCancelled(all_items, f"cancelled while trying to {operation}")

        try:
            items, page_token = fetch_page(page_token)
        except DriveAPIError as e:
            raise DriveAPIError(operation, target, status_code=e.status_code,
                                detail=e.detail or str(e)) from e
        except requests.exceptions.RequestException as e:
            raise DriveAPIError(operation, target, detail=str(e)) from e

        all_items.extend(items)

        if not page_token:
            break

    return all_items
