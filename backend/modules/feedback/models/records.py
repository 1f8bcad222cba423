# backend/modules/feedback/models/records.py

"""
In-memory record types handed from the repository to the analysis services.

Each scope gets its own record type so optional fields are explicit instead
of being implied by whichever keys a dict happens to carry.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Tuple


@dataclass(frozen=True)
class FeedbackRecord:
    """One rated menu item: the unit the aggregator works on"""
    rating: int
    date: datetime
    comment: Optional[str] = None

    @property
    def has_comment(self) -> bool:
        return bool(self.comment and self.comment.strip())


@dataclass(frozen=True)
class CustomerFeedbackRecord(FeedbackRecord):
    """Line item from one customer's feedback (user x menu item scope)"""
    order_id: Optional[int] = None


@dataclass(frozen=True)
class MenuItemFeedbackRecord(FeedbackRecord):
    """Line item from any customer's feedback (menu item scope)"""
    user_id: Optional[int] = None
    user_name: Optional[str] = None
    order_id: Optional[int] = None


@dataclass(frozen=True)
class RatedItem:
    menu_item_id: int
    rating: int


@dataclass(frozen=True)
class FeedbackDocument:
    """Whole feedback submission, used by the restaurant-wide trend scope"""
    feedback_id: int
    created_at: datetime
    items: Tuple[RatedItem, ...] = ()
    order_id: Optional[int] = None
    chef_id: Optional[int] = None


@dataclass(frozen=True)
class OrderLine:
    menu_item_id: int
    quantity: int = 1


@dataclass(frozen=True)
class OrderRecord:
    order_id: int
    created_at: datetime
    items: Tuple[OrderLine, ...] = ()
    chef_id: Optional[int] = None
