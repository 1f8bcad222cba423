# backend/modules/feedback/services/repository.py

import logging
from datetime import datetime
from typing import List, Optional

from sqlalchemy import and_
from sqlalchemy.orm import Session, joinedload

from modules.feedback.models.feedback_models import (
    Feedback,
    FeedbackItem,
    MenuItem,
    Order,
    User,
    UserRole,
)
from modules.feedback.models.records import (
    CustomerFeedbackRecord,
    FeedbackDocument,
    MenuItemFeedbackRecord,
    OrderLine,
    OrderRecord,
    RatedItem,
)

logger = logging.getLogger(__name__)


class FeedbackRepository:
    """Read queries over feedback, orders, menu items and users"""

    def __init__(self, db: Session):
        self.db = db

    def get_menu_item(self, menu_item_id: int) -> Optional[MenuItem]:
        return self.db.query(MenuItem).filter(MenuItem.id == menu_item_id).first()

    def get_user(self, user_id: int) -> Optional[User]:
        return self.db.query(User).filter(User.id == user_id).first()

    def get_customer_feedback(
        self, user_id: int, menu_item_id: int
    ) -> List[CustomerFeedbackRecord]:
        """Line items one customer left for one menu item"""

        rows = (
            self.db.query(FeedbackItem, Feedback)
            .join(Feedback, FeedbackItem.feedback_id == Feedback.id)
            .filter(
                and_(
                    Feedback.user_id == user_id,
                    FeedbackItem.menu_item_id == menu_item_id,
                )
            )
            .all()
        )

        return [
            CustomerFeedbackRecord(
                rating=item.rating,
                comment=item.comment,
                date=feedback.created_at,
                order_id=feedback.order_id,
            )
            for item, feedback in rows
        ]

    def get_menu_item_feedback(self, menu_item_id: int) -> List[MenuItemFeedbackRecord]:
        """Line items every customer left for one menu item"""

        rows = (
            self.db.query(FeedbackItem, Feedback, User)
            .join(Feedback, FeedbackItem.feedback_id == Feedback.id)
            .outerjoin(User, Feedback.user_id == User.id)
            .filter(FeedbackItem.menu_item_id == menu_item_id)
            .all()
        )

        return [
            MenuItemFeedbackRecord(
                rating=item.rating,
                comment=item.comment,
                date=feedback.created_at,
                user_id=feedback.user_id,
                user_name=user.name if user else None,
                order_id=feedback.order_id,
            )
            for item, feedback, user in rows
        ]

    def get_feedback_documents(
        self, start: Optional[datetime] = None, end: Optional[datetime] = None
    ) -> List[FeedbackDocument]:
        """Whole feedback submissions created in ``[start, end]``"""

        query = self.db.query(Feedback).options(
            joinedload(Feedback.items), joinedload(Feedback.order)
        )
        if start is not None:
            query = query.filter(Feedback.created_at >= start)
        if end is not None:
            query = query.filter(Feedback.created_at <= end)

        return [
            FeedbackDocument(
                feedback_id=feedback.id,
                created_at=feedback.created_at,
                items=tuple(
                    RatedItem(menu_item_id=item.menu_item_id, rating=item.rating)
                    for item in feedback.items
                ),
                order_id=feedback.order_id,
                chef_id=feedback.order.chef_id if feedback.order else None,
            )
            for feedback in query.all()
        ]

    def get_orders(
        self, start: Optional[datetime] = None, end: Optional[datetime] = None
    ) -> List[OrderRecord]:
        """Orders created in ``[start, end]``"""

        query = self.db.query(Order).options(joinedload(Order.items))
        if start is not None:
            query = query.filter(Order.created_at >= start)
        if end is not None:
            query = query.filter(Order.created_at <= end)

        return [
            OrderRecord(
                order_id=order.id,
                created_at=order.created_at,
                items=tuple(
                    OrderLine(menu_item_id=item.menu_item_id, quantity=item.quantity)
                    for item in order.items
                ),
                chef_id=order.chef_id,
            )
            for order in query.all()
        ]

    def get_menu_items(self) -> List[MenuItem]:
        return self.db.query(MenuItem).order_by(MenuItem.id).all()

    def get_chefs(self) -> List[User]:
        return (
            self.db.query(User)
            .filter(User.role == UserRole.CHEF)
            .order_by(User.id)
            .all()
        )
