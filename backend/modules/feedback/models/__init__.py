# backend/modules/feedback/models/__init__.py

from .feedback_models import (
    User,
    MenuItem,
    Order,
    OrderItem,
    Feedback,
    FeedbackItem,
    SentimentLabel,
    RiskLevel,
    UserRole,
    OrderStatus,
)

__all__ = [
    "User",
    "MenuItem",
    "Order",
    "OrderItem",
    "Feedback",
    "FeedbackItem",
    "SentimentLabel",
    "RiskLevel",
    "UserRole",
    "OrderStatus",
]
