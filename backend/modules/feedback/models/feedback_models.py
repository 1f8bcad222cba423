# backend/modules/feedback/models/feedback_models.py

from sqlalchemy import Column, Integer, String, Text, Float, Boolean, DateTime, ForeignKey, Index, Enum
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import enum

from core.database import Base


class SentimentLabel(str, enum.Enum):
    """Coarse sentiment of a feedback comment"""
    POSITIVE = "positive"
    NEGATIVE = "negative"
    NEUTRAL = "neutral"


class RiskLevel(str, enum.Enum):
    """Chef-facing severity of a dish's feedback"""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class UserRole(str, enum.Enum):
    CUSTOMER = "customer"
    CHEF = "chef"
    ADMIN = "admin"


class OrderStatus(str, enum.Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    READY = "ready"
    COMPLETED = "completed"


# Read-side models. The tables are owned by the ordering/menu/auth services;
# this module only queries them.
class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(50), nullable=False)
    email = Column(String(255), unique=True, nullable=False)
    role = Column(Enum(UserRole), default=UserRole.CUSTOMER, nullable=False, index=True)
    created_at = Column(DateTime, default=func.now(), nullable=False)


class MenuItem(Base):
    __tablename__ = "menu_items"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False)
    category = Column(String(50), nullable=True)
    price = Column(Float, nullable=False, default=0.0)
    available = Column(Boolean, default=True)
    chef_id = Column(Integer, ForeignKey("users.id"), nullable=True, index=True)
    created_at = Column(DateTime, default=func.now(), nullable=False)

    chef = relationship("User")


class Order(Base):
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    chef_id = Column(Integer, ForeignKey("users.id"), nullable=True, index=True)
    status = Column(Enum(OrderStatus), default=OrderStatus.PENDING, nullable=False)
    total = Column(Float, nullable=False, default=0.0)
    created_at = Column(DateTime, default=func.now(), nullable=False, index=True)

    user = relationship("User", foreign_keys=[user_id])
    chef = relationship("User", foreign_keys=[chef_id])
    items = relationship("OrderItem", back_populates="order", cascade="all, delete-orphan")
    feedback = relationship("Feedback", back_populates="order", uselist=False)


class OrderItem(Base):
    __tablename__ = "order_items"

    id = Column(Integer, primary_key=True, index=True)
    order_id = Column(Integer, ForeignKey("orders.id"), nullable=False, index=True)
    menu_item_id = Column(Integer, ForeignKey("menu_items.id"), nullable=False, index=True)
    quantity = Column(Integer, nullable=False, default=1)
    price_at_order = Column(Float, nullable=False, default=0.0)

    order = relationship("Order", back_populates="items")
    menu_item = relationship("MenuItem")


class Feedback(Base):
    """One customer's feedback for one order; covers several menu items"""
    __tablename__ = "feedback"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    order_id = Column(Integer, ForeignKey("orders.id"), nullable=False, unique=True)
    average_rating = Column(Float, nullable=True)
    created_at = Column(DateTime, default=func.now(), nullable=False, index=True)

    user = relationship("User")
    order = relationship("Order", back_populates="feedback")
    items = relationship("FeedbackItem", back_populates="feedback", cascade="all, delete-orphan")


class FeedbackItem(Base):
    """Per-menu-item rating and comment inside a feedback document"""
    __tablename__ = "feedback_items"

    id = Column(Integer, primary_key=True, index=True)
    feedback_id = Column(Integer, ForeignKey("feedback.id"), nullable=False, index=True)
    menu_item_id = Column(Integer, ForeignKey("menu_items.id"), nullable=False, index=True)
    rating = Column(Integer, nullable=False)  # 1 to 5
    comment = Column(Text, nullable=True)

    feedback = relationship("Feedback", back_populates="items")
    menu_item = relationship("MenuItem")

    __table_args__ = (
        Index("idx_feedback_items_menu_feedback", "menu_item_id", "feedback_id"),
    )
