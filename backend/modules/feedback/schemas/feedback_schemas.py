# backend/modules/feedback/schemas/feedback_schemas.py

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel
from typing import Optional, List
from datetime import datetime

from modules.feedback.models.feedback_models import SentimentLabel, RiskLevel


class CamelModel(BaseModel):
    """Serializes with the camelCase keys the dashboards consume"""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, from_attributes=True
    )


# Sentiment schemas
class SentimentRequest(CamelModel):
    text: str = Field(..., max_length=5000)


class SentimentResultResponse(CamelModel):
    """Schema for a single scored comment"""

    sentiment: SentimentLabel
    score: float
    confidence: float = Field(..., ge=0.0, le=1.0)
    positive_count: int = 0
    negative_count: int = 0
    neutral_count: int = 0


class SentimentBreakdown(CamelModel):
    positive: int = 0
    negative: int = 0
    neutral: int = 0


class SentimentAnalysis(CamelModel):
    """Aggregate summary of one feedback scope"""

    overall_sentiment: SentimentLabel = SentimentLabel.NEUTRAL
    average_rating: float = 0.0
    total_feedback: int = 0
    sentiment_breakdown: SentimentBreakdown = Field(default_factory=SentimentBreakdown)
    insights: List[str] = Field(default_factory=list)
    risk_level: RiskLevel = RiskLevel.LOW
    average_sentiment_score: float = 0.0


# Topic schemas
class TopicsRequest(CamelModel):
    comments: List[str] = Field(default_factory=list, max_length=1000)

    @field_validator("comments")
    @classmethod
    def drop_blank_comments(cls, v):
        return [comment for comment in v if comment and comment.strip()]


class TopicCount(CamelModel):
    topic: str
    count: int


# Insight schemas
class RecentFeedback(CamelModel):
    rating: int
    comment: Optional[str] = None
    date: datetime
    order_id: Optional[int] = None


class MenuItemFeedbackEntry(CamelModel):
    rating: int
    comment: Optional[str] = None
    date: datetime
    user_id: Optional[int] = None
    user_name: Optional[str] = None
    order_id: Optional[int] = None


class InsightResponse(CamelModel):
    """Fields shared by the customer and menu item insight views"""

    has_history: bool = False
    total_feedback: int = 0
    sentiment_analysis: SentimentAnalysis = Field(default_factory=SentimentAnalysis)
    topics: List[TopicCount] = Field(default_factory=list)
    risk_level: RiskLevel = RiskLevel.LOW
    overall_sentiment: SentimentLabel = SentimentLabel.NEUTRAL
    average_rating: float = 0.0
    insights: List[str] = Field(default_factory=list)


class CustomerInsightResponse(InsightResponse):
    """One customer's history with one dish"""

    user_id: int
    menu_item_id: int
    recent_feedback: List[RecentFeedback] = Field(default_factory=list)


class MenuItemInsightResponse(InsightResponse):
    """All customers' feedback for one dish"""

    menu_item_id: int
    menu_item_name: Optional[str] = None
    recent_feedback: List[RecentFeedback] = Field(default_factory=list)
    feedback_items: List[MenuItemFeedbackEntry] = Field(default_factory=list)


# Analytics schemas
class TrendPoint(CamelModel):
    date: str
    average_rating: float = 0.0
    order_count: int = 0


class FoodRating(CamelModel):
    menu_item_id: int
    name: str
    average_rating: float = 0.0
    review_count: int = 0


class FoodOrders(CamelModel):
    menu_item_id: int
    name: str
    order_count: int = 0


class ChefPerformance(CamelModel):
    chef_id: int
    chef_name: str
    average_rating: float = 0.0
    review_count: int = 0
    order_count: int = 0


class AnalyticsPeriod(CamelModel):
    days: int
    start_date: str
    end_date: str


class AdminAnalyticsResponse(CamelModel):
    """Restaurant-wide analytics for the admin dashboard"""

    period: AnalyticsPeriod
    total_reviews: int = 0
    overall_rating: float = 0.0
    active_chefs: int = 0
    total_menu_items: int = 0
    reviews_trend: float = 0.0
    rating_trend: float = 0.0
    chefs_trend: float = 0.0
    menu_trend: float = 0.0
    most_liked_food: Optional[FoodRating] = None
    most_hated_food: Optional[FoodRating] = None
    food_ratings: List[FoodRating] = Field(default_factory=list)
    most_ordered_food: Optional[FoodOrders] = None
    least_ordered_food: Optional[FoodOrders] = None
    food_orders: List[FoodOrders] = Field(default_factory=list)
    chef_performance: List[ChefPerformance] = Field(default_factory=list)
    trends: List[TrendPoint] = Field(default_factory=list)
