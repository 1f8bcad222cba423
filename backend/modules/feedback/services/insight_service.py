# backend/modules/feedback/services/insight_service.py

import logging
from typing import List, Optional, Sequence

from sqlalchemy.orm import Session

from modules.feedback.models.records import FeedbackRecord
from modules.feedback.schemas.feedback_schemas import (
    CustomerInsightResponse,
    MenuItemFeedbackEntry,
    MenuItemInsightResponse,
    RecentFeedback,
    SentimentAnalysis,
    SentimentBreakdown,
    TopicCount,
)
from modules.feedback.services.aggregation_service import (
    FeedbackAggregator,
    FeedbackSummary,
    feedback_aggregator,
)
from modules.feedback.services.repository import FeedbackRepository
from modules.feedback.services.topic_service import TopicExtractor
from core.config import settings
from core.exceptions import NotFoundError

logger = logging.getLogger(__name__)


def most_recent(records: Sequence[FeedbackRecord], limit: Optional[int] = None) -> list:
    ordered = sorted(records, key=lambda record: record.date, reverse=True)
    return ordered if limit is None else ordered[:limit]


def to_sentiment_analysis(summary: FeedbackSummary) -> SentimentAnalysis:
    return SentimentAnalysis(
        overall_sentiment=summary.overall_sentiment,
        average_rating=summary.average_rating,
        total_feedback=summary.total_feedback,
        sentiment_breakdown=SentimentBreakdown(**summary.sentiment_breakdown),
        insights=list(summary.insights),
        risk_level=summary.risk_level,
        average_sentiment_score=summary.average_sentiment_score,
    )


class FeedbackInsightService:
    """Chef-facing insight views over one customer or one menu item"""

    def __init__(
        self,
        db: Session,
        aggregator: Optional[FeedbackAggregator] = None,
        topic_extractor: Optional[TopicExtractor] = None,
    ):
        self.repository = FeedbackRepository(db)
        self.aggregator = aggregator or feedback_aggregator
        self.topic_extractor = topic_extractor or default_topic_extractor
        self.recent_limit = settings.recent_feedback_limit

    def get_customer_insights(
        self, user_id: int, menu_item_id: int
    ) -> CustomerInsightResponse:
        """Summarize one customer's feedback history for one menu item"""

        records = self.repository.get_customer_feedback(user_id, menu_item_id)

        if not records:
            return CustomerInsightResponse(
                user_id=user_id, menu_item_id=menu_item_id, has_history=False
            )

        summary = self.aggregator.summarize(records)
        topics = self._extract_topics(summary.comments)

        logger.info(
            f"Customer insights for user {user_id}, menu item {menu_item_id}: "
            f"{summary.total_feedback} records, risk {summary.risk_level.value}"
        )

        return CustomerInsightResponse(
            user_id=user_id,
            menu_item_id=menu_item_id,
            recent_feedback=[
                RecentFeedback(
                    rating=record.rating,
                    comment=record.comment,
                    date=record.date,
                    order_id=record.order_id,
                )
                for record in most_recent(records, self.recent_limit)
            ],
            **self._common_fields(summary, topics),
        )

    def get_menu_item_insights(
        self, menu_item_id: int, limit: Optional[int] = None
    ) -> MenuItemInsightResponse:
        """Summarize every customer's feedback for one menu item"""

        menu_item = self.repository.get_menu_item(menu_item_id)
        if menu_item is None:
            raise NotFoundError(f"Menu item {menu_item_id} not found")

        records = self.repository.get_menu_item_feedback(menu_item_id)

        if not records:
            return MenuItemInsightResponse(
                menu_item_id=menu_item_id,
                menu_item_name=menu_item.name,
                has_history=False,
            )

        summary = self.aggregator.summarize(records)
        topics = self._extract_topics(summary.comments)
        ordered = most_recent(records)

        logger.info(
            f"Menu item insights for {menu_item_id}: "
            f"{summary.total_feedback} records, risk {summary.risk_level.value}"
        )

        return MenuItemInsightResponse(
            menu_item_id=menu_item_id,
            menu_item_name=menu_item.name,
            recent_feedback=[
                RecentFeedback(
                    rating=record.rating,
                    comment=record.comment,
                    date=record.date,
                    order_id=record.order_id,
                )
                for record in ordered[: self.recent_limit]
            ],
            feedback_items=[
                MenuItemFeedbackEntry(
                    rating=record.rating,
                    comment=record.comment,
                    date=record.date,
                    user_id=record.user_id,
                    user_name=record.user_name,
                    order_id=record.order_id,
                )
                for record in (ordered if limit is None else ordered[:limit])
            ],
            **self._common_fields(summary, topics),
        )

    def _extract_topics(self, comments: List[str]) -> List[TopicCount]:
        """Topics for the view; an unavailable tagger yields none"""
        try:
            topics = self.topic_extractor.extract_topics(comments)
        except Exception as e:
            logger.warning(f"Topic extraction failed, returning no topics: {e}")
            return []

        return [TopicCount(**topic) for topic in topics]

    def _common_fields(self, summary: FeedbackSummary, topics: List[TopicCount]) -> dict:
        return {
            "has_history": True,
            "total_feedback": summary.total_feedback,
            "sentiment_analysis": to_sentiment_analysis(summary),
            "topics": topics,
            "risk_level": summary.risk_level,
            "overall_sentiment": summary.overall_sentiment,
            "average_rating": summary.average_rating,
            "insights": list(summary.insights),
        }


# Shared extractor so the spaCy pipeline is loaded once per process
default_topic_extractor = TopicExtractor()


def create_insight_service(db: Session) -> FeedbackInsightService:
    """Create an insight service instance"""
    return FeedbackInsightService(db)
