# backend/modules/feedback/services/aggregation_service.py

import logging
from typing import Dict, List, Optional, Sequence
from dataclasses import dataclass, field

from modules.feedback.models.feedback_models import SentimentLabel, RiskLevel
from modules.feedback.models.records import FeedbackRecord
from modules.feedback.services.sentiment_service import (
    LexiconSentimentScorer,
    sentiment_scorer,
)
from modules.feedback.utils.ratios import safe_ratio
from core.config import settings

logger = logging.getLogger(__name__)


LOW_RATING_INSIGHT = "Low average rating - consider improving this dish"
MORE_NEGATIVE_INSIGHT = (
    "More negative feedback than positive - customer satisfaction needs attention"
)
CONCERNS_INSIGHT = (
    "Some customers have expressed concerns - review feedback for improvement areas"
)
WELL_RECEIVED_INSIGHT = "Generally well-received dish with positive feedback"


@dataclass(frozen=True)
class InsightThresholds:
    """Cut-offs for overall sentiment, insight rules and risk levels"""
    overall_sentiment: float = 0.3
    low_rating: float = 3.0
    well_received_rating: float = 4.0
    high_risk_rating: float = 2.5
    medium_risk_rating: float = 3.5

    @classmethod
    def from_settings(cls) -> "InsightThresholds":
        return cls(
            overall_sentiment=settings.overall_sentiment_threshold,
            low_rating=settings.low_rating_threshold,
            well_received_rating=settings.well_received_rating_threshold,
            high_risk_rating=settings.high_risk_rating_threshold,
            medium_risk_rating=settings.medium_risk_rating_threshold,
        )


def empty_breakdown() -> Dict[str, int]:
    return {label.value: 0 for label in SentimentLabel}


@dataclass
class FeedbackSummary:
    """Result of summarizing the feedback in one scope"""
    overall_sentiment: SentimentLabel = SentimentLabel.NEUTRAL
    average_rating: float = 0.0
    total_feedback: int = 0
    sentiment_breakdown: Dict[str, int] = field(default_factory=empty_breakdown)
    insights: List[str] = field(default_factory=list)
    risk_level: RiskLevel = RiskLevel.LOW
    average_sentiment_score: float = 0.0
    comments: List[str] = field(default_factory=list)


class FeedbackAggregator:
    """Turns a list of rated items into a FeedbackSummary"""

    def __init__(
        self,
        scorer: Optional[LexiconSentimentScorer] = None,
        thresholds: Optional[InsightThresholds] = None,
    ):
        self.scorer = scorer or sentiment_scorer
        self.thresholds = thresholds or InsightThresholds.from_settings()

    def summarize(self, records: Sequence[FeedbackRecord]) -> FeedbackSummary:
        """Summarize ratings and comment sentiment for one scope"""

        if not records:
            return FeedbackSummary()

        total_rating = 0
        total_sentiment_score = 0.0
        breakdown = empty_breakdown()
        comments: List[str] = []

        for record in records:
            total_rating += record.rating

            if record.has_comment:
                result = self.scorer.score_comment(record.comment)
                total_sentiment_score += result.score
                breakdown[result.sentiment.value] += 1
                comments.append(record.comment)

        total_feedback = len(records)
        average_rating = safe_ratio(total_rating, total_feedback)
        # Divided by every record, commented or not
        average_sentiment_score = safe_ratio(total_sentiment_score, total_feedback)

        summary = FeedbackSummary(
            overall_sentiment=self._overall_sentiment(average_sentiment_score),
            average_rating=round(average_rating, 2),
            total_feedback=total_feedback,
            sentiment_breakdown=breakdown,
            insights=self._generate_insights(average_rating, breakdown),
            risk_level=self._risk_level(average_rating, breakdown),
            average_sentiment_score=round(average_sentiment_score, 2),
            comments=comments,
        )

        logger.debug(
            f"Summarized {total_feedback} feedback records: "
            f"avg rating {summary.average_rating}, risk {summary.risk_level.value}"
        )

        return summary

    def _overall_sentiment(self, average_score: float) -> SentimentLabel:
        if average_score > self.thresholds.overall_sentiment:
            return SentimentLabel.POSITIVE
        elif average_score < -self.thresholds.overall_sentiment:
            return SentimentLabel.NEGATIVE
        return SentimentLabel.NEUTRAL

    def _generate_insights(
        self, average_rating: float, breakdown: Dict[str, int]
    ) -> List[str]:
        """Evaluate the advisory rules in their fixed order"""

        positive = breakdown[SentimentLabel.POSITIVE.value]
        negative = breakdown[SentimentLabel.NEGATIVE.value]
        insights = []

        if average_rating < self.thresholds.low_rating:
            insights.append(LOW_RATING_INSIGHT)

        if negative > positive:
            insights.append(MORE_NEGATIVE_INSIGHT)

        if negative > 0:
            insights.append(CONCERNS_INSIGHT)

        if average_rating >= self.thresholds.well_received_rating and positive > 0:
            insights.append(WELL_RECEIVED_INSIGHT)

        return insights

    def _risk_level(self, average_rating: float, breakdown: Dict[str, int]) -> RiskLevel:
        positive = breakdown[SentimentLabel.POSITIVE.value]
        negative = breakdown[SentimentLabel.NEGATIVE.value]

        # High is checked first and wins over medium
        if average_rating < self.thresholds.high_risk_rating or negative > positive:
            return RiskLevel.HIGH
        elif average_rating < self.thresholds.medium_risk_rating or negative > 0:
            return RiskLevel.MEDIUM
        return RiskLevel.LOW


# Global aggregator instance
feedback_aggregator = FeedbackAggregator()
