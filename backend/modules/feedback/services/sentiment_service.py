# backend/modules/feedback/services/sentiment_service.py

import logging
from typing import Iterable, List, Optional, Tuple
from dataclasses import dataclass, field

from vaderSentiment.vaderSentiment import SentimentIntensityAnalyzer

from modules.feedback.models.feedback_models import SentimentLabel
from modules.feedback.utils.ratios import safe_ratio
from core.config import settings

logger = logging.getLogger(__name__)


POSITIVE_KEYWORDS: Tuple[str, ...] = (
    "delicious", "amazing", "excellent", "fantastic", "great", "good", "tasty",
    "yummy", "love", "perfect", "wonderful", "outstanding", "superb", "best",
    "awesome", "incredible", "fabulous", "brilliant", "satisfied", "happy",
)

NEGATIVE_KEYWORDS: Tuple[str, ...] = (
    "terrible", "awful", "bad", "disgusting", "horrible", "worst", "hate",
    "disappointed", "unhappy", "sad", "angry", "upset", "frustrated", "annoyed",
    "poor", "mediocre", "bland", "tasteless", "cold", "burnt", "overcooked",
    "undercooked", "salty", "spicy", "dry", "soggy",
)

NEUTRAL_KEYWORDS: Tuple[str, ...] = (
    "okay", "fine", "average", "normal", "regular", "standard", "decent",
    "acceptable", "satisfactory", "adequate", "reasonable",
)


@dataclass(frozen=True)
class SentimentLexicon:
    """Keyword lists the scorer matches against"""
    positive: Tuple[str, ...] = POSITIVE_KEYWORDS
    negative: Tuple[str, ...] = NEGATIVE_KEYWORDS
    neutral: Tuple[str, ...] = NEUTRAL_KEYWORDS


@dataclass(frozen=True)
class ScoringThresholds:
    positive: float = 0.5
    negative: float = -0.5
    confidence_bias: float = 0.3

    @classmethod
    def from_settings(cls) -> "ScoringThresholds":
        return cls(
            positive=settings.sentiment_positive_threshold,
            negative=settings.sentiment_negative_threshold,
            confidence_bias=settings.sentiment_confidence_bias,
        )


@dataclass
class SentimentResult:
    """Sentiment analysis result for one comment"""
    sentiment: SentimentLabel
    score: float
    confidence: float
    positive_count: int = 0
    negative_count: int = 0
    neutral_count: int = 0
    polarity: float = 0.0
    matched_keywords: List[str] = field(default_factory=list)

    @property
    def total_hits(self) -> int:
        return self.positive_count + self.negative_count + self.neutral_count


class LexiconSentimentScorer:
    """
    Classifies free-text feedback as positive, negative or neutral.

    The score is the keyword balance (+1 per positive keyword found, -1 per
    negative keyword found) plus the VADER compound polarity of the text.
    Keywords match as substrings, so "loved" counts for "love".
    """

    def __init__(
        self,
        lexicon: Optional[SentimentLexicon] = None,
        thresholds: Optional[ScoringThresholds] = None,
        polarity_analyzer: Optional[SentimentIntensityAnalyzer] = None,
    ):
        self.lexicon = lexicon or SentimentLexicon()
        self.thresholds = thresholds or ScoringThresholds.from_settings()
        self.polarity_analyzer = polarity_analyzer or SentimentIntensityAnalyzer()

    def score_comment(self, text: Optional[str]) -> SentimentResult:
        """Score a single comment"""

        if not text or not text.strip():
            return SentimentResult(
                sentiment=SentimentLabel.NEUTRAL, score=0.0, confidence=0.0
            )

        lower_text = text.lower()

        positive_hits = self._find_keywords(lower_text, self.lexicon.positive)
        negative_hits = self._find_keywords(lower_text, self.lexicon.negative)
        neutral_hits = self._find_keywords(lower_text, self.lexicon.neutral)

        polarity = self._generic_polarity(text)
        score = len(positive_hits) - len(negative_hits) + polarity

        sentiment = self._classify(score)
        dominant = {
            SentimentLabel.POSITIVE: len(positive_hits),
            SentimentLabel.NEGATIVE: len(negative_hits),
            SentimentLabel.NEUTRAL: len(neutral_hits),
        }[sentiment]
        total_hits = len(positive_hits) + len(negative_hits) + len(neutral_hits)
        confidence = min(
            1.0, safe_ratio(dominant, total_hits) + self.thresholds.confidence_bias
        )

        return SentimentResult(
            sentiment=sentiment,
            score=round(score, 2),
            confidence=round(confidence, 2),
            positive_count=len(positive_hits),
            negative_count=len(negative_hits),
            neutral_count=len(neutral_hits),
            polarity=round(polarity, 4),
            matched_keywords=positive_hits + negative_hits + neutral_hits,
        )

    def score_comments(self, texts: Iterable[Optional[str]]) -> List[SentimentResult]:
        """Score several comments in order"""
        return [self.score_comment(text) for text in texts]

    def _find_keywords(self, lower_text: str, keywords: Tuple[str, ...]) -> List[str]:
        return [keyword for keyword in keywords if keyword in lower_text]

    def _generic_polarity(self, text: str) -> float:
        """VADER compound score; 0.0 if the analyzer fails on this text"""
        try:
            return float(self.polarity_analyzer.polarity_scores(text)["compound"])
        except Exception as e:
            logger.warning(
                f"Polarity analysis failed, using keyword score only: {e}"
            )
            return 0.0

    def _classify(self, score: float) -> SentimentLabel:
        if score > self.thresholds.positive:
            return SentimentLabel.POSITIVE
        elif score < self.thresholds.negative:
            return SentimentLabel.NEGATIVE
        return SentimentLabel.NEUTRAL


# Global scorer instance
sentiment_scorer = LexiconSentimentScorer()
