# backend/modules/feedback/tests/test_insight_service.py

import pytest
from datetime import timedelta

from core.exceptions import NotFoundError
from modules.feedback.models.feedback_models import RiskLevel, SentimentLabel
from modules.feedback.models.records import FeedbackRecord
from modules.feedback.services.aggregation_service import LOW_RATING_INSIGHT
from modules.feedback.services.insight_service import (
    FeedbackInsightService, most_recent, create_insight_service
)
from modules.feedback.services.repository import FeedbackRepository
from modules.feedback.services.topic_service import TopicExtractor


class TestFeedbackRepository:
    """Test cases for FeedbackRepository queries"""

    def test_customer_feedback_is_scoped_to_user_and_item(self, db_session, seeded_restaurant):
        repository = FeedbackRepository(db_session)

        records = repository.get_customer_feedback(user_id=1, menu_item_id=100)

        assert sorted(r.order_id for r in records) == [1000, 1001]
        assert {r.rating for r in records} == {2}
        assert {r.comment for r in records} == {"bland and cold", "undercooked"}

    def test_customer_feedback_unknown_pair(self, db_session, seeded_restaurant):
        repository = FeedbackRepository(db_session)

        assert repository.get_customer_feedback(user_id=2, menu_item_id=999) == []

    def test_menu_item_feedback_carries_customer_names(self, db_session, seeded_restaurant):
        repository = FeedbackRepository(db_session)

        records = repository.get_menu_item_feedback(100)

        assert len(records) == 3
        assert {r.user_name for r in records} == {"Alice", "Bob"}

    def test_feedback_documents_within_range(self, db_session, seeded_restaurant, now):
        repository = FeedbackRepository(db_session)

        documents = repository.get_feedback_documents(start=now - timedelta(days=2))

        assert len(documents) == 1
        assert documents[0].order_id == 1002
        assert documents[0].chef_id == 10
        assert sorted(item.rating for item in documents[0].items) == [5, 5]

    def test_orders_within_range(self, db_session, seeded_restaurant, now):
        repository = FeedbackRepository(db_session)

        orders = repository.get_orders(start=now - timedelta(days=4), end=now)

        assert sorted(order.order_id for order in orders) == [1001, 1002]

    def test_chefs_only(self, db_session, seeded_restaurant):
        chefs = FeedbackRepository(db_session).get_chefs()

        assert [chef.name for chef in chefs] == ["Chef Ana"]


class TestMostRecent:

    def test_newest_first_and_limited(self, now):
        records = [
            FeedbackRecord(rating=r, date=now - timedelta(days=d))
            for r, d in [(1, 3), (2, 1), (3, 2), (4, 5)]
        ]

        assert [r.rating for r in most_recent(records, 3)] == [2, 3, 1]
        assert len(most_recent(records)) == 4


class TestFeedbackInsightService:
    """Test cases for FeedbackInsightService"""

    @pytest.fixture
    def service(self, db_session, stub_topic_extractor):
        return FeedbackInsightService(db_session, topic_extractor=stub_topic_extractor)

    def test_customer_insights(self, service, seeded_restaurant, stub_topic_extractor):
        result = service.get_customer_insights(user_id=1, menu_item_id=100)

        assert result.has_history is True
        assert result.total_feedback == 2
        assert result.average_rating == 2.0
        assert result.risk_level == RiskLevel.HIGH
        assert result.insights[0] == LOW_RATING_INSIGHT
        assert result.sentiment_analysis.total_feedback == 2
        assert [r.order_id for r in result.recent_feedback] == [1001, 1000]
        assert [t.topic for t in result.topics] == ["sauce"]
        stub_topic_extractor.extract_topics.assert_called_once()
        comments = stub_topic_extractor.extract_topics.call_args[0][0]
        assert sorted(comments) == ["bland and cold", "undercooked"]

    def test_customer_without_history(self, service, seeded_restaurant, stub_topic_extractor):
        result = service.get_customer_insights(user_id=2, menu_item_id=999)

        assert result.has_history is False
        assert result.total_feedback == 0
        assert result.recent_feedback == []
        assert result.topics == []
        assert result.risk_level == RiskLevel.LOW
        assert result.overall_sentiment == SentimentLabel.NEUTRAL
        stub_topic_extractor.extract_topics.assert_not_called()

    def test_menu_item_insights(self, service, seeded_restaurant):
        result = service.get_menu_item_insights(100)

        assert result.has_history is True
        assert result.menu_item_name == "Pasta"
        assert result.total_feedback == 3
        assert result.average_rating == 3.0
        assert result.risk_level == RiskLevel.HIGH
        assert result.sentiment_analysis.sentiment_breakdown.positive == 1
        assert result.sentiment_analysis.sentiment_breakdown.negative == 2
        assert len(result.recent_feedback) == 3
        assert [entry.order_id for entry in result.feedback_items] == [1002, 1001, 1000]
        assert result.feedback_items[0].user_name == "Bob"

    def test_menu_item_feedback_limit(self, service, seeded_restaurant):
        result = service.get_menu_item_insights(100, limit=1)

        assert [entry.order_id for entry in result.feedback_items] == [1002]
        assert result.total_feedback == 3

    def test_menu_item_ratings_without_comments(self, service, seeded_restaurant, stub_topic_extractor):
        result = service.get_menu_item_insights(101)

        assert result.total_feedback == 2
        assert result.average_rating == 4.5
        assert result.sentiment_analysis.sentiment_breakdown.model_dump() == {
            "positive": 0, "negative": 0, "neutral": 0
        }
        stub_topic_extractor.extract_topics.assert_called_once_with([])

    def test_menu_item_without_feedback(self, service, db_session, seeded_restaurant):
        from modules.feedback.models.feedback_models import MenuItem

        db_session.add(MenuItem(id=102, name="Soup", category="Starters", price=5.0))
        db_session.commit()

        result = service.get_menu_item_insights(102)

        assert result.has_history is False
        assert result.menu_item_name == "Soup"
        assert result.feedback_items == []

    def test_unknown_menu_item(self, service, seeded_restaurant):
        with pytest.raises(NotFoundError):
            service.get_menu_item_insights(999)

    def test_missing_spacy_model_still_summarizes(self, db_session, seeded_restaurant):
        service = FeedbackInsightService(
            db_session, topic_extractor=TopicExtractor(model_name="not_installed_model")
        )

        result = service.get_customer_insights(user_id=1, menu_item_id=100)

        assert result.has_history is True
        assert result.topics == []
        assert result.total_feedback == 2
        assert result.average_rating == 2.0
        assert result.risk_level == RiskLevel.HIGH
        assert result.sentiment_analysis.sentiment_breakdown.negative == 2

    def test_failing_topic_extractor_keeps_menu_item_view(
        self, service, seeded_restaurant, stub_topic_extractor
    ):
        stub_topic_extractor.extract_topics.side_effect = RuntimeError("tagger crashed")

        result = service.get_menu_item_insights(100)

        assert result.topics == []
        assert result.average_rating == 3.0
        assert len(result.feedback_items) == 3

    def test_factory(self, db_session):
        assert isinstance(create_insight_service(db_session), FeedbackInsightService)
