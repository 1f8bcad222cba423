# backend/modules/feedback/tests/conftest.py

import pytest
from typing import Generator, Dict, Any, List
from datetime import datetime, timedelta
from unittest.mock import Mock
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool
from fastapi.testclient import TestClient

from core.auth import create_access_token
from core.database import Base, get_db
from modules.feedback.models.feedback_models import (
    User, MenuItem, Order, OrderItem, Feedback, FeedbackItem,
    UserRole, OrderStatus
)
from modules.feedback.services.sentiment_service import LexiconSentimentScorer
from modules.feedback.services.aggregation_service import FeedbackAggregator
from modules.feedback.services.topic_service import TopicExtractor
from modules.feedback.services.analytics_service import TrendAggregator


@pytest.fixture
def db_session() -> Generator[Session, None, None]:
    """Fresh in-memory database per test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSessionLocal()

    yield session

    session.close()
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def stub_topic_extractor() -> Mock:
    """Topic extractor that does not need a spaCy model."""
    extractor = Mock(spec=TopicExtractor)
    extractor.extract_topics.return_value = [{"topic": "sauce", "count": 2}]
    return extractor


@pytest.fixture
def client(db_session: Session, stub_topic_extractor: Mock, monkeypatch):
    """Create a test client."""
    from app.main import app

    def _override_get_db():
        yield db_session

    monkeypatch.setattr(
        "modules.feedback.services.insight_service.default_topic_extractor",
        stub_topic_extractor,
    )
    app.dependency_overrides[get_db] = _override_get_db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


# Service fixtures
@pytest.fixture
def scorer() -> LexiconSentimentScorer:
    return LexiconSentimentScorer()


@pytest.fixture
def aggregator(scorer: LexiconSentimentScorer) -> FeedbackAggregator:
    return FeedbackAggregator(scorer=scorer)


@pytest.fixture
def trend_aggregator() -> TrendAggregator:
    return TrendAggregator()


@pytest.fixture(scope="session")
def topic_extractor() -> TopicExtractor:
    """Real spaCy-backed extractor; skipped when the model is not installed."""
    spacy = pytest.importorskip("spacy")
    extractor = TopicExtractor()
    try:
        spacy.load(extractor.model_name)
    except OSError:
        pytest.skip(f"spaCy model {extractor.model_name} is not installed")
    return extractor


# Auth fixtures
def _auth_headers(user_id: int, role: str) -> Dict[str, str]:
    token = create_access_token({"sub": user_id, "role": role})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def auth_headers_customer() -> Dict[str, str]:
    return _auth_headers(1, "customer")


@pytest.fixture
def auth_headers_chef() -> Dict[str, str]:
    return _auth_headers(10, "chef")


@pytest.fixture
def auth_headers_admin() -> Dict[str, str]:
    return _auth_headers(99, "admin")


# Seed data fixtures
@pytest.fixture
def now() -> datetime:
    return datetime.utcnow().replace(microsecond=0)


@pytest.fixture
def seeded_restaurant(db_session: Session, now: datetime) -> Dict[str, Any]:
    """
    Two customers, one chef, two dishes and three rated orders.

    Ratings for the pasta are [2, 2, 5] with comments
    ["bland and cold", "undercooked", "amazing, loved it"].
    """
    chef = User(id=10, name="Chef Ana", email="ana@example.com",
                role=UserRole.CHEF, created_at=now - timedelta(days=100))
    alice = User(id=1, name="Alice", email="alice@example.com",
                 role=UserRole.CUSTOMER, created_at=now - timedelta(days=90))
    bob = User(id=2, name="Bob", email="bob@example.com",
               role=UserRole.CUSTOMER, created_at=now - timedelta(days=90))
    db_session.add_all([chef, alice, bob])

    pasta = MenuItem(id=100, name="Pasta", category="Mains", price=12.5,
                     chef_id=chef.id, created_at=now - timedelta(days=80))
    salad = MenuItem(id=101, name="Salad", category="Starters", price=7.0,
                     chef_id=chef.id, created_at=now - timedelta(days=80))
    db_session.add_all([pasta, salad])

    rated = [
        # (order id, customer, days ago, pasta rating, pasta comment, salad rating)
        (1000, alice, 5, 2, "bland and cold", 4),
        (1001, alice, 3, 2, "undercooked", None),
        (1002, bob, 1, 5, "amazing, loved it", 5),
    ]
    for order_id, customer, days_ago, rating, comment, salad_rating in rated:
        created_at = now - timedelta(days=days_ago)
        order = Order(id=order_id, user_id=customer.id, chef_id=chef.id,
                      status=OrderStatus.COMPLETED, total=20.0, created_at=created_at)
        order.items.append(OrderItem(menu_item_id=pasta.id, quantity=1, price_at_order=12.5))
        items = [FeedbackItem(menu_item_id=pasta.id, rating=rating, comment=comment)]
        if salad_rating is not None:
            order.items.append(OrderItem(menu_item_id=salad.id, quantity=2, price_at_order=7.0))
            items.append(FeedbackItem(menu_item_id=salad.id, rating=salad_rating, comment=""))
        feedback = Feedback(user_id=customer.id, order_id=order_id,
                            created_at=created_at + timedelta(hours=1))
        feedback.items.extend(items)
        db_session.add_all([order, feedback])

    db_session.commit()

    return {"chef": chef, "alice": alice, "bob": bob, "pasta": pasta, "salad": salad}


@pytest.fixture
def pasta_comments() -> List[str]:
    return ["bland and cold", "undercooked", "amazing, loved it"]
