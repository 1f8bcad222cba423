# backend/modules/feedback/routers/insights_router.py

from fastapi import APIRouter, Depends, HTTPException, Query, Path, Body
from sqlalchemy.orm import Session
from typing import List, Optional
import logging

from core.auth import TokenData, require_admin, require_chef
from core.config import settings
from core.database import get_db
from modules.feedback.services.analytics_service import create_analytics_service
from modules.feedback.services import insight_service
from modules.feedback.services.insight_service import create_insight_service
from modules.feedback.services.sentiment_service import sentiment_scorer
from modules.feedback.schemas.feedback_schemas import (
    AdminAnalyticsResponse,
    CustomerInsightResponse,
    MenuItemInsightResponse,
    SentimentRequest,
    SentimentResultResponse,
    TopicCount,
    TopicsRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/feedback", tags=["Feedback Insights"])


@router.get(
    "/insights/{user_id}/{menu_item_id}", response_model=CustomerInsightResponse
)
async def get_customer_insights(
    user_id: int = Path(..., description="Customer user ID"),
    menu_item_id: int = Path(..., description="Menu item ID"),
    db: Session = Depends(get_db),
    current_user: TokenData = Depends(require_chef),
):
    """One customer's feedback history with one dish (chef or admin)"""

    try:
        service = create_insight_service(db)
        return service.get_customer_insights(user_id, menu_item_id)

    except HTTPException:
        raise
    except Exception as e:
        logger.error(
            f"Error building insights for user {user_id}, menu item {menu_item_id}: {e}"
        )
        raise HTTPException(status_code=500, detail="Internal server error")


@router.get("/menu-item/{menu_item_id}", response_model=MenuItemInsightResponse)
async def get_menu_item_insights(
    menu_item_id: int = Path(..., description="Menu item ID"),
    limit: Optional[int] = Query(
        settings.menu_item_feedback_limit,
        ge=1,
        le=500,
        description="Maximum feedback entries to return",
    ),
    db: Session = Depends(get_db),
    current_user: TokenData = Depends(require_chef),
):
    """Aggregate feedback insight for one dish (chef or admin)"""

    try:
        service = create_insight_service(db)
        return service.get_menu_item_insights(menu_item_id, limit=limit)

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error building insights for menu item {menu_item_id}: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")


@router.get("/analytics/admin", response_model=AdminAnalyticsResponse)
async def get_admin_analytics(
    days: int = Query(
        settings.analytics_default_days,
        ge=1,
        description="Number of days to analyze (at most ANALYTICS_MAX_DAYS)",
    ),
    db: Session = Depends(get_db),
    current_user: TokenData = Depends(require_admin),
):
    """Restaurant-wide ratings, orders and trends (admin only)"""

    try:
        service = create_analytics_service(db)
        return service.get_admin_analytics(days)

    except (HTTPException, ValueError):
        raise
    except Exception as e:
        logger.error(f"Error building admin analytics for {days} days: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")


@router.post("/sentiment", response_model=SentimentResultResponse)
async def analyze_sentiment(
    request: SentimentRequest = Body(...),
    current_user: TokenData = Depends(require_chef),
):
    """Score a single comment"""

    result = sentiment_scorer.score_comment(request.text)
    return SentimentResultResponse(
        sentiment=result.sentiment,
        score=result.score,
        confidence=result.confidence,
        positive_count=result.positive_count,
        negative_count=result.negative_count,
        neutral_count=result.neutral_count,
    )


@router.post("/topics", response_model=List[TopicCount])
async def extract_topics(
    request: TopicsRequest = Body(...),
    current_user: TokenData = Depends(require_chef),
):
    """Most frequent nouns and adjectives across a set of comments"""

    try:
        return insight_service.default_topic_extractor.extract_topics(request.comments)

    except Exception as e:
        logger.error(f"Error extracting topics: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")
