# backend/modules/feedback/services/analytics_service.py

import logging
from typing import Dict, Any, Optional, List, Sequence, Tuple
from datetime import date, datetime, time, timedelta, timezone
from dataclasses import dataclass, field
from collections import defaultdict

from sqlalchemy.orm import Session

from modules.feedback.models.records import FeedbackDocument, OrderRecord
from modules.feedback.schemas.feedback_schemas import (
    AdminAnalyticsResponse,
    AnalyticsPeriod,
    ChefPerformance,
    FoodOrders,
    FoodRating,
    TrendPoint,
)
from modules.feedback.services.repository import FeedbackRepository
from modules.feedback.utils.ratios import safe_ratio, percent_change
from core.config import settings

logger = logging.getLogger(__name__)


def to_utc_naive(value: datetime) -> datetime:
    """Normalize a timestamp to naive UTC; naive input is taken as UTC"""
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def utc_day(value: datetime) -> date:
    return to_utc_naive(value).date()


@dataclass
class AnalyticsTimeframe:
    """Current and preceding windows of whole UTC calendar days"""

    days: int
    start_day: date
    end_day: date
    previous_start_day: date

    @classmethod
    def ending_at(cls, days: int, now: Optional[datetime] = None) -> "AnalyticsTimeframe":
        if days < 1:
            raise ValueError("days must be at least 1")

        today = utc_day(now) if now is not None else datetime.utcnow().date()
        start_day = today - timedelta(days=days)
        # The window covers days + 1 calendar days; the previous one is as long
        previous_start_day = start_day - timedelta(days=days + 1)
        return cls(
            days=days,
            start_day=start_day,
            end_day=today,
            previous_start_day=previous_start_day,
        )

    @property
    def start(self) -> datetime:
        return datetime.combine(self.start_day, time.min)

    @property
    def end(self) -> datetime:
        return datetime.combine(self.end_day, time.max)

    @property
    def previous_start(self) -> datetime:
        return datetime.combine(self.previous_start_day, time.min)

    def contains(self, value: datetime) -> bool:
        return self.start_day <= utc_day(value) <= self.end_day

    def in_previous(self, value: datetime) -> bool:
        return self.previous_start_day <= utc_day(value) < self.start_day

    def day_keys(self) -> List[str]:
        return [
            (self.start_day + timedelta(days=offset)).isoformat()
            for offset in range(self.days + 1)
        ]


@dataclass
class TrendReport:
    """Daily rollup of one analytics window"""

    timeframe: AnalyticsTimeframe
    trends: List[Dict[str, Any]] = field(default_factory=list)
    total_reviews: int = 0
    overall_rating: float = 0.0
    reviews_trend: float = 0.0
    rating_trend: float = 0.0
    previous_reviews: int = 0
    previous_rating: float = 0.0


class TrendAggregator:
    """Pure day-bucketed rollups of feedback and orders"""

    def build_trends(
        self,
        feedback: Sequence[FeedbackDocument],
        orders: Sequence[OrderRecord],
        days: int,
        now: Optional[datetime] = None,
    ) -> TrendReport:
        """
        Bucket feedback ratings and order counts by UTC calendar day.

        The window is ``[today - days, today]`` with both ends included, so it
        always has ``days + 1`` points. Feedback in the equally long window
        just before it is used for the period-over-period percentages;
        anything else is ignored.
        """

        timeframe = AnalyticsTimeframe.ending_at(days, now)

        buckets = {
            key: {"total_rating": 0, "rating_count": 0, "order_count": 0}
            for key in timeframe.day_keys()
        }

        for order in orders:
            bucket = buckets.get(utc_day(order.created_at).isoformat())
            if bucket is not None:
                bucket["order_count"] += 1

        total_rating = 0
        rating_count = 0
        total_reviews = 0
        previous_rating_total = 0
        previous_rating_count = 0
        previous_reviews = 0

        for document in feedback:
            bucket = buckets.get(utc_day(document.created_at).isoformat())
            if bucket is not None:
                total_reviews += 1
                for item in document.items:
                    bucket["total_rating"] += item.rating
                    bucket["rating_count"] += 1
                    total_rating += item.rating
                    rating_count += 1
            elif timeframe.in_previous(document.created_at):
                previous_reviews += 1
                for item in document.items:
                    previous_rating_total += item.rating
                    previous_rating_count += 1

        trends = [
            {
                "date": key,
                "average_rating": round(
                    safe_ratio(bucket["total_rating"], bucket["rating_count"]), 2
                ),
                "order_count": bucket["order_count"],
            }
            for key, bucket in buckets.items()
        ]

        overall_rating = safe_ratio(total_rating, rating_count)
        previous_rating = safe_ratio(previous_rating_total, previous_rating_count)

        return TrendReport(
            timeframe=timeframe,
            trends=trends,
            total_reviews=total_reviews,
            overall_rating=round(overall_rating, 2),
            reviews_trend=round(percent_change(total_reviews, previous_reviews), 1),
            rating_trend=round(percent_change(overall_rating, previous_rating), 1),
            previous_reviews=previous_reviews,
            previous_rating=round(previous_rating, 2),
        )

    def food_ratings(
        self,
        feedback: Sequence[FeedbackDocument],
        menu_items: Sequence[Tuple[int, str]],
    ) -> List[Dict[str, Any]]:
        """Average rating per menu item, best first; unrated items report 0"""

        totals: Dict[int, List[int]] = defaultdict(lambda: [0, 0])
        for document in feedback:
            for item in document.items:
                totals[item.menu_item_id][0] += item.rating
                totals[item.menu_item_id][1] += 1

        ratings = [
            {
                "menu_item_id": menu_item_id,
                "name": name,
                "average_rating": round(
                    safe_ratio(totals[menu_item_id][0], totals[menu_item_id][1]), 2
                ),
                "review_count": totals[menu_item_id][1],
            }
            for menu_item_id, name in menu_items
        ]
        return sorted(ratings, key=lambda entry: entry["average_rating"], reverse=True)

    def food_orders(
        self,
        orders: Sequence[OrderRecord],
        menu_items: Sequence[Tuple[int, str]],
    ) -> List[Dict[str, Any]]:
        """Ordered quantity per menu item, most ordered first"""

        quantities: Dict[int, int] = defaultdict(int)
        for order in orders:
            for line in order.items:
                quantities[line.menu_item_id] += line.quantity

        counts = [
            {
                "menu_item_id": menu_item_id,
                "name": name,
                "order_count": quantities[menu_item_id],
            }
            for menu_item_id, name in menu_items
        ]
        return sorted(counts, key=lambda entry: entry["order_count"], reverse=True)

    def chef_performance(
        self,
        feedback: Sequence[FeedbackDocument],
        orders: Sequence[OrderRecord],
        chefs: Sequence[Tuple[int, str]],
        menu_item_chefs: Optional[Dict[int, Optional[int]]] = None,
    ) -> List[Dict[str, Any]]:
        """
        Average rating and order count per chef.

        A rating belongs to the chef assigned to the order; when the order has
        no chef it falls back to the chef responsible for the menu item.
        """

        menu_item_chefs = menu_item_chefs or {}
        totals: Dict[int, List[int]] = defaultdict(lambda: [0, 0])
        order_counts: Dict[int, int] = defaultdict(int)

        for document in feedback:
            for item in document.items:
                chef_id = document.chef_id or menu_item_chefs.get(item.menu_item_id)
                if chef_id is None:
                    continue
                totals[chef_id][0] += item.rating
                totals[chef_id][1] += 1

        for order in orders:
            if order.chef_id is not None:
                order_counts[order.chef_id] += 1

        return [
            {
                "chef_id": chef_id,
                "chef_name": name,
                "average_rating": round(
                    safe_ratio(totals[chef_id][0], totals[chef_id][1]), 2
                ),
                "review_count": totals[chef_id][1],
                "order_count": order_counts[chef_id],
            }
            for chef_id, name in chefs
        ]


class AdminAnalyticsService:
    """Restaurant-wide analytics for the admin dashboard"""

    def __init__(self, db: Session, trend_aggregator: Optional[TrendAggregator] = None):
        self.repository = FeedbackRepository(db)
        self.trend_aggregator = trend_aggregator or TrendAggregator()

    def get_admin_analytics(
        self, days: Optional[int] = None, now: Optional[datetime] = None
    ) -> AdminAnalyticsResponse:
        """Build the admin analytics payload for the last ``days`` days"""

        days = days if days is not None else settings.analytics_default_days
        if days < 1 or days > settings.analytics_max_days:
            raise ValueError(
                f"days must be between 1 and {settings.analytics_max_days}"
            )

        # One clock reading for the fetch and the bucketing
        now = now or datetime.utcnow()
        timeframe = AnalyticsTimeframe.ending_at(days, now)

        # One fetch covers the current window and the one before it
        feedback = self.repository.get_feedback_documents(
            timeframe.previous_start, timeframe.end
        )
        orders = self.repository.get_orders(timeframe.start, timeframe.end)
        menu_items = self.repository.get_menu_items()
        chefs = self.repository.get_chefs()

        report = self.trend_aggregator.build_trends(feedback, orders, days, now)

        current_feedback = [
            document for document in feedback if timeframe.contains(document.created_at)
        ]
        menu_item_pairs = [(item.id, item.name) for item in menu_items]

        food_ratings = self.trend_aggregator.food_ratings(current_feedback, menu_item_pairs)
        food_orders = self.trend_aggregator.food_orders(orders, menu_item_pairs)
        chef_performance = self.trend_aggregator.chef_performance(
            current_feedback,
            orders,
            [(chef.id, chef.name) for chef in chefs],
            {item.id: item.chef_id for item in menu_items},
        )

        rated = [entry for entry in food_ratings if entry["review_count"] > 0]
        ordered = [entry for entry in food_orders if entry["order_count"] > 0]

        logger.info(
            f"Admin analytics for {days} days: {report.total_reviews} reviews, "
            f"{len(orders)} orders, {len(menu_items)} menu items"
        )

        return AdminAnalyticsResponse(
            period=AnalyticsPeriod(
                days=days,
                start_date=timeframe.start_day.isoformat(),
                end_date=timeframe.end_day.isoformat(),
            ),
            total_reviews=report.total_reviews,
            overall_rating=report.overall_rating,
            active_chefs=len(chefs),
            total_menu_items=len(menu_items),
            reviews_trend=report.reviews_trend,
            rating_trend=report.rating_trend,
            chefs_trend=self._growth_trend(chefs, timeframe),
            menu_trend=self._growth_trend(menu_items, timeframe),
            most_liked_food=FoodRating(**rated[0]) if rated else None,
            most_hated_food=(
                FoodRating(**min(rated, key=lambda entry: entry["average_rating"]))
                if rated
                else None
            ),
            food_ratings=[FoodRating(**entry) for entry in food_ratings],
            most_ordered_food=FoodOrders(**ordered[0]) if ordered else None,
            least_ordered_food=(
                FoodOrders(**min(ordered, key=lambda entry: entry["order_count"]))
                if ordered
                else None
            ),
            food_orders=[FoodOrders(**entry) for entry in food_orders],
            chef_performance=[ChefPerformance(**entry) for entry in chef_performance],
            trends=[TrendPoint(**point) for point in report.trends],
        )

    def _growth_trend(self, rows: Sequence[Any], timeframe: AnalyticsTimeframe) -> float:
        """Percent change in rows created this window vs. the previous one"""
        current = sum(1 for row in rows if row.created_at and timeframe.contains(row.created_at))
        previous = sum(
            1 for row in rows if row.created_at and timeframe.in_previous(row.created_at)
        )
        return round(percent_change(current, previous), 1)


# Service factory function
def create_analytics_service(db: Session) -> AdminAnalyticsService:
    """Create an analytics service instance"""
    return AdminAnalyticsService(db)
