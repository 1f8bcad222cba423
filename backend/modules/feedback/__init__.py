# backend/modules/feedback/__init__.py

"""
Restaurant Feedback Insights Module

This module turns per-dish ratings and free-text comments into:
- Comment sentiment (keyword lexicon plus VADER polarity)
- Per-scope summaries with risk levels and insight strings
- Recurring topics extracted with spaCy
- Customer and menu item insight views for chefs
- Restaurant-wide daily trends and food/chef rollups for admins

Key Components:
- Models: Users, menu items, orders and feedback line items
- Services: Scoring, aggregation, topic extraction, analytics
- Routers: Read-only insight and analytics endpoints
"""

__version__ = "1.0.0"
