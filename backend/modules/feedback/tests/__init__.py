# backend/modules/feedback/tests/__init__.py

"""
Test suite for the feedback insights module.

Covers:
- Comment sentiment scoring
- Feedback aggregation, risk levels and insights
- Topic extraction
- Trend windows and admin analytics
- Repository queries and insight views
- API endpoints and role checks
"""
