import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from core.config import settings
from core.exceptions import register_exception_handlers

# ========== Feedback Insights ==========
from modules.feedback.routers.insights_router import router as insights_router

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Restaurant Feedback Insights API",
    description="""
    Feedback sentiment and insight aggregation for the restaurant ordering platform.

    ## Features

    * **Customer Insights** - One customer's rating and comment history for a dish
    * **Menu Item Insights** - Sentiment, risk level and topics across all feedback for a dish
    * **Admin Analytics** - Daily rating/order trends, food and chef rollups

    ## Authentication

    Endpoints expect a bearer JWT issued by the platform's auth service with
    `sub` (user id) and `role` (`customer`, `chef` or `admin`) claims.
    """,
    version="1.0.0",
)

# Register exception handlers for consistent error responses
register_exception_handlers(app)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(insights_router)


@app.get("/health", tags=["Health"])
async def health():
    return {"status": "ok", "environment": settings.environment}
