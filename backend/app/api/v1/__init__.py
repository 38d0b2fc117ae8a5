"""API v1 routes"""
from fastapi import APIRouter

from app.api.v1 import uploads, analytics, insights, chart_analytics

router = APIRouter()

# Include sub-routers
router.include_router(uploads.router, prefix="/uploads", tags=["uploads"])
router.include_router(analytics.router, prefix="/analytics", tags=["analytics"])
router.include_router(insights.router, prefix="/insights", tags=["insights"])
router.include_router(chart_analytics.router, prefix="/chart-analytics", tags=["chart-analytics"])
