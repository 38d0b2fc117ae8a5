"""Chart analytics service - stored chart results and insights"""
from typing import Dict, List, Optional
import logging

from sqlalchemy.orm import Session

from app.models.chart_analytics import ChartAnalytics

logger = logging.getLogger(__name__)


class ChartAnalyticsService:
    """Service for saving and listing chart analytics per upload"""

    def __init__(self, db: Session):
        self.db = db

    def save_chart_analytics(
        self,
        upload_id: str,
        chart_type: str,
        chart_data: Dict,
        insights: Optional[str] = None,
    ) -> ChartAnalytics:
        analytics = ChartAnalytics(
            upload_id=upload_id,
            chart_type=chart_type,
            chart_data=chart_data,
            insights=insights,
        )
        self.db.add(analytics)
        self.db.commit()
        self.db.refresh(analytics)

        logger.info(f"Saved {chart_type} chart analytics for upload {upload_id}")
        return analytics

    def list_chart_analytics(self, upload_id: str) -> List[ChartAnalytics]:
        """Chart analytics for an upload, oldest first"""
        return (
            self.db.query(ChartAnalytics)
            .filter(ChartAnalytics.upload_id == upload_id)
            .order_by(ChartAnalytics.created_at.asc())
            .all()
        )
