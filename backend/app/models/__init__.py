"""Models package"""
from app.models.upload import Upload
from app.models.chart_config import ChartConfig
from app.models.chart_analytics import ChartAnalytics
from app.models.activity import UploadActivity, ActivityAction

__all__ = [
    "Upload",
    "ChartConfig",
    "ChartAnalytics",
    "UploadActivity",
    "ActivityAction",
]
