"""Chart analytics API endpoints"""
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from pydantic import BaseModel
from typing import Any, Dict, Optional

from app.api.deps import get_owner_id
from app.api.v1.analytics import analytics_record
from app.core.database import get_db
from app.services.chart_analytics_service import ChartAnalyticsService
from app.services.upload_service import UploadService

router = APIRouter()


class ChartAnalyticsCreate(BaseModel):
    """Request to save a chart result and its insights"""
    uploadId: Optional[str] = None
    chartType: Optional[str] = None
    chartData: Optional[Dict[str, Any]] = None
    insights: Optional[str] = None


@router.post("/", status_code=201)
async def save_chart_analytics(
    body: ChartAnalyticsCreate,
    owner_id: str = Depends(get_owner_id),
    db: Session = Depends(get_db)
):
    """Save a chart + insights for the report view"""
    if not body.uploadId or not body.chartType or not body.chartData:
        raise HTTPException(status_code=400, detail="Missing required fields")

    if not UploadService(db).get_upload(body.uploadId, owner_id):
        raise HTTPException(status_code=404, detail="Upload not found")

    analytics = ChartAnalyticsService(db).save_chart_analytics(
        upload_id=body.uploadId,
        chart_type=body.chartType,
        chart_data=body.chartData,
        insights=body.insights,
    )
    return {"message": "Chart analytics saved", "data": analytics_record(analytics)}


@router.get("/{upload_id}")
async def get_chart_analytics(
    upload_id: str,
    owner_id: str = Depends(get_owner_id),
    db: Session = Depends(get_db)
):
    """Charts saved for an upload"""
    if not UploadService(db).get_upload(upload_id, owner_id):
        raise HTTPException(status_code=404, detail="Upload not found")

    records = ChartAnalyticsService(db).list_chart_analytics(upload_id)
    return [analytics_record(r) for r in records]
