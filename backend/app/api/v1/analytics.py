"""Chart configuration, chart data and report endpoints"""
from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.orm import Session
from pydantic import BaseModel
from typing import Any, Dict, Optional
import logging

from app.api.deps import get_insight_service, get_owner_id
from app.api.v1.uploads import upload_summary
from app.core.database import get_db
from app.core.exceptions import UnknownColumnError
from app.core.table import build_chart_config
from app.models.activity import ActivityAction
from app.services.chart_analytics_service import ChartAnalyticsService
from app.services.chart_projection import project, project_config
from app.services.insight_service import InsightService
from app.services.upload_service import UploadService

router = APIRouter()
logger = logging.getLogger(__name__)


class ChartConfigRequest(BaseModel):
    """Request to save a chart configuration"""
    chartType: str
    xAxis: str
    yAxis: str
    title: Optional[str] = None


class ChartInsightRequest(BaseModel):
    """Request to project a chart and store an AI insight for it"""
    chartType: str
    xAxis: str
    yAxis: str
    label: Optional[str] = None


class ActivityLogRequest(BaseModel):
    """Client-side action on an upload (view, download, chart download)"""
    uploadId: str
    action: ActivityAction
    details: Optional[Dict[str, Any]] = None


def analytics_record(analytics) -> dict:
    return {
        "id": analytics.id,
        "uploadId": analytics.upload_id,
        "chartType": analytics.chart_type,
        "chartData": analytics.chart_data,
        "insights": analytics.insights,
        "createdAt": analytics.created_at.isoformat(),
    }


@router.post("/chart/{upload_id}")
async def save_chart_config(
    upload_id: str,
    body: ChartConfigRequest,
    request: Request,
    owner_id: str = Depends(get_owner_id),
    db: Session = Depends(get_db)
):
    """Append a chart configuration to an upload"""
    upload_service = UploadService(db)
    config = build_chart_config(body.chartType, body.xAxis, body.yAxis, body.title)

    chart_config = upload_service.append_chart_config(upload_id, owner_id, config)
    if not chart_config:
        raise HTTPException(status_code=404, detail="Upload not found")

    try:
        upload_service.record_activity(
            owner_id=owner_id,
            upload_id=upload_id,
            action=ActivityAction.CHART_CREATE,
            details=body.dict(),
            ip_address=request.client.host if request.client else None,
            user_agent=request.headers.get("user-agent"),
        )
    except Exception as e:
        db.rollback()
        logger.error(f"Failed to record chart activity for {upload_id}: {e}")

    return {
        "message": "Chart configuration saved",
        "chartConfig": chart_config.to_config().to_dict(),
    }


@router.get("/chart-data/{upload_id}")
async def get_chart_data(
    upload_id: str,
    x_axis: str = Query(..., alias="xAxis"),
    y_axis: str = Query(..., alias="yAxis"),
    owner_id: str = Depends(get_owner_id),
    db: Session = Depends(get_db)
):
    """Project two columns of an upload into chart labels and data"""
    upload = UploadService(db).get_upload(upload_id, owner_id)
    if not upload:
        raise HTTPException(status_code=404, detail="Upload not found")

    try:
        series = project(upload.table, x_axis, y_axis)
    except UnknownColumnError as e:
        logger.info(f"Chart data request on upload {upload_id} for unknown column {e.axis}")
        raise HTTPException(status_code=400, detail="Invalid column selection")

    return series.to_dict()


@router.get("/reports")
async def get_reports(
    owner_id: str = Depends(get_owner_id),
    db: Session = Depends(get_db)
):
    """All uploads of the caller with every chart configuration projected"""
    uploads = UploadService(db).list_uploads(owner_id, limit=None)

    reports = []
    for upload in uploads:
        table = upload.table
        charts = []
        for chart_config in upload.chart_configs:
            config = chart_config.to_config()
            series = project_config(table, config)
            chart = config.to_dict()
            chart.update({
                "labels": series.raw_labels(),
                "data": list(series.data),
                "xLabel": config.x_axis,
                "yLabel": config.y_axis,
            })
            charts.append(chart)

        report = upload_summary(upload)
        report["chartConfigs"] = charts
        reports.append(report)

    return reports


@router.post("/chart-insight/{upload_id}", status_code=201)
async def create_chart_insight(
    upload_id: str,
    body: ChartInsightRequest,
    owner_id: str = Depends(get_owner_id),
    insight_service: InsightService = Depends(get_insight_service),
    db: Session = Depends(get_db)
):
    """Project a chart, generate an insight for it and store both"""
    upload = UploadService(db).get_upload(upload_id, owner_id)
    if not upload:
        raise HTTPException(status_code=404, detail="Upload not found")

    try:
        series = project(upload.table, body.xAxis, body.yAxis)
    except UnknownColumnError:
        raise HTTPException(status_code=400, detail="Invalid column selection")

    insight = insight_service.generate_series_insight(series, dataset_label=body.label)
    if insight is None:
        raise HTTPException(status_code=502, detail="Failed to generate insights")

    analytics = ChartAnalyticsService(db).save_chart_analytics(
        upload_id=upload.id,
        chart_type=body.chartType,
        chart_data=series.to_dict(),
        insights=insight,
    )
    return analytics_record(analytics)


@router.post("/log", status_code=201)
async def log_activity(
    body: ActivityLogRequest,
    request: Request,
    owner_id: str = Depends(get_owner_id),
    db: Session = Depends(get_db)
):
    """Record an action the client performed on one of the caller's uploads"""
    upload_service = UploadService(db)
    if not upload_service.get_upload(body.uploadId, owner_id):
        raise HTTPException(status_code=404, detail="Upload not found")

    try:
        upload_service.record_activity(
            owner_id=owner_id,
            upload_id=body.uploadId,
            action=body.action,
            details=body.details,
            ip_address=request.client.host if request.client else None,
            user_agent=request.headers.get("user-agent"),
        )
    except Exception as e:
        db.rollback()
        logger.error(f"Error logging activity on upload {body.uploadId}: {e}")
        raise HTTPException(status_code=500, detail="Failed to log analytics")

    return {"message": "Analytics logged"}
