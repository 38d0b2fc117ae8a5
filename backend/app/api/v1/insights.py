"""Chart insight endpoints"""
from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel
from typing import Any, List, Optional
import logging

from app.api.deps import get_insight_service
from app.services.insight_service import InsightService

router = APIRouter()
logger = logging.getLogger(__name__)


class ChartInsightConfig(BaseModel):
    """Chart data as rendered on the client"""
    labels: Optional[List[Any]] = None
    data: Optional[List[float]] = None
    xLabel: Optional[str] = None
    yLabel: Optional[str] = None
    label: Optional[str] = None


class InsightRequest(BaseModel):
    config: Optional[ChartInsightConfig] = None


@router.post("/generate")
async def generate_chart_insight(
    body: InsightRequest,
    insight_service: InsightService = Depends(get_insight_service)
):
    """Generate bullet-point insights for chart data"""
    config = body.config
    if not config or config.labels is None or config.data is None:
        raise HTTPException(status_code=400, detail="Invalid chart config")

    insight = insight_service.generate_insight(
        labels=config.labels,
        data=config.data,
        x_label=config.xLabel,
        y_label=config.yLabel,
        dataset_label=config.label,
    )
    if insight is None:
        raise HTTPException(status_code=502, detail="Failed to generate insights")

    return {"insight": insight}
