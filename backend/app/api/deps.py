"""Shared API dependencies"""
from fastapi import Header, HTTPException, Request

from app.services.insight_service import InsightService


def get_owner_id(x_user_id: str = Header(...)) -> str:
    """Caller identity, as forwarded by the identity provider"""
    owner_id = x_user_id.strip()
    if not owner_id:
        raise HTTPException(status_code=401, detail="Missing user id")
    return owner_id


def get_insight_service(request: Request) -> InsightService:
    """Insight service created at startup"""
    service = getattr(request.app.state, "insight_service", None)
    if service is None or not service.available:
        raise HTTPException(status_code=503, detail="Insight generation is not configured")
    return service
