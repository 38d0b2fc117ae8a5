"""Upload API endpoints"""
from fastapi import APIRouter, Depends, File, HTTPException, Query, Request, UploadFile
from fastapi.concurrency import run_in_threadpool
from sqlalchemy.orm import Session
import logging
import math

from app.api.deps import get_owner_id
from app.config import settings
from app.core.database import get_db
from app.core.exceptions import SheetError
from app.models.activity import ActivityAction
from app.models.upload import Upload
from app.services.file_storage import FileStorage
from app.services.sheet_parser import parse_workbook
from app.services.upload_service import UploadService

router = APIRouter()
logger = logging.getLogger(__name__)


def upload_summary(upload: Upload) -> dict:
    """Upload fields without the table body"""
    return {
        "id": upload.id,
        "fileName": upload.original_name,
        "fileSize": upload.file_size,
        "mimeType": upload.mime_type,
        "columns": upload.column_schemas,
        "totalRows": upload.total_rows,
        "totalColumns": upload.total_columns,
        "downloads": upload.downloads,
        "createdAt": upload.created_at.isoformat(),
    }


def upload_detail(upload: Upload) -> dict:
    """Full upload record including sheet data and chart configurations"""
    detail = upload_summary(upload)
    detail["sheetData"] = upload.table.to_json()
    detail["chartConfigs"] = [c.to_config().to_dict() for c in upload.chart_configs]
    detail["updatedAt"] = upload.updated_at.isoformat()
    return detail


@router.post("/")
async def upload_spreadsheet(
    request: Request,
    file: UploadFile = File(...),
    owner_id: str = Depends(get_owner_id),
    db: Session = Depends(get_db)
):
    """Upload an Excel workbook and parse its first worksheet"""
    if file.content_type not in settings.ALLOWED_MIME_TYPES:
        raise HTTPException(status_code=400, detail="Only Excel files (.xls, .xlsx) are allowed")

    content = await file.read(settings.max_upload_bytes + 1)
    if len(content) > settings.max_upload_bytes:
        raise HTTPException(
            status_code=413,
            detail=f"File exceeds the {settings.MAX_UPLOAD_SIZE_MB}MB limit"
        )
    if not content:
        raise HTTPException(status_code=400, detail="No file uploaded")

    storage = FileStorage()
    stored = storage.save(content, file.filename)

    try:
        table = await run_in_threadpool(parse_workbook, stored.path)
    except SheetError as e:
        storage.delete(str(stored.path))
        logger.warning(f"Rejected upload {file.filename}: {e}")
        raise HTTPException(status_code=400, detail=str(e))

    upload_service = UploadService(db, storage)
    try:
        upload = upload_service.create_upload(
            owner_id=owner_id,
            table=table,
            file_name=stored.file_name,
            original_name=file.filename or stored.file_name,
            file_path=str(stored.path),
            file_size=stored.size,
            mime_type=file.content_type,
        )
    except Exception as e:
        db.rollback()
        storage.delete(str(stored.path))
        logger.error(f"Upload error: {e}")
        raise HTTPException(status_code=500, detail="Upload failed")

    # The upload is already committed; a failed activity write must not fail it
    try:
        upload_service.record_activity(
            owner_id=owner_id,
            upload_id=upload.id,
            action=ActivityAction.UPLOAD,
            details={
                "fileName": upload.original_name,
                "fileSize": upload.file_size,
                "rowCount": table.total_rows,
                "columnCount": table.total_columns,
            },
            ip_address=request.client.host if request.client else None,
            user_agent=request.headers.get("user-agent"),
        )
    except Exception as e:
        db.rollback()
        logger.error(f"Failed to record upload activity for {upload.id}: {e}")

    return {
        "message": "File uploaded successfully",
        "upload": upload_summary(upload),
    }


@router.get("/history")
async def list_uploads(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    owner_id: str = Depends(get_owner_id),
    db: Session = Depends(get_db)
):
    """List the caller's uploads, newest first"""
    upload_service = UploadService(db)
    uploads = upload_service.list_uploads(owner_id, limit=limit, offset=(page - 1) * limit)
    total = upload_service.count_uploads(owner_id)

    return {
        "uploads": [upload_summary(u) for u in uploads],
        "pagination": {
            "current": page,
            "pages": math.ceil(total / limit),
            "total": total,
        },
    }


@router.get("/{upload_id}")
async def get_upload(
    upload_id: str,
    owner_id: str = Depends(get_owner_id),
    db: Session = Depends(get_db)
):
    """Get an upload with its sheet data"""
    upload = UploadService(db).get_upload(upload_id, owner_id)
    if not upload:
        raise HTTPException(status_code=404, detail="Upload not found")
    return upload_detail(upload)


@router.delete("/{upload_id}")
async def delete_upload(
    upload_id: str,
    owner_id: str = Depends(get_owner_id),
    db: Session = Depends(get_db)
):
    """Delete an upload, its charts and its stored file"""
    success = UploadService(db).delete_upload(upload_id, owner_id)
    if not success:
        raise HTTPException(status_code=404, detail="Upload not found")
    return {"message": "Upload deleted successfully"}
