"""Upload service for storing parsed spreadsheets and their chart configurations"""
from typing import Dict, List, Optional
import logging

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.table import ChartConfiguration, NormalizedTable, SHEET_SCHEMA_VERSION
from app.models.activity import ActivityAction, UploadActivity
from app.models.chart_config import ChartConfig
from app.models.upload import Upload
from app.services.file_storage import FileStorage

logger = logging.getLogger(__name__)

APPEND_RETRIES = 3

DOWNLOAD_ACTIONS = (ActivityAction.DOWNLOAD, ActivityAction.CHART_DOWNLOAD)


class UploadService:
    """Service for upload records, chart configurations and activity"""

    def __init__(self, db: Session, file_storage: Optional[FileStorage] = None):
        self.db = db
        self.file_storage = file_storage or FileStorage()

    def create_upload(
        self,
        owner_id: str,
        table: NormalizedTable,
        file_name: str,
        original_name: str,
        file_path: str,
        file_size: int,
        mime_type: str,
    ) -> Upload:
        """Persist a normalized table with its file metadata"""
        upload = Upload(
            owner_id=owner_id,
            file_name=file_name,
            original_name=original_name,
            file_path=file_path,
            file_size=file_size,
            mime_type=mime_type,
            sheet_data=table.to_dict(),
            schema_version=SHEET_SCHEMA_VERSION,
        )
        self.db.add(upload)
        self.db.commit()
        self.db.refresh(upload)

        logger.info(
            f"Created upload {upload.id} for {owner_id}: "
            f"{table.total_rows} rows, {table.total_columns} columns"
        )
        return upload

    def get_upload(self, upload_id: str, owner_id: str) -> Optional[Upload]:
        """Get an upload owned by owner_id"""
        return (
            self.db.query(Upload)
            .filter(Upload.id == upload_id, Upload.owner_id == owner_id)
            .first()
        )

    def list_uploads(self, owner_id: str, limit: Optional[int] = 10, offset: int = 0) -> List[Upload]:
        """List an owner's uploads, newest first. limit=None returns all."""
        return (
            self.db.query(Upload)
            .filter(Upload.owner_id == owner_id)
            .order_by(Upload.created_at.desc())
            .limit(limit)
            .offset(offset)
            .all()
        )

    def count_uploads(self, owner_id: str) -> int:
        return self.db.query(Upload).filter(Upload.owner_id == owner_id).count()

    def append_chart_config(
        self,
        upload_id: str,
        owner_id: str,
        config: ChartConfiguration,
    ) -> Optional[ChartConfig]:
        """
        Append a chart configuration to an upload's ordered list

        Concurrent appends race for the next position; the unique
        (upload_id, position) constraint rejects the loser, which retries.

        Returns:
            The stored ChartConfig, or None if the upload is not found
        """
        upload = self.get_upload(upload_id, owner_id)
        if not upload:
            return None

        for attempt in range(APPEND_RETRIES):
            last_position = (
                self.db.query(func.max(ChartConfig.position))
                .filter(ChartConfig.upload_id == upload.id)
                .scalar()
            )
            chart_config = ChartConfig(
                upload_id=upload.id,
                position=0 if last_position is None else last_position + 1,
                chart_type=config.chart_type,
                x_axis=config.x_axis,
                y_axis=config.y_axis,
                title=config.title,
                created_at=config.created_at,
            )
            self.db.add(chart_config)
            try:
                self.db.commit()
            except IntegrityError:
                self.db.rollback()
                logger.warning(
                    f"Chart config position conflict on upload {upload.id} (attempt {attempt + 1})"
                )
                continue
            self.db.refresh(chart_config)
            return chart_config

        raise RuntimeError(f"Could not append chart config to upload {upload.id}")

    def delete_upload(self, upload_id: str, owner_id: str) -> bool:
        """Delete an upload, its dependent records and its stored file"""
        upload = self.get_upload(upload_id, owner_id)
        if not upload:
            return False

        self.file_storage.delete(upload.file_path)

        # Chart configs, chart analytics and activity cascade via relationships
        self.db.delete(upload)
        self.db.commit()

        logger.info(f"Deleted upload {upload_id}")
        return True

    def record_activity(
        self,
        owner_id: str,
        upload_id: str,
        action: ActivityAction,
        details: Optional[Dict] = None,
        ip_address: Optional[str] = None,
        user_agent: Optional[str] = None,
    ) -> UploadActivity:
        """Log an action on an upload; download actions bump its counter"""
        activity = UploadActivity(
            owner_id=owner_id,
            upload_id=upload_id,
            action=action,
            details=details or {},
            ip_address=ip_address,
            user_agent=user_agent,
        )
        self.db.add(activity)
        if action in DOWNLOAD_ACTIONS:
            self.db.query(Upload).filter(Upload.id == upload_id).update(
                {Upload.downloads: Upload.downloads + 1},
                synchronize_session=False,
            )
        self.db.commit()
        return activity
