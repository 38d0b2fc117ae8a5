"""Upload activity model"""
from sqlalchemy import Column, String, DateTime, JSON, ForeignKey, Enum as SQLEnum
from sqlalchemy.orm import relationship
from datetime import datetime
import uuid
import enum

from app.core.database import Base


class ActivityAction(str, enum.Enum):
    """Activity action enumeration"""
    UPLOAD = "upload"
    VIEW = "view"
    DOWNLOAD = "download"
    CHART_CREATE = "chart_create"
    CHART_DOWNLOAD = "chart_download"


class UploadActivity(Base):
    """Append-only log of user actions on an upload"""
    __tablename__ = "upload_activities"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    owner_id = Column(String, nullable=False, index=True)
    upload_id = Column(String, ForeignKey("uploads.id", ondelete="CASCADE"), nullable=False, index=True)
    action = Column(SQLEnum(ActivityAction), nullable=False)
    details = Column(JSON, default=dict)
    ip_address = Column(String, nullable=True)
    user_agent = Column(String, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    upload = relationship("Upload", back_populates="activities")

    def __repr__(self):
        return f"<UploadActivity(upload_id={self.upload_id}, action={self.action})>"
