"""Upload model"""
from sqlalchemy import Column, String, Integer, DateTime, JSON
from sqlalchemy.orm import relationship
from datetime import datetime
import uuid

from app.core.database import Base
from app.core.table import NormalizedTable, SHEET_SCHEMA_VERSION


class Upload(Base):
    """An uploaded spreadsheet and its normalized table"""
    __tablename__ = "uploads"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))

    # Owner id as issued by the identity provider
    owner_id = Column(String, nullable=False, index=True)

    # File information
    file_name = Column(String, nullable=False)  # Name on disk
    original_name = Column(String, nullable=False)
    file_path = Column(String, nullable=False)
    file_size = Column(Integer, nullable=False)
    mime_type = Column(String, nullable=False)

    # Normalized table record (see NormalizedTable.to_dict)
    sheet_data = Column(JSON, nullable=False)
    schema_version = Column(Integer, default=SHEET_SCHEMA_VERSION, nullable=False)

    # Incremented by download and chart_download activity
    downloads = Column(Integer, default=0, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    # Relationships
    chart_configs = relationship(
        "ChartConfig",
        back_populates="upload",
        cascade="all, delete-orphan",
        order_by="ChartConfig.position",
    )
    chart_analytics = relationship("ChartAnalytics", back_populates="upload", cascade="all, delete-orphan")
    activities = relationship("UploadActivity", back_populates="upload", cascade="all, delete-orphan")

    @property
    def table(self) -> NormalizedTable:
        """Normalized table rebuilt from the stored record"""
        return NormalizedTable.from_dict(self.sheet_data)

    @property
    def column_schemas(self) -> list:
        return [column.to_dict() for column in self.table.columns]

    @property
    def total_rows(self) -> int:
        return (self.sheet_data or {}).get("totalRows", 0)

    @property
    def total_columns(self) -> int:
        return (self.sheet_data or {}).get("totalColumns", 0)

    def __repr__(self):
        return f"<Upload(id={self.id}, original_name={self.original_name})>"
