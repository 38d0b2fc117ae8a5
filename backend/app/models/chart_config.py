"""Chart configuration model"""
from sqlalchemy import Column, String, Integer, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from datetime import datetime
import uuid

from app.core.database import Base
from app.core.table import ChartConfiguration


class ChartConfig(Base):
    """Saved chart definition. Append-only, ordered by position within an upload."""
    __tablename__ = "chart_configs"
    __table_args__ = (
        UniqueConstraint("upload_id", "position", name="uq_chart_configs_upload_position"),
    )

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    upload_id = Column(String, ForeignKey("uploads.id", ondelete="CASCADE"), nullable=False, index=True)
    position = Column(Integer, nullable=False)

    chart_type = Column(String, nullable=False)
    x_axis = Column(String, nullable=False)
    y_axis = Column(String, nullable=False)
    title = Column(String, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    upload = relationship("Upload", back_populates="chart_configs")

    def to_config(self) -> ChartConfiguration:
        return ChartConfiguration(
            chart_type=self.chart_type,
            x_axis=self.x_axis,
            y_axis=self.y_axis,
            title=self.title,
            created_at=self.created_at,
        )

    def __repr__(self):
        return f"<ChartConfig(upload_id={self.upload_id}, position={self.position}, title={self.title})>"
