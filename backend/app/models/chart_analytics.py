"""Chart analytics model"""
from sqlalchemy import Column, String, Text, DateTime, JSON, ForeignKey
from sqlalchemy.orm import relationship
from datetime import datetime
import uuid

from app.core.database import Base


class ChartAnalytics(Base):
    """Computed chart result and optional AI insight for an upload"""
    __tablename__ = "chart_analytics"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    upload_id = Column(String, ForeignKey("uploads.id", ondelete="CASCADE"), nullable=False, index=True)
    chart_type = Column(String, nullable=False)  # e.g. bar, line, pie
    chart_data = Column(JSON, nullable=False)
    insights = Column(Text, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    upload = relationship("Upload", back_populates="chart_analytics")

    def __repr__(self):
        return f"<ChartAnalytics(id={self.id}, upload_id={self.upload_id}, chart_type={self.chart_type})>"
