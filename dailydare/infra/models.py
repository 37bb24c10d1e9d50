"""
SQLAlchemy ORM models for database tables
"""

from sqlalchemy import Column, String, Integer, DateTime, Boolean, Index
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import declarative_base
from sqlalchemy.sql import func
import uuid

Base = declarative_base()


class DareActivityModel(Base):
    """SQLAlchemy ORM model for dare_activities table"""

    __tablename__ = "dare_activities"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(String(128), nullable=False)
    activity_type = Column(String(50), nullable=False)
    dare_id = Column(String(128), nullable=True)
    points_delta = Column(Integer, default=0, nullable=False)
    tokens_delta = Column(Integer, default=0, nullable=False)
    success = Column(Boolean, default=True, nullable=False)
    failure_reason = Column(String(50), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    __table_args__ = (
        Index('idx_dare_activities_user', 'user_id'),
        Index('idx_dare_activities_type', 'activity_type'),
        Index('idx_dare_activities_created', 'created_at'),
        Index('idx_dare_activities_user_type', 'user_id', 'activity_type'),
    )

    def __repr__(self):
        return f"<DareActivity(user='{self.user_id}', type='{self.activity_type}', success={self.success})>"
