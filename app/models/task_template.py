from sqlalchemy import (
    Column,
    Integer,
    String,
    Boolean,
    DateTime,
    Text,
    JSON,
    Index,
)
from sqlalchemy.sql import func
from ..database import Base
from .enums import Priority, TemplateFrequency


class TaskTemplate(Base):
    __tablename__ = "task_templates"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String, nullable=False)
    description = Column(Text, default="")
    category = Column(String, nullable=False, default="")
    priority = Column(String, default=Priority.MEDIUM.value)
    estimated_time = Column(Integer, nullable=True)  # minutes
    frequency = Column(String, default=TemplateFrequency.ONCE.value)
    day_of_week = Column(JSON, nullable=True)
    day_of_month = Column(Integer, nullable=True)
    room = Column(String, nullable=True)
    supplies = Column(JSON, default=list)
    steps = Column(JSON, default=list)

    household_id = Column(String, nullable=False, index=True)
    created_by = Column(String, nullable=False)
    is_default = Column(Boolean, default=False)
    usage_count = Column(Integer, default=0)
    last_used = Column(DateTime, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    __table_args__ = (Index("idx_template_household_default", "household_id", "is_default"),)
