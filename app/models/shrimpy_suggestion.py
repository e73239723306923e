from sqlalchemy import Column, Integer, String, DateTime, Text, JSON, Index
from sqlalchemy.sql import func
from ..database import Base
from .enums import SuggestionStatus


class ShrimpySuggestion(Base):
    """Assistant-proposed task waiting to be accepted or ignored"""

    __tablename__ = "shrimpy_suggestions"

    id = Column(Integer, primary_key=True, index=True)
    household_id = Column(String, nullable=False, index=True)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    category = Column(String, nullable=True)
    priority = Column(String, nullable=True)
    reason = Column(Text, nullable=False)
    assigned_to = Column(String, nullable=True)
    repeat = Column(JSON, nullable=True)
    created_from_task_id = Column(Integer, nullable=True)
    suggested_date = Column(DateTime, nullable=False)

    status = Column(String, nullable=False, default=SuggestionStatus.PENDING.value)
    accepted_task_id = Column(Integer, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    __table_args__ = (
        Index("idx_suggestion_household_status", "household_id", "status"),
    )
