from app.models.enums import TaskStatus
from sqlalchemy import (
    Column,
    Integer,
    String,
    DateTime,
    ForeignKey,
    Text,
    Index,
    JSON,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from ..database import Base
from .enums import Priority


class Task(Base):
    __tablename__ = "tasks"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String, nullable=False)
    description = Column(Text, default="")
    priority = Column(String, default=Priority.MEDIUM.value)
    category = Column(String, nullable=True)
    status = Column(String, default=TaskStatus.PENDING.value, nullable=False)

    # [{"id": ..., "name": ...}] captured at assignment time
    assigned_to = Column(JSON, nullable=False, default=list)

    # None | {"frequency": "daily"} | {"frequency": "weekly", "days": [...]}
    # | {"frequency": "monthly", "day_of_month": n}
    repeat = Column(JSON, nullable=True)

    household_id = Column(
        String, ForeignKey("households.id", ondelete="CASCADE"), nullable=False
    )
    created_by = Column(String, nullable=True)
    completed_by = Column(String, nullable=True)

    # Template extras carried over on instantiation
    estimated_time = Column(Integer, nullable=True)
    room = Column(String, nullable=True)
    supplies = Column(JSON, nullable=True)
    steps = Column(JSON, nullable=True)

    # Timestamps
    due_time = Column(DateTime, nullable=False)
    completed_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    household = relationship("Household", back_populates="tasks")

    __table_args__ = (
        Index("idx_task_household_status_due", "household_id", "status", "due_time"),
    )

    @property
    def assignee_ids(self):
        return [a.get("id") for a in (self.assigned_to or [])]

    def is_assigned_to(self, user_id: str) -> bool:
        return user_id in self.assignee_ids
