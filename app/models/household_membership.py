from sqlalchemy import Column, Integer, String, DateTime, ForeignKey
from sqlalchemy.sql import func
from ..database import Base
from sqlalchemy import Index
from sqlalchemy.orm import relationship


class HouseholdMembership(Base):
    """One row per member id in a household's member set"""

    __tablename__ = "household_memberships"

    id = Column(Integer, primary_key=True, index=True)

    # No foreign key: a member id may outlive its profile record
    user_id = Column(String, nullable=False, index=True)
    household_id = Column(
        String, ForeignKey("households.id", ondelete="CASCADE"), nullable=False
    )
    joined_at = Column(DateTime, server_default=func.now())

    household = relationship("Household", back_populates="memberships")

    __table_args__ = (
        Index("idx_unique_household_member", "user_id", "household_id", unique=True),
    )
