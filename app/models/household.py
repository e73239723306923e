from sqlalchemy import Column, String, DateTime
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from ..database import Base


class Household(Base):
    __tablename__ = "households"

    # household_<manager id>
    id = Column(String, primary_key=True, index=True)
    name = Column(String, nullable=False)
    manager_id = Column(String, nullable=False, index=True)
    invite_code = Column(String, nullable=False, unique=True, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    memberships = relationship(
        "HouseholdMembership",
        back_populates="household",
        cascade="all, delete-orphan",
        order_by="HouseholdMembership.id",
    )
    tasks = relationship("Task", back_populates="household")

    @property
    def member_ids(self):
        return [m.user_id for m in self.memberships]

    def is_member(self, user_id: str) -> bool:
        return any(m.user_id == user_id for m in self.memberships)

    def is_manager(self, user_id: str) -> bool:
        return self.manager_id == user_id
