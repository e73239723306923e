from sqlalchemy import Column, String, DateTime
from sqlalchemy.sql import func
from ..database import Base
from .enums import UserRole, SINGLE_HOUSEHOLD_ROLES


class User(Base):
    """Profile record keyed by the identity provider's user id"""

    __tablename__ = "users"

    id = Column(String, primary_key=True, index=True)
    email = Column(String, index=True, nullable=False)
    name = Column(String, nullable=False)
    role = Column(String, nullable=False, default=UserRole.HELPER.value)

    # Current household pointer; helpers may belong to more households
    # through memberships than this field names.
    household_id = Column(String, index=True, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    @property
    def is_manager(self) -> bool:
        return self.role == UserRole.MANAGER.value

    @property
    def has_single_household_view(self) -> bool:
        return self.role in SINGLE_HOUSEHOLD_ROLES

    @classmethod
    def from_supabase(cls, supabase_user):
        """Build a helper profile from a Supabase auth user (not persisted).

        The role in user metadata is client-writable and is ignored.
        """
        user_metadata = supabase_user.user_metadata or {}
        email = supabase_user.email or ""

        return cls(
            id=supabase_user.id,
            email=email,
            name=user_metadata.get("full_name")
            or user_metadata.get("name")
            or email.split("@")[0],
            role=UserRole.HELPER.value,
        )

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "role": self.role,
            "household_id": self.household_id,
        }
