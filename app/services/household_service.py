import logging
import secrets
from sqlalchemy.orm import Session
from sqlalchemy import and_
from typing import List, Dict, Any, Optional
from ..config import settings
from ..models.household import Household
from ..models.household_membership import HouseholdMembership
from ..models.user import User
from ..models.enums import UserRole
from ..utils.constants import AppConstants, ResponseMessages
from ..utils.result import ServiceResult, ErrorCode

logger = logging.getLogger(__name__)


def household_id_for(manager_id: str) -> str:
    return f"household_{manager_id}"


class HouseholdService:
    """Household registry: invite codes and membership transactions.

    Every operation returns a ServiceResult; nothing here raises for
    not-found or transactional failures.
    """

    def __init__(
        self,
        db: Session,
        invite_prefix: Optional[str] = None,
        remove_clears_household: Optional[bool] = None,
    ):
        self.db = db
        self.invite_prefix = invite_prefix or settings.INVITE_CODE_PREFIX
        self.remove_clears_household = (
            settings.REMOVE_MEMBER_CLEARS_HOUSEHOLD
            if remove_clears_household is None
            else remove_clears_household
        )

    def generate_invite_code(self) -> str:
        """PREFIX-XXXX with a base-36 uppercase suffix"""
        suffix = "".join(
            secrets.choice(AppConstants.INVITE_CODE_ALPHABET)
            for _ in range(AppConstants.INVITE_CODE_SUFFIX_LENGTH)
        )
        return f"{self.invite_prefix}-{suffix}"

    def create_household(
        self,
        manager_id: str,
        manager_name: str,
        email: str = "",
        household_name: Optional[str] = None,
    ) -> ServiceResult[Dict[str, Any]]:
        """Create the household and the manager's user record atomically"""

        if not manager_id or not manager_name:
            return ServiceResult.fail("Missing required fields")

        household_id = household_id_for(manager_id)

        try:
            invite_code = self._unused_invite_code()

            household = Household(
                id=household_id,
                name=household_name
                or f"{manager_name}{AppConstants.HOUSEHOLD_NAME_SUFFIX}",
                manager_id=manager_id,
                invite_code=invite_code,
            )
            self.db.add(household)
            self._add_member(household_id, manager_id)
            self.db.flush()

            self._write_user_record(
                user_id=manager_id,
                name=manager_name,
                email=email,
                role=UserRole.MANAGER.value,
                household_id=household_id,
            )

            self.db.commit()

        except Exception as e:
            self.db.rollback()
            logger.error(f"Household creation failed for {manager_id}: {e}")
            return ServiceResult.fail(
                "Database transaction failed",
                details=str(e),
                error_code=ErrorCode.TRANSACTION_FAILED,
            )

        logger.info(f"Created household {household_id} for manager {manager_id}")
        return ServiceResult.ok(
            {"household_id": household_id, "invite_code": invite_code}
        )

    def lookup_by_invite_code(self, code: str) -> ServiceResult[Dict[str, Any]]:
        """Exact-match lookup; an unknown code is a successful "not found" """
        if not code:
            return ServiceResult.fail("No household code provided")

        household = self._find_by_invite_code(code)
        if not household:
            return ServiceResult.ok({"found": False})

        return ServiceResult.ok(
            {
                "found": True,
                "household_id": household.id,
                "household_name": household.name,
            }
        )

    def join_household(
        self,
        code: str,
        user_id: str,
        email: str,
        name: str,
    ) -> ServiceResult[Dict[str, Any]]:
        """Write the user's record and add them to the member set atomically.

        A user without a profile joins as a helper; an existing profile keeps
        its role. Safe to retry: the member set never holds the same id twice.
        """
        if not code:
            return ServiceResult.fail("No household code provided")
        if not user_id or not email or not name:
            return ServiceResult.fail("Missing required fields")

        household = self._find_by_invite_code(code)
        if not household:
            return ServiceResult.fail(
                ResponseMessages.INVALID_HOUSEHOLD_CODE, error_code=ErrorCode.NOT_FOUND
            )

        existing = self.db.get(User, user_id)
        if (
            existing is not None
            and existing.role == UserRole.MANAGER.value
            and household.manager_id != user_id
        ):
            return ServiceResult.fail(
                "Managers cannot join another household",
                error_code=ErrorCode.FORBIDDEN,
            )

        try:
            self._write_user_record(
                user_id=user_id,
                name=name,
                email=email,
                role=existing.role if existing is not None else UserRole.HELPER.value,
                household_id=household.id,
            )
            self._add_member(household.id, user_id)
            self.db.commit()

        except Exception as e:
            self.db.rollback()
            logger.error(f"Join failed for {user_id} into {household.id}: {e}")
            return ServiceResult.fail(
                "Database transaction failed",
                details=str(e),
                error_code=ErrorCode.TRANSACTION_FAILED,
            )

        return ServiceResult.ok(
            {
                "found": True,
                "household_id": household.id,
                "household_name": household.name,
            }
        )

    def leave_household(
        self, user_id: str, household_id: str
    ) -> ServiceResult[Dict[str, Any]]:
        """Remove user from the member set and clear their pointer if it matches"""

        if not user_id or not household_id:
            return ServiceResult.fail("Missing required fields")

        user = self.db.get(User, user_id)
        if not user:
            return ServiceResult.fail(
                "Database transaction failed",
                details="User not found",
                error_code=ErrorCode.NOT_FOUND,
            )

        household = self.db.get(Household, household_id)
        if not household:
            return ServiceResult.fail(
                "Database transaction failed",
                details="Household not found",
                error_code=ErrorCode.NOT_FOUND,
            )

        if household.manager_id == user_id:
            return ServiceResult.fail(
                "The household manager cannot leave their own household",
                error_code=ErrorCode.FORBIDDEN,
            )

        try:
            # Only clear the pointer when it still names this household
            if user.household_id == household_id:
                user.household_id = None
            removed = self._remove_member(household_id, user_id)
            self.db.commit()

        except Exception as e:
            self.db.rollback()
            logger.error(f"Leave failed for {user_id} from {household_id}: {e}")
            return ServiceResult.fail(
                "Database transaction failed",
                details=str(e),
                error_code=ErrorCode.TRANSACTION_FAILED,
            )

        return ServiceResult.ok({"removed": removed})

    def remove_member(
        self, manager_id: str, household_id: str, member_id: str
    ) -> ServiceResult[Dict[str, Any]]:
        """Manager-only member removal.

        The removed member's own household pointer is cleared only when
        `remove_clears_household` is set.
        """
        household = self.db.get(Household, household_id)
        if not household:
            return ServiceResult.fail(
                "Household not found", error_code=ErrorCode.NOT_FOUND
            )

        if household.manager_id != manager_id:
            return ServiceResult.fail(
                "Only the household manager can remove members",
                error_code=ErrorCode.FORBIDDEN,
            )

        if member_id == household.manager_id:
            return ServiceResult.fail("Cannot remove the household manager")

        try:
            removed = self._remove_member(household_id, member_id)
            pointer_cleared = False
            if self.remove_clears_household:
                member = self.db.get(User, member_id)
                if member is not None and member.household_id == household_id:
                    member.household_id = None
                    pointer_cleared = True
            self.db.commit()

        except Exception as e:
            self.db.rollback()
            logger.error(f"Removing {member_id} from {household_id} failed: {e}")
            return ServiceResult.fail(
                "Database transaction failed",
                details=str(e),
                error_code=ErrorCode.TRANSACTION_FAILED,
            )

        return ServiceResult.ok(
            {"removed": removed, "household_pointer_cleared": pointer_cleared}
        )

    def get_household(self, household_id: str) -> ServiceResult[Dict[str, Any]]:
        """Household record with resolved member profiles"""
        if not household_id:
            return ServiceResult.fail("Missing household ID")

        household = self.db.get(Household, household_id)
        if not household:
            return ServiceResult.fail(
                "Household not found", error_code=ErrorCode.NOT_FOUND
            )

        return ServiceResult.ok(
            {
                "id": household.id,
                "name": household.name,
                "manager_id": household.manager_id,
                "invite_code": household.invite_code,
                "created_at": household.created_at,
                "members": self.get_member_profiles(household.id),
            }
        )

    def get_member_profiles(self, household_id: str) -> List[Dict[str, Any]]:
        """Member profiles in join order; members without a profile are dropped"""
        rows = (
            self.db.query(HouseholdMembership, User)
            .join(User, User.id == HouseholdMembership.user_id)
            .filter(HouseholdMembership.household_id == household_id)
            .order_by(HouseholdMembership.id)
            .all()
        )
        return [
            {"id": user.id, "name": user.name, "email": user.email, "role": user.role}
            for _, user in rows
        ]

    def get_user_households(self, user_id: str) -> ServiceResult[List[Dict[str, Any]]]:
        """Households the user belongs to, skipping any whose manager is unknown"""
        if not user_id:
            return ServiceResult.fail("Missing user ID")

        households = (
            self.db.query(Household)
            .join(HouseholdMembership, HouseholdMembership.household_id == Household.id)
            .filter(HouseholdMembership.user_id == user_id)
            .order_by(Household.id)
            .all()
        )

        result = []
        for household in households:
            manager = self.db.get(User, household.manager_id)
            if not manager:
                logger.warning(
                    f"Skipping household {household.id}: manager profile missing"
                )
                continue
            result.append(
                {
                    "id": household.id,
                    "name": household.name or AppConstants.UNNAMED_HOUSEHOLD,
                    "invite_code": household.invite_code,
                    "manager": {
                        "id": manager.id,
                        "name": manager.name or None,
                        "email": manager.email or None,
                    },
                }
            )

        return ServiceResult.ok(result)

    def get_member_household_ids(self, user_id: str) -> List[str]:
        rows = (
            self.db.query(HouseholdMembership.household_id)
            .filter(HouseholdMembership.user_id == user_id)
            .order_by(HouseholdMembership.household_id)
            .all()
        )
        return [row[0] for row in rows]

    def is_member(self, user_id: str, household_id: str) -> bool:
        return self._get_membership(user_id, household_id) is not None

    def is_manager(self, user_id: str, household_id: str) -> bool:
        household = self.db.get(Household, household_id)
        return household is not None and household.manager_id == user_id

    # === PRIVATE HELPER METHODS ===

    def _find_by_invite_code(self, code: str) -> Optional[Household]:
        return self.db.query(Household).filter(Household.invite_code == code).first()

    def _unused_invite_code(self) -> str:
        for _ in range(AppConstants.MAX_INVITE_CODE_ATTEMPTS):
            code = self.generate_invite_code()
            if not self._find_by_invite_code(code):
                return code
        raise RuntimeError("Could not generate a unique invite code")

    def _get_membership(
        self, user_id: str, household_id: str
    ) -> Optional[HouseholdMembership]:
        return (
            self.db.query(HouseholdMembership)
            .filter(
                and_(
                    HouseholdMembership.user_id == user_id,
                    HouseholdMembership.household_id == household_id,
                )
            )
            .first()
        )

    def _add_member(self, household_id: str, user_id: str) -> bool:
        """Set-style add; returns False when already a member"""
        if self._get_membership(user_id, household_id) is not None:
            return False
        self.db.add(HouseholdMembership(user_id=user_id, household_id=household_id))
        return True

    def _remove_member(self, household_id: str, user_id: str) -> bool:
        membership = self._get_membership(user_id, household_id)
        if membership is None:
            return False
        self.db.delete(membership)
        return True

    def _write_user_record(
        self,
        user_id: str,
        name: str,
        email: str,
        role: str,
        household_id: Optional[str],
    ) -> User:
        """Create or overwrite the user's profile inside the open transaction"""
        user = self.db.get(User, user_id)
        if user is None:
            user = User(id=user_id)
            self.db.add(user)
        user.name = name
        user.email = email
        user.role = role
        user.household_id = household_id
        self.db.flush()
        return user
