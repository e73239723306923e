import re

from app.models import Household, HouseholdMembership, User
from app.models.enums import UserRole
from app.services.household_service import HouseholdService, household_id_for
from app.utils.result import ErrorCode


def test_invite_code_format():
    service = HouseholdService(db=None, invite_prefix="TIDY")
    for _ in range(50):
        assert re.match(r"^TIDY-[0-9A-Z]{4}$", service.generate_invite_code())


def test_create_household_writes_household_membership_and_manager(db):
    result = HouseholdService(db).create_household("m1", "Mia", "mia@example.com")

    assert result.success
    assert result.data["household_id"] == "household_m1"

    household = db.get(Household, "household_m1")
    assert household.manager_id == "m1"
    assert household.name == "Mia's Household"
    assert household.invite_code == result.data["invite_code"]
    assert household.member_ids == ["m1"]

    manager = db.get(User, "m1")
    assert manager.role == UserRole.MANAGER.value
    assert manager.household_id == "household_m1"


def test_create_household_rolls_back_when_user_write_fails(db, monkeypatch):
    service = HouseholdService(db)

    def broken_write(**kwargs):
        raise RuntimeError("profile store unavailable")

    monkeypatch.setattr(service, "_write_user_record", broken_write)

    result = service.create_household("m1", "Mia")

    assert not result.success
    assert result.error == "Database transaction failed"
    assert result.error_code == ErrorCode.TRANSACTION_FAILED
    assert "profile store unavailable" in result.details
    assert db.get(Household, "household_m1") is None
    assert db.query(HouseholdMembership).count() == 0


def test_create_household_leaves_no_user_when_household_write_fails(db):
    db.add(Household(id="household_m1", name="Taken", manager_id="m1", invite_code="X-0000"))
    db.commit()
    db.expunge_all()

    result = HouseholdService(db).create_household("m1", "Mia")

    assert not result.success
    assert result.error_code == ErrorCode.TRANSACTION_FAILED
    assert db.get(User, "m1") is None


def test_create_household_requires_fields(db):
    result = HouseholdService(db).create_household("", "Mia")
    assert not result.success
    assert result.error == "Missing required fields"


def test_lookup_unknown_code_is_not_found_without_error(db):
    result = HouseholdService(db).lookup_by_invite_code("TIDY-ZZZZ")

    assert result.success
    assert result.data == {"found": False}


def test_lookup_known_code(db, household):
    result = HouseholdService(db).lookup_by_invite_code(household["invite_code"])

    assert result.data == {
        "found": True,
        "household_id": household["household_id"],
        "household_name": "Morgan's Household",
    }


def test_join_is_idempotent(db, household):
    service = HouseholdService(db)

    for _ in range(2):
        result = service.join_household(
            household["invite_code"], "h3", "h3@example.com", "Hal"
        )
        assert result.success

    memberships = (
        db.query(HouseholdMembership)
        .filter(HouseholdMembership.user_id == "h3")
        .all()
    )
    assert len(memberships) == 1
    assert db.get(User, "h3").household_id == household["household_id"]
    assert db.get(User, "h3").role == UserRole.HELPER.value


def test_join_with_invalid_code(db):
    result = HouseholdService(db).join_household(
        "TIDY-NOPE", "h3", "h3@example.com", "Hal"
    )

    assert not result.success
    assert result.not_found
    assert result.error == "Invalid household code"


def test_manager_cannot_join_another_household(db, household):
    service = HouseholdService(db)
    service.create_household("m2", "Max")

    result = service.join_household(
        household["invite_code"], "m2", "m2@example.com", "Max"
    )

    assert not result.success
    assert result.error_code == ErrorCode.FORBIDDEN


def test_helper_keeps_memberships_across_households(db, household):
    service = HouseholdService(db)
    other = service.create_household("m2", "Max").data

    service.join_household(other["invite_code"], "h1", "h1@example.com", "Hana")

    assert service.get_member_household_ids("h1") == sorted(
        [household["household_id"], other["household_id"]]
    )
    # The pointer names the most recently joined household
    assert db.get(User, "h1").household_id == other["household_id"]


def test_leave_twice_is_a_noop_the_second_time(db, household):
    service = HouseholdService(db)

    first = service.leave_household("h1", household["household_id"])
    second = service.leave_household("h1", household["household_id"])

    assert first.success and first.data == {"removed": True}
    assert second.success and second.data == {"removed": False}
    assert db.get(User, "h1").household_id is None
    assert not service.is_member("h1", household["household_id"])


def test_leave_keeps_pointer_to_another_household(db, household):
    service = HouseholdService(db)
    other = service.create_household("m2", "Max").data
    service.join_household(other["invite_code"], "h1", "h1@example.com", "Hana")

    result = service.leave_household("h1", household["household_id"])

    assert result.success
    assert db.get(User, "h1").household_id == other["household_id"]


def test_leave_unknown_user_or_household(db, household):
    service = HouseholdService(db)

    missing_user = service.leave_household("ghost", household["household_id"])
    missing_household = service.leave_household("h1", "household_nowhere")

    assert missing_user.not_found
    assert missing_user.details == "User not found"
    assert missing_household.not_found
    assert missing_household.details == "Household not found"


def test_manager_cannot_leave_own_household(db, household):
    result = HouseholdService(db).leave_household("mgr", household["household_id"])

    assert not result.success
    assert result.error_code == ErrorCode.FORBIDDEN


def test_remove_member_keeps_pointer_by_default(db, household):
    service = HouseholdService(db, remove_clears_household=False)

    result = service.remove_member("mgr", household["household_id"], "h1")

    assert result.data == {"removed": True, "household_pointer_cleared": False}
    assert not service.is_member("h1", household["household_id"])
    assert db.get(User, "h1").household_id == household["household_id"]


def test_remove_member_clears_pointer_when_configured(db, household):
    service = HouseholdService(db, remove_clears_household=True)

    result = service.remove_member("mgr", household["household_id"], "h1")

    assert result.data == {"removed": True, "household_pointer_cleared": True}
    assert db.get(User, "h1").household_id is None


def test_remove_member_requires_the_manager(db, household):
    service = HouseholdService(db)

    by_helper = service.remove_member("h2", household["household_id"], "h1")
    of_manager = service.remove_member("mgr", household["household_id"], "mgr")

    assert by_helper.error_code == ErrorCode.FORBIDDEN
    assert not of_manager.success
    assert service.is_member("h1", household["household_id"])


def test_member_profiles_skip_members_without_a_profile(db, household):
    db.add(HouseholdMembership(user_id="orphan", household_id=household["household_id"]))
    db.commit()

    profiles = HouseholdService(db).get_member_profiles(household["household_id"])

    assert [p["id"] for p in profiles] == ["mgr", "h1", "h2"]


def test_get_household_includes_members(db, household):
    result = HouseholdService(db).get_household(household["household_id"])

    assert result.success
    assert result.data["manager_id"] == "mgr"
    assert len(result.data["members"]) == 3


def test_get_household_not_found(db):
    result = HouseholdService(db).get_household("household_missing")

    assert result.not_found


def test_user_households_omit_those_with_missing_manager(db, household):
    service = HouseholdService(db)
    db.add(Household(id="household_gone", name="Gone", manager_id="gone", invite_code="TIDY-GONE"))
    db.add(HouseholdMembership(user_id="h1", household_id="household_gone"))
    db.commit()

    result = service.get_user_households("h1")

    assert result.success
    assert [h["id"] for h in result.data] == [household["household_id"]]
    assert result.data[0]["manager"] == {
        "id": "mgr",
        "name": "Morgan",
        "email": "morgan@example.com",
    }


def test_household_id_is_derived_from_manager():
    assert household_id_for("abc") == "household_abc"
