import re
from datetime import datetime
from types import SimpleNamespace
from unittest import mock

import pytest

from app.database import get_supabase
from app.main import app
from app.models import Task, User
from app.models.enums import UserRole
from app.routers.assistant import get_assistant_service
from app.services.assistant_service import AssistantClient, AssistantService
from app.services.household_service import HouseholdService
from app.services.suggestion_service import SuggestionService
from app.utils.constants import AssistantMessages


@pytest.fixture
def supabase_stub():
    stub = mock.Mock()
    app.dependency_overrides[get_supabase] = lambda: stub
    yield stub
    app.dependency_overrides.pop(get_supabase, None)


@pytest.fixture
def as_manager(login_as, household):
    return login_as(
        "mgr",
        name="Morgan",
        role=UserRole.MANAGER.value,
        household_id=household["household_id"],
    )


@pytest.fixture
def as_helper(login_as, household):
    return login_as("h1", name="Hana", household_id=household["household_id"])


def create_task(client, **overrides):
    body = {
        "title": "Take out trash",
        "assigned_to": ["h1"],
        "due_time": "2030-01-01T10:00:00",
        "priority": "high",
    }
    body.update(overrides)
    return client.post("/api/tasks/", json=body)


def test_root_and_health(client):
    assert client.get("/").json()["status"] == "running"
    assert client.get("/health").status_code == 200


# === Auth ===


def test_register_manager_creates_household(client, db, supabase_stub):
    supabase_stub.auth.sign_up.return_value = SimpleNamespace(user=SimpleNamespace(id="new-mgr"))

    response = client.post(
        "/api/auth/register",
        json={
            "email": "nia@tidytap.io",
            "password": "secret1",
            "name": "Nia",
            "role": "manager",
        },
    )

    assert response.status_code == 201
    body = response.json()
    assert body["household_id"] == "household_new-mgr"
    assert re.match(r"^TIDY-[0-9A-Z]{4}$", body["invite_code"])
    assert db.get(User, "new-mgr").role == UserRole.MANAGER.value


def test_register_helper_with_bad_code(client, supabase_stub):
    supabase_stub.auth.sign_up.return_value = SimpleNamespace(user=SimpleNamespace(id="new-h"))

    response = client.post(
        "/api/auth/register",
        json={
            "email": "hal@tidytap.io",
            "password": "secret1",
            "name": "Hal",
            "role": "helper",
            "household_code": "TIDY-NOPE",
        },
    )

    assert response.status_code == 400
    assert response.json()["detail"] == "Invalid household code"


def test_register_helper_with_code_joins(client, db, household, supabase_stub):
    supabase_stub.auth.sign_up.return_value = SimpleNamespace(user=SimpleNamespace(id="new-h"))

    response = client.post(
        "/api/auth/register",
        json={
            "email": "hal@tidytap.io",
            "password": "secret1",
            "name": "Hal",
            "role": "helper",
            "household_code": household["invite_code"],
        },
    )

    assert response.status_code == 201
    assert HouseholdService(db).is_member("new-h", household["household_id"])


def test_register_rejects_counselor_role(client, supabase_stub):
    response = client.post(
        "/api/auth/register",
        json={"email": "c@tidytap.io", "password": "secret1", "name": "C", "role": "counselor"},
    )

    assert response.status_code == 422
    supabase_stub.auth.sign_up.assert_not_called()


def test_login_returns_session_profile(client, household, supabase_stub):
    supabase_stub.auth.sign_in_with_password.return_value = SimpleNamespace(
        user=SimpleNamespace(id="mgr", email="morgan@example.com", user_metadata={}),
        session=SimpleNamespace(access_token="tok", expires_in=3600),
    )

    response = client.post(
        "/api/auth/login", json={"email": "morgan@tidytap.io", "password": "secret1"}
    )

    assert response.status_code == 200
    body = response.json()
    assert body["access_token"] == "tok"
    assert body["user"]["role"] == "manager"
    assert body["user"]["household_id"] == household["household_id"]


def test_first_authenticated_request_creates_helper_profile(client, db, supabase_stub):
    supabase_stub.auth.get_user.return_value = SimpleNamespace(
        user=SimpleNamespace(id="oauth-1", email="olly@tidytap.io", user_metadata={"full_name": "Olly"})
    )

    response = client.get("/api/auth/me", headers={"Authorization": "Bearer tok"})

    assert response.status_code == 200
    assert response.json()["role"] == "helper"
    assert response.json()["name"] == "Olly"
    assert db.get(User, "oauth-1") is not None


def test_first_sign_in_ignores_role_in_metadata(client, db, supabase_stub):
    supabase_stub.auth.get_user.return_value = SimpleNamespace(
        user=SimpleNamespace(
            id="ghost", email="ghost@tidytap.io", user_metadata={"role": "manager"}
        )
    )

    response = client.get("/api/auth/me", headers={"Authorization": "Bearer tok"})

    assert response.status_code == 200
    assert response.json()["role"] == "helper"
    assert response.json()["household_id"] is None
    assert db.get(User, "ghost").role == UserRole.HELPER.value


def test_invalid_token_is_rejected(client, supabase_stub):
    supabase_stub.auth.get_user.side_effect = Exception("bad jwt")

    response = client.get("/api/auth/me", headers={"Authorization": "Bearer nope"})

    assert response.status_code == 401


def test_unsupported_oauth_provider(client, supabase_stub):
    assert client.get("/api/auth/oauth/myspace").status_code == 400


# === Households ===


def test_check_code_unknown(client):
    response = client.post("/api/households/check-code", json={"household_code": "TIDY-NOPE"})

    assert response.status_code == 200
    assert response.json() == {"found": False, "household_id": None, "household_name": None}


def test_check_code_joins_when_profile_given(client, db, household):
    response = client.post(
        "/api/households/check-code",
        json={
            "household_code": household["invite_code"],
            "user_id": "h9",
            "email": "h9@example.com",
            "name": "Hedda",
            "role": "helper",
        },
    )

    assert response.json()["found"] is True
    assert HouseholdService(db).is_member("h9", household["household_id"])
    assert db.get(User, "h9").role == UserRole.HELPER.value


def test_check_code_refuses_manager_role(client, db, household):
    response = client.post(
        "/api/households/check-code",
        json={
            "household_code": household["invite_code"],
            "user_id": "intruder",
            "email": "intruder@example.com",
            "name": "Ivo",
            "role": "manager",
        },
    )

    assert response.status_code == 422
    assert db.get(User, "intruder") is None
    assert not HouseholdService(db).is_member("intruder", household["household_id"])


def test_helper_cannot_create_household(client, as_helper):
    assert client.post("/api/households/", json={}).status_code == 403


def test_household_detail_and_mine(client, as_helper, household):
    detail = client.get(f"/api/households/{household['household_id']}")
    mine = client.get("/api/households/mine")

    assert detail.status_code == 200
    assert [m["id"] for m in detail.json()["data"]["members"]] == ["mgr", "h1", "h2"]
    assert [h["id"] for h in mine.json()["data"]] == [household["household_id"]]


def test_manager_cannot_leave_own_household(client, as_manager, household):
    response = client.post(f"/api/households/{household['household_id']}/leave")

    assert response.status_code == 403


def test_remove_member_route(client, as_manager, household, db):
    response = client.delete(f"/api/households/{household['household_id']}/members/h2")

    assert response.status_code == 200
    assert response.json()["data"]["removed"] is True
    assert not HouseholdService(db).is_member("h2", household["household_id"])


# === Tasks ===


def test_manager_creates_task(client, as_manager):
    response = create_task(client)

    assert response.status_code == 201
    data = response.json()["data"]
    assert data["assigned_to"] == [{"id": "h1", "name": "Hana"}]
    assert data["status"] == "pending"
    assert data["is_overdue"] is False


def test_task_requires_an_assignee(client, as_manager):
    assert create_task(client, assigned_to=[]).status_code == 422


def test_helper_cannot_create_task(client, as_helper):
    assert create_task(client).status_code == 403


def test_helper_completes_assigned_task(client, login_as, household):
    login_as("mgr", role=UserRole.MANAGER.value, household_id=household["household_id"])
    task_id = create_task(client).json()["data"]["id"]

    login_as("h1", household_id=household["household_id"])
    response = client.put(f"/api/tasks/{task_id}/status", json={"completed": True})

    assert response.status_code == 200
    assert response.json()["data"]["completed_by"] == "h1"

    log = client.get("/api/tasks/log").json()["data"]
    assert log[0]["title"] == "Take out trash"
    assert log[0]["completed_by_name"] == "Hana"


def test_task_list_filters(client, login_as, household):
    login_as("mgr", role=UserRole.MANAGER.value, household_id=household["household_id"])
    create_task(client, title="Mine")
    create_task(client, title="Theirs", assigned_to=["h2"], priority="low")

    login_as("h1", household_id=household["household_id"])
    mine = client.get("/api/tasks/", params={"filter": "assigned-to-me"}).json()["data"]
    low = client.get("/api/tasks/", params={"filter": "low-priority"}).json()["data"]
    summary = client.get("/api/tasks/summary").json()["data"]

    assert [t["title"] for t in mine] == ["Mine"]
    assert [t["title"] for t in low] == ["Theirs"]
    assert summary["total"] == 2
    assert client.get("/api/tasks/", params={"filter": "bogus"}).status_code == 422


def test_missing_task_is_404(client, as_manager):
    assert client.get("/api/tasks/999").status_code == 404


def test_calendar_route(client, as_manager):
    create_task(client, title="Soon", due_time="2030-01-02T09:00:00")

    events = client.get(
        "/api/tasks/calendar",
        params={"start": "2030-01-01T00:00:00", "end": "2030-01-03T00:00:00"},
    ).json()["data"]

    assert [e["title"] for e in events] == ["Soon"]


def test_calendar_month_view(client, as_manager):
    create_task(client, title="January", due_time="2030-01-31T23:00:00")
    create_task(client, title="February", due_time="2030-02-01T00:00:00")

    events = client.get(
        "/api/tasks/calendar", params={"year": 2030, "month": 1}
    ).json()["data"]

    assert [e["title"] for e in events] == ["January"]


# === Templates and suggestions ===


def test_seed_and_instantiate_template(client, as_manager, db):
    first = client.post("/api/templates/defaults").json()
    second = client.post("/api/templates/defaults").json()
    templates = client.get("/api/templates/").json()["data"]

    assert first["data"] == {"created": True}
    assert second["data"] == {"created": False}

    response = client.post(
        f"/api/templates/{templates[0]['id']}/instantiate",
        json={"assignee_ids": ["h1"], "due_date": "2030-01-05T08:00:00"},
    )

    assert response.status_code == 201
    assert response.json()["data"]["title"] == templates[0]["title"]
    assert db.query(Task).count() == 1


def test_template_categories(client):
    categories = client.get("/api/templates/categories").json()["data"]

    assert "kitchen" in [c["id"] for c in categories]


# === Assistant ===


def test_assistant_chat_route_refuses_helper_add(client, db, as_helper):
    fake_client = mock.Mock(spec=AssistantClient)
    app.dependency_overrides[get_assistant_service] = lambda: AssistantService(db, client=fake_client)
    try:
        response = client.post("/api/assistant/chat", json={"message": "/add sweep"})
    finally:
        app.dependency_overrides.pop(get_assistant_service, None)

    assert response.status_code == 200
    assert response.json()["reply"] == AssistantMessages.HELPER_CANNOT_ADD
    fake_client.complete.assert_not_called()


def test_suggestion_accept_route(client, db, as_manager, household):
    suggestion = SuggestionService(db).create_suggestion(
        household_id=household["household_id"],
        title="Clean gutters",
        reason="Autumn",
        suggested_date=datetime(2030, 10, 1),
    )

    pending = client.get("/api/suggestions/").json()["data"]
    accepted = client.post(f"/api/suggestions/{suggestion.id}/accept")

    assert [s["title"] for s in pending] == ["Clean gutters"]
    assert accepted.status_code == 200
    assert accepted.json()["data"]["title"] == "Clean gutters"
    assert client.get("/api/suggestions/").json()["data"] == []
