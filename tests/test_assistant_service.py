import json
from datetime import datetime
from unittest import mock

import pytest
import requests

from app.dependencies.permissions import UserSession
from app.models import ShrimpySuggestion, Task
from app.models.enums import Priority, UserRole
from app.schemas.task import TaskCreate
from app.services.assistant_service import (
    AssistantClient,
    AssistantError,
    AssistantService,
    extract_json,
)
from app.services.task_service import TaskService
from app.utils.constants import AssistantMessages


@pytest.fixture(autouse=True)
def clear_affirmation_cache():
    AssistantService._affirmation_cache.clear()
    yield
    AssistantService._affirmation_cache.clear()


@pytest.fixture
def fake_client():
    return mock.Mock(spec=AssistantClient)


def manager_session(household):
    return UserSession(
        id="mgr",
        email="morgan@example.com",
        name="Morgan",
        role=UserRole.MANAGER.value,
        household_id=household["household_id"],
    )


def helper_session(household):
    return UserSession(
        id="h1",
        email="h1@example.com",
        name="Hana",
        role=UserRole.HELPER.value,
        household_id=household["household_id"],
    )


def test_helper_add_is_refused_without_calling_the_model(db, household, fake_client):
    service = AssistantService(db, client=fake_client)

    result = service.chat(helper_session(household), "/add mop the floor")

    assert result["reply"] == AssistantMessages.HELPER_CANNOT_ADD
    fake_client.complete.assert_not_called()
    assert db.query(Task).count() == 0


def test_plain_chat_returns_the_reply(db, household, fake_client):
    fake_client.complete.return_value = "Keep going! 🧽"
    service = AssistantService(db, client=fake_client)

    result = service.chat(
        helper_session(household),
        "Any tips?",
        history=[{"role": "assistant", "content": "Hi!"}],
    )

    assert result["reply"] == "Keep going! 🧽"
    assert [m["role"] for m in result["messages"]] == ["assistant", "user", "assistant"]
    sent = fake_client.complete.call_args[0][0]
    assert sent[0]["role"] == "system"
    assert sent[-1] == {"role": "user", "content": "Any tips?"}


def test_chat_transport_failure_degrades_to_apology(db, household, fake_client):
    fake_client.complete.side_effect = AssistantError("boom")

    result = AssistantService(db, client=fake_client).chat(helper_session(household), "hi")

    assert result["reply"] == AssistantMessages.GENERIC_FAILURE
    assert result["task_id"] is None


def test_manager_add_creates_task(db, household, fake_client):
    fake_client.complete.return_value = (
        "```json\n"
        + json.dumps(
            {
                "task": "Clean the fridge",
                "assignee": "Hana",
                "priority": "High",
                "category": "Kitchen",
                "dueDate": "2030-02-01",
                "dueTime": "18:30",
                "repeat": {"frequency": "weekly", "dayOfWeek": "Sunday"},
            }
        )
        + "\n```"
    )
    service = AssistantService(db, client=fake_client)

    result = service.chat(manager_session(household), "/add clean the fridge for Hana")

    assert result["reply"] == "Task added: Clean the fridge 🧽✨"
    task = db.get(Task, result["task_id"])
    assert task.household_id == household["household_id"]
    assert task.assigned_to == [{"id": "Hana", "name": "Hana"}]
    assert task.priority == Priority.HIGH.value
    assert task.due_time.isoformat() == "2030-02-01T18:30:00"
    assert task.repeat == {"frequency": "weekly", "days": ["sunday"]}
    assert task.created_by == "mgr"


@pytest.mark.parametrize(
    "reply, message",
    [
        ("not json at all", AssistantMessages.PARSE_FAILURE),
        ('{"title": "Dust", ', AssistantMessages.PARSE_FAILURE),
        ('{"title": "Dust"}', AssistantMessages.MISSING_TASK_FIELDS),
        ('{"assignee": "Hana"}', AssistantMessages.MISSING_TASK_FIELDS),
        (
            '{"title": "Dust", "assignee": "Hana", "dueDate": "someday"}',
            AssistantMessages.PARSE_FAILURE,
        ),
    ],
)
def test_manager_add_with_unusable_reply(db, household, fake_client, reply, message):
    fake_client.complete.return_value = reply

    result = AssistantService(db, client=fake_client).chat(
        manager_session(household), "/add dust"
    )

    assert result["reply"] == message
    assert result["task_id"] is None
    assert db.query(Task).count() == 0


def test_add_refused_when_caller_does_not_manage_the_household(db, household, fake_client):
    session = UserSession(
        id="intruder",
        email="intruder@example.com",
        name="Ivo",
        role=UserRole.MANAGER.value,
        household_id=household["household_id"],
    )

    result = AssistantService(db, client=fake_client).chat(session, "/add mop the floor")

    assert result["reply"] == AssistantMessages.HELPER_CANNOT_ADD
    fake_client.complete.assert_not_called()
    assert db.query(Task).count() == 0


def test_add_refused_when_household_does_not_exist(db, fake_client):
    session = UserSession(
        id="ghost",
        email="ghost@example.com",
        name="Gus",
        role=UserRole.MANAGER.value,
        household_id="household_ghost",
    )

    result = AssistantService(db, client=fake_client).chat(session, "/add dust")

    assert result["reply"] == AssistantMessages.HELPER_CANNOT_ADD
    assert db.query(Task).count() == 0


def test_manager_without_household_cannot_add(db, fake_client):
    fake_client.complete.return_value = '{"title": "Dust", "assignee": "Hana"}'
    session = UserSession(id="m9", email="m9@example.com", name="M", role="manager")

    result = AssistantService(db, client=fake_client).chat(session, "/add dust")

    assert result["reply"] == AssistantMessages.NO_HOUSEHOLD


def test_suggest_fields_parses_reply(db, fake_client):
    fake_client.complete.return_value = (
        'Sure! {"priority": "LOW", "category": " Garden ", '
        '"repeat": {"frequency": "monthly", "dayOfMonth": 3}}'
    )

    result = AssistantService(db, client=fake_client).suggest_fields("Mow lawn")

    assert result == {
        "priority": Priority.LOW,
        "category": "Garden",
        "repeat": {"frequency": "monthly", "day_of_month": 3},
        "fallback": False,
    }


@pytest.mark.parametrize("reply", ["{oops", "[]", ""])
def test_suggest_fields_falls_back_on_malformed_json(db, fake_client, reply):
    fake_client.complete.return_value = reply

    result = AssistantService(db, client=fake_client).suggest_fields("Mow lawn")

    assert result["fallback"] is True
    assert result["priority"] == Priority.MEDIUM
    assert result["category"] is None
    assert result["repeat"] is None


def test_suggest_fields_ignores_unknown_repeat(db, fake_client):
    fake_client.complete.return_value = '{"priority": "high", "repeat": {"frequency": "yearly"}}'

    result = AssistantService(db, client=fake_client).suggest_fields("Taxes")

    assert result["repeat"] is None
    assert result["fallback"] is False


def test_affirmation_is_cached_for_the_day(db, fake_client):
    fake_client.complete.return_value = '"You make the home shine."'
    service = AssistantService(db, client=fake_client)

    first = service.daily_affirmation()
    second = AssistantService(db, client=fake_client).daily_affirmation()

    assert first["affirmation"] == "You make the home shine."
    assert second == first
    assert fake_client.complete.call_count == 1
    assert fake_client.complete.call_args.kwargs["max_tokens"] == 50


def test_affirmation_fallback_is_not_cached(db, fake_client):
    fake_client.complete.side_effect = [AssistantError("down"), "Fresh start."]
    service = AssistantService(db, client=fake_client)

    first = service.daily_affirmation()
    second = service.daily_affirmation()

    assert first["fallback"] is True
    assert first["affirmation"] == AssistantMessages.FALLBACK_AFFIRMATION
    assert second == {"affirmation": "Fresh start.", "date": first["date"], "fallback": False}


def test_followup_suggestion_is_stored(db, household, fake_client):
    task = TaskService(db).create_task(
        TaskCreate(title="Clean oven", assigned_to=["h1"], due_time=datetime(2030, 1, 1)),
        household["household_id"],
        "mgr",
    )
    fake_client.complete.return_value = json.dumps(
        {
            "title": "Wipe stovetop",
            "reason": "Oven is clean, stovetop is next",
            "priority": "medium",
            "daysFromNow": 2,
        }
    )

    suggestion = AssistantService(db, client=fake_client).suggest_followup(task.id, "mgr")

    stored = db.get(ShrimpySuggestion, suggestion.id)
    assert stored.title == "Wipe stovetop"
    assert stored.created_from_task_id == task.id
    assert stored.assigned_to == "h1"
    assert stored.status == "pending"


def test_followup_with_bad_reply_returns_none(db, household, fake_client):
    task = TaskService(db).create_task(
        TaskCreate(title="Clean oven", assigned_to=["h1"], due_time=datetime(2030, 1, 1)),
        household["household_id"],
        "mgr",
    )
    fake_client.complete.return_value = '{"reason": "no title"}'

    assert AssistantService(db, client=fake_client).suggest_followup(task.id, "mgr") is None
    assert db.query(ShrimpySuggestion).count() == 0


def test_extract_json_strips_fences():
    assert extract_json('```json\n{"a": 1}\n```') == {"a": 1}


class TestAssistantClient:
    def test_posts_bearer_request_and_returns_content(self):
        response = mock.Mock()
        response.json.return_value = {"choices": [{"message": {"content": "hello"}}]}
        client = AssistantClient(api_url="https://llm.test/v1", api_key="k", model="m", timeout=5)

        with mock.patch("app.services.assistant_service.requests.post", return_value=response) as post:
            assert client.complete([{"role": "user", "content": "hi"}], max_tokens=50) == "hello"

        _, kwargs = post.call_args
        assert post.call_args[0][0] == "https://llm.test/v1"
        assert kwargs["headers"]["Authorization"] == "Bearer k"
        assert kwargs["json"] == {
            "model": "m",
            "messages": [{"role": "user", "content": "hi"}],
            "max_tokens": 50,
        }
        assert kwargs["timeout"] == 5

    def test_http_error_becomes_assistant_error(self):
        response = mock.Mock()
        response.raise_for_status.side_effect = requests.HTTPError("429")
        client = AssistantClient(api_key="k")

        with mock.patch("app.services.assistant_service.requests.post", return_value=response):
            with pytest.raises(AssistantError):
                client.complete([{"role": "user", "content": "hi"}])

    def test_unexpected_body_becomes_assistant_error(self):
        response = mock.Mock()
        response.json.return_value = {"choices": []}
        client = AssistantClient(api_key="k")

        with mock.patch("app.services.assistant_service.requests.post", return_value=response):
            with pytest.raises(AssistantError):
                client.complete([{"role": "user", "content": "hi"}])

    def test_missing_key_fails_before_any_request(self):
        with mock.patch("app.services.assistant_service.requests.post") as post:
            with pytest.raises(AssistantError):
                AssistantClient(api_key="").complete([])
        post.assert_not_called()
