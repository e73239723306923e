import json
import logging
import re
import requests
from sqlalchemy.orm import Session
from typing import Any, Dict, List, Optional
from datetime import timedelta
from ..config import settings
from ..models.shrimpy_suggestion import ShrimpySuggestion
from ..models.enums import Priority, TaskStatus
from ..schemas.task import TaskDraft, parse_repeat_rule
from ..utils.constants import AssistantMessages, AssistantPrompts, AppConstants
from ..utils.date_helpers import DateHelpers
from .task_service import TaskService, normalize_priority
from .suggestion_service import SuggestionService

logger = logging.getLogger(__name__)

ADD_COMMAND = "/add"

_CODE_FENCE = re.compile(r"^```(?:json)?\s*|\s*```$", re.IGNORECASE)


class AssistantError(Exception):
    """The text-generation endpoint failed or returned an unusable body"""

    pass


def extract_json(text: str) -> Dict[str, Any]:
    """Parse a JSON object out of a model reply, tolerating code fences.

    Raises ValueError when the reply is not a JSON object.
    """
    if not text:
        raise ValueError("Empty reply")
    cleaned = _CODE_FENCE.sub("", text.strip()).strip()
    try:
        parsed = json.loads(cleaned)
    except json.JSONDecodeError:
        # Models sometimes wrap the object in prose
        start, end = cleaned.find("{"), cleaned.rfind("}")
        if start == -1 or end <= start:
            raise ValueError("Reply does not contain a JSON object")
        try:
            parsed = json.loads(cleaned[start : end + 1])
        except json.JSONDecodeError as e:
            raise ValueError(f"Malformed JSON in reply: {e}")
    if not isinstance(parsed, dict):
        raise ValueError("Reply JSON is not an object")
    return parsed


class AssistantClient:
    """Bearer-authenticated chat-completions call returning the single completion text"""

    def __init__(
        self,
        api_url: Optional[str] = None,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        timeout: Optional[float] = None,
    ):
        self.api_url = api_url or settings.ASSISTANT_API_URL
        self.api_key = api_key if api_key is not None else settings.ASSISTANT_API_KEY
        self.model = model or settings.ASSISTANT_MODEL
        self.timeout = timeout or settings.ASSISTANT_TIMEOUT_SECONDS

    def complete(
        self, messages: List[Dict[str, str]], max_tokens: Optional[int] = None
    ) -> str:
        if not self.api_key:
            raise AssistantError("Assistant API key is not configured")

        payload: Dict[str, Any] = {"model": self.model, "messages": messages}
        if max_tokens:
            payload["max_tokens"] = max_tokens

        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

        try:
            response = requests.post(
                self.api_url, headers=headers, json=payload, timeout=self.timeout
            )
            response.raise_for_status()
            data = response.json()
            content = data["choices"][0]["message"]["content"]
        except requests.RequestException as e:
            raise AssistantError(f"Assistant request failed: {e}")
        except (KeyError, IndexError, TypeError, ValueError) as e:
            raise AssistantError(f"Unexpected assistant response: {e}")

        if not isinstance(content, str):
            raise AssistantError("Assistant returned no text")
        return content


class AssistantService:
    """Request/parse/dispatch wrapper around the text-generation endpoint.

    Nothing here lets a model or transport failure escape: each operation
    degrades to a fixed message or a fallback value.
    """

    # Shared across instances; one affirmation per calendar day
    _affirmation_cache: Dict[str, str] = {}

    def __init__(self, db: Session, client: Optional[AssistantClient] = None):
        self.db = db
        self.client = client or AssistantClient()
        self.tasks = TaskService(db)
        self.suggestions = SuggestionService(db)

    def chat(
        self, user, message: str, history: Optional[List[Dict[str, str]]] = None
    ) -> Dict[str, Any]:
        """Send one chat turn; `/add` replies from managers become tasks"""
        history = list(history or [])
        messages = history + [{"role": "user", "content": message}]
        is_add = message.strip().lower().startswith(ADD_COMMAND)

        if is_add:
            refusal = self._add_refusal(user)
            if refusal:
                return self._reply(messages, refusal)

        try:
            reply = self.client.complete(
                [{"role": "system", "content": AssistantPrompts.CHAT_SYSTEM}] + messages
            )
        except AssistantError as e:
            logger.error(f"Assistant chat failed for {user.id}: {e}")
            return self._reply(messages, AssistantMessages.GENERIC_FAILURE)

        if not is_add:
            return self._reply(messages, reply)

        return self._add_task_from_reply(user, messages, reply)

    def suggest_fields(self, title: str, description: str = "") -> Dict[str, Any]:
        """Priority/category/repeat for a draft task, or the fallback"""
        fallback = {
            "priority": Priority.MEDIUM,
            "category": None,
            "repeat": None,
            "fallback": True,
        }

        prompt = f"Title: {title}\nDescription: {description or 'none'}"
        try:
            reply = self.client.complete(
                [
                    {"role": "system", "content": AssistantPrompts.FIELD_SUGGESTION_SYSTEM},
                    {"role": "user", "content": prompt},
                ]
            )
            parsed = extract_json(reply)
        except (AssistantError, ValueError) as e:
            logger.warning(f"Field suggestion fell back for '{title}': {e}")
            return fallback

        category = parsed.get("category")
        return {
            "priority": normalize_priority(parsed.get("priority")),
            "category": category.strip() if isinstance(category, str) and category.strip() else None,
            "repeat": parse_repeat_rule(parsed.get("repeat")),
            "fallback": False,
        }

    def daily_affirmation(self) -> Dict[str, Any]:
        today = DateHelpers.today_key()
        cached = self._affirmation_cache.get(today)
        if cached:
            return {"affirmation": cached, "date": today, "fallback": False}

        try:
            reply = self.client.complete(
                [
                    {"role": "system", "content": AssistantPrompts.AFFIRMATION_SYSTEM},
                    {"role": "user", "content": AssistantPrompts.AFFIRMATION_USER},
                ],
                max_tokens=AppConstants.AFFIRMATION_MAX_TOKENS,
            )
        except AssistantError as e:
            logger.error(f"Affirmation request failed: {e}")
            return self._fallback_affirmation(today)

        affirmation = reply.strip().strip("\"'“”").strip()
        if not affirmation:
            return self._fallback_affirmation(today)

        # Only one day is ever kept
        self._affirmation_cache.clear()
        self._affirmation_cache[today] = affirmation
        return {"affirmation": affirmation, "date": today, "fallback": False}

    def suggest_followup(self, task_id: int, user_id: str) -> Optional[ShrimpySuggestion]:
        """Ask for one follow-up chore to a task; None when the model gives nothing usable"""
        task = self.tasks.get_task(task_id, user_id)

        prompt = (
            f"Completed chore: {task.title}\n"
            f"Description: {task.description or 'none'}\n"
            f"Category: {task.category or 'none'}"
        )
        try:
            reply = self.client.complete(
                [
                    {"role": "system", "content": AssistantPrompts.FOLLOWUP_SYSTEM},
                    {"role": "user", "content": prompt},
                ]
            )
            parsed = extract_json(reply)
        except (AssistantError, ValueError) as e:
            logger.warning(f"Follow-up suggestion failed for task {task_id}: {e}")
            return None

        title = parsed.get("title")
        if not isinstance(title, str) or not title.strip():
            return None

        days = parsed.get("daysFromNow", AppConstants.DEFAULT_FOLLOWUP_DAYS)
        if not isinstance(days, int) or days < 0:
            days = AppConstants.DEFAULT_FOLLOWUP_DAYS

        assignee = task.assigned_to[0]["id"] if task.assigned_to else None

        return self.suggestions.create_suggestion(
            household_id=task.household_id,
            title=title.strip(),
            reason=parsed.get("reason") or f"Follow-up to {task.title}",
            suggested_date=DateHelpers.utcnow() + timedelta(days=days),
            description=parsed.get("description"),
            category=parsed.get("category") or task.category,
            priority=parsed.get("priority"),
            assigned_to=assignee,
            repeat=parsed.get("repeat"),
            created_from_task_id=task.id,
        )

    # === PRIVATE HELPER METHODS ===

    def _add_task_from_reply(
        self, user, messages: List[Dict[str, str]], reply: str
    ) -> Dict[str, Any]:
        try:
            parsed = extract_json(reply)
        except ValueError as e:
            logger.warning(f"Could not parse /add reply for {user.id}: {e}")
            return self._reply(messages, AssistantMessages.PARSE_FAILURE)

        title = parsed.get("title") or parsed.get("task")
        assignee = parsed.get("assignedTo") or parsed.get("assignee")
        if not isinstance(title, str) or not title.strip() or not assignee:
            return self._reply(messages, AssistantMessages.MISSING_TASK_FIELDS)
        title = title.strip()
        assignee = str(assignee).strip()

        try:
            due_time = DateHelpers.combine_date_time(
                parsed.get("dueDate"), parsed.get("dueTime")
            )
        except ValueError:
            return self._reply(messages, AssistantMessages.PARSE_FAILURE)

        category = parsed.get("category")
        description = parsed.get("description")
        try:
            draft = TaskDraft(
                title=title,
                description=description if isinstance(description, str) else "",
                priority=normalize_priority(parsed.get("priority")),
                category=category if isinstance(category, str) else None,
                # The assignee is free text here, not a resolved member id
                assigned_to=[{"id": assignee, "name": assignee}],
                due_time=due_time or DateHelpers.utcnow(),
                status=TaskStatus.PENDING,
                repeat=parse_repeat_rule(parsed.get("repeat")),
            )
            task = self.tasks.save_draft(draft, user.household_id, user.id)
        except Exception as e:
            logger.error(f"Assistant task creation failed for {user.id}: {e}")
            return self._reply(messages, AssistantMessages.PARSE_FAILURE)

        return self._reply(
            messages, AssistantMessages.TASK_ADDED.format(title=task.title), task.id
        )

    def _add_refusal(self, user) -> Optional[str]:
        """Message refusing `/add`, or None when the caller manages their household"""
        if not user.is_manager:
            return AssistantMessages.HELPER_CANNOT_ADD
        if not user.household_id:
            return AssistantMessages.NO_HOUSEHOLD
        # The role string alone is not enough; the household must name this user
        if not self.tasks.households.is_manager(user.id, user.household_id):
            logger.warning(f"Refused /add from {user.id} for {user.household_id}")
            return AssistantMessages.HELPER_CANNOT_ADD
        return None

    def _reply(
        self, messages: List[Dict[str, str]], reply: str, task_id: Optional[int] = None
    ) -> Dict[str, Any]:
        return {
            "reply": reply,
            "messages": messages + [{"role": "assistant", "content": reply}],
            "task_id": task_id,
        }

    def _fallback_affirmation(self, today: str) -> Dict[str, Any]:
        return {
            "affirmation": AssistantMessages.FALLBACK_AFFIRMATION,
            "date": today,
            "fallback": True,
        }
