import logging
from sqlalchemy.orm import Session
from typing import List, Optional
from datetime import datetime
from ..models.task import Task
from ..models.shrimpy_suggestion import ShrimpySuggestion
from ..models.enums import SuggestionStatus, TaskStatus, Priority
from ..schemas.task import parse_repeat_rule
from .task_service import TaskService, normalize_priority
from .household_service import HouseholdService

logger = logging.getLogger(__name__)


class SuggestionServiceError(Exception):
    """Base exception for suggestion errors"""

    pass


class SuggestionNotFoundError(SuggestionServiceError):
    pass


class SuggestionPermissionError(SuggestionServiceError):
    pass


class SuggestionStateError(SuggestionServiceError):
    """Suggestion was already accepted or ignored"""

    pass


class SuggestionService:
    def __init__(self, db: Session):
        self.db = db
        self.households = HouseholdService(db)

    def create_suggestion(
        self,
        household_id: str,
        title: str,
        reason: str,
        suggested_date: datetime,
        description: Optional[str] = None,
        category: Optional[str] = None,
        priority: Optional[str] = None,
        assigned_to: Optional[str] = None,
        repeat: Optional[dict] = None,
        created_from_task_id: Optional[int] = None,
    ) -> ShrimpySuggestion:
        try:
            suggestion = ShrimpySuggestion(
                household_id=household_id,
                title=title,
                reason=reason,
                suggested_date=suggested_date,
                description=description,
                category=category,
                priority=normalize_priority(priority, Priority.LOW).value,
                assigned_to=assigned_to,
                repeat=parse_repeat_rule(repeat),
                created_from_task_id=created_from_task_id,
                status=SuggestionStatus.PENDING.value,
            )
            self.db.add(suggestion)
            self.db.commit()
            self.db.refresh(suggestion)
            return suggestion

        except Exception as e:
            self.db.rollback()
            raise SuggestionServiceError(f"Failed to save suggestion: {str(e)}")

    def list_pending(self, household_id: str) -> List[ShrimpySuggestion]:
        return (
            self.db.query(ShrimpySuggestion)
            .filter(
                ShrimpySuggestion.household_id == household_id,
                ShrimpySuggestion.status == SuggestionStatus.PENDING.value,
            )
            .order_by(ShrimpySuggestion.suggested_date.asc())
            .all()
        )

    def accept(self, suggestion_id: int, user_id: str) -> Task:
        """Copy the suggestion into the task store and mark it accepted"""
        suggestion = self._get_pending_for_manager(suggestion_id, user_id)

        assigned_to = []
        if suggestion.assigned_to:
            assigned_to = TaskService(self.db).resolve_assignees(
                suggestion.household_id, [suggestion.assigned_to], fallback_to_id=True
            )

        try:
            task = Task(
                title=suggestion.title,
                description=suggestion.description or "",
                category=suggestion.category or "General",
                priority=normalize_priority(suggestion.priority, Priority.LOW).value,
                repeat=suggestion.repeat,
                assigned_to=assigned_to,
                status=TaskStatus.PENDING.value,
                household_id=suggestion.household_id,
                created_by=user_id,
                due_time=suggestion.suggested_date,
            )
            self.db.add(task)
            self.db.flush()

            suggestion.status = SuggestionStatus.ACCEPTED.value
            suggestion.accepted_task_id = task.id
            self.db.commit()
            self.db.refresh(task)
            return task

        except Exception as e:
            self.db.rollback()
            raise SuggestionServiceError(f"Failed to accept suggestion: {str(e)}")

    def ignore(self, suggestion_id: int, user_id: str) -> ShrimpySuggestion:
        suggestion = self._get_pending_for_manager(suggestion_id, user_id)

        try:
            suggestion.status = SuggestionStatus.IGNORED.value
            self.db.commit()
            self.db.refresh(suggestion)
            return suggestion

        except Exception as e:
            self.db.rollback()
            raise SuggestionServiceError(f"Failed to ignore suggestion: {str(e)}")

    def _get_pending_for_manager(self, suggestion_id: int, user_id: str) -> ShrimpySuggestion:
        suggestion = self.db.get(ShrimpySuggestion, suggestion_id)
        if not suggestion:
            raise SuggestionNotFoundError(f"Suggestion {suggestion_id} not found")
        if not self.households.is_manager(user_id, suggestion.household_id):
            raise SuggestionPermissionError(
                "Only the household manager can act on suggestions"
            )
        if suggestion.status != SuggestionStatus.PENDING.value:
            raise SuggestionStateError(f"Suggestion is already {suggestion.status}")
        return suggestion
