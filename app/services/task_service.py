import logging
from sqlalchemy.orm import Session
from typing import List, Dict, Any, Optional, Sequence
from datetime import datetime
from ..config import settings
from ..models.task import Task
from ..models.user import User
from ..models.household import Household
from ..models.enums import TaskStatus, TaskFilter, Priority
from ..schemas.task import TaskCreate, TaskUpdate, TaskDraft, dump_repeat_rule
from ..utils.constants import AppConstants
from ..utils.date_helpers import DateHelpers
from ..utils.task_filters import (
    apply_task_filter,
    narrow_tasks,
    chunked,
    summarize_tasks,
)
from .household_service import HouseholdService

logger = logging.getLogger(__name__)


# Custom Exceptions
class TaskServiceError(Exception):
    """Base exception for task service errors"""

    pass


class TaskNotFoundError(TaskServiceError):
    """Task not found"""

    pass


class UserNotFoundError(TaskServiceError):
    """User profile not found"""

    pass


class PermissionDeniedError(TaskServiceError):
    """Permission denied for operation"""

    pass


class BusinessRuleViolationError(TaskServiceError):
    """Business rule violation"""

    pass


# Allowed status moves; completion fields follow entry to / exit from COMPLETED
VALID_STATUS_TRANSITIONS = {
    TaskStatus.PENDING.value: {TaskStatus.COMPLETED.value, TaskStatus.IN_PROGRESS.value},
    TaskStatus.IN_PROGRESS.value: {TaskStatus.PENDING.value, TaskStatus.COMPLETED.value},
    TaskStatus.COMPLETED.value: {TaskStatus.PENDING.value},
}


class TaskService:
    def __init__(self, db: Session, batch_size: Optional[int] = None):
        self.db = db
        self.batch_size = batch_size or settings.HOUSEHOLD_QUERY_BATCH_SIZE
        self.households = HouseholdService(db)

    def create_task(self, task_data: TaskCreate, household_id: str, created_by: str) -> Task:
        """Create a task; only the household manager may do this"""

        self._require_manager(created_by, household_id)

        for assignee_id in task_data.assigned_to:
            if not self.households.is_member(assignee_id, household_id):
                raise BusinessRuleViolationError(
                    f"Assigned user {assignee_id} is not a household member"
                )

        draft = TaskDraft(
            title=task_data.title,
            description=task_data.description,
            priority=task_data.priority,
            category=task_data.category,
            assigned_to=self.resolve_assignees(household_id, task_data.assigned_to),
            due_time=task_data.due_time,
            repeat=dump_repeat_rule(task_data.repeat),
        )
        return self.save_draft(draft, household_id, created_by)

    def save_draft(self, draft: TaskDraft, household_id: str, created_by: str) -> Task:
        """Persist a prepared draft as a new pending task (household manager only)"""
        self._require_manager(created_by, household_id)

        try:
            task = Task(
                title=draft.title,
                description=draft.description or "",
                priority=draft.priority.value,
                category=draft.category,
                status=TaskStatus.PENDING.value,
                assigned_to=[a.model_dump() for a in draft.assigned_to],
                repeat=draft.repeat,
                household_id=household_id,
                created_by=created_by,
                due_time=DateHelpers.to_naive_utc(draft.due_time),
                estimated_time=draft.estimated_time,
                room=draft.room,
                supplies=draft.supplies,
                steps=draft.steps,
            )

            self.db.add(task)
            self.db.commit()
            self.db.refresh(task)
            return task

        except Exception as e:
            self.db.rollback()
            raise TaskServiceError(f"Failed to create task: {str(e)}")

    def get_task(self, task_id: int, user_id: str) -> Task:
        task = self._get_task_or_raise(task_id)
        if not self._can_view(user_id, task):
            raise PermissionDeniedError("Access denied to this task")
        return task

    def update_task(self, task_id: int, task_updates: TaskUpdate, updated_by: str) -> Task:
        """Replace the editable fields; status and ownership are untouched"""

        task = self._get_task_or_raise(task_id)
        self._require_manager(updated_by, task.household_id)

        for assignee_id in task_updates.assigned_to:
            if not self.households.is_member(assignee_id, task.household_id):
                raise BusinessRuleViolationError(
                    f"Assigned user {assignee_id} is not a household member"
                )

        # Existing snapshots are kept for assignees that stay on the task
        previous = {a.get("id"): a for a in task.assigned_to or []}
        new_ids = [i for i in task_updates.assigned_to if i not in previous]
        resolved = {a["id"]: a for a in self.resolve_assignees(task.household_id, new_ids)}

        try:
            task.title = task_updates.title
            task.description = task_updates.description
            task.priority = task_updates.priority.value
            task.category = task_updates.category
            task.due_time = task_updates.due_time
            task.repeat = dump_repeat_rule(task_updates.repeat)
            task.assigned_to = [
                previous.get(i) or resolved[i] for i in task_updates.assigned_to
            ]

            self.db.commit()
            self.db.refresh(task)
            return task

        except Exception as e:
            self.db.rollback()
            raise TaskServiceError(f"Failed to update task: {str(e)}")

    def delete_task(self, task_id: int, deleted_by: str) -> bool:
        task = self._get_task_or_raise(task_id)
        self._require_manager(deleted_by, task.household_id)

        try:
            self.db.delete(task)
            self.db.commit()
            return True

        except Exception as e:
            self.db.rollback()
            raise TaskServiceError(f"Failed to delete task: {str(e)}")

    def set_completed(self, task_id: int, user_id: str, completed: bool) -> Task:
        """Checkbox transition: to completed, or back to pending"""
        new_status = TaskStatus.COMPLETED.value if completed else TaskStatus.PENDING.value
        return self.update_task_status(task_id, new_status, user_id)

    def set_in_progress(self, task_id: int, user_id: str, in_progress: bool) -> Task:
        new_status = (
            TaskStatus.IN_PROGRESS.value if in_progress else TaskStatus.PENDING.value
        )
        task = self._get_task_or_raise(task_id)
        if not in_progress and task.status != TaskStatus.IN_PROGRESS.value:
            raise BusinessRuleViolationError("Task is not in progress")
        return self.update_task_status(task_id, new_status, user_id)

    def update_task_status(self, task_id: int, new_status: str, user_id: str) -> Task:
        """Single-document write; concurrent writers resolve last-write-wins"""

        task = self._get_task_or_raise(task_id)

        if not self._can_change_status(user_id, task):
            raise PermissionDeniedError(
                "Only assigned members or the household manager can update this task"
            )

        if new_status not in VALID_STATUS_TRANSITIONS.get(task.status, set()):
            raise BusinessRuleViolationError(
                f"Cannot change status from {task.status} to {new_status}"
            )

        try:
            if new_status == TaskStatus.COMPLETED.value:
                task.completed_by = user_id
                task.completed_at = DateHelpers.utcnow()
            elif task.status == TaskStatus.COMPLETED.value:
                # Uncompleting task
                task.completed_by = None
                task.completed_at = None
            task.status = new_status

            self.db.commit()
            self.db.refresh(task)
            return task

        except Exception as e:
            self.db.rollback()
            raise TaskServiceError(f"Failed to update task status: {str(e)}")

    def get_user_tasks(self, user_id: str, completed_only: bool = False) -> List[Task]:
        """Role-partitioned task set visible to a user.

        Managers and counselors see their single household. Everyone else
        sees the union over every household they are a member of, queried
        in batches of at most `batch_size` household ids.
        """
        user = self.db.get(User, user_id)
        if not user:
            raise UserNotFoundError(f"User {user_id} not found")

        if user.has_single_household_view:
            if not user.household_id:
                return []
            return self._query_household_batch([user.household_id], completed_only)

        household_ids = self.households.get_member_household_ids(user_id)
        if not household_ids:
            return []

        tasks: List[Task] = []
        seen = set()
        for batch in chunked(household_ids, self.batch_size):
            for task in self._query_household_batch(batch, completed_only):
                if task.id not in seen:
                    seen.add(task.id)
                    tasks.append(task)
        return tasks

    def get_visible_tasks(
        self,
        user_id: str,
        active_filter: TaskFilter = TaskFilter.ALL,
        household_id: Optional[str] = None,
        helper_id: Optional[str] = None,
    ) -> List[Task]:
        tasks = narrow_tasks(self.get_user_tasks(user_id), household_id, helper_id)
        return apply_task_filter(tasks, active_filter, user_id)

    def get_task_summary(self, user_id: str) -> Dict[str, Any]:
        return summarize_tasks(self.get_user_tasks(user_id))

    def get_calendar_events(
        self,
        user_id: str,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> List[Dict[str, Any]]:
        start = DateHelpers.to_naive_utc(start) if start else None
        end = DateHelpers.to_naive_utc(end) if end else None

        events = []
        for task in apply_task_filter(self.get_user_tasks(user_id), TaskFilter.ALL):
            if start and task.due_time < start:
                continue
            if end and task.due_time >= end:
                continue
            events.append(
                {
                    "id": task.id,
                    "title": task.title,
                    "start": task.due_time,
                    "status": task.status,
                }
            )
        return events

    def get_task_log(self, user_id: str) -> List[Dict[str, Any]]:
        """Completed tasks, newest completion first"""
        tasks = self.get_user_tasks(user_id, completed_only=True)

        names: Dict[str, Optional[str]] = {}
        logs = []
        for task in tasks:
            completed_by = task.completed_by
            if completed_by and completed_by not in names:
                profile = self.db.get(User, completed_by)
                names[completed_by] = profile.name if profile and profile.name else None
            logs.append(
                {
                    "title": task.title,
                    "completed_by": completed_by,
                    "completed_by_name": names.get(completed_by) if completed_by else None,
                    "completed_at": task.completed_at,
                }
            )

        logs.sort(key=lambda entry: entry["completed_at"] or datetime.min, reverse=True)
        return logs

    def resolve_assignees(
        self, household_id: str, assignee_ids: Sequence[str], fallback_to_id: bool = False
    ) -> List[Dict[str, str]]:
        """Snapshot {id, name} pairs in input order.

        Names come from member profiles (name, then e-mail); unresolved ids
        get "Unknown", or the id itself when `fallback_to_id` is set.
        """
        profiles = {
            m["id"]: m for m in self.households.get_member_profiles(household_id)
        }
        assignees = []
        for assignee_id in assignee_ids:
            profile = profiles.get(assignee_id) or {}
            name = profile.get("name") or profile.get("email")
            if not name:
                name = assignee_id if fallback_to_id else AppConstants.UNKNOWN_MEMBER_NAME
            assignees.append({"id": assignee_id, "name": name})
        return assignees

    # === PRIVATE HELPER METHODS ===

    def _query_household_batch(
        self, household_ids: Sequence[str], completed_only: bool = False
    ) -> List[Task]:
        """One underlying query for up to `batch_size` household ids"""
        if len(household_ids) > self.batch_size:
            raise ValueError(
                f"At most {self.batch_size} household ids per query, got {len(household_ids)}"
            )
        query = self.db.query(Task).filter(Task.household_id.in_(list(household_ids)))
        if completed_only:
            query = query.filter(Task.status == TaskStatus.COMPLETED.value)
        return query.order_by(Task.id).all()

    def _get_task_or_raise(self, task_id: int) -> Task:
        task = self.db.get(Task, task_id)
        if not task:
            raise TaskNotFoundError(f"Task {task_id} not found")
        return task

    def _require_manager(self, user_id: str, household_id: str) -> Household:
        household = self.db.get(Household, household_id)
        if not household:
            raise BusinessRuleViolationError(f"Household {household_id} does not exist")
        if household.manager_id != user_id:
            raise PermissionDeniedError("Only the household manager can manage tasks")
        return household

    def _can_view(self, user_id: str, task: Task) -> bool:
        return self.households.is_member(user_id, task.household_id) or (
            self.households.is_manager(user_id, task.household_id)
        )

    def _can_change_status(self, user_id: str, task: Task) -> bool:
        if self.households.is_manager(user_id, task.household_id):
            return True
        return task.is_assigned_to(user_id) and self.households.is_member(
            user_id, task.household_id
        )


def normalize_priority(value: Any, default: Priority = Priority.MEDIUM) -> Priority:
    """Map free-form priority text ("High", "urgent", None) onto Priority"""
    if isinstance(value, str):
        try:
            return Priority(value.strip().lower())
        except ValueError:
            return default
    return default
