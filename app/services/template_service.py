import logging
from sqlalchemy.orm import Session
from typing import Dict, List, Optional, Sequence
from datetime import datetime
from ..models.task import Task
from ..models.task_template import TaskTemplate
from ..models.enums import TemplateFrequency, TaskStatus
from ..schemas.task import TaskDraft, parse_repeat_rule
from ..schemas.task_template import TemplateCreate, TemplateUpdate
from ..utils.constants import DEFAULT_TEMPLATES
from ..utils.date_helpers import DateHelpers
from .task_service import TaskService, normalize_priority

logger = logging.getLogger(__name__)


class TemplateServiceError(Exception):
    """Base exception for template service errors"""

    pass


class TemplateNotFoundError(TemplateServiceError):
    """Template not found"""

    pass


class TemplatePermissionError(TemplateServiceError):
    """Permission denied for template operation"""

    pass


def template_repeat_rule(template: TaskTemplate) -> Optional[dict]:
    """Task repeat rule implied by a template's frequency settings"""
    frequency = template.frequency or TemplateFrequency.ONCE.value
    if frequency == TemplateFrequency.DAILY.value:
        return {"frequency": "daily"}
    if frequency == TemplateFrequency.WEEKLY.value and template.day_of_week:
        return parse_repeat_rule({"frequency": "weekly", "days": template.day_of_week})
    if frequency == TemplateFrequency.MONTHLY.value and template.day_of_month:
        return parse_repeat_rule(
            {"frequency": "monthly", "day_of_month": template.day_of_month}
        )
    return None


def instantiate(
    template: TaskTemplate,
    assignee_ids: Sequence[str],
    due_date: Optional[datetime] = None,
    names: Optional[Dict[str, str]] = None,
) -> TaskDraft:
    """Build a pending task draft from a template.

    Assignees keep input order; an id without an entry in `names` is used
    as its own name. `due_date` defaults to now.
    """
    names = names or {}
    return TaskDraft(
        title=template.title,
        description=template.description or "",
        category=template.category,
        priority=normalize_priority(template.priority),
        assigned_to=[
            {"id": assignee_id, "name": names.get(assignee_id) or assignee_id}
            for assignee_id in assignee_ids
        ],
        due_time=due_date or DateHelpers.utcnow(),
        status=TaskStatus.PENDING,
        repeat=template_repeat_rule(template),
        estimated_time=template.estimated_time,
        room=template.room,
        supplies=list(template.supplies) if template.supplies is not None else None,
        steps=list(template.steps) if template.steps is not None else None,
    )


class TemplateService:
    def __init__(self, db: Session):
        self.db = db
        self.tasks = TaskService(db)

    def list_templates(self, household_id: str) -> List[TaskTemplate]:
        return (
            self.db.query(TaskTemplate)
            .filter(TaskTemplate.household_id == household_id)
            .order_by(TaskTemplate.is_default.desc(), TaskTemplate.id)
            .all()
        )

    def get_template(self, template_id: int, household_id: str) -> TaskTemplate:
        template = self.db.get(TaskTemplate, template_id)
        if not template or template.household_id != household_id:
            raise TemplateNotFoundError(f"Template {template_id} not found")
        return template

    def create_template(
        self, template_data: TemplateCreate, household_id: str, created_by: str
    ) -> TaskTemplate:
        self._require_manager(created_by, household_id)

        try:
            template = TaskTemplate(
                **template_data.model_dump(mode="json"),
                household_id=household_id,
                created_by=created_by,
                is_default=False,
                usage_count=0,
            )
            self.db.add(template)
            self.db.commit()
            self.db.refresh(template)
            return template

        except Exception as e:
            self.db.rollback()
            raise TemplateServiceError(f"Failed to create template: {str(e)}")

    def update_template(
        self,
        template_id: int,
        updates: TemplateUpdate,
        household_id: str,
        updated_by: str,
    ) -> TaskTemplate:
        self._require_manager(updated_by, household_id)
        template = self.get_template(template_id, household_id)

        try:
            for field, value in updates.model_dump(exclude_unset=True, mode="json").items():
                setattr(template, field, value)
            template.updated_at = DateHelpers.utcnow()
            self.db.commit()
            self.db.refresh(template)
            return template

        except Exception as e:
            self.db.rollback()
            raise TemplateServiceError(f"Failed to update template: {str(e)}")

    def delete_template(self, template_id: int, household_id: str, deleted_by: str) -> bool:
        self._require_manager(deleted_by, household_id)
        template = self.get_template(template_id, household_id)

        try:
            self.db.delete(template)
            self.db.commit()
            return True

        except Exception as e:
            self.db.rollback()
            raise TemplateServiceError(f"Failed to delete template: {str(e)}")

    def initialize_defaults(self, household_id: str, created_by: str) -> bool:
        """Seed the built-in templates once; False when already seeded"""
        self._require_manager(created_by, household_id)

        already_seeded = (
            self.db.query(TaskTemplate)
            .filter(
                TaskTemplate.household_id == household_id,
                TaskTemplate.is_default.is_(True),
            )
            .first()
        )
        if already_seeded:
            return False

        try:
            for template_data in DEFAULT_TEMPLATES:
                self.db.add(
                    TaskTemplate(
                        **template_data,
                        household_id=household_id,
                        created_by=created_by,
                        is_default=True,
                        usage_count=0,
                    )
                )
            self.db.commit()
            return True

        except Exception as e:
            self.db.rollback()
            raise TemplateServiceError(f"Failed to initialize default templates: {str(e)}")

    def instantiate_template(
        self,
        template_id: int,
        household_id: str,
        created_by: str,
        assignee_ids: Sequence[str],
        due_date: Optional[datetime] = None,
    ) -> Task:
        """Create a task from a template and record the template's use"""
        self._require_manager(created_by, household_id)
        template = self.get_template(template_id, household_id)

        names = {
            a["id"]: a["name"]
            for a in self.tasks.resolve_assignees(
                household_id, assignee_ids, fallback_to_id=True
            )
        }
        draft = instantiate(
            template,
            assignee_ids,
            DateHelpers.to_naive_utc(due_date) if due_date else None,
            names,
        )
        task = self.tasks.save_draft(draft, household_id, created_by)

        self.increment_usage(template)
        return task

    def increment_usage(self, template: TaskTemplate) -> None:
        """Best-effort usage counter; failures are logged, not raised"""
        try:
            template.usage_count = (template.usage_count or 0) + 1
            template.last_used = DateHelpers.utcnow()
            self.db.commit()
        except Exception as e:
            self.db.rollback()
            logger.error(f"Error incrementing template usage for {template.id}: {e}")

    def _require_manager(self, user_id: str, household_id: str) -> None:
        if not self.tasks.households.is_manager(user_id, household_id):
            raise TemplatePermissionError(
                "Only the household manager can manage templates"
            )
