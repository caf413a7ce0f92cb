"""Task service"""

import logging
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Tuple

from sqlalchemy.orm import Session

from app.core.errors import CastError, NotFoundError, ValidationError
from app.models.task import Task
from app.services.validation import validate_task

logger = logging.getLogger(__name__)

DEFAULT_SORT_FIELD = "createdAt"

# nom wire -> colonne triable
SORTABLE_COLUMNS = {
    "_id": Task.id,
    "title": Task.title,
    "description": Task.description,
    "completed": Task.completed,
    "priority": Task.priority,
    "dueDate": Task.due_date,
    "createdAt": Task.created_at,
    "updatedAt": Task.updated_at,
}


def resolve_filter(query: Mapping[str, str]) -> Tuple[Dict[str, Any], Tuple[str, str]]:
    """Paramètres de requête -> (filtre, tri).

    `completed` présent mais différent de "true" filtre sur False (et non "pas de filtre").
    """
    filters: Dict[str, Any] = {}
    if "completed" in query:
        filters["completed"] = query["completed"] == "true"
    priority = query.get("priority")
    if priority:
        filters["priority"] = priority

    sort_by = query.get("sortBy") or DEFAULT_SORT_FIELD
    sort_order = "asc" if query.get("sortOrder") == "asc" else "desc"
    return filters, (sort_by, sort_order)


def parse_task_id(task_id: str) -> str:
    try:
        return str(uuid.UUID(task_id))
    except (ValueError, TypeError, AttributeError):
        raise CastError(task_id)


def _get_or_404(db: Session, task_id: str) -> Task:
    task = db.get(Task, parse_task_id(task_id))
    if task is None:
        raise NotFoundError(task_id)
    return task


def list_tasks(db: Session, query: Mapping[str, str]) -> Tuple[List[Task], int]:
    filters, (sort_by, sort_order) = resolve_filter(query)

    statement = db.query(Task)
    if "completed" in filters:
        statement = statement.filter(Task.completed == filters["completed"])
    if "priority" in filters:
        statement = statement.filter(Task.priority == filters["priority"])

    # un champ de tri inconnu ne discrimine rien: pas de ORDER BY
    column = SORTABLE_COLUMNS.get(sort_by)
    if column is not None:
        statement = statement.order_by(column.asc() if sort_order == "asc" else column.desc())

    tasks = statement.all()
    return tasks, len(tasks)


def get_task(db: Session, task_id: str) -> Task:
    return _get_or_404(db, task_id)


def create_task(db: Session, payload: Any, now: datetime = None) -> Task:
    now = now or datetime.now(timezone.utc)
    task_data, violations = validate_task(payload, "create", now)
    if violations:
        raise ValidationError(violations)

    new_task = Task(
        title=task_data.title,
        description=task_data.description,
        completed=task_data.completed,
        priority=task_data.priority,
        due_date=task_data.due_date,
        created_at=now,
        updated_at=now,
    )
    db.add(new_task)
    db.commit()
    db.refresh(new_task)
    logger.info(f"Created task {new_task.id}")
    return new_task


def update_task(db: Session, task_id: str, payload: Any, now: datetime = None) -> Task:
    now = now or datetime.now(timezone.utc)
    normalized_id = parse_task_id(task_id)
    task_data, violations = validate_task(payload, "update", now)
    if violations:
        raise ValidationError(violations)

    task = db.get(Task, normalized_id)
    if task is None:
        raise NotFoundError(task_id)

    update_data = task_data.model_dump(exclude_unset=True)
    for field, value in update_data.items():
        setattr(task, field, value)
    task.updated_at = now

    db.commit()
    db.refresh(task)
    logger.info(f"Updated task {task.id}: {sorted(update_data)}")
    return task


def delete_task(db: Session, task_id: str) -> None:
    task = _get_or_404(db, task_id)
    db.delete(task)
    db.commit()
    logger.info(f"Deleted task {task_id}")
