"""Pydantic schemas for task request/response validation."""

import math
from datetime import datetime, timezone
from typing import Optional, Any, Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

Priority = Literal["low", "medium", "high"]
PRIORITIES = ("low", "medium", "high")


class Violation(BaseModel):
    """Une règle non respectée sur un champ (valeur telle que soumise)"""
    field: str
    message: str
    value: Any = None


class TaskCreate(BaseModel):
    title: str
    description: str = ""
    completed: bool = False
    priority: Priority = "medium"
    due_date: Optional[datetime] = None


class TaskUpdate(BaseModel):
    """Patch partiel: seuls les champs présents (model_fields_set) sont appliqués"""
    title: Optional[str] = None
    description: Optional[str] = None
    completed: Optional[bool] = None
    priority: Optional[Priority] = None
    due_date: Optional[datetime] = None


class TaskResponse(BaseModel):
    """Schema for task responses from API."""

    id: str = Field(alias="_id")
    title: str
    description: str
    completed: bool
    priority: str
    due_date: Optional[datetime]
    created_at: datetime
    updated_at: datetime
    status: str
    days_until_due: Optional[int]

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    @classmethod
    def from_task(cls, task, now: datetime = None) -> "TaskResponse":
        now = now or datetime.now(timezone.utc)
        return cls(
            id=task.id,
            title=task.title,
            description=task.description or "",
            completed=task.completed,
            priority=task.priority,
            due_date=as_utc(task.due_date),
            created_at=as_utc(task.created_at),
            updated_at=as_utc(task.updated_at),
            status=task_status(task, now),
            days_until_due=days_until_due(task, now),
        )


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    # SQLite rend des datetimes naïfs: on les considère UTC
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=timezone.utc)


def task_status(task, now: datetime) -> str:
    if task.completed:
        return "Completed"
    due = as_utc(task.due_date)
    if due is not None and due < now:
        return "Overdue"
    return "Pending"


def days_until_due(task, now: datetime) -> Optional[int]:
    due = as_utc(task.due_date)
    if due is None:
        return None
    return math.ceil((due - now).total_seconds() / 86400)
