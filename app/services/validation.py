"""Règles de validation d'une tâche candidate (création ou mise à jour).

Toutes les règles sont évaluées indépendamment: on collecte chaque violation
au lieu de s'arrêter à la première. Un même champ peut apparaître plusieurs fois.
"""

from datetime import datetime, timezone, time
from typing import Any, List, Optional, Tuple, Union

from app.schemas.task import TaskCreate, TaskUpdate, Violation, PRIORITIES

TITLE_MAX = 200
DESCRIPTION_MAX = 1000

_TRUE_VALUES = ("true", "1")
_FALSE_VALUES = ("false", "0")


def start_of_day(now: datetime) -> datetime:
    return datetime.combine(now.astimezone(timezone.utc).date(), time.min, tzinfo=timezone.utc)


def parse_iso_date(value: str) -> Optional[datetime]:
    """ISO 8601 (date seule ou date+heure) -> datetime UTC, None si illisible"""
    try:
        parsed = datetime.fromisoformat(value.strip())
    except ValueError:
        return None
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    try:
        return parsed.astimezone(timezone.utc)
    except OverflowError:
        # hors de la plage datetime une fois ramené en UTC
        if parsed.year == datetime.min.year:
            return datetime.min.replace(tzinfo=timezone.utc)
        return None


def _check_title(value, mode, errors, data):
    empty_msg = "Title is required" if mode == "create" else "Title cannot be empty"
    length_msg = f"Title must be between 1 and {TITLE_MAX} characters"
    if value is None:
        errors.append(Violation(field="title", message=empty_msg, value=value))
        return
    if not isinstance(value, str):
        errors.append(Violation(field="title", message="Title must be a string", value=value))
        return
    trimmed = value.strip()
    if not trimmed:
        errors.append(Violation(field="title", message=empty_msg, value=value))
    if not 1 <= len(trimmed) <= TITLE_MAX:
        errors.append(Violation(field="title", message=length_msg, value=value))
    data["title"] = trimmed


def _check_description(value, mode, errors, data):
    if value is None:
        data["description"] = ""
        return
    if not isinstance(value, str):
        errors.append(Violation(field="description", message="Description must be a string", value=value))
        return
    trimmed = value.strip()
    if len(trimmed) > DESCRIPTION_MAX:
        errors.append(Violation(
            field="description",
            message=f"Description cannot exceed {DESCRIPTION_MAX} characters",
            value=value,
        ))
    data["description"] = trimmed


def _check_priority(value, mode, errors, data):
    if value is None and mode == "create":
        return
    if value not in PRIORITIES:
        errors.append(Violation(
            field="priority",
            message="Priority must be one of: low, medium, high",
            value=value,
        ))
        return
    data["priority"] = value


def _check_completed(value, mode, errors, data):
    if isinstance(value, bool):
        data["completed"] = value
    elif isinstance(value, str) and value.lower() in _TRUE_VALUES + _FALSE_VALUES:
        data["completed"] = value.lower() in _TRUE_VALUES
    elif isinstance(value, int) and value in (0, 1):
        data["completed"] = bool(value)
    else:
        errors.append(Violation(field="completed", message="Completed must be a boolean value", value=value))


def _check_due_date(value, mode, errors, data, now):
    if value is None:
        data["due_date"] = None
        return
    parsed = parse_iso_date(value) if isinstance(value, str) else None
    if parsed is None:
        errors.append(Violation(field="dueDate", message="Due date must be a valid ISO 8601 date", value=value))
        return
    if parsed < start_of_day(now):
        errors.append(Violation(field="dueDate", message="Due date must be today or in the future", value=value))
        return
    data["due_date"] = parsed


def validate_task(
    candidate: Any,
    mode: str = "create",
    now: datetime = None,
) -> Tuple[Optional[Union[TaskCreate, TaskUpdate]], List[Violation]]:
    """Valide un corps de requête brut.

    Retourne (tâche normalisée, []) ou (None, violations), jamais les deux.
    En mode "update" seuls les champs présents sont vérifiés et posés sur le patch.
    """
    if mode not in ("create", "update"):
        raise ValueError(f"Unknown validation mode: {mode}")
    now = now or datetime.now(timezone.utc)

    if not isinstance(candidate, dict):
        if isinstance(candidate, (bytes, bytearray)):
            # corps non JSON transmis brut: la valeur doit rester sérialisable
            candidate = bytes(candidate).decode("utf-8", errors="replace")
        return None, [Violation(field="body", message="Request body must be a JSON object", value=candidate)]

    errors: List[Violation] = []
    data = {}

    if "title" in candidate or mode == "create":
        _check_title(candidate.get("title"), mode, errors, data)
    if "description" in candidate:
        _check_description(candidate["description"], mode, errors, data)
    if "priority" in candidate:
        _check_priority(candidate["priority"], mode, errors, data)
    if "completed" in candidate:
        _check_completed(candidate["completed"], mode, errors, data)
    if "dueDate" in candidate:
        _check_due_date(candidate["dueDate"], mode, errors, data, now)

    if errors:
        return None, errors
    if mode == "create":
        return TaskCreate(**data), []
    return TaskUpdate(**data), []
