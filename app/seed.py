"""
Charge des tâches d'exemple dans la base.

Usage: python -m app.seed
"""

import logging
from datetime import datetime, timedelta, timezone

from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.database import Database
from app.models.task import Task

logger = logging.getLogger(__name__)

# (titre, description, priorité, échéance en jours, terminée)
SAMPLE_TASKS = [
    ("Complete project documentation", "Write comprehensive API documentation for the Task Manager", "high", 7, False),
    ("Review code changes", "Review pull request #123 for the new feature", "medium", 3, True),
    ("Update dependencies", "Update packages to latest versions", "low", None, False),
    ("Write unit tests", "Add comprehensive test coverage for new components", "high", 5, False),
    ("Deploy to production", "Deploy the latest version to production environment", "medium", 10, False),
    ("Setup CI/CD pipeline", "Configure automated testing and deployment", "high", None, True),
]


def seed_database(db: Session) -> list[Task]:
    deleted = db.query(Task).delete()
    logger.info(f"Cleared {deleted} existing tasks")

    now = datetime.now(timezone.utc)
    tasks = []
    for title, description, priority, due_in_days, completed in SAMPLE_TASKS:
        tasks.append(Task(
            title=title,
            description=description,
            priority=priority,
            due_date=now + timedelta(days=due_in_days) if due_in_days is not None else None,
            completed=completed,
        ))
    db.add_all(tasks)
    db.commit()
    logger.info(f"Seeded {len(tasks)} sample tasks")
    return tasks


def main():
    logging.basicConfig(level=settings.LOG_LEVEL)
    database = Database(settings.DATABASE_URL)
    database.connect()
    try:
        db = database.SessionLocal()
        try:
            for index, task in enumerate(seed_database(db), start=1):
                state = "Completed" if task.completed else "Pending"
                logger.info(f"{index}. {task.title} ({task.priority}) - {state}")
        finally:
            db.close()
    finally:
        database.disconnect()


if __name__ == "__main__":
    main()
