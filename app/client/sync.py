"""
État côté frontend: liste des tâches avec mises à jour optimistes, et formulaire de création.

Le rendu n'est pas géré ici: ces objets exposent l'état que la vue affiche.
"""

import logging
from typing import Callable, List, Optional

from app.client.api import TaskAPIError, TasksAPI
from app.services.validation import validate_task

logger = logging.getLogger(__name__)


class TaskBoard:
    """Liste des tâches. Rafraîchie quand le jeton de rafraîchissement change (pas de polling)."""

    def __init__(self, api: TasksAPI, filters: dict = None):
        self.api = api
        self.filters = filters or {}
        self.tasks: List[dict] = []
        self.error: Optional[str] = None
        self.loading = False
        self.pending = set()  # ids dont une requête est en cours
        self._refresh_token = None

    def _index(self, task_id: str) -> int:
        for i, task in enumerate(self.tasks):
            if task["_id"] == task_id:
                return i
        raise KeyError(task_id)

    def refresh(self, refresh_token) -> bool:
        """Recharge la liste si le jeton a changé. Retourne True si un appel a été fait."""
        if refresh_token == self._refresh_token:
            return False
        self._refresh_token = refresh_token
        self.loading = True
        try:
            self.tasks = self.api.get_tasks(self.filters)
            self.error = None
        except TaskAPIError as e:
            self.error = e.message
        finally:
            self.loading = False
        return True

    def toggle_completed(self, task_id: str) -> bool:
        index = self._index(task_id)
        previous = self.tasks[index]
        # affichage mis à jour tout de suite, avant la réponse du serveur
        self.tasks[index] = {**previous, "completed": not previous["completed"]}
        self.pending.add(task_id)
        try:
            updated = self.api.update_task(task_id, {"completed": not previous["completed"]})
        except TaskAPIError as e:
            self.tasks[self._index(task_id)] = previous
            self.error = e.message
            logger.warning(f"Reverted completion toggle on {task_id}: {e.message}")
            return False
        finally:
            self.pending.discard(task_id)
        self.tasks[self._index(task_id)] = updated
        self.error = None
        return True

    def delete_task(self, task_id: str, confirm: Callable[[dict], bool]) -> bool:
        task = self.tasks[self._index(task_id)]
        if not confirm(task):
            return False
        self.pending.add(task_id)
        try:
            self.api.delete_task(task_id)
        except TaskAPIError as e:
            self.error = e.message
            return False
        finally:
            self.pending.discard(task_id)
        self.tasks.pop(self._index(task_id))
        self.error = None
        return True


class TaskForm:
    EMPTY = {"title": "", "description": "", "priority": "medium", "dueDate": ""}

    def __init__(self, api: TasksAPI, on_created: Callable[[dict], None] = None):
        self.api = api
        self.on_created = on_created
        self.values = dict(self.EMPTY)
        self.disabled = False
        self.error: Optional[str] = None

    def payload(self) -> dict:
        data = {
            "title": self.values["title"],
            "description": self.values["description"],
            "priority": self.values["priority"],
        }
        if self.values.get("dueDate"):
            data["dueDate"] = self.values["dueDate"]
        return data

    def submit(self) -> Optional[dict]:
        payload = self.payload()
        # mêmes règles que le serveur, avant tout appel réseau
        _, violations = validate_task(payload, "create")
        if violations:
            self.error = violations[0].message
            return None

        self.disabled = True
        self.error = None
        try:
            created = self.api.create_task(payload)
        except TaskAPIError as e:
            self.error = e.message
            return None
        finally:
            self.disabled = False

        self.values = dict(self.EMPTY)
        if self.on_created:
            self.on_created(created)
        return created
