"""
Client HTTP de l'API des tâches (côté frontend)
"""

import logging
from typing import Optional

import requests

from app.core.config import settings

logger = logging.getLogger(__name__)


class TaskAPIError(Exception):
    """Erreur renvoyée par l'API; le message est celui de l'enveloppe, tel quel"""

    def __init__(self, message: str, status_code: Optional[int] = None, details: Optional[dict] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.details = details or {}


class TasksAPI:
    # Pas de timeout ni d'annulation: une requête lente garde le contrôle en attente

    def __init__(self, base_url: str = None, session: requests.Session = None):
        self.base_url = (base_url or settings.TASKS_API_BASE).rstrip("/")
        self.session = session or requests.Session()

    def _url(self, task_id: str = None) -> str:
        if task_id is None:
            return f"{self.base_url}/tasks"
        return f"{self.base_url}/tasks/{task_id}"

    def _check(self, response: requests.Response) -> requests.Response:
        if response.ok:
            return response
        try:
            body = response.json()
        except ValueError:
            body = {}
        message = body.get("error") if isinstance(body, dict) else None
        details = body.get("details") if isinstance(body, dict) else None
        error = TaskAPIError(message or f"HTTP error! status: {response.status_code}", response.status_code, details)
        logger.error(f"Task API error: {error.message}")
        raise error

    def _task(self, response: requests.Response) -> dict:
        data = self._check(response).json()
        if not isinstance(data, dict):
            raise TaskAPIError("Invalid task data received from server", response.status_code)
        return data

    def get_tasks(self, filters: dict = None) -> list:
        filters = filters or {}
        params = {}
        if filters.get("completed") is not None:
            params["completed"] = "true" if filters["completed"] else "false"
        for key in ("priority", "sortBy", "sortOrder"):
            if filters.get(key):
                params[key] = filters[key]

        data = self._check(self.session.get(self._url(), params=params)).json()
        if not isinstance(data, list):
            logger.warning(f"API returned non-array response for get_tasks: {data}")
            return []
        return data

    def get_task(self, task_id: str) -> dict:
        return self._task(self.session.get(self._url(task_id)))

    def create_task(self, task_data: dict) -> dict:
        return self._task(self.session.post(self._url(), json=task_data))

    def update_task(self, task_id: str, update_data: dict) -> dict:
        return self._task(self.session.put(self._url(task_id), json=update_data))

    def delete_task(self, task_id: str) -> None:
        self._check(self.session.delete(self._url(task_id)))
