from datetime import datetime, timezone

from fastapi import APIRouter, Request

from app.core.errors import AVAILABLE_ROUTES

router = APIRouter()

API_VERSION = "1.0.0"


def _database_state(request: Request) -> str:
    return "connected" if request.app.state.database.ping() else "disconnected"


@router.get("/health")
def health(request: Request):
    # liveness: API + état de la connexion DB
    return {
        "status": "ok",
        "time": datetime.now(timezone.utc).isoformat(),
        "database": _database_state(request),
    }


@router.get("/")
def index(request: Request):
    """Index de l'API: routes disponibles, règles de validation, format d'erreur"""
    return {
        "message": "Task Manager API",
        "version": API_VERSION,
        "status": "running",
        "database": _database_state(request),
        "endpoints": AVAILABLE_ROUTES,
        "queryParams": {
            "completed": "boolean - Filter by completion status",
            "priority": "string - Filter by priority (low, medium, high)",
            "sortBy": "string - Sort field (default: createdAt)",
            "sortOrder": "string - Sort order (asc, desc)",
        },
        "validation": {
            "title": "Required, 1-200 characters",
            "description": "Optional, max 1000 characters",
            "priority": "Optional, must be: low, medium, high",
            "dueDate": "Optional, must be today or future date (ISO 8601)",
        },
        "errorFormat": {
            "error": "Short error message",
            "details": {
                "message": "Detailed error description",
                "type": "Error type (ValidationError, NotFoundError, CastError, ...)",
                "validationErrors": "Array of validation errors (if applicable)",
            },
        },
    }
