from typing import Any, List

from fastapi import APIRouter, Body, Depends, Request, Response, status
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.schemas.task import TaskResponse
from app.services import task_service

router = APIRouter(prefix="/api/tasks", tags=["tasks"])


# Les corps sont reçus bruts (Any): la validation collecte toutes les violations dans le service

@router.get("", response_model=List[TaskResponse])
def list_tasks(
    request: Request,
    response: Response,
    db: Session = Depends(get_db)
):
    """Liste filtrée par `completed` / `priority`, triée par `sortBy` / `sortOrder`"""
    tasks, count = task_service.list_tasks(db, request.query_params)
    response.headers["X-Total-Count"] = str(count)
    return [TaskResponse.from_task(task) for task in tasks]


@router.get("/{task_id}", response_model=TaskResponse)
def get_task(task_id: str, db: Session = Depends(get_db)):
    return TaskResponse.from_task(task_service.get_task(db, task_id))


@router.post("", response_model=TaskResponse, status_code=status.HTTP_201_CREATED)
def create_task(payload: Any = Body(None), db: Session = Depends(get_db)):
    return TaskResponse.from_task(task_service.create_task(db, payload))


@router.put("/{task_id}", response_model=TaskResponse)
def update_task(task_id: str, payload: Any = Body(None), db: Session = Depends(get_db)):
    return TaskResponse.from_task(task_service.update_task(db, task_id, payload))


@router.delete("/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_task(task_id: str, db: Session = Depends(get_db)):
    task_service.delete_task(db, task_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
