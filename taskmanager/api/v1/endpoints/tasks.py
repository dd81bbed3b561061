"""
Task Endpoints.

All routes require a bearer token and operate only on the caller's tasks.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from taskmanager.api.v1.dependencies.auth import get_current_identity
from taskmanager.api.v1.schemas.common import ApiResponse
from taskmanager.core.container import get_metrics_dep, get_task_service_dep
from taskmanager.core.metrics import Metrics
from taskmanager.models.task import (
    DEFAULT_PAGE_SIZE,
    Task,
    TaskCreate,
    TaskPriority,
    TaskStatus,
    TaskUpdate,
)
from taskmanager.models.user import Identity
from taskmanager.services.task_service import TaskService

router = APIRouter(prefix="/tasks", tags=["Tasks"])


@router.get(
    "",
    response_model=ApiResponse[list[Task]],
    response_model_exclude_none=True,
    summary="List tasks",
)
async def list_tasks(
    status_filter: Optional[TaskStatus] = Query(
        default=None, alias="status", description="Only tasks with this status"
    ),
    priority: Optional[TaskPriority] = Query(
        default=None, description="Only tasks with this priority"
    ),
    limit: int = Query(default=DEFAULT_PAGE_SIZE, description="Maximum number of tasks"),
    offset: int = Query(default=0, description="Number of tasks to skip"),
    identity: Identity = Depends(get_current_identity),
    task_service: TaskService = Depends(get_task_service_dep),
) -> ApiResponse[list[Task]]:
    """List the caller's tasks, newest first."""
    tasks = await task_service.list_tasks(
        identity.user_id,
        {"status": status_filter, "priority": priority, "limit": limit, "offset": offset},
    )
    return ApiResponse(data=tasks)


@router.get(
    "/{task_id}",
    response_model=ApiResponse[Task],
    response_model_exclude_none=True,
    summary="Get task",
)
async def get_task(
    task_id: str,
    identity: Identity = Depends(get_current_identity),
    task_service: TaskService = Depends(get_task_service_dep),
) -> ApiResponse[Task]:
    """Fetch one of the caller's tasks."""
    task = await task_service.get_task(identity.user_id, task_id)
    return ApiResponse(data=task)


@router.post(
    "",
    response_model=ApiResponse[Task],
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
    summary="Create task",
)
async def create_task(
    body: TaskCreate,
    identity: Identity = Depends(get_current_identity),
    task_service: TaskService = Depends(get_task_service_dep),
    metrics: Metrics = Depends(get_metrics_dep),
) -> ApiResponse[Task]:
    """Create a task. New tasks always start as todo."""
    with metrics.track_task_operation("create"):
        task = await task_service.create_task(identity.user_id, body)
    return ApiResponse(data=task, message="Task created successfully")


@router.put(
    "/{task_id}",
    response_model=ApiResponse[Task],
    response_model_exclude_none=True,
    summary="Update task",
)
async def update_task(
    task_id: str,
    body: TaskUpdate,
    identity: Identity = Depends(get_current_identity),
    task_service: TaskService = Depends(get_task_service_dep),
    metrics: Metrics = Depends(get_metrics_dep),
) -> ApiResponse[Task]:
    """
    Partially update a task.

    Only title, description, status and priority can change. At least one
    of them must be supplied.
    """
    with metrics.track_task_operation("update"):
        task = await task_service.update_task(identity.user_id, task_id, body)
    return ApiResponse(data=task, message="Task updated successfully")


@router.delete(
    "/{task_id}",
    response_model=ApiResponse[None],
    response_model_exclude_none=True,
    summary="Delete task",
)
async def delete_task(
    task_id: str,
    identity: Identity = Depends(get_current_identity),
    task_service: TaskService = Depends(get_task_service_dep),
    metrics: Metrics = Depends(get_metrics_dep),
) -> ApiResponse[None]:
    """Permanently delete a task."""
    with metrics.track_task_operation("delete"):
        await task_service.delete_task(identity.user_id, task_id)
    return ApiResponse(message="Task deleted successfully")
