"""Todo API routes.

Learn: These routes are thin: they resolve the caller's AuthState,
ask the TaskAccessPolicy for a scope, and hand both to TaskService.
None of them require a token; see todoapp.auth.policy for what each
token state is allowed to do.

- GET    /api/todos       → list (own tasks, or everything when anonymous)
- POST   /api/todos       → create (owned when a valid token is sent)
- PUT    /api/todos/{id}  → partial update
- DELETE /api/todos/{id}  → delete
"""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from todoapp.auth.dependencies import AuthState, get_auth_state
from todoapp.auth.policy import TaskAccessPolicy
from todoapp.db.engine import get_db
from todoapp.errors import TodoAppError
from todoapp.schemas.task import MessageResponse, TaskCreate, TaskRead, TaskUpdate
from todoapp.services.task_service import TaskService

router = APIRouter(prefix="/todos")


def _task_svc(db: AsyncSession = Depends(get_db)) -> TaskService:
    return TaskService(db)


def get_task_policy() -> TaskAccessPolicy:
    return TaskAccessPolicy.from_settings()


@router.get("", response_model=list[TaskRead])
async def list_tasks(
    state: AuthState = Depends(get_auth_state),
    policy: TaskAccessPolicy = Depends(get_task_policy),
    svc: TaskService = Depends(_task_svc),
):
    """List tasks, newest first."""
    try:
        return await svc.list_tasks(policy.read_scope(state))
    except TodoAppError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.post("", response_model=TaskRead, status_code=201)
async def create_task(
    body: TaskCreate,
    state: AuthState = Depends(get_auth_state),
    policy: TaskAccessPolicy = Depends(get_task_policy),
    svc: TaskService = Depends(_task_svc),
):
    """Create a task, owned by the caller when a valid token is sent."""
    try:
        return await svc.create_task(
            title=body.title,
            completed=body.completed,
            owner_id=policy.owner_for_create(state),
        )
    except TodoAppError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.put("/{task_id}", response_model=TaskRead)
async def update_task(
    task_id: str,
    body: TaskUpdate,
    state: AuthState = Depends(get_auth_state),
    policy: TaskAccessPolicy = Depends(get_task_policy),
    svc: TaskService = Depends(_task_svc),
):
    """Partially update a task (title and/or completed)."""
    try:
        return await svc.update_task(
            task_id=task_id,
            changes=body.model_dump(exclude_unset=True),
            scope=policy.write_scope(state),
        )
    except TodoAppError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.delete("/{task_id}", response_model=MessageResponse)
async def delete_task(
    task_id: str,
    state: AuthState = Depends(get_auth_state),
    policy: TaskAccessPolicy = Depends(get_task_policy),
    svc: TaskService = Depends(_task_svc),
):
    """Delete a task."""
    try:
        await svc.delete_task(task_id=task_id, scope=policy.write_scope(state))
    except TodoAppError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    return {"message": "Todo deleted successfully"}
