"""Task service — CRUD for to-do items under an access scope.

Learn: The service never looks at tokens. Routes ask
todoapp.auth.policy for an AccessScope and pass it in; the scope becomes
an extra WHERE clause on every query. A task outside the scope is
reported exactly like a missing one (NotFoundError), so callers can't
probe for other users' task ids.
"""

import uuid
from typing import Any, Optional

import structlog
from sqlalchemy import ColumnElement, Select, delete, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from todoapp.auth.policy import UNRESTRICTED, AccessScope
from todoapp.db.models import Task
from todoapp.errors import NotFoundError, ValidationError

logger = structlog.get_logger()

TASK_NOT_FOUND = "Todo not found"


def _scope_clause(scope: AccessScope) -> Optional[ColumnElement[bool]]:
    """WHERE clause for the rows the scope allows, or None for all rows."""
    if scope.unrestricted:
        return None
    if scope.include_unowned:
        return or_(Task.owner_id == scope.owner_id, Task.owner_id.is_(None))
    return Task.owner_id == scope.owner_id


def _scoped(query: Select, scope: AccessScope) -> Select:
    """Restrict a Task query to the rows the scope allows."""
    clause = _scope_clause(scope)
    return query if clause is None else query.where(clause)


def _target(tid: uuid.UUID, scope: AccessScope) -> list[ColumnElement[bool]]:
    """Criteria matching one task by id, inside the scope."""
    clause = _scope_clause(scope)
    return [Task.id == tid] if clause is None else [Task.id == tid, clause]


def _parse_task_id(task_id: str) -> Optional[uuid.UUID]:
    try:
        return uuid.UUID(str(task_id))
    except ValueError:
        return None


class TaskService:
    """Business logic for task CRUD."""

    def __init__(self, db: AsyncSession):
        self.db = db

    # ─── Read ────────────────────────────────────────────

    async def list_tasks(self, scope: AccessScope = UNRESTRICTED) -> list[Task]:
        """List tasks in scope, most recently created first."""
        query = _scoped(select(Task), scope).order_by(Task.created_at.desc(), Task.id.desc())
        result = await self.db.execute(query)
        tasks = list(result.scalars().all())
        logger.info(
            "tasks.listed",
            count=len(tasks),
            owner_id=str(scope.owner_id) if scope.owner_id else None,
        )
        return tasks

    async def get_task(self, task_id: str, scope: AccessScope = UNRESTRICTED) -> Task:
        """Load one task in scope, or raise NotFoundError."""
        tid = _parse_task_id(task_id)
        if tid is None:
            raise NotFoundError(TASK_NOT_FOUND)
        result = await self.db.execute(_scoped(select(Task).where(Task.id == tid), scope))
        task = result.scalars().first()
        if not task:
            raise NotFoundError(TASK_NOT_FOUND)
        return task

    # ─── Create ──────────────────────────────────────────

    async def create_task(
        self,
        title: Optional[str],
        completed: bool = False,
        owner_id: Optional[uuid.UUID] = None,
    ) -> Task:
        """Create a task. owner_id=None leaves it unowned."""
        if not title or not title.strip():
            raise ValidationError("Title is required")

        task = Task(title=title, completed=completed, owner_id=owner_id)
        self.db.add(task)
        await self.db.commit()
        logger.info(
            "tasks.created",
            task_id=str(task.id),
            owner_id=str(owner_id) if owner_id else None,
        )
        return task

    # ─── Update ──────────────────────────────────────────

    async def update_task(
        self,
        task_id: str,
        changes: dict[str, Any],
        scope: AccessScope = UNRESTRICTED,
    ) -> Task:
        """Apply a partial update. Keys absent from `changes` are untouched."""
        if "title" in changes and not (changes["title"] and changes["title"].strip()):
            raise ValidationError("Title cannot be empty")
        if "completed" in changes and changes["completed"] is None:
            raise ValidationError("Completed must be true or false")

        values = {k: changes[k] for k in ("title", "completed") if k in changes}
        if not values:
            return await self.get_task(task_id, scope)

        tid = _parse_task_id(task_id)
        if tid is None:
            raise NotFoundError(TASK_NOT_FOUND)

        # Scope check and write are one statement.
        stmt = (
            update(Task)
            .where(*_target(tid, scope))
            .values(**values)
            .returning(Task)
            .execution_options(populate_existing=True)
        )
        result = await self.db.execute(stmt)
        task = result.scalars().first()
        if task is None:
            raise NotFoundError(TASK_NOT_FOUND)

        await self.db.commit()
        logger.info("tasks.updated", task_id=str(task.id), fields=sorted(values))
        return task

    # ─── Delete ──────────────────────────────────────────

    async def delete_task(self, task_id: str, scope: AccessScope = UNRESTRICTED) -> None:
        tid = _parse_task_id(task_id)
        if tid is None:
            raise NotFoundError(TASK_NOT_FOUND)

        result = await self.db.execute(delete(Task).where(*_target(tid, scope)))
        if result.rowcount == 0:
            raise NotFoundError(TASK_NOT_FOUND)

        await self.db.commit()
        logger.info("tasks.deleted", task_id=str(tid))
