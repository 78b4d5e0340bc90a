"""SQL Session Store — remote two-table persistence with per-owner row scoping.

Invariants:
    - Every query filters on user_id: an owner never sees or touches another owner's rows
    - fetch_all: sessions by session_date desc, created_at desc; tasks by
      sort_order asc (nulls last), created_at asc, id — all or nothing
    - create: session row committed first; tasks inserted only after that succeeds
    - A task batch failure leaves the session row persisted (TasksNotCreatedError)
    - DatabaseError from the session manager is re-raised as the operation's
      error type with the cause kept in the message

Design Decisions:
    - Tasks for all sessions fetched with one IN query, grouped in Python
      (no per-session round trips)
    - Null sort_order ordered via `sort_order IS NULL` first key: same result
      on PostgreSQL and SQLite without dialect-specific NULLS LAST
    - No transaction spanning both inserts; a partial create is reported,
      not rolled back
"""

import logging
import uuid
from collections import defaultdict

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from session_tracker.core.domain_types import (
    EnergyAfter, OwnerId, SessionId, SessionType, TaskId,
)
from session_tracker.core.errors import (
    CreateError, DatabaseError, DeleteError, FetchError,
    TasksNotCreatedError, UpdateError,
)
from session_tracker.core.session_rows import (
    NewSession, NewTask, SessionWithTasks, TaskRow,
)
from session_tracker.infrastructure.database import DatabaseSessionManager
from session_tracker.models.session import FocusSession
from session_tracker.models.session_task import SessionTask

logger = logging.getLogger(__name__)

_TASK_ORDER = (
    SessionTask.sort_order.is_(None),
    SessionTask.sort_order.asc(),
    SessionTask.created_at.asc(),
    SessionTask.id.asc(),
)


class SqlSessionStore:
    """Remote session store backed by the `sessions`/`session_tasks` tables."""

    def __init__(self, db: DatabaseSessionManager):
        self._db = db

    async def fetch_all(self, owner_id: OwnerId) -> list[SessionWithTasks]:
        phase = "sessions"
        try:
            async with self._db.session() as db:
                result = await db.execute(
                    select(FocusSession)
                    .where(FocusSession.user_id == owner_id)
                    .order_by(
                        FocusSession.session_date.desc(),
                        FocusSession.created_at.desc(),
                    ),
                )
                sessions = list(result.scalars().all())
                if not sessions:
                    return []
                phase = "tasks"
                tasks = await _fetch_tasks(
                    db, owner_id, [s.id for s in sessions],
                )
        except DatabaseError as e:
            raise FetchError(f"Failed to fetch {phase}: {e.message}") from e

        logger.debug(
            "Fetched sessions",
            extra={"user_id": owner_id, "entry_count": len(sessions)},
        )
        return [_compose(s, tasks.get(s.id, [])) for s in sessions]

    async def create(
        self, session: NewSession, tasks: list[NewTask],
    ) -> SessionWithTasks:
        if not session.user_id:
            raise CreateError("Failed to create session: user_id is required")
        try:
            async with self._db.session() as db:
                model = FocusSession(
                    session_date=session.session_date,
                    session_type=SessionType(session.session_type).value,
                    planned_minutes=session.planned_minutes,
                    actual_minutes=session.actual_minutes,
                    energy_after=EnergyAfter(session.energy_after).value,
                    notes=session.notes,
                    user_id=session.user_id,
                )
                db.add(model)
                await db.commit()
                await db.refresh(model)
        except DatabaseError as e:
            raise CreateError(f"Failed to create session: {e.message}") from e
        if model.id is None or model.created_at is None:
            raise CreateError("Session creation returned no data")

        inserted: list[TaskRow] = []
        if tasks:
            inserted = await self._insert_tasks(model, tasks)
        logger.info(
            "Session created",
            extra={
                "session_id": str(model.id), "user_id": session.user_id,
                "task_count": len(inserted),
            },
        )
        return _compose(model, inserted)

    async def _insert_tasks(
        self, session: FocusSession, tasks: list[NewTask],
    ) -> list[TaskRow]:
        try:
            async with self._db.session() as db:
                models = [
                    SessionTask(
                        session_id=session.id,
                        task_name=t.task_name,
                        sort_order=t.sort_order,
                        planned_minutes=t.planned_minutes,
                        completed=t.completed,
                        user_id=t.user_id or session.user_id,
                    )
                    for t in tasks
                ]
                db.add_all(models)
                await db.commit()
                for m in models:
                    await db.refresh(m)
        except DatabaseError as e:
            logger.error(
                "Task insert failed; session row kept",
                extra={"session_id": str(session.id), "error_code": e.code},
            )
            raise TasksNotCreatedError(e.message, str(session.id)) from e
        return sorted((_task_row(m) for m in models), key=_task_sort_key)

    async def update_task_completed(
        self, owner_id: OwnerId, task_id: TaskId, completed: bool,
    ) -> TaskRow:
        try:
            async with self._db.session() as db:
                result = await db.execute(
                    select(SessionTask).where(
                        SessionTask.id == task_id,
                        SessionTask.user_id == owner_id,
                    ),
                )
                task = result.scalar_one_or_none()
                if task is None:
                    raise UpdateError("Task update returned no data", not_found=True)
                task.completed = completed
                await db.commit()
                await db.refresh(task)
        except DatabaseError as e:
            raise UpdateError(f"Failed to update task: {e.message}") from e
        return _task_row(task)

    async def delete(self, owner_id: OwnerId, session_id: SessionId) -> None:
        owned = select(FocusSession.id).where(
            FocusSession.id == session_id,
            FocusSession.user_id == owner_id,
        )
        try:
            async with self._db.session() as db:
                await db.execute(
                    delete(SessionTask).where(SessionTask.session_id.in_(owned)),
                )
                await db.execute(
                    delete(FocusSession).where(
                        FocusSession.id == session_id,
                        FocusSession.user_id == owner_id,
                    ),
                )
                await db.commit()
        except DatabaseError as e:
            raise DeleteError(f"Failed to delete session: {e.message}") from e
        logger.info(
            "Session deleted",
            extra={"session_id": str(session_id), "user_id": owner_id},
        )


async def _fetch_tasks(
    db: AsyncSession, owner_id: OwnerId, session_ids: list[uuid.UUID],
) -> dict[uuid.UUID, list[TaskRow]]:
    result = await db.execute(
        select(SessionTask)
        .where(
            SessionTask.session_id.in_(session_ids),
            SessionTask.user_id == owner_id,
        )
        .order_by(*_TASK_ORDER),
    )
    grouped: dict[uuid.UUID, list[TaskRow]] = defaultdict(list)
    for task in result.scalars().all():
        grouped[task.session_id].append(_task_row(task))
    return grouped


def _task_sort_key(task: TaskRow) -> tuple:
    return (
        task.sort_order is None, task.sort_order or 0,
        task.created_at, str(task.id),
    )


def _task_row(model: SessionTask) -> TaskRow:
    return TaskRow(
        id=TaskId(model.id),
        session_id=SessionId(model.session_id),
        task_name=model.task_name,
        sort_order=model.sort_order,
        planned_minutes=model.planned_minutes,
        completed=model.completed,
        created_at=model.created_at,
        user_id=OwnerId(model.user_id),
    )


def _compose(model: FocusSession, tasks: list[TaskRow]) -> SessionWithTasks:
    return SessionWithTasks(
        id=SessionId(model.id),
        session_date=model.session_date,
        session_type=SessionType(model.session_type),
        planned_minutes=model.planned_minutes,
        actual_minutes=model.actual_minutes,
        energy_after=EnergyAfter(model.energy_after),
        notes=model.notes,
        created_at=model.created_at,
        user_id=OwnerId(model.user_id),
        tasks=list(tasks),
    )
