"""SQL Session Store — two-table create/fetch contract with per-owner scoping.

Tests cover:
    - create with no tasks returns an empty task list and server-assigned id/created_at
    - create with tasks stamps session_id and owner, returns tasks in order
    - a task batch failure raises TasksNotCreatedError and keeps the session row
    - fetch_all orders sessions by date desc then created_at desc
    - tasks come back by sort_order ascending with nulls last
    - owners never see, update or delete each other's rows
    - fetch failures surface as FetchError with the cause
    - created_at and completed default on the store side as well
"""

import uuid
from datetime import date, datetime, timedelta, timezone

import pytest
from sqlalchemy import func, select, text

from session_tracker.core.domain_types import EnergyAfter, OwnerId, SessionType
from session_tracker.core.errors import (
    CreateError, FetchError, TasksNotCreatedError, UpdateError,
)
from session_tracker.core.session_rows import NewSession, NewTask
from session_tracker.models.session import FocusSession
from session_tracker.models.session_task import SessionTask

OWNER_A = OwnerId("user-a")
OWNER_B = OwnerId("user-b")


def _new_session(owner=OWNER_A, day=date(2024, 1, 1), **overrides) -> NewSession:
    values = dict(
        session_date=day,
        session_type=SessionType.RED,
        planned_minutes=15,
        actual_minutes=10,
        energy_after=EnergyAfter.WORSE,
        notes=None,
        user_id=owner,
    )
    values.update(overrides)
    return NewSession(**values)


async def _seed(db_manager, owner, day, created_at) -> uuid.UUID:
    async with db_manager.session() as db:
        model = FocusSession(
            session_date=day, session_type="Green", planned_minutes=90,
            actual_minutes=60, energy_after="Same", notes=None,
            created_at=created_at, user_id=owner,
        )
        db.add(model)
        await db.commit()
        return model.id


async def _count(db_manager, model) -> int:
    async with db_manager.session() as db:
        return (await db.execute(select(func.count()).select_from(model))).scalar_one()


# ─── create ──────────────────────────────────────────────────────

async def test_create_without_tasks(sql_store):
    created = await sql_store.create(_new_session(), [])
    assert created.id is not None
    assert created.created_at is not None
    assert created.tasks == []
    assert created.user_id == OWNER_A
    assert created.session_type is SessionType.RED


async def test_create_with_tasks_links_and_orders_them(sql_store):
    created = await sql_store.create(_new_session(), [
        NewTask(task_name="review", user_id=OWNER_A, sort_order=2),
        NewTask(task_name="someday", user_id=OWNER_A, sort_order=None),
        NewTask(task_name="write", user_id=OWNER_A, sort_order=1),
    ])
    assert [t.task_name for t in created.tasks] == ["write", "review", "someday"]
    assert all(t.session_id == created.id for t in created.tasks)
    assert all(t.user_id == OWNER_A for t in created.tasks)
    assert all(t.completed is False for t in created.tasks)


async def test_create_requires_owner(sql_store, db_manager):
    with pytest.raises(CreateError, match="user_id is required"):
        await sql_store.create(_new_session(owner=OwnerId("")), [])
    assert await _count(db_manager, FocusSession) == 0


async def test_create_session_insert_failure(sql_store, db_manager):
    with pytest.raises(CreateError, match="Failed to create session"):
        await sql_store.create(_new_session(planned_minutes=None), [])
    assert await _count(db_manager, FocusSession) == 0


async def test_task_failure_keeps_session_row(sql_store, db_manager):
    with pytest.raises(TasksNotCreatedError) as exc_info:
        await sql_store.create(_new_session(), [
            NewTask(task_name=None, user_id=OWNER_A),
        ])
    fetched = await sql_store.fetch_all(OWNER_A)
    assert len(fetched) == 1
    assert fetched[0].tasks == []
    assert exc_info.value.session_id == str(fetched[0].id)
    assert await _count(db_manager, SessionTask) == 0


# ─── fetch_all ───────────────────────────────────────────────────

async def test_fetch_all_empty(sql_store):
    assert await sql_store.fetch_all(OWNER_A) == []


async def test_fetch_all_orders_by_date_then_created_at(sql_store, db_manager):
    base = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)
    await _seed(db_manager, OWNER_A, date(2024, 1, 1), base)
    await _seed(db_manager, OWNER_A, date(2024, 3, 1), base)
    await _seed(db_manager, OWNER_A, date(2024, 1, 1), base + timedelta(minutes=5))
    await _seed(db_manager, OWNER_A, date(2024, 2, 1), base - timedelta(days=1))

    fetched = await sql_store.fetch_all(OWNER_A)

    keys = [(s.session_date, s.created_at) for s in fetched]
    assert [k[0] for k in keys] == [
        date(2024, 3, 1), date(2024, 2, 1), date(2024, 1, 1), date(2024, 1, 1),
    ]
    for before, after in zip(keys, keys[1:]):
        assert before[0] > after[0] or (
            before[0] == after[0] and before[1] >= after[1]
        )


async def test_fetch_all_orders_tasks_nulls_last(sql_store):
    created = await sql_store.create(_new_session(), [
        NewTask(task_name="unsorted", user_id=OWNER_A),
        NewTask(task_name="third", user_id=OWNER_A, sort_order=3),
        NewTask(task_name="first", user_id=OWNER_A, sort_order=0),
    ])
    other = await sql_store.create(_new_session(day=date(2023, 5, 5)), [
        NewTask(task_name="other", user_id=OWNER_A, sort_order=1),
    ])

    fetched = {s.id: s for s in await sql_store.fetch_all(OWNER_A)}

    assert [t.task_name for t in fetched[created.id].tasks] == [
        "first", "third", "unsorted",
    ]
    assert [t.task_name for t in fetched[other.id].tasks] == ["other"]


async def test_fetch_failure_raises_fetch_error(sql_store, test_engine):
    await sql_store.create(_new_session(), [])
    async with test_engine.begin() as conn:
        await conn.execute(text("DROP TABLE session_tasks"))

    with pytest.raises(FetchError, match="Failed to fetch tasks"):
        await sql_store.fetch_all(OWNER_A)


# ─── ownership ───────────────────────────────────────────────────

async def test_rows_are_scoped_to_owner(sql_store):
    await sql_store.create(_new_session(owner=OWNER_A), [])
    await sql_store.create(_new_session(owner=OWNER_B), [])

    assert len(await sql_store.fetch_all(OWNER_A)) == 1
    assert len(await sql_store.fetch_all(OWNER_B)) == 1
    assert await sql_store.fetch_all(OwnerId("nobody")) == []


async def test_delete_by_other_owner_is_noop(sql_store):
    created = await sql_store.create(_new_session(owner=OWNER_A), [])
    await sql_store.delete(OWNER_B, created.id)
    assert len(await sql_store.fetch_all(OWNER_A)) == 1


# ─── update_task_completed ───────────────────────────────────────

async def test_update_task_completed(sql_store):
    created = await sql_store.create(_new_session(), [
        NewTask(task_name="write", user_id=OWNER_A, sort_order=1),
    ])
    task = created.tasks[0]

    updated = await sql_store.update_task_completed(OWNER_A, task.id, True)

    assert updated.id == task.id
    assert updated.completed is True
    fetched = await sql_store.fetch_all(OWNER_A)
    assert fetched[0].tasks[0].completed is True


async def test_update_missing_task_raises(sql_store):
    with pytest.raises(UpdateError) as exc_info:
        await sql_store.update_task_completed(OWNER_A, uuid.uuid4(), True)
    assert exc_info.value.not_found is True


async def test_update_other_owners_task_raises(sql_store):
    created = await sql_store.create(_new_session(), [
        NewTask(task_name="write", user_id=OWNER_A),
    ])
    with pytest.raises(UpdateError):
        await sql_store.update_task_completed(OWNER_B, created.tasks[0].id, True)


# ─── delete ──────────────────────────────────────────────────────

async def test_delete_removes_session_and_tasks(sql_store, db_manager):
    created = await sql_store.create(_new_session(), [
        NewTask(task_name="write", user_id=OWNER_A),
        NewTask(task_name="read", user_id=OWNER_A),
    ])
    kept = await sql_store.create(_new_session(), [
        NewTask(task_name="keep", user_id=OWNER_A),
    ])

    await sql_store.delete(OWNER_A, created.id)

    fetched = await sql_store.fetch_all(OWNER_A)
    assert [s.id for s in fetched] == [kept.id]
    assert await _count(db_manager, SessionTask) == 1


async def test_delete_unknown_id_is_noop(sql_store):
    await sql_store.create(_new_session(), [])
    await sql_store.delete(OWNER_A, uuid.uuid4())
    assert len(await sql_store.fetch_all(OWNER_A)) == 1


# ─── store-side defaults ─────────────────────────────────────────

def test_models_declare_server_defaults():
    assert FocusSession.__table__.c.created_at.server_default is not None
    assert SessionTask.__table__.c.created_at.server_default is not None
    assert SessionTask.__table__.c.completed.server_default is not None


async def test_row_inserted_without_app_defaults_is_fetchable(sql_store, db_manager):
    async with db_manager.session() as db:
        await db.execute(
            text(
                "INSERT INTO sessions (id, session_date, session_type, "
                "planned_minutes, actual_minutes, energy_after, user_id) "
                "VALUES (:id, '2024-01-01', 'Green', 90, 60, 'Same', :owner)",
            ),
            {"id": uuid.uuid4().hex, "owner": OWNER_A},
        )
        await db.commit()

    fetched = await sql_store.fetch_all(OWNER_A)

    assert len(fetched) == 1
    assert fetched[0].created_at is not None
