"""ORM Models — SQLAlchemy declarative models for the remote session store.

Invariants:
    - All models inherit from Base (db/base.py)
    - Both tables carry user_id for per-owner row scoping

Design Decisions:
    - One file per table
    - All models imported here so Base.metadata is complete before
      create_all or Alembic autogenerate runs
"""

from session_tracker.models.session import FocusSession  # noqa: F401
from session_tracker.models.session_task import SessionTask  # noqa: F401
