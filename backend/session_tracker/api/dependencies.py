"""Request dependencies — caller identity and the configured session service.

Invariants:
    - Identity is read from the X-User-Id header set by the upstream identity
      gateway; a blank or missing header means "not signed in"
    - The service variant follows settings.storage_backend
"""

from fastapi import Header

from session_tracker.config import get_settings
from session_tracker.core.domain_types import Identity
from session_tracker.core.repository_protocols import EntryService
from session_tracker.infrastructure import database
from session_tracker.services.session_service import build_entry_service


async def get_identity(
    x_user_id: str | None = Header(None),
    x_user_email: str | None = Header(None),
) -> Identity | None:
    if not x_user_id or not x_user_id.strip():
        return None
    return Identity(id=x_user_id.strip(), email=x_user_email)


def get_entry_service() -> EntryService:
    settings = get_settings()
    if settings.storage_backend == "local":
        return build_entry_service(settings)
    return build_entry_service(settings, database.get_db_manager())
