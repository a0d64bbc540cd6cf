from __future__ import annotations

import logging

from sqlalchemy import inspect

from xpenso.db.session import Database
from xpenso.models.base import Base

# Register tables on Base.metadata.
from xpenso.models import expense, user  # noqa: F401

logger = logging.getLogger(__name__)


def ensure_schema(database: Database) -> None:
    inspector = inspect(database.engine)
    missing = [name for name in Base.metadata.tables if not inspector.has_table(name)]
    if not missing:
        return

    logger.info("Creating tables: %s", ", ".join(sorted(missing)))
    Base.metadata.create_all(bind=database.engine)
