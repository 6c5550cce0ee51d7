"""Storage layer package."""

from src.storage.database import (
    get_db_session,
    init_db,
    DatabaseService,
    SqlPolicyCatalog,
)

__all__ = [
    "get_db_session",
    "init_db",
    "DatabaseService",
    "SqlPolicyCatalog",
]
