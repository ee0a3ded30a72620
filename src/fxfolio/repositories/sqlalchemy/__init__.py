"""SQLAlchemy repository implementations."""

from fxfolio.repositories.sqlalchemy.database import (
    get_engine,
    get_session_factory,
    get_db,
    init_db,
    reset_database,
    Base,
)
from fxfolio.repositories.sqlalchemy.position_repo import SqlAlchemyPositionRepository

__all__ = [
    "get_engine",
    "get_session_factory",
    "get_db",
    "init_db",
    "reset_database",
    "Base",
    "SqlAlchemyPositionRepository",
]
