"""
Shared Database Infrastructure
ORM base, session management, and units of work
"""
from shared.infrastructure.database.base_model import Base
from shared.infrastructure.database.in_memory import InMemoryStore, InMemoryUnitOfWork
from shared.infrastructure.database.session import DatabaseSessionFactory
from shared.infrastructure.database.sqlalchemy_unit_of_work import AggregateMapper, SQLAlchemyUnitOfWork
from shared.infrastructure.database.unit_of_work import AbstractUnitOfWork

__all__ = [
    "Base",
    "DatabaseSessionFactory",
    "AbstractUnitOfWork",
    "AggregateMapper",
    "InMemoryStore",
    "InMemoryUnitOfWork",
    "SQLAlchemyUnitOfWork",
]
