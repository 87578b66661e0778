"""
Tracking Infrastructure Layer
Persistence adapters for the Event aggregate
"""
from tracking.infrastructure.mappers import EventMapper
from tracking.infrastructure.models import EventModel
from tracking.infrastructure.repositories import InMemoryEventRepository, SqlAlchemyEventRepository
from tracking.infrastructure.unit_of_work import InMemoryTrackingUnitOfWork, SqlAlchemyTrackingUnitOfWork

__all__ = [
    "EventMapper",
    "EventModel",
    "InMemoryEventRepository",
    "SqlAlchemyEventRepository",
    "InMemoryTrackingUnitOfWork",
    "SqlAlchemyTrackingUnitOfWork",
]
