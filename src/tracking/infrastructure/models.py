"""
Event ORM model
Single table; variant columns are nullable and filled according to event_type
"""
from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Optional
from uuid import UUID

from sqlalchemy import CheckConstraint, DateTime, Index, Integer, Numeric, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from shared.infrastructure.database.base_model import Base


class EventModel(Base):
    __tablename__ = "events"

    user_id: Mapped[UUID] = mapped_column(Uuid(as_uuid=True), nullable=False)
    event_type: Mapped[str] = mapped_column(String(16), nullable=False)
    event_time: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    source: Mapped[str] = mapped_column(String(16), nullable=False)
    note: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)

    # food
    carbohydrates_g: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    meal_tag_id: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    absorption_hint: Mapped[Optional[str]] = mapped_column(String(16), nullable=True)

    # insulin
    insulin_type: Mapped[Optional[str]] = mapped_column(String(16), nullable=True)
    insulin_units: Mapped[Optional[Decimal]] = mapped_column(Numeric(4, 1), nullable=True)
    preparation: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    delivery: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    timing: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)

    # exercise
    exercise_type_id: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    duration_minutes: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    intensity: Mapped[Optional[str]] = mapped_column(String(16), nullable=True)

    # note
    text: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)

    __table_args__ = (
        CheckConstraint("event_type IN ('food', 'insulin', 'exercise', 'note')", name="type"),
        CheckConstraint(
            "carbohydrates_g IS NULL OR (carbohydrates_g >= 0 AND carbohydrates_g <= 300)",
            name="carbohydrates",
        ),
        CheckConstraint(
            "insulin_units IS NULL OR (insulin_units >= 0 AND insulin_units <= 100)",
            name="insulin_units",
        ),
        CheckConstraint(
            "duration_minutes IS NULL OR (duration_minutes >= 1 AND duration_minutes <= 300)",
            name="duration",
        ),
        Index("ix_events_user_time", "user_id", "event_time"),
    )

    def __repr__(self) -> str:
        return f"<EventModel(id={self.id}, type={self.event_type}, user_id={self.user_id})>"
