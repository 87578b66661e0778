"""
CgmLink ORM model
Tokens are stored only as encrypted payloads
"""
from __future__ import annotations

from datetime import datetime
from typing import Optional
from uuid import UUID

from sqlalchemy import Boolean, DateTime, Index, LargeBinary, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from shared.infrastructure.database.base_model import Base


class CgmLinkModel(Base):
    __tablename__ = "cgm_links"

    user_id: Mapped[UUID] = mapped_column(Uuid(as_uuid=True), nullable=False)
    encrypted_access_token: Mapped[bytes] = mapped_column(LargeBinary, nullable=False)
    encrypted_refresh_token: Mapped[bytes] = mapped_column(LargeBinary, nullable=False)
    token_expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    last_refreshed_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    is_unlinked: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    __table_args__ = (
        Index("ix_cgm_links_user_id", "user_id"),
        Index("ix_cgm_links_token_expires_at", "token_expires_at"),
    )

    def __repr__(self) -> str:
        return f"<CgmLinkModel(id={self.id}, user_id={self.user_id})>"
