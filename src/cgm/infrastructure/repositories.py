"""
CgmLink repositories
SQLAlchemy and in-memory implementations; "now" always comes from the injected clock
"""
from __future__ import annotations

from datetime import timedelta
from typing import Sequence

from sqlalchemy import select

from shared.domain.clock import Clock
from shared.domain.identifiers import UserId
from shared.infrastructure.database.in_memory import InMemoryUnitOfWork
from shared.infrastructure.database.sqlalchemy_unit_of_work import SQLAlchemyUnitOfWork
from cgm.domain.cgm_link import DEFAULT_REFRESH_THRESHOLD, CgmLink, LinkId
from cgm.infrastructure.mappers import CgmLinkMapper
from cgm.infrastructure.models import CgmLinkModel


def _newest_refresh_first(links: list[CgmLink]) -> list[CgmLink]:
    return sorted(
        links,
        key=lambda link: (link.last_refreshed_at or link.created_at, link.created_at),
        reverse=True,
    )


class SqlAlchemyCgmLinkRepository:
    def __init__(
        self,
        uow: SQLAlchemyUnitOfWork,
        clock: Clock,
        mapper: CgmLinkMapper | None = None,
    ) -> None:
        self._uow = uow
        self._clock = clock
        self._mapper = mapper or CgmLinkMapper()

    def add(self, link: CgmLink) -> None:
        self._uow.track(link)

    def remove(self, link: CgmLink) -> None:
        self._uow.mark_removed(link)

    async def get_by_id(self, link_id: LinkId) -> CgmLink | None:
        row = await self._uow.session.get(CgmLinkModel, link_id.value)
        if row is None:
            return None
        return self._uow.attach(self._mapper.to_domain(row))

    async def get_active_by_user(self, user_id: UserId) -> CgmLink | None:
        stmt = (
            select(CgmLinkModel)
            .where(
                CgmLinkModel.user_id == user_id.value,
                CgmLinkModel.is_unlinked.is_(False),
                CgmLinkModel.token_expires_at > self._clock.now(),
            )
            .order_by(CgmLinkModel.token_expires_at.desc())
            .limit(1)
        )
        links = await self._load(stmt)
        return links[0] if links else None

    async def get_by_user(self, user_id: UserId) -> Sequence[CgmLink]:
        stmt = (
            select(CgmLinkModel)
            .where(CgmLinkModel.user_id == user_id.value)
            .order_by(
                CgmLinkModel.last_refreshed_at.desc().nulls_last(),
                CgmLinkModel.created_at.desc(),
            )
        )
        return await self._load(stmt)

    async def get_links_needing_refresh(
        self, threshold: timedelta = DEFAULT_REFRESH_THRESHOLD
    ) -> Sequence[CgmLink]:
        stmt = (
            select(CgmLinkModel)
            .where(
                CgmLinkModel.is_unlinked.is_(False),
                CgmLinkModel.token_expires_at <= self._clock.now() + threshold,
            )
            .order_by(CgmLinkModel.token_expires_at.asc())
        )
        return await self._load(stmt)

    async def _load(self, stmt) -> list[CgmLink]:
        result = await self._uow.session.execute(stmt)
        loaded = (self._uow.attach(self._mapper.to_domain(row)) for row in result.scalars().all())
        return [link for link in loaded if link is not None]


class InMemoryCgmLinkRepository:
    collection = CgmLink.__name__

    def __init__(self, uow: InMemoryUnitOfWork, clock: Clock) -> None:
        self._uow = uow
        self._clock = clock

    def add(self, link: CgmLink) -> None:
        self._uow.track(link)

    def remove(self, link: CgmLink) -> None:
        self._uow.mark_removed(link)

    async def get_by_id(self, link_id: LinkId) -> CgmLink | None:
        link = self._uow.store.get(self.collection, link_id)
        return self._uow.attach(link) if link is not None else None

    async def get_active_by_user(self, user_id: UserId) -> CgmLink | None:
        active = self._find(lambda link: link.user_id == user_id and link.is_active(self._clock))
        if not active:
            return None
        return max(active, key=lambda link: link.token_expires_at)

    async def get_by_user(self, user_id: UserId) -> Sequence[CgmLink]:
        return _newest_refresh_first(self._find(lambda link: link.user_id == user_id))

    async def get_links_needing_refresh(
        self, threshold: timedelta = DEFAULT_REFRESH_THRESHOLD
    ) -> Sequence[CgmLink]:
        due = self._find(lambda link: not link.is_unlinked and link.should_refresh(self._clock, threshold))
        return sorted(due, key=lambda link: link.token_expires_at)

    def _find(self, predicate) -> list[CgmLink]:
        loaded = (self._uow.attach(link) for link in self._uow.store.find(self.collection, predicate))
        return [link for link in loaded if link is not None]
