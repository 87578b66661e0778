"""
CGM link command and query handlers
Link, unlink, refresh, and status use cases for the OAuth credential lifecycle
"""
from __future__ import annotations

from datetime import timedelta
from uuid import UUID

from shared.application.command_handler import CommandHandler
from shared.application.query_handler import QueryHandler
from shared.domain.clock import Clock
from shared.domain.error import CommonErrors
from shared.domain.identifiers import UserId
from shared.domain.result import Result, first_failure
from shared.infrastructure.observability.logger import get_logger
from cgm.application.commands import (
    LinkCgmAccountCommand,
    RefreshCgmTokensCommand,
    RefreshDueLinksCommand,
    UnlinkCgmAccountCommand,
)
from cgm.application.ports import CgmOAuthClient, CgmUnitOfWork, TokenEncryptor
from cgm.application.queries import (
    CgmLinkStatus,
    CgmLinkSummary,
    GetCgmLinksQuery,
    GetCgmLinkStatusQuery,
    RefreshSummary,
)
from cgm.domain.cgm_link import DEFAULT_REFRESH_THRESHOLD, CgmLink, LinkId
from cgm.domain.errors import CgmLinkErrors

logger = get_logger(__name__)


class LinkCgmAccountHandler(CommandHandler[LinkCgmAccountCommand, CgmLink]):
    """
    Link a CGM account from an OAuth authorization code.

    The "one active link per user" rule is a check-then-create with no lock:
    two concurrent requests for the same user can both pass the check.
    """

    def __init__(
        self,
        uow: CgmUnitOfWork,
        oauth_client: CgmOAuthClient,
        encryptor: TokenEncryptor,
        clock: Clock,
    ) -> None:
        self.uow = uow
        self.oauth_client = oauth_client
        self.encryptor = encryptor
        self.clock = clock

    async def handle(self, command: LinkCgmAccountCommand) -> Result[CgmLink]:
        user_id = UserId.create(command.user_id)
        if user_id.is_failure():
            return Result.failure(user_id.error)
        if not command.authorization_code or not command.authorization_code.strip():
            return Result.failure(CgmLinkErrors.INVALID_AUTHORIZATION_CODE)

        async with self.uow:
            existing = await self.uow.cgm_links.get_active_by_user(user_id.value)
            if existing is not None:
                return Result.failure(CgmLinkErrors.ALREADY_LINKED)

            tokens = await self.oauth_client.exchange_code(command.authorization_code.strip())
            if tokens.is_failure():
                return Result.failure(tokens.error)

            access = self.encryptor.encrypt(tokens.value.access_token)
            refresh = self.encryptor.encrypt(tokens.value.refresh_token)
            failed = first_failure(access, refresh)
            if failed is not None:
                return Result.failure(failed.error)

            created = CgmLink.create(
                user_id=user_id.value,
                encrypted_access_token=access.value,
                encrypted_refresh_token=refresh.value,
                token_expires_at=tokens.value.expires_at(self.clock.now()),
                clock=self.clock,
                correlation_id=command.correlation_id,
                causation_id=command.command_id,
            )
            if created.is_failure():
                return created

            self.uow.cgm_links.add(created.value)
            committed = await self.uow.commit()

        if committed.is_failure():
            return Result.failure(committed.error)

        logger.info(
            "CGM account linked",
            extra={"user_id": str(command.user_id), "link_id": str(created.value.id)},
        )
        return created


class UnlinkCgmAccountHandler(CommandHandler[UnlinkCgmAccountCommand, None]):
    def __init__(self, uow: CgmUnitOfWork, clock: Clock) -> None:
        self.uow = uow
        self.clock = clock

    async def handle(self, command: UnlinkCgmAccountCommand) -> Result[None]:
        user_id = UserId.create(command.user_id)
        link_id = LinkId.create(command.link_id)
        failed = first_failure(user_id, link_id)
        if failed is not None:
            return Result.failure(failed.error)

        async with self.uow:
            link = await self.uow.cgm_links.get_by_id(link_id.value)
            if link is None:
                return Result.failure(CgmLinkErrors.LINK_NOT_FOUND)
            if not link.is_owned_by(user_id.value):
                return Result.failure(CommonErrors.FORBIDDEN)

            link.unlink(command.purge_data, command.correlation_id, command.command_id, clock=self.clock)
            self.uow.cgm_links.remove(link)
            committed = await self.uow.commit()

        if committed.is_failure():
            return Result.failure(committed.error)

        logger.info(
            "CGM account unlinked",
            extra={"link_id": str(command.link_id), "purge_data": command.purge_data},
        )
        return Result.success()


class _TokenRefresher:
    """Decrypt, refresh with the provider, re-encrypt, apply."""

    def __init__(
        self,
        uow: CgmUnitOfWork,
        oauth_client: CgmOAuthClient,
        encryptor: TokenEncryptor,
        clock: Clock,
    ) -> None:
        self.uow = uow
        self.oauth_client = oauth_client
        self.encryptor = encryptor
        self.clock = clock

    async def _refresh(self, link: CgmLink, correlation_id: UUID, causation_id: UUID) -> Result[None]:
        if link.is_unlinked:
            return Result.failure(CgmLinkErrors.ALREADY_UNLINKED)

        refresh_token = self.encryptor.decrypt(link.encrypted_refresh_token)
        if refresh_token.is_failure():
            return Result.failure(refresh_token.error)

        tokens = await self.oauth_client.refresh(refresh_token.value)
        if tokens.is_failure():
            return Result.failure(tokens.error)

        access = self.encryptor.encrypt(tokens.value.access_token)
        refresh = self.encryptor.encrypt(tokens.value.refresh_token)
        failed = first_failure(access, refresh)
        if failed is not None:
            return Result.failure(failed.error)

        applied = link.apply_refreshed_tokens(
            access.value,
            refresh.value,
            tokens.value.expires_at(self.clock.now()),
            self.clock,
            correlation_id=correlation_id,
            causation_id=causation_id,
        )
        if applied.is_failure():
            return applied
        return await self.uow.commit()


class RefreshCgmTokensHandler(_TokenRefresher, CommandHandler[RefreshCgmTokensCommand, CgmLink]):
    async def handle(self, command: RefreshCgmTokensCommand) -> Result[CgmLink]:
        user_id = UserId.create(command.user_id)
        link_id = LinkId.create(command.link_id)
        failed = first_failure(user_id, link_id)
        if failed is not None:
            return Result.failure(failed.error)

        async with self.uow:
            link = await self.uow.cgm_links.get_by_id(link_id.value)
            if link is None:
                return Result.failure(CgmLinkErrors.LINK_NOT_FOUND)
            if not link.is_owned_by(user_id.value):
                return Result.failure(CommonErrors.FORBIDDEN)

            refreshed = await self._refresh(link, command.correlation_id, command.command_id)

        if refreshed.is_failure():
            return Result.failure(refreshed.error)
        return Result.success(link)


class RefreshDueLinksHandler(_TokenRefresher, CommandHandler[RefreshDueLinksCommand, RefreshSummary]):
    """
    Proactively refresh every link expiring within the threshold.

    Each link is refreshed and committed in its own unit of work, so one
    provider failure never holds back the others.
    """

    def __init__(
        self,
        uow: CgmUnitOfWork,
        oauth_client: CgmOAuthClient,
        encryptor: TokenEncryptor,
        clock: Clock,
        threshold: timedelta = DEFAULT_REFRESH_THRESHOLD,
    ) -> None:
        super().__init__(uow, oauth_client, encryptor, clock)
        self.threshold = threshold

    async def handle(self, command: RefreshDueLinksCommand) -> Result[RefreshSummary]:
        async with self.uow:
            due = await self.uow.cgm_links.get_links_needing_refresh(self.threshold)
        due_ids = [link.id for link in due]

        refreshed: list[UUID] = []
        failed: dict[UUID, str] = {}
        for link_id in due_ids:
            async with self.uow:
                link = await self.uow.cgm_links.get_by_id(link_id)
                if link is None:
                    continue
                outcome = await self._refresh(link, command.correlation_id, command.command_id)

            if outcome.is_success():
                refreshed.append(link_id.value)
            else:
                failed[link_id.value] = outcome.error.code
                logger.warning(
                    "CGM token refresh failed",
                    extra={"link_id": str(link_id), "error_code": outcome.error.code},
                )

        logger.info(
            "CGM refresh sweep finished",
            extra={"due": len(due_ids), "refreshed": len(refreshed), "failed": len(failed)},
        )
        return Result.success(RefreshSummary(refreshed=refreshed, failed=failed))


class GetCgmLinkStatusHandler(QueryHandler[GetCgmLinkStatusQuery, CgmLinkStatus]):
    def __init__(
        self,
        uow: CgmUnitOfWork,
        clock: Clock,
        threshold: timedelta = DEFAULT_REFRESH_THRESHOLD,
    ) -> None:
        self.uow = uow
        self.clock = clock
        self.threshold = threshold

    async def handle(self, query: GetCgmLinkStatusQuery) -> Result[CgmLinkStatus]:
        user_id = UserId.create(query.user_id)
        if user_id.is_failure():
            return Result.failure(user_id.error)

        async with self.uow:
            link = await self.uow.cgm_links.get_active_by_user(user_id.value)

        if link is None:
            return Result.success(CgmLinkStatus(is_linked=False))
        return Result.success(
            CgmLinkStatus(
                is_linked=True,
                link_id=link.id.value,
                status=link.status(self.clock),
                token_expires_at=link.token_expires_at,
                last_refreshed_at=link.last_refreshed_at,
                should_refresh=link.should_refresh(self.clock, self.threshold),
            )
        )


class GetCgmLinksHandler(QueryHandler[GetCgmLinksQuery, list[CgmLinkSummary]]):
    """Every link the user still holds, active or expired, most recently refreshed first."""

    def __init__(
        self,
        uow: CgmUnitOfWork,
        clock: Clock,
        threshold: timedelta = DEFAULT_REFRESH_THRESHOLD,
    ) -> None:
        self.uow = uow
        self.clock = clock
        self.threshold = threshold

    async def handle(self, query: GetCgmLinksQuery) -> Result[list[CgmLinkSummary]]:
        user_id = UserId.create(query.user_id)
        if user_id.is_failure():
            return Result.failure(user_id.error)

        async with self.uow:
            links = await self.uow.cgm_links.get_by_user(user_id.value)

        return Result.success(
            [
                CgmLinkSummary(
                    link_id=link.id.value,
                    user_id=link.user_id.value,
                    status=link.status(self.clock),
                    token_expires_at=link.token_expires_at,
                    last_refreshed_at=link.last_refreshed_at,
                    is_active=link.is_active(self.clock),
                    should_refresh=link.should_refresh(self.clock, self.threshold),
                )
                for link in links
            ]
        )
