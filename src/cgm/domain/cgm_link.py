"""
CgmLink Aggregate
OAuth credential lifecycle for a user's CGM account
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import StrEnum
from uuid import UUID

from shared.domain.base_aggregate_root import BaseAggregateRoot
from shared.domain.clock import Clock, ensure_aware
from shared.domain.identifiers import UserId, UuidIdentifier
from shared.domain.result import Result
from cgm.domain.errors import CgmLinkErrors
from cgm.domain.events import CgmLinked, CgmTokensRefreshed, CgmUnlinked

DEFAULT_REFRESH_THRESHOLD = timedelta(hours=1)


@dataclass(frozen=True)
class LinkId(UuidIdentifier):
    """Identity of a CgmLink aggregate."""


class LinkStatus(StrEnum):
    ACTIVE = "active"
    REFRESHED = "refreshed"
    EXPIRED = "expired"
    UNLINKED = "unlinked"


def _is_payload(value: object) -> bool:
    return isinstance(value, (bytes, bytearray)) and len(value) > 0


class CgmLink(BaseAggregateRoot[LinkId]):
    """
    Link between a user and their CGM provider account.

    Holds only encrypted token payloads. Expiry, activity and refresh
    eligibility are derived from ``token_expires_at`` against an injected
    clock; only unlinking is an explicit, terminal transition.

    Lifecycle:
        create -> (apply_refreshed_tokens)* -> unlink
        expiry without refresh makes the link inactive implicitly
    """

    def __init__(
        self,
        id: LinkId,
        user_id: UserId,
        encrypted_access_token: bytes,
        encrypted_refresh_token: bytes,
        token_expires_at: datetime,
        created_at: datetime,
        last_refreshed_at: datetime | None = None,
        is_unlinked: bool = False,
    ) -> None:
        if not (_is_payload(encrypted_access_token) and _is_payload(encrypted_refresh_token)):
            raise ValueError("CgmLink requires non-empty encrypted token payloads")
        super().__init__(id=id, created_at=created_at)
        self._user_id = user_id
        self._encrypted_access_token = bytes(encrypted_access_token)
        self._encrypted_refresh_token = bytes(encrypted_refresh_token)
        self._token_expires_at = ensure_aware(token_expires_at, "token_expires_at")
        self._last_refreshed_at = (
            ensure_aware(last_refreshed_at, "last_refreshed_at") if last_refreshed_at else None
        )
        self._is_unlinked = is_unlinked

    @classmethod
    def create(
        cls,
        user_id: UserId,
        encrypted_access_token: bytes,
        encrypted_refresh_token: bytes,
        token_expires_at: datetime,
        clock: Clock,
        correlation_id: UUID,
        causation_id: UUID,
    ) -> Result[CgmLink]:
        """
        Create a link from freshly exchanged, already-encrypted tokens.

        Fails with ``CgmLink.InvalidToken`` on an empty payload and with
        ``CgmLink.TokenExpired`` when the expiry is not in the future.
        """
        if not (_is_payload(encrypted_access_token) and _is_payload(encrypted_refresh_token)):
            return Result.failure(CgmLinkErrors.INVALID_TOKEN)

        ensure_aware(token_expires_at, "token_expires_at")
        now = clock.now()
        if token_expires_at <= now:
            return Result.failure(CgmLinkErrors.TOKEN_EXPIRED)

        link = cls(
            id=LinkId.new(),
            user_id=user_id,
            encrypted_access_token=encrypted_access_token,
            encrypted_refresh_token=encrypted_refresh_token,
            token_expires_at=token_expires_at,
            created_at=now,
        )
        link.raise_event(
            CgmLinked(
                occurred_at=now,
                correlation_id=correlation_id,
                causation_id=causation_id,
                user_id=user_id.value,
                link_id=link.id.value,
                token_expires_at=token_expires_at,
            )
        )
        return Result.success(link)

    # ------------------------------------------------------------------
    # Read-only state
    # ------------------------------------------------------------------
    @property
    def user_id(self) -> UserId:
        return self._user_id

    @property
    def encrypted_access_token(self) -> bytes:
        return self._encrypted_access_token

    @property
    def encrypted_refresh_token(self) -> bytes:
        return self._encrypted_refresh_token

    @property
    def token_expires_at(self) -> datetime:
        return self._token_expires_at

    @property
    def last_refreshed_at(self) -> datetime | None:
        return self._last_refreshed_at

    @property
    def is_unlinked(self) -> bool:
        return self._is_unlinked

    def is_owned_by(self, user_id: UserId) -> bool:
        return self._user_id == user_id

    # ------------------------------------------------------------------
    # Derived state
    # ------------------------------------------------------------------
    def is_expired(self, clock: Clock) -> bool:
        return clock.now() >= self._token_expires_at

    def is_active(self, clock: Clock) -> bool:
        return not self._is_unlinked and not self.is_expired(clock)

    def status(self, clock: Clock) -> LinkStatus:
        if self._is_unlinked:
            return LinkStatus.UNLINKED
        if self.is_expired(clock):
            return LinkStatus.EXPIRED
        if self._last_refreshed_at is not None:
            return LinkStatus.REFRESHED
        return LinkStatus.ACTIVE

    def should_refresh(self, clock: Clock, threshold: timedelta = DEFAULT_REFRESH_THRESHOLD) -> bool:
        return clock.now() >= self._token_expires_at - threshold

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------
    def apply_refreshed_tokens(
        self,
        new_encrypted_access_token: bytes,
        new_encrypted_refresh_token: bytes,
        new_token_expires_at: datetime,
        clock: Clock,
        correlation_id: UUID | None = None,
        causation_id: UUID | None = None,
    ) -> Result[None]:
        """
        Replace both tokens (the provider rotates the refresh token) and extend expiry.
        """
        if self._is_unlinked:
            return Result.failure(CgmLinkErrors.ALREADY_UNLINKED)
        if not (_is_payload(new_encrypted_access_token) and _is_payload(new_encrypted_refresh_token)):
            return Result.failure(CgmLinkErrors.INVALID_TOKEN)

        ensure_aware(new_token_expires_at, "new_token_expires_at")
        now = clock.now()
        if new_token_expires_at <= now:
            return Result.failure(CgmLinkErrors.TOKEN_EXPIRED)

        self._encrypted_access_token = bytes(new_encrypted_access_token)
        self._encrypted_refresh_token = bytes(new_encrypted_refresh_token)
        self._token_expires_at = new_token_expires_at
        self._last_refreshed_at = now

        self.raise_event(
            CgmTokensRefreshed(
                occurred_at=now,
                correlation_id=correlation_id,
                causation_id=causation_id,
                user_id=self._user_id.value,
                link_id=self.id.value,
                token_expires_at=new_token_expires_at,
            )
        )
        return Result.success()

    def unlink(
        self,
        purge_data: bool,
        correlation_id: UUID,
        causation_id: UUID,
        clock: Clock,
    ) -> None:
        """
        Mark the link unlinked and announce it.

        Purging readings is left to subscribers of ``CgmUnlinked``. A second
        call is a no-op, so the announcement happens once.
        """
        if self._is_unlinked:
            return
        self._is_unlinked = True

        self.raise_event(
            CgmUnlinked(
                occurred_at=clock.now(),
                correlation_id=correlation_id,
                causation_id=causation_id,
                user_id=self._user_id.value,
                link_id=self.id.value,
                data_purged=purge_data,
            )
        )
