import asyncio
from datetime import timedelta
from uuid import UUID, uuid4

import pytest

from shared.domain.error import CommonErrors
from shared.domain.identifiers import UserId
from shared.domain.result import Result
from shared.infrastructure.security.key_provider import DerivedKeyProvider
from cgm.application.commands import (
    LinkCgmAccountCommand,
    RefreshCgmTokensCommand,
    RefreshDueLinksCommand,
    UnlinkCgmAccountCommand,
)
from cgm.application.handlers import (
    GetCgmLinksHandler,
    GetCgmLinkStatusHandler,
    LinkCgmAccountHandler,
    RefreshCgmTokensHandler,
    RefreshDueLinksHandler,
    UnlinkCgmAccountHandler,
)
from cgm.application.ports import OAuthTokens
from cgm.application.queries import GetCgmLinksQuery, GetCgmLinkStatusQuery
from cgm.application.subscribers import register_cgm_subscribers
from cgm.domain.cgm_link import CgmLink, LinkStatus
from cgm.domain.errors import CgmLinkErrors, DexcomErrors
from cgm.domain.events import CgmLinked, CgmTokensRefreshed, CgmUnlinked
from cgm.infrastructure.token_encryption import TokenEncryptionService
from cgm.infrastructure.unit_of_work import InMemoryCgmUnitOfWork

INVALID_GRANT = DexcomErrors.provider("invalid_grant", "Refresh token revoked")


class FakeOAuthClient:
    """Issues numbered tokens; yields to the loop before answering like a real HTTP call."""

    def __init__(self, expires_in=7200):
        self.expires_in = expires_in
        self.issued = 0
        self.exchanged = []
        self.refreshed = []
        self.revoked = set()

    def _tokens(self):
        self.issued += 1
        return OAuthTokens(
            access_token=f"at-{self.issued}",
            refresh_token=f"rt-{self.issued}",
            expires_in_seconds=self.expires_in,
        )

    async def exchange_code(self, code):
        self.exchanged.append(code)
        await asyncio.sleep(0)
        return Result.success(self._tokens())

    async def refresh(self, refresh_token):
        self.refreshed.append(refresh_token)
        await asyncio.sleep(0)
        if refresh_token in self.revoked:
            return Result.failure(INVALID_GRANT)
        return Result.success(self._tokens())


class FakePurger:
    def __init__(self):
        self.purged = []

    async def purge_readings(self, user_id):
        self.purged.append(user_id)


@pytest.fixture
def oauth():
    return FakeOAuthClient()


@pytest.fixture
def encryptor():
    return TokenEncryptionService(DerivedKeyProvider(["handler-tests"]))


@pytest.fixture
def purger(dispatcher):
    purger = FakePurger()
    register_cgm_subscribers(dispatcher, purger)
    return purger


@pytest.fixture
def new_uow(store, dispatcher, clock):
    return lambda: InMemoryCgmUnitOfWork(store, dispatcher, clock)


async def _link(new_uow, oauth, encryptor, clock, user_id):
    handler = LinkCgmAccountHandler(new_uow(), oauth, encryptor, clock)
    return await handler(LinkCgmAccountCommand(user_id=user_id.value, authorization_code="code-123"))


async def _seed(store, dispatcher, clock, encryptor, user_id, expires_in, refresh_token):
    link = CgmLink.create(
        user_id=user_id,
        encrypted_access_token=encryptor.encrypt("seed-access").value,
        encrypted_refresh_token=encryptor.encrypt(refresh_token).value,
        token_expires_at=clock.now() + expires_in,
        clock=clock,
        correlation_id=uuid4(),
        causation_id=uuid4(),
    ).value
    async with InMemoryCgmUnitOfWork(store, dispatcher, clock) as uow:
        uow.cgm_links.add(link)
        await uow.commit()
    return link


@pytest.mark.anyio
async def test_link_stores_encrypted_tokens(new_uow, oauth, encryptor, clock, user_id, store, recorder):
    result = await _link(new_uow, oauth, encryptor, clock, user_id)

    link = result.value
    assert link.token_expires_at == clock.now() + timedelta(seconds=7200)
    assert encryptor.decrypt(link.encrypted_access_token).value == "at-1"
    assert encryptor.decrypt(link.encrypted_refresh_token).value == "rt-1"
    assert b"at-1" not in link.encrypted_access_token
    assert store.count("CgmLink") == 1
    assert oauth.exchanged == ["code-123"]
    assert [type(e) for e in recorder.received] == [CgmLinked]


@pytest.mark.anyio
async def test_second_link_is_rejected_without_calling_the_provider(new_uow, oauth, encryptor, clock, user_id):
    await _link(new_uow, oauth, encryptor, clock, user_id)

    second = await _link(new_uow, oauth, encryptor, clock, user_id)

    assert second.error == CgmLinkErrors.ALREADY_LINKED
    assert len(oauth.exchanged) == 1


@pytest.mark.anyio
async def test_relinking_is_allowed_once_the_old_link_expired(new_uow, oauth, encryptor, clock, user_id, store):
    await _link(new_uow, oauth, encryptor, clock, user_id)
    clock.advance(timedelta(hours=3))

    again = await _link(new_uow, oauth, encryptor, clock, user_id)

    assert again.is_success()
    assert store.count("CgmLink") == 2


@pytest.mark.anyio
async def test_blank_authorization_code(new_uow, oauth, encryptor, clock, user_id):
    handler = LinkCgmAccountHandler(new_uow(), oauth, encryptor, clock)

    result = await handler(LinkCgmAccountCommand(user_id=user_id.value, authorization_code="   "))

    assert result.error == CgmLinkErrors.INVALID_AUTHORIZATION_CODE
    assert oauth.exchanged == []


@pytest.mark.anyio
async def test_provider_failure_stores_nothing(new_uow, encryptor, clock, user_id, store):
    class Rejecting(FakeOAuthClient):
        async def exchange_code(self, code):
            return Result.failure(DexcomErrors.provider("invalid_grant", "Code expired"))

    result = await _link(new_uow, Rejecting(), encryptor, clock, user_id)

    assert result.error.code == "Dexcom.invalid_grant"
    assert store.count("CgmLink") == 0


def test_authorization_code_is_hidden_from_repr(user_id):
    command = LinkCgmAccountCommand(user_id=user_id.value, authorization_code="very-secret-code")
    assert "very-secret-code" not in repr(command)


@pytest.mark.anyio
async def test_concurrent_links_for_one_user_both_pass_the_check(new_uow, oauth, encryptor, clock, user_id, store):
    # The active-link check and the insert are not atomic; this pins the known gap.
    first, second = await asyncio.gather(
        _link(new_uow, oauth, encryptor, clock, user_id),
        _link(new_uow, oauth, encryptor, clock, user_id),
    )

    assert first.is_success() and second.is_success()
    assert store.count("CgmLink") == 2


@pytest.mark.anyio
async def test_unlink_with_purge(new_uow, oauth, encryptor, clock, user_id, store, recorder, purger):
    link = (await _link(new_uow, oauth, encryptor, clock, user_id)).value
    handler = UnlinkCgmAccountHandler(new_uow(), clock)
    command = UnlinkCgmAccountCommand(user_id=user_id.value, link_id=link.id.value, purge_data=True)

    result = await handler(command)

    assert result.is_success()
    assert store.count("CgmLink") == 0
    assert purger.purged == [user_id.value]
    unlinked = [e for e in recorder.received if isinstance(e, CgmUnlinked)]
    assert len(unlinked) == 1
    assert unlinked[0].causation_id == command.command_id

    again = await handler(command)
    assert again.error == CgmLinkErrors.LINK_NOT_FOUND
    assert purger.purged == [user_id.value]


@pytest.mark.anyio
async def test_unlink_without_purge_keeps_readings(new_uow, oauth, encryptor, clock, user_id, purger):
    link = (await _link(new_uow, oauth, encryptor, clock, user_id)).value

    await UnlinkCgmAccountHandler(new_uow(), clock)(
        UnlinkCgmAccountCommand(user_id=user_id.value, link_id=link.id.value)
    )

    assert purger.purged == []


@pytest.mark.anyio
async def test_unlink_checks_ownership(new_uow, oauth, encryptor, clock, user_id, store):
    link = (await _link(new_uow, oauth, encryptor, clock, user_id)).value
    handler = UnlinkCgmAccountHandler(new_uow(), clock)

    stranger = await handler(UnlinkCgmAccountCommand(user_id=uuid4(), link_id=link.id.value))
    missing = await handler(UnlinkCgmAccountCommand(user_id=user_id.value, link_id=uuid4()))

    assert stranger.error == CommonErrors.FORBIDDEN
    assert missing.error == CgmLinkErrors.LINK_NOT_FOUND
    assert store.count("CgmLink") == 1


@pytest.mark.anyio
async def test_refresh_rotates_both_tokens(new_uow, oauth, encryptor, clock, user_id, store, recorder):
    link = (await _link(new_uow, oauth, encryptor, clock, user_id)).value
    clock.advance(timedelta(minutes=90))
    handler = RefreshCgmTokensHandler(new_uow(), oauth, encryptor, clock)

    result = await handler(RefreshCgmTokensCommand(user_id=user_id.value, link_id=link.id.value))

    refreshed = result.value
    assert oauth.refreshed == ["rt-1"]
    assert encryptor.decrypt(refreshed.encrypted_refresh_token).value == "rt-2"
    assert refreshed.last_refreshed_at == clock.now()
    assert refreshed.token_expires_at == clock.now() + timedelta(seconds=7200)

    stored = store.get("CgmLink", link.id)
    assert encryptor.decrypt(stored.encrypted_access_token).value == "at-2"
    assert isinstance(recorder.received[-1], CgmTokensRefreshed)


@pytest.mark.anyio
async def test_refresh_failure_leaves_link_untouched(new_uow, oauth, encryptor, clock, user_id, store):
    link = (await _link(new_uow, oauth, encryptor, clock, user_id)).value
    oauth.revoked.add("rt-1")

    result = await RefreshCgmTokensHandler(new_uow(), oauth, encryptor, clock)(
        RefreshCgmTokensCommand(user_id=user_id.value, link_id=link.id.value)
    )

    assert result.error == INVALID_GRANT
    assert store.get("CgmLink", link.id).last_refreshed_at is None


@pytest.mark.anyio
async def test_refresh_of_someone_elses_link_is_forbidden(new_uow, oauth, encryptor, clock, user_id):
    link = (await _link(new_uow, oauth, encryptor, clock, user_id)).value

    result = await RefreshCgmTokensHandler(new_uow(), oauth, encryptor, clock)(
        RefreshCgmTokensCommand(user_id=uuid4(), link_id=link.id.value)
    )

    assert result.error == CommonErrors.FORBIDDEN
    assert oauth.refreshed == []


@pytest.mark.anyio
async def test_refresh_due_links_reports_each_outcome(store, dispatcher, new_uow, oauth, encryptor, clock, user_id):
    due = await _seed(store, dispatcher, clock, encryptor, user_id, timedelta(minutes=30), "rt-due")
    revoked = await _seed(store, dispatcher, clock, encryptor, UserId(uuid4()), timedelta(minutes=40), "rt-revoked")
    await _seed(store, dispatcher, clock, encryptor, UserId(uuid4()), timedelta(hours=5), "rt-not-due")
    oauth.revoked.add("rt-revoked")

    handler = RefreshDueLinksHandler(new_uow(), oauth, encryptor, clock)
    summary = (await handler(RefreshDueLinksCommand())).value

    assert summary.refreshed == [due.id.value]
    assert summary.failed == {revoked.id.value: "Dexcom.invalid_grant"}
    assert oauth.refreshed == ["rt-due", "rt-revoked"]
    assert store.get("CgmLink", due.id).last_refreshed_at == clock.now()


@pytest.mark.anyio
async def test_status_of_unlinked_user(new_uow, clock, user_id):
    status = (await GetCgmLinkStatusHandler(new_uow(), clock)(GetCgmLinkStatusQuery(user_id=user_id.value))).value

    assert status.is_linked is False
    assert status.link_id is None


@pytest.mark.anyio
async def test_status_of_linked_user(new_uow, oauth, encryptor, clock, user_id):
    link = (await _link(new_uow, oauth, encryptor, clock, user_id)).value
    handler = GetCgmLinkStatusHandler(new_uow(), clock)

    fresh = (await handler(GetCgmLinkStatusQuery(user_id=user_id.value))).value
    clock.advance(timedelta(minutes=90))
    ageing = (await handler(GetCgmLinkStatusQuery(user_id=user_id.value))).value

    assert fresh.is_linked and fresh.link_id == link.id.value
    assert fresh.status == LinkStatus.ACTIVE
    assert fresh.should_refresh is False
    assert ageing.should_refresh is True
    assert ageing.last_refreshed_at is None


@pytest.mark.anyio
async def test_links_list_includes_expired_history(new_uow, oauth, encryptor, clock, user_id, store, dispatcher):
    expired = await _seed(store, dispatcher, clock, encryptor, user_id, timedelta(minutes=10), "rt-old")
    await _seed(store, dispatcher, clock, encryptor, UserId(uuid4()), timedelta(hours=2), "rt-other")
    clock.advance(timedelta(minutes=15))
    current = (await _link(new_uow, oauth, encryptor, clock, user_id)).value

    links = (await GetCgmLinksHandler(new_uow(), clock)(GetCgmLinksQuery(user_id=user_id.value))).value

    assert [summary.link_id for summary in links] == [current.id.value, expired.id.value]
    assert [summary.status for summary in links] == [LinkStatus.ACTIVE, LinkStatus.EXPIRED]
    assert [summary.is_active for summary in links] == [True, False]
    assert links[1].should_refresh is True
    assert all(summary.user_id == user_id.value for summary in links)


@pytest.mark.anyio
async def test_links_list_rejects_nil_user(new_uow, clock):
    result = await GetCgmLinksHandler(new_uow(), clock)(GetCgmLinksQuery(user_id=UUID(int=0)))

    assert result.error == CommonErrors.EMPTY_IDENTIFIER
