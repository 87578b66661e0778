from urllib.parse import parse_qs

import httpx
import pytest

from cgm.application.ports import OAuthTokens
from cgm.infrastructure.dexcom_client import DexcomOAuthClient

TOKEN_BODY = {
    "access_token": "at-1",
    "refresh_token": "rt-1",
    "expires_in": 7200,
    "token_type": "Bearer",
}


def _client(handler):
    http = httpx.AsyncClient(
        base_url="https://sandbox-api.dexcom.com",
        transport=httpx.MockTransport(handler),
    )
    return DexcomOAuthClient(http, client_id="cid", client_secret="secret", redirect_uri="https://app/callback")


@pytest.mark.anyio
async def test_exchange_code_posts_form_and_parses_tokens():
    seen = {}

    def handler(request):
        seen["path"] = request.url.path
        seen["form"] = {k: v[0] for k, v in parse_qs(request.content.decode()).items()}
        return httpx.Response(200, json=TOKEN_BODY)

    async with _client(handler) as client:
        result = await client.exchange_code(" auth-code ")

    tokens = result.value
    assert (tokens.access_token, tokens.refresh_token, tokens.expires_in_seconds) == ("at-1", "rt-1", 7200)
    assert seen["path"] == "/v2/oauth2/token"
    assert seen["form"] == {
        "client_id": "cid",
        "client_secret": "secret",
        "code": "auth-code",
        "grant_type": "authorization_code",
        "redirect_uri": "https://app/callback",
    }


@pytest.mark.anyio
async def test_refresh_uses_refresh_grant():
    seen = {}

    def handler(request):
        seen["form"] = parse_qs(request.content.decode())
        return httpx.Response(200, json=TOKEN_BODY)

    async with _client(handler) as client:
        result = await client.refresh("rt-0")

    assert result.is_success()
    assert seen["form"]["grant_type"] == ["refresh_token"]
    assert seen["form"]["refresh_token"] == ["rt-0"]


@pytest.mark.anyio
async def test_blank_inputs_fail_without_a_request():
    def handler(request):
        raise AssertionError("no request expected")

    async with _client(handler) as client:
        assert (await client.exchange_code("  ")).error.code == "Dexcom.InvalidCode"
        assert (await client.refresh("")).error.code == "Dexcom.InvalidToken"


@pytest.mark.anyio
@pytest.mark.parametrize(
    "response, code, message_part",
    [
        (httpx.Response(429, headers={"Retry-After": "30"}), "Dexcom.RateLimited", "30 seconds"),
        (httpx.Response(429), "Dexcom.RateLimited", "60 seconds"),
        (
            httpx.Response(400, json={"error": "invalid_grant", "error_description": "Code expired"}),
            "Dexcom.invalid_grant",
            "Code expired",
        ),
        (httpx.Response(500, text="upstream down"), "Dexcom.OAuthError", ""),
        (httpx.Response(200, text="not json"), "Dexcom.InvalidResponse", ""),
        (httpx.Response(200, json={"access_token": "at"}), "Dexcom.InvalidResponse", ""),
        (
            httpx.Response(200, content=b'{"access_token": "at", "refresh_token": "rt", "expires_in": Infinity}'),
            "Dexcom.InvalidResponse",
            "",
        ),
        (httpx.Response(200, json={**TOKEN_BODY, "expires_in": 10**20}), "Dexcom.InvalidResponse", ""),
        (httpx.Response(200, json={**TOKEN_BODY, "expires_in": 0.5}), "Dexcom.InvalidResponse", ""),
    ],
)
async def test_error_mapping(response, code, message_part):
    async with _client(lambda request: response) as client:
        result = await client.exchange_code("code")

    assert result.error.code == code
    assert message_part in result.error.message


@pytest.mark.anyio
async def test_transport_failure_is_a_network_error():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    async with _client(handler) as client:
        result = await client.refresh("rt")

    assert result.error.code == "Dexcom.NetworkError"


def test_tokens_never_show_in_repr():
    tokens = OAuthTokens(access_token="at-secret", refresh_token="rt-secret", expires_in_seconds=60)
    assert "secret" not in repr(tokens)
