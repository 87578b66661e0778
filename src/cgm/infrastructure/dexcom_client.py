"""
Dexcom OAuth client
Authorization-code exchange and token refresh over httpx
"""
from __future__ import annotations

import math
from typing import Any

import httpx

from shared.config import Settings
from shared.domain.error import Error
from shared.domain.result import Result
from shared.infrastructure.observability.logger import get_logger
from cgm.application.ports import OAuthTokens
from cgm.domain.errors import DexcomErrors

logger = get_logger(__name__)

TOKEN_PATH = "/v2/oauth2/token"
DEFAULT_RETRY_AFTER_SECONDS = 60.0
# Dexcom access tokens live two hours; anything past a year is a broken response
MAX_EXPIRES_IN_SECONDS = 365 * 24 * 60 * 60


def _retry_after(response: httpx.Response) -> float:
    raw = response.headers.get("Retry-After")
    if raw is None:
        return DEFAULT_RETRY_AFTER_SECONDS
    try:
        return max(float(raw), 0.0)
    except ValueError:
        return DEFAULT_RETRY_AFTER_SECONDS


def _parse_tokens(payload: Any) -> OAuthTokens | None:
    if not isinstance(payload, dict):
        return None
    access_token = payload.get("access_token")
    refresh_token = payload.get("refresh_token")
    expires_in = payload.get("expires_in")
    if not isinstance(access_token, str) or not access_token:
        return None
    if not isinstance(refresh_token, str) or not refresh_token:
        return None
    if isinstance(expires_in, bool) or not isinstance(expires_in, (int, float)):
        return None
    if not 1 <= expires_in <= MAX_EXPIRES_IN_SECONDS or not math.isfinite(expires_in):
        return None
    return OAuthTokens(
        access_token=access_token,
        refresh_token=refresh_token,
        expires_in_seconds=int(expires_in),
        token_type=str(payload.get("token_type") or "Bearer"),
    )


class DexcomOAuthClient:
    """
    OAuth token endpoint client for the Dexcom API.

    Every failure comes back as a ``Dexcom.*`` error; nothing raises for
    HTTP or network trouble. Tokens are never logged.

    Attributes:
        client: Shared ``httpx.AsyncClient`` bound to the Dexcom base URL
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        client_id: str,
        client_secret: str,
        redirect_uri: str,
    ) -> None:
        self.client = client
        self.client_id = client_id
        self._client_secret = client_secret
        self.redirect_uri = redirect_uri

    @classmethod
    def from_settings(cls, settings: Settings) -> DexcomOAuthClient:
        client = httpx.AsyncClient(
            base_url=settings.dexcom_base_url,
            timeout=settings.dexcom_timeout_seconds,
        )
        return cls(
            client,
            client_id=settings.dexcom_client_id,
            client_secret=settings.dexcom_client_secret,
            redirect_uri=settings.dexcom_redirect_uri,
        )

    async def exchange_code(self, code: str) -> Result[OAuthTokens]:
        if not code or not code.strip():
            return Result.failure(DexcomErrors.INVALID_CODE)
        return await self._request_tokens(
            {
                "client_id": self.client_id,
                "client_secret": self._client_secret,
                "code": code.strip(),
                "grant_type": "authorization_code",
                "redirect_uri": self.redirect_uri,
            },
            operation="code_exchange",
        )

    async def refresh(self, refresh_token: str) -> Result[OAuthTokens]:
        if not refresh_token or not refresh_token.strip():
            return Result.failure(DexcomErrors.INVALID_TOKEN)
        return await self._request_tokens(
            {
                "client_id": self.client_id,
                "client_secret": self._client_secret,
                "refresh_token": refresh_token,
                "grant_type": "refresh_token",
            },
            operation="token_refresh",
        )

    async def aclose(self) -> None:
        await self.client.aclose()

    async def __aenter__(self) -> DexcomOAuthClient:
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.aclose()

    async def _request_tokens(self, form: dict[str, str], operation: str) -> Result[OAuthTokens]:
        try:
            response = await self.client.post(TOKEN_PATH, data=form)
        except httpx.HTTPError as e:
            logger.error(
                "Dexcom request failed",
                extra={"operation": operation, "error_type": type(e).__name__},
            )
            return Result.failure(DexcomErrors.NETWORK_ERROR)
        return self._handle_response(response, operation)

    def _handle_response(self, response: httpx.Response, operation: str) -> Result[OAuthTokens]:
        if response.status_code == httpx.codes.TOO_MANY_REQUESTS:
            retry_after = _retry_after(response)
            logger.warning(
                "Rate limited by Dexcom OAuth",
                extra={"operation": operation, "retry_after_seconds": retry_after},
            )
            return Result.failure(DexcomErrors.rate_limited(retry_after))

        if not response.is_success:
            error = self._provider_error(response)
            logger.error(
                "Dexcom OAuth error",
                extra={
                    "operation": operation,
                    "status_code": response.status_code,
                    "error_code": error.code,
                },
            )
            return Result.failure(error)

        try:
            payload = response.json()
        except ValueError:
            payload = None
        tokens = _parse_tokens(payload)
        if tokens is None:
            logger.error("Dexcom token response unreadable", extra={"operation": operation})
            return Result.failure(DexcomErrors.INVALID_RESPONSE)

        logger.info(
            "Dexcom tokens issued",
            extra={"operation": operation, "expires_in_seconds": tokens.expires_in_seconds},
        )
        return Result.success(tokens)

    @staticmethod
    def _provider_error(response: httpx.Response) -> Error:
        try:
            body = response.json()
        except ValueError:
            body = None
        if isinstance(body, dict) and isinstance(body.get("error"), str) and body["error"]:
            description = body.get("error_description")
            return DexcomErrors.provider(body["error"], description if isinstance(description, str) else None)
        return DexcomErrors.OAUTH_ERROR
