"""
CGM error catalogue
Link lifecycle, token encryption, and OAuth provider failures
"""
from __future__ import annotations

from shared.domain.error import Error


class CgmLinkErrors:
    ALREADY_LINKED = Error.create(
        "CgmLink.AlreadyLinked",
        "The user already has an active CGM link.",
    )

    LINK_NOT_FOUND = Error.create(
        "CgmLink.LinkNotFound",
        "The CGM link was not found.",
    )

    TOKEN_EXPIRED = Error.create(
        "CgmLink.TokenExpired",
        "The token expiry must be in the future.",
    )

    INVALID_TOKEN = Error.create(
        "CgmLink.InvalidToken",
        "Encrypted tokens cannot be empty.",
    )

    ALREADY_UNLINKED = Error.create(
        "CgmLink.AlreadyUnlinked",
        "The CGM link has been unlinked.",
    )

    INVALID_AUTHORIZATION_CODE = Error.create(
        "CgmLink.InvalidAuthorizationCode",
        "The authorization code cannot be empty.",
    )


class TokenEncryptionErrors:
    EMPTY_INPUT = Error.create(
        "TokenEncryption.EmptyInput",
        "Tokens to encrypt or decrypt cannot be empty.",
    )

    DECRYPTION_FAILED = Error.create(
        "TokenEncryption.DecryptionFailed",
        "The token could not be decrypted with the configured keys.",
    )

    MALFORMED_INPUT = Error.create(
        "TokenEncryption.MalformedInput",
        "The token is not valid UTF-8 text.",
    )


class DexcomErrors:
    INVALID_CODE = Error.create("Dexcom.InvalidCode", "Authorization code cannot be empty.")
    INVALID_TOKEN = Error.create("Dexcom.InvalidToken", "Refresh token cannot be empty.")
    NETWORK_ERROR = Error.create("Dexcom.NetworkError", "Failed to connect to Dexcom API.")
    OAUTH_ERROR = Error.create("Dexcom.OAuthError", "OAuth request failed.")
    INVALID_RESPONSE = Error.create("Dexcom.InvalidResponse", "Failed to deserialize token response.")

    @staticmethod
    def rate_limited(retry_after_seconds: float) -> Error:
        return Error.create(
            "Dexcom.RateLimited",
            f"Rate limit exceeded. Retry after {retry_after_seconds:g} seconds.",
        )

    @staticmethod
    def provider(error: str, description: str | None) -> Error:
        """Error reported by the provider itself (e.g. ``invalid_grant``)."""
        return Error.create(f"Dexcom.{error}", description or "OAuth request rejected by Dexcom.")
