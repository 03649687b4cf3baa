"""Service-account credential broker.

Exchanges a signed JWT assertion for a short-lived bearer token at the
OAuth token endpoint and caches it in memory until shortly before it
expires. Nothing here is persisted.
"""

import base64
import hashlib
import json
import logging
import time
from dataclasses import dataclass
from typing import Callable

import httpx
from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import padding, rsa

from schedule_gcal.constants import (
    ASSERTION_LIFETIME_SECONDS,
    CALENDAR_SCOPE,
    GOOGLE_OAUTH_TOKEN_URL,
    JWT_BEARER_GRANT_TYPE,
    TOKEN_EXPIRY_MARGIN_SECONDS,
)
from schedule_gcal.exceptions import AuthError
from schedule_gcal.utils import safe_error_body

logger = logging.getLogger(__name__)


def _b64url(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("ascii")


def _b64url_json(value: dict) -> str:
    return _b64url(json.dumps(value, separators=(",", ":")).encode("utf-8"))


def key_fingerprint(private_key_pem: str) -> str:
    """SHA-256 of the key material, so a rotated key never reuses a cached token."""
    return hashlib.sha256(private_key_pem.strip().encode("utf-8")).hexdigest()


def load_rsa_private_key(private_key_pem: str) -> rsa.RSAPrivateKey:
    """Decode an unencrypted PEM private key, which must be RSA."""
    try:
        key = serialization.load_pem_private_key(
            private_key_pem.strip().encode("utf-8"), password=None
        )
    except (ValueError, TypeError, UnsupportedAlgorithm) as e:
        raise AuthError(f"Invalid service account private key: {e}") from e
    if not isinstance(key, rsa.RSAPrivateKey):
        raise AuthError("Service account private key must be an RSA key")
    return key


def build_assertion(
    email: str,
    private_key_pem: str,
    *,
    scope: str = CALENDAR_SCOPE,
    audience: str = GOOGLE_OAUTH_TOKEN_URL,
    issued_at: int,
) -> str:
    """
    Build a signed RS256 JWT assertion for the jwt-bearer grant.

    Args:
        email: Service account email (issuer)
        private_key_pem: PEM encoded RSA private key
        scope: Space separated OAuth scopes
        audience: Token endpoint URL
        issued_at: Epoch seconds used for ``iat``; ``exp`` is one hour later

    Returns:
        "header.payload.signature", each part base64url without padding
    """
    header = {"alg": "RS256", "typ": "JWT"}
    payload = {
        "iss": email,
        "scope": scope,
        "aud": audience,
        "iat": issued_at,
        "exp": issued_at + ASSERTION_LIFETIME_SECONDS,
    }
    signing_input = f"{_b64url_json(header)}.{_b64url_json(payload)}"
    key = load_rsa_private_key(private_key_pem)
    signature = key.sign(
        signing_input.encode("ascii"), padding.PKCS1v15(), hashes.SHA256()
    )
    return f"{signing_input}.{_b64url(signature)}"


@dataclass
class CachedToken:
    """Bearer token and the epoch second it expires at."""

    access_token: str
    expires_at: float


class TokenCache:
    """In-memory token cache keyed by (issuer, scope, key fingerprint).

    Process-scoped; a single event loop reads and refreshes it.
    """

    def __init__(self):
        self._tokens: dict[str, CachedToken] = {}

    def get(self, key: str, now: float) -> str | None:
        """Cached token for ``key`` if still outside the expiry margin."""
        cached = self._tokens.get(key)
        if cached is None:
            return None
        if now >= cached.expires_at - TOKEN_EXPIRY_MARGIN_SECONDS:
            return None
        return cached.access_token

    def put(self, key: str, access_token: str, expires_at: float) -> None:
        self._tokens[key] = CachedToken(access_token, expires_at)

    def invalidate(self, key: str) -> None:
        self._tokens.pop(key, None)

    def clear(self) -> None:
        self._tokens.clear()

    def __len__(self) -> int:
        return len(self._tokens)


def _coerce_expires_in(value) -> int:
    if isinstance(value, bool):
        return ASSERTION_LIFETIME_SECONDS
    if isinstance(value, (int, float)) and value > 0:
        return int(value)
    if isinstance(value, str) and value.isdigit() and int(value) > 0:
        return int(value)
    return ASSERTION_LIFETIME_SECONDS


class CredentialBroker:
    """Obtain and cache access tokens for a service account."""

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        *,
        token_url: str = GOOGLE_OAUTH_TOKEN_URL,
        scope: str = CALENDAR_SCOPE,
        cache: TokenCache | None = None,
        clock: Callable[[], float] = time.time,
    ):
        self._http_client = http_client
        self.token_url = token_url
        self.scope = scope
        self.cache = cache if cache is not None else TokenCache()
        self._clock = clock

    def cache_key(self, email: str, private_key_pem: str) -> str:
        return f"{email}|{self.scope}|{key_fingerprint(private_key_pem)}"

    async def get_access_token(
        self, email: str, private_key_pem: str, *, force_refresh: bool = False
    ) -> str:
        """
        Return a valid bearer token, exchanging a new assertion when needed.

        Args:
            email: Service account email
            private_key_pem: PEM encoded RSA private key
            force_refresh: Ignore any cached token (used after a 401/403)

        Raises:
            AuthError: If the key is unusable or the token endpoint refuses
        """
        if not email or not private_key_pem:
            raise AuthError("Service account email and private key are required")

        key = self.cache_key(email, private_key_pem)
        now = self._clock()
        if force_refresh:
            self.cache.invalidate(key)
        else:
            cached = self.cache.get(key, now)
            if cached is not None:
                return cached

        access_token, expires_in = await self._exchange(email, private_key_pem, now)
        self.cache.put(key, access_token, now + expires_in)
        logger.debug(f"Obtained access token for {email} (expires in {expires_in}s)")
        return access_token

    async def _exchange(
        self, email: str, private_key_pem: str, now: float
    ) -> tuple[str, int]:
        assertion = build_assertion(
            email,
            private_key_pem,
            scope=self.scope,
            audience=self.token_url,
            issued_at=int(now),
        )
        try:
            response = await self._http_client.post(
                self.token_url,
                data={"grant_type": JWT_BEARER_GRANT_TYPE, "assertion": assertion},
                headers={"Accept": "application/json"},
            )
        except httpx.HTTPError as e:
            raise AuthError(f"Token request failed: {e}") from e

        if response.status_code < 200 or response.status_code >= 300:
            body = safe_error_body(response)
            raise AuthError(
                f"Token exchange failed ({response.status_code}): {body}",
                status_code=response.status_code,
                body=body,
            )

        try:
            payload = response.json()
        except ValueError as e:
            raise AuthError("Token endpoint returned invalid JSON") from e

        access_token = payload.get("access_token") if isinstance(payload, dict) else None
        if not isinstance(access_token, str) or not access_token.strip():
            raise AuthError("Token response is missing access_token")

        return access_token.strip(), _coerce_expires_in(payload.get("expires_in"))
