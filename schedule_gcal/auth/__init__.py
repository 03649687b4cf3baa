"""Service-account authentication."""

from schedule_gcal.auth.credential_broker import (
    CredentialBroker,
    TokenCache,
    build_assertion,
    key_fingerprint,
)

__all__ = ["CredentialBroker", "TokenCache", "build_assertion", "key_fingerprint"]
