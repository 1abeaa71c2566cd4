"""Signed access credentials (HS256 JWTs).

Credentials are stateless: validity depends only on the signature and the
expiry claim, nothing is persisted.
"""

import logging
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

import jwt

from bistro_order_service.exceptions import Unauthenticated
from bistro_order_service.observability.metrics import (
    record_credential_issued,
    record_credential_rejected,
)

logger = logging.getLogger(__name__)

ALGORITHM = "HS256"
ACCESS_TOKEN_LIFETIME = timedelta(hours=1)
BEARER_PREFIX = "Bearer "


@dataclass(frozen=True)
class Principal:
    """The verified identity behind a request."""

    email: str


class CredentialIssuer:
    """Mints access credentials for an email-keyed identity.

    Issuance is unconditional: the identity is not looked up.
    """

    def __init__(self, secret_key: str, lifetime: timedelta = ACCESS_TOKEN_LIFETIME) -> None:
        """Initialize issuer.

        Args:
            secret_key: Server-held signing secret

        Raises:
            ValueError: If secret_key is empty
        """
        if not secret_key:
            raise ValueError("A signing secret must be provided")

        self.secret_key = secret_key
        self.lifetime = lifetime

    def issue(self, email: str, issued_at: datetime | None = None) -> str:
        """Create a signed credential for ``email`` expiring after the lifetime.

        Args:
            email: Identity to embed
            issued_at: Issuance time, defaults to now

        Returns:
            str: Encoded token
        """
        now = issued_at or datetime.now(UTC)
        payload = {
            "email": email,
            "iat": now,
            "exp": now + self.lifetime,
        }
        token = jwt.encode(payload, self.secret_key, algorithm=ALGORITHM)
        record_credential_issued()
        return token


class CredentialVerifier:
    """Validates bearer credentials. Performs no I/O."""

    def __init__(self, secret_key: str) -> None:
        if not secret_key:
            raise ValueError("A signing secret must be provided")

        self.secret_key = secret_key

    def verify_token(self, token: str) -> Principal:
        """Decode a credential and return the identity it carries.

        Raises:
            Unauthenticated: If the token is malformed, mis-signed, expired
                or carries no email
        """
        try:
            payload = jwt.decode(
                token,
                self.secret_key,
                algorithms=[ALGORITHM],
                options={"require": ["exp", "iat"]},
            )
        except jwt.ExpiredSignatureError:
            logger.info("Rejected expired credential")
            record_credential_rejected("expired")
            raise Unauthenticated()
        except jwt.InvalidTokenError as e:
            logger.info(f"Rejected invalid credential: {e}")
            record_credential_rejected("invalid")
            raise Unauthenticated()

        email = payload.get("email")
        if not isinstance(email, str) or not email:
            record_credential_rejected("invalid")
            raise Unauthenticated()

        return Principal(email=email)

    def verify_header(self, authorization: str | None) -> Principal:
        """Validate an ``Authorization: Bearer <token>`` header value.

        Raises:
            Unauthenticated: If the header is absent or not a bearer credential
        """
        if not authorization:
            record_credential_rejected("missing")
            raise Unauthenticated()

        if not authorization.startswith(BEARER_PREFIX):
            record_credential_rejected("invalid")
            raise Unauthenticated()

        return self.verify_token(authorization[len(BEARER_PREFIX):].strip())
