"""Self-signed service-account JWTs using RS256."""

from datetime import UTC, datetime, timedelta
from typing import Any

import jwt
from jwt.types import Options

from sensorpost.crypto.types import JWKEntry, ServiceAccountCredential

ACCESS_TOKEN_DEFAULT_TTL = 3600
FIRESTORE_AUDIENCE = "https://firestore.googleapis.com/"
IDENTITY_AUDIENCE = (
    "https://identitytoolkit.googleapis.com/google.identity.identitytoolkit.v1.IdentityToolkit"
)


class JWTManager:
    """Creates tokens signed by a service account and checks them against a JWK."""

    def __init__(self, credential: ServiceAccountCredential) -> None:
        self._private_key_pem = credential.private_key
        self._kid = credential.private_key_id
        self._issuer = credential.client_email

    def create_access_token(
        self,
        audience: str,
        ttl_seconds: int = ACCESS_TOKEN_DEFAULT_TTL,
        extra_claims: dict[str, Any] | None = None,
    ) -> str:
        """Create a signed RS256 JWT where the service account is iss and sub."""
        now = datetime.now(UTC)
        payload: dict[str, Any] = {
            "iss": self._issuer,
            "sub": self._issuer,
            "aud": audience,
            "iat": now,
            "exp": now + timedelta(seconds=ttl_seconds),
        }
        if extra_claims:
            payload.update(extra_claims)
        return jwt.encode(
            payload,
            self._private_key_pem,
            algorithm="RS256",
            headers={"kid": self._kid},
        )

    def verify_token(
        self, token: str, public_key: JWKEntry, audience: str | None = None
    ) -> dict[str, Any]:
        """Verify and decode a token issued by this service account."""
        opts: Options = {}
        if audience is None:
            opts["verify_aud"] = False
        return jwt.decode(
            token,
            public_key.to_public_key(),
            algorithms=[public_key.alg],
            issuer=self._issuer,
            audience=audience,
            options=opts,
        )
