"""Type definitions for public keys, key sets and service-account credentials."""

from datetime import UTC, datetime
from typing import Any, Literal

import jwt
from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, field_validator


class JWKEntry(BaseModel):
    """Single public key as published in a JSON Web Key Set."""

    model_config = ConfigDict(frozen=True, extra="allow")

    kty: str = "RSA"
    use: str = "sig"
    alg: str = "RS256"
    kid: str
    n: str
    e: str

    def to_public_key(self) -> Any:
        """Build the cryptography public key object for this entry."""
        return jwt.PyJWK(self.model_dump(), algorithm=self.alg).key


class KeySet(BaseModel):
    """Public keys keyed by kid; a repeated kid replaces the earlier entry."""

    model_config = ConfigDict(frozen=True)

    keys: tuple[JWKEntry, ...]
    fetched_at: datetime | None = None

    @field_validator("keys")
    @classmethod
    def _dedupe_by_kid(cls, keys: tuple[JWKEntry, ...]) -> tuple[JWKEntry, ...]:
        by_kid: dict[str, JWKEntry] = {}
        for entry in keys:
            by_kid[entry.kid] = entry
        return tuple(by_kid.values())

    @field_validator("fetched_at")
    @classmethod
    def _assume_utc(cls, value: datetime | None) -> datetime | None:
        if value is not None and value.tzinfo is None:
            return value.replace(tzinfo=UTC)
        return value

    def __len__(self) -> int:
        return len(self.keys)

    def __contains__(self, kid: object) -> bool:
        return any(entry.kid == kid for entry in self.keys)

    @property
    def kids(self) -> list[str]:
        return [entry.kid for entry in self.keys]

    def get(self, kid: str) -> JWKEntry | None:
        """Return the entry with the given kid, if any."""
        for entry in self.keys:
            if entry.kid == kid:
                return entry
        return None

    def merge(self, other: "KeySet") -> "KeySet":
        """Union of both sets; entries from other win on kid collision."""
        return KeySet(keys=self.keys + other.keys, fetched_at=self.fetched_at)


class ServiceAccountCredential(BaseModel):
    """Google service-account key file, plus the public keys it trusts."""

    model_config = ConfigDict(extra="ignore")

    type: Literal["service_account"] = "service_account"
    project_id: str
    private_key_id: str
    private_key: str
    client_email: str
    client_id: str = ""
    auth_uri: str | None = None
    token_uri: str | None = None
    auth_provider_x509_cert_url: str | None = None
    client_x509_cert_url: str | None = None
    universe_domain: str = Field(default="googleapis.com")

    _key_set: KeySet | None = PrivateAttr(default=None)

    @property
    def key_set(self) -> KeySet | None:
        return self._key_set
