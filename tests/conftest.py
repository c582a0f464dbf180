"""Shared test fixtures for sensorpost."""

import json
import secrets
from collections.abc import Callable, Iterator
from dataclasses import dataclass
from pathlib import Path

import httpx
import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa
from jwt.algorithms import RSAAlgorithm

from sensorpost.crypto.types import JWKEntry, KeySet, ServiceAccountCredential

SERVICE_EMAIL = "uploader@home-env.iam.gserviceaccount.com"
SYSTEM_EMAIL = "securetoken@system.gserviceaccount.com"


@dataclass(frozen=True)
class ServiceAccountKey:
    """Private key as Google issues it, with the JWK it publishes for it."""

    private_key_id: str
    private_key_pem: str
    public_jwk: JWKEntry


def new_service_account_key() -> ServiceAccountKey:
    """Generate an RSA-2048 key with a 40-hex-digit id like Google's."""
    private_key = rsa.generate_private_key(public_exponent=65537, key_size=2048)
    private_key_id = secrets.token_hex(20)
    pem = private_key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    ).decode()
    jwk = RSAAlgorithm.to_jwk(private_key.public_key(), as_dict=True)
    return ServiceAccountKey(
        private_key_id=private_key_id,
        private_key_pem=pem,
        public_jwk=JWKEntry(kid=private_key_id, n=jwk["n"], e=jwk["e"]),
    )


@pytest.fixture(autouse=True)
def _clear_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep SENSORPOST_* variables from the host out of settings."""
    for name in ("CREDENTIALS_PATH", "JWKS_CACHE_PATH", "JWKS_MAX_AGE", "LOG_JSON"):
        monkeypatch.delenv(f"SENSORPOST_{name}", raising=False)


@pytest.fixture(scope="session")
def service_key() -> ServiceAccountKey:
    """Key pair standing in for the service account's own key."""
    return new_service_account_key()


@pytest.fixture(scope="session")
def system_key() -> ServiceAccountKey:
    """Key pair standing in for the system provider's signing key."""
    return new_service_account_key()


@pytest.fixture
def credential_data(service_key: ServiceAccountKey) -> dict[str, str]:
    """Contents of a service-account key file."""
    return {
        "type": "service_account",
        "project_id": "home-env",
        "private_key_id": service_key.private_key_id,
        "private_key": service_key.private_key_pem,
        "client_email": SERVICE_EMAIL,
        "client_id": "1234567890",
        "auth_uri": "https://accounts.google.com/o/oauth2/auth",
        "token_uri": "https://oauth2.googleapis.com/token",
    }


@pytest.fixture
def credential(credential_data: dict[str, str]) -> ServiceAccountCredential:
    return ServiceAccountCredential.model_validate(credential_data)


@pytest.fixture
def credentials_file(tmp_path: Path, credential_data: dict[str, str]) -> Path:
    path = tmp_path / "home-env-firebase-adminsdk.json"
    path.write_text(json.dumps(credential_data))
    return path


@pytest.fixture
def service_key_set(service_key: ServiceAccountKey) -> KeySet:
    return KeySet(keys=(service_key.public_jwk,))


@pytest.fixture
def system_key_set(system_key: ServiceAccountKey) -> KeySet:
    return KeySet(keys=(system_key.public_jwk,))


class FakeGoogleAPIs:
    """Routes requests to fake JWKS and Firestore endpoints and records them."""

    def __init__(self, jwks: dict[str, KeySet]) -> None:
        self.jwks = jwks
        self.requests: list[httpx.Request] = []
        self.jwks_status = 200
        self.firestore_status = 200

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.url.host == "www.googleapis.com":
            identity = request.url.path.rsplit("/", 1)[-1]
            if self.jwks_status != 200:
                return httpx.Response(self.jwks_status, json={"error": "unavailable"})
            if identity not in self.jwks:
                return httpx.Response(404, json={"error": "not found"})
            body = {"keys": [k.model_dump() for k in self.jwks[identity].keys]}
            return httpx.Response(200, json=body)
        if request.url.host == "firestore.googleapis.com":
            if self.firestore_status != 200:
                return httpx.Response(self.firestore_status, text="denied")
            body = json.loads(request.content)
            name = request.url.path.removeprefix("/v1/")
            return httpx.Response(200, json={"name": name, **body})
        return httpx.Response(404)

    def jwks_requests(self) -> list[httpx.Request]:
        return [r for r in self.requests if r.url.host == "www.googleapis.com"]

    def firestore_requests(self) -> list[httpx.Request]:
        return [r for r in self.requests if r.url.host == "firestore.googleapis.com"]


@pytest.fixture
def google(service_key_set: KeySet, system_key_set: KeySet) -> FakeGoogleAPIs:
    return FakeGoogleAPIs({SERVICE_EMAIL: service_key_set, SYSTEM_EMAIL: system_key_set})


@pytest.fixture
def http_client(google: FakeGoogleAPIs) -> Iterator[httpx.Client]:
    with httpx.Client(transport=httpx.MockTransport(google.handler)) as client:
        yield client


@pytest.fixture
def make_key_set() -> Callable[..., KeySet]:
    """Build a KeySet of dummy entries with the given kids."""

    def _make(*kids: str, material: str = "AQAB") -> KeySet:
        return KeySet(keys=tuple(JWKEntry(kid=kid, n=f"modulus-{kid}", e=material) for kid in kids))

    return _make
