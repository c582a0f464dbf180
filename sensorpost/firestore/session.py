"""Authenticated HTTP session for the Firestore REST API."""

import httpx
import jwt

from sensorpost.core.errors import CredentialError
from sensorpost.core.settings import FIRESTORE_BASE_URL_DEFAULT
from sensorpost.crypto.jwt_manager import FIRESTORE_AUDIENCE, JWTManager
from sensorpost.crypto.types import ServiceAccountCredential


class ServiceSession:
    """Service-account session carrying a self-signed bearer token."""

    def __init__(
        self,
        credential: ServiceAccountCredential,
        access_token: str,
        client: httpx.Client,
        base_url: str,
    ) -> None:
        self.credential = credential
        self.access_token = access_token
        self.client = client
        self.base_url = base_url.rstrip("/")

    @classmethod
    def create(
        cls,
        credential: ServiceAccountCredential,
        client: httpx.Client,
        base_url: str = FIRESTORE_BASE_URL_DEFAULT,
    ) -> "ServiceSession":
        """Mint an access token for credential; requires attached public keys.

        The session borrows client; closing it stays with the caller.
        """
        if credential.key_set is None:
            raise CredentialError("cannot open a session for an unverified credential")
        try:
            token = JWTManager(credential).create_access_token(FIRESTORE_AUDIENCE)
        except (jwt.PyJWTError, ValueError, TypeError) as exc:
            raise CredentialError(f"cannot sign a session token: {exc}") from exc
        return cls(
            credential=credential,
            access_token=token,
            client=client,
            base_url=base_url,
        )

    @property
    def documents_url(self) -> str:
        return (
            f"{self.base_url}/projects/{self.credential.project_id}"
            "/databases/(default)/documents"
        )

    @property
    def headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self.access_token}"}
