"""Service-account credential loading and key set attachment."""

from pathlib import Path

from pydantic import ValidationError

from sensorpost.core.errors import CredentialError
from sensorpost.crypto.types import KeySet, ServiceAccountCredential


def load_credentials(path: Path) -> ServiceAccountCredential:
    """Read a service-account JSON key file."""
    try:
        raw = path.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise CredentialError(f"credentials file not found: {path}") from exc
    except OSError as exc:
        raise CredentialError(f"cannot read credentials file {path}: {exc}") from exc
    try:
        return ServiceAccountCredential.model_validate_json(raw)
    except ValidationError as exc:
        raise CredentialError(f"invalid credentials file {path}: {exc}") from exc


def attach_key_set(credential: ServiceAccountCredential, key_set: KeySet) -> None:
    """Attach the trusted public keys to a credential; allowed exactly once."""
    if credential.key_set is not None:
        raise CredentialError("a key set is already attached to this credential")
    credential._key_set = key_set
