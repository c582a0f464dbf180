"""Consistency checks for a service-account credential and its key set."""

import jwt
from pydantic import validate_email

from sensorpost.core.errors import VerificationError
from sensorpost.core.logging import get_logger
from sensorpost.crypto.jwt_manager import IDENTITY_AUDIENCE, JWTManager
from sensorpost.crypto.types import ServiceAccountCredential

logger = get_logger(__name__)


def _check_identity(credential: ServiceAccountCredential) -> None:
    try:
        validate_email(credential.client_email)
    except ValueError as exc:
        raise VerificationError(
            "identity", f"malformed client_email {credential.client_email!r}"
        ) from exc


def _check_key_set(credential: ServiceAccountCredential) -> None:
    key_set = credential.key_set
    if key_set is None:
        raise VerificationError("key_set", "no key set attached to the credential")
    if credential.private_key_id not in key_set:
        raise VerificationError(
            "key_set",
            f"no public key with kid {credential.private_key_id!r} "
            f"among {len(key_set)} trusted keys",
        )


def _check_required_fields(credential: ServiceAccountCredential) -> None:
    for field in ("private_key", "client_email"):
        if not getattr(credential, field).strip():
            raise VerificationError("required_fields", f"{field} is empty")


def _check_signature(credential: ServiceAccountCredential) -> None:
    assert credential.key_set is not None
    public_key = credential.key_set.get(credential.private_key_id)
    assert public_key is not None
    manager = JWTManager(credential)
    try:
        token = manager.create_access_token(IDENTITY_AUDIENCE)
        manager.verify_token(token, public_key, audience=IDENTITY_AUDIENCE)
    except (jwt.PyJWTError, ValueError, TypeError) as exc:
        raise VerificationError(
            "signature",
            f"private key does not match public key {credential.private_key_id!r}: {exc}",
        ) from exc


def verify_credential(credential: ServiceAccountCredential) -> None:
    """Run every check in order, failing on the first violation."""
    _check_identity(credential)
    _check_key_set(credential)
    _check_required_fields(credential)
    _check_signature(credential)
    logger.info(
        "Credential verified",
        client_email=credential.client_email,
        kid=credential.private_key_id,
    )
