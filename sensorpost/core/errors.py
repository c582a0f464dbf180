"""Exception hierarchy for the uploader pipeline."""

from typing import Any


class SensorPostError(Exception):
    """Base error for every failure the uploader reports."""

    error_code: str = "SENSORPOST_ERROR"

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}


class KeySetNotFoundError(SensorPostError):
    """No cached key set exists at the requested path."""

    error_code = "KEYSET_NOT_FOUND"


class KeySetParseError(SensorPostError):
    """A key set document could not be decoded."""

    error_code = "KEYSET_PARSE_ERROR"


class KeyFetchError(SensorPostError):
    """A key provider could not be reached or answered with an error."""

    error_code = "KEY_FETCH_ERROR"

    def __init__(self, identity: str, message: str) -> None:
        super().__init__(f"{identity}: {message}", {"identity": identity})
        self.identity = identity


class CacheWriteError(SensorPostError):
    """The key set cache file could not be written."""

    error_code = "CACHE_WRITE_ERROR"


class CredentialError(SensorPostError):
    """The service-account credential is missing, malformed or misused."""

    error_code = "CREDENTIAL_ERROR"


class VerificationError(SensorPostError):
    """A credential consistency check failed."""

    error_code = "VERIFICATION_ERROR"

    def __init__(self, check: str, message: str) -> None:
        super().__init__(f"{check} check failed: {message}", {"check": check})
        self.check = check


class TimestampFormatError(SensorPostError):
    """A timestamp does not match the expected calendar pattern."""

    error_code = "TIMESTAMP_FORMAT_ERROR"


class PayloadParseError(SensorPostError):
    """The sensor reading JSON is invalid."""

    error_code = "PAYLOAD_PARSE_ERROR"


class DocumentWriteError(SensorPostError):
    """The document store rejected or never received a write."""

    error_code = "DOCUMENT_WRITE_ERROR"
