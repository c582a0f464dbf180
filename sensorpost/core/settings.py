"""Uploader settings loaded from environment variables."""

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

SYSTEM_KEY_PROVIDER = "securetoken@system.gserviceaccount.com"
JWKS_URL_TEMPLATE_DEFAULT = "https://www.googleapis.com/service_accounts/v1/jwk/{identity}"
FIRESTORE_BASE_URL_DEFAULT = "https://firestore.googleapis.com/v1"
HTTP_TIMEOUT_DEFAULT = 10.0
CREDENTIALS_FILENAME = "home-env-firebase-adminsdk.json"
JWKS_CACHE_FILENAME = "cached_jwks.jwks"


class SensorPostSettings(BaseSettings):
    """Paths, key providers and transport settings for one upload run."""

    model_config = SettingsConfigDict(env_prefix="SENSORPOST_")

    credentials_path: Path | None = None
    jwks_cache_path: Path | None = None
    jwks_max_age: int | None = None
    system_key_provider: str = SYSTEM_KEY_PROVIDER
    jwks_url_template: str = JWKS_URL_TEMPLATE_DEFAULT
    firestore_base_url: str = FIRESTORE_BASE_URL_DEFAULT
    http_timeout: float = HTTP_TIMEOUT_DEFAULT
    log_level: str = "info"
    log_json: bool = False

    def resolve_credentials_path(self, program_dir: Path) -> Path:
        """Return the configured credentials path, defaulting to program_dir."""
        if self.credentials_path is not None:
            return self.credentials_path
        return program_dir / CREDENTIALS_FILENAME

    def resolve_cache_path(self, program_dir: Path) -> Path:
        """Return the configured cache path, defaulting next to the credentials."""
        if self.jwks_cache_path is not None:
            return self.jwks_cache_path
        return self.resolve_credentials_path(program_dir).with_name(JWKS_CACHE_FILENAME)
