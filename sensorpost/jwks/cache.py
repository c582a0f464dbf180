"""Merged key set for a credential, persisted across runs."""

from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from pathlib import Path

from sensorpost.core.errors import CacheWriteError, KeySetNotFoundError, KeySetParseError
from sensorpost.core.logging import get_logger
from sensorpost.core.settings import SYSTEM_KEY_PROVIDER
from sensorpost.crypto.types import KeySet, ServiceAccountCredential
from sensorpost.jwks.fetcher import KeySetFetcher
from sensorpost.jwks.store import KeySetStore

logger = get_logger(__name__)


def _utcnow() -> datetime:
    return datetime.now(UTC)


class KeySetCache:
    """Returns the cached key set, or downloads and caches both providers' keys.

    Without a max age the cache file is trusted for as long as it exists.
    With one, a cache whose fetch time is unknown or older than the max age
    is refetched.
    """

    def __init__(
        self,
        fetcher: KeySetFetcher,
        store: KeySetStore | None = None,
        system_identity: str = SYSTEM_KEY_PROVIDER,
        max_age: timedelta | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._fetcher = fetcher
        self._store = store or KeySetStore()
        self._system_identity = system_identity
        self._max_age = max_age
        self._clock = clock

    def get(self, cache_path: Path, credential: ServiceAccountCredential) -> KeySet:
        """Return the key set trusted for credential."""
        try:
            cached = self._store.load(cache_path)
        except KeySetNotFoundError:
            logger.info("JWKS cache miss", path=str(cache_path))
        except KeySetParseError as exc:
            logger.warning("JWKS cache unusable", path=str(cache_path), error=str(exc))
        else:
            if not self._is_stale(cached):
                logger.debug("JWKS cache hit", path=str(cache_path), keys_count=len(cached))
                return cached
            logger.info(
                "JWKS cache expired",
                path=str(cache_path),
                fetched_at=cached.fetched_at.isoformat() if cached.fetched_at else None,
            )

        return self._refresh(cache_path, credential)

    def invalidate(self, cache_path: Path) -> None:
        """Drop the cached key set so the next get refetches."""
        self._store.delete(cache_path)
        logger.info("JWKS cache invalidated", path=str(cache_path))

    def _is_stale(self, key_set: KeySet) -> bool:
        if self._max_age is None:
            return False
        if key_set.fetched_at is None:
            return True
        return self._clock() - key_set.fetched_at > self._max_age

    def _refresh(self, cache_path: Path, credential: ServiceAccountCredential) -> KeySet:
        service_keys = self._fetcher.fetch(credential.client_email)
        system_keys = self._fetcher.fetch(self._system_identity)
        merged = service_keys.merge(system_keys).model_copy(
            update={"fetched_at": self._clock()}
        )

        try:
            self._store.save(cache_path, merged)
        except CacheWriteError as exc:
            logger.warning("JWKS cache write failed", path=str(cache_path), error=str(exc))
        else:
            logger.info("JWKS cache written", path=str(cache_path), keys_count=len(merged))
        return merged
