"""End-to-end upload of one sensor reading."""

from datetime import timedelta
from pathlib import Path

import httpx

from sensorpost.core.logging import get_logger
from sensorpost.core.settings import SensorPostSettings
from sensorpost.crypto.credentials import attach_key_set, load_credentials
from sensorpost.crypto.verifier import verify_credential
from sensorpost.firestore.documents import WriteOptions, write_document
from sensorpost.firestore.session import ServiceSession
from sensorpost.jwks.cache import KeySetCache
from sensorpost.jwks.fetcher import KeySetFetcher
from sensorpost.readings.doc_id import derive_document_id
from sensorpost.readings.types import parse_reading

logger = get_logger(__name__)


def build_key_set_cache(settings: SensorPostSettings, client: httpx.Client) -> KeySetCache:
    """Wire a KeySetCache from settings."""
    fetcher = KeySetFetcher(client=client, url_template=settings.jwks_url_template)
    max_age = (
        timedelta(seconds=settings.jwks_max_age)
        if settings.jwks_max_age is not None
        else None
    )
    return KeySetCache(
        fetcher,
        system_identity=settings.system_key_provider,
        max_age=max_age,
    )


def upload_reading(
    settings: SensorPostSettings,
    credentials_path: Path,
    cache_path: Path,
    collection: str,
    reading_json: str,
    client: httpx.Client | None = None,
    refresh_keys: bool = False,
) -> str:
    """Verify the credential, then upsert the reading; returns the document id."""
    reading = parse_reading(reading_json)
    credential = load_credentials(credentials_path)

    owns_client = client is None
    http = client or httpx.Client(timeout=settings.http_timeout)
    try:
        cache = build_key_set_cache(settings, http)
        if refresh_keys:
            cache.invalidate(cache_path)
        attach_key_set(credential, cache.get(cache_path, credential))
        verify_credential(credential)

        document_id = derive_document_id(reading.datetime)
        session = ServiceSession.create(
            credential, client=http, base_url=settings.firestore_base_url
        )
        write_document(session, collection, document_id, reading, WriteOptions())
    finally:
        if owns_client:
            http.close()

    logger.info("Reading uploaded", collection=collection, document_id=document_id)
    return document_id
