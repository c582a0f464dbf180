"""Download of public key sets published for a service-account identity."""

import httpx
from pydantic import ValidationError

from sensorpost.core.errors import KeyFetchError, KeySetParseError
from sensorpost.core.logging import get_logger
from sensorpost.core.settings import JWKS_URL_TEMPLATE_DEFAULT
from sensorpost.crypto.types import KeySet

logger = get_logger(__name__)


class KeySetFetcher:
    """Fetches a provider's JWKS over HTTPS. No caching and no retries.

    The caller owns client and closes it.
    """

    def __init__(
        self,
        client: httpx.Client,
        url_template: str = JWKS_URL_TEMPLATE_DEFAULT,
    ) -> None:
        self._client = client
        self._url_template = url_template

    def url_for(self, identity: str) -> str:
        return self._url_template.format(identity=identity)

    def fetch(self, identity: str) -> KeySet:
        """Retrieve and parse the current key set of identity."""
        url = self.url_for(identity)
        try:
            response = self._client.get(url)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise KeyFetchError(
                identity, f"HTTP {exc.response.status_code} from {url}"
            ) from exc
        except httpx.HTTPError as exc:
            raise KeyFetchError(identity, f"request to {url} failed: {exc}") from exc

        try:
            key_set = KeySet.model_validate_json(response.content)
        except ValidationError as exc:
            raise KeySetParseError(f"invalid JWKS document from {url}: {exc}") from exc

        logger.info("JWKS fetched", identity=identity, keys_count=len(key_set))
        return key_set
