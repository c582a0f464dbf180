"""File persistence for cached key sets."""

from contextlib import suppress
from pathlib import Path

from pydantic import ValidationError

from sensorpost.core.errors import CacheWriteError, KeySetNotFoundError, KeySetParseError
from sensorpost.crypto.types import KeySet

JSON_INDENT = 2


class KeySetStore:
    """Reads and atomically rewrites a pretty-printed JWKS cache file."""

    def load(self, path: Path) -> KeySet:
        """Decode the key set cached at path."""
        try:
            raw = path.read_text(encoding="utf-8")
        except FileNotFoundError as exc:
            raise KeySetNotFoundError(f"no cached key set at {path}") from exc
        except (OSError, UnicodeDecodeError) as exc:
            raise KeySetParseError(f"cannot read cached key set {path}: {exc}") from exc
        try:
            return KeySet.model_validate_json(raw)
        except ValidationError as exc:
            raise KeySetParseError(f"malformed cached key set {path}: {exc}") from exc

    def save(self, path: Path, key_set: KeySet) -> None:
        """Write to a sibling temp file, then rename it over path."""
        tmp = path.with_suffix(path.suffix + ".tmp")
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            tmp.write_text(key_set.model_dump_json(indent=JSON_INDENT) + "\n", encoding="utf-8")
            tmp.replace(path)
        except OSError as exc:
            with suppress(OSError):
                tmp.unlink(missing_ok=True)
            raise CacheWriteError(f"cannot write key set cache {path}: {exc}") from exc

    def delete(self, path: Path) -> None:
        """Remove the cache file; a missing file is not an error."""
        try:
            path.unlink(missing_ok=True)
        except OSError as exc:
            raise CacheWriteError(f"cannot remove key set cache {path}: {exc}") from exc
