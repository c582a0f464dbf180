"""Command-line entry point: upload one sensor reading."""

import argparse
import sys
from pathlib import Path

from pydantic import ValidationError

from sensorpost.core.errors import SensorPostError
from sensorpost.core.logging import configure_logging, get_logger
from sensorpost.core.settings import SensorPostSettings
from sensorpost.pipeline import upload_reading

logger = get_logger(__name__)


def program_dir() -> Path:
    """Directory holding the running program, where credentials live by default."""
    return Path(sys.argv[0]).resolve().parent


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sensorpost",
        description="Upload a sensor reading to a Firestore collection.",
    )
    parser.add_argument("-c", "--collection-name", required=True, help="collection name")
    parser.add_argument("-j", "--json", required=True, help="data json string")
    parser.add_argument(
        "--credentials",
        type=Path,
        help="service-account key file (default: next to the program)",
    )
    parser.add_argument(
        "--cache",
        type=Path,
        help="JWKS cache file (default: next to the credentials file)",
    )
    parser.add_argument(
        "--max-cache-age",
        type=int,
        metavar="SECONDS",
        help="refetch public keys when the cache is older than this",
    )
    parser.add_argument(
        "--refresh-keys",
        action="store_true",
        help="discard the JWKS cache before verifying",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """Run one upload and return the process exit code."""
    args = build_parser().parse_args(argv)

    overrides: dict[str, object] = {}
    if args.credentials is not None:
        overrides["credentials_path"] = args.credentials
    if args.cache is not None:
        overrides["jwks_cache_path"] = args.cache
    if args.max_cache_age is not None:
        overrides["jwks_max_age"] = args.max_cache_age
    try:
        settings = SensorPostSettings(**overrides)
    except ValidationError as exc:
        print(f"error: invalid settings: {exc}", file=sys.stderr)
        return 1
    configure_logging(settings.log_level, settings.log_json)

    base_dir = program_dir()
    try:
        document_id = upload_reading(
            settings,
            credentials_path=settings.resolve_credentials_path(base_dir),
            cache_path=settings.resolve_cache_path(base_dir),
            collection=args.collection_name,
            reading_json=args.json,
            refresh_keys=args.refresh_keys,
        )
    except SensorPostError as exc:
        logger.error("Upload failed", error_code=exc.error_code, error=exc.message)
        print(f"error: {exc.message}", file=sys.stderr)
        return 1

    print(document_id)
    return 0


if __name__ == "__main__":
    sys.exit(main())
