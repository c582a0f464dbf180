"""Document identifiers derived from reading timestamps."""

from datetime import datetime

from sensorpost.core.errors import TimestampFormatError

TIMESTAMP_INPUT_FORMAT = "%Y/%m/%d %H:%M:%S"
DOCUMENT_ID_FORMAT = "%Y%m%d%H%M%S"


def parse_timestamp(timestamp: str, input_format: str = TIMESTAMP_INPUT_FORMAT) -> datetime:
    """Parse a naive local timestamp with one-second resolution."""
    try:
        return datetime.strptime(timestamp, input_format)
    except (TypeError, ValueError) as exc:
        raise TimestampFormatError(
            f"timestamp {timestamp!r} does not match {input_format!r}: {exc}"
        ) from exc


def derive_document_id(
    timestamp: str,
    input_format: str = TIMESTAMP_INPUT_FORMAT,
    output_format: str = DOCUMENT_ID_FORMAT,
) -> str:
    """Reformat timestamp into a sortable id; equal seconds give equal ids."""
    return parse_timestamp(timestamp, input_format).strftime(output_format)
