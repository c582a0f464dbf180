"""Document writes through the Firestore REST API."""

from typing import Any

import httpx
from pydantic import BaseModel

from sensorpost.core.errors import DocumentWriteError
from sensorpost.core.logging import get_logger
from sensorpost.firestore.session import ServiceSession

logger = get_logger(__name__)


class WriteOptions(BaseModel):
    """Options for write_document.

    With merge, only the payload's fields are replaced and other fields of an
    existing document are kept.
    """

    merge: bool = False


def encode_value(value: Any) -> dict[str, Any]:
    """Encode a flat Python value as a Firestore typed value."""
    if value is None:
        return {"nullValue": None}
    if isinstance(value, bool):
        return {"booleanValue": value}
    if isinstance(value, int):
        return {"integerValue": str(value)}
    if isinstance(value, float):
        return {"doubleValue": value}
    if isinstance(value, str):
        return {"stringValue": value}
    raise TypeError(f"unsupported field type {type(value).__name__}")


def encode_fields(payload: BaseModel) -> dict[str, Any]:
    return {name: encode_value(value) for name, value in payload.model_dump().items()}


def write_document(
    session: ServiceSession,
    collection: str,
    document_id: str,
    payload: BaseModel,
    options: WriteOptions | None = None,
) -> dict[str, Any]:
    """Create or replace collection/document_id with payload's fields."""
    options = options or WriteOptions()
    fields = encode_fields(payload)
    url = f"{session.documents_url}/{collection}/{document_id}"
    params: list[tuple[str, str]] = []
    if options.merge:
        params = [("updateMask.fieldPaths", name) for name in fields]

    try:
        response = session.client.patch(
            url, json={"fields": fields}, params=params, headers=session.headers
        )
        response.raise_for_status()
    except httpx.HTTPStatusError as exc:
        raise DocumentWriteError(
            f"Firestore rejected write of {collection}/{document_id}: "
            f"HTTP {exc.response.status_code} {exc.response.text}"
        ) from exc
    except httpx.HTTPError as exc:
        raise DocumentWriteError(
            f"Firestore write of {collection}/{document_id} failed: {exc}"
        ) from exc

    logger.info("Document written", collection=collection, document_id=document_id)
    return response.json()
