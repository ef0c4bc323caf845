"""Document payloads — Tagged union of pre-serialized and structured bodies.

Callers may hand a document to ``insert_doc`` either as JSON they already
serialized (``bytes`` or ``str``) or as a structured value (a mapping or a
pydantic model). ``as_payload()`` normalizes both into a ``Payload`` so the
clients only ever deal with one shape.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any, Literal

from pydantic import BaseModel

from searchconn.exceptions import InvalidPayloadError


def load_json_object(data: str | bytes, what: str = "payload") -> dict[str, Any]:
    """Decode *data* and require a JSON object at the top level."""
    try:
        value = json.loads(data)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise InvalidPayloadError(f"The {what} is not valid JSON: {e}") from e
    if not isinstance(value, dict):
        raise InvalidPayloadError(f"The {what} must be a JSON object, got {type(value).__name__}.")
    return value


class SerializedPayload(BaseModel):
    """A document body that is already serialized JSON."""

    kind: Literal["serialized"] = "serialized"
    data: bytes

    def to_document(self) -> dict[str, Any]:
        return load_json_object(self.data)


class StructuredPayload(BaseModel):
    """A document body that still needs serialization."""

    kind: Literal["structured"] = "structured"
    value: Any

    def to_document(self) -> dict[str, Any]:
        if isinstance(self.value, BaseModel):
            return self.value.model_dump(mode="json", by_alias=True)
        return dict(self.value)


Payload = SerializedPayload | StructuredPayload


def as_payload(value: Any) -> Payload:
    """Coerce a caller-supplied document into a ``Payload``.

    Args:
        value: ``bytes``/``str`` JSON, a mapping, a pydantic model, or a payload.

    Returns:
        The matching payload variant.

    Raises:
        InvalidPayloadError: If the value has none of the supported shapes.
    """
    if isinstance(value, SerializedPayload | StructuredPayload):
        return value
    if isinstance(value, bytes | bytearray):
        return SerializedPayload(data=bytes(value))
    if isinstance(value, str):
        return SerializedPayload(data=value.encode("utf-8"))
    if isinstance(value, Mapping | BaseModel):
        return StructuredPayload(value=value)
    raise InvalidPayloadError(f"Unsupported payload type: {type(value).__name__}")
