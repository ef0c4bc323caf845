"""Document model — A stored document as returned by a get request."""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any, TypeVar

from pydantic import BaseModel, Field

_M = TypeVar("_M", bound=BaseModel)


class Document(BaseModel):
    """A single stored document and its metadata."""

    index: str = Field(description="Index the document lives in")
    id: str = Field(description="Document identifier")
    version: int | None = Field(default=None, description="Document version reported by the backend")
    source: dict[str, Any] = Field(default_factory=dict, description="The stored ``_source`` body")

    @property
    def raw(self) -> bytes:
        """The ``_source`` body re-encoded as compact UTF-8 JSON.

        Both client libraries decode the response before returning it, so the
        stored bytes are not available. The encoding keeps key order and
        non-ASCII text but not the whitespace or number formatting of the
        body that was indexed.
        """
        return json.dumps(self.source, ensure_ascii=False, separators=(",", ":")).encode("utf-8")

    def parse(self, model: type[_M]) -> _M:
        """Validate the source body into *model*."""
        return model.model_validate(self.source)

    @classmethod
    def from_response(cls, response: Mapping[str, Any]) -> Document:
        return cls(
            index=response.get("_index", ""),
            id=str(response.get("_id", "")),
            version=response.get("_version"),
            source=dict(response.get("_source") or {}),
        )
