"""Example index mapping and document model.

A reference for writing mappings:

- ``mappings.properties`` declares the fields stored for each document.
- ``store: true`` keeps a field in its own storage block, so it can be
  returned without loading ``_source``.
- ``fielddata`` enables in-memory aggregation on a field (off by default).
- ``boost`` weights a field's relevance score at query time (default 1).
- ``analyzer`` / ``search_analyzer`` pick the tokenizer used at index and
  search time (default ``standard``).
- ``copy_to`` copies a field's value into another field.
- ``index: false`` stores a field without making it searchable.
- ``null_value`` substitutes a value for explicit nulls (not for ``text``).
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel

EXAMPLE_USER_MAPPING: dict[str, Any] = {
    "mappings": {
        "properties": {
            "userid": {"type": "keyword", "store": True},
            "username": {"type": "text"},
            "userdesc": {"type": "text"},
            "usertel": {"type": "long"},
        }
    }
}


class ExampleUser(BaseModel):
    """Document shape matching ``EXAMPLE_USER_MAPPING``."""

    userid: str
    username: str = ""
    userdesc: str = ""
    usertel: int = 0
