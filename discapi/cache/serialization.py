"""Page payload serialization using orjson.

A cached page is the JSON text of a list of response models, dumped with
their aliases (``_links``, ``lastName``...) exactly as a client receives
it. Fields left as None (e.g. a singer's last name below API version 2.0)
are omitted.
"""

from __future__ import annotations

from typing import Any, Iterable

import orjson
from pydantic import BaseModel


def serialize_page(items: Iterable[BaseModel]) -> str:
    """Serialize response models to the JSON text stored in the cache."""
    return orjson.dumps(
        [item.model_dump(mode="json", by_alias=True, exclude_none=True) for item in items]
    ).decode("utf-8")


def deserialize_page(raw: str | bytes) -> list[dict[str, Any]]:
    """Parse a cached page back to plain dicts."""
    return orjson.loads(raw)
