"""Cache key construction for paginated collection pages.

Convention: cache:{resource_kind}:{page}:{page_size}

Examples:
    cache:singer:1:3
    cache:record:2:10

Every key of a resource kind is indexed under that kind's tag
(``SingerCache``, ``RecordCache``, ``SongCache``) for bulk invalidation.
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

DEFAULT_PAGE = 1
DEFAULT_PAGE_SIZE = 3

_SIGNED_DIGITS = re.compile(r"[+-]?[0-9]+")


class ResourceKind(str, Enum):
    SINGER = "singer"
    RECORD = "record"
    SONG = "song"

    @property
    def tag(self) -> str:
        """Invalidation tag shared by every cached page of this kind."""
        return f"{self.value.capitalize()}Cache"


@dataclass(frozen=True)
class CacheKey:
    resource_kind: ResourceKind
    page: int
    page_size: int

    def __str__(self) -> str:
        return f"cache:{self.resource_kind.value}:{self.page}:{self.page_size}"

    @property
    def tag(self) -> str:
        return self.resource_kind.tag


def coerce_positive(value: Any, default: int) -> int:
    """Return ``value`` as a positive int, or ``default`` when it isn't one.

    Accepts ints and strings of digits (``" 2 "``, ``"+4"``). Booleans,
    floats, ``None``, non-numeric strings and values below 1 fall back.
    """
    if isinstance(value, bool):
        return default
    if isinstance(value, int):
        number = value
    elif isinstance(value, str):
        stripped = value.strip()
        if not _SIGNED_DIGITS.fullmatch(stripped):
            return default
        number = int(stripped)
    else:
        return default
    return number if number > 0 else default


def build_cache_key(
    resource_kind: ResourceKind,
    page: Any,
    page_size: Any,
    default_page: int = DEFAULT_PAGE,
    default_page_size: int = DEFAULT_PAGE_SIZE,
    max_page_size: Optional[int] = None,
) -> CacheKey:
    """Build the key of one page, applying the pagination fallbacks.

    A page size above ``max_page_size`` is clamped to it.
    """
    size = coerce_positive(page_size, default_page_size)
    if max_page_size is not None:
        size = min(size, max_page_size)
    return CacheKey(
        resource_kind=ResourceKind(resource_kind),
        page=coerce_positive(page, default_page),
        page_size=size,
    )


def tag_index_key(tag: str) -> str:
    """Redis sorted set of the keys cached under ``tag``, scored by expiry time."""
    return f"cache:tag:{tag}"


def tag_generation_key(tag: str) -> str:
    """Redis counter bumped on every invalidation of ``tag``."""
    return f"cache:gen:{tag}"
