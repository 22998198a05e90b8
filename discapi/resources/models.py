"""Request and response models for the catalog resources.

JSON field names follow the public API (``lastName``, ``idSinger``,
``_links``); Python attributes stay snake_case.
"""

from __future__ import annotations

from datetime import time
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

NAME_FIELD = dict(min_length=1, max_length=255)


class Link(BaseModel):
    href: str


class _Response(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: int
    name: str
    links: dict[str, Link] = Field(default_factory=dict, alias="_links")


class _Request(BaseModel):
    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)


# ──────────────────────────────────────────────────────────────────────
# Singers
# ──────────────────────────────────────────────────────────────────────

class SingerResponse(_Response):
    # Exposed from API version 2.0; None is dropped from the JSON
    last_name: Optional[str] = Field(default=None, alias="lastName")


class SingerCreate(_Request):
    name: str = Field(**NAME_FIELD, description="First name")
    last_name: str = Field(**NAME_FIELD, alias="lastName", description="Last name")


class SingerUpdate(_Request):
    name: Optional[str] = Field(default=None, **NAME_FIELD)
    last_name: Optional[str] = Field(default=None, alias="lastName", **NAME_FIELD)


# ──────────────────────────────────────────────────────────────────────
# Records
# ──────────────────────────────────────────────────────────────────────

class RecordResponse(_Response):
    pass


class RecordCreate(_Request):
    name: str = Field(**NAME_FIELD, description="Record title")
    singer_id: int = Field(alias="idSinger", description="Owning singer")


class RecordUpdate(_Request):
    name: Optional[str] = Field(default=None, **NAME_FIELD)
    singer_id: Optional[int] = Field(default=None, alias="idSinger")


# ──────────────────────────────────────────────────────────────────────
# Songs
# ──────────────────────────────────────────────────────────────────────

class SongResponse(_Response):
    duration: time


class SongCreate(_Request):
    name: str = Field(**NAME_FIELD, description="Song title")
    duration: time = Field(description="Length as HH:MM:SS")
    record_id: Optional[int] = Field(default=None, alias="idRecord")


class SongUpdate(_Request):
    name: Optional[str] = Field(default=None, **NAME_FIELD)
    duration: Optional[time] = None
    # Explicit null detaches the song from its record
    record_id: Optional[int] = Field(default=None, alias="idRecord")
