"""
Unit tests for cached page serialization.
"""

from datetime import time

from discapi.cache import deserialize_page, serialize_page
from discapi.resources.models import Link, SingerResponse, SongResponse


class TestSerializePage:
    def test_uses_aliases_and_drops_none(self):
        items = [
            SingerResponse(id=1, name="Nina", links={"self": Link(href="/api/singers/1")}),
            SingerResponse(id=2, name="Billie", last_name="Holiday"),
        ]

        raw = serialize_page(items)

        assert deserialize_page(raw) == [
            {"id": 1, "name": "Nina", "_links": {"self": {"href": "/api/singers/1"}}},
            {"id": 2, "name": "Billie", "_links": {}, "lastName": "Holiday"},
        ]

    def test_duration_as_clock_time(self):
        raw = serialize_page([SongResponse(id=3, name="Sinnerman", duration=time(0, 10, 20))])

        assert deserialize_page(raw.encode("utf-8"))[0]["duration"] == "00:10:20"

    def test_empty_page(self):
        assert serialize_page([]) == "[]"
