"""Tests for the render modes and the human-readable dump."""

import io
import json

import pytest

from conftest import entity_dict
from print_gtfs_rt.config import Config, RenderMode
from print_gtfs_rt.render import Renderer, inspect, to_json

EMPTY_FEED = {"header": {"gtfs_realtime_version": "2.0"}, "entity": []}
TWO_ENTITY_FEED = {
    "header": {"gtfs_realtime_version": "2.0"},
    "entity": [entity_dict("e1"), entity_dict("e2")],
}


def render(message, **config):
    out = io.StringIO()
    Renderer(Config(**config), out).render(message)
    return out.getvalue()


class TestRenderMode:

    @pytest.mark.parametrize("flags, mode", [
        ({}, RenderMode.RECORDS_TEXT),
        ({"ndjson": True}, RenderMode.RECORDS_NDJSON),
        ({"single_json": True}, RenderMode.RECORDS_JSON_ARRAY),
        ({"single_json": True, "ndjson": True}, RenderMode.RECORDS_JSON_ARRAY),
        ({"include_all": True}, RenderMode.WHOLE_MESSAGE),
        ({"include_all": True, "single_json": True, "ndjson": True}, RenderMode.WHOLE_MESSAGE),
    ])
    def test_precedence(self, flags, mode):
        assert Config(**flags).render_mode is mode


class TestRenderer:

    def test_ndjson_empty_feed_prints_nothing(self):
        assert render(EMPTY_FEED, ndjson=True) == ""

    def test_whole_message_single_json(self):
        output = render(EMPTY_FEED, include_all=True, single_json=True)

        assert output == '{"header":{"gtfs_realtime_version":"2.0"},"entity":[]}'

    def test_json_array_empty_feed(self):
        assert render(EMPTY_FEED, single_json=True) == "[\n]\n"

    def test_json_array_two_entities(self):
        output = render(TWO_ENTITY_FEED, single_json=True)

        e1, e2 = TWO_ENTITY_FEED["entity"]
        assert output == "[\n" + to_json(e1) + ",\n" + to_json(e2) + "\n]\n"
        assert json.loads(output) == [e1, e2]

    def test_ndjson_matches_whole_message_entities(self):
        lines = render(TWO_ENTITY_FEED, ndjson=True).splitlines()
        whole = json.loads(render(TWO_ENTITY_FEED, include_all=True, single_json=True))

        assert [json.loads(line) for line in lines] == whole["entity"]

    def test_per_entity_modes_omit_header(self):
        for flags in ({}, {"ndjson": True}, {"single_json": True}):
            assert "gtfs_realtime_version" not in render(TWO_ENTITY_FEED, **flags)

    def test_text_prints_one_block_per_entity(self):
        output = render(TWO_ENTITY_FEED)

        assert output == (
            inspect(entity_dict("e1")) + "\n" + inspect(entity_dict("e2")) + "\n"
        )
        assert "id: 'e1'" in output

    def test_whole_message_text_includes_header(self):
        output = render(EMPTY_FEED, include_all=True)

        assert output == (
            "{\n"
            "  header: {\n"
            "    gtfs_realtime_version: '2.0'\n"
            "  },\n"
            "  entity: []\n"
            "}"
        )

    def test_text_respects_depth_and_colors(self):
        output = render(TWO_ENTITY_FEED, depth=0, colorize=True)

        assert "vehicle: \x1b[36m{...}\x1b[0m" in output
        assert "id: \x1b[32m'e1'\x1b[0m" in output

    def test_json_keeps_non_ascii(self):
        message = {"header": {}, "entity": [{"id": "Zürich"}]}

        assert render(message, ndjson=True) == '{"id":"Zürich"}\n'


class TestInspect:

    def test_nested_layout(self):
        assert inspect({"a": [1, "x"], "b": None}) == (
            "{\n"
            "  a: [\n"
            "    1,\n"
            "    'x'\n"
            "  ],\n"
            "  b: None\n"
            "}"
        )

    def test_depth_truncates_containers(self):
        value = {"a": {"b": {"c": 1}}, "l": [[1]]}

        assert inspect(value, depth=0) == "{\n  a: {...},\n  l: [...]\n}"
        assert inspect(value, depth=1) == (
            "{\n"
            "  a: {\n"
            "    b: {...}\n"
            "  },\n"
            "  l: [\n"
            "    [...]\n"
            "  ]\n"
            "}"
        )

    def test_empty_containers_are_never_truncated(self):
        assert inspect({"a": {}, "b": []}, depth=0) == "{\n  a: {},\n  b: []\n}"

    def test_non_identifier_keys_are_quoted(self):
        assert inspect({"stop-id": 1}) == "{\n  'stop-id': 1\n}"

    @pytest.mark.parametrize("value, expected", [
        ("x", "\x1b[32m'x'\x1b[0m"),
        (3, "\x1b[33m3\x1b[0m"),
        (True, "\x1b[33mTrue\x1b[0m"),
        (None, "\x1b[1mNone\x1b[0m"),
    ])
    def test_colors(self, value, expected):
        assert inspect(value, colors=True) == expected
