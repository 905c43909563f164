"""
Renderer: writes a decoded FeedMessage to a text sink.

Per-entity modes write one entity at a time and leave the feed header out.
Whole-message mode needs the complete message and writes it in one go.
"""

import json
import logging
from typing import Any, Dict, Iterator, Optional, TextIO

from .config import Config, RenderMode

logger = logging.getLogger(__name__)

# ANSI SGR codes used for the human-readable dump
STYLES = {
    "string": "32",   # green
    "number": "33",   # yellow
    "boolean": "33",
    "null": "1",      # bold
    "special": "36",  # cyan, for truncated containers
}


def to_json(value: Any) -> str:
    """Serialize to compact JSON, same spacing as JSON.stringify."""
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False)


class _Inspector:
    def __init__(self, depth: Optional[int], colors: bool):
        self.depth = depth
        self.colors = colors

    def stylize(self, text: str, style: str) -> str:
        if not self.colors:
            return text
        return f"\x1b[{STYLES[style]}m{text}\x1b[0m"

    def format(self, value: Any, level: int = 0) -> str:
        if isinstance(value, dict):
            if not value:
                return "{}"
            if self.depth is not None and level > self.depth:
                return self.stylize("{...}", "special")
            items = [f"{self.format_key(k)}: {self.format(v, level + 1)}" for k, v in value.items()]
            return self.block("{", items, "}", level)

        if isinstance(value, (list, tuple)):
            if not value:
                return "[]"
            if self.depth is not None and level > self.depth:
                return self.stylize("[...]", "special")
            items = [self.format(v, level + 1) for v in value]
            return self.block("[", items, "]", level)

        if value is None:
            return self.stylize("None", "null")
        if isinstance(value, bool):
            return self.stylize(repr(value), "boolean")
        if isinstance(value, (int, float)):
            return self.stylize(repr(value), "number")
        if isinstance(value, str):
            return self.stylize(repr(value), "string")
        return repr(value)

    @staticmethod
    def format_key(key: Any) -> str:
        if isinstance(key, str) and key.isidentifier():
            return key
        return repr(key)

    @staticmethod
    def block(opening: str, items, closing: str, level: int) -> str:
        inner = "  " * (level + 1)
        body = ",\n".join(inner + item for item in items)
        return f"{opening}\n{body}\n{'  ' * level}{closing}"


def inspect(value: Any, depth: Optional[int] = None, colors: bool = False) -> str:
    """Return a human-readable, indented dump of plain Python data.

    Args:
        value: dicts, lists and scalars as produced by the decoder
        depth: number of nested levels to print; deeper containers are
            shown as {...} or [...]. None prints everything.
        colors: wrap scalars in ANSI colour escapes

    Returns:
        The formatted text, without a trailing newline
    """
    return _Inspector(depth, colors).format(value)


class Renderer:
    """Renders decoded feeds in the configured RenderMode.

    chunks() yields the output piece by piece (one entity at a time in the
    per-entity modes) so the caller decides how each piece is written;
    render() writes them straight to the sink.
    """

    def __init__(self, config: Config, out: Optional[TextIO] = None):
        self.config = config
        self.mode = config.render_mode
        self.out = out

    def inspect(self, value: Any) -> str:
        return inspect(value, depth=self.config.depth, colors=self.config.colorize)

    def render(self, message: Dict[str, Any]) -> None:
        """Write one FeedMessage to the sink. The caller flushes it afterwards."""
        for chunk in self.chunks(message):
            self.out.write(chunk)

    def chunks(self, message: Dict[str, Any]) -> Iterator[str]:
        if self.mode is RenderMode.WHOLE_MESSAGE:
            yield from self.whole_message(message)
        elif self.mode is RenderMode.RECORDS_JSON_ARRAY:
            yield from self.json_array(message["entity"])
        elif self.mode is RenderMode.RECORDS_NDJSON:
            yield from self.ndjson(message["entity"])
        else:
            yield from self.text(message["entity"])
        logger.debug(f"Rendered {len(message['entity'])} entities as {self.mode.value}")

    def whole_message(self, message: Dict[str, Any]) -> Iterator[str]:
        if self.config.whole_message_json:
            yield to_json(message)
        else:
            yield self.inspect(message)

    def json_array(self, entities) -> Iterator[str]:
        yield "[\n"
        last = len(entities) - 1
        for i, entity in enumerate(entities):
            yield to_json(entity) + (",\n" if i < last else "\n")
        yield "]\n"

    def ndjson(self, entities) -> Iterator[str]:
        for entity in entities:
            yield to_json(entity) + "\n"

    def text(self, entities) -> Iterator[str]:
        for entity in entities:
            yield self.inspect(entity) + "\n"
