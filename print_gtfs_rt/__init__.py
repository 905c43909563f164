"""Decode GTFS-Realtime feeds and print them as text, NDJSON or JSON."""

__version__ = "1.0.0"

from .config import Config, RenderMode, get_config
from .decoder import FeedBindings, FeedDecoder, load_bindings
from .errors import (
    BindingsError,
    FeedDecodeError,
    FetchError,
    FramingError,
    InvalidFeedError,
    MissingEntityArrayError,
    MissingHeaderError,
    PrintGtfsRtError,
    UsageError,
)
from .framing import FrameReader, encode_frame, encode_varint
from .pipeline import Pipeline, run_pipeline
from .render import Renderer, inspect

__all__ = [
    "__version__",
    # Configuration
    "Config",
    "RenderMode",
    "get_config",
    # Decoding
    "FeedBindings",
    "FeedDecoder",
    "load_bindings",
    # Framing
    "FrameReader",
    "encode_frame",
    "encode_varint",
    # Rendering
    "Renderer",
    "inspect",
    # Pipeline
    "Pipeline",
    "run_pipeline",
    # Errors
    "PrintGtfsRtError",
    "UsageError",
    "FramingError",
    "FetchError",
    "BindingsError",
    "FeedDecodeError",
    "InvalidFeedError",
    "MissingHeaderError",
    "MissingEntityArrayError",
]
