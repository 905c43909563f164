"""
Runtime configuration for print-gtfs-rt.

A single immutable Config is built from the parsed command line and the
environment at startup, then handed to the frame reader, the decoder and
the renderer.

Environment variables:
    PRINT_GTFS_RT_ENV=dev  -> verbose diagnostics (same as --verbose)
    GTFS_RT_BINDINGS       -> default for --gtfs-rt-bindings
"""

import argparse
import enum
import os
from dataclasses import dataclass
from typing import Mapping, Optional


class RenderMode(enum.Enum):
    """How a decoded feed is written to the output."""

    RECORDS_TEXT = "records-text"
    RECORDS_NDJSON = "records-ndjson"
    RECORDS_JSON_ARRAY = "records-json-array"
    WHOLE_MESSAGE = "whole-message"


@dataclass(frozen=True)
class Config:
    """Settings for one invocation. Never mutated after construction."""

    # Input
    length_prefixed: bool = False
    url: Optional[str] = None
    max_frame_size: Optional[int] = None

    # Decoding
    bindings: Optional[str] = None

    # Output
    ndjson: bool = False
    single_json: bool = False
    include_all: bool = False
    depth: Optional[int] = None
    colorize: bool = False

    # Diagnostics
    verbose: bool = False

    # HTTP source
    request_timeout_seconds: float = 30.0
    max_retries: int = 3
    retry_backoff_seconds: float = 1.0

    @property
    def render_mode(self) -> RenderMode:
        if self.include_all:
            return RenderMode.WHOLE_MESSAGE
        if self.single_json:
            return RenderMode.RECORDS_JSON_ARRAY
        if self.ndjson:
            return RenderMode.RECORDS_NDJSON
        return RenderMode.RECORDS_TEXT

    @property
    def whole_message_json(self) -> bool:
        """Whether whole-message mode prints JSON rather than a text dump."""
        return self.include_all and self.single_json


def get_config(
    args: argparse.Namespace,
    environ: Optional[Mapping[str, str]] = None,
    colorize: bool = False,
) -> Config:
    """Build the Config from parsed arguments and environment variables."""
    environ = os.environ if environ is None else environ

    return Config(
        length_prefixed=args.length_prefixed,
        url=args.url,
        max_frame_size=args.max_frame_size,
        bindings=args.gtfs_rt_bindings or environ.get("GTFS_RT_BINDINGS") or None,
        # --include-all implies not newline-delimited JSON
        ndjson=args.json and not args.include_all,
        single_json=args.single_json,
        include_all=args.include_all,
        depth=args.depth,
        colorize=colorize,
        verbose=args.verbose or environ.get("PRINT_GTFS_RT_ENV") == "dev",
    )
