"""
Feed decoder: turns one frame into a canonical FeedMessage dict.

Parsing itself is delegated to GTFS-RT bindings. By default these are the
protobuf classes shipped in gtfs-realtime-bindings; any other module can be
plugged in with --gtfs-rt-bindings, either as a dotted module name or as a
path to a .py file. A bindings module provides one of:

    decode(data) -> raw object  and  to_object(raw) -> dict
    a protobuf FeedMessage class, at module level or under transit_realtime
"""

import importlib
import importlib.util
import logging
import os
from typing import Any, Callable, Dict, Optional

from google.protobuf.json_format import MessageToDict

from .errors import (
    BindingsError,
    InvalidFeedError,
    MissingEntityArrayError,
    MissingHeaderError,
)

logger = logging.getLogger(__name__)

DEFAULT_BINDINGS = "google.transit.gtfs_realtime_pb2"


class FeedBindings:
    """The decode/to_object pair used to parse a frame."""

    def __init__(self, decode: Callable[[bytes], Any], to_object: Callable[[Any], Any],
                 name: str = DEFAULT_BINDINGS):
        self.decode = decode
        self.to_object = to_object
        self.name = name

    @classmethod
    def from_module(cls, module) -> "FeedBindings":
        name = getattr(module, "__name__", repr(module))

        decode = getattr(module, "decode", None)
        to_object = getattr(module, "to_object", None)
        if callable(decode) and callable(to_object):
            return cls(decode, to_object, name)

        namespace = getattr(module, "transit_realtime", module)
        feed_message = getattr(namespace, "FeedMessage", None)
        if feed_message is None:
            raise BindingsError(
                f"GTFS-RT bindings {name} provide neither decode/to_object nor FeedMessage"
            )
        return cls(feed_message.FromString, protobuf_to_object, name)


def protobuf_to_object(message) -> Dict[str, Any]:
    """Convert a protobuf FeedMessage into plain Python containers."""
    return MessageToDict(message, preserving_proto_field_name=True)


def load_bindings(reference: Optional[str] = None) -> FeedBindings:
    """Resolve a bindings reference to a FeedBindings instance.

    :param reference: dotted module name, or path to a Python file relative
        to the working directory; None selects gtfs-realtime-bindings
    :raises BindingsError: if the module cannot be imported
    """
    reference = reference or DEFAULT_BINDINGS
    try:
        if reference.endswith(".py") or os.sep in reference:
            path = os.path.abspath(reference)
            spec = importlib.util.spec_from_file_location(
                os.path.splitext(os.path.basename(path))[0], path
            )
            if spec is None or spec.loader is None:
                raise BindingsError(f"cannot load GTFS-RT bindings from {path}")
            module = importlib.util.module_from_spec(spec)
            spec.loader.exec_module(module)
        else:
            module = importlib.import_module(reference)
    except BindingsError:
        raise
    except Exception as e:
        # ImportError, OSError, or anything the module raises while it runs
        raise BindingsError(f"cannot load GTFS-RT bindings {reference}: {e}") from e

    logger.debug(f"Using GTFS-RT bindings {reference}")
    return FeedBindings.from_module(module)


class FeedDecoder:
    """Decodes frames and validates the resulting FeedMessage."""

    def __init__(self, bindings: Optional[FeedBindings] = None):
        self.bindings = bindings or load_bindings()

    def decode(self, frame: bytes) -> Dict[str, Any]:
        """Decode a frame into a dict with 'header' and an 'entity' list.

        :raises InvalidFeedError: if the bytes cannot be parsed
        :raises MissingHeaderError: if the message has no header
        :raises MissingEntityArrayError: if 'entity' is not a list
        """
        try:
            data = self.bindings.to_object(self.bindings.decode(frame))
        except Exception as e:
            # google.protobuf.message.DecodeError, or whatever a pluggable
            # bindings module raises for bytes it cannot parse
            raise InvalidFeedError(f"invalid feed: {e}") from e

        if data is None:
            raise InvalidFeedError()
        if not isinstance(data, dict):
            raise InvalidFeedError(f"invalid feed: expected an object, got {type(data).__name__}")
        if "header" not in data:
            raise MissingHeaderError()

        # Protocol buffers don't encode empty repeated fields, so a feed
        # with zero entities has no 'entity' key at all.
        if "entity" not in data:
            data["entity"] = []
        elif not isinstance(data["entity"], list):
            raise MissingEntityArrayError()

        logger.debug(f"Decoded feed: {len(data['entity'])} entities")
        return data
