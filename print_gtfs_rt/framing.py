"""
Frame reader for GTFS-RT input streams.

Splits a byte stream into frames, each holding exactly one serialized
FeedMessage. Two layouts are supported:

    whole-stream    the entire input is one frame (default)
    length-prefixed a sequence of <varint length><payload> records, as
                    written by length-prefixed-stream and protobuf's
                    writeDelimitedTo()

Frames are produced incrementally as an async iterator so the pipeline can
decode and print each record as soon as its bytes have arrived.
"""

import asyncio
import logging
import os
import stat
from typing import AsyncIterator, BinaryIO, Optional, Tuple

from .errors import FramingError

logger = logging.getLogger(__name__)

# A uint64 never needs more than 10 base-128 groups.
MAX_VARINT_BYTES = 10

READ_CHUNK_SIZE = 64 * 1024


def encode_varint(value: int) -> bytes:
    """Encode a non-negative integer as a little-endian base-128 varint."""
    if value < 0:
        raise ValueError(f"varint must be non-negative, got {value}")
    out = bytearray()
    while True:
        bits = value & 0x7F
        value >>= 7
        if value:
            out.append(bits | 0x80)
        else:
            out.append(bits)
            return bytes(out)


def encode_frame(payload: bytes) -> bytes:
    """Prefix a payload with its varint-encoded length."""
    return encode_varint(len(payload)) + payload


async def read_varint(reader: asyncio.StreamReader) -> Optional[int]:
    """Read one varint from the stream.

    Returns None if the stream ends cleanly before the first byte.

    :raises FramingError: if the stream ends mid-varint or the varint is
        longer than MAX_VARINT_BYTES
    """
    value = 0
    for index in range(MAX_VARINT_BYTES):
        byte = await reader.read(1)
        if not byte:
            if index == 0:
                return None
            raise FramingError("truncated length prefix at end of input")
        value |= (byte[0] & 0x7F) << (7 * index)
        if not byte[0] & 0x80:
            return value
    raise FramingError(f"invalid length prefix: varint longer than {MAX_VARINT_BYTES} bytes")


class FrameReader:
    """Produces frames from an asyncio stream according to the Config."""

    def __init__(self, reader: asyncio.StreamReader, length_prefixed: bool = False,
                 max_frame_size: Optional[int] = None):
        self.reader = reader
        self.length_prefixed = length_prefixed
        self.max_frame_size = max_frame_size

    def __aiter__(self) -> AsyncIterator[bytes]:
        if self.length_prefixed:
            return self._length_prefixed_frames()
        return self._whole_stream_frames()

    async def _whole_stream_frames(self) -> AsyncIterator[bytes]:
        data = await self.reader.read()
        logger.debug(f"Read whole input: {len(data)} bytes")
        yield data

    async def _length_prefixed_frames(self) -> AsyncIterator[bytes]:
        count = 0
        while True:
            length = await read_varint(self.reader)
            if length is None:
                logger.debug(f"End of input after {count} frames")
                return

            if self.max_frame_size is not None and length > self.max_frame_size:
                raise FramingError(
                    f"frame of {length} bytes exceeds limit of {self.max_frame_size} bytes"
                )

            try:
                payload = await self.reader.readexactly(length)
            except asyncio.IncompleteReadError as e:
                raise FramingError(
                    f"truncated frame: expected {length} bytes, got {len(e.partial)}"
                ) from e

            count += 1
            logger.debug(f"Frame {count}: {length} bytes")
            yield payload


async def pump(source: BinaryIO, reader: asyncio.StreamReader,
               chunk_size: int = READ_CHUNK_SIZE) -> None:
    """Copy a blocking binary file into an asyncio StreamReader.

    Reads happen in a worker thread so the event loop keeps running. Used
    for everything the event loop cannot poll: regular files, character
    devices such as /dev/null, and in-memory buffers. Pipes and sockets go
    through open_input() instead. Read errors are handed to the
    StreamReader and surface in the frame reader.
    """
    read = getattr(source, "read1", source.read)
    try:
        while True:
            chunk = await asyncio.to_thread(read, chunk_size)
            if not chunk:
                break
            reader.feed_data(chunk)
    except OSError as e:
        reader.set_exception(e)
        return
    reader.feed_eof()


def _is_pollable(source: BinaryIO) -> bool:
    try:
        fd = source.fileno()
    except (AttributeError, OSError, ValueError):
        # in-memory buffers such as io.BytesIO
        return False
    mode = os.fstat(fd).st_mode
    return stat.S_ISFIFO(mode) or stat.S_ISSOCK(mode)


async def open_input(source: BinaryIO) -> Tuple[asyncio.StreamReader, Optional[asyncio.Task]]:
    """Attach an asyncio StreamReader to a binary input such as stdin.

    Pipes and sockets are registered with the event loop directly. Files
    and devices cannot be polled (epoll rejects them), so they are copied
    in by a pump task.
    Returns the reader and the pump task, if one was started.
    """
    loop = asyncio.get_running_loop()
    reader = asyncio.StreamReader()

    if not _is_pollable(source):
        return reader, asyncio.create_task(pump(source, reader))

    protocol = asyncio.StreamReaderProtocol(reader)
    await loop.connect_read_pipe(lambda: protocol, source)
    return reader, None


def reader_from_bytes(data: bytes) -> asyncio.StreamReader:
    """Wrap an in-memory payload (e.g. an HTTP response body) in a StreamReader."""
    reader = asyncio.StreamReader()
    reader.feed_data(data)
    reader.feed_eof()
    return reader
