"""
Pipeline driver: frame reader -> feed decoder -> renderer.

Runs on a single asyncio event loop. Frames are handled strictly in input
order; a frame is decoded and rendered, and the output flushed, before the
next frame is taken from the reader. Output is written one rendered chunk
at a time in a worker thread, so a slow reader downstream never blocks
the loop.
"""

import asyncio
import logging
from typing import BinaryIO, Optional, TextIO

from .config import Config
from .decoder import FeedDecoder, load_bindings
from .fetch import FeedFetcher
from .framing import FrameReader, open_input, reader_from_bytes
from .render import Renderer

logger = logging.getLogger(__name__)


class Pipeline:
    """Prints every feed message found in one input stream."""

    def __init__(self, config: Config, decoder: Optional[FeedDecoder] = None,
                 fetcher: Optional[FeedFetcher] = None):
        self.config = config
        self.decoder = decoder or FeedDecoder(load_bindings(config.bindings))
        self.fetcher = fetcher
        if self.fetcher is None and config.url:
            self.fetcher = FeedFetcher(config)

    async def open(self, stdin: BinaryIO):
        """Return the StreamReader for the configured source and its pump task."""
        if not self.config.url:
            return await open_input(stdin)

        content = await asyncio.to_thread(self.fetcher.fetch_feed)
        return reader_from_bytes(content), None

    async def run(self, stdin: BinaryIO, stdout: TextIO) -> int:
        """Process the whole input. Returns the number of frames printed."""
        renderer = Renderer(self.config)
        reader, pump_task = await self.open(stdin)
        frames = FrameReader(
            reader,
            length_prefixed=self.config.length_prefixed,
            max_frame_size=self.config.max_frame_size,
        )

        count = 0
        try:
            async for frame in frames:
                message = self.decoder.decode(frame)
                for chunk in renderer.chunks(message):
                    await asyncio.to_thread(stdout.write, chunk)
                await asyncio.to_thread(stdout.flush)
                count += 1
        finally:
            if pump_task is not None:
                pump_task.cancel()

        logger.debug(f"Printed {count} feed messages")
        return count


def run_pipeline(config: Config, stdin: BinaryIO, stdout: TextIO, **kwargs) -> int:
    """Blocking wrapper around Pipeline.run()."""
    return asyncio.run(Pipeline(config, **kwargs).run(stdin, stdout))
