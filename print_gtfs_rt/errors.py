"""Exception types raised while reading, decoding and printing a feed."""


class PrintGtfsRtError(Exception):
    """Base class for all fatal errors. Carries the process exit code."""

    exit_code = 1


class UsageError(PrintGtfsRtError):
    """The tool was invoked incorrectly, e.g. without piped input."""

    exit_code = 2


class FramingError(PrintGtfsRtError):
    """The length-prefixed input stream is truncated or malformed."""


class FetchError(PrintGtfsRtError):
    """The feed could not be fetched over HTTP."""


class BindingsError(PrintGtfsRtError):
    """The GTFS-RT bindings reference could not be loaded."""


class FeedDecodeError(PrintGtfsRtError):
    """A frame could not be turned into a valid FeedMessage."""


class InvalidFeedError(FeedDecodeError):
    def __init__(self, message: str = "invalid feed"):
        super().__init__(message)


class MissingHeaderError(FeedDecodeError):
    def __init__(self, message: str = "invalid feed: missing header"):
        super().__init__(message)


class MissingEntityArrayError(FeedDecodeError):
    def __init__(self, message: str = "invalid feed: missing entity[]"):
        super().__init__(message)
