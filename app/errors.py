"""Exceptions raised while fetching and normalizing upstream feeds."""


class FeedError(Exception):
    """Base class for failures in a feed pipeline."""


class UpstreamFetchError(FeedError):
    """Upstream answered with a non-success status or did not answer in time."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class FeedDecodeError(FeedError):
    """Binary (protobuf) payload could not be decoded."""


class FeedParseError(FeedError):
    """XML payload could not be parsed."""


def error_message(exc: BaseException) -> str:
    """Return the human-readable message for an error envelope."""
    return str(exc) or "failed"
