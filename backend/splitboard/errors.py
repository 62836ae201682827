"""Error taxonomy shared by the upstream client, the store and the sink."""
from typing import Optional


class SplitboardError(Exception):
    """Base class for every error raised by this application."""


class ConfigError(SplitboardError):
    """A required setting (credential, URL) is missing at the point of use."""


class UpstreamError(SplitboardError):
    """The Splitwise API answered with a non-2xx status or could not be reached.

    ``status`` is the HTTP status code, or ``None`` for transport failures,
    timeouts and payloads that do not match the expected schema.
    """

    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.status = status

    def __repr__(self) -> str:
        return f"UpstreamError(status={self.status!r}, message={str(self)!r})"


class StoreError(SplitboardError):
    """The record store is unavailable or rejected a write for a reason other than a duplicate id."""


class NotificationError(SplitboardError):
    """The notification sink could not deliver a message."""
