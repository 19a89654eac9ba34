"""Error taxonomy shared by the sync pipeline."""

from __future__ import annotations


class SyncError(Exception):
    """Base class for failures that abort a sync run."""


class ConfigError(SyncError):
    """Configuration is missing or invalid; raised before any network activity."""


class FetchError(SyncError):
    """The data source answered with a non-success status or was unreachable."""

    def __init__(self, message: str, *, status_code: int | None = None, reason: str | None = None, offset: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.reason = reason
        self.offset = offset


class DecodeError(SyncError):
    """The response body could not be parsed as a page of records."""

    def __init__(self, message: str, *, offset: int | None = None) -> None:
        super().__init__(message)
        self.offset = offset


class MalformedVersionError(SyncError):
    """The persisted version record is not MAJOR.MINOR.PATCH."""

    def __init__(self, value: object) -> None:
        super().__init__(f"Invalid version in version record: {value!r}")
        self.value = value


class CountMismatchWarning(UserWarning):
    """Reassembled dataset length differs from the declared total."""


__all__ = [
    "ConfigError",
    "CountMismatchWarning",
    "DecodeError",
    "FetchError",
    "MalformedVersionError",
    "SyncError",
]
