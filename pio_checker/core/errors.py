"""Exception hierarchy for snapshot monitoring."""

from __future__ import annotations


class MonitorError(Exception):
    """Base class for all monitoring failures."""


class FetchError(MonitorError):
    """Page could not be fetched or the target record could not be located."""


class InvalidComparisonError(MonitorError, ValueError):
    """Two snapshots of different records were passed to the differ."""


class PersistenceError(MonitorError):
    """Snapshot could not be durably written or read back."""


class NotificationDispatchError(MonitorError):
    """A best-effort notification or email could not be delivered."""


class AccountsFileError(MonitorError):
    """Record configuration file is missing or invalid."""


class RecordNotFoundError(MonitorError, KeyError):
    """No configured record matches the requested id."""

    def __str__(self) -> str:
        # KeyError would otherwise repr() the message
        return str(self.args[0]) if self.args else ""
