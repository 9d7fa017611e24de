"""Errors that stop the indexing loop."""


class IndexerFatalError(Exception):
    """Unrecoverable condition; the loop stops and resumes from the checkpoint.

    Raised for unreachable providers, missing receipts or blocks, undecodable
    logs and amounts that cannot be stored.
    """


class EventDecodeError(IndexerFatalError):
    """A log could not be decoded as the expected inbox event."""


class UnrepresentableValueError(IndexerFatalError):
    """A chain value does not fit the stored representation."""


__all__ = [
    "EventDecodeError",
    "IndexerFatalError",
    "UnrepresentableValueError",
]
