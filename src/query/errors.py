"""Errors reported back to query callers."""


class QueryValidationError(ValueError):
    """A query was rejected; the service itself keeps running."""


__all__ = ["QueryValidationError"]
