from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    INVALID_INPUT = "invalid-input"
    NOT_FOUND = "not-found"
    EMPTY_BOOK = "empty-book"
    UPSTREAM_FAILURE = "upstream-failure"


class SimpleClientError(Exception):
    """Base class; callers branch on ``.kind`` rather than the message."""

    kind: ErrorKind = ErrorKind.UPSTREAM_FAILURE


class InvalidInputError(SimpleClientError, ValueError):
    kind = ErrorKind.INVALID_INPUT


class MarketNotFoundError(SimpleClientError, LookupError):
    kind = ErrorKind.NOT_FOUND


class EmptyOrderBookError(SimpleClientError):
    kind = ErrorKind.EMPTY_BOOK


class UpstreamError(SimpleClientError):
    kind = ErrorKind.UPSTREAM_FAILURE
