from __future__ import annotations


class S3SrcError(RuntimeError):
    """Base class for all errors raised by the S3 source."""


class UriError(S3SrcError, ValueError):
    """The locator string could not be turned into an S3 object reference."""


class UnsupportedProtocolError(UriError):
    """The URI scheme is not ``s3``."""


class BadUriError(UriError):
    """The region, path or query of an ``s3://`` URI is invalid."""


class SourceFailure(S3SrcError):
    """The source was used in a way its current state does not allow."""


class NotFoundError(S3SrcError):
    """The object, bucket or version does not exist."""


class OpenFailedError(S3SrcError):
    """The object metadata could not be fetched or was incomplete."""


class ReadFailureError(S3SrcError):
    """A ranged GET failed in transport or on the store side."""


NOT_FOUND_CODES = frozenset(
    {"404", "NoSuchKey", "NotFound", "NoSuchBucket", "NoSuchVersion"}
)
