"""Random-access range reads of a single S3 object."""

from .aio import AsyncS3Src
from .element import Source, SourceElement, make_element
from .errors import (
    BadUriError,
    NotFoundError,
    OpenFailedError,
    ReadFailureError,
    S3SrcError,
    SourceFailure,
    UnsupportedProtocolError,
    UriError,
)
from .settings import S3SrcSettings
from .source import S3Src
from .url import Region, S3Url, parse_s3_url

__all__ = [
    "AsyncS3Src",
    "BadUriError",
    "NotFoundError",
    "OpenFailedError",
    "ReadFailureError",
    "Region",
    "S3Src",
    "S3SrcError",
    "S3SrcSettings",
    "S3Url",
    "Source",
    "SourceElement",
    "SourceFailure",
    "UnsupportedProtocolError",
    "UriError",
    "make_element",
    "parse_s3_url",
]
