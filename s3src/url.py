"""Parsing of ``s3://<region>/<bucket>/<key...>[?version=<id>]`` locators."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import StrEnum
from urllib.parse import parse_qsl, quote, unquote, urlsplit

from .errors import BadUriError, UnsupportedProtocolError

LOG = logging.getLogger("s3src.url")

SCHEME = "s3"


class Region(StrEnum):
    """AWS regions an ``s3://`` locator may name as its host."""

    AF_SOUTH_1 = "af-south-1"
    AP_EAST_1 = "ap-east-1"
    AP_NORTHEAST_1 = "ap-northeast-1"
    AP_NORTHEAST_2 = "ap-northeast-2"
    AP_NORTHEAST_3 = "ap-northeast-3"
    AP_SOUTH_1 = "ap-south-1"
    AP_SOUTH_2 = "ap-south-2"
    AP_SOUTHEAST_1 = "ap-southeast-1"
    AP_SOUTHEAST_2 = "ap-southeast-2"
    AP_SOUTHEAST_3 = "ap-southeast-3"
    AP_SOUTHEAST_4 = "ap-southeast-4"
    CA_CENTRAL_1 = "ca-central-1"
    CA_WEST_1 = "ca-west-1"
    CN_NORTH_1 = "cn-north-1"
    CN_NORTHWEST_1 = "cn-northwest-1"
    EU_CENTRAL_1 = "eu-central-1"
    EU_CENTRAL_2 = "eu-central-2"
    EU_NORTH_1 = "eu-north-1"
    EU_SOUTH_1 = "eu-south-1"
    EU_SOUTH_2 = "eu-south-2"
    EU_WEST_1 = "eu-west-1"
    EU_WEST_2 = "eu-west-2"
    EU_WEST_3 = "eu-west-3"
    IL_CENTRAL_1 = "il-central-1"
    ME_CENTRAL_1 = "me-central-1"
    ME_SOUTH_1 = "me-south-1"
    SA_EAST_1 = "sa-east-1"
    US_EAST_1 = "us-east-1"
    US_EAST_2 = "us-east-2"
    US_GOV_EAST_1 = "us-gov-east-1"
    US_GOV_WEST_1 = "us-gov-west-1"
    US_WEST_1 = "us-west-1"
    US_WEST_2 = "us-west-2"

    @classmethod
    def from_str(cls, name: str) -> Region:
        try:
            return cls(name.lower())
        except ValueError:
            msg = f"Unknown region '{name}'"
            raise ValueError(msg) from None


@dataclass(frozen=True, slots=True)
class S3Url:
    region: Region
    bucket: str
    key: str
    version: str | None = None

    def __str__(self) -> str:
        url = f"{SCHEME}://{self.region}/{quote(self.bucket)}/{quote(self.key)}"
        if self.version is not None:
            url = f"{url}?version={quote(self.version, safe='')}"
        return url


def parse_s3_url(uri: str) -> S3Url:
    """Resolve an ``s3://`` locator into an :class:`S3Url`.

    Raises:
        UnsupportedProtocolError: the scheme is not ``s3``.
        BadUriError: the region is unknown, the bucket or key is missing,
            or the query holds anything besides a single ``version``.
    """
    try:
        parts = urlsplit(uri)
    except ValueError as err:
        msg = f"Invalid uri '{uri}': {err}"
        raise BadUriError(msg) from err

    if parts.scheme != SCHEME:
        msg = f"Unsupported URI '{parts.scheme}'"
        raise UnsupportedProtocolError(msg)

    host = parts.hostname
    if not host:
        msg = f"Invalid host in uri '{uri}'"
        raise BadUriError(msg)

    try:
        region = Region.from_str(host)
    except ValueError:
        msg = f"Invalid region '{host}'"
        raise BadUriError(msg) from None

    if not parts.path.startswith("/"):
        msg = f"Invalid empty object/bucket '{uri}'"
        raise BadUriError(msg)

    bucket, _, key = parts.path[1:].partition("/")
    if not bucket or not key:
        msg = f"Invalid empty object/bucket '{uri}'"
        raise BadUriError(msg)

    bucket = unquote(bucket)
    if "/" in bucket:
        msg = f"Invalid bucket '{bucket}' in uri '{uri}'"
        raise BadUriError(msg)

    version = _parse_version(parts.query)

    url = S3Url(region=region, bucket=bucket, key=unquote(key), version=version)
    LOG.debug("parsed %s into %r", uri, url)
    return url


def _parse_version(query: str) -> str | None:
    params = parse_qsl(query, keep_blank_values=True)
    if not params:
        return None

    name, value = params[0]
    if name != "version":
        msg = "Bad query, only 'version' is supported"
        raise BadUriError(msg)
    if len(params) > 1:
        msg = "Extra query terms, only 'version' is supported"
        raise BadUriError(msg)
    return value
