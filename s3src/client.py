"""Blocking S3 calls backing the source: client construction, HEAD and ranged GET."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from boto3.session import Session
from botocore import UNSIGNED
from botocore.config import Config as BotoConfig
from botocore.exceptions import BotoCoreError, ClientError

from .errors import (
    NOT_FOUND_CODES,
    NotFoundError,
    OpenFailedError,
    ReadFailureError,
    SourceFailure,
)

if TYPE_CHECKING:
    from botocore.client import BaseClient

    from .settings import S3SrcSettings
    from .url import S3Url

LOG = logging.getLogger("s3src.client")


def connect(url: S3Url, settings: S3SrcSettings) -> BaseClient:
    """Build an S3 client bound to the locator's region.

    No request is sent; a missing credential or a broken botocore setup is
    reported as :class:`SourceFailure`.
    """
    try:
        session = Session(
            aws_access_key_id=settings.access_key,
            aws_secret_access_key=settings.secret_key,
            aws_session_token=settings.session_token,
            region_name=str(url.region),
            profile_name=settings.profile,
        )
        if not settings.anonymous and session.get_credentials() is None:
            msg = "No usable AWS credentials found"
            raise SourceFailure(msg)
        client = session.client(
            "s3",
            endpoint_url=settings.endpoint,
            config=BotoConfig(
                signature_version=UNSIGNED if settings.anonymous else "s3v4",
                retries={"total_max_attempts": 1},
                connect_timeout=settings.connect_timeout,
                read_timeout=settings.read_timeout,
                s3={"addressing_style": settings.addressing_style},
            ),
        )
    except (BotoCoreError, ValueError) as err:
        msg = f"Failed to create S3 client: '{err}'"
        raise SourceFailure(msg) from err

    LOG.debug(
        "created client for region=%s endpoint=%s",
        url.region,
        settings.endpoint or "aws",
    )
    return client


def probe_size(client: BaseClient, url: S3Url) -> int:
    """Return the object's length as reported by HEAD."""
    try:
        result = client.head_object(**_object_kwargs(url))
    except ClientError as err:
        if _error_code(err) in NOT_FOUND_CODES:
            msg = f"Object {url} not found: {err}"
            raise NotFoundError(msg) from err
        msg = f"Failed to HEAD object: {err}"
        raise OpenFailedError(msg) from err
    except BotoCoreError as err:
        msg = f"Failed to HEAD object: {err}"
        raise OpenFailedError(msg) from err

    size = result.get("ContentLength")
    if size is None:
        msg = "Failed to get content length"
        raise OpenFailedError(msg)

    LOG.info("HEAD success, content length = %d", size)
    return int(size)


def read_range(client: BaseClient, url: S3Url, offset: int, length: int) -> bytes:
    """Fetch ``bytes=offset-(offset+length-1)`` of the object.

    Whatever the store delivers is returned unchanged, so a window running
    past the end of the object yields fewer than ``length`` bytes.
    """
    if offset < 0 or length < 1:
        msg = f"Invalid range: offset={offset} length={length}"
        raise SourceFailure(msg)

    end = offset + length - 1
    LOG.debug("Requesting range: %d-%d", offset, end)

    try:
        result = client.get_object(Range=f"bytes={offset}-{end}", **_object_kwargs(url))
        body = result.get("Body")
        if body is None:
            msg = "Could not GET object"
            raise NotFoundError(msg)
        try:
            data = body.read()
        finally:
            body.close()
    except ClientError as err:
        if _error_code(err) in NOT_FOUND_CODES:
            raise NotFoundError(str(err)) from err
        raise ReadFailureError(str(err)) from err
    except BotoCoreError as err:
        raise ReadFailureError(str(err)) from err

    LOG.debug("Read %d bytes", len(data))
    return data


def _object_kwargs(url: S3Url) -> dict[str, Any]:
    kwargs: dict[str, Any] = {"Bucket": url.bucket, "Key": url.key}
    if url.version is not None:
        kwargs["VersionId"] = url.version
    return kwargs


def _error_code(error: ClientError) -> str | None:
    return error.response.get("Error", {}).get("Code")
