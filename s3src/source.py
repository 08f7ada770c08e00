from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import TYPE_CHECKING, ClassVar

from .client import connect, probe_size, read_range
from .element import ElementMetadata, Source, register_element
from .errors import SourceFailure
from .settings import S3SrcSettings, load_settings_from_env
from .url import SCHEME, S3Url, parse_s3_url

if TYPE_CHECKING:
    from botocore.client import BaseClient

LOG = logging.getLogger("s3src.source")


@dataclass(frozen=True, slots=True)
class Session:
    url: S3Url
    client: BaseClient
    size: int


class S3Src(Source):
    """Seekable pull-mode source reading one S3 object by byte ranges.

    The source is either stopped (no session) or started with a session
    holding the parsed locator, its client and the size probed at start.
    Every read is an independent ranged GET, so ``seek`` has nothing to do.
    All state changes and reads go through one lock.
    """

    protocols: ClassVar[tuple[str, ...]] = (SCHEME,)

    def __init__(self, settings: S3SrcSettings | None = None):
        self._settings = settings if settings is not None else load_settings_from_env()
        self._session: Session | None = None
        self._lock = threading.Lock()

    @staticmethod
    def validate_uri(uri: str) -> None:
        parse_s3_url(uri)

    def is_seekable(self) -> bool:
        return True

    @property
    def session(self) -> Session | None:
        with self._lock:
            return self._session

    def start(self, uri: str) -> None:
        with self._lock:
            if self._session is not None:
                msg = "Cannot start() while already started"
                raise SourceFailure(msg)

            url = parse_s3_url(uri)
            client = connect(url, self._settings)
            try:
                size = probe_size(client, url)
            except Exception:
                _close_client(client)
                raise

            self._session = Session(url=url, client=client, size=size)
        LOG.info("started %s (size=%d)", url, size)

    def stop(self) -> None:
        with self._lock:
            if self._session is None:
                msg = "Cannot stop() before start()"
                raise SourceFailure(msg)
            session, self._session = self._session, None
            _close_client(session.client)
        LOG.info("stopped %s", session.url)

    def get_size(self) -> int | None:
        # Sessions are swapped whole and never mutated.
        session = self._session
        return session.size if session is not None else None

    def read(self, offset: int, length: int, buffer: bytearray | memoryview) -> int:
        """Fill ``buffer`` with up to ``length`` bytes from ``offset``.

        Returns the number of bytes written, which is less than ``length``
        when the window runs past the end of the object.
        """
        with self._lock:
            if self._session is None:
                msg = "Cannot GET before start()"
                raise SourceFailure(msg)
            data = read_range(self._session.client, self._session.url, offset, length)

        if len(data) > len(buffer):
            msg = f"Read {len(data)} bytes, but buffer has {len(buffer)} bytes"
            raise SourceFailure(msg)
        buffer[: len(data)] = data
        return len(data)

    def seek(self, start: int, stop: int | None = None) -> None:
        return None


def _close_client(client: BaseClient) -> None:
    close = getattr(client, "close", None)
    if close is not None:
        close()


register_element(
    ElementMetadata(
        name="s3src",
        long_name="Amazon S3 Source",
        classification="Source/Network",
        description="Reads an object from Amazon S3",
        author="s3src developers",
        factory=S3Src,
    )
)
