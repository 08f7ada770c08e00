"""Host-side boundary for pull-mode sources.

A host pipeline only ever sees a :class:`SourceElement`: it instantiates one by
name, hands it a locator string, then drives ``start``/``get_size``/``read``/
``seek``/``stop``. The element keeps the locator and forwards everything else
to the :class:`Source` implementation it wraps.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, ClassVar

from .errors import SourceFailure

if TYPE_CHECKING:
    from collections.abc import Callable

LOG = logging.getLogger("s3src.element")


class Source(ABC):
    """Operations a seekable pull-mode source provides to its element."""

    protocols: ClassVar[tuple[str, ...]] = ()

    @staticmethod
    @abstractmethod
    def validate_uri(uri: str) -> None:
        """Raise a ``UriError`` when ``uri`` cannot be handled."""

    @abstractmethod
    def is_seekable(self) -> bool: ...

    @abstractmethod
    def start(self, uri: str) -> None: ...

    @abstractmethod
    def stop(self) -> None: ...

    @abstractmethod
    def get_size(self) -> int | None: ...

    @abstractmethod
    def read(self, offset: int, length: int, buffer: bytearray | memoryview) -> int: ...

    @abstractmethod
    def seek(self, start: int, stop: int | None = None) -> None: ...


@dataclass(frozen=True, slots=True)
class ElementMetadata:
    name: str
    long_name: str
    classification: str
    description: str
    author: str
    factory: Callable[[], Source]

    @property
    def protocols(self) -> tuple[str, ...]:
        return getattr(self.factory, "protocols", ())


_REGISTRY: dict[str, ElementMetadata] = {}


def register_element(metadata: ElementMetadata) -> None:
    if metadata.name in _REGISTRY:
        msg = f"Element '{metadata.name}' is already registered"
        raise ValueError(msg)
    _REGISTRY[metadata.name] = metadata
    LOG.debug("registered element %s (%s)", metadata.name, metadata.long_name)


def element_metadata(name: str) -> ElementMetadata:
    try:
        return _REGISTRY[name]
    except KeyError:
        msg = f"No element named '{name}'"
        raise LookupError(msg) from None


def make_element(name: str) -> SourceElement:
    metadata = element_metadata(name)
    return SourceElement(metadata, metadata.factory())


class SourceElement:
    def __init__(self, metadata: ElementMetadata, source: Source):
        self.metadata = metadata
        self._source = source
        self._uri: str | None = None
        self._started = False

    @property
    def source(self) -> Source:
        return self._source

    @property
    def protocols(self) -> tuple[str, ...]:
        return self._source.protocols

    @property
    def started(self) -> bool:
        return self._started

    def get_uri(self) -> str | None:
        return self._uri

    def set_uri(self, uri: str | None) -> None:
        """Store the locator, validating it first.

        Clearing (``None``) is allowed; changing the locator while started is not.
        """
        if self._started:
            msg = "Changing the URI is not supported while started"
            raise SourceFailure(msg)
        if uri is not None:
            self._source.validate_uri(uri)
        self._uri = uri
        LOG.debug("%s uri set to %s", self.metadata.name, uri)

    def is_seekable(self) -> bool:
        return self._source.is_seekable()

    def start(self) -> None:
        if self._uri is None:
            msg = "No URI to start from"
            raise SourceFailure(msg)
        self._source.start(self._uri)
        self._started = True

    def stop(self) -> None:
        try:
            self._source.stop()
        finally:
            self._started = False

    def get_size(self) -> int | None:
        return self._source.get_size()

    def read(self, offset: int, length: int, buffer: bytearray | memoryview) -> int:
        return self._source.read(offset, length, buffer)

    def seek(self, start: int, stop: int | None = None) -> None:
        self._source.seek(start, stop)
