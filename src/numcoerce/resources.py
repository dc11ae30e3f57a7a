"""Resource handles backed by open files.

A resource is an opaque external reference. The coercion engine only ever
reads its integer ``id``; the file behind it belongs to the caller.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path
from typing import IO, Dict, Iterator, Optional

__all__ = [
    "ResourceHandle",
    "ResourceProvider",
]

logger = logging.getLogger(__name__)


@dataclass(eq=False)
class ResourceHandle:
    """An open file with an integer identifier."""

    id: int
    path: Path
    resource_type: str = "stream"
    _stream: Optional[IO[bytes]] = field(default=None, repr=False)

    @property
    def closed(self) -> bool:
        return self._stream is None or self._stream.closed

    def read(self, size: int = -1) -> bytes:
        if self.closed:
            raise ValueError(f"resource #{self.id} is closed")
        return self._stream.read(size)

    def close(self) -> None:
        # The id survives closing
        if self._stream is not None and not self._stream.closed:
            self._stream.close()


class ResourceProvider:
    """Mints resource handles with increasing ids and releases them.

    Each provider owns its own counter, so independent providers never
    share state.
    """

    def __init__(self, first_id: int = 1):
        self._next_id = first_id
        self._open: Dict[int, ResourceHandle] = {}

    def acquire(self, path: Path | str, mode: str = "rb") -> ResourceHandle:
        """Open ``path`` for reading and return a new handle."""
        if any(flag in mode for flag in "wax+"):
            raise ValueError(f"resources are read-only, got mode '{mode}'")
        path = Path(path)
        stream = open(path, mode)
        handle = ResourceHandle(id=self._next_id, path=path, _stream=stream)
        self._next_id += 1
        self._open[handle.id] = handle
        logger.debug("acquired resource #%d on %s", handle.id, path)
        return handle

    def release(self, handle: ResourceHandle) -> None:
        handle.close()
        self._open.pop(handle.id, None)
        logger.debug("released resource #%d", handle.id)

    def close_all(self) -> None:
        """Release every handle still open."""
        for handle in list(self._open.values()):
            self.release(handle)

    @property
    def open_count(self) -> int:
        return len(self._open)

    @contextmanager
    def open(self, path: Path | str, mode: str = "rb") -> Iterator[ResourceHandle]:
        """Scoped acquisition: the handle is released even on error."""
        handle = self.acquire(path, mode)
        try:
            yield handle
        finally:
            self.release(handle)
