# gateway/file_access/handles.py
"""
File handles bridging remote streams to the FTP engine's file objects.

Two concrete handles share one capability interface:
- ReadHandle: sequential read over one live remote stream
- WriteHandle: sequential write into memory, committed with a single
  remote write on close

Every operation outside a handle's capability set raises
UnsupportedOperationError.
"""
from abc import ABC, abstractmethod
from typing import Any, BinaryIO, Optional

import structlog

from gateway.file_access.base_fs import RemoteStore
from gateway.file_access.errors import RemoteOperationError, UnsupportedOperationError

logger = structlog.get_logger()


class FileHandle(ABC):
    """
    Capability interface shared by read and write handles.

    Subclasses override the operations they support; everything else
    fails with UnsupportedOperationError, regardless of arguments or
    stream position.
    """

    def __init__(self, name: str):
        self.name = name
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def _check_open(self) -> None:
        if self._closed:
            raise ValueError(f"I/O operation on closed handle: {self.name}")

    def _unsupported(self, operation: str) -> UnsupportedOperationError:
        return UnsupportedOperationError(
            f"{operation} not supported on {self.__class__.__name__} for {self.name}"
        )

    def readable(self) -> bool:
        return False

    def writable(self) -> bool:
        return False

    def seekable(self) -> bool:
        return False

    def read(self, size: int = -1) -> bytes:
        raise self._unsupported("read")

    def write(self, data: bytes) -> int:
        raise self._unsupported("write")

    def seek(self, offset: int, whence: int = 0) -> int:
        raise self._unsupported("seek")

    def tell(self) -> int:
        raise self._unsupported("tell")

    def read_at(self, size: int, offset: int) -> bytes:
        raise self._unsupported("read_at")

    def write_at(self, data: bytes, offset: int) -> int:
        raise self._unsupported("write_at")

    def truncate(self, size: Optional[int] = None) -> int:
        raise self._unsupported("truncate")

    def stat(self) -> Any:
        raise self._unsupported("stat")

    def readdir(self, count: int = -1) -> list:
        raise self._unsupported("readdir")

    def flush(self) -> None:
        return None

    @abstractmethod
    def close(self) -> None:
        pass

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False

    def __repr__(self) -> str:
        state = "closed" if self._closed else "open"
        return f"<{self.__class__.__name__} name={self.name} {state}>"


class ReadHandle(FileHandle):
    """Sequential reader over one open remote stream."""

    def __init__(self, name: str, stream: BinaryIO):
        super().__init__(name)
        self._stream = stream

    def readable(self) -> bool:
        return True

    def read(self, size: int = -1) -> bytes:
        self._check_open()
        return self._stream.read(size)

    def close(self) -> None:
        """Release the remote stream. Closing twice is a no-op."""
        if self._closed:
            return
        self._closed = True
        self._stream.close()


class WriteHandle(FileHandle):
    """
    Buffered writer committed to the remote store on close.

    All writes accumulate in memory in the order received. close()
    performs at most one remote write of the whole buffer, and none
    when nothing was written, so a create-without-write never
    materializes a remote object.
    """

    def __init__(self, name: str, store: RemoteStore, remote_addr: str = ""):
        super().__init__(name)
        self._store = store
        self._remote_addr = remote_addr
        self._buffer = bytearray()

    @property
    def buffered_size(self) -> int:
        return len(self._buffer)

    def writable(self) -> bool:
        return True

    def write(self, data: bytes) -> int:
        self._check_open()
        self._buffer.extend(data)
        return len(data)

    def close(self) -> None:
        """
        Commit the buffer to the remote store.

        Raises:
            RemoteOperationError: If the remote write fails. The handle is
                closed either way and never retries.
        """
        if self._closed:
            return
        self._closed = True

        if not self._buffer:
            logger.debug("upload_skipped_empty", remote_addr=self._remote_addr, path=self.name)
            return

        size = len(self._buffer)
        try:
            self._store.write(self.name, bytes(self._buffer))
        except RemoteOperationError as e:
            logger.error(
                "upload_failed",
                remote_addr=self._remote_addr,
                path=self.name,
                size=size,
                error=str(e)
            )
            raise
        finally:
            self._buffer = bytearray()

        logger.info("upload_committed", remote_addr=self._remote_addr, path=self.name, size=size)
