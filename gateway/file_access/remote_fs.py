# gateway/file_access/remote_fs.py
"""
Filesystem adapter over a remote store.

One RemoteFilesystem per authenticated FTP session. Each method maps one
FTP-level operation onto the session's RemoteStore and reports it to the
audit observer. Remote errors propagate unchanged; operations the remote
model cannot express raise UnsupportedOperationError.
"""
import os
from dataclasses import dataclass, field
from datetime import datetime
from typing import List

from gateway.file_access.base_fs import FileInfo, RemoteStore
from gateway.file_access.errors import UnsupportedOperationError
from gateway.file_access.fileinfo import to_file_info
from gateway.file_access.handles import FileHandle, ReadHandle, WriteHandle
from gateway.monitoring.audit import OperationObserver, log_operation


@dataclass(frozen=True)
class Session:
    """One authenticated connection and the store it owns."""
    remote_addr: str
    username: str
    store: RemoteStore
    observer: OperationObserver = field(default=log_operation)


class RemoteFilesystem:
    """
    Virtual filesystem contract implemented against a RemoteStore.

    Not thread-safe by itself: the FTP engine issues one call at a time
    per session, and sessions never share an instance.
    """

    name = "NextCloudFS"

    def __init__(self, session: Session):
        self.session = session
        self._store = session.store

    @property
    def remote_addr(self) -> str:
        return self.session.remote_addr

    def _record(self, operation: str, **details) -> None:
        self.session.observer(operation, remote_addr=self.session.remote_addr, **details)

    def stat(self, path: str) -> FileInfo:
        self._record("stat", path=path)
        return to_file_info(self._store.stat(path))

    def list_directory(self, path: str) -> List[FileInfo]:
        """List a directory in remote order."""
        self._record("read_dir", path=path)
        return [to_file_info(entry) for entry in self._store.read_dir(path)]

    def open(self, path: str) -> ReadHandle:
        self._record("open", path=path)
        return self.open_for_read(path)

    def open_for_read(self, path: str) -> ReadHandle:
        self._record("open_for_read", path=path)
        stream = self._store.read_stream(path)
        return ReadHandle(path, stream)

    def open_for_write(self, path: str, create_if_missing: bool = True) -> WriteHandle:
        """
        Return an empty write handle for path.

        No remote call happens until the handle is closed; create_if_missing
        is accepted for interface parity since the remote write always
        creates or replaces.
        """
        self._record("open_for_write", path=path, create=create_if_missing)
        return WriteHandle(path, self._store, remote_addr=self.session.remote_addr)

    def create(self, path: str) -> WriteHandle:
        """Open with create and truncate semantics."""
        self._record("create", path=path)
        return self.open_for_write(path, create_if_missing=True)

    def open_file(self, path: str, flags: int, offset: int = 0) -> FileHandle:
        """
        Open path according to os.open() style flags.

        O_RDONLY opens the remote stream; O_WRONLY, O_RDWR or O_CREAT
        return a write handle. Appending and resuming at an offset need
        partial writes or seeking, which the remote store cannot do.

        Raises:
            UnsupportedOperationError: For O_APPEND or a non-zero offset
        """
        self._record("open_file", path=path, flags=flags, offset=offset)

        if offset:
            raise UnsupportedOperationError(f"cannot open {path} at offset {offset}: seek not supported")
        if flags & os.O_APPEND:
            raise UnsupportedOperationError(f"cannot append to {path}: partial writes not supported")

        access_mode = flags & os.O_ACCMODE
        if access_mode == os.O_RDONLY and not flags & os.O_CREAT:
            return self.open_for_read(path)
        return self.open_for_write(path, create_if_missing=bool(flags & os.O_CREAT))

    def mkdir(self, path: str) -> None:
        self._record("mkdir", path=path)
        self._store.mkdir(path)

    def mkdir_all(self, path: str) -> None:
        self._record("mkdir_all", path=path)
        self._store.mkdir_all(path)

    def remove(self, path: str) -> None:
        self._record("remove", path=path)
        self._store.remove(path)

    def remove_all(self, path: str) -> None:
        self._record("remove_all", path=path)
        self._store.remove_all(path)

    def rename(self, old_path: str, new_path: str) -> None:
        """Rename without overwriting: fails if new_path exists."""
        self._record("rename", path=old_path, destination=new_path)
        self._store.rename(old_path, new_path, overwrite=False)

    def set_permissions(self, path: str, mode: int) -> None:
        raise UnsupportedOperationError(f"chmod not supported: {path}")

    def set_times(self, path: str, atime: datetime, mtime: datetime) -> None:
        raise UnsupportedOperationError(f"chtimes not supported: {path}")

    def set_owner(self, path: str, uid: int, gid: int) -> None:
        raise UnsupportedOperationError(f"chown not supported: {path}")

    def close(self) -> None:
        """Release the session's store."""
        self._store.close()

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} remote_addr={self.remote_addr} store={self._store!r}>"
