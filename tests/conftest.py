import io
import posixpath
from datetime import datetime, timezone
from typing import Dict, List, Optional, Tuple

import pytest

from gateway.config import Settings
from gateway.file_access.base_fs import RemoteEntry, RemoteStore
from gateway.file_access.errors import ResourceExistsError, ResourceNotFoundError
from gateway.file_access.protocols.webdav_protocol import DIRECTORY_MODE, FILE_MODE
from gateway.file_access.remote_fs import RemoteFilesystem, Session

MODIFIED = datetime(2024, 5, 17, 9, 30, tzinfo=timezone.utc)


def _norm(path: str) -> str:
    return "/" + path.strip("/")


class FakeRemoteStore(RemoteStore):
    """In-memory remote store that keeps insertion order like a WebDAV listing."""

    def __init__(self, base_url: str = "https://cloud.test/public.php/dav/files/tok"):
        self._base_url = base_url
        # path -> bytes for files, None for directories
        self.entries: Dict[str, Optional[bytes]] = {"/": None}
        self.writes: List[Tuple[str, bytes]] = []
        self.renames: List[Tuple[str, str, bool]] = []
        self.closed = False

    @property
    def base_url(self) -> str:
        return self._base_url

    def add_file(self, path: str, data: bytes = b"") -> None:
        self.entries[_norm(path)] = data

    def add_dir(self, path: str) -> None:
        self.entries[_norm(path)] = None

    def _entry(self, path: str) -> RemoteEntry:
        data = self.entries[path]
        is_directory = data is None
        return RemoteEntry(
            name=path.lstrip("/") + ("/" if is_directory else ""),
            size=0 if is_directory else len(data),
            mode=DIRECTORY_MODE if is_directory else FILE_MODE,
            modified_time=MODIFIED,
            is_directory=is_directory,
        )

    def _require(self, path: str) -> str:
        path = _norm(path)
        if path not in self.entries:
            raise ResourceNotFoundError(f"{path}: not found")
        return path

    def stat(self, path):
        return self._entry(self._require(path))

    def read_dir(self, path):
        path = self._require(path)
        return [
            self._entry(p) for p in self.entries
            if p != "/" and posixpath.dirname(p) == path
        ]

    def read_stream(self, path):
        path = self._require(path)
        return io.BytesIO(self.entries[path])

    def write(self, path, data):
        self.writes.append((path, data))
        self.entries[_norm(path)] = data

    def mkdir(self, path):
        path = _norm(path)
        if path in self.entries:
            raise ResourceExistsError(f"{path}: exists")
        self._require(posixpath.dirname(path))
        self.entries[path] = None

    def mkdir_all(self, path):
        parts = _norm(path).strip("/").split("/")
        for i in range(1, len(parts) + 1):
            self.entries.setdefault("/" + "/".join(parts[:i]), None)

    def remove(self, path):
        path = self._require(path)
        for p in [p for p in self.entries if p == path or p.startswith(path + "/")]:
            del self.entries[p]

    def remove_all(self, path):
        if _norm(path) in self.entries:
            self.remove(path)

    def rename(self, old_path, new_path, overwrite=False):
        self.renames.append((old_path, new_path, overwrite))
        old, new = self._require(old_path), _norm(new_path)
        if new in self.entries and not overwrite:
            raise ResourceExistsError(f"{new}: exists")
        for p in [p for p in self.entries if p == old or p.startswith(old + "/")]:
            self.entries[new + p[len(old):]] = self.entries.pop(p)

    def close(self):
        self.closed = True


class OperationRecorder:
    def __init__(self):
        self.calls = []

    def __call__(self, operation, **details):
        self.calls.append((operation, details))

    @property
    def operations(self):
        return [op for op, _ in self.calls]


GATEWAY_ENV_VARS = (
    "NEXTCLOUD_URL", "FTP_PORT", "PASV_MIN_PORT", "PASV_MAX_PORT", "FTP_TLS",
    "DEBUG", "INSECURE_SKIP_VERIFY", "LOG_LEVEL", "HTTP_TIMEOUT",
)


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    for name in GATEWAY_ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def store():
    store = FakeRemoteStore()
    store.add_file("a.txt", b"alpha")
    store.add_dir("sub")
    store.add_file("sub/b.txt", b"bravo")
    return store


@pytest.fixture
def recorder():
    return OperationRecorder()


@pytest.fixture
def remote_fs(store, recorder):
    session = Session(remote_addr="10.0.0.5:50000", username="alice", store=store, observer=recorder)
    return RemoteFilesystem(session)


@pytest.fixture
def settings():
    return Settings(_env_file=None, NEXTCLOUD_URL="https://cloud.example.com")


@pytest.fixture
def make_store():
    return FakeRemoteStore
