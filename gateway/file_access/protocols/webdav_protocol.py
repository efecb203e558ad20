# gateway/file_access/protocols/webdav_protocol.py
"""
WebDAV remote store for NextCloud shares.

Uses the webdav4 client on top of an httpx client, so outbound requests
go through whatever httpx transport the session driver composed
(certificate-verification bypass, request tracing).

Configuration comes from the session driver:
    base_url:  https://cloud.example.com/public.php/dav/files/<share token>
    username:  FTP username (descriptive)
    token:     share token, also sent as the basic-auth password

Library errors are normalised to the gateway's RemoteOperationError
family; the original exception is kept as __cause__.
"""
import io
import stat as stat_module
from contextlib import ExitStack, contextmanager
from datetime import datetime, timezone
from typing import Any, BinaryIO, Dict, Iterator, List, Optional

import httpx
import structlog
from webdav4.client import Client, ClientError, ResourceAlreadyExists, ResourceNotFound

from gateway.file_access.base_fs import RemoteEntry, RemoteStore
from gateway.file_access.errors import (
    RemoteOperationError,
    ResourceExistsError,
    ResourceNotFoundError,
)

logger = structlog.get_logger()

# WebDAV has no permission model; these mirror what NextCloud clients show.
DIRECTORY_MODE = stat_module.S_IFDIR | 0o775
FILE_MODE = stat_module.S_IFREG | 0o664

EPOCH = datetime.fromtimestamp(0, tz=timezone.utc)

HTTP_NOT_FOUND = 404
HTTP_METHOD_NOT_ALLOWED = 405
HTTP_PRECONDITION_FAILED = 412


@contextmanager
def translate_errors(operation: str, path: str) -> Iterator[None]:
    """Re-raise webdav4/httpx failures as RemoteOperationError subclasses."""
    try:
        yield
    except ResourceNotFound as e:
        raise ResourceNotFoundError(f"{operation} {path}: not found") from e
    except ResourceAlreadyExists as e:
        raise ResourceExistsError(f"{operation} {path}: destination exists") from e
    except (ClientError, httpx.HTTPError) as e:
        status_code = getattr(getattr(e, "response", None), "status_code", None)
        if status_code == HTTP_NOT_FOUND:
            raise ResourceNotFoundError(f"{operation} {path}: not found") from e
        # MKCOL answers 405 when the resource already exists
        if status_code == HTTP_PRECONDITION_FAILED or (
            status_code == HTTP_METHOD_NOT_ALLOWED and operation == "mkdir"
        ):
            raise ResourceExistsError(f"{operation} {path}: destination exists") from e
        logger.error("webdav_operation_failed", operation=operation, path=path, error=str(e))
        raise RemoteOperationError(f"{operation} {path} failed: {e}") from e


class RemoteStream:
    """Open remote download; read() in order, close() releases the response."""

    def __init__(self, path: str, stream: BinaryIO, resources: ExitStack):
        self.path = path
        self._stream = stream
        self._resources = resources

    def read(self, size: int = -1) -> bytes:
        with translate_errors("read", self.path):
            return self._stream.read(size)

    def close(self) -> None:
        with translate_errors("close", self.path):
            self._resources.close()


class WebDAVRemoteStore(RemoteStore):
    """
    RemoteStore backed by a WebDAV endpoint.

    One instance per FTP session. The base URL is fixed at construction.
    Retries are disabled: failure behaviour is the transport's.
    """

    def __init__(
        self,
        base_url: str,
        username: str,
        token: str,
        transport: Optional[httpx.BaseTransport] = None,
        timeout: float = 30.0
    ):
        self._base_url = base_url
        self.username = username
        self._http = httpx.Client(auth=(username, token), transport=transport, timeout=timeout)
        self._client = Client(base_url, http_client=self._http, retry=False)

        logger.debug("webdav_store_initialized", base_url=base_url, user=username)

    @property
    def base_url(self) -> str:
        return self._base_url

    def _to_entry(self, info: Dict[str, Any]) -> RemoteEntry:
        is_directory = info.get("type") == "directory"
        return RemoteEntry(
            name=info.get("name") or info.get("href") or "",
            size=info.get("content_length") or 0,
            mode=DIRECTORY_MODE if is_directory else FILE_MODE,
            modified_time=info.get("modified") or EPOCH,
            is_directory=is_directory,
        )

    def stat(self, path: str) -> RemoteEntry:
        with translate_errors("stat", path):
            info = self._client.info(path)
        return self._to_entry(info)

    def read_dir(self, path: str) -> List[RemoteEntry]:
        with translate_errors("read_dir", path):
            items = self._client.ls(path, detail=True)

        entries = [self._to_entry(item) for item in items]
        logger.debug("webdav_read_dir", path=path, count=len(entries))
        return entries

    def read_stream(self, path: str) -> RemoteStream:
        resources = ExitStack()
        with translate_errors("open", path):
            stream = resources.enter_context(self._client.open(path, mode="rb"))
        return RemoteStream(path, stream, resources)

    def write(self, path: str, data: bytes) -> None:
        with translate_errors("write", path):
            self._client.upload_fileobj(io.BytesIO(data), path, overwrite=True)
        logger.debug("webdav_write", path=path, size=len(data))

    def mkdir(self, path: str) -> None:
        with translate_errors("mkdir", path):
            self._client.mkdir(path)

    def mkdir_all(self, path: str) -> None:
        """Create path and its missing parents, root first. Existing components are skipped."""
        parts = [part for part in path.split("/") if part]
        for depth in range(1, len(parts) + 1):
            component = "/" + "/".join(parts[:depth])
            try:
                self.mkdir(component)
            except ResourceExistsError:
                logger.debug("webdav_mkdir_all_exists", path=component)

    def remove(self, path: str) -> None:
        with translate_errors("remove", path):
            self._client.remove(path)

    def remove_all(self, path: str) -> None:
        # DELETE on a collection is recursive in WebDAV
        try:
            self.remove(path)
        except ResourceNotFoundError:
            logger.debug("webdav_remove_all_missing", path=path)

    def rename(self, old_path: str, new_path: str, overwrite: bool = False) -> None:
        with translate_errors("rename", old_path):
            self._client.move(old_path, new_path, overwrite=overwrite)

    def close(self) -> None:
        self._http.close()
