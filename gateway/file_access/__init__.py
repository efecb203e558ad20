"""
Remote file access layer.

Bridges the virtual filesystem an FTP engine drives onto a remote
WebDAV share:
- RemoteStore contract and its WebDAV implementation
- FileInfo translation
- Read/write handles
- RemoteFilesystem adapter
"""

from gateway.file_access.base_fs import FileInfo, RemoteEntry, RemoteStore
from gateway.file_access.errors import (
    ConfigurationError,
    GatewayError,
    RemoteOperationError,
    ResourceExistsError,
    ResourceNotFoundError,
    UnsupportedOperationError,
)
from gateway.file_access.remote_fs import RemoteFilesystem, Session

__all__ = [
    "ConfigurationError",
    "FileInfo",
    "GatewayError",
    "RemoteEntry",
    "RemoteFilesystem",
    "RemoteOperationError",
    "RemoteStore",
    "ResourceExistsError",
    "ResourceNotFoundError",
    "Session",
    "UnsupportedOperationError",
]
