# gateway/file_access/protocols/__init__.py
"""
Remote store protocol implementations and their transport middleware.
"""

from gateway.file_access.protocols.transports import TracingTransport, build_transport
from gateway.file_access.protocols.webdav_protocol import WebDAVRemoteStore

__all__ = [
    "TracingTransport",
    "WebDAVRemoteStore",
    "build_transport",
]
