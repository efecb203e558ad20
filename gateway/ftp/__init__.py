"""
FTP front end: session driver and the pyftpdlib glue around it.
"""

from gateway.ftp.driver import ListenerSettings, SessionDriver
from gateway.ftp.server import build_server

__all__ = [
    "ListenerSettings",
    "SessionDriver",
    "build_server",
]
