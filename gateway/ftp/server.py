# gateway/ftp/server.py
"""
pyftpdlib server assembly.
"""
from pyftpdlib.servers import ThreadedFTPServer

from gateway.ftp.driver import ListenerSettings, SessionDriver
from gateway.ftp.handlers import GatewayFTPHandler, ImplicitTLSFTPHandler, ShareTokenAuthorizer


def build_handler(driver: SessionDriver, listener: ListenerSettings) -> type:
    """
    Create a handler class bound to driver.

    A fresh subclass per server keeps pyftpdlib's class-level
    configuration out of the shared handler classes.
    """
    ssl_context = driver.get_tls_context() if listener.tls_required else None
    base = ImplicitTLSFTPHandler if ssl_context is not None else GatewayFTPHandler

    attrs = {
        "session_driver": driver,
        "authorizer": ShareTokenAuthorizer(driver),
        "passive_ports": list(listener.passive_ports),
    }
    if ssl_context is not None:
        attrs["ssl_context"] = ssl_context

    return type("NextCloudFTPHandler", (base,), attrs)


def build_server(driver: SessionDriver) -> ThreadedFTPServer:
    """One thread per connection, so a slow remote call blocks only its own session."""
    listener = driver.get_listener_settings()
    handler = build_handler(driver, listener)
    return ThreadedFTPServer(listener.address, handler)
