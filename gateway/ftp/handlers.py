# gateway/ftp/handlers.py
"""
pyftpdlib handler and authorizer classes for the gateway.

- ShareTokenAuthorizer: delegates login to the SessionDriver and
  attaches the resulting RemoteFilesystem to the command channel
- GatewayFTPHandler / ImplicitTLSFTPHandler: command channels (plain or
  TLS from the first byte)
- GatewayDTPHandler / GatewayTLSDTPHandler: data channels that report a
  failed upload commit as 550 instead of 226
"""
from typing import Optional

import structlog
from pyftpdlib.authorizers import AuthenticationFailed
from pyftpdlib.handlers import DTPHandler, FTPHandler, TLS_DTPHandler, TLS_FTPHandler

from gateway.file_access.errors import ConfigurationError
from gateway.ftp.driver import SessionDriver
from gateway.ftp.filesystem import RemoteAbstractedFS

logger = structlog.get_logger()


def _remote_addr(handler) -> str:
    return f"{handler.remote_ip}:{handler.remote_port}"


class ShareTokenAuthorizer:
    """
    Authorizer treating the FTP password as a NextCloud share token.

    Any username is accepted; whether the token is valid is decided by the
    remote store on the first filesystem call. Permissions are not
    restricted here: operations the share cannot do fail in the adapter.
    """

    perms = "elradfmwMT"

    def __init__(self, driver: SessionDriver):
        self.driver = driver

    def validate_authentication(self, username: str, password: str, handler) -> None:
        try:
            handler.remote_fs = self.driver.auth_user(_remote_addr(handler), username, password)
        except ConfigurationError as e:
            raise AuthenticationFailed(str(e)) from e

    def get_home_dir(self, username: str) -> str:
        return "/"

    def has_user(self, username: str) -> bool:
        return True

    def has_perm(self, username: str, perm: str, path: Optional[str] = None) -> bool:
        return perm in self.perms

    def get_perms(self, username: str) -> str:
        return self.perms

    def get_msg_login(self, username: str) -> str:
        return "Login successful."

    def get_msg_quit(self, username: str) -> str:
        return "Goodbye."

    def impersonate_user(self, username: str, password: str) -> None:
        pass

    def terminate_impersonation(self, username: str) -> None:
        pass


class UploadCommitMixin:
    """
    Close the transferred file before pyftpdlib does, so a failing remote
    write (the only moment an upload touches NextCloud) turns the final
    reply into a 550.
    """

    def close(self):
        if not self._closed and self.file_obj is not None and not self.file_obj.closed:
            try:
                self.file_obj.close()
            except OSError as e:
                logger.error("transfer_close_failed", path=self.file_obj.name, error=str(e))
                self.transfer_finished = False
                self._resp = ("550 Upload to remote store failed.", logger.error)
        super().close()


class GatewayDTPHandler(UploadCommitMixin, DTPHandler):
    pass


class GatewayTLSDTPHandler(UploadCommitMixin, TLS_DTPHandler):
    pass


class SessionHandlerMixin:
    """Connection lifecycle hooks shared by the plain and TLS handlers."""

    session_driver: SessionDriver = None
    remote_fs = None
    abstracted_fs = RemoteAbstractedFS
    # handles have no fileno() and no tell()
    use_sendfile = False

    def on_connect(self):
        self.banner = self.session_driver.client_connected(_remote_addr(self))

    def on_disconnect(self):
        if self.remote_fs is not None:
            self.remote_fs.close()
            self.remote_fs = None
        self.session_driver.client_disconnected(_remote_addr(self))


class GatewayFTPHandler(SessionHandlerMixin, FTPHandler):
    dtp_handler = GatewayDTPHandler


class ImplicitTLSFTPHandler(SessionHandlerMixin, TLS_FTPHandler):
    """
    TLS_FTPHandler that secures the control channel immediately on
    connect (implicit FTPS). Data channels are always protected.
    """

    dtp_handler = GatewayTLSDTPHandler
    tls_control_required = True
    tls_data_required = True

    def handle(self):
        self.secure_connection(self.ssl_context)

    def handle_ssl_established(self):
        # the 220 greeting can only go out once the handshake is done
        self._pbsz = True
        self._prot = True
        super().handle()
