# gateway/ftp/driver.py
"""
Session driver: turns FTP logins into per-session remote filesystems.

The FTP password is a NextCloud public share token, not an account
password. It routes the session to exactly one share
(<NEXTCLOUD_URL>/public.php/dav/files/<token>) and is also sent as the
WebDAV credential. The FTP username is only used for logging.
"""
import posixpath
from dataclasses import dataclass
from typing import Callable, Optional, Tuple
from urllib.parse import quote, urlsplit, urlunsplit

import structlog
from OpenSSL import SSL

from gateway.config import Settings
from gateway.file_access.base_fs import RemoteStore
from gateway.file_access.errors import ConfigurationError
from gateway.file_access.protocols.transports import build_transport
from gateway.file_access.protocols.webdav_protocol import WebDAVRemoteStore
from gateway.file_access.remote_fs import RemoteFilesystem, Session
from gateway.ftp.tls import build_ssl_context, generate_self_signed_cert
from gateway.monitoring.audit import OperationObserver, log_operation

logger = structlog.get_logger()

PUBLIC_SHARE_PATH = "public.php/dav/files"
WELCOME_MESSAGE = "Welcome to NextCloud FTP Gateway"
LISTEN_HOST = "0.0.0.0"

# store_factory(base_url, username, token, transport=..., timeout=...)
StoreFactory = Callable[..., RemoteStore]


@dataclass(frozen=True)
class ListenerSettings:
    """What the FTP engine needs to open its sockets."""
    host: str
    port: int
    passive_ports: range
    tls_required: bool

    @property
    def address(self) -> Tuple[str, int]:
        return self.host, self.port


def build_share_url(base_url: str, token: str) -> str:
    """
    Join the public-share path and the escaped token onto base_url.

    Raises:
        ConfigurationError: If base_url is not an absolute http(s) URL
    """
    try:
        parts = urlsplit(base_url)
        parts.port  # raises ValueError on a malformed port
    except ValueError as exc:
        raise ConfigurationError(f"invalid nextcloud URL: {exc}") from exc

    if parts.scheme not in ("http", "https") or not parts.hostname:
        raise ConfigurationError(f"invalid nextcloud URL: {base_url!r}")

    path = posixpath.join(parts.path or "/", PUBLIC_SHARE_PATH, quote(token, safe=""))
    return urlunsplit(parts._replace(path=path))


class SessionDriver:
    """
    Per-server driver invoked by the FTP engine.

    Holds only immutable configuration; every authenticated connection
    gets its own store and filesystem.
    """

    def __init__(
        self,
        settings: Settings,
        store_factory: StoreFactory = WebDAVRemoteStore,
        observer: OperationObserver = log_operation
    ):
        self.settings = settings
        self._store_factory = store_factory
        self._observer = observer

    def get_listener_settings(self) -> ListenerSettings:
        listener = ListenerSettings(
            host=LISTEN_HOST,
            port=self.settings.FTP_PORT,
            passive_ports=range(self.settings.PASV_MIN_PORT, self.settings.PASV_MAX_PORT + 1),
            tls_required=self.settings.FTP_TLS,
        )
        logger.info(
            "passive_port_range",
            min_port=self.settings.PASV_MIN_PORT,
            max_port=self.settings.PASV_MAX_PORT
        )
        return listener

    def client_connected(self, remote_addr: str) -> str:
        logger.info("client_connected", remote_addr=remote_addr)
        return WELCOME_MESSAGE

    def client_disconnected(self, remote_addr: str) -> None:
        logger.info("client_disconnected", remote_addr=remote_addr)

    def auth_user(self, remote_addr: str, user: str, token: str) -> RemoteFilesystem:
        """
        Build the remote filesystem for one login.

        Args:
            remote_addr: Client address, for logging
            user: FTP username (descriptive only)
            token: FTP password, used as the share token

        Raises:
            ConfigurationError: If NEXTCLOUD_URL cannot be parsed. Checked on
                every login, so a bad URL fails every connection.
        """
        logger.info("auth_attempt", remote_addr=remote_addr, user=user)

        try:
            share_url = build_share_url(self.settings.NEXTCLOUD_URL, token)
        except ConfigurationError as e:
            logger.error("auth_configuration_error", remote_addr=remote_addr, user=user, error=str(e))
            raise

        if self.settings.INSECURE_SKIP_VERIFY:
            logger.warning("tls_verification_disabled", remote_addr=remote_addr)

        transport = build_transport(
            insecure_skip_verify=self.settings.INSECURE_SKIP_VERIFY,
            trace=self.settings.DEBUG,
        )
        store = self._store_factory(
            share_url,
            user,
            token,
            transport=transport,
            timeout=self.settings.HTTP_TIMEOUT,
        )

        session = Session(remote_addr=remote_addr, username=user, store=store, observer=self._observer)
        return RemoteFilesystem(session)

    def get_tls_context(self) -> Optional[SSL.Context]:
        """Fresh in-memory TLS context when FTP_TLS is on, otherwise None."""
        if not self.settings.FTP_TLS:
            return None

        cert, key = generate_self_signed_cert()
        logger.info("tls_certificate_generated", subject=cert.subject.rfc4514_string())
        return build_ssl_context(cert, key)
