# gateway/main.py
"""
Command-line entry point: serve a NextCloud share over FTP.

Environment:
    NEXTCLOUD_URL          NextCloud base URL (required)
    FTP_PORT               control port (default 2121)
    PASV_MIN_PORT/MAX_PORT passive port range (default 30000-30100)
    FTP_TLS                implicit FTPS with a self-signed certificate
    DEBUG                  log every WebDAV request/response
    INSECURE_SKIP_VERIFY   skip TLS verification towards NextCloud
"""
import argparse
import sys
from typing import List, Optional

import structlog

from gateway import __version__
from gateway.config import load_settings
from gateway.file_access.errors import ConfigurationError
from gateway.ftp.driver import SessionDriver
from gateway.ftp.server import build_server
from gateway.monitoring.logger import configure_logging

logger = structlog.get_logger()


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Expose a NextCloud public share over FTP")
    parser.add_argument("--log-level", default=None, help="Override LOG_LEVEL (DEBUG, INFO, ...)")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)

    try:
        settings = load_settings()
    except ConfigurationError as exc:
        configure_logging(args.log_level or "INFO")
        logger.error("startup_failed", error=str(exc))
        return 1

    level = args.log_level or ("DEBUG" if settings.DEBUG else settings.LOG_LEVEL)
    configure_logging(level)

    driver = SessionDriver(settings)
    server = build_server(driver)

    logger.info(
        "ftp_server_listening",
        version=__version__,
        port=settings.FTP_PORT,
        nextcloud_url=settings.NEXTCLOUD_URL,
        tls=settings.FTP_TLS,
        debug=settings.DEBUG
    )
    # serve_forever closes all connections on KeyboardInterrupt/SystemExit
    server.serve_forever()
    return 0


if __name__ == "__main__":
    sys.exit(main())
