# gateway/file_access/errors.py
"""
Exception hierarchy for the gateway.

Three kinds of failure reach callers:
- ConfigurationError: the configured NextCloud URL is missing or malformed
- RemoteOperationError (and subclasses): the remote store failed
- UnsupportedOperationError: the remote model cannot express the operation

Remote and capability errors are OSError subclasses carrying an errno so
the FTP engine reports them like any other filesystem failure.
"""
import errno
import io


class GatewayError(Exception):
    """Base class for every error raised by the gateway."""


class ConfigurationError(GatewayError, ValueError):
    """Invalid or missing gateway configuration. Never retried."""


class RemoteOperationError(GatewayError, OSError):
    """A call against the remote store failed (network, HTTP status, parsing)."""

    errno_code = errno.EIO

    def __init__(self, message: str):
        OSError.__init__(self, self.errno_code, message)


class ResourceNotFoundError(RemoteOperationError, FileNotFoundError):
    """The remote path does not exist."""

    errno_code = errno.ENOENT


class ResourceExistsError(RemoteOperationError, FileExistsError):
    """The remote destination already exists and overwriting is disabled."""

    errno_code = errno.EEXIST


class UnsupportedOperationError(GatewayError, io.UnsupportedOperation):
    """
    Operation the remote model cannot express.

    Raised for permission/ownership/time changes, seeking, random access
    and reading or writing on the wrong kind of handle. Always raised,
    whatever the arguments.
    """

    errno_code = errno.ENOTSUP

    def __init__(self, message: str):
        OSError.__init__(self, self.errno_code, message)
