# gateway/file_access/protocols/transports.py
"""
httpx transport middleware for outbound WebDAV traffic.

Composition order is fixed:
    HTTPTransport (verification bypass applied here, innermost)
      -> TracingTransport (outermost, optional)
"""
import httpx
import structlog

logger = structlog.get_logger()


def _decode(body: bytes) -> str:
    return body.decode("utf-8", errors="replace")


def dump_request(request: httpx.Request, body: bytes) -> str:
    lines = [f"{request.method} {request.url.raw_path.decode('ascii')} HTTP/1.1"]
    lines.append(f"Host: {request.url.netloc.decode('ascii')}")
    lines.extend(f"{name}: {value}" for name, value in request.headers.items() if name.lower() != "host")
    return "\r\n".join(lines) + "\r\n\r\n" + _decode(body)


def dump_response(response: httpx.Response, body: bytes) -> str:
    reason = response.reason_phrase or ""
    lines = [f"{response.http_version} {response.status_code} {reason}".rstrip()]
    lines.extend(f"{name}: {value}" for name, value in response.headers.items())
    return "\r\n".join(lines) + "\r\n\r\n" + _decode(body)


class TracingTransport(httpx.BaseTransport):
    """
    Logs every outbound request and its response, bodies included.

    The response body is buffered so it can be logged, then handed back
    as the same raw bytes; status, headers and content are untouched.
    Transport failures are logged and re-raised as-is.
    """

    def __init__(self, transport: httpx.BaseTransport):
        self._transport = transport

    def handle_request(self, request: httpx.Request) -> httpx.Response:
        body = request.read()
        logger.debug("webdav_request", dump=dump_request(request, body))

        try:
            response = self._transport.handle_request(request)
        except Exception as e:
            logger.debug("webdav_request_failed", method=request.method, url=str(request.url), error=str(e))
            raise

        # responses built in memory (content=...) arrive already read
        if response.is_stream_consumed:
            raw = response.content
        else:
            raw = b"".join(response.iter_raw())
        logger.debug("webdav_response", dump=dump_response(response, raw))

        return httpx.Response(
            status_code=response.status_code,
            headers=response.headers,
            stream=httpx.ByteStream(raw),
            extensions=response.extensions,
            request=request,
        )

    def close(self) -> None:
        self._transport.close()


def build_transport(insecure_skip_verify: bool = False, trace: bool = False) -> httpx.BaseTransport:
    """
    Compose the outbound transport for one session.

    Args:
        insecure_skip_verify: Disable TLS certificate verification
        trace: Wrap with TracingTransport
    """
    transport: httpx.BaseTransport = httpx.HTTPTransport(verify=not insecure_skip_verify)
    if trace:
        transport = TracingTransport(transport)
    return transport
