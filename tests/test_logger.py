# tests/test_logger.py
"""
Tests for logging configuration and the audit observer.
"""
import io
import json
import logging

import pytest
import structlog
from structlog.testing import capture_logs

from gateway.monitoring.audit import log_operation
from gateway.monitoring.logger import configure_logging, resolve_level


@pytest.fixture
def restore_logging():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    structlog.reset_defaults()
    root.handlers = handlers
    root.setLevel(level)


class TestResolveLevel:
    """Test level name parsing."""

    @pytest.mark.parametrize("name, expected", [
        ("DEBUG", logging.DEBUG),
        ("info", logging.INFO),
        ("Warning", logging.WARNING),
        ("bogus", logging.INFO),
    ])
    def test_names(self, name, expected):
        assert resolve_level(name) == expected


class TestConfigureLogging:
    """Test JSON output and level filtering."""

    def test_emits_json_lines(self, restore_logging):
        stream = io.StringIO()
        configure_logging("INFO", stream=stream)

        structlog.get_logger().info("client_connected", remote_addr="192.0.2.1:1")

        record = json.loads(stream.getvalue().strip())
        assert record["event"] == "client_connected"
        assert record["remote_addr"] == "192.0.2.1:1"
        assert record["level"] == "info"
        assert "timestamp" in record

    def test_filters_below_level(self, restore_logging):
        stream = io.StringIO()
        configure_logging("WARNING", stream=stream)

        logger = structlog.get_logger()
        logger.debug("webdav_request")
        logger.info("auth_attempt")
        logger.warning("tls_verification_disabled")

        lines = stream.getvalue().strip().splitlines()
        assert [json.loads(line)["event"] for line in lines] == ["tls_verification_disabled"]

    def test_stdlib_logging_shares_stream(self, restore_logging):
        stream = io.StringIO()
        configure_logging("INFO", stream=stream)

        logging.getLogger("pyftpdlib").info("concurrency model: multi-thread")

        assert "concurrency model: multi-thread" in stream.getvalue()


class TestAuditObserver:
    """Test the default operation observer."""

    def test_log_operation(self):
        with capture_logs() as logs:
            log_operation("mkdir", remote_addr="192.0.2.1:1", path="/docs")

        assert logs == [{
            "event": "fs_operation",
            "log_level": "info",
            "operation": "mkdir",
            "remote_addr": "192.0.2.1:1",
            "path": "/docs",
        }]

