"""Tests for structlog configuration.

Kept minimal; structlog's own suite covers the library. These check the
wrapper and the release tagging processor.
"""

import json
import logging

import structlog

from stackplan.core.logging import _inject_release, bind_release, configure_structlog, stdlib_formatter


class TestConfigureStructlog:
    def test_configure_does_not_raise_in_debug_mode(self) -> None:
        configure_structlog(debug=True)

    def test_configure_does_not_raise_in_prod_mode(self) -> None:
        configure_structlog(debug=False)

    def test_logger_usable_after_configure(self) -> None:
        configure_structlog(debug=True)
        logger = structlog.get_logger("test")
        logger.info("test message", key="value")

    def test_configure_multiple_times_is_safe(self) -> None:
        configure_structlog(debug=True)
        configure_structlog(debug=False)
        configure_structlog(debug=True)


class TestBindRelease:
    def test_release_added_to_events(self) -> None:
        bind_release("/srv/app/releases/1")
        try:
            event = _inject_release(None, "info", {"event": "building"})
        finally:
            bind_release("")

        assert event["release_path"] == "/srv/app/releases/1"

    def test_no_release_bound(self) -> None:
        bind_release("")
        assert "release_path" not in _inject_release(None, "info", {"event": "idle"})


class TestStdlibFormatter:
    def test_stdlib_record_gets_release_path(self) -> None:
        record = logging.LogRecord("stackplan.test", logging.INFO, __file__, 1, "built %s", ("api",), None)

        bind_release("/srv/app/releases/1")
        try:
            line = stdlib_formatter(debug=False).format(record)
        finally:
            bind_release("")

        event = json.loads(line)
        assert event["event"] == "built api"
        assert event["level"] == "info"
        assert event["release_path"] == "/srv/app/releases/1"

    def test_configure_installs_single_root_handler(self) -> None:
        configure_structlog(debug=True)
        configure_structlog(debug=False)

        formatters = [
            h.formatter for h in logging.getLogger().handlers
            if isinstance(h.formatter, structlog.stdlib.ProcessorFormatter)
        ]
        assert len(formatters) == 1
