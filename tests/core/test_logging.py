"""Tests for structured logging."""

import json
import logging
from pathlib import Path

import pytest
import structlog

from proxyplane.config.models import LoggingConfig, LogOutputConfig
from proxyplane.config.models import ProxyConfig, ProxyPlaneConfig
from proxyplane.core.logging import (
    _add_proxy_type,
    bind_proxy_type,
    clear_proxy_type,
    configure_logging,
    get_logger,
    get_proxy_type,
)
from proxyplane.factory import AccessInterceptorFactory
from tests import assets


class TestProxyTypeCorrelation:
    """Proxied type context variable tests."""

    def setup_method(self) -> None:
        """Clear proxied type before each test."""
        clear_proxy_type()

    def test_given_type_id_when_bound_then_can_retrieve(self) -> None:
        # Given
        type_id = "pkg.Target"

        # When
        bind_proxy_type(type_id)

        # Then
        assert get_proxy_type() == type_id

    def test_given_bound_type_when_cleared_then_none(self) -> None:
        # Given
        bind_proxy_type("pkg.Target")

        # When
        clear_proxy_type()

        # Then
        assert get_proxy_type() is None

    def test_given_bound_type_when_processed_then_added_to_event(self) -> None:
        """The processor adds proxy_type without overwriting an explicit value."""
        # Given
        bind_proxy_type("pkg.Target")

        # When
        added = _add_proxy_type(None, "info", {"event": "x"})
        kept = _add_proxy_type(None, "info", {"event": "x", "proxy_type": "explicit"})

        # Then
        assert added["proxy_type"] == "pkg.Target"
        assert kept["proxy_type"] == "explicit"

    def test_given_no_bound_type_when_processed_then_event_unchanged(self) -> None:
        assert _add_proxy_type(None, "info", {"event": "x"}) == {"event": "x"}


class TestLoggingConfiguration:
    """Logging configuration tests."""

    def setup_method(self) -> None:
        """Reset structlog and stdlib logging before each test."""
        structlog.reset_defaults()
        logging.getLogger().handlers.clear()

    def test_given_json_format_when_log_then_valid_json_output(
        self, capsys: pytest.CaptureFixture[str]
    ) -> None:
        """JSON format produces valid JSON with required fields."""
        # Given
        configure_logging(json_format=True, level="INFO")
        logger = get_logger("test")

        # When
        logger.info("test message", key="value")

        # Then
        captured = capsys.readouterr()
        lines = [line for line in captured.err.strip().split("\n") if line]
        if lines:
            data = json.loads(lines[-1])
            assert data["event"] == "test message"
            assert data["key"] == "value"
            assert "timestamp" in data
            assert data["level"] == "info"

    def test_given_config_object_when_configure_then_takes_precedence(self, tmp_path: Path) -> None:
        """LoggingConfig object takes precedence over simple params."""
        # Given
        log_file = tmp_path / "test.log"
        config = LoggingConfig(
            level="DEBUG",
            outputs=[LogOutputConfig(format="json", destination=str(log_file))],
        )

        # When - config's DEBUG should override the level="ERROR" param
        configure_logging(config=config, json_format=False, level="ERROR")
        get_logger().debug("debug msg")

        # Then
        assert "debug msg" in log_file.read_text()

    def test_given_multi_output_config_when_configure_then_logs_to_all(
        self, tmp_path: Path
    ) -> None:
        """Multiple outputs receive logs according to their levels."""
        # Given
        debug_file = tmp_path / "debug.log"
        info_file = tmp_path / "info.log"
        config = LoggingConfig(
            level="DEBUG",
            outputs=[
                LogOutputConfig(format="json", destination=str(info_file), level="INFO"),
                LogOutputConfig(format="json", destination=str(debug_file)),
            ],
        )

        # When
        configure_logging(config=config)
        logger = get_logger()
        logger.debug("debug only")
        logger.info("info msg")

        # Then
        info_content = info_file.read_text()
        assert "info msg" in info_content
        assert "debug only" not in info_content
        debug_content = debug_file.read_text()
        assert "debug only" in debug_content
        assert "info msg" in debug_content

    def test_given_debug_logging_when_proxy_type_built_then_events_carry_type(
        self, tmp_path: Path
    ) -> None:
        """Events emitted while building a proxy class name the proxied type."""
        # Given
        log_file = tmp_path / "build.log"
        configure_logging(
            config=LoggingConfig(
                level="DEBUG",
                outputs=[LogOutputConfig(format="json", destination=str(log_file))],
            )
        )
        factory = AccessInterceptorFactory(ProxyPlaneConfig(proxy=ProxyConfig(cache_types=False)))

        # When
        factory.proxy_type(assets.ValueHolder)

        # Then
        events = [json.loads(line) for line in log_file.read_text().splitlines() if line]
        built = [e for e in events if e["event"] == "factory.proxy_type_built"]
        assert built
        assert built[0]["proxy_type"] == "tests.assets.ValueHolder"
        assert get_proxy_type() is None
