"""Testes para config.logging.

Cobre: configure_logging (níveis, aliases, destinos), log_fallback,
CorrelationIdFilter, create_json_formatter.
"""

from __future__ import annotations

import json
import logging
from unittest.mock import MagicMock

import pytest

from app.observability import correlation_scope, get_correlation_id
from config.logging import (
    FIELD_RENAME_MAP,
    REQUIRED_LOG_FIELDS,
    CorrelationIdFilter,
    configure_logging,
    create_json_formatter,
    get_logger,
    log_fallback,
)
from config.logging.config import DEFAULT_SERVICE_NAME, VALID_LOG_LEVELS


def _record(msg: str = "msg", level: int = logging.INFO, name: str = "test") -> logging.LogRecord:
    return logging.LogRecord(
        name=name,
        level=level,
        pathname="",
        lineno=0,
        msg=msg,
        args=(),
        exc_info=None,
    )


class TestConfigureLogging:
    """Testes para configure_logging."""

    def test_configure_logging_default_level(self) -> None:
        """Configura logging com nível padrão INFO."""
        configure_logging()
        assert logging.getLogger().level == logging.INFO

    @pytest.mark.parametrize(
        ("level", "expected"),
        [
            ("error", logging.ERROR),
            ("warn", logging.WARNING),
            ("info", logging.INFO),
            ("verbose", logging.DEBUG),
            ("debug", logging.DEBUG),
            ("silly", logging.DEBUG),
            ("CRITICAL", logging.CRITICAL),
        ],
    )
    def test_configure_logging_accepts_aliases(self, level: str, expected: int) -> None:
        """Aceita os níveis herdados da configuração original."""
        configure_logging(level=level)
        assert logging.getLogger().level == expected

    def test_configure_logging_invalid_level_raises(self) -> None:
        """Nível inválido levanta ValueError."""
        with pytest.raises(ValueError, match="Nível de log inválido"):
            configure_logging(level="INVALID")

    def test_configure_logging_invalid_destination_raises(self) -> None:
        """Destino desconhecido levanta ValueError."""
        with pytest.raises(ValueError, match="Destino de log inválido"):
            configure_logging(destinations=("syslog",))

    def test_configure_logging_replaces_handlers(self) -> None:
        """Substitui handlers existentes."""
        root = logging.getLogger()
        root.handlers = [logging.NullHandler(), logging.NullHandler()]
        configure_logging()
        assert len(root.handlers) == 1

    def test_configure_logging_console_and_file(self, tmp_path) -> None:
        """Destinos console e arquivo criam dois handlers com o filtro."""
        log_file = tmp_path / "log" / "app.log"
        configure_logging(destinations=("console", "file"), file_path=str(log_file))
        root = logging.getLogger()
        assert len(root.handlers) == 2
        assert all(
            any(isinstance(f, CorrelationIdFilter) for f in handler.filters)
            for handler in root.handlers
        )
        assert log_file.parent.is_dir()

    def test_file_destination_writes_json_with_correlation_id(self, tmp_path) -> None:
        """Linha gravada em arquivo é JSON com correlation_id do contexto."""
        log_file = tmp_path / "app.log"
        configure_logging(
            service_name="relay_test",
            correlation_id_getter=get_correlation_id,
            destinations=("file",),
            file_path=str(log_file),
        )
        with correlation_scope("evt-42"):
            get_logger("tests.logging").info("webhook_delivered", extra={"attempts": 1})
        for handler in logging.getLogger().handlers:
            handler.flush()

        line = json.loads(log_file.read_text(encoding="utf-8").strip().splitlines()[-1])
        assert line["message"] == "webhook_delivered"
        assert line["correlation_id"] == "evt-42"
        assert line["service"] == "relay_test"
        assert line["level"] == "INFO"
        assert line["attempts"] == 1

    def test_valid_log_levels_constant(self) -> None:
        """VALID_LOG_LEVELS contém os níveis esperados."""
        assert {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"} == VALID_LOG_LEVELS

    def test_default_service_name_constant(self) -> None:
        assert DEFAULT_SERVICE_NAME == "wpp_relay"


class TestLogFallback:
    """Testes para log_fallback."""

    def test_log_fallback_basic(self) -> None:
        """Log de degradação em nível warning com componente."""
        logger = MagicMock(spec=logging.Logger)
        log_fallback(logger, "media_resolver")
        logger.warning.assert_called_once()
        call_args = logger.warning.call_args
        assert call_args[0][0] == "Fallback applied for %s"
        assert call_args[0][1] == "media_resolver"
        extra = call_args[1]["extra"]
        assert extra["fallback_used"] is True
        assert extra["component"] == "media_resolver"
        assert "reason" not in extra
        assert "elapsed_ms" not in extra

    def test_log_fallback_with_all_params(self) -> None:
        logger = MagicMock(spec=logging.Logger)
        log_fallback(logger, "media_resolver", reason="timeout", elapsed_ms=5000.0)
        extra = logger.warning.call_args[1]["extra"]
        assert extra["reason"] == "timeout"
        assert extra["elapsed_ms"] == 5000.0


class TestCorrelationIdFilter:
    """Testes para CorrelationIdFilter."""

    def test_filter_adds_correlation_id_from_getter(self) -> None:
        filter_ = CorrelationIdFilter("my_service", lambda: "corr-123")
        record = _record()
        assert filter_.filter(record) is True
        assert record.correlation_id == "corr-123"
        assert record.service == "my_service"

    def test_filter_preserves_explicit_correlation_id(self) -> None:
        """Preserva correlation_id passado via extra."""
        filter_ = CorrelationIdFilter("svc", lambda: "from-getter")
        record = _record()
        record.correlation_id = "explicit-id"
        filter_.filter(record)
        assert record.correlation_id == "explicit-id"

    def test_filter_uses_empty_string_when_no_getter(self) -> None:
        filter_ = CorrelationIdFilter("service_name", None)
        record = _record()
        filter_.filter(record)
        assert record.correlation_id == ""


class TestCreateJsonFormatter:
    """Testes para create_json_formatter e constantes."""

    def test_required_log_fields_content(self) -> None:
        assert set(REQUIRED_LOG_FIELDS) == {
            "asctime",
            "levelname",
            "name",
            "message",
            "correlation_id",
            "service",
        }

    def test_field_rename_map_content(self) -> None:
        assert FIELD_RENAME_MAP == {"levelname": "level", "name": "logger"}

    def test_json_formatter_formats_record(self) -> None:
        """Record vira JSON com campos renomeados."""
        formatter = create_json_formatter()
        record = _record(msg="session_restored", name="app.sessions.registry")
        record.correlation_id = "abc-123"
        record.service = "test_service"

        payload = json.loads(formatter.format(record))

        assert payload["message"] == "session_restored"
        assert payload["logger"] == "app.sessions.registry"
        assert payload["level"] == "INFO"
        assert payload["correlation_id"] == "abc-123"
