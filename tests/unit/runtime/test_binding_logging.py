from __future__ import annotations

import json
import logging
import sys

from imbind.api.logging import BindingLoggingConfig, configure_binding_logging
from imbind.runtime.logging import JsonFormatter, get_binding_logger, setup_binding_logging


def _restore_root(handlers: list[logging.Handler], level: int) -> None:
    root = logging.getLogger()
    root.handlers.clear()
    root.handlers.extend(handlers)
    root.setLevel(level)


def test_setup_binding_logging_adds_handler_when_missing(monkeypatch) -> None:
    root = logging.getLogger()
    original_handlers = list(root.handlers)
    original_level = root.level
    try:
        root.handlers.clear()
        root.setLevel(logging.NOTSET)
        monkeypatch.setenv("IMBIND_LOG_LEVEL", "DEBUG")
        setup_binding_logging()
        assert root.handlers
        assert root.level == logging.DEBUG
    finally:
        _restore_root(original_handlers, original_level)


def test_setup_binding_logging_does_not_override_existing_handlers() -> None:
    root = logging.getLogger()
    original_handlers = list(root.handlers)
    original_level = root.level
    sentinel = logging.NullHandler()
    try:
        root.handlers.clear()
        root.addHandler(sentinel)
        root.setLevel(logging.WARNING)
        setup_binding_logging()
        assert root.handlers == [sentinel]
        assert root.level == logging.WARNING
    finally:
        _restore_root(original_handlers, original_level)


def test_configure_binding_logging_streams_to_file(tmp_path) -> None:
    root = logging.getLogger()
    original_handlers = list(root.handlers)
    original_level = root.level
    log_file = tmp_path / "logs" / "imbind.jsonl"
    try:
        configure_binding_logging(
            BindingLoggingConfig(level_name="info", file_path=str(log_file), file_format="json")
        )
        assert len(root.handlers) == 1
        get_binding_logger("dispatch").info("hello", extra={"op": "draw_rect"})
        configure_binding_logging(BindingLoggingConfig(level_name="warning"))
        payload = json.loads(log_file.read_text(encoding="utf-8").splitlines()[0])
        assert payload["logger"] == "imbind.dispatch"
        assert payload["msg"] == "hello"
        assert payload["fields"] == {"op": "draw_rect"}
    finally:
        _restore_root(original_handlers, original_level)


def test_json_formatter_includes_exception_text() -> None:
    try:
        raise ValueError("bad pixel")
    except ValueError:
        record = logging.LogRecord("imbind.engine", logging.ERROR, __file__, 1, "failed", (), sys.exc_info())
    payload = json.loads(JsonFormatter().format(record))
    assert payload["level"] == "ERROR"
    assert "bad pixel" in payload["exc_info"]


def test_get_binding_logger_prefixes_namespace() -> None:
    assert get_binding_logger("engine").name == "imbind.engine"
    assert get_binding_logger("imbind.registry").name == "imbind.registry"


def test_setup_binding_logging_uses_explicit_level() -> None:
    root = logging.getLogger()
    original_handlers = list(root.handlers)
    original_level = root.level
    try:
        root.handlers.clear()
        setup_binding_logging("ERROR")
        assert root.level == logging.ERROR
    finally:
        _restore_root(original_handlers, original_level)


def test_json_formatter_skips_asctime_set_by_text_formatter() -> None:
    record = logging.LogRecord("imbind.dispatch", logging.INFO, __file__, 1, "drawn", (), None)
    logging.Formatter("%(asctime)s %(message)s").format(record)
    assert hasattr(record, "asctime")
    payload = json.loads(JsonFormatter().format(record))
    assert "fields" not in payload
