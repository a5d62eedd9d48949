"""Test structured logging setup."""

from __future__ import annotations

import io
import json
import logging
from pathlib import Path

from parfile.core.logging import JSONFormatter, get_logger, setup_logging
from parfile.core.store import ParameterStore


def test_json_formatter_merges_extra_data():
    record = logging.LogRecord("parfile.test", logging.INFO, __file__, 1, "parsed", None, None)
    record.extra_data = {"fields": 3}
    data = json.loads(JSONFormatter().format(record))
    assert data["message"] == "parsed"
    assert data["level"] == "INFO"
    assert data["fields"] == 3


def test_setup_logging_console_and_file(tmp_path: Path):
    console = io.StringIO()
    log_path = tmp_path / "log.jsonl"
    setup_logging(log_path, logging.DEBUG, stream=console)
    try:
        get_logger("parfile.test").info("hello", {"parameter_file": "run.par"})
        for handler in logging.getLogger("parfile").handlers:
            handler.flush()
        assert "hello" in console.getvalue()
        record = json.loads(log_path.read_text().splitlines()[0])
        assert record["parameter_file"] == "run.par"
    finally:
        for handler in logging.getLogger("parfile").handlers:
            handler.close()
        logging.getLogger("parfile").handlers.clear()
        logging.getLogger("parfile").setLevel(logging.NOTSET)


def test_bound_context_reaches_records(caplog):
    log = get_logger("parfile.test").bind(parameter_file="run.par")
    with caplog.at_level(logging.INFO, logger="parfile"):
        log.info("numbered", {"counter": 2})
        log.bind(field="saveDirectory").info("patched")
    first, second = caplog.records
    assert first.extra_data == {"parameter_file": "run.par", "counter": 2}
    assert second.extra_data == {"parameter_file": "run.par", "field": "saveDirectory"}


def test_json_formatter_defaults_parameter_file():
    record = logging.LogRecord("parfile.test", logging.INFO, __file__, 1, "plain", None, None)
    data = json.loads(JSONFormatter().format(record))
    assert data["parameter_file"] is None


def test_parse_log_names_parameter_file(write_par, caplog):
    path = write_par("a 1\nb 2\n")
    with caplog.at_level(logging.DEBUG, logger="parfile"):
        ParameterStore(path)
    record = next(r for r in caplog.records if r.getMessage().startswith("Parsed"))
    assert record.extra_data == {"parameter_file": str(path), "fields": 2}
