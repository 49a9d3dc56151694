"""Tests for settings, logging setup and the events the engine emits."""

from __future__ import annotations

import json
import logging

import pytest
from structlog.testing import capture_logs

from riel import pipeline
from riel.core.config import Settings
from riel.core.logging import get_logger, setup_logging
from tests.helpers import raising


# ─── Settings ──────────────────────────────────────────


def test_settings_defaults(monkeypatch):
    for var in ("RIEL_APP_ENV", "RIEL_LOG_LEVEL", "RIEL_LOG_JSON", "RIEL_LOG_STEP_EVENTS"):
        monkeypatch.delenv(var, raising=False)

    cfg = Settings(_env_file=None)

    assert cfg.APP_ENV == "development"
    assert cfg.LOG_LEVEL == "INFO"
    assert cfg.LOG_JSON is False
    assert cfg.LOG_STEP_EVENTS is True
    assert cfg.is_development


def test_settings_read_prefixed_env(monkeypatch):
    monkeypatch.setenv("RIEL_LOG_LEVEL", "DEBUG")
    monkeypatch.setenv("RIEL_LOG_JSON", "true")
    monkeypatch.setenv("RIEL_APP_ENV", "production")

    cfg = Settings(_env_file=None)

    assert cfg.LOG_LEVEL == "DEBUG"
    assert cfg.LOG_JSON is True
    assert not cfg.is_development


# ─── setup_logging ─────────────────────────────────────


def test_setup_logging_sets_root_level():
    setup_logging("debug", json_logs=False)

    root = logging.getLogger()
    assert root.level == logging.DEBUG
    assert len(root.handlers) == 1


def test_setup_logging_rejects_unknown_level():
    with pytest.raises(ValueError, match="Unknown log level"):
        setup_logging("LOUD")


def test_json_logs_are_rendered(capsys):
    setup_logging("INFO", json_logs=True)

    get_logger("riel.test").info("hello", answer=42)

    line = capsys.readouterr().err.strip().splitlines()[-1]
    payload = json.loads(line)
    assert payload["event"] == "hello"
    assert payload["answer"] == 42
    assert payload["level"] == "info"


# ─── Engine events ─────────────────────────────────────


async def test_engine_logs_run_summary():
    with capture_logs() as logs:
        await pipeline("orders").step(lambda ctx: {"a": 1}).run({})

    finished = [e for e in logs if e["event"] == "Pipeline run finished"]
    assert len(finished) == 1
    assert finished[0]["ok"] is True
    assert finished[0]["pipeline"] == "orders"
    assert "execution_id" in finished[0]


async def test_engine_logs_entries_and_skips():
    with capture_logs() as logs:
        await (
            pipeline()
            .step(raising(), name="charge")
            .step(lambda ctx: None, name="ship")
            .fail(lambda e, ectx, ctx: None, name="refund")
            .run({})
        )

    events = [e["event"] for e in logs]
    assert "Step failed, entering recovery" in events
    skipped = [e for e in logs if e["event"] == "Step skipped after failure"]
    assert [e["entry_name"] for e in skipped] == ["ship"]
    executed = [e["entry_name"] for e in logs if e["event"] == "Entry executed"]
    assert executed == ["charge", "refund"]


async def test_step_events_can_be_disabled():
    from riel import Pipeline

    with capture_logs() as logs:
        await Pipeline("quiet", log_step_events=False).step(lambda ctx: None).run({})

    assert [e["event"] for e in logs] == ["Pipeline run started", "Pipeline run finished"]


async def test_handler_failure_is_logged_before_propagating():
    def broken(error, error_ctx, ctx):
        raise RuntimeError("handler")

    with capture_logs() as logs:
        with pytest.raises(RuntimeError):
            await pipeline().step(raising()).fail(broken).run({})

    assert any(e["event"] == "Recovery handler raised, aborting run" for e in logs)


def test_nothing_is_printed_without_setup(capsys):
    pipeline("quiet").step(lambda ctx: {"a": 1}).step(raising()).fail(lambda e, ectx, ctx: None).run_sync({})

    captured = capsys.readouterr()
    assert captured.out == ""
    assert captured.err == ""


def test_engine_logger_sits_under_package_logger():
    assert any(isinstance(h, logging.NullHandler) for h in logging.getLogger("riel").handlers)
    assert get_logger("riel.engine").bind().name == "riel.engine"


async def test_run_summary_reports_final_mode():
    with capture_logs() as logs:
        await pipeline().step(lambda ctx: None).run({})
        await pipeline().step(raising()).run({})

    modes = [(e["ok"], e["mode"]) for e in logs if e["event"] == "Pipeline run finished"]
    assert modes == [(True, "NORMAL"), (False, "RECOVERY")]


async def test_failed_nested_pipeline_entry_is_logged_as_failed():
    inner = pipeline("inner").step(raising())

    with capture_logs() as logs:
        await pipeline("outer").step(inner.to_step(), name="sub").run({})

    statuses = [
        e["status"]
        for e in logs
        if e["event"] == "Entry executed" and e["pipeline"] == "outer"
    ]
    assert statuses == ["FAILED"]
