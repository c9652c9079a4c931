"""Tests for run logging."""

import json
import logging

from chiro_digest import logging_utils
from chiro_digest.config import LoggingConfig
from chiro_digest.logging_utils import log_event, setup_logging


def test_jsonl_file_log_carries_event_fields(tmp_path):
    logger = setup_logging(LoggingConfig(console=False, level="DEBUG"), tmp_path)

    log_event(logger, "Discovery failed", level=logging.ERROR, event="discovery_failed", category="blocked")
    log_event(logger, "Fields not found", level=logging.DEBUG, event="field_missing", fields=["author"])
    for handler in logger.handlers:
        handler.flush()

    lines = (tmp_path / "run.jsonl").read_text(encoding="utf-8").splitlines()
    records = [json.loads(line) for line in lines]
    assert [record["event"] for record in records] == ["discovery_failed", "field_missing"]
    assert records[0]["level"] == "ERROR"
    assert records[0]["category"] == "blocked"
    assert records[0]["logger"] == logging_utils.LOGGER_NAME
    assert records[1]["fields"] == ["author"]


def test_level_filters_file_log(tmp_path):
    logger = setup_logging(LoggingConfig(console=False, level="WARNING"), tmp_path)

    log_event(logger, "Article processed", event="article_complete")
    log_event(logger, "Error processing article", level=logging.ERROR, event="article_failed")
    for handler in logger.handlers:
        handler.flush()

    records = [json.loads(line) for line in (tmp_path / "run.jsonl").read_text(encoding="utf-8").splitlines()]
    assert [record["event"] for record in records] == ["article_failed"]


def test_plain_format_and_no_logger(tmp_path):
    logger = setup_logging(LoggingConfig(console=False, format="plain", filename="run.log"), tmp_path)
    log_event(logger, "Starting run", event="pipeline_start")
    log_event(None, "ignored", event="nothing")
    for handler in logger.handlers:
        handler.flush()

    assert "INFO Starting run" in (tmp_path / "run.log").read_text(encoding="utf-8")


def test_setup_without_file_logging_writes_nothing(tmp_path):
    logger = setup_logging(LoggingConfig(console=False, file=False), tmp_path)
    log_event(logger, "Starting run", event="pipeline_start")

    assert logger.handlers == []
    assert list(tmp_path.iterdir()) == []
