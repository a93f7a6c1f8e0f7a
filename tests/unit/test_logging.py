"""Tests for the dynreqs.logging module."""

from __future__ import annotations

import json
import logging
import os
from unittest.mock import patch

import pytest
import structlog

from dynreqs.logging import (
    bind_context,
    clear_context,
    configure_logging,
    get_logger,
)


class TestConfigureLogging:
    """Tests for configure_logging function."""

    def test_default_level_is_warning(self) -> None:
        """Test the default level keeps library chatter quiet."""
        with patch.dict(os.environ, {}, clear=False):
            os.environ.pop("DYNREQS_LOG_LEVEL", None)
            configure_logging()

        assert logging.getLogger().level == logging.WARNING

    def test_custom_level(self) -> None:
        configure_logging(level=logging.DEBUG)

        assert logging.getLogger().level == logging.DEBUG

    def test_level_from_env(self) -> None:
        with patch.dict(os.environ, {"DYNREQS_LOG_LEVEL": "INFO"}):
            configure_logging()

        assert logging.getLogger().level == logging.INFO

    def test_single_handler_after_reconfigure(self) -> None:
        configure_logging()
        configure_logging()

        assert len(logging.getLogger().handlers) == 1

    def test_json_via_env(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Test JSON lines on stderr when DYNREQS_LOG_FORMAT=json."""
        with patch.dict(os.environ, {"DYNREQS_LOG_FORMAT": "json"}):
            configure_logging(level=logging.INFO)

        get_logger("test.json").info("entry_matched", entry_index=2)

        captured = capsys.readouterr()
        record = json.loads(captured.err.strip().splitlines()[-1])
        assert record["event"] == "entry_matched"
        assert record["entry_index"] == 2
        assert record["level"] == "info"
        assert captured.out == ""

    def test_force_json(self, capsys: pytest.CaptureFixture[str]) -> None:
        configure_logging(force_json=True, level=logging.INFO)

        get_logger("test.json").info("condition_evaluated", result=True)

        record = json.loads(capsys.readouterr().err.strip().splitlines()[-1])
        assert record["result"] is True

    def test_filtered_below_level(self, capsys: pytest.CaptureFixture[str]) -> None:
        configure_logging(force_json=True, level=logging.WARNING)

        get_logger("test.quiet").debug("condition_evaluated")

        assert capsys.readouterr().err == ""


class TestContextBinding:
    """Tests for context binding functions."""

    def test_bind_context(self) -> None:
        clear_context()

        bind_context(document="META.json")

        assert structlog.contextvars.get_contextvars() == {"document": "META.json"}
        clear_context()

    def test_clear_context(self) -> None:
        bind_context(document="META.json")
        clear_context()

        assert structlog.contextvars.get_contextvars() == {}

    def test_context_in_output(self, capsys: pytest.CaptureFixture[str]) -> None:
        configure_logging(force_json=True, level=logging.INFO)
        clear_context()
        bind_context(document="dynamic.yaml")

        get_logger("test").info("document_resolved")
        clear_context()

        record = json.loads(capsys.readouterr().err.strip().splitlines()[-1])
        assert record["document"] == "dynamic.yaml"
