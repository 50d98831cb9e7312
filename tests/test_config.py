"""Tests for configuration and the pydantic models."""

import logging
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from sparqllint.config import Config, configure_logging
from sparqllint.models import (
    FormatMode,
    LintOptions,
    LintResult,
    PipelineStage,
    ResolvedQuery,
    StdinSource,
)


@pytest.fixture()
def package_logger():
    logger = logging.getLogger("sparqllint")
    level = logger.level
    yield logger
    logger.setLevel(level)


def test_configure_logging_default(package_logger):
    with patch("sparqllint.config.logging.basicConfig") as basic_config:
        configure_logging()
    basic_config.assert_called_once_with(
        level=logging.WARNING, format=Config.LOG_FORMAT, force=True
    )


def test_configure_logging_verbose(package_logger):
    with patch("sparqllint.config.logging.basicConfig") as basic_config:
        configure_logging(verbose=True)
    assert basic_config.call_args.kwargs["level"] == logging.DEBUG
    assert package_logger.level == logging.DEBUG


def test_usage_lines():
    assert len(Config.USAGE) == 2
    assert Config.USAGE[0].format(prog="sparql-lint").startswith("Usage: sparql-lint")


def test_format_mode():
    assert FormatMode.PRETTY.pretty
    assert not FormatMode.CONCISE.pretty
    assert FormatMode("concise") is FormatMode.CONCISE


def test_lint_result_ok():
    assert LintResult(output="ASK {}").ok
    failed = LintResult(error="boom", stage=PipelineStage.DECODE)
    assert not failed.ok
    assert failed.output is None


def test_models_are_frozen():
    options = LintOptions()
    with pytest.raises(ValidationError):
        options.decode = True


def test_source_discriminator():
    resolved = ResolvedQuery(source={"kind": "stdin"}, data=b"")
    assert isinstance(resolved.source, StdinSource)
    with pytest.raises(ValidationError):
        ResolvedQuery(source={"kind": "socket"}, data=b"")
