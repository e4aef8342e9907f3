"""Tests for the logger module."""

import logging
from unittest.mock import patch

import pytest

import crossquery.logger as logger_module
from crossquery.logger import LOG_FORMAT, Logger, configure_logging, resolve_level
from crossquery.querydsl import Criteria, term
from crossquery.settings import QueryConfig, settings


@pytest.fixture
def unconfigured():
    logger_module._configured = False
    yield
    logger_module._configured = True


class TestResolveLevel:
    @pytest.mark.parametrize(
        "name,expected",
        [
            ("DEBUG", logging.DEBUG),
            ("warning", logging.WARNING),
            ("ERROR", logging.ERROR),
            ("", logging.INFO),
            (None, logging.INFO),
            ("INVALID", logging.INFO),
        ],
    )
    def test_resolve_level(self, name, expected):
        assert resolve_level(name) == expected


class TestConfigureLogging:
    def test_configures_root_logger_once(self, unconfigured):
        with patch("logging.basicConfig") as mock_basicconfig:
            configure_logging("DEBUG")
            configure_logging("ERROR")
            mock_basicconfig.assert_called_once_with(level=logging.DEBUG, format=LOG_FORMAT)

    def test_defaults_to_settings_level(self, unconfigured):
        with patch.object(settings, "LOG_LEVEL", "WARNING"), patch("logging.basicConfig") as mock_basicconfig:
            configure_logging()
            assert mock_basicconfig.call_args.kwargs["level"] == logging.WARNING


class TestLogger:
    def test_first_logger_configures_logging(self, unconfigured):
        with patch("crossquery.logger.configure_logging") as mock_configure:
            Logger("Criteria")
            mock_configure.assert_called_once_with()

    def test_logger_is_namespaced(self):
        logger = Logger("Criteria")
        assert logger._logger.name == "crossquery.Criteria"

    def test_debug_forwards_arguments(self):
        logger = Logger("Criteria")
        with patch.object(logger._logger, "debug") as mock_debug:
            logger.debug("Merged %s", "criteria")
            mock_debug.assert_called_once_with("Merged %s", "criteria")


class TestCriteriaLogging:
    def test_merge_and_compile_log_at_debug(self, caplog):
        criteria = Criteria(config=QueryConfig()).update_filters(term("a", 1))
        with caplog.at_level(logging.DEBUG, logger="crossquery"):
            criteria.merge(Criteria(config=QueryConfig()).update_types("city")).compile()
        names = {record.name for record in caplog.records}
        assert names == {"crossquery.Criteria", "crossquery.SearchRequestCompiler"}
        assert all(record.levelno == logging.DEBUG for record in caplog.records)
