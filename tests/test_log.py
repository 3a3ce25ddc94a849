"""Tests for logging setup."""

from __future__ import annotations

import logging
from unittest.mock import patch

from edgewise.log import LOG_FORMAT, resolve_level, setup_logging


class TestResolveLevel:
    def test_verbose_wins(self):
        assert resolve_level(True, "ERROR") == logging.DEBUG

    def test_config_level(self):
        assert resolve_level(config_level="warning") == logging.WARNING

    def test_unknown_config_level(self):
        assert resolve_level(config_level="chatty") == logging.INFO

    def test_default(self):
        assert resolve_level() == logging.INFO


class TestSetupLogging:
    def test_basic_config(self):
        with patch("edgewise.log.logging.basicConfig") as basic:
            setup_logging(config_level="ERROR")
        basic.assert_called_once_with(level=logging.ERROR, format=LOG_FORMAT, datefmt="%H:%M:%S")
