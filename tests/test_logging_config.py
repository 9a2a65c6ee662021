"""
Tests for logging setup
"""

import json
import logging
from unittest.mock import patch

from logging_config import JsonFormatter, setup_logging
from utils.validators import is_dotted_quad


class TestLoggingConfig:

    @patch('logging_config.logging.config.dictConfig')
    def test_unknown_format_falls_back_to_text(self, mock_dict_config):
        config = setup_logging(level="debug", log_format="xml")

        mock_dict_config.assert_called_once_with(config)
        assert config["handlers"]["console"]["formatter"] == "text"
        assert config["root"]["level"] == "DEBUG"

    def test_json_formatter_carries_error_kind(self):
        record = logging.LogRecord("services.store", logging.ERROR, __file__, 1,
                                   "Error saving to file %s", ("x.json",), None)
        record.error_kind = "save_failure"

        entry = json.loads(JsonFormatter().format(record))

        assert entry["msg"] == "Error saving to file x.json"
        assert entry["level"] == "ERROR"
        assert entry["error_kind"] == "save_failure"


class TestValidators:

    def test_dotted_quad(self):
        assert is_dotted_quad("8.8.8.8")
        assert is_dotted_quad("999.999.999.999")
        assert not is_dotted_quad("999.1")
        assert not is_dotted_quad("١.٢.٣.٤")
        assert not is_dotted_quad("8.8.8.8\n")
        assert not is_dotted_quad(None)
