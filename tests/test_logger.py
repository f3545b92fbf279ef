"""
Tests for logging setup and formatters
"""

import json
import logging

import pytest

from utils.logger import JSONFormatter, PlainTextFormatter, setup_logging


def make_record(msg="Tx sent", **extra):
    record = logging.LogRecord('core.scheduler', logging.INFO, __file__, 42, msg, None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield root
    for handler in root.handlers:
        handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.mark.unit
class TestFormatters:

    def test_json_includes_extra_fields(self):
        payload = json.loads(JSONFormatter().format(make_record(tx_hash='0xabc', pairs=12)))

        assert payload['message'] == "Tx sent"
        assert payload['level'] == 'INFO'
        assert payload['logger'] == 'core.scheduler'
        assert payload['tx_hash'] == '0xabc'
        assert payload['pairs'] == 12

    def test_plain_text_layout(self):
        line = PlainTextFormatter(datefmt='%Y-%m-%d').format(make_record())

        assert "| INFO     | core.scheduler:" in line
        assert line.endswith("| Tx sent")


@pytest.mark.unit
class TestSetupLogging:

    def test_file_sink_written_as_json(self, tmp_path, restore_root_logger):
        log_file = tmp_path / 'logs' / 'ingestor.log'

        setup_logging(log_level='info', log_file=str(log_file), structured=True)
        logging.getLogger('core.scheduler').info("hello", extra={'pairs': 3})
        for handler in restore_root_logger.handlers:
            handler.flush()

        lines = [json.loads(line) for line in log_file.read_text().splitlines()]
        assert any(entry['message'] == "hello" and entry['pairs'] == 3 for entry in lines)

    def test_empty_path_disables_file_sink(self, restore_root_logger):
        setup_logging(log_level='WARNING', log_file='')

        assert len(restore_root_logger.handlers) == 1
        assert restore_root_logger.level == logging.WARNING

    def test_invalid_level(self, restore_root_logger):
        with pytest.raises(ValueError):
            setup_logging(log_level='LOUD', log_file='')
