"""Unit tests for JSON logging in logging.py."""

import sys
import json
import logging

from freezegun import freeze_time

from previewlinks.constants import ENV
from previewlinks.utils.logging import JsonFormatter, initialize_logging


def make_record(message: str = 'Registered canonical URL.', **extra) -> logging.LogRecord:
    record = logging.LogRecord(
        name='previewlinks.test',
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg=message,
        args=(),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


@freeze_time('2025-12-26 12:00:00')
def test_json_formatter_standard_fields():
    record = make_record()
    log = json.loads(JsonFormatter().format(record))

    assert log['timestamp'] == '2025-12-26T12:00:00.000Z'
    assert log['level'] == 'INFO'
    assert log['logger'] == 'previewlinks.test'
    assert log['message'] == 'Registered canonical URL.'


def test_json_formatter_includes_extras():
    record = make_record(shortcode='0a1b2c3d4e', event='REGISTER_SUCCESS')
    log = json.loads(JsonFormatter().format(record))

    assert log['shortcode'] == '0a1b2c3d4e'
    assert log['event'] == 'REGISTER_SUCCESS'
    assert 'msg' not in log
    assert 'args' not in log


def test_json_formatter_serializes_unknown_types():
    record = make_record(budget=object())
    log = json.loads(JsonFormatter().format(record))

    assert log['budget'].startswith('<object object')


def test_json_formatter_includes_exception():
    try:
        raise RuntimeError('boom')
    except RuntimeError:
        record = make_record(exc_info=sys.exc_info())

    log = json.loads(JsonFormatter().format(record))
    assert 'RuntimeError: boom' in log['exception']


def test_initialize_logging(monkeypatch):
    monkeypatch.setenv(ENV.App.LOG_LEVEL, 'debug')

    initialize_logging()

    root = logging.getLogger()
    assert root.level == logging.DEBUG
    assert any(isinstance(h.formatter, JsonFormatter) for h in root.handlers)
