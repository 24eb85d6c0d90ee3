"""Tests for structured JSON logging."""

import json
import logging
import unittest

from utils.logging import JSONFormatter, REDACTED


def _record(msg='hello', **extra):
    record = logging.LogRecord('accounts', logging.INFO, __file__, 1, msg, None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestJSONFormatter(unittest.TestCase):

    def setUp(self):
        self.formatter = JSONFormatter()

    def test_basic_fields(self):
        data = json.loads(self.formatter.format(_record()))

        self.assertEqual(data['level'], 'INFO')
        self.assertEqual(data['logger'], 'accounts')
        self.assertEqual(data['message'], 'hello')
        self.assertTrue(data['timestamp'].endswith('Z'))

    def test_extra_fields_included(self):
        data = json.loads(self.formatter.format(_record(userId='user-1', email='a@x.com')))

        self.assertEqual(data['userId'], 'user-1')
        self.assertEqual(data['email'], 'a@x.com')

    def test_secret_fields_redacted(self):
        data = json.loads(self.formatter.format(_record(
            password='Secret123', password_hash='$2b$12$abc', resetToken='eyJ...'
        )))

        self.assertEqual(data['password'], REDACTED)
        self.assertEqual(data['password_hash'], REDACTED)
        self.assertEqual(data['resetToken'], REDACTED)

    def test_non_json_values_are_stringified(self):
        from datetime import datetime, timezone
        when = datetime(2026, 1, 1, tzinfo=timezone.utc)

        data = json.loads(self.formatter.format(_record(at=when)))

        self.assertEqual(data['at'], str(when))


if __name__ == '__main__':
    unittest.main()
