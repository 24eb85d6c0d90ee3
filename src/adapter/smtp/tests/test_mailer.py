"""Tests for SMTPMailer: template rendering and transport error mapping."""

import os
import tempfile
import unittest
from pathlib import Path
from unittest.mock import AsyncMock, patch

import aiosmtplib

from adapter.smtp.config import SMTPConfig
from adapter.smtp.mailer import SMTPMailer
from domain.model.errors import MailDeliveryError

CONFIG = SMTPConfig(
    host='smtp.example.com',
    port=587,
    username='noreply@example.com',
    password='app-password',
    from_email='noreply@example.com',
)


class TestSMTPMailer(unittest.IsolatedAsyncioTestCase):

    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmp.cleanup)
        Path(self._tmp.name, 'greeting.html').write_text(
            '<p>Hi {{ name }}</p><a href="{{ resetLink }}">reset</a>', encoding='utf-8'
        )
        self.mailer = SMTPMailer(CONFIG, templates_dir=self._tmp.name)

    @patch('adapter.smtp.mailer.aiosmtplib.send', new_callable=AsyncMock)
    async def test_send_renders_and_delivers(self, mock_send):
        await self.mailer.send(
            'alice@example.com', 'Reset', 'greeting.html',
            {'name': 'Alice', 'resetLink': 'https://app.example.com/reset-password/abc'},
        )

        mock_send.assert_awaited_once()
        message = mock_send.call_args.args[0]
        kwargs = mock_send.call_args.kwargs
        self.assertEqual(message['To'], 'alice@example.com')
        self.assertEqual(message['From'], 'noreply@example.com')
        self.assertEqual(message['Subject'], 'Reset')
        html = message.get_body(preferencelist=('html',)).get_content()
        self.assertIn('Hi Alice', html)
        self.assertIn('https://app.example.com/reset-password/abc', html)
        self.assertEqual(kwargs['hostname'], 'smtp.example.com')
        self.assertEqual(kwargs['port'], 587)
        self.assertEqual(kwargs['username'], 'noreply@example.com')
        self.assertTrue(kwargs['start_tls'])

    def test_render_escapes_payload(self):
        html = self.mailer.render('greeting.html', {'name': '<script>x</script>', 'resetLink': '#'})

        self.assertNotIn('<script>', html)
        self.assertIn('&lt;script&gt;', html)

    @patch('adapter.smtp.mailer.aiosmtplib.send', new_callable=AsyncMock)
    async def test_missing_template(self, mock_send):
        with self.assertRaises(MailDeliveryError):
            await self.mailer.send('alice@example.com', 'Reset', 'nope.html', {})

        mock_send.assert_not_awaited()

    @patch('adapter.smtp.mailer.aiosmtplib.send', new_callable=AsyncMock)
    async def test_transport_failure(self, mock_send):
        mock_send.side_effect = aiosmtplib.SMTPAuthenticationError(535, 'Bad credentials')

        with self.assertRaises(MailDeliveryError):
            await self.mailer.send('alice@example.com', 'Reset', 'greeting.html', {'name': 'A', 'resetLink': '#'})

    @patch('adapter.smtp.mailer.aiosmtplib.send', new_callable=AsyncMock)
    async def test_connection_failure(self, mock_send):
        mock_send.side_effect = ConnectionRefusedError('refused')

        with self.assertRaises(MailDeliveryError):
            await self.mailer.send('alice@example.com', 'Reset', 'greeting.html', {'name': 'A', 'resetLink': '#'})


class TestBundledTemplate(unittest.TestCase):

    def test_reset_password_template_renders(self):
        mailer = SMTPMailer(CONFIG)

        html = mailer.render('reset_password.html', {
            'name': 'Alice',
            'resetLink': 'https://app.example.com/reset-password/abc',
        })

        self.assertIn('Hello Alice', html)
        self.assertIn('href="https://app.example.com/reset-password/abc"', html)


class TestSMTPConfig(unittest.TestCase):

    def test_defaults(self):
        with patch.dict(os.environ, {}, clear=True):
            config = SMTPConfig.from_env()

        self.assertEqual(config.host, 'smtp.gmail.com')
        self.assertEqual(config.port, 587)
        self.assertTrue(config.start_tls)
        self.assertFalse(config.has_credentials)

    def test_from_env(self):
        env = {
            'SMTP_HOST': 'mailhog',
            'SMTP_PORT': '1025',
            'SMTP_USERNAME': 'user',
            'SMTP_PASSWORD': 'secret',
            'SMTP_FROM': 'accounts@example.com',
            'SMTP_START_TLS': 'false',
            'SMTP_TIMEOUT': '5',
        }
        with patch.dict(os.environ, env, clear=True):
            config = SMTPConfig.from_env()

        self.assertEqual(config.host, 'mailhog')
        self.assertEqual(config.port, 1025)
        self.assertEqual(config.from_email, 'accounts@example.com')
        self.assertFalse(config.start_tls)
        self.assertEqual(config.timeout, 5.0)
        self.assertTrue(config.has_credentials)

    def test_invalid_port(self):
        with patch.dict(os.environ, {'SMTP_PORT': '70000'}, clear=True):
            with self.assertRaises(ValueError):
                SMTPConfig.from_env()


if __name__ == '__main__':
    unittest.main()
