"""Tests for FakeUserRepository, the in-memory store used by service and route tests."""

import threading
import unittest
from datetime import datetime, timedelta, timezone

from adapter.fake.user_repository import FakeUserRepository
from domain.model.errors import DuplicateEmailError


class TestFakeUserRepository(unittest.TestCase):

    def setUp(self):
        self.repo = FakeUserRepository()
        self.now = datetime.now(timezone.utc)
        self.user = self.repo.create('test@example.com', 'hash', first_name='Test')

    def test_create_and_lookup(self):
        self.assertEqual(self.repo.get_by_email('test@example.com').id, self.user.id)
        self.assertEqual(self.repo.get_by_id(self.user.id).first_name, 'Test')
        self.assertIsNone(self.repo.get_by_email('other@example.com'))

    def test_create_duplicate(self):
        with self.assertRaises(DuplicateEmailError):
            self.repo.create('test@example.com', 'hash2')

    def test_returned_users_are_copies(self):
        fetched = self.repo.get_by_id(self.user.id)
        fetched.first_name = 'Mutated'

        self.assertEqual(self.repo.get_by_id(self.user.id).first_name, 'Test')

    def test_update_rejects_identity_fields(self):
        with self.assertRaises(ValueError):
            self.repo.update(self.user.id, {'email': 'new@example.com'})

    def test_reset_token_lookup_respects_expiry(self):
        self.repo.update(self.user.id, {
            'reset_token': 'tok',
            'reset_token_expiry': self.now + timedelta(minutes=5),
        })

        self.assertIsNotNone(self.repo.get_by_reset_token('tok', self.now))
        self.assertIsNone(self.repo.get_by_reset_token('tok', self.now + timedelta(minutes=10)))
        self.assertIsNone(self.repo.get_by_reset_token('other', self.now))

    def test_consume_reset_token_once_under_contention(self):
        self.repo.update(self.user.id, {
            'reset_token': 'tok',
            'reset_token_expiry': self.now + timedelta(hours=1),
        })
        results = []
        start = threading.Barrier(8)

        def consume():
            start.wait(timeout=5)
            results.append(self.repo.consume_reset_token('tok', self.now, 'new-hash'))

        threads = [threading.Thread(target=consume) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        self.assertEqual(len([r for r in results if r is not None]), 1)
        stored = self.repo.get_by_id(self.user.id)
        self.assertEqual(stored.password_hash, 'new-hash')
        self.assertIsNone(stored.reset_token)
        self.assertIsNone(stored.reset_token_expiry)


if __name__ == '__main__':
    unittest.main()
