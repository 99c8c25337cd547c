"""Password hasher tests."""

from __future__ import annotations

import unittest
from unittest.mock import patch

import bcrypt

from app.adapters.auth.passwords import DEFAULT_BCRYPT_ROUNDS, BcryptPasswordHasher
from app.domain.errors import PolicyViolationError


class BcryptPasswordHasherTests(unittest.IsolatedAsyncioTestCase):
    def setUp(self) -> None:
        self.hasher = BcryptPasswordHasher(rounds=4)

    def test_registration_policy_uses_cost_factor_twelve(self) -> None:
        self.assertEqual(DEFAULT_BCRYPT_ROUNDS, 12)
        self.assertEqual(BcryptPasswordHasher().rounds, 12)

    async def test_hash_is_salted_bcrypt_and_never_the_plaintext(self) -> None:
        first = await self.hasher.hash("Abc123")
        second = await self.hasher.hash("Abc123")

        self.assertTrue(first.startswith("$2b$04$"))
        self.assertNotEqual(first, "Abc123")
        self.assertNotIn("Abc123", first)
        self.assertNotEqual(first, second)

    async def test_verify_accepts_match_and_rejects_mismatch(self) -> None:
        stored = await self.hasher.hash("Abc123")

        self.assertTrue(await self.hasher.verify("Abc123", stored))
        self.assertFalse(await self.hasher.verify("abc123", stored))
        self.assertFalse(await self.hasher.verify("Abc1234", stored))

    async def test_short_password_is_rejected_before_any_hashing_work(self) -> None:
        with patch("app.adapters.auth.passwords.bcrypt.hashpw") as hashpw:
            with self.assertRaises(PolicyViolationError) as context:
                await self.hasher.hash("Ab1")

        hashpw.assert_not_called()
        self.assertEqual(str(context.exception), "Password must be at least 6 characters long")

    async def test_password_over_bcrypt_input_limit_is_rejected(self) -> None:
        with self.assertRaises(PolicyViolationError):
            await self.hasher.hash("Aa1" + "x" * 70)

    async def test_unencodable_password_is_a_policy_violation_and_never_verifies(self) -> None:
        stored = await self.hasher.hash("Abc123")

        with self.assertRaises(PolicyViolationError):
            await self.hasher.hash("Abc\ud800123")
        self.assertFalse(await self.hasher.verify("Abc\ud800123", stored))

    async def test_malformed_stored_hash_verifies_false(self) -> None:
        self.assertFalse(await self.hasher.verify("Abc123", "not-a-bcrypt-hash"))
        self.assertFalse(await self.hasher.verify("Abc123", ""))

    async def test_dummy_hash_is_a_valid_hash_that_matches_nothing_useful(self) -> None:
        self.assertTrue(self.hasher.dummy_hash.startswith("$2b$04$"))
        self.assertFalse(await self.hasher.verify("Abc123", self.hasher.dummy_hash))

    async def test_verify_uses_bcrypt_checkpw(self) -> None:
        stored = await self.hasher.hash("Abc123")
        with patch("app.adapters.auth.passwords.bcrypt.checkpw", wraps=bcrypt.checkpw) as checkpw:
            self.assertTrue(await self.hasher.verify("Abc123", stored))
        checkpw.assert_called_once()
