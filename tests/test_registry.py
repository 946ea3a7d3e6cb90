#!/usr/bin/env python3
"""
Unit tests for the client registry.

Covers id assignment, the capacity bound, idempotent removal and
snapshot consistency.
"""

import asyncio
import random
import unittest

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent))

from relay_server.chat.errors import CapacityExceeded
from relay_server.chat.registry import ClientRegistry
from tests.fakes import FakeSession


class TestClientRegistry(unittest.IsolatedAsyncioTestCase):
    """Test cases for ClientRegistry."""

    async def asyncSetUp(self):
        self.registry = ClientRegistry(max_clients=3)

    async def test_register_assigns_increasing_unique_ids(self):
        sessions = [FakeSession(f"user{i}") for i in range(3)]
        ids = [await self.registry.register(s) for s in sessions]

        self.assertEqual(ids, [1, 2, 3])
        self.assertEqual([s.id for s in sessions], ids)
        self.assertEqual(await self.registry.count(), 3)

    async def test_capacity_exceeded_rejects_without_registering(self):
        for i in range(3):
            await self.registry.register(FakeSession(f"user{i}"))

        extra = FakeSession("late")
        with self.assertRaises(CapacityExceeded):
            await self.registry.register(extra)

        self.assertIsNone(extra.id)
        self.assertEqual(await self.registry.count(), 3)
        self.assertNotIn(extra, await self.registry.snapshot_recipients())

    async def test_ids_are_not_reused_after_removal(self):
        first = FakeSession("alice")
        await self.registry.register(first)
        await self.registry.remove(first.id)

        second = FakeSession("bob")
        await self.registry.register(second)

        self.assertEqual(second.id, 2)

    async def test_remove_is_idempotent(self):
        session = FakeSession("alice")
        await self.registry.register(session)

        self.assertTrue(await self.registry.remove(session.id))
        self.assertFalse(await self.registry.remove(session.id))
        self.assertFalse(await self.registry.remove(999))
        self.assertEqual(await self.registry.count(), 0)

    async def test_snapshot_excludes_origin_and_keeps_registration_order(self):
        alice, bob, carol = FakeSession("alice"), FakeSession("bob"), FakeSession("carol")
        for s in (alice, bob, carol):
            await self.registry.register(s)

        self.assertEqual(await self.registry.snapshot_recipients(exclude_id=bob.id), [alice, carol])
        self.assertEqual(await self.registry.snapshot_recipients(), [alice, bob, carol])

    async def test_snapshot_is_a_copy(self):
        alice = FakeSession("alice")
        await self.registry.register(alice)
        snapshot = await self.registry.snapshot_recipients()

        await self.registry.register(FakeSession("bob"))

        self.assertEqual(snapshot, [alice])

    async def test_duplicate_names_are_distinct_sessions(self):
        a1, a2 = FakeSession("alice"), FakeSession("alice")
        await self.registry.register(a1)
        await self.registry.register(a2)

        self.assertNotEqual(a1.id, a2.id)
        self.assertEqual(await self.registry.count(), 2)

    async def test_count_stays_within_bounds_under_concurrent_churn(self):
        rng = random.Random(1234)
        registered = []
        issued = set()

        async def register_one():
            session = FakeSession("user")
            try:
                uid = await self.registry.register(session)
            except CapacityExceeded:
                return
            self.assertNotIn(uid, issued)
            issued.add(uid)
            registered.append(session)

        async def remove_one():
            if registered:
                session = registered.pop(rng.randrange(len(registered)))
                await self.registry.remove(session.id)

        for _ in range(50):
            ops = [register_one() if rng.random() < 0.6 else remove_one() for _ in range(5)]
            await asyncio.gather(*ops)
            count = await self.registry.count()
            self.assertGreaterEqual(count, 0)
            self.assertLessEqual(count, self.registry.max_clients)
            self.assertEqual(count, len(registered))

    async def test_exclusive_blocks_other_operations(self):
        async with self.registry.exclusive() as view:
            register_task = asyncio.create_task(self.registry.register(FakeSession("alice")))
            await asyncio.sleep(0.01)
            self.assertFalse(register_task.done())
            self.assertEqual(len(view), 0)

        await register_task
        self.assertEqual(await self.registry.count(), 1)


if __name__ == '__main__':
    unittest.main()
