import unittest

from market_fixtures import FakeClock
from screener.cache import SnapshotCache


class TestSnapshotCache(unittest.TestCase):

    def setUp(self):
        self.clock = FakeClock()
        self.cache = SnapshotCache({'max_size': 3}, clock=self.clock)

    def test_hit_within_ttl(self):
        url = "https://api.dexscreener.com/token-pairs/v1/solana/abc"
        self.cache.set(url, [{"pairAddress": "p1"}], ttl_seconds=12)
        self.clock.advance(11)
        self.assertEqual(self.cache.get(url), [{"pairAddress": "p1"}])
        self.assertEqual(self.cache.hits, 1)

    def test_expires_after_ttl(self):
        self.cache.set("k", "v", ttl_seconds=12)
        self.clock.advance(12.5)
        self.assertIsNone(self.cache.get("k"))
        self.assertEqual(self.cache.get_stats()['entries'], 0)

    def test_per_entry_ttl(self):
        self.cache.set("boosted", 1, ttl_seconds=30)
        self.cache.set("pairs", 2, ttl_seconds=12)
        self.clock.advance(20)
        self.assertIsNone(self.cache.get("pairs"))
        self.assertEqual(self.cache.get("boosted"), 1)

    def test_set_returns_value(self):
        self.assertEqual(self.cache.set("k", {"a": 1}), {"a": 1})

    def test_lru_eviction(self):
        for key in ("a", "b", "c"):
            self.cache.set(key, key)
            self.clock.advance(1)
        self.cache.get("a")
        self.cache.set("d", "d")

        self.assertIsNone(self.cache.get("b"))
        self.assertEqual(self.cache.get("a"), "a")
        self.assertEqual(self.cache.evictions, 1)

    def test_purge_expired(self):
        self.cache.set("short", 1, ttl_seconds=5)
        self.cache.set("long", 2, ttl_seconds=60)
        self.clock.advance(10)
        self.assertEqual(self.cache.purge_expired(), 1)
        self.assertEqual(self.cache.get("long"), 2)


if __name__ == '__main__':
    unittest.main()
