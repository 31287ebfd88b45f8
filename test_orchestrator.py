import asyncio
import unittest

from market_fixtures import FakeClock, FakeScreener, boosted_entry, make_raw_pair
from screener.cache import SnapshotCache
from screener.dex_screener import DexScreenerAPI, UpstreamError
from screener.orchestrator import FetchOrchestrator
from stores.veto_blacklist import VetoBlacklist


class TestFetchOrchestrator(unittest.IsolatedAsyncioTestCase):

    def setUp(self):
        self.clock = FakeClock()
        self.screener = FakeScreener()
        self.veto = VetoBlacklist(None, clock=self.clock)
        self.orchestrator = FetchOrchestrator(self.screener, veto=self.veto, concurrency=2, chain_id="solana")

    async def test_classifies_best_pair(self):
        self.screener.set_pairs("A", [
            make_raw_pair("A", pair_address="thin", liquidity=5000),
            make_raw_pair("A", pair_address="deep", liquidity=80000),
        ])
        items = await self.orchestrator.enrich(["A"])

        self.assertEqual(len(items), 1)
        self.assertEqual(items[0].best_pair.pair_address, "deep")
        self.assertEqual(items[0].ident.name, "Alpha")
        self.assertEqual(items[0].smart.score, 92)

    async def test_failures_are_isolated(self):
        self.screener.set_pairs("A", [make_raw_pair("A")])
        self.screener.set_pairs("Broken", UpstreamError(503, "service unavailable"))
        self.screener.set_pairs("Empty", [])

        with self.assertLogs("screener.orchestrator", level="WARNING"):
            items = await self.orchestrator.enrich(["Broken", "A", "Empty"])

        self.assertEqual([x.address for x in items], ["A"])
        stats = self.orchestrator.get_stats()
        self.assertEqual((stats['failed'], stats['no_pairs'], stats['emitted']), (1, 1, 1))

    async def test_quality_gate(self):
        self.screener.set_pairs("Micro", [make_raw_pair("Micro", liquidity=900)])
        self.screener.set_pairs("High", [make_raw_pair("High", liquidity=2000, changes={'m5': 13})])

        self.assertEqual(await self.orchestrator.enrich(["Micro", "High"]), [])
        items = await self.orchestrator.enrich(["Micro", "High"], allow_high_risk=True)
        self.assertEqual([x.address for x in items], ["High"])

    async def test_veto_drops_and_sticks(self):
        self.screener.set_pairs("A", [make_raw_pair("A", market_cap=100000, liquidity=10000)])
        self.assertEqual(len(await self.orchestrator.enrich(["A"])), 1)

        self.screener.set_pairs("A", [make_raw_pair("A", market_cap=9000, liquidity=9500)])
        self.assertEqual(await self.orchestrator.enrich(["A"]), [])

        self.screener.set_pairs("A", [make_raw_pair("A", market_cap=900000, liquidity=90000)])
        calls = len(self.screener.pair_calls)
        self.assertEqual(await self.orchestrator.enrich(["A"]), [])
        self.assertEqual(len(self.screener.pair_calls), calls)

    async def test_duplicates_fetched_once(self):
        self.screener.set_pairs("A", [make_raw_pair("A")])
        items = await self.orchestrator.enrich(["A", "A", "", None])
        self.assertEqual(len(items), 1)
        self.assertEqual(self.screener.pair_calls, ["A"])

    async def test_concurrency_bound(self):
        in_flight = 0
        peak = 0

        class SlowScreener(FakeScreener):
            async def fetch_token_pairs(self, token_address):
                nonlocal in_flight, peak
                in_flight += 1
                peak = max(peak, in_flight)
                await asyncio.sleep(0.01)
                in_flight -= 1
                return [make_raw_pair(token_address)]

        orchestrator = FetchOrchestrator(SlowScreener(), concurrency=2)
        items = await orchestrator.enrich([f"T{i}" for i in range(6)])

        self.assertEqual(len(items), 6)
        self.assertEqual(peak, 2)

    async def test_boosted_seed_filters_chain_and_limit(self):
        self.screener.boosted = [
            boosted_entry("A"),
            boosted_entry("EthToken", chain_id="ethereum"),
            boosted_entry("B"),
            boosted_entry("C"),
        ]
        for addr in ("A", "B", "C"):
            self.screener.set_pairs(addr, [make_raw_pair(addr)])

        items = await self.orchestrator.boosted_seed(2)
        self.assertEqual([x.address for x in items], ["A", "B"])

    async def test_boosted_seed_failure_propagates(self):
        self.screener.boosted = UpstreamError(500, "boom")
        with self.assertRaises(UpstreamError):
            await self.orchestrator.boosted_seed(10)


class TestUpstreamError(unittest.TestCase):

    def test_message_truncates_body(self):
        err = UpstreamError(502, "x" * 500)
        self.assertEqual(err.status, 502)
        self.assertEqual(len(err.body), 200)
        self.assertEqual(str(err), "Upstream 502: " + "x" * 200)


class TestDexScreenerStats(unittest.TestCase):

    def test_stats_before_any_request(self):
        api = DexScreenerAPI(cache=SnapshotCache({'max_size': 10}))
        stats = api.get_stats()
        self.assertEqual(stats['screener'], "DexScreenerAPI")
        self.assertEqual(stats['upstream_requests'], 0)
        self.assertIsNone(stats['last_upstream_at'])
        self.assertEqual(stats['cache']['capacity'], 10)


if __name__ == '__main__':
    unittest.main()
