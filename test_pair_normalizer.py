import unittest

from market_fixtures import make_raw_pair
from screener.normalizer import PairNormalizer, identity_from_pair, pair_score, select_best_pair


class TestPairNormalizer(unittest.TestCase):

    def setUp(self):
        self.normalizer = PairNormalizer()

    def test_projects_fixed_fields(self):
        raw = make_raw_pair(address="Mint1", image_url="https://img/x.png")
        raw["labels"] = ["v4"]
        snap = self.normalizer.normalize(raw)

        self.assertEqual(snap.chain_id, "solana")
        self.assertEqual(snap.base_token.address, "Mint1")
        self.assertEqual(snap.liquidity, 50000)
        self.assertEqual(snap.mc, 500000)
        self.assertEqual(snap.change('m15'), 3)
        self.assertEqual(snap.buys('m5'), 14)
        self.assertEqual(snap.image_url, "https://img/x.png")
        self.assertNotIn("labels", snap.to_dict())

    def test_missing_fields_read_as_zero(self):
        snap = self.normalizer.normalize({"chainId": "solana", "baseToken": {"address": "X"}})
        self.assertIsNone(snap.market_cap)
        self.assertEqual(snap.mc, 0.0)
        self.assertEqual(snap.liquidity, 0.0)
        self.assertEqual(snap.change('h1'), 0.0)
        self.assertEqual(snap.sells('h24'), 0.0)

    def test_garbage_numbers(self):
        raw = make_raw_pair()
        raw["marketCap"] = "not-a-number"
        raw["liquidity"] = {"usd": None}
        snap = self.normalizer.normalize(raw)
        self.assertIsNone(snap.market_cap)
        self.assertEqual(snap.liquidity, 0.0)

    def test_normalize_all_skips_non_dicts(self):
        pairs = self.normalizer.normalize_all([make_raw_pair(), None, "junk"])
        self.assertEqual(len(pairs), 1)
        self.assertEqual(self.normalizer.normalize_all(None), [])

    def test_to_dict_camel_case(self):
        data = self.normalizer.normalize(make_raw_pair()).to_dict()
        self.assertEqual(data["liquidity"], {"usd": 50000})
        self.assertEqual(data["txns"]["m5"], {"buys": 14, "sells": 4})
        self.assertIn("pairAddress", data)


class TestBestPairSelection(unittest.TestCase):

    def setUp(self):
        self.normalizer = PairNormalizer()

    def test_empty_is_none(self):
        self.assertIsNone(select_best_pair([]))
        self.assertIsNone(select_best_pair(None))

    def test_liquidity_dominates(self):
        pairs = self.normalizer.normalize_all([
            make_raw_pair(pair_address="thin", liquidity=10000, volume24=50_000_000),
            make_raw_pair(pair_address="deep", liquidity=10001, volume24=0),
        ])
        self.assertEqual(select_best_pair(pairs).pair_address, "deep")

    def test_ties_keep_original_order(self):
        pairs = self.normalizer.normalize_all([
            make_raw_pair(pair_address="first"),
            make_raw_pair(pair_address="second"),
        ])
        self.assertEqual(pair_score(pairs[0]), pair_score(pairs[1]))
        self.assertEqual(select_best_pair(pairs).pair_address, "first")

    def test_score_formula(self):
        snap = self.normalizer.normalize(make_raw_pair(liquidity=2, volume24=3, txns={'h24': (4, 5)}))
        self.assertEqual(pair_score(snap), 2 * 1_000_000 + 3 * 10 + 9)

    def test_identity_fallbacks(self):
        self.assertEqual(identity_from_pair(None, "Addr").name, "Token")
        snap = self.normalizer.normalize(make_raw_pair(name="", symbol="", image_url=""))
        ident = identity_from_pair(snap, "Addr")
        self.assertEqual((ident.name, ident.symbol, ident.logo), ("Token", "", ""))


if __name__ == '__main__':
    unittest.main()
