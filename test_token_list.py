import json
import os
import tempfile
import unittest

from screener.token_list import is_lst_symbol, is_stable_symbol, load_majors, pick_jupiter_token


class TestSymbolFilters(unittest.TestCase):

    def test_stables(self):
        self.assertTrue(is_stable_symbol("usdc"))
        self.assertTrue(is_stable_symbol("PYUSD"))
        self.assertFalse(is_stable_symbol("SOL"))
        self.assertFalse(is_stable_symbol(None))

    def test_liquid_staking(self):
        self.assertTrue(is_lst_symbol("mSOL"))
        self.assertTrue(is_lst_symbol("JitoSOL"))
        self.assertFalse(is_lst_symbol("SOL"))


class TestPickJupiterToken(unittest.TestCase):

    def test_prefers_verified_and_name_match(self):
        tokens = [
            {"symbol": "BONK", "name": "Bonk Copy", "address": "copy", "logoURI": "x"},
            {"symbol": "bonk", "name": "Bonk", "address": "real", "tags": ["verified"]},
        ]
        self.assertEqual(pick_jupiter_token(tokens, "BONK", "bonk")["address"], "real")

    def test_first_wins_ties(self):
        tokens = [
            {"symbol": "WIF", "address": "first"},
            {"symbol": "WIF", "address": "second"},
        ]
        self.assertEqual(pick_jupiter_token(tokens, "wif")["address"], "first")

    def test_no_match(self):
        self.assertIsNone(pick_jupiter_token([{"symbol": "JUP"}], "RAY"))
        self.assertIsNone(pick_jupiter_token(None, "RAY"))
        self.assertIsNone(pick_jupiter_token([{"symbol": "JUP"}], ""))


class TestLoadMajors(unittest.TestCase):

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()

    def tearDown(self):
        self.tmp.cleanup()

    def path(self, name):
        return os.path.join(self.tmp.name, name)

    def test_yaml_mapping(self):
        with open(self.path("majors.yaml"), "w") as f:
            f.write("majors:\n  - symbol: SOL\n    name: Wrapped SOL\n  - just a string\n")
        self.assertEqual(load_majors(self.path("majors.yaml")), [{"symbol": "SOL", "name": "Wrapped SOL"}])

    def test_legacy_json_list(self):
        with open(self.path("majors.json"), "w") as f:
            json.dump([{"symbol": "JUP", "name": "Jupiter"}], f)
        self.assertEqual(load_majors(self.path("majors.json")), [{"symbol": "JUP", "name": "Jupiter"}])

    def test_missing_or_broken(self):
        with self.assertLogs("screener.token_list", level="WARNING"):
            self.assertEqual(load_majors(self.path("nope.yaml")), [])
        with open(self.path("bad.yaml"), "w") as f:
            f.write("majors: [unclosed\n")
        with self.assertLogs("screener.token_list", level="ERROR"):
            self.assertEqual(load_majors(self.path("bad.yaml")), [])


if __name__ == '__main__':
    unittest.main()
