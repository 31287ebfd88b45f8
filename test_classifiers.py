import unittest

from classifiers import (
    classify,
    compute_dump_risk,
    compute_potential,
    compute_risk,
    compute_smart_money,
    compute_whale_like,
    detail_warnings,
    is_trash,
    normalize_timeframe,
    passes_quality_gate,
    trend_change,
)
from classifiers.models import (
    ANOMALOUS_FLOW,
    EXTREME_SHORT_MOVE,
    FALLING_KNIFE,
    HIGH,
    HIGH_VOLATILITY,
    LOW,
    LOW_ACTIVITY,
    LOW_LIQUIDITY,
    MANIPULATION_RISK,
    MED,
    MICRO_LIQUIDITY,
    NO_PAIR_DATA,
    NONE,
    VERY_LOW_LIQUIDITY,
)
from classifiers.flow import buy_ratio, flow_stats
from classifiers.potential import BUY_OK_REASON
from market_fixtures import make_raw_pair, make_snapshot
from screener.normalizer import PairNormalizer

KNIFE = {'h1': -11, 'h4': -20, 'h24': -40}


class TestRisk(unittest.TestCase):

    def test_healthy_pair(self):
        risk = compute_risk(make_snapshot())
        self.assertEqual((risk.score, risk.label, risk.flags), (25, LOW, ()))

    def test_missing_pair(self):
        risk = compute_risk(None)
        self.assertEqual((risk.score, risk.label), (85, HIGH))
        self.assertEqual(risk.flags, (NO_PAIR_DATA,))

    def test_liquidity_bands_are_exclusive(self):
        cases = [
            (900, 70, MICRO_LIQUIDITY),
            (1000, 60, VERY_LOW_LIQUIDITY),
            (2499, 60, VERY_LOW_LIQUIDITY),
            (2500, 50, LOW_LIQUIDITY),
            (7500, 40, None),
            (15000, 33, None),
            (30000, 25, None),
        ]
        for liquidity, score, flag in cases:
            risk = compute_risk(make_snapshot(liquidity=liquidity))
            self.assertEqual(risk.score, score, liquidity)
            if flag:
                self.assertIn(flag, risk.flags)

    def test_extreme_short_move(self):
        risk = compute_risk(make_snapshot(changes={'m5': 30}))
        self.assertEqual(risk.score, 47)
        self.assertEqual(risk.label, MED)
        self.assertIn(EXTREME_SHORT_MOVE, risk.flags)
        self.assertNotIn(HIGH_VOLATILITY, risk.flags)

    def test_manipulation_on_thin_liquidity(self):
        risk = compute_risk(make_snapshot(liquidity=5000, changes={'m5': 20}))
        self.assertEqual(risk.flags, (LOW_LIQUIDITY, HIGH_VOLATILITY, MANIPULATION_RISK))
        self.assertEqual((risk.score, risk.label), (80, HIGH))

    def test_anomalous_flow(self):
        risk = compute_risk(make_snapshot(txns={'m5': (30, 0), 'm15': (0, 0)}))
        self.assertEqual(risk.flags, (ANOMALOUS_FLOW,))
        self.assertEqual(risk.score, 39)

    def test_low_activity_label_boundary(self):
        risk = compute_risk(make_snapshot(txns={'m5': (1, 1), 'm15': (1, 1)}))
        self.assertEqual(risk.flags, (LOW_ACTIVITY,))
        self.assertEqual((risk.score, risk.label), (35, LOW))

    def test_falling_knife(self):
        risk = compute_risk(make_snapshot(changes=KNIFE))
        self.assertIn(FALLING_KNIFE, risk.flags)
        self.assertEqual(risk.score, 43)

        edge = compute_risk(make_snapshot(changes={'h1': -10, 'h4': -20, 'h24': -40}))
        self.assertNotIn(FALLING_KNIFE, edge.flags)

    def test_micro_liquidity_pump_saturates(self):
        snap = make_snapshot(liquidity=500, changes={'m5': 30, 'm15': 10}, txns={'m5': (2, 1), 'm15': (1, 0)})
        risk = compute_risk(snap)

        for flag in (MICRO_LIQUIDITY, EXTREME_SHORT_MOVE, MANIPULATION_RISK):
            self.assertIn(flag, risk.flags)
        self.assertEqual((risk.score, risk.label), (100, HIGH))

    def test_score_is_clamped(self):
        snap = make_snapshot(liquidity=100, changes=dict(KNIFE, m5=60), txns={'m5': (1, 1), 'm15': (0, 0)})
        risk = compute_risk(snap)
        self.assertLessEqual(risk.score, 100)
        self.assertEqual(risk.label, HIGH)


class TestFlow(unittest.TestCase):

    def test_empty_tape_is_neutral(self):
        self.assertEqual(buy_ratio(0, 0), 0.5)

    def test_pair_without_txns(self):
        raw = make_raw_pair()
        del raw["txns"]
        snap = PairNormalizer().normalize(raw)

        flow = flow_stats(snap)
        self.assertEqual((flow.buys, flow.sells, flow.total), (0, 0, 0))
        self.assertEqual(flow.buy_ratio, 0.5)
        self.assertIn(LOW_ACTIVITY, compute_risk(snap).flags)


class TestDumpRisk(unittest.TestCase):

    def test_levels(self):
        self.assertEqual(compute_dump_risk(make_snapshot()).label, LOW)
        self.assertEqual(compute_dump_risk(make_snapshot(changes={'m5': -7})).label, MED)
        dump = compute_dump_risk(make_snapshot(changes={'m5': -7, 'm15': -13}))
        self.assertEqual(dump.label, HIGH)
        self.assertEqual(dump.reasons, ("5m down", "15m down"))

    def test_sell_pressure(self):
        dump = compute_dump_risk(make_snapshot(txns={'m5': (2, 10), 'm15': (3, 10)}))
        self.assertEqual(dump.reasons, ("sell pressure",))

    def test_missing_pair_is_high(self):
        self.assertEqual(compute_dump_risk(None).label, HIGH)


class TestWhaleLike(unittest.TestCase):

    def test_default_accumulation(self):
        whale = compute_whale_like(make_snapshot())
        self.assertEqual((whale.score, whale.label), (55, MED))
        self.assertEqual(whale.reasons, ("txn spike", "buy dominance", "strong 24h vol"))

    def test_price_lift_uses_magnitude(self):
        self.assertEqual(compute_whale_like(make_snapshot(changes={'m5': -2.5})).score, 65)
        self.assertEqual(compute_whale_like(make_snapshot(changes={'m15': 4})).score, 65)

    def test_reasons_capped_at_three(self):
        whale = compute_whale_like(make_snapshot(changes={'m5': 3}))
        self.assertEqual(len(whale.reasons), 3)

    def test_penalties(self):
        self.assertEqual(compute_whale_like(make_snapshot(liquidity=5000)).score, 43)
        self.assertEqual(compute_whale_like(make_snapshot(liquidity=5000)).label, LOW)
        self.assertEqual(compute_whale_like(make_snapshot(changes={'m5': 40})).score, 55)

    def test_missing_pair(self):
        whale = compute_whale_like(None)
        self.assertEqual((whale.score, whale.label), (0, NONE))


class TestSmartMoney(unittest.TestCase):

    def test_controlled_accumulation(self):
        smart = compute_smart_money(make_snapshot())
        self.assertEqual((smart.score, smart.label), (92, HIGH))
        self.assertEqual(len(smart.reasons), 3)

    def test_vetoes(self):
        knife = compute_smart_money(make_snapshot(changes=KNIFE))
        self.assertEqual((knife.score, knife.label), (0, NONE))
        dumping = compute_smart_money(make_snapshot(changes={'m5': -7, 'm15': -13}))
        self.assertEqual((dumping.score, dumping.label), (0, NONE))

    def test_dump_med_penalty(self):
        smart = compute_smart_money(make_snapshot(changes={'m5': -7}))
        self.assertEqual(smart.score, 82)

    def test_med_risk(self):
        smart = compute_smart_money(make_snapshot(liquidity=10000))
        self.assertEqual(smart.score, 77)


class TestPotential(unittest.TestCase):

    def test_med_tier_with_buy(self):
        pot = compute_potential(make_snapshot(), "15m")
        self.assertEqual(pot.tier, MED)
        self.assertTrue(pot.buy)
        self.assertEqual(pot.buy_why, (BUY_OK_REASON,))
        self.assertEqual(pot.why, ("15m momentum up", "buy flow", "low risk"))

    def test_high_tier(self):
        pot = compute_potential(make_snapshot(changes={'m15': 5}), "15m")
        self.assertEqual(pot.tier, HIGH)
        self.assertTrue(pot.buy)

    def test_ten_minute_blend(self):
        snap = make_snapshot()
        self.assertAlmostEqual(trend_change(snap, "10m"), 0.6 * 1.5 + 0.4 * 3)
        self.assertEqual(compute_potential(snap, "10m").tier, MED)

    def test_unknown_timeframe_reads_15m(self):
        snap = make_snapshot()
        self.assertEqual(normalize_timeframe("2h"), "15m")
        self.assertEqual(trend_change(snap, "2h"), 3)

    def test_negative_trend_is_low_without_buy(self):
        pot = compute_potential(make_snapshot(), "1d")
        self.assertEqual(pot.tier, LOW)
        self.assertFalse(pot.buy)
        self.assertIn("potential too low", pot.buy_why)

    def test_no_dip_setup(self):
        pot = compute_potential(make_snapshot(changes={'h1': 2, 'h4': 5, 'h24': 12}), "15m")
        self.assertEqual(pot.tier, MED)
        self.assertFalse(pot.buy)
        self.assertIn("no dip setup", pot.buy_why)

    def test_no_reversal(self):
        pot = compute_potential(make_snapshot(changes={'m5': -1, 'm15': 1}), "15m")
        self.assertFalse(pot.buy)
        self.assertIn("no reversal confirmation", pot.buy_why)

    def test_high_risk_or_dump_forces_low(self):
        pot = compute_potential(make_snapshot(liquidity=900), "15m")
        self.assertEqual((pot.tier, pot.buy, pot.why), (LOW, False, ("high risk",)))
        pot = compute_potential(make_snapshot(changes={'m5': -7, 'm15': -13}), "15m")
        self.assertEqual((pot.tier, pot.buy), (LOW, False))

    def test_missing_pair(self):
        pot = compute_potential(None, "15m")
        self.assertEqual((pot.tier, pot.buy), (LOW, False))


class TestQualityGate(unittest.TestCase):

    def test_healthy_passes(self):
        self.assertTrue(passes_quality_gate(make_snapshot()))

    def test_trash(self):
        self.assertTrue(is_trash(make_snapshot(liquidity=900)))
        self.assertTrue(is_trash(make_snapshot(changes=KNIFE)))
        self.assertTrue(is_trash(make_snapshot(changes={'m5': -7, 'm15': -13})))
        self.assertTrue(is_trash(make_snapshot(liquidity=5000, changes={'m5': 20})))
        self.assertFalse(is_trash(make_snapshot()))

    def test_high_risk_needs_opt_in(self):
        snap = make_snapshot(liquidity=2000, changes={'m5': 13})
        risk = compute_risk(snap)
        self.assertEqual((risk.score, risk.label), (72, HIGH))
        self.assertFalse(is_trash(snap))
        self.assertFalse(passes_quality_gate(snap))
        self.assertTrue(passes_quality_gate(snap, allow_high_risk=True))

    def test_missing_pair_never_passes(self):
        self.assertFalse(passes_quality_gate(None, allow_high_risk=True))


class TestClassifyAndWarnings(unittest.TestCase):

    def test_classify_bundle(self):
        result = classify(make_snapshot())
        self.assertEqual(result.risk.label, LOW)
        self.assertEqual(result.smart.score, 92)

    def test_classify_is_pure(self):
        snap = make_snapshot()
        before = snap.to_dict()
        classify(snap)
        compute_potential(snap, "1h")
        self.assertEqual(snap.to_dict(), before)

    def test_warnings(self):
        ok = detail_warnings(compute_risk(make_snapshot()), compute_dump_risk(make_snapshot()))
        self.assertEqual([w.level for w in ok], ["ok"])

        snap = make_snapshot(liquidity=900, changes=KNIFE)
        levels = [w.level for w in detail_warnings(compute_risk(snap), compute_dump_risk(snap))]
        self.assertEqual(levels, ["warn", "danger"])


if __name__ == '__main__':
    unittest.main()
