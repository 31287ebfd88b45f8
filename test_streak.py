import unittest

from market_fixtures import FakeClock
from views.streak import SmartMoneyStreakTracker

ADDR = "StreakMint111"


class TestSmartMoneyStreak(unittest.TestCase):

    def setUp(self):
        self.clock = FakeClock()
        self.streaks = SmartMoneyStreakTracker(clock=self.clock)

    def test_first_valid_tick(self):
        self.assertEqual(self.streaks.observe(ADDR, 60, True), 1)

    def test_consecutive_ticks_build(self):
        self.streaks.observe(ADDR, 60, True)
        self.clock.advance(30)
        self.assertEqual(self.streaks.observe(ADDR, 60, True), 2)

    def test_capped_at_five(self):
        for _ in range(8):
            streak = self.streaks.observe(ADDR, 80, True)
            self.clock.advance(10)
        self.assertEqual(streak, 5)

    def test_window_is_strict(self):
        self.streaks.observe(ADDR, 60, True)
        self.clock.advance(120)
        self.assertEqual(self.streaks.observe(ADDR, 60, True), 1)

        self.clock.advance(119.9)
        self.assertEqual(self.streaks.observe(ADDR, 60, True), 2)

    def test_invalid_tick_inside_window_keeps_streak(self):
        self.streaks.observe(ADDR, 60, True)
        self.clock.advance(10)
        self.streaks.observe(ADDR, 60, True)
        self.clock.advance(10)
        self.assertEqual(self.streaks.observe(ADDR, 20, False), 2)
        self.assertEqual(self.streaks.get(ADDR).last_score, 60)

    def test_invalid_tick_outside_window_is_zero(self):
        self.streaks.observe(ADDR, 60, True)
        self.clock.advance(500)
        self.assertEqual(self.streaks.observe(ADDR, 20, False), 0)
        self.assertEqual(self.streaks.observe("Unseen", 20, False), 0)

    def test_streak_restarts_after_gap(self):
        self.streaks.observe(ADDR, 60, True)
        self.clock.advance(30)
        self.streaks.observe(ADDR, 60, True)
        self.clock.advance(300)
        self.assertEqual(self.streaks.observe(ADDR, 60, True), 1)


if __name__ == '__main__':
    unittest.main()
