"""
Smart-money continuity.

A token only graduates into the Smart Money view on a single tick when its
score is very strong; otherwise it needs consecutive qualifying ticks no
more than 120 s apart. Streaks are capped at 5.
"""
import threading
import time
from dataclasses import dataclass
from typing import Callable, Dict, Optional

from signal_config import get_streak_config


@dataclass(frozen=True)
class SmartMoneyStreak:
    streak: int
    last_score: float
    last_observed_at: float  # seconds


class SmartMoneyStreakTracker:
    """Per-address streak state (in memory, shared across requests)."""

    def __init__(self, clock: Callable[[], float] = time.time, streak_config: Dict = None):
        self.config = streak_config or get_streak_config()
        self._clock = clock
        self._lock = threading.Lock()
        self._streaks: Dict[str, SmartMoneyStreak] = {}

    def observe(self, address: str, smart_score: float, valid: bool) -> int:
        """
        Record one tick and return the streak to display.

        Args:
            address: Token address
            smart_score: Smart-money score on this tick
            valid: Tick clears the quality bar (score, risk, dump, knife)

        Returns:
            Streak for this tick (0 when invalid and outside the window)
        """
        window = self.config['window_seconds']
        now = self._clock()
        key = str(address or "")

        with self._lock:
            prev = self._streaks.get(key)
            in_window = prev is not None and (now - prev.last_observed_at) < window

            if not valid:
                return prev.streak if in_window else 0

            if in_window and prev.last_score >= self.config['qualify_score']:
                streak = min(self.config['max_streak'], (prev.streak or 1) + 1)
            else:
                streak = 1

            self._streaks[key] = SmartMoneyStreak(streak=streak, last_score=smart_score, last_observed_at=now)
            return streak

    def get(self, address: str) -> Optional[SmartMoneyStreak]:
        with self._lock:
            return self._streaks.get(str(address or ""))

    def __len__(self):
        with self._lock:
            return len(self._streaks)
