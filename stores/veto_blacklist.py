"""
Veto Blacklist - permanent exclusion after a market-cap / liquidity collapse

Features:
- Remembers the last {market cap, liquidity} seen per address (memory only)
- Compares each new best pair against it and vetoes on:
    mc_crash   prev mc >= 20k and mc <= prev / 10
    fast_dump  previous sighting <= 1h old, prev mc >= 20k and mc <= prev * 0.3
    rug_like   prev liq >= 5k, 0 < liq <= prev liq * 0.2 and mc <= prev mc * 0.3
- Once vetoed, an address stays vetoed (records are never changed or removed)
- Persists records to JSON: {"items": {addr: {ts, reason, prevMc, mc, prevLiq, liq}}}
"""
import logging
import threading
import time
from dataclasses import dataclass
from typing import Callable, Dict, Optional

import config
from safe_math import safe_num
from screener.models import PairSnapshot
from signal_config import get_veto_config
from .json_store import DebouncedJsonFile, load_json_file

logger = logging.getLogger(__name__)

MC_CRASH = "mc_crash"
FAST_DUMP = "fast_dump"
RUG_LIKE = "rug_like"


@dataclass(frozen=True)
class McObservation:
    market_cap: float
    liquidity: float
    observed_at: float  # seconds


@dataclass(frozen=True)
class VetoRecord:
    created_at: float  # seconds
    reason: str
    prev_market_cap: float = 0.0
    market_cap: float = 0.0
    prev_liquidity: float = 0.0
    liquidity: float = 0.0

    def to_dict(self) -> Dict:
        return {
            "ts": int(self.created_at * 1000),
            "reason": self.reason,
            "prevMc": self.prev_market_cap,
            "mc": self.market_cap,
            "prevLiq": self.prev_liquidity,
            "liq": self.liquidity,
        }

    @classmethod
    def from_dict(cls, data: Dict) -> 'VetoRecord':
        return cls(
            created_at=safe_num(data.get('ts')) / 1000,
            reason=str(data.get('reason') or ""),
            prev_market_cap=safe_num(data.get('prevMc')),
            market_cap=safe_num(data.get('mc')),
            prev_liquidity=safe_num(data.get('prevLiq')),
            liquidity=safe_num(data.get('liq')),
        )


class VetoBlacklist:
    """
    Append-only veto store.

    Usage:
        veto = VetoBlacklist(path, history=ledger)
        if veto.check(address, best_pair):
            continue  # never surfaced again
    """

    def __init__(self, path=None, clock: Callable[[], float] = time.time,
                 history=None, veto_config: Dict = None, debounce_seconds: float = None):
        """
        Args:
            path: JSON file (None -> memory-only)
            clock: Time source in seconds
            history: Optional PerformanceHistory; vetoed addresses are marked removed
            veto_config: Threshold overrides (defaults from signal_config)
            debounce_seconds: Flush coalescing window
        """
        self.config = veto_config or get_veto_config()
        self._clock = clock
        self._history = history
        self._lock = threading.RLock()
        self._records: Dict[str, VetoRecord] = {}
        self._observations: Dict[str, McObservation] = {}

        delay = config.PERSIST_DEBOUNCE_SECONDS if debounce_seconds is None else debounce_seconds
        self._writer = DebouncedJsonFile(path, self._document, delay, name="VETO")

        raw = load_json_file(self._writer.path, {'items': {}})
        for address, data in (raw.get('items') or {}).items():
            if isinstance(data, dict):
                self._records[address] = VetoRecord.from_dict(data)

        if self._records:
            logger.info(f"[VETO] Loaded {len(self._records)} vetoed tokens from {self._writer.path}")

    @property
    def path(self) -> Optional[str]:
        return str(self._writer.path) if self._writer.path else None

    def _document(self) -> Dict:
        with self._lock:
            return {'items': {addr: rec.to_dict() for addr, rec in self._records.items()}}

    def is_vetoed(self, address: str) -> bool:
        with self._lock:
            return str(address or "") in self._records

    def get_record(self, address: str) -> Optional[VetoRecord]:
        with self._lock:
            return self._records.get(str(address or ""))

    def records(self) -> Dict[str, VetoRecord]:
        with self._lock:
            return dict(self._records)

    def get_observation(self, address: str) -> Optional[McObservation]:
        with self._lock:
            return self._observations.get(str(address or ""))

    def _classify_transition(self, prev: McObservation, mc: float, liq: float, now: float) -> Optional[str]:
        cfg = self.config
        if prev.market_cap <= 0 or mc <= 0:
            return None

        big_enough = prev.market_cap >= cfg['min_prev_market_cap']
        if big_enough and mc <= prev.market_cap / cfg['crash_divisor']:
            return MC_CRASH

        recent = (now - prev.observed_at) <= cfg['fast_dump_window_seconds']
        if recent and big_enough and mc <= prev.market_cap * cfg['fast_dump_ratio']:
            return FAST_DUMP

        if (prev.liquidity >= cfg['rug_min_prev_liquidity']
                and 0 < liq <= prev.liquidity * cfg['rug_liquidity_ratio']
                and mc <= prev.market_cap * cfg['rug_market_cap_ratio']):
            return RUG_LIKE

        return None

    def check(self, address: str, snapshot: Optional[PairSnapshot]) -> bool:
        """
        Evaluate the current best pair for an address.

        Args:
            address: Token address
            snapshot: Current best pair (None -> nothing to compare, not vetoed)

        Returns:
            True if the address is (now) vetoed
        """
        addr = str(address or "")
        if not addr:
            return False

        with self._lock:
            if addr in self._records:
                return True
            if snapshot is None:
                return False

            now = self._clock()
            mc = safe_num(snapshot.market_cap)
            liq = safe_num(snapshot.liquidity_usd)
            prev = self._observations.get(addr)

            reason = self._classify_transition(prev, mc, liq, now) if prev else None

            if mc > 0 or liq > 0:
                self._observations[addr] = McObservation(market_cap=mc, liquidity=liq, observed_at=now)

            if not reason:
                return False

            record = VetoRecord(
                created_at=now,
                reason=reason,
                prev_market_cap=prev.market_cap,
                market_cap=mc,
                prev_liquidity=prev.liquidity,
                liquidity=liq,
            )
            self._records[addr] = record
            self._writer.mark_dirty()

        logger.warning(
            f"[VETO] {addr[:10]}... vetoed ({reason}): "
            f"mc ${record.prev_market_cap:,.0f} -> ${mc:,.0f}, liq ${record.prev_liquidity:,.0f} -> ${liq:,.0f}"
        )

        if self._history is not None:
            self._history.mark_removed(addr, reason)

        return True

    def flush(self) -> bool:
        return self._writer.flush()

    def close(self):
        if self._writer.dirty:
            self._writer.flush()
        self._writer.cancel()

    def get_stats(self) -> Dict:
        with self._lock:
            by_reason: Dict[str, int] = {}
            for rec in self._records.values():
                by_reason[rec.reason] = by_reason.get(rec.reason, 0) + 1
            return {
                'vetoed': len(self._records),
                'observed': len(self._observations),
                'by_reason': by_reason,
                'writes': self._writer.writes,
                'memory_only': self._writer.memory_only,
            }
