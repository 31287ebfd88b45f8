"""
Performance History Ledger - tracks every BUY signal the views emit.

One entry per (token address, signal source):
- entry market cap is fixed at the first qualifying observation
- peak market cap only ever goes up
- ROI = peak / entry (multiple) and (multiple - 1) * 100 (percent)
- vetoed tokens are marked removed with an append-only note

Persists to a JSON document {"entries": {"<address>:<source>": {...}}}
through a debounced writer. Older files keyed by display names
("Smart Money", "Whale Alert", ...) are migrated to the canonical source
key the first time the entry is written.
"""
import logging
import threading
import time
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Tuple

import config
from safe_math import safe_div, safe_num
from screener.models import TokenIdentity
from signal_config import get_source_aliases
from .json_store import DebouncedJsonFile, load_json_file

logger = logging.getLogger(__name__)

ACTIVE = "active"
REMOVED = "removed"
PEAK_AFTER_REMOVAL_NOTE = "Peak updated after removal."


def normalize_source(source) -> Optional[str]:
    """
    Map a source name or legacy alias to its canonical key.

    Returns None for sources outside the canonical set.
    """
    raw = str(source or "").strip()
    lowered = raw.lower()
    for canonical, aliases in get_source_aliases().items():
        if lowered == canonical or lowered in (a.lower() for a in aliases):
            return canonical
    return None


def entry_key(address: str, source: str) -> str:
    return f"{address}:{source}"


@dataclass
class PerformanceEntry:
    id: str
    address: str
    source: str
    name: str = "Token"
    symbol: str = ""
    logo: str = ""
    signal: str = "BUY"
    entry_mc: float = 0.0
    peak_mc: float = 0.0
    last_mc: float = 0.0
    roi_multiple: float = 0.0
    roi_percent: float = 0.0
    status: str = ACTIVE
    notes: str = ""
    first_seen: int = 0
    last_seen: int = 0

    def compute_roi(self):
        if self.entry_mc > 0 and self.peak_mc > 0:
            self.roi_multiple = safe_div(self.peak_mc, self.entry_mc)
            self.roi_percent = (self.roi_multiple - 1) * 100
        else:
            self.roi_multiple = 0.0
            self.roi_percent = 0.0

    def append_note(self, note: str):
        self.notes = f"{self.notes} {note}".strip() if self.notes else note

    def to_dict(self) -> Dict:
        return {
            "id": self.id,
            "address": self.address,
            "source": self.source,
            "name": self.name,
            "symbol": self.symbol,
            "logo": self.logo,
            "signal": self.signal,
            "entryMc": self.entry_mc,
            "peakMc": self.peak_mc,
            "lastMc": self.last_mc,
            "roiPct": round(self.roi_percent, 2),
            "roiX": round(self.roi_multiple, 2),
            "status": self.status,
            "notes": self.notes,
            "firstSeen": self.first_seen,
            "lastSeen": self.last_seen,
        }

    @classmethod
    def from_dict(cls, key: str, data: Dict) -> 'PerformanceEntry':
        entry = cls(
            id=str(data.get('id') or key),
            address=str(data.get('address') or key.rsplit(':', 1)[0]),
            source=str(data.get('source') or ""),
            name=str(data.get('name') or "Token"),
            symbol=str(data.get('symbol') or ""),
            logo=str(data.get('logo') or ""),
            signal=str(data.get('signal') or ""),
            entry_mc=safe_num(data.get('entryMc')),
            peak_mc=safe_num(data.get('peakMc')),
            last_mc=safe_num(data.get('lastMc')),
            status=str(data.get('status') or ACTIVE),
            notes=str(data.get('notes') or ""),
            first_seen=int(safe_num(data.get('firstSeen'))),
            last_seen=int(safe_num(data.get('lastSeen'))),
        )
        if not entry.signal and entry.entry_mc > 0:
            entry.signal = "BUY"
        entry.compute_roi()
        return entry


class PerformanceHistory:
    """
    Buy-signal ledger.

    Usage:
        history = PerformanceHistory(path)
        history.record_buy_signal(addr, "Smart Money", identity, 120_000)
        history.update_peak(addr, 250_000)
        history.list_entries()
    """

    def __init__(self, path=None, clock: Callable[[], float] = time.time,
                 debounce_seconds: float = None):
        """
        Args:
            path: JSON file (None -> memory-only)
            clock: Time source in seconds
            debounce_seconds: Flush coalescing window
        """
        self._clock = clock
        self._lock = threading.RLock()
        self._entries: Dict[str, PerformanceEntry] = {}

        delay = config.PERSIST_DEBOUNCE_SECONDS if debounce_seconds is None else debounce_seconds
        self._writer = DebouncedJsonFile(path, self._document, delay, name="HISTORY")

        raw = load_json_file(self._writer.path, {'entries': {}})
        for key, data in (raw.get('entries') or {}).items():
            if isinstance(data, dict):
                self._entries[key] = PerformanceEntry.from_dict(key, data)

        if self._entries:
            logger.info(f"[HISTORY] Loaded {len(self._entries)} entries from {self._writer.path}")

    @property
    def path(self) -> Optional[str]:
        return str(self._writer.path) if self._writer.path else None

    def _now_ms(self) -> int:
        return int(self._clock() * 1000)

    def _document(self) -> Dict:
        with self._lock:
            return {'entries': {key: e.to_dict() for key, e in self._entries.items()}}

    def _find(self, address: str, source: str) -> Tuple[Optional[PerformanceEntry], str]:
        """Look up by canonical key, then by legacy alias keys."""
        key = entry_key(address, source)
        if key in self._entries:
            return self._entries[key], key
        for alias in get_source_aliases().get(source, []):
            legacy_key = entry_key(address, alias)
            if legacy_key in self._entries:
                return self._entries[legacy_key], legacy_key
        return None, key

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def record_buy_signal(self, address: str, source, identity: Optional[TokenIdentity] = None,
                          market_cap=0) -> Optional[PerformanceEntry]:
        """
        Record a BUY signal (first one sets the entry market cap).

        Returns:
            The entry, or None when ignored (no address, unknown source,
            market cap <= 0)
        """
        addr = str(address or "")
        src = normalize_source(source)
        mc = safe_num(market_cap)
        if not addr or mc <= 0:
            return None
        if src is None:
            logger.warning(f"[HISTORY] Ignoring buy signal with unknown source {source!r}")
            return None

        key = entry_key(addr, src)
        now = self._now_ms()

        with self._lock:
            existing, found_key = self._find(addr, src)

            if existing is not None and found_key != key:
                del self._entries[found_key]
                existing.id = key
                existing.source = src
                self._entries[key] = existing
                logger.info(f"[HISTORY] Migrated {found_key} -> {key}")

            if existing is None:
                identity = identity or TokenIdentity(address=addr)
                entry = PerformanceEntry(
                    id=key,
                    address=addr,
                    source=src,
                    name=identity.name or "Token",
                    symbol=identity.symbol or "",
                    logo=identity.logo or "",
                    entry_mc=mc,
                    peak_mc=mc,
                    last_mc=mc,
                    first_seen=now,
                    last_seen=now,
                )
                entry.compute_roi()
                self._entries[key] = entry
                self._writer.mark_dirty()
                logger.info(f"[HISTORY] New BUY {addr[:10]}... via {src} at mc ${mc:,.0f}")
                return entry

            existing.last_seen = now
            if identity is not None:
                existing.name = identity.name or existing.name
                existing.symbol = identity.symbol or existing.symbol
                existing.logo = identity.logo or existing.logo
            existing.signal = "BUY"
            if existing.entry_mc <= 0:
                existing.entry_mc = mc
            existing.last_mc = mc
            existing.peak_mc = max(existing.peak_mc, mc)
            existing.compute_roi()
            self._writer.mark_dirty()
            return existing

    def update_peak(self, address: str, market_cap) -> int:
        """
        Refresh every entry (all sources) for the address.

        Returns:
            Number of entries touched
        """
        addr = str(address or "")
        mc = safe_num(market_cap)
        if not addr or mc <= 0:
            return 0

        touched = 0
        now = self._now_ms()
        with self._lock:
            for entry in self._entries.values():
                if entry.address != addr:
                    continue
                entry.last_seen = now
                entry.last_mc = mc
                if not entry.signal and entry.entry_mc > 0:
                    entry.signal = "BUY"
                if mc > entry.peak_mc:
                    entry.peak_mc = mc
                    if entry.status == REMOVED and entry.notes and PEAK_AFTER_REMOVAL_NOTE not in entry.notes:
                        entry.append_note(PEAK_AFTER_REMOVAL_NOTE)
                    entry.compute_roi()
                touched += 1

            if touched:
                self._writer.mark_dirty()
        return touched

    def mark_removed(self, address: str, reason: str = None) -> int:
        """
        Flag every active entry for the address as removed.

        Already removed entries are left alone.

        Returns:
            Number of entries transitioned
        """
        addr = str(address or "")
        if not addr:
            return 0
        note = f"Removed due to {reason.replace('_', ' ')}." if reason else "Removed."

        changed = 0
        now = self._now_ms()
        with self._lock:
            for entry in self._entries.values():
                if entry.address != addr or entry.status == REMOVED:
                    continue
                entry.status = REMOVED
                entry.append_note(note)
                entry.last_seen = now
                changed += 1

            if changed:
                self._writer.mark_dirty()
                logger.info(f"[HISTORY] Marked {addr[:10]}... removed ({reason or 'no reason'})")
        return changed

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get_entry(self, address: str, source) -> Optional[PerformanceEntry]:
        src = normalize_source(source)
        if src is None:
            return None
        with self._lock:
            entry, _ = self._find(str(address or ""), src)
            return entry

    def list_entries(self) -> List[PerformanceEntry]:
        """All entries, most recently seen first."""
        with self._lock:
            entries = list(self._entries.values())
        return sorted(entries, key=lambda e: e.last_seen, reverse=True)

    def flush(self) -> bool:
        return self._writer.flush()

    def close(self):
        if self._writer.dirty:
            self._writer.flush()
        self._writer.cancel()
