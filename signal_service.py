"""
SIGNAL SERVICE

Request/response facade the routing layer (or the CLI) calls. Owns the
process-scoped services and wires the side channels:

    boosted seed ─► orchestrator ─► builder ─► response
                                        │
                                        ├─► ledger.record_buy_signal (show_buy items)
                                        └─► ledger.update_peak (every emitted item)

Every list method returns {"count": n, "items": [...]} with JSON-ready
items. Only a failure of the seed fetch itself propagates.
"""

import logging
import time
from typing import Callable, Dict, Iterable, List

import config
from classifiers import (
    classify,
    compute_potential,
    compute_risk,
    detail_warnings,
    normalize_timeframe,
)
from screener.cache import SnapshotCache
from screener.dex_screener import DexScreenerAPI
from screener.models import TokenIdentity
from screener.normalizer import identity_from_pair, select_best_pair
from screener.orchestrator import FetchOrchestrator
from screener.token_list import is_lst_symbol, is_stable_symbol, load_majors, pick_jupiter_token
from signal_config import get_list_cap, get_seed_limit, get_signal_config
from stores import PerformanceHistory, VetoBlacklist
from views import (
    HOT_BUYS,
    SIGNAL_PLUS,
    SMART_MONEY,
    WHALE,
    SignalItem,
    SmartMoneyStreakTracker,
    build_boosted_list,
    build_high_liquidity_list,
    build_hot_buys_list,
    build_majors_list,
    build_risky_list,
    build_signal_plus_list,
    build_smart_money_list,
    build_top_volume_list,
    build_trending_low_risk_list,
    build_whale_alert_list,
    merge_all_signals,
)

logger = logging.getLogger(__name__)


def _response(items: List[SignalItem]) -> Dict:
    return {"count": len(items), "items": [item.to_dict() for item in items]}


class SignalService:
    """
    Usage:
        async with SignalService.from_config() as service:
            result = await service.list_smart_money("15m")
    """

    def __init__(self, screener, veto: VetoBlacklist, history: PerformanceHistory,
                 streaks: SmartMoneyStreakTracker = None, orchestrator: FetchOrchestrator = None,
                 majors_path=None, chain_id: str = None):
        self.screener = screener
        self.veto = veto
        self.history = history
        self.streaks = streaks or SmartMoneyStreakTracker()
        self.orchestrator = orchestrator or FetchOrchestrator(screener, veto=veto)
        self.normalizer = self.orchestrator.normalizer
        self.majors_path = majors_path or config.MAJORS_PATH
        self.chain_id = chain_id or config.CHAIN_ID

    @classmethod
    def from_config(cls, clock: Callable[[], float] = time.time) -> 'SignalService':
        """Build the production wiring from config.py / signal_config.py."""
        cache = SnapshotCache(get_signal_config()['cache'], clock=clock)
        screener = DexScreenerAPI(cache=cache)
        history = PerformanceHistory(config.PERF_HISTORY_PATH, clock=clock)
        veto = VetoBlacklist(config.VETO_PATH, clock=clock, history=history)
        streaks = SmartMoneyStreakTracker(clock=clock)
        orchestrator = FetchOrchestrator(screener, veto=veto, concurrency=config.FETCH_CONCURRENCY)
        return cls(screener, veto, history, streaks=streaks, orchestrator=orchestrator)

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.close()

    async def close(self):
        """Flush both stores and release the upstream session."""
        self.veto.close()
        self.history.close()
        close = getattr(self.screener, 'close', None)
        if close is not None:
            await close()

    # ------------------------------------------------------------------
    # Ledger side channels
    # ------------------------------------------------------------------

    def _track_buy_signals(self, items: Iterable[SignalItem], source: str):
        for item in items:
            if item.show_buy:
                self.history.record_buy_signal(item.address, source, item.ident, item.market_cap)

    def _update_peaks(self, items: Iterable[SignalItem]):
        for item in items:
            self.history.update_peak(item.address, item.market_cap)

    async def _seed(self, view: str, allow_high_risk: bool = False) -> List[SignalItem]:
        return await self.orchestrator.boosted_seed(get_seed_limit(view), allow_high_risk)

    # ------------------------------------------------------------------
    # Token detail / search
    # ------------------------------------------------------------------

    async def token_detail(self, address, tf=config.DEFAULT_TIMEFRAME) -> Dict:
        """
        Everything known about one token.

        Missing pairs still produce a full answer (NO_PAIR_DATA risk).
        """
        address = str(address or "").strip()
        timeframe = normalize_timeframe(tf)

        pairs = await self.orchestrator.fetch_pairs(address)
        best_pair = select_best_pair(pairs)
        result = classify(best_pair)
        potential = compute_potential(best_pair, timeframe, result.risk, result.dump)

        return {
            "address": address,
            "ident": identity_from_pair(best_pair, address).to_dict(),
            "bestPair": best_pair.to_dict() if best_pair is not None else None,
            "risk": result.risk.to_dict(),
            "dump": result.dump.to_dict(),
            "whale": result.whale.to_dict(),
            "smart": result.smart.to_dict(),
            "potential": potential.to_dict(),
            "pairs": [p.to_dict() for p in pairs[:get_list_cap('detail_pairs')]],
            "warnings": [w.to_dict() for w in detail_warnings(result.risk, result.dump)],
        }

    async def search(self, q) -> Dict:
        """
        Free-text search: one pair per base token (highest liquidity), risk only.

        Raises:
            ValueError: empty query
        """
        query = str(q or "").strip()
        if not query:
            raise ValueError("Missing q")

        raw_pairs = await self.screener.search_pairs(query)
        pairs = [p for p in self.normalizer.normalize_all(raw_pairs) if p.chain_id == self.chain_id]

        by_token = {}
        for pair in pairs:
            addr = pair.base_token.address
            if not addr:
                continue
            current = by_token.get(addr)
            if current is None or pair.liquidity > current.liquidity:
                by_token[addr] = pair

        items = []
        for address, best_pair in list(by_token.items())[:get_list_cap('search')]:
            items.append({
                "address": address,
                "ident": identity_from_pair(best_pair, address).to_dict(),
                "bestPair": best_pair.to_dict(),
                "risk": compute_risk(best_pair).to_dict(),
            })
        return {"q": query, "count": len(items), "items": items}

    # ------------------------------------------------------------------
    # Simple views
    # ------------------------------------------------------------------

    async def list_majors(self, tf=config.DEFAULT_TIMEFRAME) -> Dict:
        """
        Curated majors (no stablecoins, no liquid-staking wrappers).

        The list file is re-read on every call. A token-list outage only
        loses the entries that needed resolving.
        """
        timeframe = normalize_timeframe(tf)
        majors = load_majors(self.majors_path)

        needs_lookup = any(not m.get('address') for m in majors)
        token_list = []
        if needs_lookup:
            try:
                token_list = await self.screener.fetch_token_list()
            except Exception as e:
                logger.warning(f"[MAJORS] Token list unavailable: {e}")

        wanted = []
        for entry in majors:
            symbol = str(entry.get('symbol') or "")
            if is_stable_symbol(symbol) or is_lst_symbol(symbol):
                continue
            token = None if entry.get('address') else pick_jupiter_token(token_list, symbol, entry.get('name'))
            address = str(entry.get('address') or (token or {}).get('address') or "").strip()
            if address:
                wanted.append((address, entry, token))

        enriched = await self.orchestrator.enrich([address for address, _, _ in wanted])
        by_address = {item.address: item for item in enriched}

        items = []
        for address, entry, token in wanted:
            item = by_address.pop(address, None)
            if item is None:
                continue
            base = item.best_pair.base_token
            ident = TokenIdentity(
                address=address,
                name=entry.get('name') or base.name or "Token",
                symbol=entry.get('symbol') or base.symbol or "",
                logo=item.best_pair.image_url or (token or {}).get('logoURI') or "",
            )
            items.append(item.with_updates(ident=ident, whale=None, smart=None))

        items = build_majors_list(items, timeframe)
        self._update_peaks(items)
        return _response(items)

    async def list_trending_low_risk(self, tf=config.DEFAULT_TIMEFRAME) -> Dict:
        seed = await self._seed('trending_low_risk')
        items = build_trending_low_risk_list(seed, normalize_timeframe(tf))
        self._update_peaks(items)
        return _response(items)

    async def list_top_volume(self) -> Dict:
        seed = await self._seed('top_volume')
        items = build_top_volume_list(seed)
        self._update_peaks(items)
        return _response(items)

    async def list_high_liquidity(self) -> Dict:
        seed = await self._seed('high_liquidity')
        items = build_high_liquidity_list(seed)
        self._update_peaks(items)
        return _response(items)

    async def list_boosted(self) -> Dict:
        seed = await self._seed('boosted')
        items = build_boosted_list(seed)
        self._update_peaks(items)
        return _response(items)

    async def list_risky(self) -> Dict:
        seed = await self._seed('risky', allow_high_risk=True)
        items = build_risky_list(seed)
        self._update_peaks(items)
        return _response(items)

    # ------------------------------------------------------------------
    # Signal views
    # ------------------------------------------------------------------

    async def list_whale_alert(self, tf=config.DEFAULT_TIMEFRAME) -> Dict:
        seed = await self._seed('whale_alert')
        items = build_whale_alert_list(seed, normalize_timeframe(tf))
        self._update_peaks(items)
        self._track_buy_signals(items, WHALE)
        return _response(items)

    async def list_smart_money(self, tf=config.DEFAULT_TIMEFRAME) -> Dict:
        seed = await self._seed('smart_money')
        items = build_smart_money_list(seed, normalize_timeframe(tf), self.streaks, self.veto)
        self._update_peaks(items)
        self._track_buy_signals(items, SMART_MONEY)
        return _response(items)

    async def list_hot_buys(self, tf=config.DEFAULT_TIMEFRAME) -> Dict:
        seed = await self._seed('hot_buys')
        items = build_hot_buys_list(seed, normalize_timeframe(tf))
        self._update_peaks(items)
        self._track_buy_signals(items, HOT_BUYS)
        return _response(items)

    async def list_signal_plus(self, tf=config.DEFAULT_TIMEFRAME, potential=config.DEFAULT_POTENTIAL) -> Dict:
        seed = await self._seed('signal_plus')
        items = build_signal_plus_list(seed, normalize_timeframe(tf), potential)
        self._update_peaks(items)
        self._track_buy_signals(items, SIGNAL_PLUS)
        return _response(items)

    async def list_all_signals(self, tf=config.DEFAULT_TIMEFRAME, potential=config.DEFAULT_POTENTIAL) -> Dict:
        """Union of Smart Money, Whale Alert, Hot Buys and Signal+ over one seed."""
        timeframe = normalize_timeframe(tf)
        seed = await self._seed('all_signals')

        views = [
            (SMART_MONEY, build_smart_money_list(seed, timeframe, self.streaks, self.veto)),
            (WHALE, build_whale_alert_list(seed, timeframe)),
            (HOT_BUYS, build_hot_buys_list(seed, timeframe)),
            (SIGNAL_PLUS, build_signal_plus_list(seed, timeframe, potential)),
        ]
        for source, view_items in views:
            self._track_buy_signals(view_items, source)

        items = merge_all_signals(views)
        self._update_peaks(items)
        return _response(items)

    # ------------------------------------------------------------------
    # Ledger
    # ------------------------------------------------------------------

    async def performance_history(self) -> Dict:
        entries = self.history.list_entries()
        return {
            "count": len(entries),
            "items": [e.to_dict() for e in entries],
            "path": self.history.path,
        }

    def get_stats(self) -> Dict:
        screener_stats = getattr(self.screener, 'get_stats', None)
        return {
            'screener': screener_stats() if screener_stats is not None else {},
            'orchestrator': self.orchestrator.get_stats(),
            'veto': self.veto.get_stats(),
            'streaks': len(self.streaks),
            'ledger_entries': len(self.history.list_entries()),
        }
