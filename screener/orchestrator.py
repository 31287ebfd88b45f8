"""
FETCH ORCHESTRATOR

Turns seed addresses into classified SignalItems with a bounded worker pool:

    address ─► token pairs (cached) ─► best pair ─► veto check
            ─► quality gate ─► classify ─► SignalItem

A task that fails (upstream error, timeout, no pairs) yields nothing and
never aborts its siblings. Results keep the seed order.
"""

import asyncio
import logging
from typing import Dict, Iterable, List, Optional

import config
from classifiers import classify, compute_dump_risk, compute_risk, passes_quality_gate
from views.models import SignalItem
from .base_screener import BaseScreener
from .models import PairSnapshot
from .normalizer import PairNormalizer, identity_from_pair, select_best_pair

logger = logging.getLogger(__name__)


class FetchOrchestrator:
    """
    Bounded-parallel fetch-and-classify.

    Usage:
        orchestrator = FetchOrchestrator(api, veto=veto)
        seed = await orchestrator.boosted_seed(40)
    """

    def __init__(self, screener: BaseScreener, veto=None, concurrency: int = None,
                 normalizer: PairNormalizer = None, chain_id: str = None):
        """
        Args:
            screener: Upstream client (DexScreenerAPI or a test fake)
            veto: Optional VetoBlacklist consulted for every address
            concurrency: Max in-flight tasks (default FETCH_CONCURRENCY)
            normalizer: Pair normalizer
            chain_id: Chain the boosted seed is filtered to
        """
        self.screener = screener
        self.veto = veto
        self.concurrency = max(1, concurrency or config.FETCH_CONCURRENCY)
        self.normalizer = normalizer or PairNormalizer()
        self.chain_id = chain_id or config.CHAIN_ID

        self.stats = {
            'evaluated': 0,
            'emitted': 0,
            'vetoed': 0,
            'gated': 0,
            'no_pairs': 0,
            'failed': 0,
        }

    async def fetch_pairs(self, address: str) -> List[PairSnapshot]:
        raw = await self.screener.fetch_token_pairs(address)
        return self.normalizer.normalize_all(raw)

    async def evaluate(self, address: str, allow_high_risk: bool = False) -> Optional[SignalItem]:
        """
        Fetch, veto-check, gate and classify one token.

        Returns:
            SignalItem, or None when the token is vetoed, gated or has no pair

        Raises:
            Upstream/transport errors from the screener
        """
        self.stats['evaluated'] += 1

        if self.veto is not None and self.veto.is_vetoed(address):
            self.stats['vetoed'] += 1
            return None

        pairs = await self.fetch_pairs(address)
        best_pair = select_best_pair(pairs)
        if best_pair is None:
            self.stats['no_pairs'] += 1
            return None

        if self.veto is not None and self.veto.check(address, best_pair):
            self.stats['vetoed'] += 1
            return None

        risk = compute_risk(best_pair)
        dump = compute_dump_risk(best_pair)
        if not passes_quality_gate(best_pair, allow_high_risk, risk, dump):
            self.stats['gated'] += 1
            return None

        result = classify(best_pair)
        self.stats['emitted'] += 1
        return SignalItem(
            address=address,
            ident=identity_from_pair(best_pair, address),
            best_pair=best_pair,
            risk=result.risk,
            dump=result.dump,
            whale=result.whale,
            smart=result.smart,
        )

    async def enrich(self, addresses: Iterable[str], allow_high_risk: bool = False) -> List[SignalItem]:
        """
        Evaluate many addresses with at most `concurrency` tasks in flight.

        Duplicate and empty addresses are dropped before fetching.
        """
        seen = set()
        unique = []
        for address in addresses:
            addr = str(address or "").strip()
            if addr and addr not in seen:
                seen.add(addr)
                unique.append(addr)

        semaphore = asyncio.Semaphore(self.concurrency)

        async def evaluate_with_limit(addr: str) -> Optional[SignalItem]:
            async with semaphore:
                try:
                    return await self.evaluate(addr, allow_high_risk)
                except Exception as e:
                    self.stats['failed'] += 1
                    logger.warning(f"[FETCH] {addr[:10]}... failed: {e}")
                    return None

        results = await asyncio.gather(*(evaluate_with_limit(addr) for addr in unique))
        return [item for item in results if item is not None]

    async def boosted_addresses(self, limit: int) -> List[str]:
        """Boosted token addresses on our chain, in upstream order."""
        boosted = await self.screener.fetch_boosted_tokens()
        on_chain = [
            x for x in boosted
            if isinstance(x, dict) and x.get('chainId') == self.chain_id
        ]
        return [str(x.get('tokenAddress') or "") for x in on_chain[:limit]]

    async def boosted_seed(self, limit: int, allow_high_risk: bool = False) -> List[SignalItem]:
        """
        Classified seed for the list views.

        Raises:
            Upstream/transport errors from the boosted-list fetch itself
        """
        addresses = await self.boosted_addresses(limit)
        items = await self.enrich(addresses, allow_high_risk)
        logger.debug(f"[FETCH] Boosted seed: {len(items)}/{len(addresses)} tokens kept")
        return items

    def get_stats(self) -> Dict:
        return dict(self.stats, concurrency=self.concurrency)
