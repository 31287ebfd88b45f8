"""
PAIR NORMALIZER & SELECTOR

Converts raw DexScreener pair records into PairSnapshot objects and picks
the single representative ("best") pair for a token.

Selection score:
    liquidity_usd * 1_000_000 + volume_24h * 10 + (buys_24h + sells_24h)

Liquidity dominates; volume and 24h activity only break near-ties. Exact
ties keep the upstream order.
"""

from typing import Dict, Iterable, List, Optional

from safe_math import optional_num
from .models import (
    PRICE_CHANGE_BUCKETS,
    TXN_BUCKETS,
    PairSnapshot,
    TokenIdentity,
    TokenRef,
    TxnCounts,
)

VOLUME_BUCKETS = ('m5', 'h1', 'h6', 'h24')


class PairNormalizer:
    """
    Normalizes raw pair data into PairSnapshot.

    Only a fixed field set is projected; anything else on the raw record
    is dropped. Missing numbers stay None.
    """

    def normalize(self, raw_pair: Optional[Dict]) -> Optional[PairSnapshot]:
        """
        Normalize one DexScreener pair record.

        Args:
            raw_pair: Raw pair dict from the token-pairs or search endpoint

        Returns:
            PairSnapshot, or None for a null/non-dict record
        """
        if not isinstance(raw_pair, dict):
            return None

        liquidity = self._sub(raw_pair, 'liquidity')
        volume = self._sub(raw_pair, 'volume')
        price_change = self._sub(raw_pair, 'priceChange')
        txns = self._sub(raw_pair, 'txns')
        info = self._sub(raw_pair, 'info')

        txn_counts = {}
        for bucket in TXN_BUCKETS:
            counts = txns.get(bucket)
            if isinstance(counts, dict):
                txn_counts[bucket] = TxnCounts(
                    buys=optional_num(counts.get('buys')),
                    sells=optional_num(counts.get('sells')),
                )

        price = raw_pair.get('priceUsd')
        created = optional_num(raw_pair.get('pairCreatedAt'))

        return PairSnapshot(
            chain_id=str(raw_pair.get('chainId') or ""),
            dex_id=str(raw_pair.get('dexId') or ""),
            pair_address=str(raw_pair.get('pairAddress') or ""),
            url=str(raw_pair.get('url') or ""),
            base_token=self._token_ref(raw_pair.get('baseToken')),
            quote_token=self._token_ref(raw_pair.get('quoteToken')),
            price_usd=str(price) if price is not None else None,
            fdv=optional_num(raw_pair.get('fdv')),
            market_cap=optional_num(raw_pair.get('marketCap')),
            liquidity_usd=optional_num(liquidity.get('usd')),
            volume={b: optional_num(volume.get(b)) for b in VOLUME_BUCKETS if b in volume},
            price_change={b: optional_num(price_change.get(b)) for b in PRICE_CHANGE_BUCKETS if b in price_change},
            txns=txn_counts,
            pair_created_at=int(created) if created is not None else None,
            image_url=str(info.get('imageUrl') or ""),
            info=dict(info),
        )

    def normalize_all(self, raw_pairs: Optional[Iterable]) -> List[PairSnapshot]:
        """Normalize a raw list, silently skipping unusable records."""
        if not raw_pairs or not isinstance(raw_pairs, (list, tuple)):
            return []
        pairs = (self.normalize(raw) for raw in raw_pairs)
        return [p for p in pairs if p is not None]

    def _sub(self, raw: Dict, key: str) -> Dict:
        value = raw.get(key)
        return value if isinstance(value, dict) else {}

    def _token_ref(self, raw_token) -> TokenRef:
        if not isinstance(raw_token, dict):
            return TokenRef()
        return TokenRef(
            address=str(raw_token.get('address') or ""),
            name=str(raw_token.get('name') or ""),
            symbol=str(raw_token.get('symbol') or ""),
        )


def pair_score(pair: PairSnapshot) -> float:
    """Liquidity/volume/activity score used to rank pairs of one token."""
    tx_24h = pair.buys('h24') + pair.sells('h24')
    return pair.liquidity * 1_000_000 + pair.volume_24h * 10 + tx_24h


def select_best_pair(pairs: Optional[List[PairSnapshot]]) -> Optional[PairSnapshot]:
    """
    Pick the canonical pair for a token.

    Returns None when there is no tradable market. sorted() is stable, so
    pairs with equal scores keep their original order.
    """
    if not pairs:
        return None
    return sorted(pairs, key=pair_score, reverse=True)[0]


def identity_from_pair(best_pair: Optional[PairSnapshot], address: str) -> TokenIdentity:
    """Display identity from the best pair's base token."""
    if best_pair is None:
        return TokenIdentity(address=address)
    base = best_pair.base_token
    return TokenIdentity(
        address=address,
        name=base.name or "Token",
        symbol=base.symbol or "",
        logo=best_pair.image_url or "",
    )
