"""
Shared tape/trend helpers used by every classifier.
"""
from typing import Optional

from screener.models import PairSnapshot
from .models import FlowStats

TIMEFRAMES = ('5m', '10m', '15m', '1h', '4h', '1d')
DEFAULT_TIMEFRAME = '15m'


def buy_ratio(buys: float, sells: float) -> float:
    """
    Laplace-smoothed buy share: (buys + 1) / (buys + sells + 2).

    Never divides by zero and keeps tiny samples near 0.5.
    """
    return (buys + 1) / (buys + sells + 2)


def flow_stats(snapshot: Optional[PairSnapshot]) -> FlowStats:
    """Combine the 5m and 15m txn buckets."""
    if snapshot is None:
        return FlowStats()
    buys = snapshot.buys('m5') + snapshot.buys('m15')
    sells = snapshot.sells('m5') + snapshot.sells('m15')
    return FlowStats(buys=buys, sells=sells, total=buys + sells, buy_ratio=buy_ratio(buys, sells))


def normalize_timeframe(timeframe) -> str:
    tf = str(timeframe or "").strip()
    return tf if tf in TIMEFRAMES else DEFAULT_TIMEFRAME


def trend_change(snapshot: Optional[PairSnapshot], timeframe) -> float:
    """
    Price change for the requested timeframe.

    10m has no upstream bucket, so it is blended as 0.6 * m5 + 0.4 * m15.
    Unknown timeframes read the 15m bucket.
    """
    if snapshot is None:
        return 0.0
    tf = str(timeframe)
    if tf == '5m':
        return snapshot.change('m5')
    if tf == '10m':
        return snapshot.change('m5') * 0.6 + snapshot.change('m15') * 0.4
    if tf == '1h':
        return snapshot.change('h1')
    if tf == '4h':
        return snapshot.change('h4')
    if tf == '1d':
        return snapshot.change('h24')
    return snapshot.change('m15')


def is_falling_knife(snapshot: PairSnapshot) -> bool:
    """Deep multi-timeframe collapse: 1h < -10, 4h < -18, 24h < -35."""
    return (
        snapshot.change('h1') < -10
        and snapshot.change('h4') < -18
        and snapshot.change('h24') < -35
    )
