"""
LIST BUILDERS

Each builder takes the enriched seed (already veto-checked, quality-gated
and classified by the orchestrator) and returns the ordered, capped view:

    seed ──► potential (per timeframe) ──► view filter ──► sort ──► cap

Builders are pure apart from the smart-money streak tracker they are handed.
Ledger side effects (buy signals, peaks) belong to the caller.
"""
from typing import Iterable, List, Optional, Sequence, Tuple

from classifiers import compute_potential, flow_stats, is_trash, trend_change
from classifiers.models import (
    ANOMALOUS_FLOW,
    FALLING_KNIFE,
    HIGH,
    LOW,
    LOW_LIQUIDITY,
    MANIPULATION_RISK,
    MED,
    MICRO_LIQUIDITY,
    VERY_LOW_LIQUIDITY,
)
from classifiers.potential import tier_rank
from signal_config import get_list_cap, get_streak_config
from .models import HOT_BUYS, SIGNAL_PLUS, SMART_MONEY, WHALE, SignalItem
from .streak import SmartMoneyStreakTracker

POTENTIAL_TIERS = (LOW, MED, HIGH)
DEFAULT_POTENTIAL_TIER = MED


def normalize_potential_tier(tier) -> str:
    value = str(tier or "").strip().upper()
    return value if value in POTENTIAL_TIERS else DEFAULT_POTENTIAL_TIER


def _smart_score(item: SignalItem) -> float:
    return item.smart.score if item.smart is not None else 0


def _whale_score(item: SignalItem) -> float:
    return item.whale.score if item.whale is not None else 0


def _with_potential(item: SignalItem, timeframe: str) -> SignalItem:
    potential = compute_potential(item.best_pair, timeframe, item.risk, item.dump)
    return item.with_potential(potential)


# ============================================================
# SIGNAL VIEWS
# ============================================================

def is_smart_money_tick(item: SignalItem) -> bool:
    """A tick counts toward the streak only if it clears the basic quality bar."""
    return (
        _smart_score(item) >= get_streak_config()['qualify_score']
        and item.risk.label != HIGH
        and item.dump.label != HIGH
        and not item.risk.has(FALLING_KNIFE)
    )


def build_smart_money_list(seed: Iterable[SignalItem], timeframe: str,
                           streaks: SmartMoneyStreakTracker, veto=None) -> List[SignalItem]:
    """
    Smart Money view.

    Shows an item immediately when smart score >= 70, otherwise only once it
    has held >= 55 for two consecutive ticks. Items with a streak >= 2 get a
    +6 sort bonus.
    """
    cfg = get_streak_config()
    items = []
    for item in seed:
        if veto is not None and veto.is_vetoed(item.address):
            continue
        streak = streaks.observe(item.address, _smart_score(item), is_smart_money_tick(item))
        items.append(_with_potential(item, timeframe).with_updates(smart_streak=streak))

    def shown(x: SignalItem) -> bool:
        score = _smart_score(x)
        return score >= cfg['show_score'] or (score >= cfg['qualify_score'] and x.smart_streak >= 2)

    def rank(x: SignalItem) -> float:
        return _smart_score(x) + (cfg['streak_bonus'] if x.smart_streak >= 2 else 0)

    items = [x for x in items if x.risk.label != HIGH and shown(x)]
    items.sort(key=rank, reverse=True)
    return items[:get_list_cap(SMART_MONEY)]


def build_whale_alert_list(seed: Iterable[SignalItem], timeframe: str) -> List[SignalItem]:
    """Whale Alert view: whale score >= 45, risk not HIGH, strongest first."""
    items = []
    for item in seed:
        if _whale_score(item) < 45 or item.risk.label == HIGH:
            continue
        items.append(_with_potential(item, timeframe).with_metrics(whaleScore=_whale_score(item)))

    items.sort(key=_whale_score, reverse=True)
    return items[:get_list_cap(WHALE)]


def hot_score(item: SignalItem) -> float:
    """
    Activity + buy dominance, with a smart-money bonus and penalties for
    uncontrolled moves, dump risk and falling knives.
    """
    flow = flow_stats(item.best_pair)
    score = flow.total * 2 + flow.buy_ratio * 100

    smart = _smart_score(item)
    if smart >= 55:
        score += 18
    elif smart >= 40:
        score += 8

    ch5 = abs(item.best_pair.change('m5'))
    ch15 = abs(item.best_pair.change('m15'))
    if not (ch5 <= 18 and ch15 <= 35):
        score -= 14
    if item.dump.label == MED:
        score -= 10
    elif item.dump.label == HIGH:
        score -= 40
    if item.risk.has(FALLING_KNIFE):
        score -= 40
    return score


def build_hot_buys_list(seed: Iterable[SignalItem], timeframe: str) -> List[SignalItem]:
    """Hot Buys view: >= 16 txns at >= 0.62 buy ratio, no HIGH risk/dump, no knife."""
    items = []
    for item in seed:
        flow = flow_stats(item.best_pair)
        if flow.total < 16 or flow.buy_ratio < 0.62:
            continue
        if item.risk.label == HIGH or item.dump.label == HIGH or item.risk.has(FALLING_KNIFE):
            continue
        items.append(
            _with_potential(item, timeframe).with_metrics(
                hotScore=hot_score(item),
                buyRatio=flow.buy_ratio,
                totalTx=flow.total,
            )
        )

    items.sort(key=lambda x: x.metrics['hotScore'], reverse=True)
    return items[:get_list_cap(HOT_BUYS)]


def passes_signal_plus_gate(item: SignalItem, potential_tier: str) -> bool:
    """Hard vetoes, then the thresholds for the requested potential tier."""
    liq = item.best_pair.liquidity
    risk = item.risk
    dump = item.dump.label
    tier = item.potential.tier if item.potential is not None else LOW

    if dump == HIGH or risk.has(MICRO_LIQUIDITY) or risk.has(MANIPULATION_RISK):
        return False

    thin = risk.has(VERY_LOW_LIQUIDITY) or risk.has(LOW_LIQUIDITY)

    if potential_tier == HIGH:
        return (
            tier == HIGH
            and risk.label == LOW
            and dump == LOW
            and not thin
            and not risk.has(ANOMALOUS_FLOW)
            and not risk.has(FALLING_KNIFE)
            and liq >= 2500
        )
    if potential_tier == MED:
        return (
            tier in (MED, HIGH)
            and risk.score <= 55
            and not risk.has(FALLING_KNIFE)
            and liq >= 1800
        )
    # LOW stays narrow on purpose; a short list beats a rug
    return risk.score <= 65 and dump == LOW and not thin and liq >= 2200


def build_signal_plus_list(seed: Iterable[SignalItem], timeframe: str, potential_tier=DEFAULT_POTENTIAL_TIER) -> List[SignalItem]:
    """
    Signal+ view: tier-gated dip-and-reversal buys.

    Only items whose buy gate fired survive. Sorted by potential tier desc,
    risk score asc, then trend desc.
    """
    tier = normalize_potential_tier(potential_tier)
    items = []
    for item in seed:
        if is_trash(item.best_pair, item.risk, item.dump) or item.risk.label == HIGH:
            continue
        candidate = _with_potential(item, timeframe)
        if not passes_signal_plus_gate(candidate, tier) or not candidate.show_buy:
            continue
        items.append(candidate)

    items.sort(key=lambda x: (
        -tier_rank(x.potential.tier),
        x.risk.score,
        -trend_change(x.best_pair, timeframe),
    ))
    return items[:get_list_cap(SIGNAL_PLUS)]


def merge_all_signals(views: Sequence[Tuple[str, List[SignalItem]]]) -> List[SignalItem]:
    """
    Union of the signal views, one row per address.

    The first view an address appears in provides the row; later views add
    their source, OR in show_buy and fill buy_why if it is still empty.
    Sorted buy-first, then by risk score ascending.
    """
    merged = {}
    order = []
    for source, items in views:
        for item in items:
            key = str(item.address or "")
            if not key:
                continue
            existing = merged.get(key)
            if existing is None:
                merged[key] = item.with_updates(sources=(source,), show_buy=bool(item.show_buy))
                order.append(key)
                continue
            sources = existing.sources if source in existing.sources else existing.sources + (source,)
            merged[key] = existing.with_updates(
                sources=sources,
                show_buy=existing.show_buy or item.show_buy,
                buy_why=existing.buy_why or item.buy_why,
            )

    items = [merged[key] for key in order]
    items.sort(key=lambda x: (0 if x.show_buy else 1, x.risk.score))
    return items[:get_list_cap('all_signals')]


# ============================================================
# SIMPLE VIEWS
# ============================================================

def build_trending_low_risk_list(seed: Iterable[SignalItem], timeframe: str) -> List[SignalItem]:
    items = [
        item.with_metrics(trend=trend_change(item.best_pair, timeframe))
        for item in seed
        if item.risk.label != HIGH
    ]
    items.sort(key=lambda x: (x.risk.score, -x.metrics['trend']))
    return items[:get_list_cap('trending_low_risk')]


def build_top_volume_list(seed: Iterable[SignalItem]) -> List[SignalItem]:
    items = [item.with_metrics(vol24=item.best_pair.volume_24h) for item in seed]
    items.sort(key=lambda x: x.metrics['vol24'], reverse=True)
    return items[:get_list_cap('top_volume')]


def build_high_liquidity_list(seed: Iterable[SignalItem]) -> List[SignalItem]:
    items = [item.with_metrics(liq=item.best_pair.liquidity) for item in seed]
    items.sort(key=lambda x: x.metrics['liq'], reverse=True)
    return items[:get_list_cap('high_liquidity')]


def build_boosted_list(seed: Iterable[SignalItem]) -> List[SignalItem]:
    items = [
        item.with_metrics(liq=item.best_pair.liquidity, vol24=item.best_pair.volume_24h)
        for item in seed
    ]
    items.sort(key=lambda x: (x.metrics['liq'], x.metrics['vol24']), reverse=True)
    return items[:get_list_cap('boosted')]


def build_risky_list(seed: Iterable[SignalItem]) -> List[SignalItem]:
    """
    Risky view (seed fetched with high risk allowed).

    Risk HIGH only, still excluding MICRO_LIQUIDITY, Dump HIGH and falling
    knives. Riskiest first.
    """
    items = [
        item for item in seed
        if item.risk.label == HIGH
        and not item.risk.has(MICRO_LIQUIDITY)
        and item.dump.label != HIGH
        and not item.risk.has(FALLING_KNIFE)
    ]
    items.sort(key=lambda x: x.risk.score, reverse=True)
    return items[:get_list_cap('risky')]


def build_majors_list(items: Iterable[Optional[SignalItem]], timeframe: str) -> List[SignalItem]:
    """Majors keep the curated order; they only gain a potential assessment."""
    return [_with_potential(item, timeframe) for item in items if item is not None]
