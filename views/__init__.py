"""
List views over the classified seed.
"""
from .builders import (
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
    hot_score,
    merge_all_signals,
    normalize_potential_tier,
)
from .models import HOT_BUYS, SIGNAL_PLUS, SMART_MONEY, SOURCE_LABELS, WHALE, SignalItem
from .streak import SmartMoneyStreak, SmartMoneyStreakTracker

__all__ = [
    'HOT_BUYS',
    'SIGNAL_PLUS',
    'SMART_MONEY',
    'SOURCE_LABELS',
    'WHALE',
    'SignalItem',
    'SmartMoneyStreak',
    'SmartMoneyStreakTracker',
    'build_boosted_list',
    'build_high_liquidity_list',
    'build_hot_buys_list',
    'build_majors_list',
    'build_risky_list',
    'build_signal_plus_list',
    'build_smart_money_list',
    'build_top_volume_list',
    'build_trending_low_risk_list',
    'build_whale_alert_list',
    'hot_score',
    'merge_all_signals',
    'normalize_potential_tier',
]
