"""
Risk Classifier - 0..100 risk score for a single best-pair snapshot.

Scoring (base 25, additive, clamped 0..100):
- Liquidity band (only the tightest band applies):
    < $1,000   +45 MICRO_LIQUIDITY
    < $2,500   +35 VERY_LOW_LIQUIDITY
    < $7,500   +25 LOW_LIQUIDITY
    < $15,000  +15
    < $30,000  +8
- |5m| > 25 or |15m| > 50                 +22 EXTREME_SHORT_MOVE
  else |5m| > 12 or |15m| > 25            +12 HIGH_VOLATILITY
- liq < $7,500 and (|5m| > 15 or |15m| > 30)  +18 MANIPULATION_RISK
- >= 25 txns and buy ratio outside [0.1, 0.9]   +14 ANOMALOUS_FLOW
  else >= 15 txns and outside [0.18, 0.82]      +8  FLOW_IMBALANCE
- < 6 txns                                +10 LOW_ACTIVITY
- falling knife (1h/4h/24h collapse)      +18 FALLING_KNIFE

Label: <= 35 LOW, <= 65 MED, else HIGH.
"""
from typing import Optional

from safe_math import clamp
from screener.models import PairSnapshot
from .flow import flow_stats, is_falling_knife
from .models import (
    ANOMALOUS_FLOW,
    EXTREME_SHORT_MOVE,
    FALLING_KNIFE,
    FLOW_IMBALANCE,
    HIGH,
    HIGH_VOLATILITY,
    LOW,
    LOW_ACTIVITY,
    LOW_LIQUIDITY,
    MANIPULATION_RISK,
    MED,
    MICRO_LIQUIDITY,
    NO_PAIR_DATA,
    VERY_LOW_LIQUIDITY,
    RiskAssessment,
)

BASE_SCORE = 25

NO_PAIR_RISK = RiskAssessment(score=85, label=HIGH, flags=(NO_PAIR_DATA,))


def risk_label(score: float) -> str:
    if score <= 35:
        return LOW
    if score <= 65:
        return MED
    return HIGH


def compute_risk(snapshot: Optional[PairSnapshot]) -> RiskAssessment:
    """
    Classify one snapshot.

    Args:
        snapshot: Best pair, or None when the token has no market

    Returns:
        RiskAssessment (worst case for a missing pair)
    """
    if snapshot is None:
        return NO_PAIR_RISK

    liq = snapshot.liquidity
    ch5 = abs(snapshot.change('m5'))
    ch15 = abs(snapshot.change('m15'))
    flow = flow_stats(snapshot)

    flags = []
    score = BASE_SCORE

    if liq < 1000:
        score += 45
        flags.append(MICRO_LIQUIDITY)
    elif liq < 2500:
        score += 35
        flags.append(VERY_LOW_LIQUIDITY)
    elif liq < 7500:
        score += 25
        flags.append(LOW_LIQUIDITY)
    elif liq < 15000:
        score += 15
    elif liq < 30000:
        score += 8

    if ch5 > 25 or ch15 > 50:
        score += 22
        flags.append(EXTREME_SHORT_MOVE)
    elif ch5 > 12 or ch15 > 25:
        score += 12
        flags.append(HIGH_VOLATILITY)

    if liq < 7500 and (ch5 > 15 or ch15 > 30):
        score += 18
        flags.append(MANIPULATION_RISK)

    if flow.total >= 25 and (flow.buy_ratio > 0.9 or flow.buy_ratio < 0.1):
        score += 14
        flags.append(ANOMALOUS_FLOW)
    elif flow.total >= 15 and (flow.buy_ratio > 0.82 or flow.buy_ratio < 0.18):
        score += 8
        flags.append(FLOW_IMBALANCE)

    if flow.total < 6:
        score += 10
        flags.append(LOW_ACTIVITY)

    if is_falling_knife(snapshot):
        score += 18
        flags.append(FALLING_KNIFE)

    score = int(clamp(score))
    return RiskAssessment(score=score, label=risk_label(score), flags=tuple(flags))
