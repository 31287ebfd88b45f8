"""
Whale-Likeness Classifier

Points:
- >= 35 txns (5m+15m)                 +20 "txn spike"
- buy ratio >= 0.68 with >= 18 txns   +25 "buy dominance"
- 24h volume >= $300k                 +10 "strong 24h vol"
- |5m| >= 2% or |15m| >= 4%           +10 "price lift"
- liquidity < $2,500                  -25 "very low liq"
  else < $7,500                       -12 "low liq"
- |5m| > 35% or |15m| > 70%           -10 "too wild"

Clamped 0..100. Label: >= 70 HIGH, >= 45 MED, >= 25 LOW, else NONE.
"""
from typing import Optional

from safe_math import clamp
from screener.models import PairSnapshot
from .flow import flow_stats
from .models import HIGH, LOW, MED, NONE, WhaleAssessment


def whale_label(score: float) -> str:
    if score >= 70:
        return HIGH
    if score >= 45:
        return MED
    if score >= 25:
        return LOW
    return NONE


def compute_whale_like(snapshot: Optional[PairSnapshot]) -> WhaleAssessment:
    if snapshot is None:
        return WhaleAssessment()

    flow = flow_stats(snapshot)
    ch5 = snapshot.change('m5')
    ch15 = snapshot.change('m15')
    liq = snapshot.liquidity

    score = 0
    reasons = []
    if flow.total >= 35:
        score += 20
        reasons.append("txn spike")
    if flow.buy_ratio >= 0.68 and flow.total >= 18:
        score += 25
        reasons.append("buy dominance")
    if snapshot.volume_24h >= 300000:
        score += 10
        reasons.append("strong 24h vol")
    if abs(ch5) >= 2 or abs(ch15) >= 4:
        score += 10
        reasons.append("price lift")
    if liq < 2500:
        score -= 25
        reasons.append("very low liq")
    elif liq < 7500:
        score -= 12
        reasons.append("low liq")
    if abs(ch5) > 35 or abs(ch15) > 70:
        score -= 10
        reasons.append("too wild")

    score = int(clamp(score))
    return WhaleAssessment(score=score, label=whale_label(score), reasons=tuple(reasons[:3]))
