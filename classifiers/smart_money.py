"""
Smart-Money Classifier - "controlled accumulation" score.

Built on top of Risk, Dump-Risk and Whale-Likeness for the same snapshot.
No temporal state here; tick-to-tick continuity is handled by the
smart-money streak tracker in the views layer.

Hard vetoes (score 0, NONE): FALLING_KNIFE flag, Dump-Risk HIGH.

Points:
- Risk LOW +30 / MED +15 / HIGH -30
- Whale score >= 45                       +25
- controlled move (|5m| <= 16, |15m| <= 30) +15, else -10
- >= 18 txns +10, else -10
- buy ratio >= 0.62 with >= 16 txns       +12
  else buy ratio < 0.45 with >= 16 txns   -14
- Dump-Risk MED                           -10

Clamped 0..100. Label: >= 70 HIGH, >= 50 MED, >= 30 LOW, else NONE.
"""
from typing import Optional

from safe_math import clamp
from screener.models import PairSnapshot
from .dump import compute_dump_risk
from .flow import flow_stats
from .models import (
    FALLING_KNIFE,
    HIGH,
    LOW,
    MED,
    NONE,
    DumpAssessment,
    RiskAssessment,
    SmartMoneyAssessment,
    WhaleAssessment,
)
from .risk import compute_risk
from .whale import compute_whale_like


def smart_label(score: float) -> str:
    if score >= 70:
        return HIGH
    if score >= 50:
        return MED
    if score >= 30:
        return LOW
    return NONE


def compute_smart_money(snapshot: Optional[PairSnapshot],
                        risk: RiskAssessment = None,
                        dump: DumpAssessment = None,
                        whale: WhaleAssessment = None) -> SmartMoneyAssessment:
    """
    Score one snapshot.

    Args:
        snapshot: Best pair (None -> NONE)
        risk, dump, whale: Precomputed assessments for the same snapshot;
            computed on demand when omitted
    """
    if snapshot is None:
        return SmartMoneyAssessment()

    risk = risk or compute_risk(snapshot)
    dump = dump or compute_dump_risk(snapshot)
    whale = whale or compute_whale_like(snapshot)

    if risk.has(FALLING_KNIFE):
        return SmartMoneyAssessment(reasons=("falling knife",))
    if dump.label == HIGH:
        return SmartMoneyAssessment(reasons=("dump risk",))

    ch5 = abs(snapshot.change('m5'))
    ch15 = abs(snapshot.change('m15'))
    flow = flow_stats(snapshot)

    score = 0
    reasons = []

    if risk.label == LOW:
        score += 30
        reasons.append("low risk")
    elif risk.label == MED:
        score += 15
        reasons.append("med risk")
    else:
        score -= 30
        reasons.append("high risk")

    if whale.score >= 45:
        score += 25
        reasons.append("smart flow")

    if ch5 <= 16 and ch15 <= 30:
        score += 15
        reasons.append("controlled move")
    else:
        score -= 10
        reasons.append("too volatile")

    if flow.total >= 18:
        score += 10
        reasons.append("active tape")
    else:
        score -= 10
        reasons.append("low activity")

    if flow.buy_ratio >= 0.62 and flow.total >= 16:
        score += 12
        reasons.append("buy pressure")
    elif flow.buy_ratio < 0.45 and flow.total >= 16:
        score -= 14
        reasons.append("sell pressure")

    if dump.label == MED:
        score -= 10
        reasons.append("elevated dump risk")

    score = int(clamp(score))
    return SmartMoneyAssessment(score=score, label=smart_label(score), reasons=tuple(reasons[:3]))
