"""
Potential / Buy-Gate Classifier

Tier (for the requested timeframe's trend t):
- HIGH: t > 3,   buy ratio >= 0.65, >= 18 txns, Risk LOW
- MED:  t > 1.5, buy ratio >= 0.60, >= 12 txns, Risk not HIGH
- LOW:  otherwise (and always when Risk or Dump-Risk is HIGH)

Buy gate ("dip + reversal"): every condition must hold, each failing
condition contributes one reason:
- dip setup: 1h, 4h or 24h negative, but not a falling-knife collapse
- reversal: (5m > 0 and 15m > 0) or (15m > 2 and 5m > -0.5)
- Risk not HIGH
- buy ratio >= 0.62 with >= 15 txns
- >= 10 txns
- no MANIPULATION_RISK / EXTREME_SHORT_MOVE
- Dump-Risk not HIGH
- tier not LOW
"""
from typing import Optional

from screener.models import PairSnapshot
from .dump import compute_dump_risk
from .flow import flow_stats, is_falling_knife, trend_change
from .models import (
    EXTREME_SHORT_MOVE,
    HIGH,
    LOW,
    MANIPULATION_RISK,
    MED,
    DumpAssessment,
    PotentialAssessment,
    TIER_RANK,
    RiskAssessment,
)
from .risk import compute_risk

BUY_OK_REASON = "deep setup + reversal + flow + low/med risk"


def compute_potential(snapshot: Optional[PairSnapshot],
                      timeframe: str,
                      risk: RiskAssessment = None,
                      dump: DumpAssessment = None) -> PotentialAssessment:
    """
    Tier and buy decision for one snapshot.

    Args:
        snapshot: Best pair (None -> LOW, no buy)
        timeframe: 5m, 10m, 15m, 1h, 4h or 1d (anything else reads 15m)
        risk, dump: Precomputed assessments; computed on demand when omitted
    """
    if snapshot is None:
        return PotentialAssessment(why=("no data",))

    risk = risk or compute_risk(snapshot)
    dump = dump or compute_dump_risk(snapshot)

    if risk.label == HIGH:
        return PotentialAssessment(why=("high risk",))
    if dump.label == HIGH:
        return PotentialAssessment(why=("dump risk",))

    t = trend_change(snapshot, timeframe)
    flow = flow_stats(snapshot)

    why = []
    if t > 0:
        why.append(f"{timeframe} momentum up")
    if flow.buy_ratio >= 0.62 and flow.total >= 12:
        why.append("buy flow")
    if risk.label == LOW:
        why.append("low risk")

    tier = LOW
    if t > 3 and flow.buy_ratio >= 0.65 and flow.total >= 18 and risk.label == LOW:
        tier = HIGH
    elif t > 1.5 and flow.buy_ratio >= 0.6 and flow.total >= 12 and risk.label != HIGH:
        tier = MED

    buy_why = []

    ch1 = snapshot.change('h1')
    ch4 = snapshot.change('h4')
    ch24 = snapshot.change('h24')
    dip_setup = (ch1 < 0 or ch4 < 0 or ch24 < 0) and not is_falling_knife(snapshot)
    if not dip_setup:
        buy_why.append("no dip setup")

    ch5 = snapshot.change('m5')
    ch15 = snapshot.change('m15')
    reversal = (ch5 > 0 and ch15 > 0) or (ch15 > 2 and ch5 > -0.5)
    if not reversal:
        buy_why.append("no reversal confirmation")

    risk_ok = risk.label != HIGH
    if not risk_ok:
        buy_why.append("risk veto")

    flow_ok = flow.buy_ratio >= 0.62 and flow.total >= 15
    if not flow_ok:
        buy_why.append("flow not strong")

    activity_ok = flow.total >= 10
    if not activity_ok:
        buy_why.append("low activity")

    manipulation = risk.has(MANIPULATION_RISK) or risk.has(EXTREME_SHORT_MOVE)
    if manipulation:
        buy_why.append("manipulation risk")

    dump_veto = dump.label == HIGH
    if dump_veto:
        buy_why.append("dump risk")

    tier_ok = tier != LOW
    if not tier_ok:
        buy_why.append("potential too low")

    buy = (dip_setup and reversal and risk_ok and flow_ok and activity_ok
           and not manipulation and not dump_veto and tier_ok)
    if buy:
        buy_why = [BUY_OK_REASON]

    return PotentialAssessment(tier=tier, why=tuple(why[:3]), buy=buy, buy_why=tuple(buy_why))


def tier_rank(tier: str) -> int:
    return TIER_RANK.get(tier, 1)
