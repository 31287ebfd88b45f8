"""
Dump-Risk Classifier - counts short-window sell-off symptoms.

0 reasons -> LOW, 1 -> MED, 2+ -> HIGH.
"""
from typing import Optional

from screener.models import PairSnapshot
from .flow import flow_stats
from .models import HIGH, LOW, MED, DumpAssessment

NO_PAIR_DUMP = DumpAssessment(label=HIGH, reasons=("no pair data",))


def compute_dump_risk(snapshot: Optional[PairSnapshot]) -> DumpAssessment:
    if snapshot is None:
        return NO_PAIR_DUMP

    flow = flow_stats(snapshot)
    reasons = []
    if snapshot.change('m5') < -6:
        reasons.append("5m down")
    if snapshot.change('m15') < -12:
        reasons.append("15m down")
    if flow.total >= 20 and flow.buy_ratio < 0.35:
        reasons.append("sell pressure")

    if len(reasons) >= 2:
        label = HIGH
    elif len(reasons) == 1:
        label = MED
    else:
        label = LOW
    return DumpAssessment(label=label, reasons=tuple(reasons))
