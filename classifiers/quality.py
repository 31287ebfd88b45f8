"""
Quality gate - drops "trash" before anything reaches a list view.

Trash:
- Dump-Risk HIGH
- Risk HIGH with score >= 75
- FALLING_KNIFE
- MANIPULATION_RISK with score >= 70
- MICRO_LIQUIDITY
"""
from typing import List, Optional

from screener.models import PairSnapshot
from .dump import compute_dump_risk
from .models import (
    ANOMALOUS_FLOW,
    FALLING_KNIFE,
    HIGH,
    LOW_LIQUIDITY,
    MANIPULATION_RISK,
    MICRO_LIQUIDITY,
    VERY_LOW_LIQUIDITY,
    DumpAssessment,
    RiskAssessment,
    Warning,
)
from .risk import compute_risk


def is_trash(snapshot: Optional[PairSnapshot],
             risk: RiskAssessment = None,
             dump: DumpAssessment = None) -> bool:
    risk = risk or compute_risk(snapshot)
    dump = dump or compute_dump_risk(snapshot)

    if dump.label == HIGH:
        return True
    if risk.label == HIGH and risk.score >= 75:
        return True
    if risk.has(FALLING_KNIFE):
        return True
    if risk.has(MANIPULATION_RISK) and risk.score >= 70:
        return True
    if risk.has(MICRO_LIQUIDITY):
        return True
    return False


def passes_quality_gate(snapshot: Optional[PairSnapshot],
                        allow_high_risk: bool = False,
                        risk: RiskAssessment = None,
                        dump: DumpAssessment = None) -> bool:
    """
    Gate applied by the orchestrator.

    Trash never passes. Remaining Risk HIGH items pass only when the caller
    explicitly allows high risk (the Risky view).
    """
    if snapshot is None:
        return False
    risk = risk or compute_risk(snapshot)
    dump = dump or compute_dump_risk(snapshot)
    if is_trash(snapshot, risk, dump):
        return False
    if allow_high_risk:
        return True
    return risk.label != HIGH


def detail_warnings(risk: RiskAssessment, dump: DumpAssessment) -> List[Warning]:
    """Human-readable warnings for the token detail page."""
    warnings = []
    if risk.has(LOW_LIQUIDITY) or risk.has(VERY_LOW_LIQUIDITY) or risk.has(MICRO_LIQUIDITY):
        warnings.append(Warning("warn", "Low liquidity - price can be manipulated easily."))
    if risk.has(FALLING_KNIFE):
        warnings.append(Warning("danger", "Falling knife pattern - high dump risk, avoid catching a falling knife."))
    if dump.label == HIGH:
        warnings.append(Warning("danger", "High dump risk - strong sell pressure detected."))
    if risk.has(MANIPULATION_RISK):
        warnings.append(Warning("danger", "Manipulation risk - extreme move with weak liquidity."))
    if risk.has(ANOMALOUS_FLOW):
        warnings.append(Warning("warn", "Anomalous flow - unusually one-sided tape (bots/wash possible)."))
    if not warnings:
        warnings.append(Warning("ok", "No major red flags detected by heuristics (still DYOR)."))
    return warnings
