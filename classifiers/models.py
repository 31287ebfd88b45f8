"""
Classifier result types.

All assessments are plain frozen dataclasses; to_dict() emits the field
names the frontend and the relay already consume (riskScore, dumpRisk, ...).
"""
from dataclasses import dataclass, field
from typing import Dict, Tuple

LOW = "LOW"
MED = "MED"
HIGH = "HIGH"
NONE = "NONE"

# Risk flags
MICRO_LIQUIDITY = "MICRO_LIQUIDITY"
VERY_LOW_LIQUIDITY = "VERY_LOW_LIQUIDITY"
LOW_LIQUIDITY = "LOW_LIQUIDITY"
EXTREME_SHORT_MOVE = "EXTREME_SHORT_MOVE"
HIGH_VOLATILITY = "HIGH_VOLATILITY"
MANIPULATION_RISK = "MANIPULATION_RISK"
ANOMALOUS_FLOW = "ANOMALOUS_FLOW"
FLOW_IMBALANCE = "FLOW_IMBALANCE"
LOW_ACTIVITY = "LOW_ACTIVITY"
FALLING_KNIFE = "FALLING_KNIFE"
NO_PAIR_DATA = "NO_PAIR_DATA"

TIER_RANK = {LOW: 1, MED: 2, HIGH: 3}


@dataclass(frozen=True)
class RiskAssessment:
    score: int
    label: str
    flags: Tuple[str, ...] = ()

    def has(self, flag: str) -> bool:
        return flag in self.flags

    def to_dict(self) -> Dict:
        return {"riskScore": self.score, "riskLabel": self.label, "flags": list(self.flags)}


@dataclass(frozen=True)
class DumpAssessment:
    label: str
    reasons: Tuple[str, ...] = ()

    def to_dict(self) -> Dict:
        return {"dumpRisk": self.label, "reasons": list(self.reasons)}


@dataclass(frozen=True)
class WhaleAssessment:
    score: int = 0
    label: str = NONE
    reasons: Tuple[str, ...] = ()

    def to_dict(self) -> Dict:
        return {"whaleScore": self.score, "whaleLabel": self.label, "reasons": list(self.reasons)}


@dataclass(frozen=True)
class SmartMoneyAssessment:
    score: int = 0
    label: str = NONE
    reasons: Tuple[str, ...] = ()

    def to_dict(self) -> Dict:
        return {"smartScore": self.score, "smartLabel": self.label, "reasons": list(self.reasons)}


@dataclass(frozen=True)
class PotentialAssessment:
    tier: str = LOW
    why: Tuple[str, ...] = ()
    buy: bool = False
    buy_why: Tuple[str, ...] = ()

    def to_dict(self) -> Dict:
        return {
            "potential": self.tier,
            "why": list(self.why),
            "buy": self.buy,
            "buyWhy": list(self.buy_why),
        }


@dataclass(frozen=True)
class FlowStats:
    """Short-window (5m + 15m) tape summary."""
    buys: float = 0.0
    sells: float = 0.0
    total: float = 0.0
    buy_ratio: float = 0.5


@dataclass(frozen=True)
class Warning:
    level: str
    text: str

    def to_dict(self) -> Dict:
        return {"level": self.level, "text": self.text}
