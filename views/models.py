"""
List item model shared by the orchestrator, the builders and the service.
"""
from dataclasses import dataclass, field, replace
from typing import Dict, Optional, Tuple

from classifiers.models import (
    DumpAssessment,
    PotentialAssessment,
    RiskAssessment,
    SmartMoneyAssessment,
    WhaleAssessment,
)
from screener.models import PairSnapshot, TokenIdentity

# Signal sources (ledger keys) and the labels the views display
SMART_MONEY = "smart_money"
WHALE = "whale"
HOT_BUYS = "hot_buys"
SIGNAL_PLUS = "signal_plus"

SOURCE_LABELS = {
    SMART_MONEY: "Smart Money",
    WHALE: "Whale Alert",
    HOT_BUYS: "Hot Buys",
    SIGNAL_PLUS: "Signal+",
}


@dataclass(frozen=True)
class SignalItem:
    """
    One token as it appears in a list view.

    Builders never mutate an item; they derive a new one with with_updates().
    `metrics` holds view-specific sort keys (hotScore, trend, vol24, ...).
    """
    address: str
    ident: TokenIdentity
    best_pair: PairSnapshot
    risk: RiskAssessment
    dump: DumpAssessment
    whale: Optional[WhaleAssessment] = None
    smart: Optional[SmartMoneyAssessment] = None
    potential: Optional[PotentialAssessment] = None
    show_buy: bool = False
    buy_why: Tuple[str, ...] = ()
    smart_streak: Optional[int] = None
    sources: Tuple[str, ...] = ()
    metrics: Dict[str, float] = field(default_factory=dict)

    @property
    def market_cap(self) -> float:
        return self.best_pair.mc

    def with_updates(self, **changes) -> 'SignalItem':
        return replace(self, **changes)

    def with_metrics(self, **metrics) -> 'SignalItem':
        merged = dict(self.metrics)
        merged.update(metrics)
        return replace(self, metrics=merged)

    def with_potential(self, potential: PotentialAssessment) -> 'SignalItem':
        return replace(self, potential=potential, show_buy=bool(potential.buy), buy_why=potential.buy_why)

    def to_dict(self) -> Dict:
        data = {
            "address": self.address,
            "ident": self.ident.to_dict(),
            "bestPair": self.best_pair.to_dict(),
            "risk": self.risk.to_dict(),
            "dump": self.dump.to_dict(),
        }
        if self.whale is not None:
            data["whale"] = self.whale.to_dict()
        if self.smart is not None:
            data["smart"] = self.smart.to_dict()
        if self.potential is not None:
            data["potential"] = self.potential.to_dict()
            data["showBuy"] = self.show_buy
            data["buyWhy"] = list(self.buy_why)
        if self.smart_streak is not None:
            data["smartStreak"] = self.smart_streak
        if self.sources:
            data["sources"] = [SOURCE_LABELS.get(s, s) for s in self.sources]
        data.update(self.metrics)
        return data
