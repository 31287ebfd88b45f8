"""
CLASSIFIERS

Pure heuristics over a single best-pair snapshot:

  PairSnapshot
      ├── Risk
      ├── Dump-Risk
      ├── Whale-Likeness
      ├── Smart-Money   (uses Risk + Dump + Whale)
      └── Potential     (uses Risk + Dump, per timeframe)

None of these mutate the snapshot or keep state between calls.
"""
from dataclasses import dataclass
from typing import Optional

from screener.models import PairSnapshot
from .dump import compute_dump_risk
from .flow import buy_ratio, flow_stats, normalize_timeframe, trend_change
from .models import (
    DumpAssessment,
    PotentialAssessment,
    RiskAssessment,
    SmartMoneyAssessment,
    WhaleAssessment,
)
from .potential import compute_potential
from .quality import detail_warnings, is_trash, passes_quality_gate
from .risk import compute_risk
from .smart_money import compute_smart_money
from .whale import compute_whale_like


@dataclass(frozen=True)
class Classification:
    """Risk, Dump, Whale and Smart-Money for one snapshot (timeframe independent)."""
    risk: RiskAssessment
    dump: DumpAssessment
    whale: WhaleAssessment
    smart: SmartMoneyAssessment


def classify(snapshot: Optional[PairSnapshot]) -> Classification:
    risk = compute_risk(snapshot)
    dump = compute_dump_risk(snapshot)
    whale = compute_whale_like(snapshot)
    smart = compute_smart_money(snapshot, risk, dump, whale)
    return Classification(risk=risk, dump=dump, whale=whale, smart=smart)


__all__ = [
    'Classification',
    'PotentialAssessment',
    'buy_ratio',
    'classify',
    'compute_dump_risk',
    'compute_potential',
    'compute_risk',
    'compute_smart_money',
    'compute_whale_like',
    'detail_warnings',
    'flow_stats',
    'is_trash',
    'normalize_timeframe',
    'passes_quality_gate',
    'trend_change',
]
