"""
Upstream market data: client, cache, normalization and best-pair selection.

The orchestrator is imported from screener.orchestrator directly.
"""
from .cache import SnapshotCache
from .models import PairSnapshot, TokenIdentity, TokenRef, TxnCounts
from .normalizer import PairNormalizer, identity_from_pair, pair_score, select_best_pair

__all__ = [
    'PairNormalizer',
    'PairSnapshot',
    'SnapshotCache',
    'TokenIdentity',
    'TokenRef',
    'TxnCounts',
    'identity_from_pair',
    'pair_score',
    'select_best_pair',
]
