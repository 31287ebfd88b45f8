"""
Durable cross-request state: the veto blacklist and the performance ledger.
"""
from .json_store import DebouncedJsonFile, load_json_file
from .performance_history import PerformanceEntry, PerformanceHistory, normalize_source
from .veto_blacklist import McObservation, VetoBlacklist, VetoRecord

__all__ = [
    'DebouncedJsonFile',
    'McObservation',
    'PerformanceEntry',
    'PerformanceHistory',
    'VetoBlacklist',
    'VetoRecord',
    'load_json_file',
    'normalize_source',
]
