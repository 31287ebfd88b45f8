"""
BASE SCREENER - Abstract base class for upstream market-data sources

Defines the fetch surface the orchestrator and the service depend on, so a
fake screener can stand in for DexScreener in tests.
"""

import time
from abc import ABC, abstractmethod
from typing import Dict, List, Optional


class BaseScreener(ABC):
    """
    Abstract base class for market-data screeners.

    All methods return raw upstream JSON (lists of dicts); normalization is
    the caller's job.
    """

    def __init__(self, config: Dict = None):
        self.config = config or {}
        self.upstream_requests = 0
        self.last_upstream_at: Optional[float] = None

    @abstractmethod
    async def fetch_token_pairs(self, token_address: str) -> List[Dict]:
        """
        Fetch every pair trading the given token.

        Returns:
            List of raw pair dicts (possibly empty)
        """

    @abstractmethod
    async def fetch_boosted_tokens(self) -> List[Dict]:
        """
        Fetch the boosted-tokens seed list.

        Returns:
            List of raw boost records ({'chainId', 'tokenAddress', ...})
        """

    @abstractmethod
    async def search_pairs(self, query: str) -> List[Dict]:
        """Free-text pair search. Returns raw pair dicts."""

    @abstractmethod
    async def fetch_token_list(self) -> List[Dict]:
        """Verified token list (symbol, name, address, logoURI, tags)."""

    def _note_request(self):
        """Count one real upstream call (cache hits are not counted)."""
        self.upstream_requests += 1
        self.last_upstream_at = time.time()

    def get_stats(self) -> Dict:
        return {
            'screener': type(self).__name__,
            'upstream_requests': self.upstream_requests,
            'last_upstream_at': self.last_upstream_at,
        }
