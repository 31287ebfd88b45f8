"""
DEXSCREENER API CLIENT

Primary market-data source (FREE, no API key).

Endpoints used:
- /token-pairs/v1/{chain}/{address}  every pair for one token
- /token-boosts/top/v1               boosted tokens (list seed)
- /latest/dex/search?q=              free-text search
- Jupiter token list                 verified mints + logos (majors view)

Every response goes through the SnapshotCache keyed by URL, with a TTL per
endpoint family. Non-2xx responses raise UpstreamError; callers decide
whether that kills the request or just one token.
"""

import logging
from typing import Any, Dict, List, Optional
from urllib.parse import quote

import aiohttp

import config
from signal_config import get_cache_ttl
from .base_screener import BaseScreener
from .cache import SnapshotCache

logger = logging.getLogger(__name__)


class UpstreamError(Exception):
    """Non-2xx answer (or unreadable body) from an upstream provider."""

    def __init__(self, status: int, body: str = "", url: str = ""):
        self.status = status
        self.body = (body or "")[:200]
        self.url = url
        super().__init__(f"Upstream {status}: {self.body}")


class DexScreenerAPI(BaseScreener):
    """
    DexScreener API client.

    Usage:
        async with DexScreenerAPI(cache=cache) as api:
            pairs = await api.fetch_token_pairs(address)
    """

    def __init__(self, config_dict: Dict = None, cache: Optional[SnapshotCache] = None):
        """
        Args:
            config_dict: Optional overrides ('base_url', 'chain_id', 'timeout_seconds',
                'token_list_url', 'user_agent')
            cache: Shared snapshot cache; a private one is created if omitted
        """
        super().__init__(config_dict)
        self.base_url = self.config.get('base_url', config.DEXSCREENER_BASE_URL).rstrip('/')
        self.chain_id = self.config.get('chain_id', config.CHAIN_ID)
        self.token_list_url = self.config.get('token_list_url', config.JUPITER_TOKEN_LIST_URL)
        self.timeout_seconds = self.config.get('timeout_seconds', config.HTTP_TIMEOUT_SECONDS)
        self.user_agent = self.config.get('user_agent', config.USER_AGENT)
        self.cache = cache if cache is not None else SnapshotCache()
        self.session: Optional[aiohttp.ClientSession] = None

    async def __aenter__(self):
        await self._ensure_session()
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.close()

    async def _ensure_session(self):
        if self.session is None or self.session.closed:
            self.session = aiohttp.ClientSession(
                headers={"accept": "application/json", "user-agent": self.user_agent},
                timeout=aiohttp.ClientTimeout(total=self.timeout_seconds),
            )

    async def close(self):
        """Close aiohttp session."""
        if self.session:
            await self.session.close()
            self.session = None

    async def fetch_json(self, url: str, ttl_seconds: float) -> Any:
        """
        GET a JSON document through the snapshot cache.

        Args:
            url: Full URL (also the cache key)
            ttl_seconds: Cache lifetime for a fresh response

        Returns:
            Decoded JSON

        Raises:
            UpstreamError: non-2xx status or body that is not JSON
            aiohttp.ClientError / asyncio.TimeoutError: transport failures
        """
        cached = self.cache.get(url)
        if cached is not None:
            return cached

        await self._ensure_session()
        async with self.session.get(url) as response:
            self._note_request()

            if response.status < 200 or response.status >= 300:
                try:
                    text = await response.text()
                except (aiohttp.ClientError, UnicodeDecodeError):
                    text = ""
                if response.status == 429:
                    logger.warning(f"[DEXSCREENER] Rate limited: {url}")
                raise UpstreamError(response.status, text, url)

            try:
                data = await response.json(content_type=None)
            except ValueError as e:
                raise UpstreamError(response.status, f"invalid JSON: {e}", url)

        return self.cache.set(url, data, ttl_seconds)

    async def fetch_token_pairs(self, token_address: str) -> List[Dict]:
        url = f"{self.base_url}/token-pairs/v1/{self.chain_id}/{quote(str(token_address), safe='')}"
        raw = await self.fetch_json(url, get_cache_ttl('token_pairs'))
        return raw if isinstance(raw, list) else []

    async def fetch_boosted_tokens(self) -> List[Dict]:
        url = f"{self.base_url}/token-boosts/top/v1"
        raw = await self.fetch_json(url, get_cache_ttl('boosted'))
        return raw if isinstance(raw, list) else []

    async def search_pairs(self, query: str) -> List[Dict]:
        url = f"{self.base_url}/latest/dex/search?q={quote(str(query), safe='')}"
        data = await self.fetch_json(url, get_cache_ttl('search'))
        pairs = data.get('pairs') if isinstance(data, dict) else None
        return pairs if isinstance(pairs, list) else []

    async def fetch_token_list(self) -> List[Dict]:
        raw = await self.fetch_json(self.token_list_url, get_cache_ttl('token_list'))
        return raw if isinstance(raw, list) else []

    def get_stats(self) -> Dict:
        stats = super().get_stats()
        stats['cache'] = self.cache.get_stats()
        return stats
