"""
Normalized market data models.

PairSnapshot is the read-only view every classifier consumes. Numeric
fields keep None for "absent"; the accessor helpers coerce through
safe_num so consumers always get a float.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from safe_math import safe_num

PRICE_CHANGE_BUCKETS = ('m5', 'm15', 'h1', 'h4', 'h24')
TXN_BUCKETS = ('m5', 'm15', 'h24')


@dataclass(frozen=True)
class TokenRef:
    """Base or quote token reference as reported on the pair."""
    address: str = ""
    name: str = ""
    symbol: str = ""

    def to_dict(self) -> Dict:
        return {"address": self.address, "name": self.name, "symbol": self.symbol}


@dataclass(frozen=True)
class TxnCounts:
    buys: Optional[float] = None
    sells: Optional[float] = None

    def to_dict(self) -> Dict:
        return {"buys": self.buys, "sells": self.sells}


@dataclass(frozen=True)
class PairSnapshot:
    """One trading pair, projected from the upstream pair record."""
    chain_id: str = ""
    dex_id: str = ""
    pair_address: str = ""
    url: str = ""
    base_token: TokenRef = field(default_factory=TokenRef)
    quote_token: TokenRef = field(default_factory=TokenRef)
    price_usd: Optional[str] = None
    fdv: Optional[float] = None
    market_cap: Optional[float] = None
    liquidity_usd: Optional[float] = None
    volume: Dict[str, Optional[float]] = field(default_factory=dict)
    price_change: Dict[str, Optional[float]] = field(default_factory=dict)
    txns: Dict[str, TxnCounts] = field(default_factory=dict)
    pair_created_at: Optional[int] = None
    image_url: str = ""
    info: Dict[str, Any] = field(default_factory=dict)

    # ------------------------------------------------------------------
    # Coerced accessors (zero default)
    # ------------------------------------------------------------------

    @property
    def liquidity(self) -> float:
        return safe_num(self.liquidity_usd)

    @property
    def mc(self) -> float:
        return safe_num(self.market_cap)

    @property
    def volume_24h(self) -> float:
        return safe_num(self.volume.get('h24'))

    def change(self, bucket: str) -> float:
        """Price change percent for a bucket (m5, m15, h1, h4, h24)."""
        return safe_num(self.price_change.get(bucket))

    def buys(self, bucket: str) -> float:
        counts = self.txns.get(bucket)
        return safe_num(counts.buys) if counts else 0.0

    def sells(self, bucket: str) -> float:
        counts = self.txns.get(bucket)
        return safe_num(counts.sells) if counts else 0.0

    def to_dict(self) -> Dict:
        """Serialize back to the upstream camelCase shape."""
        return {
            "chainId": self.chain_id,
            "dexId": self.dex_id,
            "pairAddress": self.pair_address,
            "url": self.url,
            "baseToken": self.base_token.to_dict(),
            "quoteToken": self.quote_token.to_dict(),
            "priceUsd": self.price_usd,
            "fdv": self.fdv,
            "marketCap": self.market_cap,
            "liquidity": {"usd": self.liquidity_usd},
            "volume": dict(self.volume),
            "priceChange": dict(self.price_change),
            "txns": {bucket: counts.to_dict() for bucket, counts in self.txns.items()},
            "info": dict(self.info),
            "pairCreatedAt": self.pair_created_at,
        }


@dataclass(frozen=True)
class TokenIdentity:
    address: str
    name: str = "Token"
    symbol: str = ""
    logo: str = ""

    def to_dict(self) -> Dict:
        return {"address": self.address, "name": self.name, "symbol": self.symbol, "logo": self.logo}
