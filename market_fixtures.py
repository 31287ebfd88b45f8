"""
Raw DexScreener-shaped records shared by the test modules.

Defaults describe a healthy dip-and-reversal token:
risk 25 LOW, dump LOW, whale 55 MED, smart 92 HIGH, potential MED with buy.
"""
from classifiers import classify
from screener.normalizer import PairNormalizer, identity_from_pair
from views.models import SignalItem

DEFAULT_CHANGES = {'m5': 1.5, 'm15': 3, 'h1': -2, 'h4': -5, 'h24': -12}
DEFAULT_TXNS = {'m5': (14, 4), 'm15': (20, 6), 'h24': (900, 700)}


class FakeClock:
    """Manually advanced time source (seconds)."""

    def __init__(self, start: float = 1_700_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float):
        self.now += seconds


def make_raw_pair(address="TokenA111", liquidity=50000, market_cap=500000, volume24=400000,
                  changes=None, txns=None, chain_id="solana", name="Alpha", symbol="ALP",
                  pair_address=None, image_url=""):
    change_values = dict(DEFAULT_CHANGES)
    change_values.update(changes or {})
    txn_values = dict(DEFAULT_TXNS)
    txn_values.update(txns or {})

    return {
        "chainId": chain_id,
        "dexId": "raydium",
        "url": f"https://dexscreener.com/{chain_id}/{pair_address or address + '-pair'}",
        "pairAddress": pair_address or f"{address}-pair",
        "baseToken": {"address": address, "name": name, "symbol": symbol},
        "quoteToken": {"address": "So11111111111111111111111111111111111111112", "name": "Wrapped SOL", "symbol": "SOL"},
        "priceUsd": "0.000512",
        "fdv": market_cap,
        "marketCap": market_cap,
        "liquidity": {"usd": liquidity, "base": 1000, "quote": 200},
        "volume": {"m5": 1000, "h1": 20000, "h6": 90000, "h24": volume24},
        "priceChange": change_values,
        "txns": {bucket: {"buys": b, "sells": s} for bucket, (b, s) in txn_values.items()},
        "pairCreatedAt": 1_699_000_000_000,
        "info": {"imageUrl": image_url} if image_url else {},
    }


def make_snapshot(**kwargs):
    return PairNormalizer().normalize(make_raw_pair(**kwargs))


class FakeScreener:
    """
    In-memory stand-in for DexScreenerAPI.

    pairs: address -> list of raw pairs (or an Exception to raise)
    """

    def __init__(self, pairs=None, boosted=None, search=None, token_list=None):
        self.pairs = pairs or {}
        self.boosted = boosted or []
        self.search = search or []
        self.token_list = token_list or []
        self.pair_calls = []
        self.closed = False

    def set_pairs(self, address, raw_pairs):
        self.pairs[address] = raw_pairs

    async def fetch_token_pairs(self, token_address):
        self.pair_calls.append(token_address)
        value = self.pairs.get(token_address, [])
        if isinstance(value, Exception):
            raise value
        return value

    async def fetch_boosted_tokens(self):
        if isinstance(self.boosted, Exception):
            raise self.boosted
        return self.boosted

    async def search_pairs(self, query):
        return self.search

    async def fetch_token_list(self):
        if isinstance(self.token_list, Exception):
            raise self.token_list
        return self.token_list

    async def close(self):
        self.closed = True


def boosted_entry(address, chain_id="solana"):
    return {"chainId": chain_id, "tokenAddress": address, "amount": 500, "totalAmount": 500}


def make_item(address="TokenA111", **kwargs):
    """Classified SignalItem, as the orchestrator would emit it."""
    snap = make_snapshot(address=address, **kwargs)
    result = classify(snap)
    return SignalItem(
        address=address,
        ident=identity_from_pair(snap, address),
        best_pair=snap,
        risk=result.risk,
        dump=result.dump,
        whale=result.whale,
        smart=result.smart,
    )
