"""
SIGNAL PIPELINE CONFIGURATION

Tunables for the fetch -> veto -> classify -> list pipeline.

Classifier thresholds live next to the classifiers themselves (they are the
heuristics). Everything here is operational: cache lifetimes, how many
boosted tokens each view pulls, list caps, continuity windows, and the
static lookup tables used by the majors view and the performance ledger.
"""

SIGNAL_CONFIG = {
    # ================================================================
    # SNAPSHOT CACHE (seconds, keyed by fetch URL)
    # ================================================================
    'cache': {
        'max_size': 2000,
        'ttl_seconds': {
            'search': 15,              # generic pair search
            'token_pairs': 12,         # per-token pairs
            'boosted': 30,             # boosted-list seed
            'token_list': 6 * 60 * 60, # verified token list (6h)
        },
    },

    # ================================================================
    # SEED SIZES (boosted tokens pulled per view)
    # ================================================================
    'seed_limits': {
        'trending_low_risk': 28,
        'top_volume': 36,
        'high_liquidity': 36,
        'boosted': 40,
        'whale_alert': 40,
        'smart_money': 42,
        'hot_buys': 42,
        'risky': 42,
        'signal_plus': 55,
        'all_signals': 60,
    },

    # ================================================================
    # LIST CAPS
    # ================================================================
    'list_caps': {
        'default': 30,
        'all_signals': 60,
        'search': 60,
        'detail_pairs': 25,
    },

    # ================================================================
    # SMART-MONEY CONTINUITY
    # ================================================================
    'smart_money_streak': {
        'window_seconds': 120,
        'max_streak': 5,
        'qualify_score': 55,
        'show_score': 70,
        'streak_bonus': 6,
    },

    # ================================================================
    # VETO BLACKLIST (market-cap crash / rug detection)
    # ================================================================
    'veto': {
        'min_prev_market_cap': 20000,
        'crash_divisor': 10,             # mc_crash: cur <= prev / 10
        'fast_dump_window_seconds': 3600,
        'fast_dump_ratio': 0.3,          # fast_dump: cur <= prev * 0.3
        'rug_min_prev_liquidity': 5000,
        'rug_liquidity_ratio': 0.2,      # rug_like: liq <= prev_liq * 0.2
        'rug_market_cap_ratio': 0.3,     #          and mc <= prev_mc * 0.3
    },

    # ================================================================
    # MAJORS VIEW
    # ================================================================
    'majors': {
        'stable_symbols': {
            'USDC', 'USDT', 'DAI', 'UXD', 'USDH', 'PYUSD', 'USDP', 'FRAX', 'TUSD', 'USDJ',
        },
        # Liquid staking / staked SOL wrappers
        'lst_symbols': {
            'MSOL', 'JITOSOL', 'JUPSOL', 'BSOL', 'SCNSOL', 'HUBSOL', 'INF', 'SOLBLZE', 'LST',
        },
    },

    # ================================================================
    # PERFORMANCE LEDGER SOURCES
    # ================================================================
    # canonical source -> legacy display names once used as key suffixes
    'source_aliases': {
        'smart_money': ['Smart Money'],
        'whale': ['Whale Alert'],
        'hot_buys': ['Hot Buys'],
        'signal_plus': ['Signal+'],
    },
}


def get_signal_config():
    """Get the full pipeline configuration."""
    return SIGNAL_CONFIG


def get_cache_ttl(endpoint: str) -> float:
    """TTL in seconds for a fetch endpoint family (search, token_pairs, ...)."""
    ttls = SIGNAL_CONFIG['cache']['ttl_seconds']
    return ttls.get(endpoint, ttls['search'])


def get_seed_limit(view: str) -> int:
    """How many boosted tokens a view enriches."""
    return SIGNAL_CONFIG['seed_limits'].get(view, 40)


def get_list_cap(view: str) -> int:
    """Maximum number of items a view returns."""
    caps = SIGNAL_CONFIG['list_caps']
    return caps.get(view, caps['default'])


def get_streak_config():
    return SIGNAL_CONFIG['smart_money_streak']


def get_veto_config():
    return SIGNAL_CONFIG['veto']


def get_majors_config():
    return SIGNAL_CONFIG['majors']


def get_source_aliases():
    return SIGNAL_CONFIG['source_aliases']
