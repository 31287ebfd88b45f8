"""
Majors list + verified token-list resolution.

The curated majors file lists {symbol, name, address?}. Entries without an
address are resolved against the Jupiter token list by symbol, preferring
verified/strict tags, an exact name match and a logo.
"""
import logging
from pathlib import Path
from typing import Dict, List, Optional

import yaml

from signal_config import get_majors_config

logger = logging.getLogger(__name__)


def is_stable_symbol(symbol) -> bool:
    return str(symbol or "").upper() in get_majors_config()['stable_symbols']


def is_lst_symbol(symbol) -> bool:
    s = str(symbol or "").upper()
    return s in get_majors_config()['lst_symbols']


def _token_score(token: Dict, want_name: str) -> int:
    tags = token.get('tags')
    tags = [str(t).lower() for t in tags] if isinstance(tags, list) else []
    score = 0
    if 'verified' in tags:
        score += 5
    if 'strict' in tags:
        score += 3
    if want_name and str(token.get('name') or "").lower() == want_name:
        score += 4
    if token.get('logoURI'):
        score += 1
    return score


def pick_jupiter_token(token_list, symbol, name=None) -> Optional[Dict]:
    """
    Best token-list entry for a symbol.

    Args:
        token_list: Raw token list (list of dicts)
        symbol: Wanted symbol (case-insensitive)
        name: Optional wanted name (exact, case-insensitive)

    Returns:
        Highest scoring candidate; first one wins ties. None if no match.
    """
    want_symbol = str(symbol or "").upper()
    want_name = str(name or "").lower()
    if not isinstance(token_list, list) or not want_symbol:
        return None

    candidates = [
        t for t in token_list
        if isinstance(t, dict) and str(t.get('symbol') or "").upper() == want_symbol
    ]
    if not candidates:
        return None
    return max(candidates, key=lambda t: _token_score(t, want_name))


def load_majors(path) -> List[Dict]:
    """
    Read the curated majors list (YAML, or the legacy JSON file).

    Accepts either a bare list or {'majors': [...]}. A missing or broken
    file yields an empty list.
    """
    path = Path(path)
    if not path.exists():
        logger.warning(f"[MAJORS] List not found: {path}")
        return []
    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        logger.error(f"[MAJORS] Could not read {path}: {e}")
        return []

    if isinstance(data, dict):
        data = data.get('majors')
    if not isinstance(data, list):
        return []
    return [entry for entry in data if isinstance(entry, dict)]
