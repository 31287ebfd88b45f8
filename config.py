import os
from pathlib import Path
from dotenv import load_dotenv

load_dotenv()

BASE_DIR = Path(__file__).parent

# Upstream endpoints
DEXSCREENER_BASE_URL = os.getenv("DEXSCREENER_BASE_URL", "https://api.dexscreener.com")
JUPITER_TOKEN_LIST_URL = os.getenv("JUPITER_TOKEN_LIST_URL", "https://token.jup.ag/all")
USER_AGENT = os.getenv("USER_AGENT", "dexPulse-v6")
HTTP_TIMEOUT_SECONDS = float(os.getenv("HTTP_TIMEOUT_SECONDS", "10"))

# Single-chain deployment
CHAIN_ID = os.getenv("CHAIN_ID", "solana")

# Worker pool size for per-token fetches
FETCH_CONCURRENCY = int(os.getenv("FETCH_CONCURRENCY", "4"))

# Durable state
VETO_PATH = os.getenv("VETO_PATH", str(BASE_DIR / "data" / "veto_blacklist.json"))
PERF_HISTORY_PATH = os.getenv("PERF_HISTORY_PATH", str(BASE_DIR / "data" / "performance_history.json"))
PERSIST_DEBOUNCE_SECONDS = float(os.getenv("PERSIST_DEBOUNCE_SECONDS", "1.5"))

# Curated majors list (YAML or legacy JSON)
MAJORS_PATH = os.getenv("MAJORS_PATH", str(BASE_DIR / "majors.yaml"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# Request defaults
DEFAULT_TIMEFRAME = "15m"
DEFAULT_POTENTIAL = "MED"
