"""
Configuration Constants for the Proof Ingestor

This module centralizes the fixed parameters of the tick pipeline. Values that
operators are expected to change per deployment (endpoints, credentials,
interval, identifier override) live in config.settings instead.

Key Principles:
- Single source of truth for pipeline tuning
- All constants are Final (immutable)
- Times are in seconds unless the name says otherwise
"""

from typing import Final, List, Dict, Any


# ============================================================================
# 1. PROCESS DEFAULTS
# ============================================================================

DEFAULT_PROOF_BASE_URL: Final[str] = "https://proof.brokex.trade/proof"

# Tick interval when INTERVAL_MS is not set
DEFAULT_INTERVAL_MS: Final[int] = 5000


# ============================================================================
# 2. BATCHING & PACING
# ============================================================================

# Upper bound on identifiers per proof request (keeps the query string short)
MAX_BATCH_SIZE: Final[int] = 200

# Randomized pause between two batches of the same tick
BATCH_PACING_MIN_SEC: Final[float] = 0.2
BATCH_PACING_MAX_SEC: Final[float] = 0.5

# Extra random delay added to the interval when re-arming the next tick,
# so several instances sharing an interval drift apart
REARM_JITTER_MAX_MS: Final[int] = 300

# Identifiers shown in the per-batch success log line
LOG_SAMPLE_SIZE: Final[int] = 6


# ============================================================================
# 3. RETRY POLICIES
# ============================================================================
# delay(n) = min(BASE * MULTIPLIER^(n-1), MAX) before the n-th retry

# Proof fetch: 3 retries -> 4 attempts, waits 0.40s, 0.64s, 1.02s
PROOF_FETCH_RETRIES: Final[int] = 3
PROOF_FETCH_BASE_DELAY_SEC: Final[float] = 0.4
PROOF_FETCH_BACKOFF_MULTIPLIER: Final[float] = 1.6
PROOF_FETCH_MAX_DELAY_SEC: Final[float] = 1.5

# On-chain submission: 2 retries -> 3 attempts, waits 0.50s, 0.75s
SUBMIT_RETRIES: Final[int] = 2
SUBMIT_BASE_DELAY_SEC: Final[float] = 0.5
SUBMIT_BACKOFF_MULTIPLIER: Final[float] = 1.5
SUBMIT_MAX_DELAY_SEC: Final[float] = 2.0


# ============================================================================
# 4. TRADING CALENDAR
# ============================================================================
# All venue rules are evaluated on the New York civil calendar.

VENUE_TIMEZONE: Final[str] = "America/New_York"

# ISO weekdays (1 = Monday ... 7 = Sunday) on which non-crypto venues trade
TRADING_WEEKDAYS: Final[frozenset] = frozenset({1, 2, 3, 4, 5})

# Equity session, minutes since local midnight, both bounds inclusive
EQUITY_SESSION_OPEN_MINUTE: Final[int] = 9 * 60 + 30    # 09:30
EQUITY_SESSION_CLOSE_MINUTE: Final[int] = 16 * 60 + 30  # 16:30


# ============================================================================
# 5. HTTP (PROOF SERVICE)
# ============================================================================

PROOF_QUERY_PARAM: Final[str] = "pairs"
PROOF_RESPONSE_FIELD: Final[str] = "proof"
PROOF_HEX_PREFIX: Final[str] = "0x"

DEFAULT_HTTP_TIMEOUT_SEC: Final[float] = 10.0
HTTP_POOL_LIMIT: Final[int] = 10
HTTP_USER_AGENT: Final[str] = "Proof-Ingestor/1.0"


# ============================================================================
# 6. CHAIN
# ============================================================================

DEFAULT_RPC_TIMEOUT_SEC: Final[float] = 30.0

INGEST_PROOF_FUNCTION: Final[str] = "ingestProof"

# function ingestProof(bytes _bytesProof) external
INGEST_PROOF_ABI: Final[List[Dict[str, Any]]] = [
    {
        "inputs": [
            {"internalType": "bytes", "name": "_bytesProof", "type": "bytes"}
        ],
        "name": INGEST_PROOF_FUNCTION,
        "outputs": [],
        "stateMutability": "nonpayable",
        "type": "function"
    }
]


# ============================================================================
# 7. AWS SECRETS MANAGER
# ============================================================================

DEFAULT_AWS_REGION: Final[str] = "eu-central-1"
SECRET_PRIVATE_KEY_FIELD: Final[str] = "WALLET_PRIVATE_KEY"


# ============================================================================
# 8. LOGGING
# ============================================================================

LOG_LEVEL: Final[str] = "INFO"
LOG_FILE_PATH: Final[str] = "logs/proof_ingestor.log"
MAX_LOG_FILE_SIZE: Final[int] = 50 * 1024 * 1024  # 50 MB
LOG_BACKUP_COUNT: Final[int] = 10
STRUCTURED_LOGGING: Final[bool] = True
