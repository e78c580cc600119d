"""
Core Module - Constants.

============================================================
RESPONSIBILITY
============================================================
Defines all system-wide constants.

- Provides single source of truth for magic values
- Documents the meaning of each constant
- No business logic here

============================================================
"""

# ============================================================
# SYSTEM CONSTANTS
# ============================================================

SYSTEM_NAME = "sdex-offer-indexer"
SYSTEM_VERSION = "0.1.0"

USER_AGENT = f"{SYSTEM_NAME}/{SYSTEM_VERSION}"

# ============================================================
# HORIZON CONSTANTS
# ============================================================

OFFERS_PATH = "/offers"

# Horizon rejects page sizes outside 1..200
MIN_PAGE_LIMIT = 1
MAX_PAGE_LIMIT = 200

DEFAULT_PAGE_LIMIT = 200
DEFAULT_POLL_INTERVAL_SECS = 2

# ============================================================
# LEDGER CONSTANTS
# ============================================================

# Public account ids are StrKey encoded: 56 chars, version byte "G"
ACCOUNT_ID_LENGTH = 56
ACCOUNT_ID_PREFIX = "G"

UINT64_MAX = 2 ** 64 - 1
INT32_MIN = -(2 ** 31)
INT32_MAX = 2 ** 31 - 1
