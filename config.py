import os

import pandas as pd
from dotenv import load_dotenv

# ============================================================
# ENVIRONMENT (LOADED FROM .env IF PRESENT)
# ============================================================

load_dotenv()

# Default event file consumed by data_loader.load_events
EVENTS_FILE = os.environ.get("BUCKS_EVENTS_FILE", "events.csv")

# Optional "time machine": pins "now" for a whole run (YYYY-MM-DD)
AS_OF = os.environ.get("BUCKS_AS_OF") or None

# ============================================================
# DOMAIN DEFAULTS
# ============================================================

DEFAULT_ASSET_TYPES = (
    "TFSA",
    "RA",
    "Crypto",
    "Savings",
    "Shares",
    "CFD",
    "ETF",
    "UnitTrust",
    "Other",
)

_asset_types_env = os.environ.get("BUCKS_ASSET_TYPES", "")
ASSET_TYPES = tuple(
    t.strip() for t in _asset_types_env.split(",") if t.strip()
) or DEFAULT_ASSET_TYPES

# include-in-net sentinels as they appear in raw input
YES = "y"
NO = "n"

# Used when no date-of-birth event exists
DEFAULT_BIRTHDAY = (1970, 1, 1)

# ============================================================
# SIMULATION PARAMETERS
# ============================================================
MONEY_LIFETIME_CAP_MONTHS = 12 * 50


def resolve_now(now=None) -> pd.Timestamp:
    """
    Capture "now" once for a run, normalized to midnight.

    Priority:
    1. Explicit `now` from the caller
    2. BUCKS_AS_OF from the environment
    3. Wall clock
    """
    if now is not None:
        return _naive_midnight(pd.Timestamp(now))

    if AS_OF:
        try:
            return _naive_midnight(pd.Timestamp(AS_OF))
        except ValueError:
            print(f"⚠️ WARNING: BUCKS_AS_OF={AS_OF!r} is not a date. Using the wall clock.")

    return pd.Timestamp.today().normalize()


def _naive_midnight(ts: pd.Timestamp) -> pd.Timestamp:
    # Event dates are naive, so drop any timezone before comparing
    if ts.tzinfo is not None:
        ts = ts.tz_localize(None)
    return ts.normalize()
