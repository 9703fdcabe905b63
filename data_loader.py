import json
from pathlib import Path

import pandas as pd

from config import ASSET_TYPES, EVENTS_FILE
from events import parse_events

# ============================================================
# CONFIG
# ============================================================
SUPPORTED_SUFFIXES = {".csv", ".json"}


# ------------------------------------------------------------
# Raw rows
# ------------------------------------------------------------

def _normalize_key(key) -> str:
    return str(key).strip().lower().replace("_", "-")


def load_raw_events(path: str = EVENTS_FILE) -> list:
    """
    Read an event file into raw mappings (one per event).

    CSV:  one row per event, a `data-type` column, blank cells for fields
          the event type does not use.
    JSON: a list of objects.

    Column/key names are case-insensitive and may use `_` or `-`.
    """
    suffix = Path(path).suffix.lower()
    if suffix not in SUPPORTED_SUFFIXES:
        raise ValueError(f"Unsupported event file type '{suffix}'. Expected one of {sorted(SUPPORTED_SUFFIXES)}.")

    if suffix == ".json":
        with open(path, "r", encoding="utf-8") as f:
            raw = json.load(f)
        if not isinstance(raw, list):
            raise ValueError(f"{path}: expected a JSON list of events")
        return [
            {_normalize_key(k): v for k, v in row.items()} if isinstance(row, dict) else row
            for row in raw
        ]

    # Keep every cell as text; events.parse_event does the typing
    df = pd.read_csv(path, dtype=str)
    df.columns = [_normalize_key(c) for c in df.columns]

    if "data-type" not in df.columns:
        raise ValueError(f"{path}: events file must contain a 'data-type' column")

    return [
        {k: v for k, v in row.items() if not pd.isna(v)}
        for row in df.to_dict("records")
    ]


# ------------------------------------------------------------
# Parsed events
# ------------------------------------------------------------

def load_events(path: str = EVENTS_FILE, asset_types=ASSET_TYPES) -> list:
    """Read and validate every event in `path`."""
    return parse_events(load_raw_events(path), asset_types)
