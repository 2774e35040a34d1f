from typing import Dict, List, Mapping, Optional, Sequence

import pandas as pd

from utils import coerce_timestamp, field

ARRIVED_BEFORE = pd.Timedelta(hours=1)
LANDING_WITHIN = pd.Timedelta(minutes=30)

def _as_utc(ts: pd.Timestamp) -> pd.Timestamp:
    ts = pd.Timestamp(ts)
    return ts.tz_localize("UTC") if ts.tzinfo is None else ts.tz_convert("UTC")

def arrival_status(arrival_time: str, now: pd.Timestamp) -> str:
    # arrival times without an offset are read as UTC
    t = coerce_timestamp(arrival_time) if arrival_time else pd.NaT
    if pd.isna(t):
        return "Unknown"
    now = _as_utc(now)
    if t < now - ARRIVED_BEFORE:
        return "Arrived"
    if t < now + LANDING_WITHIN:
        return "Landing soon"
    return "In transit"

def transport_board(guests: Sequence[Mapping], now: Optional[pd.Timestamp] = None) -> List[Dict[str, str]]:
    now = _as_utc(now) if now is not None else pd.Timestamp.now(tz="UTC")
    board = []
    for g in guests:
        arrival = field(g, "arrival_time")
        board.append({
            "name": field(g, "name"),
            "arrival_time": arrival,
            "status": arrival_status(arrival, now),
        })
    return board
