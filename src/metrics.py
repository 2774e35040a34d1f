import math
from dataclasses import dataclass
from typing import Mapping, Sequence

from utils import text_column

@dataclass(frozen=True)
class Metrics:
    hosts_confirmed_pct: int
    guests_confirmed_pct: int
    matches_made: int
    open_incidents: int

    @property
    def incident_alert(self) -> bool:
        return self.open_incidents > 0

    def to_dict(self) -> dict:
        return {
            "hostsConfirmedPct": self.hosts_confirmed_pct,
            "guestsConfirmedPct": self.guests_confirmed_pct,
            "matchesMade": self.matches_made,
            "openIncidents": self.open_incidents,
        }

def _round_half_up(x: float) -> int:
    return int(math.floor(x + 0.5))

def pct(part: int, total: int) -> int:
    return _round_half_up(100 * (part / total if total else 0))

def confirmed_count(records: Sequence[Mapping]) -> int:
    return int(text_column(records, "confirmed").eq("yes").sum())

def confirmed_pct(records: Sequence[Mapping]) -> int:
    return pct(confirmed_count(records), len(records))

def open_incident_count(incidents: Sequence[Mapping]) -> int:
    # a missing status counts as open
    return int(text_column(incidents, "status").ne("closed").sum())

def compute_metrics(hosts: Sequence[Mapping],
                    guests: Sequence[Mapping],
                    incidents: Sequence[Mapping],
                    matches: Sequence[Mapping]) -> Metrics:
    return Metrics(
        hosts_confirmed_pct=confirmed_pct(hosts),
        guests_confirmed_pct=confirmed_pct(guests),
        matches_made=len(matches),
        open_incidents=open_incident_count(incidents),
    )
