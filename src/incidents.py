import csv
import logging
import os
from datetime import datetime, timezone
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

import pandas as pd

logger = logging.getLogger(__name__)

INCIDENT_COLUMNS = ["time", "type", "person", "status", "notes"]
EXPORT_FILENAME = "incidents.csv"

def utc_timestamp(now: Optional[datetime] = None) -> str:
    now = now or datetime.now(timezone.utc)
    return now.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")

def serialize_incidents(rows: Sequence[Mapping]) -> str:
    """
    Header is the first row's keys, unquoted. Every value is wrapped in
    double quotes with inner quotes doubled; nothing else is escaped.
    """
    headers = list(rows[0].keys())
    df = pd.DataFrame([[r.get(h) for h in headers] for r in rows], columns=headers, dtype="object")
    df = df.fillna("").astype(str)

    body = df.to_csv(index=False, header=False, quoting=csv.QUOTE_ALL, lineterminator="\n")
    if body.endswith("\n"):
        body = body[:-1]
    return "\n".join([",".join(headers), body])

class IncidentLedger:
    """
    Session-local incident log. Added incidents are kept most-recent-first
    and are never written anywhere except by export.
    """

    def __init__(self) -> None:
        self._added: Tuple[Dict[str, str], ...] = ()

    @property
    def added(self) -> Tuple[Dict[str, str], ...]:
        return self._added

    def add(self,
            time: Optional[str] = None,
            type: str = "",
            person: str = "",
            status: Optional[str] = None,
            notes: str = "",
            now: Optional[datetime] = None) -> Dict[str, str]:
        row = {
            "time": time or utc_timestamp(now),
            "type": type or "",
            "person": person or "",
            "status": status or "Open",
            "notes": notes or "",
        }
        self._added = (row,) + self._added
        return row

    def merged(self, loaded: Sequence[Mapping]) -> List[Mapping]:
        return list(self._added) + list(loaded)

    def export_text(self, loaded: Sequence[Mapping]) -> Optional[str]:
        rows = self.merged(loaded)
        if not rows:
            return None
        return serialize_incidents(rows)

    def export(self, loaded: Sequence[Mapping], outputs_dir: str) -> Optional[str]:
        """Write incidents.csv into `outputs_dir`; returns its path, or None when there is nothing to export."""
        text = self.export_text(loaded)
        if text is None:
            return None

        os.makedirs(outputs_dir, exist_ok=True)
        path = os.path.join(outputs_dir, EXPORT_FILENAME)
        with open(path, "w", newline="", encoding="utf-8") as f:
            f.write(text)
        logger.info("Exported %d incidents to %s", len(self.merged(loaded)), path)
        return path
