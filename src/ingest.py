import re
from typing import Dict, List

LINE_BREAK = re.compile(r"\r?\n")

def decode_bytes(raw: bytes) -> str:
    # utf-8-sig drops a leading byte-order mark; undecodable bytes become U+FFFD
    return raw.decode("utf-8-sig", errors="replace")

def parse_csv_text(text: str) -> List[Dict[str, str]]:
    """
    Decode simple comma-separated text with a header row into one dict per line.

    Quoting is not supported: a comma always separates fields. Short rows are
    padded with "" and values past the last header are dropped.
    """
    text = (text or "").strip()
    if not text:
        return []

    lines = LINE_BREAK.split(text)
    headers = [h.strip() for h in lines[0].split(",")]

    rows = []
    for line in lines[1:]:
        cols = line.split(",")
        row = {}
        for i, h in enumerate(headers):
            row[h] = cols[i].strip() if i < len(cols) else ""
        rows.append(row)
    return rows
