import pandas as pd
from typing import Mapping, Sequence

def field(record: Mapping, name: str) -> str:
    """Missing or null fields read as empty string."""
    value = record.get(name)
    if value is None:
        return ""
    return str(value)

def lowered(record: Mapping, name: str) -> str:
    return field(record, name).lower()

def text_column(records: Sequence[Mapping], name: str) -> pd.Series:
    """
    One lower-cased string per record for `name`, in record order.
    Records without the field contribute "".
    """
    return pd.Series([lowered(r, name) for r in records], index=range(len(records)), dtype="object")

def coerce_timestamp(value: str) -> pd.Timestamp:
    return pd.to_datetime(value, errors="coerce", utc=True)
