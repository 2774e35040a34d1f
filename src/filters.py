from dataclasses import dataclass
from typing import Dict, List, Mapping, Sequence

import pandas as pd

from utils import field, text_column

GENDER_OPTIONS = ("all", "female", "male", "nonbinary")
ALLERGY_OPTIONS = ("all", "gluten", "peanuts")
ACCESS_OPTIONS = ("all", "wheelchair", "elevator")
TABS = ("hosts", "guests")

HOST_COLUMNS = ["id", "name", "gender_comfort", "allergies", "accessibility", "confirmed", "room_building", "room_number"]
GUEST_COLUMNS = ["id", "name", "gender", "allergies", "accessibility", "confirmed", "arrival_time", "departure_time"]
COMMS_COLUMNS = ["date", "type", "owner", "status", "notes"]

@dataclass(frozen=True)
class FilterConfig:
    gender: str = "all"
    allergy: str = "all"
    access: str = "all"

    def __post_init__(self) -> None:
        for name, allowed in (("gender", GENDER_OPTIONS), ("allergy", ALLERGY_OPTIONS), ("access", ACCESS_OPTIONS)):
            value = getattr(self, name)
            if value not in allowed:
                raise ValueError(f"Unknown {name} filter {value!r}; expected one of {list(allowed)}")

def _contains(col: pd.Series, value: str) -> pd.Series:
    if value == "all":
        return pd.Series(True, index=col.index)
    return col.str.contains(value, regex=False)

def _gender_like(records: Sequence[Mapping]) -> pd.Series:
    comfort = text_column(records, "gender_comfort")
    gender = text_column(records, "gender")
    return comfort.where(comfort != "", gender)

def filter_mask(records: Sequence[Mapping], filters: FilterConfig, search: str = "") -> pd.Series:
    """
    Boolean mask over `records`, True where every predicate holds.

    All checks are lower-cased substring tests; "all" and an empty search
    accept everything.
    """
    ok_gender = _contains(_gender_like(records), filters.gender)
    ok_allergy = _contains(text_column(records, "allergies"), filters.allergy)
    ok_access = _contains(text_column(records, "accessibility"), filters.access)

    q = (search or "").lower()
    names = text_column(records, "name")
    ok_query = names.str.contains(q, regex=False) if q else pd.Series(True, index=names.index)

    return ok_gender & ok_allergy & ok_access & ok_query

def filter_records(records: Sequence[Mapping], filters: FilterConfig, search: str = "") -> List[Mapping]:
    if not records:
        return []
    mask = filter_mask(records, filters, search)
    return [r for r, keep in zip(records, mask) if keep]

def filtered_rows(hosts: Sequence[Mapping],
                  guests: Sequence[Mapping],
                  tab: str,
                  filters: FilterConfig,
                  search: str = "") -> List[Mapping]:
    if tab not in TABS:
        raise ValueError(f"Unknown tab {tab!r}; expected one of {list(TABS)}")
    src = hosts if tab == "hosts" else guests
    return filter_records(src, filters, search)

def table_columns(tab: str) -> List[str]:
    return list(HOST_COLUMNS if tab == "hosts" else GUEST_COLUMNS)

def project_rows(rows: Sequence[Mapping], columns: Sequence[str]) -> List[Dict[str, str]]:
    return [{c: field(r, c) for c in columns} for r in rows]
