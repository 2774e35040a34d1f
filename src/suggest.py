import logging
import re
from dataclasses import dataclass
from typing import List, Mapping, Optional, Sequence, Tuple

import pandas as pd

from rules import MatchRules, SUGGESTION_CAP
from utils import field, text_column

logger = logging.getLogger(__name__)

ALLERGY_SPLIT = re.compile(r"[;,\s]+")

@dataclass(frozen=True)
class Suggestion:
    guest_id: str
    host_id: str
    score: int
    reasons: Tuple[str, ...]

    @property
    def label(self) -> str:
        return f"{self.guest_id} -> {self.host_id}"

    @property
    def detail(self) -> str:
        return f"Score {self.score} · {', '.join(self.reasons)}"

    def to_dict(self) -> dict:
        return {
            "guest_id": self.guest_id,
            "host_id": self.host_id,
            "score": self.score,
            "reasons": "; ".join(self.reasons),
        }

def allergies_compatible(guest_allergies: str, host_allergies: str) -> bool:
    """
    Compatible unless some host allergy token appears inside the guest's
    allergy text. Either side being blank is compatible.
    """
    if not guest_allergies or not host_allergies:
        return True
    tokens = [t for t in ALLERGY_SPLIT.split(host_allergies) if t]
    return not any(t in guest_allergies for t in tokens)

def _guest_frame(guests: Sequence[Mapping]) -> pd.DataFrame:
    return pd.DataFrame({
        "guest_order": range(len(guests)),
        "guest_id": [field(g, "id") for g in guests],
        "gender": text_column(guests, "gender"),
        "guest_allergies": text_column(guests, "allergies"),
        "guest_access": text_column(guests, "accessibility"),
        "guest_confirmed": text_column(guests, "confirmed"),
    })

def _host_frame(hosts: Sequence[Mapping]) -> pd.DataFrame:
    return pd.DataFrame({
        "host_order": range(len(hosts)),
        "host_id": [field(h, "id") for h in hosts],
        "gender_comfort": text_column(hosts, "gender_comfort"),
        "host_allergies": text_column(hosts, "allergies"),
        "host_access": text_column(hosts, "accessibility"),
        "host_confirmed": text_column(hosts, "confirmed"),
    })

def gender_gate(pref: pd.Series, gender: pd.Series) -> pd.Series:
    return (
        pref.eq("")
        | pref.eq("any")
        | (pref.str.contains("female", regex=False) & gender.str.startswith("f"))
        | (pref.str.contains("male", regex=False) & gender.str.startswith("m"))
        | (pref.str.contains("nonbinary", regex=False) & gender.str.startswith("n"))
    )

def build_suggestions(guests: Sequence[Mapping],
                      hosts: Sequence[Mapping],
                      rules: Optional[MatchRules] = None) -> List[Suggestion]:
    """
    Score every guest x host pair that passes the gender gate and return the
    best ones, highest score first.

    This is a full cross product, O(guests * hosts). Ties keep guest-major,
    host-minor enumeration order.
    """
    rules = rules or MatchRules()
    if not guests or not hosts:
        return []

    pairs = _guest_frame(guests).merge(_host_frame(hosts), how="cross")

    # pairs failing the gate are never scored
    pairs = pairs.loc[gender_gate(pairs["gender_comfort"], pairs["gender"])].copy()
    if pairs.empty:
        return []

    pairs["allergy_ok"] = [
        allergies_compatible(g, h) for g, h in zip(pairs["guest_allergies"], pairs["host_allergies"])
    ]
    pairs["access_ok"] = (pairs["guest_access"].str.contains("wheelchair", regex=False)
                          & pairs["host_access"].str.contains("elevator", regex=False))
    pairs["both_confirmed"] = pairs["guest_confirmed"].eq("yes") & pairs["host_confirmed"].eq("yes")

    pairs["score"] = (
        rules.gender_weight
        + pairs["allergy_ok"].astype(int) * rules.allergy_weight
        + pairs["access_ok"].astype(int) * rules.accessibility_weight
        + pairs["both_confirmed"].astype(int) * rules.confirmed_weight
    )
    pairs = pairs.loc[pairs["score"] > 0]

    limit = min(rules.max_suggestions, SUGGESTION_CAP)
    pairs = pairs.sort_values(["score", "guest_order", "host_order"],
                              ascending=[False, True, True]).head(limit)

    out = []
    for p in pairs.itertuples(index=False):
        reasons = ["Gender comfort ok"]
        if p.allergy_ok:
            reasons.append("Allergies compatible")
        if p.access_ok:
            reasons.append("Accessibility")
        if p.both_confirmed:
            reasons.append("Both confirmed")
        out.append(Suggestion(
            guest_id=p.guest_id,
            host_id=p.host_id,
            score=int(p.score),
            reasons=tuple(reasons),
        ))
    return out

def confirm_suggestion(suggestion: Suggestion) -> bool:
    """Accept a suggestion. Nothing is written back to hosts or guests."""
    logger.info("Confirm %s (not persisted)", suggestion.label)
    return True
