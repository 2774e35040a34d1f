import json
import os
from dataclasses import dataclass, fields
from typing import Dict, Any

SUGGESTION_CAP = 50

@dataclass(frozen=True)
class MatchRules:
    gender_weight: int = 10
    allergy_weight: int = 5
    accessibility_weight: int = 3
    confirmed_weight: int = 2
    max_suggestions: int = SUGGESTION_CAP

    def __post_init__(self) -> None:
        # gated pairs must always score, so the gender weight is at least 1
        if self.gender_weight < 1:
            raise ValueError(f"gender_weight must be at least 1, got {self.gender_weight}")
        for name in ("allergy_weight", "accessibility_weight", "confirmed_weight"):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must not be negative, got {getattr(self, name)}")
        if self.max_suggestions <= 0:
            raise ValueError(f"max_suggestions must be positive, got {self.max_suggestions}")

def _as_int(raw: Dict[str, Any], key: str, default: int) -> int:
    value = raw.get(key, default)
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"Rule '{key}' must be an integer, got {value!r}")
    return value

def load_rules(path: str = "config/matching_rules.json") -> MatchRules:
    if not os.path.exists(path):
        return MatchRules()

    with open(path, "r") as f:
        raw: Dict[str, Any] = json.load(f)

    defaults = MatchRules()
    values = {f.name: _as_int(raw, f.name, getattr(defaults, f.name)) for f in fields(MatchRules)}

    values["max_suggestions"] = min(values["max_suggestions"], SUGGESTION_CAP)

    return MatchRules(**values)
