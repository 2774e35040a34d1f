from dataclasses import dataclass
from typing import Dict

SOURCE_NAMES = ("hosts", "guests", "matches", "incidents", "comms")

@dataclass(frozen=True)
class DashboardConfig:
    data_root: str = "data/raw"        # directory or http(s) base URL
    outputs_dir: str = "outputs"
    rules_path: str = "config/matching_rules.json"

    fetch_timeout: float = 10.0        # seconds, per HTTP source

    def sources(self) -> Dict[str, str]:
        root = self.data_root.rstrip("/")
        return {name: f"{root}/{name}.csv" for name in SOURCE_NAMES}
