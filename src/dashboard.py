from dataclasses import dataclass, field, replace
from typing import Dict, List, Mapping, Optional, Tuple

import pandas as pd

from filters import COMMS_COLUMNS, FilterConfig, TABS, filtered_rows, project_rows, table_columns
from incidents import INCIDENT_COLUMNS, IncidentLedger
from loader import Datasets, DatasetStore
from metrics import Metrics, compute_metrics
from rules import MatchRules
from suggest import Suggestion, build_suggestions, confirm_suggestion
from transport import transport_board

@dataclass(frozen=True)
class ViewState:
    tab: str = "hosts"
    filters: FilterConfig = field(default_factory=FilterConfig)
    search: str = ""

    def __post_init__(self) -> None:
        if self.tab not in TABS:
            raise ValueError(f"Unknown tab {self.tab!r}; expected one of {list(TABS)}")

@dataclass(frozen=True)
class DashboardSnapshot:
    metrics: Metrics
    rows: List[Mapping]
    suggestions: List[Suggestion]
    incidents: List[Mapping]
    comms: List[Mapping]
    guests: List[Mapping]
    transport: List[Dict[str, str]]
    view: ViewState

    def tables(self) -> Dict[str, pd.DataFrame]:
        """Displayed tables, each projected onto its columns; missing fields show as ""."""
        shown = [
            (self.view.tab, self.rows, table_columns(self.view.tab)),
            ("incidents", self.incidents, INCIDENT_COLUMNS),
            ("comms", self.comms, COMMS_COLUMNS),
        ]
        return {name: pd.DataFrame(project_rows(rows, cols), columns=cols) for name, rows, cols in shown}

def build_snapshot(datasets: Datasets,
                   view: ViewState,
                   ledger: IncidentLedger,
                   rules: Optional[MatchRules] = None,
                   now: Optional[pd.Timestamp] = None) -> DashboardSnapshot:
    """Everything the presentation layer shows for one render, derived from explicit inputs."""
    return DashboardSnapshot(
        metrics=compute_metrics(datasets.hosts, datasets.guests, datasets.incidents, datasets.matches),
        rows=filtered_rows(datasets.hosts, datasets.guests, view.tab, view.filters, view.search),
        suggestions=build_suggestions(datasets.guests, datasets.hosts, rules),
        incidents=ledger.merged(datasets.incidents),
        comms=list(datasets.comms),
        guests=list(datasets.guests),
        transport=transport_board(datasets.guests, now),
        view=view,
    )

class Dashboard:
    """
    Session wrapper: owns the dataset store, the view state and the incident
    ledger. Metrics and suggestions are memoized on the identity of their
    input collections, which a refresh always replaces.
    """

    def __init__(self, store: DatasetStore, rules: Optional[MatchRules] = None) -> None:
        self.store = store
        self.rules = rules or MatchRules()
        self.view = ViewState()
        self.ledger = IncidentLedger()
        self._memo: Dict[str, Tuple[tuple, object]] = {}

    @property
    def datasets(self) -> Datasets:
        return self.store.current

    async def refresh(self) -> Datasets:
        return await self.store.refresh()

    def select_tab(self, tab: str) -> None:
        self.view = replace(self.view, tab=tab)

    def set_filters(self, **changes: str) -> None:
        self.view = replace(self.view, filters=replace(self.view.filters, **changes))

    def set_search(self, search: str) -> None:
        self.view = replace(self.view, search=search or "")

    def add_incident(self, **values: Optional[str]) -> Dict[str, str]:
        return self.ledger.add(**values)

    def export_incidents(self, outputs_dir: str) -> Optional[str]:
        return self.ledger.export(self.datasets.incidents, outputs_dir)

    def confirm(self, suggestion: Suggestion) -> bool:
        return confirm_suggestion(suggestion)

    def _cached(self, name: str, inputs: tuple, compute):
        hit = self._memo.get(name)
        if hit is not None and all(a is b for a, b in zip(hit[0], inputs)):
            return hit[1]
        value = compute(*inputs)
        self._memo[name] = (inputs, value)
        return value

    def metrics(self) -> Metrics:
        d = self.datasets
        return self._cached("metrics", (d.hosts, d.guests, d.incidents, d.matches), compute_metrics)

    def suggestions(self) -> List[Suggestion]:
        d = self.datasets
        return self._cached("suggestions", (d.guests, d.hosts), lambda g, h: build_suggestions(g, h, self.rules))

    def snapshot(self, now: Optional[pd.Timestamp] = None) -> DashboardSnapshot:
        d = self.datasets
        return DashboardSnapshot(
            metrics=self.metrics(),
            rows=filtered_rows(d.hosts, d.guests, self.view.tab, self.view.filters, self.view.search),
            suggestions=self.suggestions(),
            incidents=self.ledger.merged(d.incidents),
            comms=list(d.comms),
            guests=list(d.guests),
            transport=transport_board(d.guests, now),
            view=self.view,
        )
