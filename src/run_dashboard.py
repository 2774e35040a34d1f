import logging

from config import DashboardConfig
from dashboard import ViewState, build_snapshot
from incidents import IncidentLedger
from loader import load_datasets_sync
from report import write_outputs
from rules import load_rules

def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    cfg = DashboardConfig()
    rules = load_rules(cfg.rules_path)

    datasets = load_datasets_sync(cfg.sources(), timeout=cfg.fetch_timeout)
    ledger = IncidentLedger()

    snapshot = build_snapshot(datasets, ViewState(), ledger, rules)
    write_outputs(cfg.outputs_dir, snapshot, datasets.counts())
    incidents_path = ledger.export(datasets.incidents, cfg.outputs_dir)

    m = snapshot.metrics
    print(f"Wrote outputs to {cfg.outputs_dir}/")
    print(f"Hosts confirmed: {m.hosts_confirmed_pct}% | Guests confirmed: {m.guests_confirmed_pct}% | "
          f"Matches made: {m.matches_made} | Open incidents: {m.open_incidents}")
    print(f"Suggestions: {len(snapshot.suggestions)}")
    for s in snapshot.suggestions[:5]:
        print(f"  {s.label}  {s.detail}")
    print(f"Incidents export: {incidents_path or 'nothing to export'}")

if __name__ == "__main__":
    main()
