import os
import json
import pandas as pd

from dashboard import DashboardSnapshot

SUGGESTION_COLUMNS = ["guest_id", "host_id", "score", "reasons"]
TRANSPORT_COLUMNS = ["name", "arrival_time", "status"]

def ensure_dir(path: str) -> None:
    os.makedirs(path, exist_ok=True)

def write_outputs(outputs_dir: str, snapshot: DashboardSnapshot, counts: dict) -> None:
    ensure_dir(outputs_dir)

    suggestions = pd.DataFrame([s.to_dict() for s in snapshot.suggestions], columns=SUGGESTION_COLUMNS)
    suggestions.to_csv(os.path.join(outputs_dir, "suggestions.csv"), index=False)

    transport = pd.DataFrame(snapshot.transport, columns=TRANSPORT_COLUMNS)
    transport.to_csv(os.path.join(outputs_dir, "transport.csv"), index=False)

    for name, table in snapshot.tables().items():
        table.to_csv(os.path.join(outputs_dir, f"{name}_table.csv"), index=False)

    summary = {
        **snapshot.metrics.to_dict(),
        "incidentAlert": snapshot.metrics.incident_alert,
        "suggestions": int(len(suggestions)),
        "filtered_rows": int(len(snapshot.rows)),
        "source_rows": counts,
        "transport_breakdown": transport["status"].value_counts().to_dict() if len(transport) else {},
    }

    with open(os.path.join(outputs_dir, "dashboard_summary.json"), "w") as f:
        json.dump(summary, f, indent=2, default=str)
