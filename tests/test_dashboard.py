import asyncio

import httpx
import pandas as pd
import pytest

from dashboard import Dashboard, ViewState, build_snapshot
from filters import FilterConfig
from incidents import IncidentLedger
from loader import DatasetStore, Datasets

DATASETS = Datasets(
    hosts=[
        {"id": "H1", "name": "Avery Chen", "gender_comfort": "female", "allergies": "peanuts",
         "accessibility": "elevator", "confirmed": "yes"},
        {"id": "H2", "name": "Jordan Blake", "gender_comfort": "male", "confirmed": "no"},
    ],
    guests=[
        {"id": "G1", "name": "Maya Brooks", "gender": "female", "accessibility": "wheelchair",
         "confirmed": "yes", "arrival_time": "2026-10-18T14:00:00Z"},
        {"id": "G2", "name": "Leo Grant", "gender": "male", "allergies": "peanuts", "confirmed": "yes"},
    ],
    matches=[{"guest_id": "G2", "host_id": "H2"}],
    incidents=[{"time": "t0", "type": "Lost key", "person": "G2", "status": "Closed", "notes": ""}],
    comms=[{"date": "2026-10-10", "type": "Email", "owner": "Ops", "status": "Sent", "notes": ""}],
)
NOW = pd.Timestamp("2026-10-18T12:00:00Z")


class _FixedStore(DatasetStore):
    def __init__(self, datasets):
        super().__init__({})
        self._next = datasets

    async def refresh(self):
        self.current = Datasets(**{k: list(getattr(self._next, k)) for k in self._next.counts()})
        return self.current


def test_build_snapshot():
    ledger = IncidentLedger()
    ledger.add(time="t1", type="Noise")
    snap = build_snapshot(DATASETS, ViewState(tab="guests", search="maya"), ledger, now=NOW)

    assert snap.metrics.to_dict() == {"hostsConfirmedPct": 50, "guestsConfirmedPct": 100,
                                      "matchesMade": 1, "openIncidents": 0}
    assert [r["id"] for r in snap.rows] == ["G1"]
    assert [(s.guest_id, s.host_id, s.score) for s in snap.suggestions] == [
        ("G1", "H1", 20), ("G2", "H2", 15), ("G2", "H1", 12),
    ]
    assert [i["type"] for i in snap.incidents] == ["Noise", "Lost key"]
    assert snap.transport[0]["status"] == "In transit"
    assert snap.comms == DATASETS.comms


def test_dashboard_session_flow(tmp_path):
    dash = Dashboard(_FixedStore(DATASETS))
    asyncio.run(dash.refresh())

    dash.set_filters(gender="male")
    dash.set_search("jordan")
    assert [r["id"] for r in dash.snapshot(NOW).rows] == ["H2"]

    dash.select_tab("guests")
    dash.set_search("")
    dash.set_filters(allergy="peanuts")
    assert [r["id"] for r in dash.snapshot(NOW).rows] == ["G2"]

    dash.add_incident(type="Noise", time="t1")
    path = dash.export_incidents(str(tmp_path))
    with open(path) as f:
        assert f.read().splitlines()[1] == '"t1","Noise","","Open",""'

    assert dash.confirm(dash.suggestions()[0]) is True
    assert dash.datasets.hosts == DATASETS.hosts


def test_memoized_until_refresh():
    dash = Dashboard(_FixedStore(DATASETS))
    asyncio.run(dash.refresh())
    first = dash.suggestions()
    assert dash.suggestions() is first
    assert dash.metrics() is dash.metrics()

    asyncio.run(dash.refresh())
    assert dash.suggestions() is not first
    assert dash.suggestions() == first


def test_bad_view_changes_raise():
    dash = Dashboard(_FixedStore(DATASETS))
    with pytest.raises(ValueError):
        dash.select_tab("matches")
    with pytest.raises(ValueError):
        dash.set_filters(allergy="dairy")
    assert dash.view == ViewState()


def test_refresh_over_http():
    def handler(request):
        if request.url.path.endswith("hosts.csv"):
            return httpx.Response(200, text="id,name,confirmed\nH1,Avery,yes")
        return httpx.Response(503)

    async def run():
        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            sources = {"hosts": "http://ops.test/hosts.csv", "guests": "http://ops.test/guests.csv"}
            dash = Dashboard(DatasetStore(sources, client=client))
            await dash.refresh()
            return dash

    dash = asyncio.run(run())
    assert dash.metrics().hosts_confirmed_pct == 100
    assert dash.suggestions() == []


def test_tables_project_onto_display_columns():
    ledger = IncidentLedger()
    ledger.add(time="t1", type="Noise")
    snap = build_snapshot(DATASETS, ViewState(), ledger, now=NOW)
    tables = snap.tables()

    assert list(tables) == ["hosts", "incidents", "comms"]
    assert list(tables["hosts"].columns) == ["id", "name", "gender_comfort", "allergies", "accessibility",
                                             "confirmed", "room_building", "room_number"]
    assert tables["hosts"].loc[1, "allergies"] == ""
    assert tables["hosts"].loc[1, "room_number"] == ""
    assert list(tables["incidents"]["type"]) == ["Noise", "Lost key"]
    assert list(tables["comms"].columns) == ["date", "type", "owner", "status", "notes"]

    guests = build_snapshot(DATASETS, ViewState(tab="guests"), ledger, now=NOW).tables()
    assert "guests" in guests
    assert list(guests["guests"]["arrival_time"]) == ["2026-10-18T14:00:00Z", ""]
