import pandas as pd

from transport import arrival_status, transport_board

NOW = pd.Timestamp("2026-10-18T12:00:00Z")


def test_arrival_statuses():
    assert arrival_status("2026-10-18T10:30:00Z", NOW) == "Arrived"
    assert arrival_status("2026-10-18T11:30:00Z", NOW) == "Landing soon"
    assert arrival_status("2026-10-18T12:20:00Z", NOW) == "Landing soon"
    assert arrival_status("2026-10-18T13:00:00Z", NOW) == "In transit"
    assert arrival_status("", NOW) == "Unknown"
    assert arrival_status("not a date", NOW) == "Unknown"


def test_naive_now_is_read_as_utc():
    assert arrival_status("2026-10-18T10:30:00Z", pd.Timestamp("2026-10-18T12:00:00")) == "Arrived"


def test_board_keeps_guest_order():
    guests = [{"name": "Maya", "arrival_time": "2026-10-18T14:00:00Z"}, {"name": "Kai"}]
    assert transport_board(guests, NOW) == [
        {"name": "Maya", "arrival_time": "2026-10-18T14:00:00Z", "status": "In transit"},
        {"name": "Kai", "arrival_time": "", "status": "Unknown"},
    ]
