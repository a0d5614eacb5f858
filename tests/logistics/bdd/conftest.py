"""Shared BDD fixtures and step definitions for the logistics domain."""

import pytest
from pytest_bdd import given, parsers, then

from logistics.consolidation.consolidation import Consolidation
from logistics.consolidation.events import ConsolidationStatusChanged
from logistics.shared.location import GeoLocation

_EVENT_CLASSES = {
    "ConsolidationStatusChanged": ConsolidationStatusChanged,
}


@pytest.fixture()
def error():
    """Container for captured errors."""
    return {"exc": None}


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given("a pending consolidation", target_fixture="consolidation")
def pending_consolidation():
    consolidation = Consolidation.create(
        reference_code="REF-BDD-001",
        created_by="creator-bdd",
        master_tracking_number="MTN-20240115-0001",
    )
    consolidation._events.clear()
    return consolidation


@given("a delivered consolidation", target_fixture="consolidation")
def delivered_consolidation():
    consolidation = Consolidation.create(
        reference_code="REF-BDD-002",
        created_by="creator-bdd",
        master_tracking_number="MTN-20240115-0002",
    )
    location = GeoLocation(latitude=13.75, longitude=100.5, address="Depot")
    consolidation.assign_driver("driver-bdd")
    consolidation.mark_dispatched("del-bdd", "driver-bdd", location)
    consolidation.mark_delivered("del-bdd", "driver-bdd", location)
    consolidation._events.clear()
    return consolidation


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse('the consolidation status is "{status}"'))
def consolidation_status_is(consolidation, status):
    assert consolidation.status == status


@then(parsers.cfparse("the status history has {count:d} entries"))
def history_has_entries(consolidation, count):
    assert len(consolidation.status_history) == count


@then(parsers.cfparse("a {event_type} event is raised"))
def event_raised(consolidation, event_type):
    event_cls = _EVENT_CLASSES[event_type]
    assert any(isinstance(e, event_cls) for e in consolidation._events)
