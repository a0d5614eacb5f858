"""Tests for consolidation parcel membership and detail edits."""

from logistics.consolidation.consolidation import Consolidation
from logistics.consolidation.events import ConsolidationDetailsUpdated, ParcelAdded, ParcelRemoved


def _make_consolidation():
    c = Consolidation.create(
        reference_code="REF-PARCELS",
        created_by="user-001",
        master_tracking_number="MTN-20240115-0002",
    )
    c._events.clear()
    return c


class TestAddParcel:
    def test_add_parcel(self):
        c = _make_consolidation()
        assert c.add_parcel("parcel-1") is True
        assert c.parcel_ids() == ["parcel-1"]

    def test_adding_twice_keeps_one_membership(self):
        c = _make_consolidation()
        c.add_parcel("parcel-1")
        assert c.add_parcel("parcel-1") is False
        assert c.parcel_ids() == ["parcel-1"]

    def test_add_raises_event_only_on_change(self):
        c = _make_consolidation()
        c.add_parcel("parcel-1")
        c.add_parcel("parcel-1")
        added = [e for e in c._events if isinstance(e, ParcelAdded)]
        assert len(added) == 1
        assert added[0].parcel_count == 1


class TestRemoveParcel:
    def test_remove_member(self):
        c = _make_consolidation()
        c.add_parcel("parcel-1")
        c.add_parcel("parcel-2")
        assert c.remove_parcel("parcel-1") is True
        assert c.parcel_ids() == ["parcel-2"]

    def test_removing_absent_parcel_is_a_noop(self):
        c = _make_consolidation()
        c.add_parcel("parcel-1")
        c._events.clear()
        assert c.remove_parcel("parcel-404") is False
        assert c.parcel_ids() == ["parcel-1"]
        assert not any(isinstance(e, ParcelRemoved) for e in c._events)


class TestUpdateDetails:
    def test_changed_fields_are_reported(self):
        c = _make_consolidation()
        changed = c.update_details(warehouse_id="wh-9", notes="Fragile")
        assert changed == ["warehouse_id", "notes"]
        assert c.warehouse_id == "wh-9"
        assert isinstance(c._events[-1], ConsolidationDetailsUpdated)

    def test_unchanged_values_raise_nothing(self):
        c = _make_consolidation()
        assert c.update_details(reference_code="REF-PARCELS") == []
        assert c._events == []

    def test_status_and_history_are_not_touched(self):
        c = _make_consolidation()
        c.update_details(notes="Updated")
        assert c.status == "pending"
        assert len(c.status_history) == 1
