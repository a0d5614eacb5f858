"""Tests for Charges and the Receipt aggregate."""

import pytest
from protean.exceptions import ValidationError

from logistics.receipt.events import ReceiptChargesUpdated, ReceiptIssued
from logistics.receipt.receipt import Charges, Receipt, compute_total


def _make_receipt(**overrides):
    defaults = {
        "receipt_number": "RCP-20240115-0001",
        "consolidation_id": "cons-001",
        "total_parcels": 3,
        "charges": Charges.from_components(service_fee=100.0, handling_fee=20.0, discount=10.0),
    }
    defaults.update(overrides)
    return Receipt.issue(**defaults)


class TestComputeTotal:
    def test_total_is_fees_minus_discount(self):
        assert compute_total(100.0, 20.0, 10.0) == 110.0

    def test_rounds_to_cents(self):
        assert compute_total(0.1, 0.2, 0.0) == 0.3


class TestCharges:
    def test_from_components_derives_total(self):
        charges = Charges.from_components(service_fee=100.0, handling_fee=20.0, discount=10.0)
        assert charges.total == 110.0

    def test_missing_components_count_as_zero(self):
        charges = Charges.from_components(service_fee=50.0)
        assert charges.handling_fee == 0.0
        assert charges.discount == 0.0
        assert charges.total == 50.0

    def test_total_must_match_components(self):
        with pytest.raises((ValueError, ValidationError)):
            Charges(service_fee=100.0, handling_fee=20.0, discount=10.0, total=999.0)

    def test_negative_component_rejected(self):
        with pytest.raises((ValueError, ValidationError)):
            Charges.from_components(service_fee=-5.0)

    def test_discount_may_exceed_fees(self):
        charges = Charges.from_components(service_fee=10.0, discount=15.0)
        assert charges.total == -5.0


class TestReceiptIssue:
    def test_issue_keeps_charges(self):
        receipt = _make_receipt()
        assert receipt.receipt_number == "RCP-20240115-0001"
        assert receipt.charges.total == 110.0
        assert receipt.issued_at is not None

    def test_issue_raises_event_with_total(self):
        receipt = _make_receipt()
        event = receipt._events[-1]
        assert isinstance(event, ReceiptIssued)
        assert event.total == 110.0

    def test_total_parcels_must_be_positive(self):
        with pytest.raises(ValidationError) as exc:
            _make_receipt(total_parcels=0)
        assert "total_parcels" in exc.value.messages


class TestReceiptUpdates:
    def test_update_charges_replaces_total(self):
        receipt = _make_receipt()
        receipt.update_charges(Charges.from_components(service_fee=200.0))
        assert receipt.charges.total == 200.0
        assert isinstance(receipt._events[-1], ReceiptChargesUpdated)

    def test_update_details_keeps_number(self):
        receipt = _make_receipt()
        receipt.update_details(total_parcels=5, total_weight=12.5)
        assert receipt.total_parcels == 5
        assert receipt.total_weight == 12.5
        assert receipt.receipt_number == "RCP-20240115-0001"
