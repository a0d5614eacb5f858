"""Application tests for customer request commands."""

from datetime import date

import pytest
from protean import current_domain

from logistics.request.handling import (
    ApproveRequest,
    ProcessRequest,
    RejectRequest,
    SubmitRequest,
    UpdateRequestStatus,
)
from logistics.request.request import CustomerRequest
from logistics.shared.errors import InvalidStateError


def _submit(customer_id="cust-001", **kwargs):
    return current_domain.process(
        SubmitRequest(customer_id=customer_id, notes="Combine please", **kwargs),
        asynchronous=False,
    )


def _get(request_id):
    return current_domain.repository_for(CustomerRequest).get(request_id)


class TestSubmit:
    def test_submit_issues_request_number(self):
        customer_request = _get(_submit())
        assert customer_request.status == "submitted"
        assert customer_request.request_number.startswith("REQ-")
        assert customer_request.request_number.endswith("-0001")

    def test_supplied_number_is_not_reissued(self):
        today = f"{date.today():%Y%m%d}"
        first = _get(_submit())
        _submit(request_number=f"REQ-{today}-0002")
        third = _get(_submit())
        assert first.request_number == f"REQ-{today}-0001"
        assert third.request_number == f"REQ-{today}-0003"

    def test_pending_count(self):
        _submit()
        _submit("cust-002")
        assert current_domain.repository_for(CustomerRequest).pending_count() == 2


class TestTransitions:
    def test_approve_then_process(self):
        request_id = _submit()
        current_domain.process(ApproveRequest(request_id=request_id, processed_by="staff-1"), asynchronous=False)
        current_domain.process(
            ProcessRequest(request_id=request_id, processed_by="staff-1", consolidation_id="cons-7"),
            asynchronous=False,
        )
        customer_request = _get(request_id)
        assert customer_request.status == "processed"
        assert customer_request.consolidation_id == "cons-7"
        assert current_domain.repository_for(CustomerRequest).pending_count() == 0

    def test_reject(self):
        request_id = _submit()
        current_domain.process(
            RejectRequest(request_id=request_id, processed_by="staff-1", reason="Out of area"),
            asynchronous=False,
        )
        assert _get(request_id).status == "rejected"

    def test_processing_a_submitted_request_is_rejected(self):
        request_id = _submit()
        with pytest.raises(InvalidStateError):
            current_domain.process(
                UpdateRequestStatus(request_id=request_id, status="processed"),
                asynchronous=False,
            )
        assert _get(request_id).status == "submitted"
