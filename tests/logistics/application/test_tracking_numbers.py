"""Application tests for daily-sequential identifiers."""

from datetime import date, timedelta

from protean import current_domain

from logistics.consolidation.consolidation import Consolidation
from logistics.consolidation.creation import (
    CreateConsolidation,
    next_master_tracking_number,
    peek_master_tracking_number,
)
from logistics.receipt.issuance import next_receipt_number
from logistics.request.handling import next_request_number


def _today_stamp():
    return f"{date.today():%Y%m%d}"


def _create(reference_code, **kwargs):
    return current_domain.process(
        CreateConsolidation(reference_code=reference_code, created_by="user-001", **kwargs),
        asynchronous=False,
    )


class TestMasterTrackingNumbers:
    def test_first_of_the_day_is_0001(self):
        assert next_master_tracking_number() == f"MTN-{_today_stamp()}-0001"

    def test_consecutive_calls_increment(self):
        issued = [next_master_tracking_number() for _ in range(5)]
        assert [int(n[-4:]) for n in issued] == [1, 2, 3, 4, 5]
        assert len(set(issued)) == 5

    def test_created_consolidations_get_sequential_numbers(self):
        repo = current_domain.repository_for(Consolidation)
        first = repo.get(_create("REF-SEQ-1"))
        second = repo.get(_create("REF-SEQ-2"))
        assert first.master_tracking_number == f"MTN-{_today_stamp()}-0001"
        assert second.master_tracking_number == f"MTN-{_today_stamp()}-0002"

    def test_counter_restarts_each_day(self):
        yesterday = date.today() - timedelta(days=1)
        next_master_tracking_number(today=yesterday)
        next_master_tracking_number(today=yesterday)
        assert next_master_tracking_number() == f"MTN-{_today_stamp()}-0001"

    def test_given_day_is_used_in_identifier(self):
        assert next_master_tracking_number(today=date(2024, 1, 15)) == "MTN-20240115-0001"

    def test_seeds_from_numbers_issued_earlier_today(self):
        _create("REF-LEGACY", master_tracking_number=f"MTN-{_today_stamp()}-0041")
        assert next_master_tracking_number() == f"MTN-{_today_stamp()}-0042"

    def test_unparseable_suffix_restarts_at_one(self):
        _create("REF-ODD", master_tracking_number="MTN-MANUAL-ABCD")
        assert next_master_tracking_number() == f"MTN-{_today_stamp()}-0001"

    def test_supplied_number_is_skipped_by_the_counter(self):
        repo = current_domain.repository_for(Consolidation)
        first = repo.get(_create("REF-AUTO-1"))
        _create("REF-MANUAL", master_tracking_number=f"MTN-{_today_stamp()}-0002")
        third = repo.get(_create("REF-AUTO-2"))

        assert first.master_tracking_number == f"MTN-{_today_stamp()}-0001"
        assert third.master_tracking_number == f"MTN-{_today_stamp()}-0003"

    def test_supplied_run_of_numbers_is_skipped(self):
        next_master_tracking_number()
        _create("REF-MANUAL-2", master_tracking_number=f"MTN-{_today_stamp()}-0002")
        _create("REF-MANUAL-3", master_tracking_number=f"MTN-{_today_stamp()}-0003")
        assert next_master_tracking_number() == f"MTN-{_today_stamp()}-0004"


class TestPreview:
    def test_peek_does_not_reserve(self):
        assert peek_master_tracking_number() == f"MTN-{_today_stamp()}-0001"
        assert peek_master_tracking_number() == f"MTN-{_today_stamp()}-0001"
        assert next_master_tracking_number() == f"MTN-{_today_stamp()}-0001"
        assert peek_master_tracking_number() == f"MTN-{_today_stamp()}-0002"

    def test_peek_skips_supplied_numbers(self):
        next_master_tracking_number()
        _create("REF-MANUAL", master_tracking_number=f"MTN-{_today_stamp()}-0002")
        assert peek_master_tracking_number() == f"MTN-{_today_stamp()}-0003"


class TestIndependentSeries:
    def test_prefixes_do_not_share_counters(self):
        next_master_tracking_number()
        next_master_tracking_number()
        assert next_receipt_number() == f"RCP-{_today_stamp()}-0001"
        assert next_request_number() == f"REQ-{_today_stamp()}-0001"
