# server/tests/test_control_numbers.py
"""Control number format and allocation"""
import re
import threading
from datetime import datetime

import pytest

from models import ControlNumberSequence
from services.control_number_service import (
    CONTROL_NUMBER_PATTERN,
    ControlNumberAllocator,
    format_control_number,
    parse_control_number,
)
from utils.exceptions import CategoryNotFoundError
from tests.conftest import FixedClock


class TestFormat:
    def test_zero_padded_sequence(self):
        assert format_control_number("ELEC", 2024, 3, 5) == "RMF-ELEC-2024-03-005"

    def test_sequence_widens_past_999(self):
        control_number = format_control_number("ELEC", 2024, 3, 1000)
        assert control_number == "RMF-ELEC-2024-03-1000"
        assert CONTROL_NUMBER_PATTERN.match(control_number)

    def test_custom_prefix(self):
        assert format_control_number("PLMB", 2025, 12, 1, prefix="MNT") == "MNT-PLMB-2025-12-001"

    def test_parse(self):
        assert parse_control_number("RMF-ELEC-2024-03-005") == {
            "prefix": "RMF",
            "code": "ELEC",
            "year": 2024,
            "month": 3,
            "sequence": 5,
        }

    @pytest.mark.parametrize("value", ["", "RMF-ELEC-2024-3-005", "RMF-EL3C-2024-03-005", "RMF-ELEC-2024-03-05"])
    def test_parse_rejects_malformed(self, value):
        assert parse_control_number(value) is None


class TestAllocator:
    """Sequence allocation within (year, month) buckets"""

    def test_first_number_of_month(self, db, category, clock):
        allocator = ControlNumberAllocator(clock=clock)
        assert allocator.allocate(db, category.id) == "RMF-ELEC-2024-03-001"

    def test_sequence_is_shared_across_categories(self, db, category, other_category, clock):
        allocator = ControlNumberAllocator(clock=clock)
        first = allocator.allocate(db, category.id)
        second = allocator.allocate(db, other_category.id)
        db.commit()

        assert first == "RMF-ELEC-2024-03-001"
        assert second == "RMF-PLMB-2024-03-002"

    def test_existing_tickets_seed_the_bucket(self, db, category, clock, make_ticket):
        make_ticket(category, "RMF-ELEC-2024-03-003")
        make_ticket(category, "RMF-ELEC-2024-03-004")

        allocator = ControlNumberAllocator(clock=clock)
        assert allocator.allocate(db, category.id) == "RMF-ELEC-2024-03-005"

    def test_other_months_do_not_seed_the_bucket(self, db, category, clock, make_ticket):
        make_ticket(category, "RMF-ELEC-2024-02-017", received_at=datetime(2024, 2, 10))

        allocator = ControlNumberAllocator(clock=clock)
        assert allocator.allocate(db, category.id) == "RMF-ELEC-2024-03-001"

    def test_new_month_starts_at_one(self, db, category):
        clock = FixedClock(datetime(2024, 3, 31, 23, 59))
        allocator = ControlNumberAllocator(clock=clock)
        allocator.allocate(db, category.id)
        allocator.allocate(db, category.id)

        clock.now = datetime(2024, 4, 1, 0, 0)
        assert allocator.allocate(db, category.id) == "RMF-ELEC-2024-04-001"

    def test_new_year_starts_at_one(self, db, category):
        clock = FixedClock(datetime(2024, 12, 31, 12, 0))
        allocator = ControlNumberAllocator(clock=clock)
        allocator.allocate(db, category.id)

        clock.now = datetime(2025, 1, 2, 8, 0)
        assert allocator.allocate(db, category.id) == "RMF-ELEC-2025-01-001"

    def test_overflow_past_999(self, db, category, clock):
        db.add(ControlNumberSequence(year=2024, month=3, last_value=999))
        db.commit()

        allocator = ControlNumberAllocator(clock=clock)
        control_number = allocator.allocate(db, category.id)

        assert control_number == "RMF-ELEC-2024-03-1000"
        assert re.match(r"^RMF-[A-Z]+-\d{4}-\d{2}-\d{3,}$", control_number)

    def test_rolled_back_allocation_is_not_consumed(self, db, category, clock):
        allocator = ControlNumberAllocator(clock=clock)
        allocator.allocate(db, category.id)
        db.commit()

        allocator.allocate(db, category.id)
        db.rollback()

        assert allocator.allocate(db, category.id) == "RMF-ELEC-2024-03-002"

    def test_unknown_category(self, db, clock):
        allocator = ControlNumberAllocator(clock=clock)
        with pytest.raises(CategoryNotFoundError) as exc_info:
            allocator.allocate(db, 999)
        assert exc_info.value.status_code == 400

    def test_missing_category_id(self, db, clock):
        with pytest.raises(CategoryNotFoundError):
            ControlNumberAllocator(clock=clock).allocate(db, None)


class TestConcurrentAllocation:
    def test_fifty_parallel_allocations_are_unique(self, session_factory, category, clock):
        """Fifty sessions allocating at once get fifty distinct, gap-free numbers"""
        allocator = ControlNumberAllocator(clock=clock)
        category_id = category.id
        results = []
        errors = []
        lock = threading.Lock()
        start = threading.Barrier(50)

        def worker():
            session = session_factory()
            try:
                start.wait()
                control_number = allocator.allocate(session, category_id)
                session.commit()
                with lock:
                    results.append(control_number)
            except Exception as e:
                session.rollback()
                with lock:
                    errors.append(e)
            finally:
                session.close()

        threads = [threading.Thread(target=worker) for _ in range(50)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert errors == []
        assert len(set(results)) == 50
        sequences = sorted(parse_control_number(cn)["sequence"] for cn in results)
        assert sequences == list(range(1, 51))
