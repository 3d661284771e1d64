"""Tests for ReportSelector: best profession and best clients."""

from datetime import date
from decimal import Decimal

import pytest

from marketplace_kernel.exceptions import InvalidDateRangeError, ReportNoDataError
from marketplace_kernel.selectors import ReportSelector

START = date(2020, 1, 1)
END = date(2020, 12, 31)


class TestBestProfession:

    def test_whole_year(self, session):
        result = ReportSelector(session).best_profession(START, END)
        assert result.profession == "Programmer"
        assert result.total_earned == Decimal("2683")

    def test_end_date_is_inclusive(self, session):
        # Jobs 9 (Musician) and 10 (Fighter) tie at 200 on 2020-08-17
        result = ReportSelector(session).best_profession(date(2020, 8, 17), date(2020, 8, 17))
        assert result.profession == "Fighter"
        assert result.total_earned == Decimal("200")

    def test_day_boundary_is_utc(self, session):
        # Job 14 was paid 2020-08-14 23:11 UTC
        result = ReportSelector(session).best_profession(date(2020, 8, 14), date(2020, 8, 14))
        assert result.profession == "Programmer"
        assert result.total_earned == Decimal("121")

    def test_no_data(self, session):
        with pytest.raises(ReportNoDataError) as exc_info:
            ReportSelector(session).best_profession(date(2021, 1, 1), date(2021, 12, 31))
        assert exc_info.value.report == "best-profession"

    def test_start_after_end(self, session):
        with pytest.raises(InvalidDateRangeError):
            ReportSelector(session).best_profession(END, START)


class TestBestClients:

    def test_default_two(self, session):
        rows = ReportSelector(session).best_clients(START, END, limit=2)
        assert [(r.id, r.full_name, r.paid) for r in rows] == [
            (4, "Ash Kethcum", Decimal("2020")),
            (1, "Harry Potter", Decimal("442")),
        ]

    def test_tie_broken_by_id(self, session):
        rows = ReportSelector(session).best_clients(START, END, limit=4)
        assert [(r.id, r.paid) for r in rows] == [
            (4, Decimal("2020")),
            (1, Decimal("442")),
            (2, Decimal("442")),
            (3, Decimal("200")),
        ]

    def test_limit_larger_than_rows(self, session):
        rows = ReportSelector(session).best_clients(START, END, limit=100)
        assert len(rows) == 4

    def test_sorted_descending(self, session):
        rows = ReportSelector(session).best_clients(START, END, limit=10)
        paid = [r.paid for r in rows]
        assert paid == sorted(paid, reverse=True)

    def test_limit_below_one(self, session):
        with pytest.raises(ValueError):
            ReportSelector(session).best_clients(START, END, limit=0)

    def test_no_data(self, session):
        with pytest.raises(ReportNoDataError):
            ReportSelector(session).best_clients(date(2019, 1, 1), date(2019, 12, 31), limit=2)
