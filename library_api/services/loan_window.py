"""
Loan Window Filter

Decides which loans fall inside a reporting window. Two tests exist:

spans_date(loan, on)
    The book was out on day `on`: lent on or before it, and either still
    out or returned on or after it. Both ends are inclusive.

exceeds_duration(loan, days, reference)
    The loan had already lasted at least `days` full days at `reference`
    (today unless given), and was still open at `reference`.

Each test exists twice: as a Python predicate over a loan object, and as
a SQLAlchemy clause over Loan columns, so reports can filter in the
database and tests can check the same rule in memory. The SQL form of
"elapsed >= N days" is "loan_date <= reference - N days", which is the
same comparison on whole dates.
"""

from dataclasses import dataclass
from datetime import date, timedelta
from typing import Protocol

from sqlalchemy import ColumnElement, and_, false, or_

from library_api.models.loan import Loan


class LoanDates(Protocol):
    """Anything carrying a loan's two dates (ORM rows, test doubles)."""

    loan_date: date
    return_date: date | None


# =============================================================================
# Python Predicates
# =============================================================================


def spans_date(loan: LoanDates, on: date) -> bool:
    return loan.loan_date <= on and (loan.return_date is None or on <= loan.return_date)


def exceeds_duration(
    loan: LoanDates,
    threshold_days: int,
    reference: date | None = None,
) -> bool:
    """
    Check whether a loan had lasted at least threshold_days by reference.

    Args:
        loan: Loan to test
        threshold_days: Minimum elapsed days (0 matches any loan open at reference)
        reference: Day to measure at, today when omitted

    Returns:
        True when the elapsed days reach the threshold and the loan was
        not yet returned before reference
    """
    if reference is None:
        reference = date.today()
    elapsed = (reference - loan.loan_date).days
    still_open = loan.return_date is None or reference <= loan.return_date
    return elapsed >= threshold_days and still_open


# =============================================================================
# SQL Clauses
# =============================================================================


def spans_date_clause(on: date) -> ColumnElement[bool]:
    return and_(
        Loan.loan_date <= on,
        or_(Loan.return_date.is_(None), Loan.return_date >= on),
    )


def exceeds_duration_clause(
    threshold_days: int,
    reference: date | None = None,
) -> ColumnElement[bool]:
    if reference is None:
        reference = date.today()
    # No loan can be older than date.min
    if threshold_days > (reference - date.min).days:
        return false()
    latest_start = reference - timedelta(days=threshold_days)
    return and_(
        Loan.loan_date <= latest_start,
        or_(Loan.return_date.is_(None), Loan.return_date >= reference),
    )


# =============================================================================
# Combined Window
# =============================================================================


@dataclass(frozen=True)
class LoanWindow:
    """
    The loan filter a report or listing runs with.

    Attributes:
        on: Keep loans that span this day
        duration: Keep loans open for at least this many days, measured
            at `on` when given and at today otherwise

    Both filters AND together; an empty window keeps every loan.
    """

    on: date | None = None
    duration: int | None = None

    @property
    def is_empty(self) -> bool:
        return self.on is None and self.duration is None

    def reference(self, today: date | None = None) -> date:
        if self.on is not None:
            return self.on
        return today if today is not None else date.today()

    def clauses(self, today: date | None = None) -> list[ColumnElement[bool]]:
        """SQL conditions for this window, ready for Select.where(*clauses)."""
        conditions: list[ColumnElement[bool]] = []
        if self.on is not None:
            conditions.append(spans_date_clause(self.on))
        if self.duration is not None:
            conditions.append(
                exceeds_duration_clause(self.duration, self.reference(today))
            )
        return conditions

    def matches(self, loan: LoanDates, today: date | None = None) -> bool:
        if self.on is not None and not spans_date(loan, self.on):
            return False
        if self.duration is not None and not exceeds_duration(
            loan, self.duration, self.reference(today)
        ):
            return False
        return True
