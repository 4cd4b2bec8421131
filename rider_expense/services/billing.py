"""
Billing cycle engine.

Riders are paid on a fixed cycle that runs from the 21st of one month to
the 20th of the next, both days included. This module works out which
cycle a day belongs to, turns the daily records of a cycle into earnings
and savings, and keeps the cached MonthlySummary of the *active* cycle in
step with the ledger.

Key rules:
- earnings = fixed salary + deliveries x 45 + tips, each term only when
  its component is included
- more than 4 off days in a cycle costs (off days - 4) x penalty rate,
  1170 for full timers and 585 for part timers
- savings = earnings - expenses
- only the active cycle is cached; history is always computed live
"""

from dataclasses import dataclass, asdict
from datetime import date
from typing import Callable, Iterable, List, Optional, Sequence, Tuple

from rider_expense.errors import NotFoundError, ValidationError
from rider_expense.logging_config import get_logger
from rider_expense.models.daily_record import WORK_OFF
from rider_expense.models.user import FULL_TIMER, PART_TIMER, User
from rider_expense.repositories.base import (
    CycleStats,
    DailyRecordRepository,
    MonthlySummaryRepository,
    UserRepository,
)
from rider_expense.utils.dates import iter_days, parse_day, utcnow

logger = get_logger(__name__)

CYCLE_START_DAY = 21
CYCLE_END_DAY = 20

DELIVERY_RATE = 45
OFF_DAY_GRACE = 4
OFF_DAY_PENALTY = {
    FULL_TIMER: 1170,
    PART_TIMER: 585,
}

FIXED_SALARY = "fixed_salary"
DELIVERIES = "deliveries"
TIPS = "tips"
SUMMARY_COMPONENTS = (FIXED_SALARY, DELIVERIES, TIPS)
HISTORY_COMPONENTS = (DELIVERIES, TIPS)


@dataclass(frozen=True)
class BillingCycle:
    start: date
    end: date

    def contains(self, day: date) -> bool:
        return self.start <= day <= self.end

    def to_dict(self) -> dict:
        return {"start_date": self.start.isoformat(), "end_date": self.end.isoformat()}


@dataclass(frozen=True)
class CycleSummary:
    total_earnings: float
    total_tips: float
    total_expenses: float
    savings: float
    total_deliveries: int
    days_off: int

    def to_dict(self) -> dict:
        return asdict(self)


def cycle_for(day: date) -> BillingCycle:
    """The billing cycle that owns ``day``."""
    if day.day >= CYCLE_START_DAY:
        start = date(day.year, day.month, CYCLE_START_DAY)
        if day.month == 12:
            end = date(day.year + 1, 1, CYCLE_END_DAY)
        else:
            end = date(day.year, day.month + 1, CYCLE_END_DAY)
    else:
        if day.month == 1:
            start = date(day.year - 1, 12, CYCLE_START_DAY)
        else:
            start = date(day.year, day.month - 1, CYCLE_START_DAY)
        end = date(day.year, day.month, CYCLE_END_DAY)
    return BillingCycle(start, end)


def parse_include(raw: Optional[str], allowed: Sequence[str] = SUMMARY_COMPONENTS) -> Tuple[str, ...]:
    """
    Parse a comma separated ``include`` parameter.

    Unknown names are dropped; a missing or empty value means every allowed
    component. Raises ValidationError if nothing recognised is left.
    """
    if not raw:
        return tuple(allowed)
    requested = [part.strip() for part in raw.split(",")]
    components = tuple(name for name in allowed if name in requested)
    if not components:
        raise ValidationError(
            f"At least one income component ({', '.join(allowed)}) must be included"
        )
    return components


def off_day_penalty(days_off: int, employment_type: str) -> float:
    """Deduction for the off days beyond the grace allowance."""
    if days_off <= OFF_DAY_GRACE:
        return 0
    rate = OFF_DAY_PENALTY.get(employment_type, OFF_DAY_PENALTY[PART_TIMER])
    return (days_off - OFF_DAY_GRACE) * rate


def compute_earnings(
    stats: CycleStats,
    fixed_salary: float,
    employment_type: str,
    include: Iterable[str] = SUMMARY_COMPONENTS,
) -> float:
    include = set(include)
    earnings = 0
    if FIXED_SALARY in include:
        earnings += fixed_salary
    if DELIVERIES in include:
        earnings += stats.total_deliveries * DELIVERY_RATE
    if TIPS in include:
        earnings += stats.total_tips
    return earnings - off_day_penalty(stats.days_off, employment_type)


def build_summary(stats: CycleStats, total_earnings: float) -> CycleSummary:
    return CycleSummary(
        total_earnings=total_earnings,
        total_tips=stats.total_tips,
        total_expenses=stats.total_expenses,
        savings=total_earnings - stats.total_expenses,
        total_deliveries=stats.total_deliveries,
        days_off=stats.days_off,
    )


def history_earnings(stats: CycleStats, include: Iterable[str] = HISTORY_COMPONENTS) -> float:
    """Variable earnings over an arbitrary range: no salary, no penalty."""
    include = set(include)
    earnings = 0
    if DELIVERIES in include:
        earnings += stats.total_deliveries * DELIVERY_RATE
    if TIPS in include:
        earnings += stats.total_tips
    return earnings


class BillingService:
    """Aggregation, caching and reporting over a rider's billing cycles."""

    def __init__(
        self,
        users: UserRepository,
        records: DailyRecordRepository,
        summaries: MonthlySummaryRepository,
        clock: Callable = utcnow,
    ):
        self.users = users
        self.records = records
        self.summaries = summaries
        self.clock = clock

    def today(self) -> date:
        return self.clock().date()

    def active_cycle(self) -> BillingCycle:
        return cycle_for(self.today())

    def _get_user(self, user_id: int) -> User:
        user = self.users.get(user_id)
        if user is None:
            raise NotFoundError("User not found")
        return user

    def aggregate(self, user_id: int, cycle: BillingCycle) -> CycleStats:
        return self.records.aggregate(user_id, cycle.start, cycle.end)

    def refresh(self, user_id: int, cycle: BillingCycle) -> CycleSummary:
        """Recompute the cycle from raw records and upsert its cached summary."""
        user = self._get_user(user_id)
        stats = self.aggregate(user_id, cycle)
        total_earnings = compute_earnings(stats, user.fixed_salary, user.employment_type)
        summary = build_summary(stats, total_earnings)
        self.summaries.upsert(user_id, cycle.start, cycle.end, stats, summary.total_earnings, summary.savings)
        logger.info(
            f"Monthly summary refreshed for user {user_id} "
            f"({cycle.start} - {cycle.end}): earnings={summary.total_earnings}, days_off={summary.days_off}"
        )
        return summary

    def refresh_if_active(self, user_id: int, *days: date) -> bool:
        """Refresh the active cycle's summary if any of ``days`` falls inside it."""
        cycle = self.active_cycle()
        if any(day is not None and cycle.contains(day) for day in days):
            self.refresh(user_id, cycle)
            return True
        return False

    def monthly_summary(self, user_id: int, include: Iterable[str] = SUMMARY_COMPONENTS) -> Tuple[BillingCycle, CycleSummary]:
        """
        Summary of the active cycle under an income filter.

        A cached summary only has its earnings and savings recomputed; without
        one the raw records are aggregated and the result is not cached.
        """
        user = self._get_user(user_id)
        cycle = self.active_cycle()
        cached = self.summaries.get(user_id, cycle.start, cycle.end)
        if cached is not None:
            stats = CycleStats(
                total_deliveries=cached.total_deliveries,
                total_tips=cached.total_tips,
                total_expenses=cached.total_expenses,
                days_off=cached.days_off,
            )
        else:
            logger.debug(f"No cached summary for user {user_id}, aggregating {cycle.start} - {cycle.end}")
            stats = self.aggregate(user_id, cycle)
        total_earnings = compute_earnings(stats, user.fixed_salary, user.employment_type, include)
        return cycle, build_summary(stats, total_earnings)

    def history(
        self,
        user_id: int,
        from_date: Optional[str],
        to_date: Optional[str],
        include: Iterable[str] = HISTORY_COMPONENTS,
    ) -> Tuple[CycleSummary, List[dict]]:
        """
        Live totals plus one entry per day over a caller supplied range.

        Days without a stored record are filled with zero valued Off entries.
        """
        if not from_date or not to_date:
            raise ValidationError("From and to dates are required")
        user = self._get_user(user_id)
        start = parse_day(from_date, "from_date")
        end = parse_day(to_date, "to_date")
        if start < user.account_created_at.date() or end > self.today() or start > end:
            raise ValidationError("Invalid date range")

        stats = self.records.aggregate(user_id, start, end)
        stored = {record.date: record for record in self.records.list_between(user_id, start, end)}
        daily_records = []
        for day in iter_days(start, end):
            record = stored.get(day)
            if record is None:
                daily_records.append({
                    "date": day.isoformat(),
                    "deliveries": 0,
                    "tips": 0,
                    "expenses": 0,
                    "work_status": WORK_OFF,
                })
            else:
                daily_records.append({
                    "date": day.isoformat(),
                    "deliveries": record.deliveries,
                    "tips": record.tips,
                    "expenses": record.expenses,
                    "work_status": record.work_status,
                })
        return build_summary(stats, history_earnings(stats, include)), daily_records
