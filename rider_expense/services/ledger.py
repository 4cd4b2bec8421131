"""
Daily record ledger.

A rider has at most one record per calendar day. Input is turned into
either a ``WorkingDay`` or an ``OffDay`` before anything is stored, so an
Off day can never carry numbers or a day quality. Every mutation that
touches the active billing cycle refreshes its cached summary.
"""

from dataclasses import dataclass
from datetime import date
from typing import List, Optional, Union

from rider_expense.errors import ConflictError, NotFoundError, ValidationError
from rider_expense.logging_config import get_logger
from rider_expense.models.daily_record import (
    DAY_QUALITIES,
    DEFAULT_DAY_QUALITY,
    WORK_OFF,
    WORK_ON,
    DailyRecord,
)
from rider_expense.models.user import User
from rider_expense.repositories.base import DUPLICATE_RECORD_MESSAGE, DailyRecordRepository, UserRepository
from rider_expense.services.billing import BillingService
from rider_expense.utils.dates import parse_day

logger = get_logger(__name__)

RECORD_NOT_FOUND_MESSAGE = "Record not found or unauthorized"


@dataclass(frozen=True)
class WorkingDay:
    quality: str
    deliveries: int
    tips: float
    expenses: float

    work_status = WORK_ON


@dataclass(frozen=True)
class OffDay:
    quality = None
    deliveries = 0
    tips = 0
    expenses = 0

    work_status = WORK_OFF


DayEntry = Union[WorkingDay, OffDay]


def parse_entry(
    work_status: Optional[str],
    deliveries=None,
    tips=None,
    expenses=None,
    day_quality: Optional[str] = None,
) -> DayEntry:
    """
    Build the day variant from raw input.

    Off ignores every other field. On defaults missing numbers to 0 and a
    missing quality to Average, then rejects unknown qualities and
    negative numbers.
    """
    if work_status not in (WORK_ON, WORK_OFF):
        raise ValidationError("Invalid work status")
    if work_status == WORK_OFF:
        return OffDay()
    entry = WorkingDay(
        quality=day_quality or DEFAULT_DAY_QUALITY,
        deliveries=deliveries or 0,
        tips=tips or 0,
        expenses=expenses or 0,
    )
    if entry.quality not in DAY_QUALITIES:
        raise ValidationError("Invalid day quality for On status")
    if entry.deliveries < 0 or entry.tips < 0 or entry.expenses < 0:
        raise ValidationError("Deliveries, tips, and expenses cannot be negative")
    return entry


def apply_entry(record: DailyRecord, day: date, entry: DayEntry) -> DailyRecord:
    record.date = day
    record.work_status = entry.work_status
    record.deliveries = entry.deliveries
    record.tips = entry.tips
    record.expenses = entry.expenses
    record.day_quality = entry.quality
    return record


class LedgerService:

    def __init__(self, users: UserRepository, records: DailyRecordRepository, billing: BillingService):
        self.users = users
        self.records = records
        self.billing = billing

    def _get_user(self, user_id: int) -> User:
        user = self.users.get(user_id)
        if user is None:
            raise NotFoundError("User not found")
        return user

    def _owned_record(self, user_id: int, record_id: int) -> DailyRecord:
        record = self.records.get(record_id)
        if record is None or record.user_id != user_id:
            raise NotFoundError(RECORD_NOT_FOUND_MESSAGE)
        return record

    def _check_day(self, user: User, day: date):
        if day < user.account_created_at.date() or day > self.billing.today():
            raise ValidationError("Date must be between account creation and today")

    def create(
        self,
        user_id: int,
        date_value: Optional[str],
        work_status: Optional[str],
        deliveries=None,
        tips=None,
        expenses=None,
        day_quality: Optional[str] = None,
    ) -> DailyRecord:
        if not date_value or not work_status:
            raise ValidationError("Date and work status are required")
        user = self._get_user(user_id)
        day = parse_day(date_value)
        self._check_day(user, day)
        entry = parse_entry(work_status, deliveries, tips, expenses, day_quality)

        if self.records.find_by_date(user_id, day) is not None:
            raise ConflictError(DUPLICATE_RECORD_MESSAGE)
        record = self.records.add(apply_entry(DailyRecord(user_id=user_id), day, entry))
        logger.info(f"Daily record {record.id} created for user {user_id} on {day} ({entry.work_status})")

        self.billing.refresh_if_active(user_id, day)
        return record

    def edit(
        self,
        user_id: int,
        record_id: int,
        date_value: Optional[str],
        work_status: Optional[str],
        deliveries=None,
        tips=None,
        expenses=None,
        day_quality: Optional[str] = None,
    ) -> DailyRecord:
        record = self._owned_record(user_id, record_id)
        user = self._get_user(user_id)
        day = parse_day(date_value) if date_value else record.date
        self._check_day(user, day)
        entry = parse_entry(work_status, deliveries, tips, expenses, day_quality)

        previous_day = record.date
        if day != previous_day:
            clash = self.records.find_by_date(user_id, day)
            if clash is not None and clash.id != record.id:
                raise ConflictError(DUPLICATE_RECORD_MESSAGE)
        record = self.records.save(apply_entry(record, day, entry))
        logger.info(f"Daily record {record.id} updated for user {user_id} ({previous_day} -> {day})")

        self.billing.refresh_if_active(user_id, previous_day, day)
        return record

    def delete(self, user_id: int, record_id: int) -> None:
        record = self._owned_record(user_id, record_id)
        day = record.date
        self.records.delete(record)
        logger.info(f"Daily record {record_id} deleted for user {user_id} ({day})")
        self.billing.refresh_if_active(user_id, day)

    def current_cycle_records(self, user_id: int) -> List[DailyRecord]:
        cycle = self.billing.active_cycle()
        return self.records.list_between(user_id, cycle.start, cycle.end)
