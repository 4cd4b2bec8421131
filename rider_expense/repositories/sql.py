"""
SQLAlchemy implementations of the repository interfaces.

Every mutating call commits its own unit of work; uniqueness violations
reported by the database are turned into ConflictError.
"""
from datetime import date
from typing import List, Optional

from sqlalchemy import case, func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from rider_expense.errors import ConflictError, DownstreamError
from rider_expense.logging_config import get_logger
from rider_expense.models.daily_record import DailyRecord, WORK_OFF
from rider_expense.models.monthly_summary import MonthlySummary
from rider_expense.models.user import User
from rider_expense.repositories.base import (
    DUPLICATE_EMAIL_MESSAGE,
    DUPLICATE_RECORD_MESSAGE,
    CycleStats,
    DailyRecordRepository,
    MonthlySummaryRepository,
    UserRepository,
)
from rider_expense.utils.dates import utcnow

logger = get_logger(__name__)

UPSERT_ATTEMPTS = 2


class SqlUserRepository(UserRepository):

    def __init__(self, db: Session):
        self.db = db

    def get(self, user_id: int) -> Optional[User]:
        return self.db.query(User).filter(User.id == user_id).first()

    def get_by_email(self, email: str) -> Optional[User]:
        return self.db.query(User).filter(User.email == email).first()

    def add(self, user: User) -> User:
        self.db.add(user)
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            logger.warning(f"Duplicate email rejected by store: {user.email}")
            raise ConflictError(DUPLICATE_EMAIL_MESSAGE)
        self.db.refresh(user)
        return user

    def save(self, user: User) -> User:
        self.db.add(user)
        self.db.commit()
        self.db.refresh(user)
        return user

    def delete(self, user_id: int) -> None:
        self.db.query(User).filter(User.id == user_id).delete()
        self.db.commit()


class SqlDailyRecordRepository(DailyRecordRepository):

    def __init__(self, db: Session):
        self.db = db

    def get(self, record_id: int) -> Optional[DailyRecord]:
        return self.db.query(DailyRecord).filter(DailyRecord.id == record_id).first()

    def find_by_date(self, user_id: int, day: date) -> Optional[DailyRecord]:
        return self.db.query(DailyRecord).filter(
            DailyRecord.user_id == user_id,
            DailyRecord.date == day,
        ).first()

    def _commit(self, record: DailyRecord) -> DailyRecord:
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            logger.warning(f"Duplicate daily record rejected by store: user={record.user_id} date={record.date}")
            raise ConflictError(DUPLICATE_RECORD_MESSAGE)
        self.db.refresh(record)
        return record

    def add(self, record: DailyRecord) -> DailyRecord:
        self.db.add(record)
        return self._commit(record)

    def save(self, record: DailyRecord) -> DailyRecord:
        record.updated_at = utcnow()
        self.db.add(record)
        return self._commit(record)

    def delete(self, record: DailyRecord) -> None:
        self.db.delete(record)
        self.db.commit()

    def list_between(self, user_id: int, start: date, end: date) -> List[DailyRecord]:
        return self.db.query(DailyRecord).filter(
            DailyRecord.user_id == user_id,
            DailyRecord.date >= start,
            DailyRecord.date <= end,
        ).order_by(DailyRecord.date).all()

    def aggregate(self, user_id: int, start: date, end: date) -> CycleStats:
        row = self.db.query(
            func.coalesce(func.sum(DailyRecord.deliveries), 0),
            func.coalesce(func.sum(DailyRecord.tips), 0),
            func.coalesce(func.sum(DailyRecord.expenses), 0),
            func.coalesce(func.sum(case((DailyRecord.work_status == WORK_OFF, 1), else_=0)), 0),
        ).filter(
            DailyRecord.user_id == user_id,
            DailyRecord.date >= start,
            DailyRecord.date <= end,
        ).one()
        deliveries, tips, expenses, days_off = row
        return CycleStats(
            total_deliveries=int(deliveries),
            total_tips=float(tips),
            total_expenses=float(expenses),
            days_off=int(days_off),
        )

    def delete_for_user(self, user_id: int) -> int:
        count = self.db.query(DailyRecord).filter(DailyRecord.user_id == user_id).delete()
        self.db.commit()
        return count


class SqlMonthlySummaryRepository(MonthlySummaryRepository):

    def __init__(self, db: Session):
        self.db = db

    def get(self, user_id: int, start: date, end: date) -> Optional[MonthlySummary]:
        return self.db.query(MonthlySummary).filter(
            MonthlySummary.user_id == user_id,
            MonthlySummary.start_date == start,
            MonthlySummary.end_date == end,
        ).first()

    def upsert(self, user_id, start, end, stats, total_earnings, savings) -> MonthlySummary:
        # Two attempts: the second one finds the row a concurrent writer created
        for attempt in range(UPSERT_ATTEMPTS):
            summary = self.get(user_id, start, end)
            if summary is None:
                summary = MonthlySummary(user_id=user_id, start_date=start, end_date=end)
                self.db.add(summary)
            summary.total_earnings = total_earnings
            summary.total_tips = stats.total_tips
            summary.total_expenses = stats.total_expenses
            summary.savings = savings
            summary.total_deliveries = stats.total_deliveries
            summary.days_off = stats.days_off
            summary.updated_at = utcnow()
            try:
                self.db.commit()
            except IntegrityError as e:
                self.db.rollback()
                logger.warning(
                    f"Summary upsert for user {user_id} ({start} to {end}) "
                    f"failed on attempt {attempt + 1}: {e.orig}"
                )
                continue
            self.db.refresh(summary)
            return summary
        logger.error(f"Giving up on summary upsert for user {user_id} ({start} to {end})")
        raise DownstreamError("Failed to save monthly summary")

    def delete_for_user(self, user_id: int) -> int:
        count = self.db.query(MonthlySummary).filter(MonthlySummary.user_id == user_id).delete()
        self.db.commit()
        return count
