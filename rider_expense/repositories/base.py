"""
Storage interfaces for the three persisted entities.

Services only talk to these; the SQLAlchemy implementations live in
``rider_expense.repositories.sql`` and tests can swap in in-memory ones.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import date
from typing import List, Optional

from rider_expense.models.daily_record import DailyRecord
from rider_expense.models.monthly_summary import MonthlySummary
from rider_expense.models.user import User

DUPLICATE_RECORD_MESSAGE = "Details for this date already submitted"
DUPLICATE_EMAIL_MESSAGE = "User already exists with this email"


@dataclass(frozen=True)
class CycleStats:
    """Grouped sums over the daily records of a date range."""
    total_deliveries: int = 0
    total_tips: float = 0
    total_expenses: float = 0
    days_off: int = 0


class UserRepository(ABC):

    @abstractmethod
    def get(self, user_id: int) -> Optional[User]:
        ...

    @abstractmethod
    def get_by_email(self, email: str) -> Optional[User]:
        ...

    @abstractmethod
    def add(self, user: User) -> User:
        """Insert a new user; raises ConflictError if the email is taken."""

    @abstractmethod
    def save(self, user: User) -> User:
        ...

    @abstractmethod
    def delete(self, user_id: int) -> None:
        ...


class DailyRecordRepository(ABC):

    @abstractmethod
    def get(self, record_id: int) -> Optional[DailyRecord]:
        ...

    @abstractmethod
    def find_by_date(self, user_id: int, day: date) -> Optional[DailyRecord]:
        ...

    @abstractmethod
    def add(self, record: DailyRecord) -> DailyRecord:
        """Insert a record; raises ConflictError if (user, date) is taken."""

    @abstractmethod
    def save(self, record: DailyRecord) -> DailyRecord:
        """Persist changes; raises ConflictError if (user, date) is taken."""

    @abstractmethod
    def delete(self, record: DailyRecord) -> None:
        ...

    @abstractmethod
    def list_between(self, user_id: int, start: date, end: date) -> List[DailyRecord]:
        """Records with start <= date <= end, ascending by date."""

    @abstractmethod
    def aggregate(self, user_id: int, start: date, end: date) -> CycleStats:
        ...

    @abstractmethod
    def delete_for_user(self, user_id: int) -> int:
        ...


class MonthlySummaryRepository(ABC):

    @abstractmethod
    def get(self, user_id: int, start: date, end: date) -> Optional[MonthlySummary]:
        ...

    @abstractmethod
    def upsert(
        self,
        user_id: int,
        start: date,
        end: date,
        stats: CycleStats,
        total_earnings: float,
        savings: float,
    ) -> MonthlySummary:
        """Create or replace the summary keyed by (user, start, end)."""

    @abstractmethod
    def delete_for_user(self, user_id: int) -> int:
        ...
