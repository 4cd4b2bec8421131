from rider_expense.repositories.base import (
    CycleStats,
    DailyRecordRepository,
    MonthlySummaryRepository,
    UserRepository,
)
from rider_expense.repositories.sql import (
    SqlDailyRecordRepository,
    SqlMonthlySummaryRepository,
    SqlUserRepository,
)

__all__ = [
    "CycleStats",
    "DailyRecordRepository",
    "MonthlySummaryRepository",
    "UserRepository",
    "SqlDailyRecordRepository",
    "SqlMonthlySummaryRepository",
    "SqlUserRepository",
]
