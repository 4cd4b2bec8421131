from sqlalchemy import Column, Integer, Float, String, ForeignKey, Date, DateTime, UniqueConstraint
from rider_expense.models import Base
from rider_expense.utils.dates import utcnow

WORK_ON = "On"
WORK_OFF = "Off"
WORK_STATUSES = (WORK_ON, WORK_OFF)

DAY_QUALITIES = ("Excellent", "VeryGood", "Good", "Average", "Bad", "VeryBad")
DEFAULT_DAY_QUALITY = "Average"


class DailyRecord(Base):
    """
    One work day for one rider.

    Off days always carry zero deliveries, tips and expenses and no
    day quality; the ledger service enforces that before anything is stored.
    """
    __tablename__ = "daily_records"
    __table_args__ = (
        UniqueConstraint("user_id", "date", name="uq_daily_records_user_date"),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    date = Column(Date, nullable=False)
    work_status = Column(String(3), nullable=False)  # On / Off
    deliveries = Column(Integer, default=0, nullable=False)
    tips = Column(Float, default=0, nullable=False)
    expenses = Column(Float, default=0, nullable=False)
    day_quality = Column(String(20), nullable=True)
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)
