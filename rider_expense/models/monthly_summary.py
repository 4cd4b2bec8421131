from sqlalchemy import Column, Integer, Float, ForeignKey, Date, DateTime, UniqueConstraint
from rider_expense.models import Base
from rider_expense.utils.dates import utcnow


class MonthlySummary(Base):
    """Cached totals for one billing cycle; always rebuildable from daily records."""
    __tablename__ = "monthly_summaries"
    __table_args__ = (
        UniqueConstraint("user_id", "start_date", "end_date", name="uq_monthly_summaries_cycle"),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    total_earnings = Column(Float, nullable=False)
    total_tips = Column(Float, nullable=False)
    total_expenses = Column(Float, nullable=False)
    savings = Column(Float, nullable=False)
    total_deliveries = Column(Integer, nullable=False)
    days_off = Column(Integer, nullable=False)
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)
