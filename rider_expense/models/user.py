from sqlalchemy import Column, Integer, String, Text, DateTime, Boolean, Float
from rider_expense.models import Base
from rider_expense.utils.dates import utcnow

# Employment classifications and their fixed monthly salary
PART_TIMER = "PartTimer"
FULL_TIMER = "FullTimer"
FIXED_SALARIES = {
    FULL_TIMER: 37000,
    PART_TIMER: 18500,
}
EMPLOYMENT_TYPES = tuple(FIXED_SALARIES)


def salary_for(employment_type: str) -> float:
    """Fixed salary for an employment classification."""
    return FIXED_SALARIES[employment_type]


class User(Base):
    __tablename__ = "users"
    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(20), nullable=False)
    email = Column(String, unique=True, nullable=False, index=True)
    password_hash = Column(String, nullable=False)
    employment_type = Column(String(20), nullable=False)  # PartTimer / FullTimer
    fixed_salary = Column(Float, nullable=False)
    is_account_verified = Column(Boolean, default=False, nullable=False)
    verify_otp = Column(String(6), nullable=True)
    verify_otp_expire_at = Column(DateTime, nullable=True)
    reset_otp = Column(String(6), nullable=True)
    reset_otp_expire_at = Column(DateTime, nullable=True)
    account_created_at = Column(DateTime, default=utcnow, nullable=False)
    profile_picture = Column(Text, nullable=True)  # data:image/...;base64,...

    def set_employment_type(self, employment_type: str):
        """Assign the classification and keep the salary consistent with it."""
        self.employment_type = employment_type
        self.fixed_salary = salary_for(employment_type)
