"""
Request bodies and response projections.

Request fields are all optional at the pydantic level so the services can
answer missing input with their own messages.
"""
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from rider_expense.models.daily_record import DailyRecord
from rider_expense.models.user import User


class CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class RegisterIn(CamelModel):
    name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None
    employment_type: Optional[str] = Field(default=None, alias="employmentType")


class LoginIn(CamelModel):
    email: Optional[str] = None
    password: Optional[str] = None


class OtpIn(CamelModel):
    otp: Optional[str] = None


class EmailIn(CamelModel):
    email: Optional[str] = None


class ResetOtpIn(CamelModel):
    email: Optional[str] = None
    otp: Optional[str] = None


class ResetPasswordIn(CamelModel):
    email: Optional[str] = None
    otp: Optional[str] = None
    new_password: Optional[str] = Field(default=None, alias="newPassword")
    confirm_password: Optional[str] = Field(default=None, alias="confirmPassword")


class ProfileUpdateIn(CamelModel):
    name: Optional[str] = None
    employment_type: Optional[str] = Field(default=None, alias="employmentType")
    old_password: Optional[str] = Field(default=None, alias="oldPassword")
    new_password: Optional[str] = Field(default=None, alias="newPassword")
    profile_picture: Optional[str] = Field(default=None, alias="profilePicture")


class ProfilePictureIn(CamelModel):
    profile_picture: Optional[str] = Field(default=None, alias="profilePicture")


class DeleteAccountIn(CamelModel):
    email: Optional[str] = None
    password: Optional[str] = None


class DailyRecordIn(CamelModel):
    date: Optional[str] = None
    work_status: Optional[str] = None
    deliveries: Optional[int] = None
    tips: Optional[float] = None
    expenses: Optional[float] = None
    day_quality: Optional[str] = None


def public_user(user: User) -> dict:
    return {"id": user.id, "name": user.name, "email": user.email}


def session_user(user: User) -> dict:
    """Projection answered by the is-auth check."""
    return {
        **public_user(user),
        "employmentType": user.employment_type,
        "isAccountVerified": user.is_account_verified,
    }


def user_data(user: User) -> dict:
    return {**session_user(user), "profilePicture": user.profile_picture}


def profile_user(user: User) -> dict:
    """Everything but credentials and OTP fields."""
    return {
        **user_data(user),
        "fixedSalary": user.fixed_salary,
        "accountCreatedAt": user.account_created_at.isoformat() if user.account_created_at else None,
    }


def record_out(record: DailyRecord) -> dict:
    return {
        "id": record.id,
        "date": record.date.isoformat(),
        "work_status": record.work_status,
        "deliveries": record.deliveries,
        "tips": record.tips,
        "expenses": record.expenses,
        "day_quality": record.day_quality,
        "created_at": record.created_at.isoformat() if record.created_at else None,
        "updated_at": record.updated_at.isoformat() if record.updated_at else None,
    }
