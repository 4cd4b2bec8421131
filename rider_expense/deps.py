"""
FastAPI dependencies (DB session, repositories, services, authentication)
"""
from fastapi import Depends, Request
from sqlalchemy.orm import Session

from rider_expense.config import get_settings
from rider_expense.db import get_db
from rider_expense.errors import AuthenticationError
from rider_expense.logging_config import get_logger
from rider_expense.repositories.sql import (
    SqlDailyRecordRepository,
    SqlMonthlySummaryRepository,
    SqlUserRepository,
)
from rider_expense.responses import TOKEN_COOKIE
from rider_expense.services.accounts import AccountService
from rider_expense.services.auth import AuthService
from rider_expense.services.billing import BillingService
from rider_expense.services.email import EmailSender, build_sender
from rider_expense.services.ledger import LedgerService
from rider_expense.services.otp import OtpService
from rider_expense.utils.auth import decode_access_token

logger = get_logger(__name__)


def get_email_sender() -> EmailSender:
    return build_sender(get_settings())


def get_current_user_id(request: Request) -> int:
    """
    Resolve the session cookie to a user id.

    Raises:
        AuthenticationError: token missing, malformed, tampered or expired
    """
    token = request.cookies.get(TOKEN_COOKIE)
    if not token:
        raise AuthenticationError("Not authorized - Please login first")
    user_id = decode_access_token(token)
    if user_id is None:
        logger.info(f"Rejected session token on {request.method} {request.url.path}")
        raise AuthenticationError("Session expired - Please login again")
    return user_id


def get_auth_service(db: Session = Depends(get_db), sender: EmailSender = Depends(get_email_sender)) -> AuthService:
    return AuthService(SqlUserRepository(db), sender, get_settings())


def get_otp_service(db: Session = Depends(get_db), sender: EmailSender = Depends(get_email_sender)) -> OtpService:
    return OtpService(SqlUserRepository(db), sender, get_settings())


def get_account_service(db: Session = Depends(get_db)) -> AccountService:
    return AccountService(SqlUserRepository(db), SqlDailyRecordRepository(db), SqlMonthlySummaryRepository(db))


def get_billing_service(db: Session = Depends(get_db)) -> BillingService:
    return BillingService(SqlUserRepository(db), SqlDailyRecordRepository(db), SqlMonthlySummaryRepository(db))


def get_ledger_service(db: Session = Depends(get_db)) -> LedgerService:
    users = SqlUserRepository(db)
    records = SqlDailyRecordRepository(db)
    billing = BillingService(users, records, SqlMonthlySummaryRepository(db))
    return LedgerService(users, records, billing)
