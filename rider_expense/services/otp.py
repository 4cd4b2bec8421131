"""
One-time codes for email verification and password reset.

Verification and reset codes live in separate fields with separate
lifetimes (1 hour and 10 minutes). Codes are six decimal digits drawn from
``secrets``.
"""

import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable, Optional

from rider_expense.config import Settings
from rider_expense.errors import AuthenticationError, EmailDeliveryError, NotFoundError, ValidationError
from rider_expense.logging_config import get_logger
from rider_expense.models.user import User
from rider_expense.repositories.base import UserRepository
from rider_expense.services.email import EmailSender, OutgoingEmail, reset_email, verification_email
from rider_expense.utils.auth import hash_password
from rider_expense.utils.dates import utcnow
from rider_expense.utils.validation import validate_password

logger = get_logger(__name__)

VERIFY_OTP_TTL = timedelta(hours=1)
RESET_OTP_TTL = timedelta(minutes=10)


@dataclass
class OtpDispatch:
    message: str
    email_error: Optional[str] = None

    @property
    def delivered(self) -> bool:
        return self.email_error is None


def generate_otp() -> str:
    """Uniform over 100000-999999."""
    return str(100000 + secrets.randbelow(900000))


def issue_verify_otp(user: User, now: datetime) -> str:
    otp = generate_otp()
    user.verify_otp = otp
    user.verify_otp_expire_at = now + VERIFY_OTP_TTL
    return otp


def issue_reset_otp(user: User, now: datetime) -> str:
    otp = generate_otp()
    user.reset_otp = otp
    user.reset_otp_expire_at = now + RESET_OTP_TTL
    return otp


def check_otp(stored: Optional[str], expires_at: Optional[datetime], otp: str, now: datetime):
    """Raise ValidationError unless ``otp`` matches a live stored code."""
    if not stored or stored != otp:
        raise ValidationError("Invalid OTP")
    if expires_at is None or expires_at < now:
        raise ValidationError("OTP has expired")


def deliver(sender: EmailSender, message: OutgoingEmail) -> Optional[str]:
    """Send a message; return the failure text instead of raising."""
    try:
        sender.send(message)
    except EmailDeliveryError as exc:
        logger.error(f"Email delivery to {message.to} failed: {exc.message}")
        return exc.message
    return None


class OtpService:

    def __init__(self, users: UserRepository, sender: EmailSender, settings: Settings, clock: Callable = utcnow):
        self.users = users
        self.sender = sender
        self.settings = settings
        self.clock = clock

    def _user_by_email(self, email: Optional[str]) -> User:
        user = self.users.get_by_email(email.strip())
        if user is None:
            raise NotFoundError("User not found")
        return user

    def send_verify_otp(self, user_id: int) -> OtpDispatch:
        user = self.users.get(user_id)
        if user is None:
            raise NotFoundError("User not found")
        if user.is_account_verified:
            return OtpDispatch("Account is already verified")
        otp = issue_verify_otp(user, self.clock())
        self.users.save(user)
        logger.info(f"Verification OTP re-issued for user {user.id}")
        error = deliver(self.sender, verification_email(user.email, otp))
        if error:
            return OtpDispatch("OTP generated but failed to send email", error)
        return OtpDispatch("Verification OTP sent to email")

    def verify_email(self, user_id: int, otp: Optional[str]) -> User:
        if not otp:
            raise ValidationError("OTP is required")
        user = self.users.get(user_id)
        if user is None:
            raise NotFoundError("User not found")
        check_otp(user.verify_otp, user.verify_otp_expire_at, otp, self.clock())
        user.is_account_verified = True
        user.verify_otp = None
        user.verify_otp_expire_at = None
        self.users.save(user)
        logger.info(f"Email verified for user {user.id}")
        return user

    def send_reset_otp(self, email: Optional[str]) -> OtpDispatch:
        if not email:
            raise ValidationError("Email is required")
        user = self._user_by_email(email)
        if not user.is_account_verified:
            raise AuthenticationError("Please verify your email first")
        otp = issue_reset_otp(user, self.clock())
        self.users.save(user)
        logger.info(f"Password reset OTP issued for user {user.id}")
        error = deliver(self.sender, reset_email(user.name, user.email, otp, self.settings.SUPPORT_EMAIL))
        if error:
            return OtpDispatch("OTP generated but failed to send email", error)
        return OtpDispatch("Password reset OTP sent to email")

    def verify_reset_otp(self, email: Optional[str], otp: Optional[str]) -> None:
        """Check only; the code stays valid until the reset completes."""
        if not email or not otp:
            raise ValidationError("Email and OTP are required")
        user = self._user_by_email(email)
        check_otp(user.reset_otp, user.reset_otp_expire_at, otp, self.clock())

    def reset_password(
        self,
        email: Optional[str],
        otp: Optional[str],
        new_password: Optional[str],
        confirm_password: Optional[str],
    ) -> None:
        if not email or not otp or not new_password or not confirm_password:
            raise ValidationError("All fields are required")
        validate_password(new_password)
        if new_password != confirm_password:
            raise ValidationError("Passwords do not match")
        user = self._user_by_email(email)
        check_otp(user.reset_otp, user.reset_otp_expire_at, otp, self.clock())
        user.password_hash = hash_password(new_password)
        user.reset_otp = None
        user.reset_otp_expire_at = None
        self.users.save(user)
        logger.info(f"Password reset completed for user {user.id}")
