"""
Registration, login and session identity.
"""

from dataclasses import dataclass
from typing import Callable, Optional

from rider_expense.config import Settings
from rider_expense.errors import AuthenticationError, ConflictError, NotFoundError, ValidationError
from rider_expense.logging_config import get_logger
from rider_expense.models.user import User, salary_for
from rider_expense.repositories.base import UserRepository
from rider_expense.services.email import EmailSender, welcome_email
from rider_expense.services.otp import deliver, issue_verify_otp
from rider_expense.utils.auth import create_access_token, hash_password, verify_password
from rider_expense.utils.dates import utcnow
from rider_expense.utils.validation import validate_employment_type, validate_name, validate_password

logger = get_logger(__name__)


@dataclass
class AuthResult:
    user: User
    token: str
    created: bool = False
    email_error: Optional[str] = None


class AuthService:

    def __init__(self, users: UserRepository, sender: EmailSender, settings: Settings, clock: Callable = utcnow):
        self.users = users
        self.sender = sender
        self.settings = settings
        self.clock = clock

    def register(
        self,
        name: Optional[str],
        email: Optional[str],
        password: Optional[str],
        employment_type: Optional[str],
    ) -> AuthResult:
        """
        Create an unverified account, or refresh a pending one.

        An existing unverified account for the same email gets the new name,
        password, classification and a fresh OTP instead of a second row.
        """
        if not name or not email or not password or not employment_type:
            raise ValidationError("All fields are required: name, email, password, employmentType")
        validate_name(name)
        validate_password(password)
        validate_employment_type(employment_type)
        email = email.strip()
        now = self.clock()

        user = self.users.get_by_email(email)
        if user is not None:
            if user.is_account_verified:
                logger.warning(f"Registration failed - email already verified: {email}")
                raise ConflictError("User already exists with this email")
            user.name = name
            user.password_hash = hash_password(password)
            user.set_employment_type(employment_type)
            otp = issue_verify_otp(user, now)
            user = self.users.save(user)
            created = False
            logger.info(f"Pending registration refreshed for {email}")
        else:
            user = User(
                name=name,
                email=email,
                password_hash=hash_password(password),
                employment_type=employment_type,
                fixed_salary=salary_for(employment_type),
                is_account_verified=False,
                account_created_at=now,
            )
            otp = issue_verify_otp(user, now)
            user = self.users.add(user)
            created = True
            logger.info(f"New user registered: {email} ({employment_type})")

        token = create_access_token(user.id)
        error = deliver(self.sender, welcome_email(user.name, user.email, otp, self.settings.SUPPORT_EMAIL))
        return AuthResult(user=user, token=token, created=created, email_error=error)

    def login(self, email: Optional[str], password: Optional[str]) -> AuthResult:
        if not email or not password:
            raise ValidationError("Email and password are required")
        user = self.users.get_by_email(email.strip())
        if user is None:
            logger.warning(f"Login failed - unknown email: {email}")
            raise AuthenticationError("Invalid credentials")
        if not user.is_account_verified:
            logger.warning(f"Login refused - account not verified: {email}")
            raise AuthenticationError("Sign up again and verify your email to login")
        if not verify_password(password, user.password_hash):
            logger.warning(f"Login failed - wrong password: {email}")
            raise AuthenticationError("Invalid credentials")
        logger.info(f"Login successful for user {user.id}")
        return AuthResult(user=user, token=create_access_token(user.id))

    def current_user(self, user_id: int) -> User:
        user = self.users.get(user_id)
        if user is None:
            raise NotFoundError("User not found")
        return user
