"""
Profile management and account deletion.
"""

from typing import Optional

from rider_expense.errors import AuthenticationError, NotFoundError, ValidationError
from rider_expense.logging_config import get_logger
from rider_expense.models.user import User
from rider_expense.repositories.base import DailyRecordRepository, MonthlySummaryRepository, UserRepository
from rider_expense.utils.auth import hash_password, verify_password
from rider_expense.utils.validation import (
    validate_employment_type,
    validate_name,
    validate_password,
    validate_profile_picture,
)

logger = get_logger(__name__)


class AccountService:

    def __init__(
        self,
        users: UserRepository,
        records: DailyRecordRepository,
        summaries: MonthlySummaryRepository,
    ):
        self.users = users
        self.records = records
        self.summaries = summaries

    def get_user(self, user_id: int) -> User:
        user = self.users.get(user_id)
        if user is None:
            raise NotFoundError("User not found")
        return user

    def update_profile(
        self,
        user_id: int,
        name: Optional[str] = None,
        employment_type: Optional[str] = None,
        old_password: Optional[str] = None,
        new_password: Optional[str] = None,
        profile_picture: Optional[str] = None,
    ) -> User:
        """Apply whichever fields were supplied; at least one must change."""
        user = self.get_user(user_id)
        changed = []

        if name and name != user.name:
            validate_name(name)
            user.name = name
            changed.append("name")

        if employment_type and employment_type != user.employment_type:
            validate_employment_type(employment_type)
            user.set_employment_type(employment_type)
            changed.append("employmentType")

        if new_password:
            if not old_password:
                raise ValidationError("Current password is required to set new password")
            if not verify_password(old_password, user.password_hash):
                logger.warning(f"Profile update refused - wrong current password for user {user_id}")
                raise AuthenticationError("Current password is incorrect")
            validate_password(new_password)
            user.password_hash = hash_password(new_password)
            changed.append("password")

        if profile_picture:
            validate_profile_picture(profile_picture)
            user.profile_picture = profile_picture
            changed.append("profilePicture")

        if not changed:
            raise ValidationError("No changes provided")

        user = self.users.save(user)
        logger.info(f"Profile updated for user {user_id}: {', '.join(changed)}")
        return user

    def upload_profile_picture(self, user_id: int, picture: Optional[str]) -> User:
        if not picture:
            raise ValidationError("Invalid or missing profile picture")
        validate_profile_picture(picture)
        user = self.get_user(user_id)
        user.profile_picture = picture
        user = self.users.save(user)
        logger.info(f"Profile picture uploaded for user {user_id}")
        return user

    def remove_profile_picture(self, user_id: int) -> User:
        user = self.get_user(user_id)
        if not user.profile_picture:
            raise ValidationError("No profile picture to remove")
        user.profile_picture = None
        user = self.users.save(user)
        logger.info(f"Profile picture removed for user {user_id}")
        return user

    def delete_account(self, user_id: int, email: Optional[str], password: Optional[str]) -> None:
        """Delete the user after removing every record and summary they own."""
        if not email or not password:
            raise ValidationError("Email and password are required")
        user = self.get_user(user_id)
        if user.email != email.strip():
            raise AuthenticationError("Email does not match your account")
        if not verify_password(password, user.password_hash):
            logger.warning(f"Account deletion refused - wrong password for user {user_id}")
            raise AuthenticationError("Incorrect password")

        # Children first so no summary or record outlives its owner.
        records = self.records.delete_for_user(user_id)
        summaries = self.summaries.delete_for_user(user_id)
        self.users.delete(user_id)
        logger.info(f"Account {user_id} deleted ({records} records, {summaries} summaries)")
