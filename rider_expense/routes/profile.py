"""
Profile routes: profile data, updates, picture management and account deletion.
"""
from fastapi import APIRouter, Depends

from rider_expense.deps import get_account_service, get_current_user_id
from rider_expense.logging_config import get_logger
from rider_expense.responses import clear_token_cookie, success
from rider_expense.schemas import (
    DeleteAccountIn,
    ProfilePictureIn,
    ProfileUpdateIn,
    profile_user,
    user_data,
)
from rider_expense.services.accounts import AccountService

# Module logger for profile operations
logger = get_logger(__name__)

router = APIRouter()


@router.get("/api/user/data")
def get_user_data(user_id: int = Depends(get_current_user_id), accounts: AccountService = Depends(get_account_service)):
    logger.debug(f"Profile data requested by user {user_id}")
    return success("User data fetched", user=user_data(accounts.get_user(user_id)))


@router.put("/api/auth/update-profile")
def update_profile(
    body: ProfileUpdateIn,
    user_id: int = Depends(get_current_user_id),
    accounts: AccountService = Depends(get_account_service),
):
    user = accounts.update_profile(
        user_id,
        name=body.name,
        employment_type=body.employment_type,
        old_password=body.old_password,
        new_password=body.new_password,
        profile_picture=body.profile_picture,
    )
    return success("Profile updated successfully", user=profile_user(user))


@router.post("/api/auth/upload-profile-picture")
def upload_profile_picture(
    body: ProfilePictureIn,
    user_id: int = Depends(get_current_user_id),
    accounts: AccountService = Depends(get_account_service),
):
    user = accounts.upload_profile_picture(user_id, body.profile_picture)
    return success("Profile picture uploaded successfully", user=profile_user(user))


@router.delete("/api/auth/remove-profile-picture")
def remove_profile_picture(user_id: int = Depends(get_current_user_id), accounts: AccountService = Depends(get_account_service)):
    user = accounts.remove_profile_picture(user_id)
    return success("Profile picture removed successfully", user=profile_user(user))


@router.delete("/api/auth/delete-account")
def delete_account(
    body: DeleteAccountIn,
    user_id: int = Depends(get_current_user_id),
    accounts: AccountService = Depends(get_account_service),
):
    """Delete the account and everything it owns, then end the session."""
    accounts.delete_account(user_id, body.email, body.password)
    return clear_token_cookie(success("Account deleted successfully"))
