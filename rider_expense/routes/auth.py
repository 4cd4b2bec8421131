"""
Authentication routes: registration, login/logout, email verification and
password reset.

Routes:
    POST /api/auth/register          - Create or refresh a pending account
    POST /api/auth/login             - Issue the session cookie
    POST /api/auth/logout            - Clear the session cookie
    POST /api/auth/send-verify-otp   - Re-issue the verification OTP
    POST /api/auth/verify-account    - Confirm the verification OTP
    POST /api/auth/is-auth           - Who am I
    POST /api/auth/send-reset-otp    - Start a password reset
    POST /api/auth/verify-reset-otp  - Check a reset OTP
    POST /api/auth/reset-password    - Finish a password reset
"""
from fastapi import APIRouter, Depends, status

from rider_expense.deps import get_auth_service, get_current_user_id, get_otp_service
from rider_expense.logging_config import get_logger
from rider_expense.responses import clear_token_cookie, failure, set_token_cookie, success
from rider_expense.schemas import (
    EmailIn,
    LoginIn,
    OtpIn,
    RegisterIn,
    ResetOtpIn,
    ResetPasswordIn,
    public_user,
    session_user,
)
from rider_expense.services.auth import AuthService
from rider_expense.services.otp import OtpService

# Module logger for authentication operations
logger = get_logger(__name__)

router = APIRouter()


@router.post("/register")
def register(body: RegisterIn, auth: AuthService = Depends(get_auth_service)):
    logger.info(f"Registration attempt for email: {body.email}")
    result = auth.register(body.name, body.email, body.password, body.employment_type)
    user = public_user(result.user)
    if result.email_error:
        action = "created" if result.created else "updated"
        response = failure(
            f"User {action} but failed to send OTP email",
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            error=result.email_error,
            user=user,
        )
    elif result.created:
        response = success(
            "User registered successfully. Verification OTP sent to email.",
            status_code=status.HTTP_201_CREATED,
            user=user,
        )
    else:
        response = success("New verification OTP sent to email.", user=user)
    return set_token_cookie(response, result.token)


@router.post("/login")
def login(body: LoginIn, auth: AuthService = Depends(get_auth_service)):
    logger.info(f"Login attempt for email: {body.email}")
    result = auth.login(body.email, body.password)
    return set_token_cookie(success("Login successful", user=public_user(result.user)), result.token)


@router.post("/logout")
def logout():
    return clear_token_cookie(success("Logged out successfully"))


@router.post("/send-verify-otp")
def send_verify_otp(user_id: int = Depends(get_current_user_id), otp: OtpService = Depends(get_otp_service)):
    dispatch = otp.send_verify_otp(user_id)
    if not dispatch.delivered:
        return failure(dispatch.message, status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, error=dispatch.email_error)
    return success(dispatch.message)


@router.post("/verify-account")
def verify_account(
    body: OtpIn,
    user_id: int = Depends(get_current_user_id),
    otp: OtpService = Depends(get_otp_service),
):
    otp.verify_email(user_id, body.otp)
    return success("Email verified successfully")


@router.post("/is-auth")
def is_authenticated(user_id: int = Depends(get_current_user_id), auth: AuthService = Depends(get_auth_service)):
    return success("Authenticated", user=session_user(auth.current_user(user_id)))


@router.post("/send-reset-otp")
def send_reset_otp(body: EmailIn, otp: OtpService = Depends(get_otp_service)):
    dispatch = otp.send_reset_otp(body.email)
    if not dispatch.delivered:
        return failure(dispatch.message, status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, error=dispatch.email_error)
    return success(dispatch.message)


@router.post("/verify-reset-otp")
def verify_reset_otp(body: ResetOtpIn, otp: OtpService = Depends(get_otp_service)):
    otp.verify_reset_otp(body.email, body.otp)
    return success("OTP verified successfully")


@router.post("/reset-password")
def reset_password(body: ResetPasswordIn, otp: OtpService = Depends(get_otp_service)):
    otp.reset_password(body.email, body.otp, body.new_password, body.confirm_password)
    return success("Password reset successfully")
