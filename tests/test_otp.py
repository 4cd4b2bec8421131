"""
Tests for email verification and password reset codes.
"""

import pytest
from datetime import datetime, timedelta
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from rider_expense.config import get_settings
from rider_expense.errors import AuthenticationError, NotFoundError, ValidationError
from rider_expense.models.user import FULL_TIMER, User, salary_for
from rider_expense.services.otp import (
    RESET_OTP_TTL,
    VERIFY_OTP_TTL,
    OtpService,
    check_otp,
    generate_otp,
)
from rider_expense.utils.auth import hash_password, verify_password

from tests.conftest import DISALLOWED_PASSWORDS, TEST_PASSWORD
from tests.fakes import InMemoryUserRepository, RecordingEmailSender


class Clock:
    """Settable clock for expiry tests."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture
def clock():
    return Clock(datetime(2026, 10, 17, 9, 0))


@pytest.fixture
def users():
    return InMemoryUserRepository()


@pytest.fixture
def sender():
    return RecordingEmailSender()


@pytest.fixture
def service(users, sender, clock):
    return OtpService(users, sender, get_settings(), clock=clock)


def add_user(users, email="rider@example.com", verified=False):
    return users.add(User(
        name="Rider",
        email=email,
        password_hash=hash_password(TEST_PASSWORD),
        employment_type=FULL_TIMER,
        fixed_salary=salary_for(FULL_TIMER),
        is_account_verified=verified,
        account_created_at=datetime(2026, 9, 1),
    ))


class TestOtpPrimitives:

    def test_generated_codes_are_six_digits(self):
        for _ in range(200):
            otp = generate_otp()
            assert len(otp) == 6
            assert 100000 <= int(otp) <= 999999

    def test_cleared_code_never_matches(self):
        with pytest.raises(ValidationError):
            check_otp(None, None, "", datetime(2026, 1, 1))
        with pytest.raises(ValidationError):
            check_otp("", datetime(2030, 1, 1), "", datetime(2026, 1, 1))

    def test_wrong_code(self):
        with pytest.raises(ValidationError, match="Invalid OTP"):
            check_otp("123456", datetime(2030, 1, 1), "654321", datetime(2026, 1, 1))

    def test_expired_code(self):
        with pytest.raises(ValidationError, match="OTP has expired"):
            check_otp("123456", datetime(2026, 1, 1, 9, 0), "123456", datetime(2026, 1, 1, 9, 1))

    def test_live_code(self):
        check_otp("123456", datetime(2026, 1, 1, 9, 0), "123456", datetime(2026, 1, 1, 9, 0))


class TestVerificationService:
    """Test suite for verification OTPs at the service level."""

    def test_send_issues_code_for_one_hour(self, service, users, sender, clock):
        user = add_user(users)

        dispatch = service.send_verify_otp(user.id)

        assert dispatch.delivered
        assert user.verify_otp_expire_at == clock.now + VERIFY_OTP_TTL
        assert sender.sent[0].to == user.email
        assert user.verify_otp in sender.sent[0].text

    def test_already_verified(self, service, users, sender):
        user = add_user(users, verified=True)

        dispatch = service.send_verify_otp(user.id)

        assert dispatch.message == "Account is already verified"
        assert sender.sent == []
        assert user.verify_otp is None

    def test_delivery_failure_keeps_code(self, service, users, sender):
        user = add_user(users)
        sender.fail = True

        dispatch = service.send_verify_otp(user.id)

        assert not dispatch.delivered
        assert dispatch.message == "OTP generated but failed to send email"
        assert user.verify_otp is not None

    def test_verify_marks_account_and_clears_code(self, service, users):
        user = add_user(users)
        service.send_verify_otp(user.id)

        service.verify_email(user.id, user.verify_otp)

        assert user.is_account_verified is True
        assert user.verify_otp is None
        assert user.verify_otp_expire_at is None

    def test_code_cannot_be_used_twice(self, service, users):
        user = add_user(users)
        service.send_verify_otp(user.id)
        otp = user.verify_otp
        service.verify_email(user.id, otp)

        with pytest.raises(ValidationError):
            service.verify_email(user.id, otp)

    def test_verify_after_expiry(self, service, users, clock):
        user = add_user(users)
        service.send_verify_otp(user.id)
        clock.now += VERIFY_OTP_TTL + timedelta(seconds=1)

        with pytest.raises(ValidationError, match="expired"):
            service.verify_email(user.id, user.verify_otp)
        assert user.is_account_verified is False

    def test_missing_code(self, service, users):
        user = add_user(users)

        with pytest.raises(ValidationError):
            service.verify_email(user.id, None)


class TestResetService:
    """Test suite for password reset OTPs at the service level."""

    def test_reset_code_lives_ten_minutes(self, service, users, clock):
        user = add_user(users, verified=True)

        service.send_reset_otp(user.email)

        assert user.reset_otp_expire_at == clock.now + RESET_OTP_TTL

    def test_unverified_account_cannot_reset(self, service, users):
        user = add_user(users)

        with pytest.raises(AuthenticationError, match="verify your email"):
            service.send_reset_otp(user.email)

    def test_unknown_email(self, service):
        with pytest.raises(NotFoundError):
            service.send_reset_otp("ghost@example.com")

    def test_verify_reset_is_read_only(self, service, users):
        user = add_user(users, verified=True)
        service.send_reset_otp(user.email)
        otp = user.reset_otp

        service.verify_reset_otp(user.email, otp)
        service.verify_reset_otp(user.email, otp)

        assert user.reset_otp == otp

    def test_reset_changes_password_and_clears_code(self, service, users):
        user = add_user(users, verified=True)
        service.send_reset_otp(user.email)

        service.reset_password(user.email, user.reset_otp, "Fresh1234", "Fresh1234")

        assert verify_password("Fresh1234", user.password_hash)
        assert user.reset_otp is None
        assert user.reset_otp_expire_at is None

    def test_reset_after_expiry(self, service, users, clock):
        user = add_user(users, verified=True)
        service.send_reset_otp(user.email)
        clock.now += RESET_OTP_TTL + timedelta(minutes=1)

        with pytest.raises(ValidationError, match="expired"):
            service.reset_password(user.email, user.reset_otp, "Fresh1234", "Fresh1234")
        assert verify_password(TEST_PASSWORD, user.password_hash)

    def test_mismatched_passwords(self, service, users):
        user = add_user(users, verified=True)
        service.send_reset_otp(user.email)

        with pytest.raises(ValidationError, match="Passwords do not match"):
            service.reset_password(user.email, user.reset_otp, "Fresh1234", "Fresh12345")

    def test_weak_new_password(self, service, users):
        user = add_user(users, verified=True)
        service.send_reset_otp(user.email)

        with pytest.raises(ValidationError):
            service.reset_password(user.email, user.reset_otp, "short", "short")

    def test_missing_fields(self, service):
        with pytest.raises(ValidationError, match="All fields are required"):
            service.reset_password("rider@example.com", None, "Fresh1234", "Fresh1234")


class TestOtpRoutes:
    """Test suite for the OTP endpoints."""

    def test_verify_account_flow(self, pending_client: TestClient, db_session: Session, unverified_user: User, email_sender):
        response = pending_client.post("/api/auth/send-verify-otp")
        assert response.status_code == 200
        assert len(email_sender.sent) == 1

        db_session.expire_all()
        otp = db_session.get(User, unverified_user.id).verify_otp
        response = pending_client.post("/api/auth/verify-account", json={"otp": otp})

        assert response.status_code == 200
        assert response.json()["message"] == "Email verified successfully"
        db_session.expire_all()
        assert db_session.get(User, unverified_user.id).is_account_verified is True

    def test_verify_account_wrong_code(self, pending_client: TestClient):
        pending_client.post("/api/auth/send-verify-otp")

        response = pending_client.post("/api/auth/verify-account", json={"otp": "000000"})

        assert response.status_code == 400
        assert response.json()["message"] == "Invalid OTP"

    def test_send_verify_when_verified(self, auth_client: TestClient, email_sender):
        response = auth_client.post("/api/auth/send-verify-otp")

        assert response.status_code == 200
        assert response.json()["success"] is True
        assert response.json()["message"] == "Account is already verified"
        assert email_sender.sent == []

    def test_send_verify_email_failure(self, pending_client: TestClient, email_sender):
        email_sender.fail = True

        response = pending_client.post("/api/auth/send-verify-otp")

        assert response.status_code == 500
        assert response.json()["success"] is False

    def test_send_verify_requires_session(self, client: TestClient):
        response = client.post("/api/auth/send-verify-otp")

        assert response.status_code == 401

    def test_password_reset_flow(self, client: TestClient, db_session: Session, test_user: User, email_sender):
        response = client.post("/api/auth/send-reset-otp", json={"email": test_user.email})
        assert response.status_code == 200
        assert email_sender.sent[0].to == test_user.email

        db_session.expire_all()
        otp = db_session.get(User, test_user.id).reset_otp

        response = client.post("/api/auth/verify-reset-otp", json={"email": test_user.email, "otp": otp})
        assert response.status_code == 200

        response = client.post("/api/auth/reset-password", json={
            "email": test_user.email,
            "otp": otp,
            "newPassword": "Changed123",
            "confirmPassword": "Changed123",
        })
        assert response.status_code == 200

        response = client.post("/api/auth/login", json={"email": test_user.email, "password": "Changed123"})
        assert response.status_code == 200

    @pytest.mark.parametrize("password", DISALLOWED_PASSWORDS)
    def test_reset_rejects_disallowed_characters(self, client: TestClient, db_session: Session, test_user: User, password):
        client.post("/api/auth/send-reset-otp", json={"email": test_user.email})
        db_session.expire_all()
        otp = db_session.get(User, test_user.id).reset_otp

        response = client.post("/api/auth/reset-password", json={
            "email": test_user.email,
            "otp": otp,
            "newPassword": password,
            "confirmPassword": password,
        })

        assert response.status_code == 400
        db_session.expire_all()
        user = db_session.get(User, test_user.id)
        assert verify_password(TEST_PASSWORD, user.password_hash)
        assert user.reset_otp == otp

    def test_reset_for_unverified_account(self, client: TestClient, unverified_user: User):
        response = client.post("/api/auth/send-reset-otp", json={"email": unverified_user.email})

        assert response.status_code == 401
        assert response.json()["message"] == "Please verify your email first"

    def test_reset_for_unknown_email(self, client: TestClient):
        response = client.post("/api/auth/send-reset-otp", json={"email": "ghost@example.com"})

        assert response.status_code == 404

    def test_verify_reset_without_request(self, client: TestClient, test_user: User):
        response = client.post("/api/auth/verify-reset-otp", json={"email": test_user.email, "otp": "123456"})

        assert response.status_code == 400
        assert response.json()["message"] == "Invalid OTP"
