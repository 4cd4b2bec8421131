"""
Outbound email.

``EmailSender`` is the collaborator interface; ``SmtpEmailSender`` talks to a
real SMTP relay and ``LoggingEmailSender`` only logs (used when SMTP_HOST is
not configured). Message builders for the OTP mails live here as well.
"""

import smtplib
from abc import ABC, abstractmethod
from dataclasses import dataclass
from email.message import EmailMessage

from rider_expense.config import Settings
from rider_expense.errors import EmailDeliveryError
from rider_expense.logging_config import get_logger

logger = get_logger(__name__)

APP_TITLE = "Rider Expense"


@dataclass(frozen=True)
class OutgoingEmail:
    to: str
    subject: str
    html: str
    text: str


class EmailSender(ABC):

    @abstractmethod
    def send(self, message: OutgoingEmail) -> None:
        """Deliver the message or raise EmailDeliveryError."""


class SmtpEmailSender(EmailSender):

    def __init__(self, settings: Settings):
        self.settings = settings

    def send(self, message: OutgoingEmail) -> None:
        mail = EmailMessage()
        mail["From"] = self.settings.SENDER_EMAIL
        mail["To"] = message.to
        mail["Subject"] = message.subject
        mail.set_content(message.text)
        mail.add_alternative(message.html, subtype="html")
        try:
            with smtplib.SMTP(self.settings.SMTP_HOST, self.settings.SMTP_PORT, timeout=10) as smtp:
                if self.settings.SMTP_USE_TLS:
                    smtp.starttls()
                if self.settings.SMTP_USER:
                    smtp.login(self.settings.SMTP_USER, self.settings.SMTP_PASSWORD)
                smtp.send_message(mail)
        except (smtplib.SMTPException, OSError) as exc:
            logger.error(f"Failed to send '{message.subject}' to {message.to}", exc_info=True)
            raise EmailDeliveryError(str(exc)) from exc
        logger.info(f"Email '{message.subject}' sent to {message.to}")


class LoggingEmailSender(EmailSender):
    """Development stand-in: writes the plaintext body to the log."""

    def send(self, message: OutgoingEmail) -> None:
        logger.info(f"SMTP not configured; email to {message.to} ({message.subject}):\n{message.text}")


def build_sender(settings: Settings) -> EmailSender:
    if settings.SMTP_HOST:
        return SmtpEmailSender(settings)
    return LoggingEmailSender()


def _otp_block(title: str, otp: str, validity: str) -> str:
    return (
        f'<div style="background:#f5f5f5;padding:15px;border-radius:5px;margin:20px 0;text-align:center;">'
        f'<h3 style="margin-top:0;">{title}</h3>'
        f'<p style="font-size:24px;font-weight:bold;letter-spacing:3px;">{otp}</p>'
        f'<p style="color:#777;">This OTP is valid for {validity}.</p>'
        f'</div>'
    )


def welcome_email(name: str, email: str, otp: str, support_email: str) -> OutgoingEmail:
    html = (
        f'<div style="font-family:Arial,sans-serif;max-width:600px;margin:0 auto;color:#333;">'
        f'<h1 style="text-align:center;">{APP_TITLE}</h1>'
        f'<p>Dear {name},</p>'
        f'<p>Welcome aboard! Your account was registered with <strong>{email}</strong>.</p>'
        f'{_otp_block("Email Verification OTP", otp, "1 hour")}'
        f'<p>Please verify your email address to complete your registration.</p>'
        f'<p>Need help? <a href="mailto:{support_email}">Contact our support team</a></p>'
        f'</div>'
    )
    text = (
        f"Welcome to {APP_TITLE}!\n\n"
        f"Dear {name},\n\n"
        f"Your account was registered with {email}.\n\n"
        f"Email Verification OTP: {otp}\n"
        f"This OTP is valid for 1 hour.\n\n"
        f"Please verify your email address to complete your registration.\n\n"
        f"Need help? Contact: {support_email}\n"
    )
    return OutgoingEmail(to=email, subject=f"Welcome to {APP_TITLE}!", html=html, text=text)


def verification_email(email: str, otp: str) -> OutgoingEmail:
    text = f"Your OTP is {otp}. Valid for 1 hour."
    html = f"<p>{text}</p>"
    return OutgoingEmail(to=email, subject="Account Verification OTP", html=html, text=text)


def reset_email(name: str, email: str, otp: str, support_email: str) -> OutgoingEmail:
    html = (
        f'<div style="font-family:Arial,sans-serif;max-width:600px;margin:0 auto;color:#333;">'
        f'<h1 style="text-align:center;">{APP_TITLE}</h1>'
        f'<p>Dear {name},</p>'
        f'<p>We received a request to reset the password of the account <strong>{email}</strong>.</p>'
        f'{_otp_block("Password Reset OTP", otp, "10 minutes")}'
        f'<p>If you didn\'t request this, please ignore this email.</p>'
        f'<p>Need help? <a href="mailto:{support_email}">Contact our support team</a></p>'
        f'</div>'
    )
    text = (
        f"{APP_TITLE} - Password Reset\n\n"
        f"Dear {name},\n\n"
        f"We received a request to reset the password of the account {email}.\n\n"
        f"Password Reset OTP: {otp}\n"
        f"This OTP is valid for 10 minutes.\n\n"
        f"If you didn't request this, please ignore this email.\n"
        f"Need help? Contact: {support_email}\n"
    )
    return OutgoingEmail(to=email, subject=f"{APP_TITLE} Password Reset Verification", html=html, text=text)
