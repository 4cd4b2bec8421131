"""
Input validation rules shared by registration, profile and reset flows.
"""
import base64
import binascii
import re

from rider_expense.errors import ValidationError
from rider_expense.models.user import EMPLOYMENT_TYPES

NAME_MAX_LENGTH = 20
PASSWORD_MIN_LENGTH = 8
MAX_PICTURE_BYTES = 5 * 1024 * 1024  # 5MB decoded

_NAME_RE = re.compile(r"[a-zA-Z0-9\s]+")
# ASCII letters and digits plus !@#$%^&* only
_PASSWORD_RE = re.compile(r"(?=.*[a-zA-Z])(?=.*[0-9])[a-zA-Z0-9!@#$%^&*]*")
_PICTURE_PREFIX = "data:image/"


def validate_name(name: str) -> str:
    if len(name) > NAME_MAX_LENGTH:
        raise ValidationError(f"Name must be {NAME_MAX_LENGTH} characters or less")
    if not _NAME_RE.fullmatch(name):
        raise ValidationError("Name can only contain alphabets, numbers, or spaces")
    return name


def validate_password(password: str) -> str:
    """At least 8 chars, one letter, one digit; letters, digits and !@#$%^&* only."""
    if len(password) < PASSWORD_MIN_LENGTH:
        raise ValidationError(f"Password must be at least {PASSWORD_MIN_LENGTH} characters")
    if not _PASSWORD_RE.fullmatch(password):
        raise ValidationError("Password must contain at least one alphabet and one number")
    return password


def validate_employment_type(employment_type: str) -> str:
    if employment_type not in EMPLOYMENT_TYPES:
        raise ValidationError("Invalid employmentType. Must be 'PartTimer' or 'FullTimer'")
    return employment_type


def validate_profile_picture(picture: str) -> str:
    """
    Check an image data URI (``data:image/<type>;base64,<payload>``).

    The decoded payload may not exceed MAX_PICTURE_BYTES.
    """
    if not picture or not picture.startswith(_PICTURE_PREFIX):
        raise ValidationError("Invalid profile picture format")
    header, sep, payload = picture.partition(",")
    if not sep or ";base64" not in header:
        raise ValidationError("Invalid profile picture format")
    try:
        decoded = base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError):
        raise ValidationError("Invalid profile picture format")
    if len(decoded) > MAX_PICTURE_BYTES:
        raise ValidationError("Profile picture size must be 5MB or less")
    return picture
