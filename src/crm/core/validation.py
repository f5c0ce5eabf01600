"""Field rules for client create and update payloads."""
import re

from email_validator import EmailNotValidError, validate_email

from src.crm_client.schemas import ClientPayload
from src.shared.exceptions import FieldError

PHONE_PATTERN = re.compile(r"[0-9]{3}-[0-9]{3}-[0-9]{4}")

# (attribute, wire name, label, max length)
REQUIRED_FIELDS = [
    ("first_name", "firstName", "First name", 100),
    ("last_name", "lastName", "Last name", 100),
]

OPTIONAL_FIELDS = [
    ("company", "company", "Company", 255),
    ("address_line1", "addressLine1", "Address line 1", 255),
    ("address_line2", "addressLine2", "Address line 2", 255),
    ("city", "city", "City", 100),
    ("state", "state", "State", 100),
    ("postal_code", "postalCode", "Postal code", 20),
    ("country", "country", "Country", 100),
]

EMAIL_MAX_LENGTH = 255
PHONE_MAX_LENGTH = 20


def _is_blank(value: str | None) -> bool:
    return value is None or not value.strip()


def _is_email_shaped(value: str) -> bool:
    try:
        validate_email(value, check_deliverability=False, globally_deliverable=False)
    except EmailNotValidError:
        return False
    return True


def validate_client_payload(payload: ClientPayload) -> list[FieldError]:
    """
    Check a create or update payload against every field rule.

    Rules are independent and all of them run; the store is never consulted,
    so email uniqueness is left to the caller.

    Args:
        payload: The incoming client fields

    Returns:
        Every violation found, empty when the payload is valid
    """
    errors: list[FieldError] = []

    for attr, field, label, max_length in REQUIRED_FIELDS:
        value = getattr(payload, attr)
        if _is_blank(value):
            errors.append(FieldError(field, f"{label} is required."))
        elif len(value) > max_length:
            errors.append(FieldError(field, f"{label} must not exceed {max_length} characters."))

    email = payload.email
    if _is_blank(email):
        errors.append(FieldError("email", "Email is required."))
    else:
        if len(email) > EMAIL_MAX_LENGTH:
            errors.append(FieldError("email", f"Email must not exceed {EMAIL_MAX_LENGTH} characters."))
        if not _is_email_shaped(email):
            errors.append(FieldError("email", "Email must be a valid email address."))

    phone = payload.phone
    if phone:
        if len(phone) > PHONE_MAX_LENGTH:
            errors.append(FieldError("phone", f"Phone must not exceed {PHONE_MAX_LENGTH} characters."))
        if not PHONE_PATTERN.fullmatch(phone):
            errors.append(FieldError("phone", "Phone must be in format XXX-XXX-XXXX."))

    for attr, field, label, max_length in OPTIONAL_FIELDS:
        value = getattr(payload, attr)
        if value is not None and len(value) > max_length:
            errors.append(FieldError(field, f"{label} must not exceed {max_length} characters."))

    return errors
