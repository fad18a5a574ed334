"""Normalization of user-supplied identity fields."""

from email_validator import EmailNotValidError, validate_email

from projecthub.models.user import NAME_MAX_LENGTH


def normalize_email(value: str | None) -> str | None:
    """Trim and lowercase an email address.

    Returns None when the value is missing or not a syntactically valid address.
    """
    if not value or not isinstance(value, str):
        return None
    candidate = value.strip().lower()
    try:
        validate_email(candidate, check_deliverability=False)
    except EmailNotValidError:
        return None
    return candidate


def normalize_name(value: str | None) -> str | None:
    """Trim a display name; None when empty or too long."""
    if not value or not isinstance(value, str):
        return None
    name = value.strip()
    if not name or len(name) > NAME_MAX_LENGTH:
        return None
    return name
