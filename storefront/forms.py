# storefront/forms.py
# Field parsing shared by the JSON endpoints.
import re
from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation

from flask import request

from .errors import ValidationError

EMAIL_REGEX = re.compile(r"[^@]+@[^@]+\.[^@]+")

TRUTHY = {'1', 'true', 'yes', 'on'}


def payload():
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError('Request body must be a JSON object.')
    return data


def text(data, field, required=False, label=None):
    value = data.get(field)
    value = str(value).strip() if value is not None else ''
    if required and not value:
        raise ValidationError(f"{label or field.replace('_', ' ').capitalize()} is required.")
    return value or None


def email(data, field='email', required=True):
    value = text(data, field, required=required)
    if value is None:
        return None
    value = value.lower()
    if not EMAIL_REGEX.match(value):
        raise ValidationError('Invalid email format.')
    return value


def money(data, field, required=False):
    raw = data.get(field)
    if raw is None or str(raw).strip() == '':
        if required:
            raise ValidationError(f"{field.replace('_', ' ').capitalize()} is required.")
        return None
    try:
        value = Decimal(str(raw).strip())
        if value < 0 or not value.is_finite():
            raise ValueError()
    except (ValueError, InvalidOperation):
        raise ValidationError(f"Invalid {field.replace('_', ' ')}. Must be a positive number.")
    return value


def integer(data, field, default=None, minimum=None, maximum=None):
    raw = data.get(field)
    if raw is None or str(raw).strip() == '':
        if default is None:
            raise ValidationError(f"{field.replace('_', ' ').capitalize()} is required.")
        return default
    if isinstance(raw, bool):
        raise ValidationError(f"Invalid {field.replace('_', ' ')}.")
    try:
        value = int(str(raw).strip())
    except ValueError:
        raise ValidationError(f"Invalid {field.replace('_', ' ')}.")
    if minimum is not None and value < minimum:
        raise ValidationError(f"{field.replace('_', ' ').capitalize()} must be at least {minimum}.")
    if maximum is not None and value > maximum:
        raise ValidationError(f"{field.replace('_', ' ').capitalize()} must be at most {maximum}.")
    return value


def flag(value):
    if isinstance(value, bool):
        return value
    if value is None:
        return False
    return str(value).strip().lower() in TRUTHY


def timestamp(data, field):
    """Parse an ISO-8601 value into naive UTC; blank means None."""
    raw = data.get(field)
    if raw is None or str(raw).strip() == '':
        return None
    raw = str(raw).strip()
    if raw.endswith('Z'):
        raw = raw[:-1] + '+00:00'
    try:
        value = datetime.fromisoformat(raw)
    except ValueError:
        raise ValidationError(f"Invalid {field.replace('_', ' ')}. Use an ISO date.")
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def choice(data, field, choices, default=None):
    value = text(data, field) or default
    if value not in choices:
        raise ValidationError(f"Invalid {field.replace('_', ' ')}. Choose one of: {', '.join(choices)}.")
    return value
