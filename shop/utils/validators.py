import re
from typing import Any, Mapping, Sequence

from ..errors import ValidationError

_EMAIL_RE = re.compile(r"^\S+@\S+$")


def require_text(form: Mapping[str, Any], field: str) -> str:
    value = form.get(field)
    if value is None:
        raise ValidationError(field)
    # JSON clients send postal codes and phone numbers as numbers
    if isinstance(value, int) and not isinstance(value, bool):
        value = str(value)
    if not isinstance(value, str):
        raise ValidationError(field, f"{field} is invalid")
    text = value.strip()
    if not text:
        raise ValidationError(field)
    return text


def validate_email(value: str, field: str = "email") -> str:
    if not _EMAIL_RE.match(value):
        raise ValidationError(field, "Invalid email")
    return value


def validate_choice(value: Any, field: str, choices: Sequence[str], default: str) -> str:
    if value is None or value == "":
        value = default
    v = value.strip().upper() if isinstance(value, str) else value
    if v not in choices:
        raise ValidationError(field, f"{field} must be one of {', '.join(choices)}")
    return v
