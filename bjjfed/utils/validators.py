"""Validation helpers for bjjfed."""
from __future__ import annotations

import re
from typing import Any, Dict, List, Tuple

from apscheduler.triggers.cron import CronTrigger

from bjjfed.models import VALID_PAYMENT_STATUSES, VALID_STATUSES

MEMBER_ID_PATTERN = re.compile(r'^[A-Za-z0-9_-]{1,64}$')

MEMBER_TEXT_FIELDS = {
    'id': 64,
    'name': 120,
    'email': 254,
    'belt': 40,
    'teacher_id': 64,
    'branch': 120,
    'username': 50,
}


def validate_cron_expression(expression: str) -> Tuple[bool, str]:
    """Validate cron expression format."""
    if not expression:
        return False, "Cron expression is required"
    if not isinstance(expression, str):
        return False, "Cron expression must be a string"
    try:
        CronTrigger.from_crontab(expression)
        return True, ""
    except Exception as exc:
        return False, f"Invalid cron expression: {str(exc)}"


def validate_required_fields(data: Dict, required_fields: List[str]) -> Tuple[bool, str]:
    """Validate that required fields are present in a dictionary."""
    for field in required_fields:
        if field not in data or data[field] is None or data[field] == '':
            return False, f"Missing required field: {field}"
    return True, ""


def validate_email(email: str) -> Tuple[bool, str]:
    if not email:
        return True, ""
    if not re.match(r'^[^@\s]+@[^@\s]+\.[^@\s]+$', email):
        return False, "Invalid email address"
    return True, ""


def validate_member_payload(data: Dict[str, Any], require_name: bool = True) -> Tuple[bool, str]:
    """Validate the writable fields of a teacher or student payload."""
    if not isinstance(data, dict):
        return False, "Request body must be a JSON object"
    if require_name:
        valid, error = validate_required_fields(data, ['name'])
        if not valid:
            return valid, error
    if 'status' in data and data['status'] not in VALID_STATUSES:
        return False, f"Status must be one of: {', '.join(VALID_STATUSES)}"
    if 'payment_status' in data and data['payment_status'] not in VALID_PAYMENT_STATUSES:
        return False, f"Payment status must be one of: {', '.join(VALID_PAYMENT_STATUSES)}"
    if 'classes' in data and not (
        isinstance(data['classes'], list) and all(isinstance(c, str) for c in data['classes'])
    ):
        return False, "Classes must be a list of names"
    if data.get('id') and not (isinstance(data['id'], str) and MEMBER_ID_PATTERN.fullmatch(data['id'])):
        return False, "id may only contain letters, digits, '-' and '_'"
    for field, max_length in MEMBER_TEXT_FIELDS.items():
        value = data.get(field)
        if value is not None and not isinstance(value, str):
            return False, f"{field} must be a string"
        if value and len(value) > max_length:
            return False, f"{field} is too long"
    return validate_email(data.get('email', ''))


def sanitize_string(value: str, max_length: int = 255) -> str:
    """Sanitize string input."""
    if not value:
        return ""
    value = re.sub(r'[\x00-\x1f\x7f-\x9f]', '', str(value))
    return value[:max_length].strip()
