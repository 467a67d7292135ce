import math
from datetime import datetime
from flask import abort, request


def form_text(name, required=False, label=None):
    """
    Stripped form value, or None when blank.
    Aborts with 400 if the field is required and missing.
    """
    value = (request.form.get(name) or '').strip()
    if not value:
        if required:
            abort(400, description=f"{label or name} is required.")
        return None
    return value


def parse_date(value, label='Date', required=True):
    if not value:
        if required:
            abort(400, description=f"{label} is required.")
        return None
    try:
        return datetime.strptime(value.strip(), '%Y-%m-%d').date()
    except ValueError:
        abort(400, description=f"{label} must be a date in YYYY-MM-DD format.")


def parse_month(value, label='Payment for month'):
    """Accepts 'YYYY-MM' (month input) or a full date; returns the 1st of that month."""
    if value and len(value.strip()) == 7:
        value = f"{value.strip()}-01"
    return parse_date(value, label).replace(day=1)


def parse_amount(value, label='Amount', required=True):
    if value is None or str(value).strip() == '':
        if required:
            abort(400, description=f"{label} is required.")
        return 0.0
    try:
        amount = float(value)
    except (TypeError, ValueError):
        abort(400, description=f"{label} must be a number.")
    if not math.isfinite(amount):
        abort(400, description=f"{label} must be a number.")
    return amount


def parse_id(value, label='Id'):
    try:
        return int(value)
    except (TypeError, ValueError):
        abort(400, description=f"{label} is required.")


def parse_choice(value, choices, label='Status', default=None):
    if not value:
        if default is not None:
            return default
        abort(400, description=f"{label} is required.")
    if value not in choices:
        abort(400, description=f"{label} must be one of: {', '.join(choices)}.")
    return value
