# finance_api/validation.py
"""
Request validation for the CRUD and auth endpoints.

Every validator returns a ``(clean, error)`` pair: ``clean`` is a dict of
snake_case column values ready to store, ``error`` a message for a 400.
Exactly one of the two is None.
"""
import re
from datetime import datetime

from .derivations import goal_status, percentage_used, to_number

DATE_FORMATS = ["%Y-%m-%d", "%d-%m-%Y", "%Y/%m/%d", "%d/%m/%Y"]
TRANSACTION_TYPES = ("income", "expense")
EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
MAX_NOTES_LENGTH = 1000
# largest value SQLite stores in an INTEGER column
SQLITE_MAX_INT = 2 ** 63 - 1


def parse_date(s):
    """Try multiple date formats; returns a date or None"""
    if not s:
        return None
    s = str(s).strip()
    # drop a time component ("2024-05-01T00:00:00.000Z")
    if 'T' in s:
        s = s.split('T')[0]
    elif ' ' in s:
        s = s.split(' ')[0]
    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(s, fmt).date()
        except ValueError:
            continue
    return None


def parse_id(raw):
    try:
        value = int(str(raw).strip())
    except (TypeError, ValueError):
        return None, "Invalid id format"
    if value <= 0 or value > SQLITE_MAX_INT:
        return None, "Invalid id format"
    return value, None


def is_blank(value):
    return value is None or (isinstance(value, str) and not value.strip())


def _missing(data, fields):
    missing = [f for f in fields if is_blank(data.get(f))]
    if missing:
        return f"Missing required fields: {', '.join(missing)}"
    return None


def _clean_notes(value):
    """Returns (notes, error); blank notes are stored as None."""
    if is_blank(value):
        return None, None
    notes = str(value).strip()
    if len(notes) > MAX_NOTES_LENGTH:
        return None, f"notes must be at most {MAX_NOTES_LENGTH} characters"
    return notes, None


def _non_negative(data, key, default=None):
    """Returns (number, error) for an optional or required amount field."""
    value = data.get(key, default)
    if is_blank(value) and default is not None:
        value = default
    try:
        number = to_number(value, key)
    except ValueError as e:
        return None, str(e)
    if number < 0:
        return None, f"{key} must not be negative"
    return number, None


def validate_transaction(data):
    error = _missing(data, ("type", "category", "amount", "date"))
    if error:
        return None, error

    tx_type = str(data["type"]).strip().lower()
    if tx_type not in TRANSACTION_TYPES:
        return None, "type must be 'income' or 'expense'"

    amount, error = _non_negative(data, "amount")
    if error:
        return None, error

    date_val = parse_date(data["date"])
    if not date_val:
        return None, "Invalid date format"
    notes, error = _clean_notes(data.get("notes"))
    if error:
        return None, error

    return {
        "type": tx_type,
        "category": str(data["category"]).strip(),
        "amount": amount,
        "date": date_val.isoformat(),
        "notes": notes,
    }, None


def validate_budget(data):
    # older clients send "name" instead of "title"
    if is_blank(data.get("title")) and not is_blank(data.get("name")):
        data = dict(data, title=data["name"])

    error = _missing(data, ("category", "title", "amount"))
    if error:
        return None, error

    amount, error = _non_negative(data, "amount")
    if error:
        return None, error
    spent, error = _non_negative(data, "spent", default=0)
    if error:
        return None, error
    try:
        used = percentage_used(spent, amount)
    except ValueError as e:
        return None, str(e)

    return {
        "category": str(data["category"]).strip(),
        "title": str(data["title"]).strip(),
        "amount": amount,
        "spent": spent,
        "percentage_used": used,
    }, None


def validate_goal(data):
    error = _missing(data, ("goalName", "targetAmount", "deadline"))
    if error:
        return None, error

    target, error = _non_negative(data, "targetAmount")
    if error:
        return None, error
    current, error = _non_negative(data, "currentAmount", default=0)
    if error:
        return None, error

    deadline = parse_date(data["deadline"])
    if not deadline:
        return None, "Invalid deadline format"
    notes, error = _clean_notes(data.get("notes"))
    if error:
        return None, error

    requested = data.get("status")
    if isinstance(requested, str):
        requested = requested.strip().lower()

    return {
        "goal_name": str(data["goalName"]).strip(),
        "target_amount": target,
        "current_amount": current,
        "deadline": deadline.isoformat(),
        "status": goal_status(current, target, requested),
        "notes": notes,
    }, None


def validate_registration(data, min_password_length=8):
    error = _missing(data, ("username", "email", "password"))
    if error:
        return None, error

    email = str(data["email"]).strip().lower()
    if not EMAIL_RE.match(email):
        return None, "Invalid email address"

    password = str(data["password"])
    if len(password) < min_password_length:
        return None, f"Password must be at least {min_password_length} characters"

    return {
        "username": str(data["username"]).strip(),
        "email": email,
        "password": password,
    }, None


def validate_pagination(args, max_size=100):
    try:
        page = int(args.get("page", 0))
        size = int(args.get("size", 10))
    except (TypeError, ValueError):
        return None, "page and size must be integers"
    if page < 0 or size < 1 or size > max_size or page * size > SQLITE_MAX_INT:
        return None, f"page must be >= 0 and size between 1 and {max_size}"
    return (page, size), None
