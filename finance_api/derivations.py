# finance_api/derivations.py
"""
Derived fields stored alongside budgets and goals.

These are the only place the rules live; the HTTP layer, the report
builders and the client previews all call into this module.
"""
import math

STATUS_IN_PROGRESS = "in progress"
STATUS_ACHIEVED = "achieved"
GOAL_STATUSES = (STATUS_IN_PROGRESS, STATUS_ACHIEVED)


def to_number(value, field="value"):
    """Coerce ``value`` to a finite float or raise ValueError."""
    if value is None or isinstance(value, bool):
        raise ValueError(f"{field} must be a number")
    if isinstance(value, str):
        value = value.strip()
        if not value:
            raise ValueError(f"{field} must be a number")
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValueError(f"{field} must be a number")
    if not math.isfinite(number):
        raise ValueError(f"{field} must be a finite number")
    return number


def percentage_used(spent, amount):
    """Share of a budget already spent, in percent. Not clamped."""
    spent = to_number(spent, "spent")
    amount = to_number(amount, "amount")
    if amount == 0:
        return 0.0
    used = (spent / amount) * 100
    if not math.isfinite(used):
        raise ValueError("percentageUsed is too large to store")
    return used


def goal_status(current_amount, target_amount, requested_status=None):
    """
    Status a goal must be stored with.

    A goal is achieved exactly when current >= target and target > 0;
    a requested "achieved" that doesn't hold is corrected back.
    """
    current = to_number(current_amount, "currentAmount")
    target = to_number(target_amount, "targetAmount")

    if target > 0 and current >= target:
        return STATUS_ACHIEVED
    if requested_status == STATUS_ACHIEVED:
        return STATUS_IN_PROGRESS
    if requested_status not in GOAL_STATUSES:
        return STATUS_IN_PROGRESS
    return requested_status
