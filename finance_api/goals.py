# finance_api/goals.py
import logging

from .models import Goal
from .records import RecordManager, crud_blueprint
from .validation import validate_goal

logger = logging.getLogger("finance-backend")


class GoalManager(RecordManager):
    """
    Savings goals. ``status`` is never taken from the client as-is: every
    create and update runs it through ``derivations.goal_status``.
    """
    table = "goals"
    model = Goal
    columns = ("goal_name", "target_amount", "current_amount", "deadline", "status", "notes")
    input_keys = ("goalName", "targetAmount", "currentAmount", "deadline", "status", "notes")

    def validate(self, data):
        clean, error = validate_goal(data)
        if clean and data.get("status") not in (None, clean["status"]):
            logger.info(f"Goal status '{data.get('status')}' corrected to '{clean['status']}'")
        return clean, error


goal_manager = GoalManager()
bp = crud_blueprint("goals", goal_manager, "Goal")
