# finance_api/budgets.py
import logging
import math

from flask import current_app, jsonify, request
from flask_jwt_extended import jwt_required

from . import db
from .derivations import percentage_used
from .models import Budget
from .records import RecordManager, crud_blueprint, current_user_id
from .validation import is_blank, parse_date, validate_budget, validate_pagination

logger = logging.getLogger("finance-backend")


class BudgetManager(RecordManager):
    table = "budgets"
    model = Budget
    columns = ("category", "title", "amount", "spent", "percentage_used")
    input_keys = ("category", "title", "amount", "spent")
    has_updated_at = False

    def validate(self, data):
        return validate_budget(data)

    def create(self, owner_id, data):
        clean, error = self.validate(data)
        if error:
            return None, error

        # backdated budgets are allowed; otherwise the table default applies
        created_raw = data.get("createdAt")
        if created_raw:
            created_on = parse_date(created_raw)
            if not created_on:
                return None, "Invalid createdAt format"
            budget_id = db.execute_db(
                self.insert_sql(extra_columns=("created_at",)),
                (owner_id,) + tuple(clean[c] for c in self.columns) + (f"{created_on.isoformat()} 00:00:00",),
            )
        else:
            budget_id = db.execute_db(
                self.insert_sql(),
                (owner_id,) + tuple(clean[c] for c in self.columns),
            )
        logger.info(f"Created budget {budget_id} for user {owner_id}")
        return self._fetch(budget_id), None

    def update(self, record_id, data, owner_id=None):
        # "name" renames the budget when no title is sent
        data = dict(data or {})
        name = data.pop("name", None)
        if not is_blank(name) and is_blank(data.get("title")):
            data["title"] = name
        return super().update(record_id, data, owner_id)

    def apply_expense(self, conn, owner_id, category, amount):
        """
        Add an expense to every budget of ``owner_id`` in ``category``.

        Runs on the caller's connection without committing so it shares the
        caller's transaction. Returns the ids of the budgets touched; raises
        ValueError when a total would overflow, so the caller rolls back.
        """
        rows = conn.execute(
            "SELECT id, amount, spent FROM budgets WHERE user_id = ? AND lower(category) = lower(?)",
            (owner_id, category.strip()),
        ).fetchall()
        touched = []
        for row in rows:
            spent = float(row["spent"]) + amount
            if not math.isfinite(spent):
                raise ValueError(f"Budget {row['id']} spent total is too large to store")
            conn.execute(
                "UPDATE budgets SET spent = ?, percentage_used = ? WHERE id = ?",
                (spent, percentage_used(spent, row["amount"]), row["id"]),
            )
            touched.append(row["id"])
        return touched

    def _page(self, where, args, page, size):
        total = db.query_db(f"SELECT COUNT(*) AS count FROM budgets WHERE {where}", args, one=True)["count"]
        rows = db.query_db(
            f"SELECT * FROM budgets WHERE {where} ORDER BY id LIMIT ? OFFSET ?",
            args + (size, page * size),
        )
        return {
            "items": [Budget.from_row(r).to_dict() for r in rows],
            "page": page,
            "size": size,
            "total": total,
        }

    def list_by_category(self, owner_id, category, page=0, size=10):
        return self._page("user_id = ? AND lower(category) = lower(?)", (owner_id, category.strip()), page, size)

    def list_by_date_range(self, owner_id, start, end, page=0, size=10):
        return self._page(
            "user_id = ? AND date(created_at) BETWEEN ? AND ?",
            (owner_id, start.isoformat(), end.isoformat()),
            page,
            size,
        )


budget_manager = BudgetManager()
bp = crud_blueprint("budgets", budget_manager, "Budget")


@bp.route("/category/<path:category>", methods=["GET"])
@jwt_required()
def budgets_by_category(category):
    paging, error = validate_pagination(request.args, current_app.config["MAX_PAGE_SIZE"])
    if error:
        return jsonify({"error": error}), 400
    page, size = paging
    return jsonify(budget_manager.list_by_category(current_user_id(), category, page, size))


@bp.route("/date-range", methods=["GET"])
@jwt_required()
def budgets_by_date_range():
    start = parse_date(request.args.get("startDate"))
    end = parse_date(request.args.get("endDate"))
    if not start or not end:
        return jsonify({"error": "startDate and endDate are required dates"}), 400
    if start > end:
        return jsonify({"error": "startDate must not be after endDate"}), 400

    paging, error = validate_pagination(request.args, current_app.config["MAX_PAGE_SIZE"])
    if error:
        return jsonify({"error": error}), 400
    page, size = paging
    return jsonify(budget_manager.list_by_date_range(current_user_id(), start, end, page, size))
