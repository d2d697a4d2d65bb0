# finance_api/reports.py
import logging
from io import BytesIO
from typing import Any, Dict, Iterable, List

import numpy as np
import pandas as pd
from flask import Blueprint, jsonify, request, send_file
from flask_jwt_extended import jwt_required

from .budgets import budget_manager
from .derivations import STATUS_ACHIEVED, STATUS_IN_PROGRESS, to_number
from .exports import ReportExporter
from .goals import goal_manager
from .records import current_user_id
from .transactions import transaction_manager

logger = logging.getLogger("finance-backend")

ESSENTIAL_CATEGORIES = frozenset({"rent", "groceries", "utilities", "transportation", "healthcare"})
ESSENTIALS_SHARE = 0.5
DISCRETIONARY_SHARE = 0.3
SAVINGS_SHARE = 0.2


def _money(value):
    return round(float(value), 2)


def _as_dicts(records):
    return [r.to_dict() if hasattr(r, "to_dict") else dict(r) for r in records]


def _frame(records, columns, sort_by):
    """
    DataFrame of ``records`` sorted on every value column, so sums come out
    the same whatever order the rows arrived in.
    """
    df = pd.DataFrame(_as_dicts(records), columns=columns)
    if df.empty:
        return df
    return df.sort_values(sort_by, kind="mergesort").reset_index(drop=True)


def _transactions_frame(transactions):
    df = _frame(transactions, ["type", "category", "amount", "date"], ["date", "type", "category", "amount"])
    if df.empty:
        return df
    df["amount"] = df["amount"].astype(float)
    df["month"] = df["date"].astype(str).str[:7]
    return df


# ---------------- Aggregations ----------------
def transaction_report(transactions: Iterable[Any]) -> Dict[str, Any]:
    df = _transactions_frame(transactions)
    if df.empty:
        return {
            "totalIncome": 0.0,
            "totalExpense": 0.0,
            "netBalance": 0.0,
            "transactionCount": 0,
            "categoryBreakdown": {},
            "monthlyTrend": {},
            "monthlyData": {},
        }

    is_income = df["type"] == "income"
    is_expense = df["type"] == "expense"
    total_income = df.loc[is_income, "amount"].sum()
    total_expense = df.loc[is_expense, "amount"].sum()

    by_category = df.groupby("category")["amount"].sum()
    by_month = df.groupby("month")["amount"].sum().sort_index()

    monthly = (
        df.assign(
            income=np.where(is_income, df["amount"], 0.0),
            expense=np.where(is_expense, df["amount"], 0.0),
        )
        .groupby("month")[["income", "expense"]]
        .sum()
        .sort_index()
    )

    return {
        "totalIncome": _money(total_income),
        "totalExpense": _money(total_expense),
        "netBalance": _money(total_income - total_expense),
        "transactionCount": int(len(df)),
        "categoryBreakdown": {cat: _money(v) for cat, v in by_category.items()},
        "monthlyTrend": {month: _money(v) for month, v in by_month.items()},
        "monthlyData": {
            month: {
                "income": _money(row["income"]),
                "expense": _money(row["expense"]),
                "net": _money(row["income"] - row["expense"]),
            }
            for month, row in monthly.iterrows()
        },
    }


def budget_report(budgets: Iterable[Any]) -> Dict[str, Any]:
    df = _frame(
        budgets,
        ["category", "amount", "spent", "createdAt"],
        ["createdAt", "category", "amount", "spent"],
    )
    if df.empty:
        return {"totalBudget": 0.0, "totalSpent": 0.0, "categoryBreakdown": {}, "monthlyTrend": {}}

    df["amount"] = df["amount"].astype(float)
    df["spent"] = df["spent"].astype(float)
    df["month"] = df["createdAt"].fillna("").astype(str).str[:7]

    by_category = df.groupby("category")[["amount", "spent"]].sum()
    by_month = df.groupby("month")["spent"].sum().sort_index()

    return {
        "totalBudget": _money(df["amount"].sum()),
        "totalSpent": _money(df["spent"].sum()),
        "categoryBreakdown": {
            cat: {"budget": _money(row["amount"]), "spent": _money(row["spent"])}
            for cat, row in by_category.iterrows()
        },
        "monthlyTrend": {month: _money(v) for month, v in by_month.items()},
    }


def goal_report(goals: Iterable[Any]) -> Dict[str, Any]:
    rows = sorted(_as_dicts(goals), key=lambda g: (str(g["deadline"]), str(g["goalName"]), g.get("id") or 0))
    total_target = sum(float(g["targetAmount"]) for g in rows)
    total_current = sum(float(g["currentAmount"]) for g in rows)

    goal_rows = []
    for g in rows:
        target = float(g["targetAmount"])
        progress = (float(g["currentAmount"]) / target) * 100 if target > 0 else 0.0
        goal_rows.append({
            "goalName": g["goalName"],
            "targetAmount": _money(target),
            "currentAmount": _money(g["currentAmount"]),
            "progress": round(progress, 1),
            "deadline": g["deadline"],
            "status": g["status"],
        })

    return {
        "totalTarget": _money(total_target),
        "totalCurrent": _money(total_current),
        "overallProgress": round(total_current / total_target * 100, 2) if total_target > 0 else 0.0,
        "goalCount": len(rows),
        "achievedCount": sum(1 for g in rows if g["status"] == STATUS_ACHIEVED),
        "inProgressCount": sum(1 for g in rows if g["status"] == STATUS_IN_PROGRESS),
        "goals": goal_rows,
    }


def classify_category(category):
    return "essential" if str(category).strip().lower() in ESSENTIAL_CATEGORIES else "discretionary"


def budget_plan(monthly_income, transactions: Iterable[Any]) -> Dict[str, Any]:
    """
    50/30/20 plan: half the income to essentials, 30% to discretionary
    spending, 20% to savings. Each expense category gets a recommended budget
    equal to its share of total spending times its bucket.
    """
    income = to_number(monthly_income, "income")
    if income < 0:
        raise ValueError("income must not be negative")

    essentials = income * ESSENTIALS_SHARE
    discretionary = income * DISCRETIONARY_SHARE
    savings = income * SAVINGS_SHARE

    df = _transactions_frame(transactions)
    breakdown: List[Dict[str, Any]] = []
    if not df.empty:
        totals = df[df["type"] == "expense"].groupby("category")["amount"].sum()
        total_expense = float(totals.sum())
        for category, spent in totals.items():
            share = float(spent) / total_expense if total_expense > 0 else 0.0
            kind = classify_category(category)
            bucket = essentials if kind == "essential" else discretionary
            breakdown.append({
                "category": category,
                "totalSpent": _money(spent),
                "percentage": round(share * 100, 1),
                "type": kind,
                "recommendedBudget": _money(share * bucket),
            })
    breakdown.sort(key=lambda r: (-r["totalSpent"], r["category"]))

    return {
        "monthlyIncome": _money(income),
        "essentials": _money(essentials),
        "discretionary": _money(discretionary),
        "savings": _money(savings),
        "categoryBreakdown": breakdown,
    }


# ---------------- Endpoints ----------------
reports_bp = Blueprint("reports", __name__, url_prefix="/api/reports")
exporter = ReportExporter()


def _plan_for(user_id, income_arg):
    transactions = transaction_manager.list_by_owner(user_id)
    income = transaction_manager.total_income(user_id) if income_arg in (None, "") else income_arg
    return budget_plan(income, transactions)


@reports_bp.route("/transactions", methods=["GET"])
@jwt_required()
def report_transactions():
    transactions = transaction_manager.list_by_owner(current_user_id())
    return jsonify(transaction_report(transactions))


@reports_bp.route("/budgets", methods=["GET"])
@jwt_required()
def report_own_budgets():
    return jsonify(budget_report(budget_manager.list_by_owner(current_user_id())))


# int converter keeps /budgets/export free for the export route
@reports_bp.route("/budgets/<int:user_id>", methods=["GET"])
@jwt_required()
def report_budgets(user_id):
    if user_id != current_user_id():
        logger.warning(f"User {current_user_id()} denied budget report of user {user_id}")
        return jsonify({"error": "Access denied"}), 403
    return jsonify(budget_report(budget_manager.list_by_owner(user_id)))


@reports_bp.route("/goals", methods=["GET"])
@jwt_required()
def report_goals():
    return jsonify(goal_report(goal_manager.list_by_owner(current_user_id())))


@reports_bp.route("/budget-plan", methods=["GET"])
@jwt_required()
def report_budget_plan():
    try:
        plan = _plan_for(current_user_id(), request.args.get("income"))
    except ValueError as e:
        return jsonify({"error": str(e)}), 400
    return jsonify(plan)


@reports_bp.route("/<kind>/export", methods=["GET"])
@jwt_required()
def export_report(kind):
    user_id = current_user_id()
    fmt = request.args.get("format", "pdf").strip().lower()

    try:
        if kind == "transactions":
            records = [t.to_dict() for t in transaction_manager.list_by_owner(user_id)]
            payload = transaction_report(records)
        elif kind == "budgets":
            records = [b.to_dict() for b in budget_manager.list_by_owner(user_id)]
            payload = budget_report(records)
        elif kind == "goals":
            records = [g.to_dict() for g in goal_manager.list_by_owner(user_id)]
            payload = goal_report(records)
        elif kind == "budget-plan":
            records = []
            payload = _plan_for(user_id, request.args.get("income"))
        else:
            return jsonify({"error": f"Unknown report '{kind}'"}), 404

        data, mimetype, filename = exporter.export(kind, fmt, payload, records)
    except ValueError as e:
        return jsonify({"error": str(e)}), 400

    logger.info(f"Exported {kind} report as {fmt} for user {user_id}")
    return send_file(BytesIO(data), mimetype=mimetype, as_attachment=True, download_name=filename)
