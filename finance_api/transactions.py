# finance_api/transactions.py

import logging

from . import db
from .budgets import budget_manager
from .models import Transaction
from .records import RecordManager, crud_blueprint
from .validation import validate_transaction

logger = logging.getLogger("finance-backend")


class TransactionManager(RecordManager):
    table = "transactions"
    model = Transaction
    columns = ("type", "category", "amount", "date", "notes")
    input_keys = columns

    def validate(self, data):
        return validate_transaction(data)

    def create(self, owner_id, data):
        """
        Store a transaction. An expense also raises ``spent`` on the owner's
        budgets for the same category, in the same database transaction.
        """
        clean, error = self.validate(data)
        if error:
            return None, error

        conn = db.get_db()
        try:
            with conn:
                cur = conn.execute(
                    self.insert_sql(),
                    (owner_id,) + tuple(clean[c] for c in self.columns),
                )
                tx_id = cur.lastrowid
                touched = []
                if clean["type"] == "expense":
                    touched = budget_manager.apply_expense(conn, owner_id, clean["category"], clean["amount"])
        except ValueError as e:
            # the insert was rolled back with the budget updates
            logger.warning(f"Transaction rejected for user {owner_id}: {e}")
            return None, str(e)

        logger.info(f"Transaction {tx_id} created for user {owner_id}")
        if touched:
            logger.info(f"Expense {tx_id} applied to budgets {touched}")
        return self._fetch(tx_id), None

    def total_income(self, owner_id):
        row = db.query_db(
            "SELECT SUM(amount) AS total FROM transactions WHERE user_id = ? AND type = 'income'",
            (owner_id,),
            one=True,
        )
        return float(row["total"] or 0)


transaction_manager = TransactionManager()
bp = crud_blueprint("transactions", transaction_manager, "Transaction")
