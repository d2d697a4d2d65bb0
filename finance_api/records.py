# finance_api/records.py
"""Shared CRUD plumbing for the per-user record tables."""
import logging
from typing import Any, Dict, List, Optional, Tuple

from flask import Blueprint, jsonify, request
from flask_jwt_extended import get_jwt_identity, jwt_required

from . import db
from .validation import parse_id

logger = logging.getLogger("finance-backend")

NOT_FOUND = "not found"


def current_user_id():
    return int(get_jwt_identity())


def request_json():
    data = request.get_json(force=True, silent=True)
    return data if isinstance(data, dict) else {}


class RecordManager:
    """
    Create/list/get/update/delete for one table of user-owned records.

    Subclasses set ``table``, ``model``, ``columns`` (snake_case columns the
    validator produces) and ``input_keys`` (camelCase keys accepted on
    update), and implement ``validate``.
    """
    table = None
    model = None
    columns = ()
    input_keys = ()
    has_updated_at = True

    def validate(self, data) -> Tuple[Optional[Dict[str, Any]], Optional[str]]:
        raise NotImplementedError

    def _fetch(self, record_id, owner_id=None):
        if owner_id is None:
            row = db.query_db(f"SELECT * FROM {self.table} WHERE id = ?", (record_id,), one=True)
        else:
            row = db.query_db(
                f"SELECT * FROM {self.table} WHERE id = ? AND user_id = ?",
                (record_id, owner_id),
                one=True,
            )
        return self.model.from_row(row) if row else None

    def get(self, record_id, owner_id=None):
        return self._fetch(record_id, owner_id)

    def list_by_owner(self, owner_id) -> List[Any]:
        rows = db.query_db(f"SELECT * FROM {self.table} WHERE user_id = ? ORDER BY id", (owner_id,))
        return [self.model.from_row(r) for r in rows]

    def insert_sql(self, extra_columns=()):
        columns = ("user_id",) + tuple(self.columns) + tuple(extra_columns)
        placeholders = ", ".join("?" for _ in columns)
        return f"INSERT INTO {self.table} ({', '.join(columns)}) VALUES ({placeholders})"

    def create(self, owner_id, data):
        clean, error = self.validate(data)
        if error:
            return None, error

        record_id = db.execute_db(
            self.insert_sql(),
            (owner_id,) + tuple(clean[c] for c in self.columns),
        )
        logger.info(f"Created {self.table} record {record_id} for user {owner_id}")
        return self._fetch(record_id), None

    def update(self, record_id, data, owner_id=None):
        existing = self._fetch(record_id, owner_id)
        if existing is None:
            logger.warning(f"{self.table} record {record_id} not found for update")
            return None, NOT_FOUND

        # partial updates: unspecified fields keep their stored values
        merged = existing.to_dict()
        merged.update({k: v for k, v in (data or {}).items() if k in self.input_keys})
        clean, error = self.validate(merged)
        if error:
            return None, error

        assignments = ", ".join(f"{c} = ?" for c in self.columns)
        if self.has_updated_at:
            assignments += ", updated_at = CURRENT_TIMESTAMP"
        db.execute_db(
            f"UPDATE {self.table} SET {assignments} WHERE id = ?",
            tuple(clean[c] for c in self.columns) + (record_id,),
        )
        logger.info(f"Updated {self.table} record {record_id}")
        return self._fetch(record_id), None

    def delete(self, record_id, owner_id=None) -> bool:
        if self._fetch(record_id, owner_id) is None:
            logger.warning(f"{self.table} record {record_id} not found for delete")
            return False
        db.execute_db(f"DELETE FROM {self.table} WHERE id = ?", (record_id,))
        logger.info(f"Deleted {self.table} record {record_id}")
        return True


def crud_blueprint(name, manager, label):
    """Blueprint with the standard create/list/read/update/delete routes."""
    bp = Blueprint(name, __name__, url_prefix=f"/api/{name}")

    @bp.route("", methods=["POST"])
    @jwt_required()
    def create_record():
        user_id = current_user_id()
        record, error = manager.create(user_id, request_json())
        if error:
            return jsonify({"error": error}), 400
        return jsonify(record.to_dict()), 201

    @bp.route("", methods=["GET"])
    @jwt_required()
    def list_own_records():
        records = manager.list_by_owner(current_user_id())
        return jsonify([r.to_dict() for r in records])

    @bp.route("/user/<user_id>", methods=["GET"])
    @jwt_required()
    def list_user_records(user_id):
        owner_id, error = parse_id(user_id)
        if error:
            return jsonify({"error": error}), 400
        if owner_id != current_user_id():
            logger.warning(f"User {current_user_id()} denied access to {name} of user {owner_id}")
            return jsonify({"error": "Access denied"}), 403
        return jsonify([r.to_dict() for r in manager.list_by_owner(owner_id)])

    @bp.route("/<record_id>", methods=["GET"])
    @jwt_required()
    def get_record(record_id):
        record_id, error = parse_id(record_id)
        if error:
            return jsonify({"error": error}), 400
        record = manager.get(record_id, owner_id=current_user_id())
        if record is None:
            return jsonify({"error": f"{label} not found"}), 404
        return jsonify(record.to_dict())

    @bp.route("/<record_id>", methods=["PUT"])
    @jwt_required()
    def update_record(record_id):
        record_id, error = parse_id(record_id)
        if error:
            return jsonify({"error": error}), 400
        record, error = manager.update(record_id, request_json(), owner_id=current_user_id())
        if error == NOT_FOUND:
            return jsonify({"error": f"{label} not found"}), 404
        if error:
            return jsonify({"error": error}), 400
        return jsonify(record.to_dict())

    @bp.route("/<record_id>", methods=["DELETE"])
    @jwt_required()
    def delete_record(record_id):
        record_id, error = parse_id(record_id)
        if error:
            return jsonify({"error": error}), 400
        if not manager.delete(record_id, owner_id=current_user_id()):
            return jsonify({"error": f"{label} not found"}), 404
        return jsonify({"message": f"{label} deleted successfully", "id": record_id})

    return bp
