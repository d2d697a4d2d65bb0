# finance_api/auth.py
import logging
import sqlite3

from flask import Blueprint, current_app, jsonify, request
from flask_jwt_extended import (
    create_access_token,
    create_refresh_token,
    decode_token,
    jwt_required,
    set_refresh_cookies,
    unset_refresh_cookies,
)
from flask_jwt_extended.exceptions import JWTExtendedException
from jwt.exceptions import PyJWTError
from werkzeug.security import check_password_hash, generate_password_hash

from . import db
from .models import User
from .records import current_user_id, request_json
from .validation import validate_registration

logger = logging.getLogger("finance-backend")

USERNAME_TAKEN = "Username already exists"
EMAIL_TAKEN = "Email already exists"
CONFLICT_ERRORS = (USERNAME_TAKEN, EMAIL_TAKEN)

_dummy_hash = None


def _timing_dummy_hash():
    # compared against when the email is unknown, so both paths cost a hash
    global _dummy_hash
    if _dummy_hash is None:
        _dummy_hash = generate_password_hash("not-a-real-password")
    return _dummy_hash


class UserManager:
    def get(self, user_id):
        row = db.query_db("SELECT * FROM users WHERE id = ?", (user_id,), one=True)
        return User.from_row(row) if row else None

    def get_by_email(self, email):
        row = db.query_db("SELECT * FROM users WHERE email = ?", (email.strip().lower(),), one=True)
        return User.from_row(row) if row else None

    def register(self, data):
        clean, error = validate_registration(data, current_app.config["PASSWORD_MIN_LENGTH"])
        if error:
            return None, error

        if db.query_db("SELECT id FROM users WHERE username = ?", (clean["username"],), one=True):
            return None, USERNAME_TAKEN
        if db.query_db("SELECT id FROM users WHERE email = ?", (clean["email"],), one=True):
            return None, EMAIL_TAKEN

        try:
            user_id = db.execute_db(
                "INSERT INTO users (username, email, password_hash) VALUES (?, ?, ?)",
                (clean["username"], clean["email"], generate_password_hash(clean["password"])),
            )
        except sqlite3.IntegrityError:
            # lost a race with a concurrent registration
            db.get_db().rollback()
            return None, USERNAME_TAKEN if "username" in self._taken_fields(clean) else EMAIL_TAKEN

        logger.info(f"Registered user {user_id}")
        return self.get(user_id), None

    def _taken_fields(self, clean):
        taken = []
        if db.query_db("SELECT id FROM users WHERE username = ?", (clean["username"],), one=True):
            taken.append("username")
        if db.query_db("SELECT id FROM users WHERE email = ?", (clean["email"],), one=True):
            taken.append("email")
        return taken

    def authenticate(self, email, password):
        user = self.get_by_email(email)
        if user is None:
            check_password_hash(_timing_dummy_hash(), password)
            return None
        if not check_password_hash(user.password_hash, password):
            return None
        return user

    def store_refresh_token(self, user_id, token):
        db.execute_db("UPDATE users SET refresh_token = ? WHERE id = ?", (token, user_id))

    def clear_refresh_token(self, user_id):
        db.execute_db("UPDATE users SET refresh_token = NULL WHERE id = ?", (user_id,))


user_manager = UserManager()
auth_bp = Blueprint("auth", __name__, url_prefix="/api/auth")


@auth_bp.route("/register", methods=["POST"])
def register():
    user, error = user_manager.register(request_json())
    if error in CONFLICT_ERRORS:
        return jsonify({"error": error}), 409
    if error:
        return jsonify({"error": error}), 400
    return jsonify({"message": "User registered successfully", "user": user.to_dict()}), 201


@auth_bp.route("/login", methods=["POST"])
def login():
    data = request_json()
    email = str(data.get("email") or "").strip()
    password = str(data.get("password") or "")
    if not email or not password:
        return jsonify({"error": "email and password are required"}), 400

    user = user_manager.authenticate(email, password)
    if user is None:
        logger.warning("Failed login attempt")
        return jsonify({"error": "Invalid credentials"}), 401

    access_token = create_access_token(identity=str(user.id))
    refresh_token = create_refresh_token(identity=str(user.id))
    user_manager.store_refresh_token(user.id, refresh_token)

    resp = jsonify({"accessToken": access_token, "userId": user.id, "username": user.username})
    set_refresh_cookies(resp, refresh_token)
    logger.info(f"User {user.id} logged in")
    return resp


@auth_bp.route("/refresh", methods=["POST"])
@jwt_required(refresh=True, locations=["cookies"])
def refresh():
    user_id = current_user_id()
    token = request.cookies.get(current_app.config["JWT_REFRESH_COOKIE_NAME"])
    user = user_manager.get(user_id)
    # a refresh token only works until the next login or logout
    if user is None or user.refresh_token != token:
        return jsonify({"error": "Invalid refresh token"}), 403
    return jsonify({"accessToken": create_access_token(identity=str(user_id))})


@auth_bp.route("/logout", methods=["POST"])
def logout():
    token = request.cookies.get(current_app.config["JWT_REFRESH_COOKIE_NAME"])
    if token:
        try:
            user_id = int(decode_token(token)["sub"])
            user_manager.clear_refresh_token(user_id)
            logger.info(f"User {user_id} logged out")
        except (JWTExtendedException, PyJWTError, KeyError, ValueError) as e:
            logger.info(f"Logout with unusable refresh cookie: {e}")

    resp = jsonify({"message": "Logged out"})
    unset_refresh_cookies(resp)
    return resp


@auth_bp.route("/me", methods=["GET"])
@jwt_required()
def me():
    user = user_manager.get(current_user_id())
    if user is None:
        return jsonify({"error": "User not found"}), 404
    return jsonify(user.to_dict())
