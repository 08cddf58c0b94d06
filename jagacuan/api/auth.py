import logging
import re

from flask import Blueprint, g, jsonify, session

from jagacuan.api import get_body
from jagacuan.api.guards import current_user_id, login_required
from jagacuan.errors import ValidationError
from jagacuan.repositories.roles import ADMIN_ROLE, UserRoleRepository
from jagacuan.repositories.users import UserRepository
from jagacuan.validation import optional_text, require_text, validate_email


logger = logging.getLogger(__name__)

bp = Blueprint("auth", __name__)


def _validate_admin_password(password: str, confirm: str) -> None:
    if len(password) < 8:
        raise ValidationError("Password must be at least 8 characters long", "password")
    if not re.search(r"[A-Z]", password):
        raise ValidationError("Password must contain an uppercase letter", "password")
    if not re.search(r"[a-z]", password):
        raise ValidationError("Password must contain a lowercase letter", "password")
    if not re.search(r"[0-9]", password):
        raise ValidationError("Password must contain a digit", "password")
    if password != confirm:
        raise ValidationError("Passwords do not match", "confirm_password")


def _validate_username(username: str) -> None:
    # login treats anything with "@" as an email address
    if "@" in username:
        raise ValidationError("Username must not contain @", "username")


def _create_account(username: str, email: str, password: str):
    users = UserRepository()
    if users.find_by_email(email):
        return None, (jsonify({"error": "Email already registered"}), 400)
    if users.find_by_username(username):
        return None, (jsonify({"error": "Username already exists"}), 400)
    user_id = users.create_user(username, email, password)
    return user_id, None


@bp.post("/register")
def register():
    body = get_body()
    username = require_text(body, "username", "Username")
    _validate_username(username)
    email = validate_email(body.get("email"))
    password = body.get("password") or ""
    if not password:
        raise ValidationError("Password is required", "password")
    if len(password) < 6:
        raise ValidationError("Password must be at least 6 characters long", "password")

    user_id, error = _create_account(username, email, password)
    if error:
        return error

    session["user_id"] = user_id
    session["username"] = username
    logger.info("[AUTH] registered %s", username)
    return jsonify({"_id": user_id, "username": username, "email": email}), 201


@bp.post("/admin/register")
def admin_register():
    body = get_body()
    username = require_text(body, "username", "Username", max_length=50)
    if len(username) < 3:
        raise ValidationError("Username must be at least 3 characters long", "username")
    _validate_username(username)
    email = validate_email(body.get("email"))
    _validate_admin_password(body.get("password") or "", body.get("confirm_password") or "")

    user_id, error = _create_account(username, email, body["password"])
    if error:
        return error

    UserRoleRepository().grant(user_id, ADMIN_ROLE)
    session["user_id"] = user_id
    session["username"] = username
    logger.info("[AUTH] registered admin %s", username)
    return jsonify({"_id": user_id, "username": username, "email": email, "is_admin": True}), 201


@bp.post("/login")
def login():
    body = get_body()
    login_name = (body.get("email") or body.get("username") or "").strip()
    password = body.get("password") or ""
    if not login_name or not password:
        return jsonify({"error": "Email or username and password are required"}), 400

    users = UserRepository()
    user = users.find_by_login(login_name)
    if not user or not users.check_password(user, password):
        return jsonify({"error": "Invalid credentials"}), 401

    session["user_id"] = user["_id"]
    session["username"] = user.get("username")
    return jsonify(users.public_view(user))


@bp.post("/logout")
def logout():
    session.clear()
    return ("", 204)


@bp.get("/me")
def me():
    user_id = current_user_id()
    if not user_id:
        return jsonify({"user_id": None, "is_admin": False})
    return jsonify({
        "user_id": user_id,
        "username": session.get("username"),
        "is_admin": UserRoleRepository().is_admin(user_id),
    })


@bp.get("/admin-status")
@login_required
def admin_status():
    return jsonify({"is_admin": UserRoleRepository().is_admin(g.user_id)})


@bp.get("/profile")
@login_required
def get_profile():
    users = UserRepository()
    user = users.find_by_id(g.user_id)
    if not user:
        return jsonify({"error": "User not found"}), 404
    return jsonify(users.public_view(user))


@bp.put("/profile")
@login_required
def update_profile():
    body = get_body()
    name = optional_text(body, "name")
    if not name:
        raise ValidationError("name is required", "name")

    users = UserRepository()
    if not users.update_by_id(g.user_id, {"name": name}):
        return jsonify({"error": "User not found"}), 404
    return jsonify(users.public_view(users.find_by_id(g.user_id)))
