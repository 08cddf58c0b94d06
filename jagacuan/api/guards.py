from functools import wraps

from flask import g, jsonify, session

from jagacuan.repositories.roles import UserRoleRepository


def current_user_id():
    return session.get("user_id")


def login_required(view_func):
    """401 unless the session carries a user; exposes it as g.user_id"""
    @wraps(view_func)
    def wrapped(*args, **kwargs):
        user_id = current_user_id()
        if not user_id:
            return jsonify({"error": "Not authenticated"}), 401
        g.user_id = user_id
        return view_func(*args, **kwargs)
    return wrapped


def admin_required(view_func):
    """401 for anonymous users, 403 for users without the admin role"""
    @wraps(view_func)
    def wrapped(*args, **kwargs):
        user_id = current_user_id()
        if not user_id:
            return jsonify({"error": "Not authenticated"}), 401
        if not UserRoleRepository().is_admin(user_id):
            return jsonify({"error": "Admin access required"}), 403
        g.user_id = user_id
        return view_func(*args, **kwargs)
    return wrapped
