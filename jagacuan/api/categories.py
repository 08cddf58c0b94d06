from flask import Blueprint, g, jsonify

from jagacuan.api import get_body
from jagacuan.api.guards import login_required
from jagacuan.repositories.categories import CategoryRepository
from jagacuan.validation import optional_text, require_text


bp = Blueprint("categories", __name__)


@bp.get("/")
@login_required
def list_categories():
    """Default categories plus kategori custom user"""
    return jsonify(CategoryRepository().list_by_user_with_defaults(g.user_id))


@bp.post("/")
@login_required
def create_category():
    body = get_body()
    name = require_text(body, "name", "Category name", max_length=50)
    icon = optional_text(body, "icon")

    repo = CategoryRepository()
    _id = repo.create_category(g.user_id, name, icon)
    if _id is None:
        return jsonify({"error": "Category already exists"}), 400
    return jsonify(repo.find_by_id(_id, user_id=g.user_id)), 201


@bp.delete("/<category_id>")
@login_required
def delete_category(category_id):
    repo = CategoryRepository()
    if repo.is_default(category_id):
        return jsonify({"error": "Default categories cannot be deleted"}), 400
    ok = repo.delete_category(category_id, g.user_id)
    return ("", 204) if ok else (jsonify({"error": "Category not found"}), 404)
