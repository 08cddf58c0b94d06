from flask import Blueprint, g, jsonify, request

from jagacuan.api import get_body
from jagacuan.api.guards import admin_required, login_required
from jagacuan.repositories.education import EDUCATION_TYPES, EducationRepository
from jagacuan.validation import parse_choice, require_text


bp = Blueprint("education", __name__)


def _education_fields(body):
    return {
        "title": require_text(body, "title", "Title"),
        "content": require_text(body, "content", "Content"),
        "type": parse_choice(body.get("type") or "daily_tips", "type", EDUCATION_TYPES),
    }


@bp.get("/")
@login_required
def list_education():
    content_type = request.args.get("type")
    if content_type:
        content_type = parse_choice(content_type, "type", EDUCATION_TYPES)
    return jsonify(EducationRepository().list_content(content_type))


@bp.post("/")
@admin_required
def create_education():
    fields = _education_fields(get_body())
    fields["created_by"] = g.user_id
    repo = EducationRepository()
    _id = repo.insert_one(fields)
    return jsonify(repo.find_by_id(_id)), 201


@bp.put("/<education_id>")
@admin_required
def update_education(education_id):
    fields = _education_fields(get_body())
    repo = EducationRepository()
    if not repo.update_by_id(education_id, fields):
        return jsonify({"error": "Education content not found"}), 404
    return jsonify(repo.find_by_id(education_id))


@bp.delete("/<education_id>")
@admin_required
def delete_education(education_id):
    ok = EducationRepository().soft_delete_by_id(education_id)
    return ("", 204) if ok else (jsonify({"error": "Education content not found"}), 404)
