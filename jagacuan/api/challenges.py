from flask import Blueprint, g, jsonify, request

from jagacuan.api import get_body
from jagacuan.api.guards import admin_required, login_required
from jagacuan.errors import ValidationError
from jagacuan.repositories.challenges import ChallengeRepository, DefaultChallengeRepository
from jagacuan.validation import parse_amount, parse_day, parse_int, require_text


bp = Blueprint("challenges", __name__)


@bp.get("/")
@login_required
def list_challenges():
    return jsonify(ChallengeRepository().list_by_user(g.user_id))


@bp.post("/")
@login_required
def create_challenge():
    body = get_body()
    title = require_text(body, "title", "Title")
    description = require_text(body, "description", "Description")
    duration_days = parse_int(body.get("duration"), "duration", minimum=1)
    goal_amount = parse_amount(body.get("goal_amount"), "goal_amount")

    repo = ChallengeRepository()
    _id = repo.create_challenge(g.user_id, title, description, duration_days, goal_amount)
    return jsonify(repo.find_by_id(_id, user_id=g.user_id)), 201


@bp.put("/<challenge_id>/score")
@login_required
def update_score(challenge_id):
    body = get_body()
    score = parse_int(body.get("score"), "score", minimum=0)
    challenge = ChallengeRepository().set_score(challenge_id, g.user_id, score)
    if not challenge:
        return jsonify({"error": "Challenge not found"}), 404
    return jsonify(challenge)


@bp.post("/<challenge_id>/complete")
@login_required
def complete_challenge(challenge_id):
    challenge = ChallengeRepository().complete(challenge_id, g.user_id)
    if not challenge:
        return jsonify({"error": "Challenge not found"}), 404
    return jsonify(challenge)


@bp.delete("/<challenge_id>")
@login_required
def delete_challenge(challenge_id):
    ok = ChallengeRepository().soft_delete_by_id(challenge_id, user_id=g.user_id)
    return ("", 204) if ok else (jsonify({"error": "Challenge not found"}), 404)


@bp.get("/leaderboard")
@login_required
def leaderboard():
    limit = min(parse_int(request.args.get("limit", "10"), "limit", minimum=1), 100)
    return jsonify(ChallengeRepository().leaderboard(limit))


# Default challenges: everyone reads, admins write

def _default_challenge_fields(body):
    title = require_text(body, "title", "Title")
    description = require_text(body, "description", "Description")
    reward_points = parse_int(body.get("reward_points", 0), "reward_points", minimum=0)
    start_date = parse_day(body.get("start_date"), "start_date")
    if not start_date:
        raise ValidationError("start_date is required", "start_date")
    end_date = parse_day(body.get("end_date"), "end_date")
    if end_date and end_date < start_date:
        raise ValidationError("end_date must not be before start_date", "end_date")
    return {
        "title": title,
        "description": description,
        "reward_points": reward_points,
        "start_date": start_date,
        "end_date": end_date,
    }


@bp.get("/defaults")
@login_required
def list_default_challenges():
    return jsonify(DefaultChallengeRepository().list_active())


@bp.post("/defaults")
@admin_required
def create_default_challenge():
    fields = _default_challenge_fields(get_body())
    fields["created_by"] = g.user_id
    repo = DefaultChallengeRepository()
    _id = repo.insert_one(fields)
    return jsonify(repo.find_by_id(_id)), 201


@bp.put("/defaults/<challenge_id>")
@admin_required
def update_default_challenge(challenge_id):
    fields = _default_challenge_fields(get_body())
    repo = DefaultChallengeRepository()
    if not repo.update_by_id(challenge_id, fields):
        return jsonify({"error": "Challenge not found"}), 404
    return jsonify(repo.find_by_id(challenge_id))


@bp.delete("/defaults/<challenge_id>")
@admin_required
def delete_default_challenge(challenge_id):
    ok = DefaultChallengeRepository().soft_delete_by_id(challenge_id)
    return ("", 204) if ok else (jsonify({"error": "Challenge not found"}), 404)
