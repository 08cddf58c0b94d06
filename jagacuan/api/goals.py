from flask import Blueprint, g, jsonify

from jagacuan.api import get_body
from jagacuan.api.guards import login_required
from jagacuan.errors import ValidationError
from jagacuan.repositories.goals import GoalRepository
from jagacuan.validation import optional_text, parse_amount, parse_day, require_text


bp = Blueprint("goals", __name__)


@bp.get("/")
@login_required
def list_goals():
    repo = GoalRepository()
    return jsonify({"goals": repo.list_by_user(g.user_id), "summary": repo.summary(g.user_id)})


@bp.post("/")
@login_required
def create_goal():
    body = get_body()
    goal_name = require_text(body, "goal_name", "Goal name")
    target_amount = parse_amount(body.get("target_amount"), "target_amount")
    deadline = parse_day(body.get("deadline"), "deadline")

    repo = GoalRepository()
    _id = repo.create_goal(g.user_id, goal_name, target_amount, deadline)
    return jsonify(repo.get_goal(_id, g.user_id)), 201


@bp.get("/<goal_id>")
@login_required
def get_goal(goal_id):
    goal = GoalRepository().get_goal(goal_id, g.user_id)
    if not goal:
        return jsonify({"error": "Goal not found"}), 404
    return jsonify(goal)


@bp.put("/<goal_id>")
@login_required
def update_goal(goal_id):
    body = get_body()
    updates = {}
    if "goal_name" in body:
        updates["goal_name"] = require_text(body, "goal_name", "Goal name")
    if "target_amount" in body:
        updates["target_amount"] = parse_amount(body["target_amount"], "target_amount")
    if "deadline" in body:
        updates["deadline"] = parse_day(body["deadline"], "deadline")
    if not updates:
        raise ValidationError("Nothing to update")

    goal = GoalRepository().update_goal(goal_id, g.user_id, updates)
    if not goal:
        return jsonify({"error": "Goal not found"}), 404
    return jsonify(goal)


@bp.delete("/<goal_id>")
@login_required
def delete_goal(goal_id):
    ok = GoalRepository().soft_delete_by_id(goal_id, user_id=g.user_id)
    return ("", 204) if ok else (jsonify({"error": "Goal not found"}), 404)


@bp.post("/<goal_id>/progress")
@login_required
def add_progress(goal_id):
    body = get_body()
    amount = parse_amount(body.get("amount"), "amount")
    notes = optional_text(body, "notes")

    goal = GoalRepository().add_progress(goal_id, g.user_id, amount, notes)
    if not goal:
        return jsonify({"error": "Goal not found"}), 404
    return jsonify(goal)


@bp.get("/<goal_id>/history")
@login_required
def goal_history(goal_id):
    repo = GoalRepository()
    if not repo.get_goal(goal_id, g.user_id):
        return jsonify({"error": "Goal not found"}), 404
    return jsonify(repo.history.list_for_goal(goal_id, g.user_id))
