from flask import Blueprint, g, jsonify

from jagacuan.api import get_body
from jagacuan.api.guards import login_required
from jagacuan.errors import ValidationError
from jagacuan.repositories.budgets import PERIODS, BudgetRepository
from jagacuan.validation import optional_text, parse_amount, parse_choice, require_text


bp = Blueprint("budgets", __name__)


@bp.get("/")
@login_required
def list_budgets():
    """Budgets user plus ringkasan total"""
    repo = BudgetRepository()
    return jsonify({"budgets": repo.list_by_user(g.user_id), "summary": repo.summary(g.user_id)})


@bp.post("/")
@login_required
def create_budget():
    body = get_body()
    category = require_text(body, "category", "Category")
    # a new budget needs a positive limit; edits may bring it down to 0
    amount = parse_amount(body.get("amount"), "amount")
    period = parse_choice(body.get("period") or "Monthly", "period", PERIODS)
    notes = optional_text(body, "notes")

    repo = BudgetRepository()
    _id = repo.create_budget(g.user_id, category, amount, period, notes)
    return jsonify(repo.get_budget(_id, g.user_id)), 201


@bp.get("/<budget_id>")
@login_required
def get_budget(budget_id):
    budget = BudgetRepository().get_budget(budget_id, g.user_id)
    if not budget:
        return jsonify({"error": "Budget not found"}), 404
    return jsonify(budget)


@bp.put("/<budget_id>")
@login_required
def update_budget(budget_id):
    body = get_body()
    updates = {}
    if "category" in body:
        updates["category"] = require_text(body, "category", "Category")
    if "amount" in body:
        updates["amount"] = parse_amount(body["amount"], "amount", allow_zero=True)
    if "spent" in body:
        updates["spent"] = parse_amount(body["spent"], "spent", allow_zero=True)
    if "period" in body:
        updates["period"] = parse_choice(body["period"], "period", PERIODS)
    if "notes" in body:
        updates["notes"] = optional_text(body, "notes")
    if not updates:
        raise ValidationError("Nothing to update")

    budget = BudgetRepository().update_budget(budget_id, g.user_id, updates)
    if not budget:
        return jsonify({"error": "Budget not found"}), 404
    return jsonify(budget)


@bp.delete("/<budget_id>")
@login_required
def delete_budget(budget_id):
    ok = BudgetRepository().delete_budget(budget_id, g.user_id)
    return ("", 204) if ok else (jsonify({"error": "Budget not found"}), 404)


@bp.get("/<budget_id>/history")
@login_required
def budget_history(budget_id):
    repo = BudgetRepository()
    if not repo.get_budget(budget_id, g.user_id):
        return jsonify({"error": "Budget not found"}), 404
    return jsonify(repo.history.list_for_budget(budget_id, g.user_id))


@bp.post("/<budget_id>/reconcile")
@login_required
def reconcile_budget(budget_id):
    """Recompute spent dari spending rows yang masih hidup"""
    result = BudgetRepository().reconcile_budget(budget_id, g.user_id)
    if result is None:
        return jsonify({"error": "Budget not found or reconcile failed"}), 404
    return jsonify(result)
