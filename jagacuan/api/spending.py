from flask import Blueprint, g, jsonify, request

from jagacuan.api import get_body
from jagacuan.api.guards import login_required
from jagacuan.repositories.spending import SpendingRepository
from jagacuan.validation import optional_text, parse_amount, parse_timestamp, require_text


bp = Blueprint("spending", __name__)


@bp.get("/")
@login_required
def list_spending():
    budget_id = request.args.get("budget_id") or None
    repo = SpendingRepository()
    rows = repo.list_by_user(g.user_id, budget_id=budget_id)
    if request.args.get("group") == "category":
        return jsonify(repo.group_by_category(rows))
    return jsonify(rows)


@bp.post("/")
@login_required
def add_spending():
    body = get_body()
    description = require_text(body, "description", "Description")
    amount = parse_amount(body.get("amount"), "amount")
    budget_id = optional_text(body, "budget_id")
    date = parse_timestamp(body.get("date"), "date")

    spending = SpendingRepository().add_spending(g.user_id, budget_id, description, amount, date)
    if spending is None:
        return jsonify({"error": "Budget not found"}), 404
    return jsonify(spending), 201


@bp.delete("/<spending_id>")
@login_required
def delete_spending(spending_id):
    ok = SpendingRepository().delete_spending(spending_id, g.user_id)
    return ("", 204) if ok else (jsonify({"error": "Spending not found"}), 404)
