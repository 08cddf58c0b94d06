import logging

from flask import Blueprint, g, jsonify, request

from jagacuan.api import get_body
from jagacuan.api.guards import login_required
from jagacuan.errors import ValidationError
from jagacuan.repositories.transactions import METHODS, TYPE_ALIASES, TYPES, TransactionRepository
from jagacuan.validation import optional_text, parse_amount, parse_choice, parse_int, parse_timestamp, parse_year, require_text


logger = logging.getLogger(__name__)

bp = Blueprint("transactions", __name__)


def _transaction_fields(body, partial=False):
    """Validate transaction fields; partial only checks the keys present"""
    fields = {}
    if not partial or "type" in body:
        fields["type"] = parse_choice(body.get("type"), "type", TYPES, aliases=TYPE_ALIASES)
    if not partial or "name" in body:
        fields["name"] = require_text(body, "name", "Name")
    if not partial or "amount" in body:
        fields["amount"] = parse_amount(body.get("amount"), "amount")
    if not partial or "method" in body:
        fields["method"] = parse_choice(body.get("method") or "manual", "method", METHODS)
    if not partial or body.get("date") is not None:
        fields["timestamp"] = parse_timestamp(body.get("date"), "date")
    for key in ("category_id", "notes", "photo_url"):
        if not partial or key in body:
            fields[key] = optional_text(body, key)
    return fields


@bp.get("/")
@login_required
def list_transactions():
    year = request.args.get("year")
    month = request.args.get("month")
    year = parse_year(year) if year and year != "all" else None
    month = parse_int(month, "month", minimum=1, maximum=12) if month and month != "all" else None
    if month and not year:
        month = None
    limit = min(parse_int(request.args.get("limit", "100"), "limit", minimum=1), 500)

    data = TransactionRepository().list_by_user(g.user_id, year=year, month=month, limit=limit)
    return jsonify(data)


@bp.get("/years")
@login_required
def available_years():
    return jsonify(TransactionRepository().available_years(g.user_id))


@bp.post("/")
@login_required
def create_transaction():
    body = get_body()
    fields = _transaction_fields(body)
    fields["user_id"] = g.user_id

    repo = TransactionRepository()
    _id = repo.insert_one(fields)
    logger.info("[TX] %s recorded %s %s", g.user_id, fields["type"], fields["amount"])
    return jsonify(repo.get_transaction(_id, g.user_id)), 201


@bp.get("/<transaction_id>")
@login_required
def get_transaction(transaction_id):
    transaction = TransactionRepository().get_transaction(transaction_id, g.user_id)
    if not transaction:
        return jsonify({"error": "Transaction not found"}), 404
    return jsonify(transaction)


@bp.put("/<transaction_id>")
@login_required
def update_transaction(transaction_id):
    body = get_body()
    updates = _transaction_fields(body, partial=True)
    if not updates:
        raise ValidationError("Nothing to update")

    repo = TransactionRepository()
    if not repo.update_by_id(transaction_id, updates, user_id=g.user_id):
        return jsonify({"error": "Transaction not found"}), 404
    return jsonify(repo.get_transaction(transaction_id, g.user_id))


@bp.delete("/<transaction_id>")
@login_required
def delete_transaction(transaction_id):
    ok = TransactionRepository().soft_delete_by_id(transaction_id, user_id=g.user_id)
    return ("", 204) if ok else (jsonify({"error": "Transaction not found"}), 404)
