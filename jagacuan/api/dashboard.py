from datetime import date

from flask import Blueprint, g, jsonify

from jagacuan.api.guards import login_required
from jagacuan.repositories.budgets import BudgetRepository
from jagacuan.repositories.goals import GoalRepository
from jagacuan.repositories.spending import SpendingRepository
from jagacuan.repositories.transactions import TransactionRepository, period_bounds
from jagacuan.repositories.users import UserRepository


bp = Blueprint("dashboard", __name__)


@bp.get("/")
@login_required
def dashboard():
    """Ringkasan budget, tabungan dan cashflow bulan ini"""
    user = UserRepository().find_by_id(g.user_id) or {}
    budgets = BudgetRepository().summary(g.user_id)
    goals = GoalRepository().summary(g.user_id)

    today = date.today()
    start, end = period_bounds(today.year, today.month)
    tx_repo = TransactionRepository()
    month_totals = tx_repo.totals_between(g.user_id, start, end)
    tracked_spending = SpendingRepository().total_between(g.user_id, start, end)

    return jsonify({
        "user_name": user.get("name") or user.get("username") or "User",
        "total_budget": budgets["total_budget"],
        "total_spent": budgets["total_spent"],
        "budget_remaining": budgets["remaining"],
        "budget_progress_pct": budgets["progress_pct"],
        "monthly_income": month_totals["income"],
        "monthly_expenses": month_totals["spending"] + tracked_spending,
        "current_savings": goals["current_savings"],
        "savings_goal": goals["savings_target"],
        "savings_progress_pct": goals["progress_pct"],
        "recent_transactions": tx_repo.list_by_user(g.user_id, limit=5),
    })
