from typing import Any, Dict, List, Optional

from jagacuan.repositories.base import MongoRepository


SPENDING_ADDED = "spending_added"
SPENDING_REMOVED = "spending_removed"
MANUAL_EDIT = "manual_edit"
LIMIT_CHANGED = "limit_changed"
RECONCILE = "reconcile"


class BudgetHistoryRepository(MongoRepository):
    """Append-only ledger of every change to a budget's spent counter or limit."""

    soft_delete = False

    def __init__(self):
        super().__init__("budgeting_history")

    def record(self, user_id: str, budget_id: str, amount_changed: float, previous_spent: float,
               new_spent: float, reason: str, notes: Optional[str] = None) -> str:
        return self.insert_one({
            "user_id": user_id,
            "budget_id": budget_id,
            "amount_changed": amount_changed,
            "previous_spent": previous_spent,
            "new_spent": new_spent,
            "reason": reason,
            "notes": notes,
        })

    def list_for_budget(self, budget_id: str, user_id: str, limit: int = 100) -> List[Dict[str, Any]]:
        return self.find_many(
            {"budget_id": budget_id, "user_id": user_id},
            limit=limit,
            sort=[("created_at", -1), ("_id", -1)],
        )
