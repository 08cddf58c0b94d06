import logging
from typing import Any, Dict, List, Optional

from pymongo import ReturnDocument

from jagacuan.repositories import budget_history
from jagacuan.repositories.base import MongoRepository, now_ts
from jagacuan.repositories.budget_history import BudgetHistoryRepository


logger = logging.getLogger(__name__)

PERIODS = ("Weekly", "Monthly", "Yearly")
DEFAULT_BUDGET_CATEGORY = "Other"
DEFAULT_BUDGET_AMOUNT = 1_000_000.0
RECONCILE_ATTEMPTS = 3
SPENT_TOLERANCE = 1e-6


def budget_progress(budget: Dict[str, Any]) -> Dict[str, Any]:
    """Add progress_pct, remaining and is_over_budget to a budget document"""
    amount = float(budget.get("amount") or 0)
    spent = float(budget.get("spent") or 0)
    budget["amount"] = amount
    budget["spent"] = spent
    budget["progress_pct"] = (spent / amount) * 100 if amount > 0 else 0
    budget["remaining"] = amount - spent
    budget["is_over_budget"] = spent > amount
    return budget


class BudgetRepository(MongoRepository):
    def __init__(self):
        super().__init__("budgeting")
        self.history = BudgetHistoryRepository()

    def list_by_user(self, user_id: str, limit: int = 100) -> List[Dict[str, Any]]:
        budgets = self.find_many({"user_id": user_id}, limit=limit, sort=[("created_at", -1), ("_id", -1)])
        return [budget_progress(b) for b in budgets]

    def get_budget(self, budget_id: str, user_id: str) -> Optional[Dict[str, Any]]:
        budget = self.find_by_id(budget_id, user_id=user_id)
        return budget_progress(budget) if budget else None

    def create_budget(self, user_id: str, category: str, amount: float, period: str = "Monthly",
                      notes: Optional[str] = None) -> str:
        _id = self.insert_one({
            "user_id": user_id,
            "category": category,
            "amount": amount,
            "spent": 0.0,
            "period": period,
            "notes": notes,
        })
        logger.info("[BUDGET] created %s (%s, %s) for %s", _id, category, amount, user_id)
        return _id

    def get_or_create_default(self, user_id: str) -> Dict[str, Any]:
        """Budget "Other" yang dipakai kalau spending dicatat tanpa memilih budget"""
        budget = self.find_one({"user_id": user_id, "category": DEFAULT_BUDGET_CATEGORY})
        if budget:
            return budget_progress(budget)
        _id = self.create_budget(user_id, DEFAULT_BUDGET_CATEGORY, DEFAULT_BUDGET_AMOUNT, "Monthly")
        return self.get_budget(_id, user_id)

    def update_budget(self, budget_id: str, user_id: str, updates: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """Apply validated updates; spent and amount changes are written to the history ledger"""
        existing = self.find_by_id(budget_id, user_id=user_id)
        if not existing:
            return None

        if updates and not self.update_by_id(budget_id, updates, user_id=user_id):
            return None

        previous_spent = float(existing.get("spent") or 0)
        if "spent" in updates and updates["spent"] != previous_spent:
            self.history.record(
                user_id, budget_id,
                amount_changed=updates["spent"] - previous_spent,
                previous_spent=previous_spent,
                new_spent=updates["spent"],
                reason=budget_history.MANUAL_EDIT,
            )
        if "amount" in updates and updates["amount"] != float(existing.get("amount") or 0):
            current_spent = updates.get("spent", previous_spent)
            self.history.record(
                user_id, budget_id,
                amount_changed=0.0,
                previous_spent=current_spent,
                new_spent=current_spent,
                reason=budget_history.LIMIT_CHANGED,
                notes=f"amount {existing.get('amount')} -> {updates['amount']}",
            )
        return self.get_budget(budget_id, user_id)

    def increment_spent(self, budget_id: str, user_id: str, delta: float, reason: str,
                        notes: Optional[str] = None) -> Optional[Dict[str, Any]]:
        """Atomically add delta to spent and log the change; None if the budget is gone"""
        query = self._by_id(budget_id, user_id)
        if query is None:
            return None
        doc = self.collection.find_one_and_update(
            self._live(query),
            {"$inc": {"spent": delta}, "$set": {"updated_at": now_ts()}},
            return_document=ReturnDocument.AFTER,
        )
        if doc is None:
            return None

        new_spent = float(doc.get("spent") or 0)
        self.history.record(
            user_id, budget_id,
            amount_changed=delta,
            previous_spent=new_spent - delta,
            new_spent=new_spent,
            reason=reason,
            notes=notes,
        )
        return budget_progress(self._serialize(doc))

    def delete_budget(self, budget_id: str, user_id: str) -> bool:
        """Soft delete budget beserta spending rows-nya"""
        if not self.soft_delete_by_id(budget_id, user_id=user_id):
            return False
        from jagacuan.repositories.spending import SpendingRepository
        removed = SpendingRepository().soft_delete_for_budget(budget_id, user_id)
        logger.info("[BUDGET] deleted %s and %d spending rows", budget_id, removed)
        return True

    def summary(self, user_id: str) -> Dict[str, Any]:
        budgets = self.list_by_user(user_id, limit=0)
        total_budget = sum(b["amount"] for b in budgets)
        total_spent = sum(b["spent"] for b in budgets)
        return {
            "total_budget": total_budget,
            "total_spent": total_spent,
            "remaining": total_budget - total_spent,
            "progress_pct": round((total_spent / total_budget) * 100) if total_budget > 0 else 0,
            "budget_count": len(budgets),
            "over_budget_count": sum(1 for b in budgets if b["is_over_budget"]),
        }

    def reconcile_budget(self, budget_id: str, user_id: Optional[str] = None) -> Optional[Dict[str, Any]]:
        """Recompute spent from live spending rows and repair drift.

        The write is a compare-and-set on the spent value that was read, so a
        concurrent increment makes the attempt start over instead of being lost.
        While a spending insert or delete is between its row write and its
        counter step the budget is left untouched and reported as in flight.
        """
        from jagacuan.repositories.spending import SpendingRepository
        spending_repo = SpendingRepository()

        for _ in range(RECONCILE_ATTEMPTS):
            # spent must be read before the rows for the compare-and-set to cover them
            budget = self.find_by_id(budget_id, user_id=user_id)
            if not budget:
                return None
            previous_spent = float(budget.get("spent") or 0)

            spending_repo.settle_stale(budget_id)
            in_flight = spending_repo.in_flight_count(budget_id)
            if in_flight:
                logger.info("[BUDGET] reconcile of %s skipped, %d spending rows in flight", budget_id, in_flight)
                return {
                    "budget_id": budget_id,
                    "previous_spent": previous_spent,
                    "new_spent": previous_spent,
                    "drift": 0.0,
                    "in_flight": in_flight,
                }

            actual_spent = spending_repo.total_for_budget(budget_id)
            result = {
                "budget_id": budget_id,
                "previous_spent": previous_spent,
                "new_spent": actual_spent,
                "drift": actual_spent - previous_spent,
            }
            if abs(actual_spent - previous_spent) < SPENT_TOLERANCE:
                result.update(new_spent=previous_spent, drift=0.0)
                return result

            updated = self.collection.update_one(
                self._live({"_id": self._by_id(budget_id)["_id"], "spent": budget.get("spent")}),
                {"$set": {"spent": actual_spent, "updated_at": now_ts()}},
            )
            if updated.matched_count:
                self.history.record(
                    budget["user_id"], budget_id,
                    amount_changed=actual_spent - previous_spent,
                    previous_spent=previous_spent,
                    new_spent=actual_spent,
                    reason=budget_history.RECONCILE,
                )
                logger.info("[BUDGET] reconciled %s: %s -> %s", budget_id, previous_spent, actual_spent)
                return result

        logger.warning("[BUDGET] reconcile of %s kept racing with writers, giving up", budget_id)
        return None

    def reconcile_all(self, user_id: Optional[str] = None) -> List[Dict[str, Any]]:
        """Reconcile every live budget (of one user, or all users); return those that drifted"""
        query = {"user_id": user_id} if user_id else {}
        corrected = []
        for budget in self.find_many(query, limit=0):
            result = self.reconcile_budget(budget["_id"])
            if result and result["drift"]:
                corrected.append(result)
        return corrected
