import logging
from collections import OrderedDict
from typing import Any, Dict, List, Optional

from jagacuan.repositories import budget_history
from jagacuan.repositories.base import MongoRepository, now_ts
from jagacuan.repositories.budgets import BudgetRepository


logger = logging.getLogger(__name__)

# Rows whose counter step has not settled after this long are treated as abandoned
IN_FLIGHT_GRACE_SECONDS = 300

# A row's "counted" flag says whether its amount is part of the budget's spent:
#   live, counted False   -> insert in flight, $inc may not have landed yet
#   deleted, counted True -> delete in flight, the decrement may not have landed yet
# Rows written before the flag existed have no "counted" key and count while live.
COUNTED_QUERY = {"$or": [
    {"deleted_at": None, "counted": {"$ne": False}},
    {"deleted_at": {"$ne": None}, "counted": True},
]}
IN_FLIGHT_QUERY = {"$or": [
    {"deleted_at": None, "counted": False},
    {"deleted_at": {"$ne": None}, "counted": True},
]}


class SpendingRepository(MongoRepository):
    def __init__(self):
        super().__init__("spending_tracker")

    def _set_counted(self, spending_id: str, counted: bool) -> None:
        self.collection.update_one(
            self._by_id(spending_id),
            {"$set": {"counted": counted, "updated_at": now_ts()}},
        )

    def add_spending(self, user_id: str, budget_id: Optional[str], description: str, amount: float,
                     date: int) -> Optional[Dict[str, Any]]:
        """Insert a spending row and bump its budget's spent counter.

        Without a budget_id the user's default "Other" budget is used. Returns
        None when the budget does not exist or belongs to someone else. The row
        is written uncounted and flagged counted once the $inc has landed, so a
        reconcile running in between leaves the counter alone.
        """
        budgets = BudgetRepository()
        if budget_id:
            budget = budgets.get_budget(budget_id, user_id)
        else:
            budget = budgets.get_or_create_default(user_id)
        if not budget:
            return None

        spending = {
            "user_id": user_id,
            "budget_id": budget["_id"],
            "amount": amount,
            "description": description,
            "date": date,
            "counted": False,
        }
        self.insert_one(spending)

        updated_budget = budgets.increment_spent(
            budget["_id"], user_id, amount, budget_history.SPENDING_ADDED, notes=description
        )
        if updated_budget is None:
            # budget deleted between the lookup and the increment
            logger.warning("[SPENDING] budget %s vanished, dropping spending %s", budget["_id"], spending["_id"])
            self.soft_delete_by_id(spending["_id"], user_id=user_id)
            return None

        self._set_counted(spending["_id"], True)
        spending["counted"] = True
        logger.info("[SPENDING] %s added %s to budget %s", user_id, amount, budget["_id"])
        spending["budget"] = updated_budget
        return spending

    def delete_spending(self, spending_id: str, user_id: str) -> bool:
        """Soft delete a spending row and take its amount back off the budget"""
        spending = self.find_by_id(spending_id, user_id=user_id)
        if not spending or spending.get("counted") is False:
            return False

        # only the request that flips deleted_at gets to decrement
        query = self._live(self._by_id(spending_id, user_id))
        query["counted"] = {"$ne": False}
        result = self.collection.update_one(
            query,
            {"$set": {"deleted_at": now_ts(), "counted": True, "updated_at": now_ts()}},
        )
        if not result.matched_count:
            return False

        amount = float(spending.get("amount") or 0)
        budgets = BudgetRepository()
        budget = budgets.increment_spent(
            spending["budget_id"], user_id, -amount, budget_history.SPENDING_REMOVED,
            notes=spending.get("description"),
        )
        self._set_counted(spending_id, False)
        if budget and budget["spent"] < 0:
            logger.warning("[SPENDING] spent of budget %s went negative (%s), reconciling", budget["_id"], budget["spent"])
            budgets.reconcile_budget(budget["_id"], user_id)
        return True

    def soft_delete_for_budget(self, budget_id: str, user_id: str) -> int:
        result = self.collection.update_many(
            {"budget_id": budget_id, "user_id": user_id, "deleted_at": None},
            {"$set": {"deleted_at": now_ts(), "counted": False, "updated_at": now_ts()}},
        )
        return result.modified_count

    def total_for_budget(self, budget_id: str) -> float:
        """Sum of the rows whose amount is part of the budget's spent counter"""
        pipeline = [
            {"$match": {"budget_id": budget_id, **COUNTED_QUERY}},
            {"$group": {"_id": "$budget_id", "total": {"$sum": "$amount"}}},
        ]
        grouped = list(self.collection.aggregate(pipeline))
        return float(grouped[0]["total"]) if grouped else 0.0

    def in_flight_count(self, budget_id: str) -> int:
        return self.collection.count_documents({"budget_id": budget_id, **IN_FLIGHT_QUERY})

    def settle_stale(self, budget_id: str, grace_seconds: int = IN_FLIGHT_GRACE_SECONDS) -> int:
        """Close out in-flight rows whose writer never finished.

        A stale live row becomes counted and a stale deleted row uncounted;
        reconcile then brings spent in line with whatever actually landed.
        """
        cutoff = now_ts() - grace_seconds
        inserted = self.collection.update_many(
            {"budget_id": budget_id, "deleted_at": None, "counted": False, "updated_at": {"$lt": cutoff}},
            {"$set": {"counted": True}},
        )
        removed = self.collection.update_many(
            {"budget_id": budget_id, "deleted_at": {"$ne": None}, "counted": True, "updated_at": {"$lt": cutoff}},
            {"$set": {"counted": False}},
        )
        settled = inserted.modified_count + removed.modified_count
        if settled:
            logger.warning("[SPENDING] settled %d stale in-flight rows of budget %s", settled, budget_id)
        return settled

    def list_by_user(self, user_id: str, budget_id: Optional[str] = None, limit: int = 200) -> List[Dict[str, Any]]:
        """Spending rows newest first, each joined with its budget"""
        budgets = {b["_id"]: b for b in BudgetRepository().list_by_user(user_id, limit=0)}
        query = {"user_id": user_id, "budget_id": {"$in": list(budgets)}}
        if budget_id:
            if budget_id not in budgets:
                return []
            query["budget_id"] = budget_id

        rows = self.find_many(query, limit=limit, sort=[("created_at", -1), ("_id", -1)])
        for row in rows:
            budget = budgets[row["budget_id"]]
            row["budgeting"] = {
                "_id": budget["_id"],
                "category": budget.get("category"),
                "amount": budget["amount"],
                "spent": budget["spent"],
            }
        return rows

    @staticmethod
    def group_by_category(rows: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        groups: "OrderedDict[str, Dict[str, Any]]" = OrderedDict()
        for row in rows:
            category = row["budgeting"]["category"]
            group = groups.setdefault(category, {"category": category, "total": 0.0, "items": []})
            group["total"] += float(row.get("amount") or 0)
            group["items"].append(row)
        return list(groups.values())

    def find_between(self, user_id: str, start_timestamp: int, end_timestamp: int) -> List[Dict[str, Any]]:
        query = {"user_id": user_id, "date": {"$gte": start_timestamp, "$lt": end_timestamp}}
        return self.find_many(query, limit=0, sort=[("date", 1)])

    def total_between(self, user_id: str, start_timestamp: int, end_timestamp: int) -> float:
        return sum(float(r.get("amount") or 0) for r in self.find_between(user_id, start_timestamp, end_timestamp))
