import logging
from typing import Any, Dict, List, Optional

from pymongo import ReturnDocument

from jagacuan.repositories.base import MongoRepository, now_ts


logger = logging.getLogger(__name__)

STATUS_ONGOING = "ongoing"
STATUS_ACHIEVED = "achieved"


def goal_progress(goal: Dict[str, Any]) -> Dict[str, Any]:
    current = float(goal.get("current_amount") or 0)
    target = float(goal.get("target_amount") or 0)
    goal["current_amount"] = current
    goal["target_amount"] = target
    goal["progress_pct"] = min((current / target) * 100, 100) if target > 0 else 0
    goal["remaining"] = max(target - current, 0)
    return goal


class GoalHistoryRepository(MongoRepository):
    soft_delete = False

    def __init__(self):
        super().__init__("saving_goals_history")

    def record(self, user_id: str, goal_id: str, amount_added: float, previous_amount: float,
               new_amount: float, notes: Optional[str] = None) -> str:
        return self.insert_one({
            "user_id": user_id,
            "goal_id": goal_id,
            "amount_added": amount_added,
            "previous_amount": previous_amount,
            "new_amount": new_amount,
            "notes": notes,
        })

    def list_for_goal(self, goal_id: str, user_id: str, limit: int = 100) -> List[Dict[str, Any]]:
        return self.find_many({"goal_id": goal_id, "user_id": user_id}, limit=limit,
                              sort=[("created_at", -1), ("_id", -1)])


class GoalRepository(MongoRepository):
    def __init__(self):
        super().__init__("saving_goals")
        self.history = GoalHistoryRepository()

    def list_by_user(self, user_id: str, limit: int = 100) -> List[Dict[str, Any]]:
        goals = self.find_many({"user_id": user_id}, limit=limit, sort=[("created_at", -1), ("_id", -1)])
        return [goal_progress(g) for g in goals]

    def get_goal(self, goal_id: str, user_id: str) -> Optional[Dict[str, Any]]:
        goal = self.find_by_id(goal_id, user_id=user_id)
        return goal_progress(goal) if goal else None

    def create_goal(self, user_id: str, goal_name: str, target_amount: float,
                    deadline: Optional[str] = None) -> str:
        return self.insert_one({
            "user_id": user_id,
            "goal_name": goal_name,
            "target_amount": target_amount,
            "current_amount": 0.0,
            "deadline": deadline,
            "status": STATUS_ONGOING,
        })

    def update_goal(self, goal_id: str, user_id: str, updates: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        goal = self.get_goal(goal_id, user_id)
        if not goal:
            return None
        if "target_amount" in updates:
            achieved = goal["current_amount"] >= updates["target_amount"]
            updates["status"] = STATUS_ACHIEVED if achieved else STATUS_ONGOING
        if updates and not self.update_by_id(goal_id, updates, user_id=user_id):
            return None
        return self.get_goal(goal_id, user_id)

    def add_progress(self, goal_id: str, user_id: str, amount: float,
                     notes: Optional[str] = None) -> Optional[Dict[str, Any]]:
        """Add amount to current_amount in one atomic $inc and log it.

        previous/new amounts come from the document the increment returns, so
        two sessions adding at the same time both land.
        """
        query = self._by_id(goal_id, user_id)
        if query is None:
            return None
        doc = self.collection.find_one_and_update(
            self._live(query),
            {"$inc": {"current_amount": amount}, "$set": {"updated_at": now_ts()}},
            return_document=ReturnDocument.AFTER,
        )
        if doc is None:
            return None

        new_amount = float(doc["current_amount"])
        self.history.record(user_id, goal_id, amount, new_amount - amount, new_amount, notes)

        if doc.get("status") != STATUS_ACHIEVED and new_amount >= float(doc.get("target_amount") or 0):
            self.collection.update_one({"_id": doc["_id"]}, {"$set": {"status": STATUS_ACHIEVED}})
            doc["status"] = STATUS_ACHIEVED
            logger.info("[GOAL] %s achieved by %s", goal_id, user_id)
        return goal_progress(self._serialize(doc))

    def summary(self, user_id: str) -> Dict[str, Any]:
        goals = self.list_by_user(user_id, limit=0)
        current = sum(g["current_amount"] for g in goals)
        target = sum(g["target_amount"] for g in goals)
        return {
            "current_savings": current,
            "savings_target": target,
            "progress_pct": round(min((current / target) * 100, 100)) if target > 0 else 0,
            "goal_count": len(goals),
            "achieved_count": sum(1 for g in goals if g.get("status") == STATUS_ACHIEVED),
        }
