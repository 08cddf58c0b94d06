from typing import Any, Dict, List, Optional

from jagacuan.repositories.base import MongoRepository


STATUS_ONGOING = "ongoing"
STATUS_COMPLETED = "completed"


class ChallengeRepository(MongoRepository):
    """Challenges a user has taken (the game collection)."""

    def __init__(self):
        super().__init__("game")

    def list_by_user(self, user_id: str) -> List[Dict[str, Any]]:
        return self.find_many({"user_id": user_id}, limit=100, sort=[("created_at", -1), ("_id", -1)])

    def create_challenge(self, user_id: str, title: str, description: str, duration_days: int,
                         goal_amount: float) -> str:
        return self.insert_one({
            "user_id": user_id,
            "game_name": title,
            "description": description,
            "duration_days": duration_days,
            "goal_amount": goal_amount,
            "score": 0,
            "status": STATUS_ONGOING,
        })

    def set_score(self, challenge_id: str, user_id: str, score: int) -> Optional[Dict[str, Any]]:
        if not self.update_by_id(challenge_id, {"score": score}, user_id=user_id):
            return None
        return self.find_by_id(challenge_id, user_id=user_id)

    def complete(self, challenge_id: str, user_id: str) -> Optional[Dict[str, Any]]:
        if not self.update_by_id(challenge_id, {"status": STATUS_COMPLETED}, user_id=user_id):
            return None
        return self.find_by_id(challenge_id, user_id=user_id)

    def leaderboard(self, limit: int = 10) -> List[Dict[str, Any]]:
        """Total score per user over live challenges, highest first"""
        pipeline = [
            {"$match": {"deleted_at": None}},
            {"$group": {"_id": "$user_id", "score": {"$sum": "$score"}}},
            {"$sort": {"score": -1, "_id": 1}},
            {"$limit": limit},
        ]
        rows = list(self.collection.aggregate(pipeline))

        from jagacuan.repositories.users import UserRepository
        users = UserRepository()
        board = []
        for rank, row in enumerate(rows, start=1):
            user = users.find_by_id(row["_id"])
            board.append({
                "rank": rank,
                "user_id": row["_id"],
                "username": user.get("username") if user else None,
                "score": row["score"],
            })
        return board


class DefaultChallengeRepository(MongoRepository):
    """Challenges published by admins for every user."""

    def __init__(self):
        super().__init__("default_challenges")

    def list_active(self) -> List[Dict[str, Any]]:
        return self.find_many({}, limit=100, sort=[("created_at", -1), ("_id", -1)])
