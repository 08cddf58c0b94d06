from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

from jagacuan.repositories.base import MongoRepository


TYPE_INCOME = "income"
TYPE_SPENDING = "spending"
TYPES = (TYPE_INCOME, TYPE_SPENDING)
TYPE_ALIASES = {"expense": TYPE_SPENDING}
METHODS = ("manual", "photo")


def period_bounds(year: int, month: Optional[int] = None) -> Tuple[int, int]:
    """Unix [start, end) of a whole year, or of one month (1-12) in it"""
    if month:
        start = datetime(year, month, 1)
        end = datetime(year + 1, 1, 1) if month == 12 else datetime(year, month + 1, 1)
    else:
        start = datetime(year, 1, 1)
        end = datetime(year + 1, 1, 1)
    return int(start.timestamp()), int(end.timestamp())


class TransactionRepository(MongoRepository):
    def __init__(self):
        super().__init__("transactions")

    def list_by_user(self, user_id: str, year: Optional[int] = None, month: Optional[int] = None,
                     limit: int = 100) -> List[Dict[str, Any]]:
        """Transaksi user terbaru dulu; month hanya berlaku kalau year diisi"""
        query: Dict[str, Any] = {"user_id": user_id}
        if year:
            start, end = period_bounds(year, month)
            query["timestamp"] = {"$gte": start, "$lt": end}

        transactions = self.find_many(query, limit=limit, sort=[("timestamp", -1), ("_id", -1)])
        for tx in transactions:
            tx["date"] = datetime.fromtimestamp(tx.get("timestamp", 0)).isoformat()
        return transactions

    def get_transaction(self, transaction_id: str, user_id: str) -> Optional[Dict[str, Any]]:
        tx = self.find_by_id(transaction_id, user_id=user_id)
        if tx:
            tx["date"] = datetime.fromtimestamp(tx.get("timestamp", 0)).isoformat()
        return tx

    def available_years(self, user_id: str) -> List[int]:
        timestamps = self.collection.distinct("timestamp", self._live({"user_id": user_id}))
        years = {datetime.fromtimestamp(ts).year for ts in timestamps}
        return sorted(years, reverse=True)

    def find_between(self, user_id: str, start_timestamp: int, end_timestamp: int,
                     tx_type: Optional[str] = None) -> List[Dict[str, Any]]:
        query: Dict[str, Any] = {
            "user_id": user_id,
            "timestamp": {"$gte": start_timestamp, "$lt": end_timestamp},
        }
        if tx_type:
            query["type"] = tx_type
        return self.find_many(query, limit=0, sort=[("timestamp", 1)])

    def totals_between(self, user_id: str, start_timestamp: int, end_timestamp: int) -> Dict[str, float]:
        transactions = self.find_between(user_id, start_timestamp, end_timestamp)
        income = sum(float(tx.get("amount", 0)) for tx in transactions if tx.get("type") == TYPE_INCOME)
        spending = sum(float(tx.get("amount", 0)) for tx in transactions if tx.get("type") == TYPE_SPENDING)
        return {"income": income, "spending": spending, "net_cashflow": income - spending}
