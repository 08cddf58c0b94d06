import logging
import time
from typing import Any, Dict, List, Optional

from bson import ObjectId
from bson.errors import InvalidId

from config import get_collection


logger = logging.getLogger(__name__)


def now_ts() -> int:
    return int(time.time())


def to_object_id(id_str: str) -> Optional[ObjectId]:
    """Convert string ID ke ObjectId, None kalau formatnya salah"""
    if isinstance(id_str, ObjectId):
        return id_str
    try:
        return ObjectId(id_str)
    except (InvalidId, TypeError):
        return None


class MongoRepository:
    # Collections with soft delete hide rows whose deleted_at is set
    soft_delete = True

    def __init__(self, collection_name: str):
        self.collection = get_collection(collection_name)

    @staticmethod
    def _serialize(doc: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
        if doc:
            doc["_id"] = str(doc["_id"])
        return doc

    def _live(self, query: Dict[str, Any], include_deleted: bool = False) -> Dict[str, Any]:
        if self.soft_delete and not include_deleted:
            query = dict(query)
            query.setdefault("deleted_at", None)
        return query

    def _by_id(self, id_str: str, user_id: Optional[str] = None) -> Optional[Dict[str, Any]]:
        obj_id = to_object_id(id_str)
        if obj_id is None:
            return None
        query = {"_id": obj_id}
        if user_id is not None:
            query["user_id"] = user_id
        return query

    def insert_one(self, data: Dict[str, Any]) -> str:
        """Insert satu dokumen dan return ID"""
        current_time = now_ts()
        data.setdefault("created_at", current_time)
        data.setdefault("updated_at", current_time)
        if self.soft_delete:
            data.setdefault("deleted_at", None)
        try:
            result = self.collection.insert_one(data)
        except Exception:
            logger.exception("[BASE] insert into %s failed", self.collection.name)
            raise
        data["_id"] = str(result.inserted_id)
        return data["_id"]

    def find_by_id(self, id_str: str, user_id: Optional[str] = None, include_deleted: bool = False) -> Optional[Dict[str, Any]]:
        """Find dokumen berdasarkan ID, optionally restricted to its owner"""
        query = self._by_id(id_str, user_id)
        if query is None:
            return None
        return self._serialize(self.collection.find_one(self._live(query, include_deleted)))

    def find_many(self, query: Dict[str, Any], limit: int = 100, sort: Optional[List] = None,
                  include_deleted: bool = False) -> List[Dict[str, Any]]:
        """Find banyak dokumen dengan query sederhana"""
        cursor = self.collection.find(self._live(query, include_deleted))
        if sort:
            cursor = cursor.sort(sort)
        if limit:
            cursor = cursor.limit(limit)
        return [self._serialize(doc) for doc in cursor]

    def find_one(self, query: Dict[str, Any], include_deleted: bool = False) -> Optional[Dict[str, Any]]:
        """Find satu dokumen"""
        return self._serialize(self.collection.find_one(self._live(query, include_deleted)))

    def update_by_id(self, id_str: str, updates: Dict[str, Any], user_id: Optional[str] = None) -> bool:
        """Update dokumen berdasarkan ID; False kalau tidak ketemu atau bukan milik user"""
        query = self._by_id(id_str, user_id)
        if query is None:
            return False
        updates = dict(updates)
        updates["updated_at"] = now_ts()
        result = self.collection.update_one(self._live(query), {"$set": updates})
        return result.matched_count > 0

    def soft_delete_by_id(self, id_str: str, user_id: Optional[str] = None) -> bool:
        """Tandai dokumen sebagai terhapus lewat deleted_at"""
        return self.update_by_id(id_str, {"deleted_at": now_ts()}, user_id=user_id)

    def count(self, query: Dict[str, Any] = None) -> int:
        """Count dokumen"""
        if query is None:
            query = {}
        return self.collection.count_documents(self._live(query))
