import json
import logging
import os
from typing import Any, Dict, List, Optional

from jagacuan.repositories.base import MongoRepository


logger = logging.getLogger(__name__)

DEFAULT_CATEGORIES_PATH = os.path.join(
    os.path.dirname(os.path.dirname(__file__)), "data", "default_categories.json"
)


class CategoryRepository(MongoRepository):
    def __init__(self):
        super().__init__("categories")

    def list_by_user(self, user_id: str) -> List[Dict[str, Any]]:
        """Get kategori custom milik user"""
        return self.find_many({"user_id": user_id}, limit=100, sort=[("created_at", 1)])

    def get_default_categories(self) -> List[Dict[str, Any]]:
        """Get default categories dari JSON file"""
        if not os.path.exists(DEFAULT_CATEGORIES_PATH):
            logger.warning("[CATEGORY] default categories file missing: %s", DEFAULT_CATEGORIES_PATH)
            return []

        with open(DEFAULT_CATEGORIES_PATH, "r", encoding="utf-8") as f:
            default_categories = json.load(f)

        return [
            {
                "_id": cat["id"],
                "name": cat["name"],
                "icon": cat.get("icon", "tag"),
                "color": cat.get("color", "#6c757d"),
                "is_default": True,
                "user_id": "system",
            }
            for cat in default_categories
        ]

    def list_by_user_with_defaults(self, user_id: str) -> List[Dict[str, Any]]:
        """Default categories dulu, lalu kategori custom user"""
        return self.get_default_categories() + self.list_by_user(user_id)

    def is_default(self, category_id: str) -> bool:
        return any(cat["_id"] == category_id for cat in self.get_default_categories())

    def create_category(self, user_id: str, name: str, icon: Optional[str] = None) -> Optional[str]:
        """Create kategori custom; None kalau nama sudah dipakai"""
        existing = [cat["name"].lower() for cat in self.list_by_user_with_defaults(user_id)]
        if name.lower() in existing:
            return None
        return self.insert_one({"user_id": user_id, "name": name, "icon": icon or "tag"})

    def delete_category(self, category_id: str, user_id: str) -> bool:
        """Soft delete kategori custom; default categories tidak bisa dihapus"""
        if self.is_default(category_id):
            return False
        return self.soft_delete_by_id(category_id, user_id=user_id)
