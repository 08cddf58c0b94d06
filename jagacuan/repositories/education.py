from typing import Any, Dict, List, Optional

from jagacuan.repositories.base import MongoRepository


EDUCATION_TYPES = ("video", "quiz", "daily_tips")


class EducationRepository(MongoRepository):
    def __init__(self):
        super().__init__("education")

    def list_content(self, content_type: Optional[str] = None) -> List[Dict[str, Any]]:
        query = {"type": content_type} if content_type else {}
        return self.find_many(query, limit=100, sort=[("created_at", -1), ("_id", -1)])
