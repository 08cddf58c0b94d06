from typing import Any, Dict, Optional

from werkzeug.security import check_password_hash, generate_password_hash

from jagacuan.repositories.base import MongoRepository


class UserRepository(MongoRepository):
    def __init__(self):
        super().__init__("users")

    def find_by_username(self, username: str) -> Optional[Dict[str, Any]]:
        return self.find_one({"username": username})

    def find_by_email(self, email: str) -> Optional[Dict[str, Any]]:
        return self.find_one({"email": email.strip().lower()})

    def find_by_login(self, login: str) -> Optional[Dict[str, Any]]:
        """Login boleh pakai email atau username"""
        if "@" in login:
            return self.find_by_email(login)
        return self.find_by_username(login)

    def create_user(self, username: str, email: str, password: str, name: str = None) -> str:
        return self.insert_one({
            "username": username,
            "email": email.strip().lower(),
            "password": generate_password_hash(password),
            "name": name or username,
        })

    @staticmethod
    def check_password(user: Dict[str, Any], password: str) -> bool:
        return check_password_hash(user.get("password", ""), password)

    @staticmethod
    def public_view(user: Dict[str, Any]) -> Dict[str, Any]:
        return {
            "_id": user["_id"],
            "username": user.get("username"),
            "email": user.get("email"),
            "name": user.get("name") or user.get("username"),
        }
