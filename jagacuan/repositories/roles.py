from pymongo.errors import DuplicateKeyError

from jagacuan.repositories.base import MongoRepository


ADMIN_ROLE = "admin"


class UserRoleRepository(MongoRepository):
    soft_delete = False

    def __init__(self):
        super().__init__("user_roles")

    def has_role(self, user_id: str, role: str) -> bool:
        return self.find_one({"user_id": user_id, "role": role}) is not None

    def is_admin(self, user_id: str) -> bool:
        return self.has_role(user_id, ADMIN_ROLE)

    def grant(self, user_id: str, role: str) -> bool:
        if self.has_role(user_id, role):
            return False
        try:
            self.insert_one({"user_id": user_id, "role": role})
        except DuplicateKeyError:
            return False
        return True
