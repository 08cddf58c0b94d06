from .base import MongoRepository
from .users import UserRepository
from .roles import UserRoleRepository
from .categories import CategoryRepository
from .budget_history import BudgetHistoryRepository
from .budgets import BudgetRepository
from .spending import SpendingRepository
from .goals import GoalRepository, GoalHistoryRepository
from .transactions import TransactionRepository
from .challenges import ChallengeRepository, DefaultChallengeRepository
from .education import EducationRepository

__all__ = [
    'MongoRepository',
    'UserRepository',
    'UserRoleRepository',
    'CategoryRepository',
    'BudgetHistoryRepository',
    'BudgetRepository',
    'SpendingRepository',
    'GoalRepository',
    'GoalHistoryRepository',
    'TransactionRepository',
    'ChallengeRepository',
    'DefaultChallengeRepository',
    'EducationRepository',
]
