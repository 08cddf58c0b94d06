from __future__ import annotations

from typing import Any, Dict, List


# MongoDB logical model templates
# Every document is owned by one user through user_id; deleted_at marks soft deletes


domain_models: Dict[str, Dict[str, Any]] = {
    "users": {
        "username": "",
        "email": "",  # unique, stored lowercase
        "password": "",  # werkzeug hash
        "name": "",
        "created_at": 0,
        "updated_at": 0,
        "deleted_at": None,
    },

    "user_roles": {
        "user_id": "",
        "role": "",  # admin | user
        "created_at": 0,
    },

    # Custom categories; defaults live in jagacuan/data/default_categories.json
    "categories": {
        "user_id": "",
        "name": "",
        "icon": "",
        "created_at": 0,
        "updated_at": 0,
        "deleted_at": None,
    },

    # Budget per category; spent is a counter kept in step with spending_tracker
    "budgeting": {
        "user_id": "",
        "category": "",
        "amount": 0.0,
        "spent": 0.0,
        "period": "Monthly",  # Weekly | Monthly | Yearly
        "notes": None,
        "created_at": 0,
        "updated_at": 0,
        "deleted_at": None,
    },

    "spending_tracker": {
        "user_id": "",
        "budget_id": "",  # reference to budgeting._id
        "amount": 0.0,
        "description": "",
        "date": 0,  # unix seconds
        "counted": False,  # true while the amount is part of budgeting.spent
        "created_at": 0,
        "updated_at": 0,
        "deleted_at": None,
    },

    # Append-only ledger of changes to budgeting.spent / budgeting.amount
    "budgeting_history": {
        "user_id": "",
        "budget_id": "",
        "amount_changed": 0.0,
        "previous_spent": 0.0,
        "new_spent": 0.0,
        "reason": "",  # spending_added | spending_removed | manual_edit | limit_changed | reconcile
        "notes": None,
        "created_at": 0,
    },

    "transactions": {
        "user_id": "",
        "type": "",  # income | spending
        "name": "",
        "amount": 0.0,
        "method": "manual",  # manual | photo
        "category_id": None,
        "notes": None,
        "photo_url": None,
        "timestamp": 0,  # unix seconds
        "created_at": 0,
        "updated_at": 0,
        "deleted_at": None,
    },

    "saving_goals": {
        "user_id": "",
        "goal_name": "",
        "current_amount": 0.0,
        "target_amount": 0.0,
        "deadline": None,  # YYYY-MM-DD
        "status": "ongoing",  # ongoing | achieved
        "created_at": 0,
        "updated_at": 0,
        "deleted_at": None,
    },

    "saving_goals_history": {
        "user_id": "",
        "goal_id": "",
        "amount_added": 0.0,
        "previous_amount": 0.0,
        "new_amount": 0.0,
        "notes": None,
        "created_at": 0,
    },

    # User challenges
    "game": {
        "user_id": "",
        "game_name": "",
        "description": "",
        "duration_days": 0,
        "goal_amount": 0.0,
        "score": 0,
        "status": "ongoing",  # ongoing | completed
        "created_at": 0,
        "updated_at": 0,
        "deleted_at": None,
    },

    # Challenges published by admins
    "default_challenges": {
        "title": "",
        "description": "",
        "reward_points": 0,
        "start_date": "",
        "end_date": None,
        "created_by": "",
        "created_at": 0,
        "updated_at": 0,
        "deleted_at": None,
    },

    "education": {
        "title": "",
        "content": "",
        "type": "daily_tips",  # video | quiz | daily_tips
        "created_by": "",
        "created_at": 0,
        "updated_at": 0,
        "deleted_at": None,
    },
}


# Suggested indexes (to be applied via config.ensure_indexes)
index_specs: Dict[str, List] = {
    "users": [
        (("email", 1), {"name": "idx_user_email", "unique": True}),
        (("username", 1), {"name": "idx_user_username", "unique": True}),
    ],
    "user_roles": [
        ([("user_id", 1), ("role", 1)], {"name": "idx_role_user", "unique": True}),
    ],
    "categories": [(("user_id", 1), {"name": "idx_cat_user"})],
    "budgeting": [(("user_id", 1), {"name": "idx_budget_user"})],
    "spending_tracker": [
        (("user_id", 1), {"name": "idx_spend_user"}),
        (("budget_id", 1), {"name": "idx_spend_budget"}),
    ],
    "budgeting_history": [(("budget_id", 1), {"name": "idx_budget_hist"})],
    "transactions": [
        (("user_id", 1), {"name": "idx_tx_user"}),
        (("timestamp", -1), {"name": "idx_tx_time"}),
    ],
    "saving_goals": [(("user_id", 1), {"name": "idx_goal_user"})],
    "saving_goals_history": [(("goal_id", 1), {"name": "idx_goal_hist"})],
    "game": [(("user_id", 1), {"name": "idx_game_user"})],
}
