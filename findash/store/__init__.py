"""Entity store package."""

from findash.store.entity_store import (
    CATEGORIES_KEY,
    GOALS_KEY,
    THEME_KEY,
    TRANSACTIONS_KEY,
    CategoryInUseError,
    EntityStore,
    StoreError,
)
from findash.store.seed import seed_categories, seed_goals, seed_transactions

__all__ = [
    "CATEGORIES_KEY",
    "GOALS_KEY",
    "THEME_KEY",
    "TRANSACTIONS_KEY",
    "CategoryInUseError",
    "EntityStore",
    "StoreError",
    "seed_categories",
    "seed_goals",
    "seed_transactions",
]
