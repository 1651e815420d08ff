"""
Entity Store

Owns the three collections (transactions, categories, goals) plus the theme
preference, and keeps local storage in step with them.

DESIGN DECISION: In-memory state is authoritative.
- Every mutation updates memory first, then writes the affected collection.
- A failed write is audited and swallowed; the session keeps working.
- A failed or corrupt read falls back to seed data instead of crashing.

The only error surfaced to callers is CategoryInUseError, because it is the
only case where the caller has to decide what to do next.
"""

import json
from datetime import date, datetime
from typing import Callable, Optional, TypeVar, Union

from pydantic import BaseModel

from findash.audit import AuditLogger
from findash.config import get_settings
from findash.models.audit import AuditEventBuilder, AuditEventType
from findash.models.finance import (
    Category,
    CategoryData,
    Goal,
    GoalData,
    Theme,
    Transaction,
    TransactionData,
    TransactionType,
    new_id,
)
from findash.reports.aggregations import (
    MonthlySeries,
    MonthSummary,
    add_months,
    month_summary,
    total_balance,
)
from findash.services.storage import (
    KeyValueStorage,
    StorageReadError,
    StorageWriteError,
)
from findash.store.seed import seed_categories, seed_goals, seed_transactions


TRANSACTIONS_KEY = "findash_transactions"
CATEGORIES_KEY = "findash_categories"
GOALS_KEY = "findash_goals"
THEME_KEY = "findash_theme"

EntityT = TypeVar("EntityT", bound=BaseModel)


class StoreError(Exception):
    """Base exception for entity store operations."""
    pass


class CategoryInUseError(StoreError):
    """Raised when deleting a category that transactions still reference."""

    def __init__(self, category_id: str, references: int):
        self.category_id = category_id
        self.references = references
        super().__init__(
            f"Category {category_id} is used by {references} transaction(s)"
        )


class EntityStore:
    """
    In-memory collections backed by a key-value storage.

    Usage:
        store = EntityStore(InMemoryStorage())
        store.load()
        store.add_transaction(data)
    """

    def __init__(
        self,
        storage: KeyValueStorage,
        audit_logger: Optional[AuditLogger] = None,
        default_theme: Optional[Union[Theme, str]] = None,
    ):
        self._storage = storage
        self._audit = audit_logger or AuditLogger()
        if default_theme is None:
            default_theme = get_settings().app.default_theme
        self._default_theme = _resolve_theme(default_theme, Theme.DARK)

        self._transactions: list[Transaction] = []
        self._categories: list[Category] = []
        self._goals: list[Goal] = []
        self._theme = self._default_theme

    # =========================================================================
    # LIFECYCLE
    # =========================================================================

    def load(self, today: Optional[date] = None) -> None:
        """
        Read every collection from storage.

        Absent collections are initialized with seed data and written back
        immediately. Unreadable ones fall back to seed data in memory only,
        leaving the stored value untouched until the next mutation.
        """
        self._transactions = self._load_collection(
            TRANSACTIONS_KEY, Transaction, lambda: seed_transactions(today)
        )
        self._categories = self._load_collection(
            CATEGORIES_KEY, Category, seed_categories
        )
        self._goals = self._load_collection(GOALS_KEY, Goal, seed_goals)
        self._theme = self._load_theme()

        self._audit.log(AuditEventBuilder.store_loaded(
            len(self._transactions), len(self._categories), len(self._goals)
        ))

    def save(self) -> None:
        """Write all collections and the theme preference."""
        self._persist(TRANSACTIONS_KEY, self._transactions)
        self._persist(CATEGORIES_KEY, self._categories)
        self._persist(GOALS_KEY, self._goals)
        self._write(THEME_KEY, self._theme.value)

    def _load_collection(
        self,
        key: str,
        model: type[EntityT],
        seed: Callable[[], list[EntityT]],
    ) -> list[EntityT]:
        try:
            raw = self._storage.get(key)
            if raw is not None:
                records = json.loads(raw)
                if not isinstance(records, list):
                    raise ValueError(f"Expected a JSON list, got {type(records).__name__}")
                return [model.model_validate(record) for record in records]
        except (StorageReadError, ValueError) as e:
            # json and pydantic errors are both ValueErrors
            self._audit.log(AuditEventBuilder.storage_read_failed(key, str(e)))
            return seed()

        records = seed()
        self._audit.log(AuditEventBuilder.seed_data_loaded(key, len(records)))
        self._persist(key, records)
        return records

    def _load_theme(self) -> Theme:
        try:
            raw = self._storage.get(THEME_KEY)
        except StorageReadError as e:
            self._audit.log(AuditEventBuilder.storage_read_failed(THEME_KEY, str(e)))
            return self._default_theme
        if raw is None:
            return self._default_theme
        return _resolve_theme(raw.strip(), self._default_theme)

    def _persist(self, key: str, records: list[BaseModel]) -> None:
        payload = json.dumps(
            [record.to_storage_dict() for record in records],
            ensure_ascii=False,
        )
        self._write(key, payload)

    def _write(self, key: str, value: str) -> None:
        try:
            self._storage.set(key, value)
        except StorageWriteError as e:
            self._audit.log(AuditEventBuilder.storage_write_failed(key, str(e)))

    # =========================================================================
    # READ ACCESS
    # =========================================================================

    @property
    def transactions(self) -> tuple[Transaction, ...]:
        return tuple(self._transactions)

    @property
    def categories(self) -> tuple[Category, ...]:
        return tuple(self._categories)

    @property
    def goals(self) -> tuple[Goal, ...]:
        return tuple(self._goals)

    @property
    def theme(self) -> Theme:
        return self._theme

    def get_transaction(self, transaction_id: str) -> Optional[Transaction]:
        return _find(self._transactions, transaction_id)

    def get_category(self, category_id: str) -> Optional[Category]:
        """Look up a category; dangling references give None."""
        return _find(self._categories, category_id)

    def get_goal(self, goal_id: str) -> Optional[Goal]:
        return _find(self._goals, goal_id)

    def categories_for_type(self, type_: TransactionType) -> list[Category]:
        """Categories offered for a transaction of the given type."""
        return [c for c in self._categories if c.type == type_]

    # =========================================================================
    # DERIVED STATE
    # =========================================================================

    def month_summary(self, year: int, month: int) -> MonthSummary:
        return month_summary(self._transactions, year, month)

    def current_month_summary(self, today: Optional[date] = None) -> MonthSummary:
        today = today or date.today()
        return self.month_summary(today.year, today.month)

    def total_balance(self) -> float:
        return total_balance(self._transactions)

    def chart_series(
        self,
        months: Optional[int] = None,
        today: Optional[date] = None,
    ) -> MonthlySeries:
        return MonthlySeries(self._transactions, months=months, today=today)

    # =========================================================================
    # TRANSACTIONS
    # =========================================================================

    def add_transaction(self, data: TransactionData) -> Transaction:
        """Store a new transaction under a fresh id and return it."""
        transaction = Transaction.model_validate({**data.model_dump(), "id": new_id()})
        self._transactions.append(transaction)
        self._persist(TRANSACTIONS_KEY, self._transactions)
        self._audit.log(AuditEventBuilder.transaction_added(
            transaction.id, transaction.description, transaction.amount
        ))
        return transaction

    def update_transaction(self, transaction: Transaction) -> bool:
        """
        Replace the stored transaction with the same id.

        Returns False (and changes nothing) when the id is unknown,
        e.g. because it was deleted in the meantime.
        """
        index = _index_of(self._transactions, transaction.id)
        if index is None:
            self._audit.log(AuditEventBuilder.entity_not_found("transaction", transaction.id))
            return False

        self._transactions[index] = transaction
        self._persist(TRANSACTIONS_KEY, self._transactions)
        self._audit.log(AuditEventBuilder.transaction_updated(
            transaction.id, transaction.description
        ))
        return True

    def delete_transaction(self, transaction_id: str) -> bool:
        index = _index_of(self._transactions, transaction_id)
        if index is None:
            self._audit.log(AuditEventBuilder.entity_not_found("transaction", transaction_id))
            return False

        del self._transactions[index]
        self._persist(TRANSACTIONS_KEY, self._transactions)
        self._audit.log(AuditEventBuilder.transaction_deleted(transaction_id))
        return True

    def duplicate_transaction(
        self,
        transaction_id: str,
        new_date: Optional[Union[date, datetime]] = None,
    ) -> Optional[Transaction]:
        """
        Copy a transaction to another date under a new id.

        Without `new_date` the copy lands on the same day next month.
        Returns None when the source does not exist.
        """
        source = self.get_transaction(transaction_id)
        if source is None:
            self._audit.log(AuditEventBuilder.entity_not_found("transaction", transaction_id))
            return None

        if new_date is None:
            new_date = add_months(source.date, 1)

        copy = Transaction.model_validate({
            **source.to_data().model_dump(exclude={"date"}),
            "id": new_id(),
            "date": new_date,
        })
        self._transactions.append(copy)
        self._persist(TRANSACTIONS_KEY, self._transactions)
        self._audit.log(AuditEventBuilder.transaction_duplicated(
            source.id, copy.id, copy.date
        ))
        return copy

    # =========================================================================
    # CATEGORIES
    # =========================================================================

    def add_category(self, data: CategoryData) -> Category:
        category = Category.model_validate({**data.model_dump(), "id": new_id()})
        self._categories.append(category)
        self._persist(CATEGORIES_KEY, self._categories)
        self._audit.log(AuditEventBuilder.category_added(
            category.id, category.name, category.type.value
        ))
        return category

    def delete_category(self, category_id: str) -> bool:
        """
        Remove a category that no transaction references.

        Raises:
            CategoryInUseError: If any transaction still points at it
        """
        index = _index_of(self._categories, category_id)
        if index is None:
            return False

        references = sum(1 for t in self._transactions if t.category_id == category_id)
        if references:
            self._audit.log(AuditEventBuilder.category_delete_blocked(category_id, references))
            raise CategoryInUseError(category_id, references)

        del self._categories[index]
        self._persist(CATEGORIES_KEY, self._categories)
        self._audit.log(AuditEventBuilder.category_deleted(category_id))
        return True

    # =========================================================================
    # GOALS
    # =========================================================================

    def add_goal(self, data: GoalData) -> Goal:
        goal = Goal.model_validate({**data.model_dump(), "id": new_id()})
        self._goals.append(goal)
        self._persist(GOALS_KEY, self._goals)
        self._audit.log(AuditEventBuilder.goal_changed(
            AuditEventType.GOAL_ADDED, goal.id, goal.name
        ))
        return goal

    def update_goal(self, goal: Goal) -> bool:
        index = _index_of(self._goals, goal.id)
        if index is None:
            self._audit.log(AuditEventBuilder.entity_not_found("goal", goal.id))
            return False

        self._goals[index] = goal
        self._persist(GOALS_KEY, self._goals)
        self._audit.log(AuditEventBuilder.goal_changed(
            AuditEventType.GOAL_UPDATED, goal.id, goal.name
        ))
        return True

    def delete_goal(self, goal_id: str) -> bool:
        index = _index_of(self._goals, goal_id)
        if index is None:
            self._audit.log(AuditEventBuilder.entity_not_found("goal", goal_id))
            return False

        del self._goals[index]
        self._persist(GOALS_KEY, self._goals)
        self._audit.log(AuditEventBuilder.goal_changed(AuditEventType.GOAL_DELETED, goal_id))
        return True

    # =========================================================================
    # PREFERENCES
    # =========================================================================

    def set_theme(self, theme: Union[Theme, str]) -> Theme:
        """
        Change and persist the theme.

        Raises:
            ValueError: If `theme` is not a known theme
        """
        self._theme = Theme(theme)
        self._write(THEME_KEY, self._theme.value)
        self._audit.log(AuditEventBuilder.theme_changed(self._theme.value))
        return self._theme


def _resolve_theme(value: Union[Theme, str], fallback: Theme) -> Theme:
    try:
        return Theme(value)
    except ValueError:
        return fallback


def _index_of(entities: list, entity_id: str) -> Optional[int]:
    for index, entity in enumerate(entities):
        if entity.id == entity_id:
            return index
    return None


def _find(entities: list[EntityT], entity_id: str) -> Optional[EntityT]:
    index = _index_of(entities, entity_id)
    return None if index is None else entities[index]
