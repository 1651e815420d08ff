"""
Tests for the entity store

Covers the load lifecycle (seed, stored data, corrupt data), every
mutation, the category deletion policy and storage failure handling.
"""

import json
import pytest
from datetime import date, datetime

from findash.forms import SubItemRow, TransactionForm
from findash.models.audit import AuditEventType, AuditSeverity
from findash.models.finance import (
    CategoryData,
    CategoryIcon,
    GoalData,
    SubItem,
    Theme,
    TransactionData,
    TransactionType,
)
from findash.reports import monthly_expense, monthly_income, net_balance_for_month
from findash.services.storage import InMemoryStorage, StorageWriteError
from findash.store import (
    CATEGORIES_KEY,
    GOALS_KEY,
    THEME_KEY,
    TRANSACTIONS_KEY,
    CategoryInUseError,
    EntityStore,
    StoreError,
)


TODAY = date(2024, 5, 20)


class FailingWriteStorage(InMemoryStorage):
    """Reads work, every write fails."""

    def set(self, key, value):
        raise StorageWriteError(f"disk full while writing {key}")


def expense(amount=100.0, when=datetime(2024, 5, 10), category_id="cat4", **extra):
    return TransactionData(
        category_id=category_id,
        type=TransactionType.EXPENSE,
        amount=amount,
        description=extra.pop("description", "Despesa"),
        date=when,
        **extra,
    )


def event_types(audit_logger):
    return [event.event_type for event in audit_logger.recent_events(limit=100)]


class TestLoad:
    """Load lifecycle."""

    def test_empty_storage_is_seeded_and_persisted(self, store, storage, audit_logger):
        assert len(store.transactions) == 4
        assert len(store.categories) == 6
        assert len(store.goals) == 2
        for key in (TRANSACTIONS_KEY, CATEGORIES_KEY, GOALS_KEY):
            assert storage.get(key) is not None
        assert event_types(audit_logger).count(AuditEventType.SEED_DATA_LOADED) == 3

    def test_seed_transactions_fall_in_the_current_month(self, store):
        summary = store.current_month_summary(TODAY)
        assert summary.income == 3700
        assert summary.expense == 1000
        assert summary.balance == 2700

    def test_stored_data_is_loaded_instead_of_seed(self, audit_logger):
        storage = InMemoryStorage({
            TRANSACTIONS_KEY: json.dumps([{
                "id": "x1",
                "categoryId": "cat1",
                "type": "income",
                "amount": 42,
                "description": "Pix",
                "date": "2024-05-03T00:00:00",
            }]),
            CATEGORIES_KEY: "[]",
            GOALS_KEY: "[]",
            THEME_KEY: "glass",
        })
        store = EntityStore(storage, audit_logger=audit_logger)
        store.load(today=TODAY)

        assert [t.id for t in store.transactions] == ["x1"]
        assert store.categories == ()
        assert store.goals == ()
        assert store.theme == Theme.GLASS
        assert AuditEventType.SEED_DATA_LOADED not in event_types(audit_logger)

    def test_corrupt_json_falls_back_to_seed(self, audit_logger):
        storage = InMemoryStorage({TRANSACTIONS_KEY: "{not json"})
        store = EntityStore(storage, audit_logger=audit_logger)
        store.load(today=TODAY)

        assert len(store.transactions) == 4
        assert AuditEventType.STORAGE_READ_FAILED in event_types(audit_logger)
        # the unreadable value is left alone until the next mutation
        assert storage.get(TRANSACTIONS_KEY) == "{not json"

    def test_invalid_records_fall_back_to_seed(self, audit_logger):
        storage = InMemoryStorage({GOALS_KEY: json.dumps([{"id": "g1", "name": "No target"}])})
        store = EntityStore(storage, audit_logger=audit_logger)
        store.load(today=TODAY)
        assert [g.id for g in store.goals] == ["g1", "g2"]
        assert store.goals[0].name == "Reduzir gastos"

    def test_non_list_payload_falls_back_to_seed(self, audit_logger):
        storage = InMemoryStorage({CATEGORIES_KEY: json.dumps({"id": "cat1"})})
        store = EntityStore(storage, audit_logger=audit_logger)
        store.load(today=TODAY)
        assert len(store.categories) == 6

    def test_unknown_icon_resolved_at_load(self, audit_logger):
        storage = InMemoryStorage({
            CATEGORIES_KEY: json.dumps([
                {"id": "c1", "name": "Pets", "icon": "PawIcon", "type": "expense"},
            ]),
        })
        store = EntityStore(storage, audit_logger=audit_logger)
        store.load(today=TODAY)
        assert store.get_category("c1").icon == CategoryIcon.DEFAULT

    def test_unknown_theme_falls_back_to_default(self, audit_logger):
        storage = InMemoryStorage({THEME_KEY: "sepia"})
        store = EntityStore(storage, audit_logger=audit_logger, default_theme="minimal")
        store.load(today=TODAY)
        assert store.theme == Theme.MINIMAL

    def test_round_trip_through_storage(self, store, storage, audit_logger):
        added = store.add_transaction(expense(
            amount=200,
            initial_amount=200,
            notes="feira",
            sub_items=[
                SubItem(description="Lunch", amount=120),
                SubItem(description="Sobra", amount=80),
            ],
        ))

        stored = json.loads(storage.get(TRANSACTIONS_KEY))[-1]
        assert stored["categoryId"] == "cat4"
        assert stored["initialAmount"] == 200
        assert [item["description"] for item in stored["subItems"]] == ["Lunch", "Sobra"]

        reloaded = EntityStore(storage, audit_logger=audit_logger)
        reloaded.load(today=TODAY)
        assert reloaded.get_transaction(added.id) == added
        assert reloaded.transactions == store.transactions


class TestTransactions:
    """Add / update / delete / duplicate."""

    def test_add_assigns_fresh_id_and_persists(self, store, storage):
        first = store.add_transaction(expense())
        second = store.add_transaction(expense())
        assert first.id and second.id and first.id != second.id
        stored_ids = [t["id"] for t in json.loads(storage.get(TRANSACTIONS_KEY))]
        assert first.id in stored_ids and second.id in stored_ids

    def test_add_then_delete_restores_balance(self, store):
        before = store.total_balance()
        added = store.add_transaction(expense(amount=350))
        assert store.total_balance() == before - 350
        assert store.delete_transaction(added.id)
        assert store.total_balance() == before

    def test_update_replaces_by_id(self, store):
        added = store.add_transaction(expense(amount=100))
        changed = added.model_copy(update={"amount": 150.0, "description": "Mais caro"})
        assert store.update_transaction(changed)
        assert store.get_transaction(added.id).amount == 150
        assert store.get_transaction(added.id).description == "Mais caro"
        assert len(store.transactions) == 5

    def test_update_after_delete_is_a_no_op(self, store, audit_logger):
        added = store.add_transaction(expense())
        store.delete_transaction(added.id)
        snapshot = store.transactions

        assert not store.update_transaction(added)
        assert store.transactions == snapshot
        assert AuditEventType.TRANSACTION_NOT_FOUND in event_types(audit_logger)

    def test_delete_unknown_returns_false(self, store):
        assert not store.delete_transaction("missing")
        assert len(store.transactions) == 4

    def test_duplicate_defaults_to_same_day_next_month(self, store):
        source = store.add_transaction(expense(when=datetime(2024, 1, 31)))
        copy = store.duplicate_transaction(source.id)

        assert copy.id != source.id
        assert copy.date == datetime(2024, 2, 29)
        assert copy.amount == source.amount
        assert copy.category_id == source.category_id
        assert store.get_transaction(source.id) == source

    def test_duplicate_to_explicit_date(self, store):
        copy = store.duplicate_transaction("t2", date(2024, 7, 2))
        source = store.get_transaction("t2")
        assert copy.date == datetime(2024, 7, 2)
        assert copy.sub_items == source.sub_items
        assert copy.notes == source.notes
        assert store.month_summary(2024, 7).expense == 450

    def test_duplicate_unknown_returns_none(self, store):
        assert store.duplicate_transaction("missing") is None
        assert len(store.transactions) == 4


class TestCategories:
    """Category lookup and deletion policy."""

    def test_categories_for_type(self, store):
        income = store.categories_for_type(TransactionType.INCOME)
        expense_categories = store.categories_for_type(TransactionType.EXPENSE)
        assert [c.id for c in income] == ["cat1", "cat2", "cat3"]
        assert [c.id for c in expense_categories] == ["cat4", "cat5", "cat6"]

    def test_dangling_reference_is_none(self, store):
        store.add_transaction(expense(category_id="gone"))
        assert store.get_category("gone") is None

    def test_add_category(self, store, storage):
        category = store.add_category(CategoryData(
            name="Pets", icon=CategoryIcon.HOME, type=TransactionType.EXPENSE,
        ))
        assert store.get_category(category.id).name == "Pets"
        assert category.id in storage.get(CATEGORIES_KEY)

    def test_delete_referenced_category_is_blocked(self, store, audit_logger):
        with pytest.raises(CategoryInUseError) as exc_info:
            store.delete_category("cat4")
        assert exc_info.value.references == 1
        assert isinstance(exc_info.value, StoreError)
        assert store.get_category("cat4") is not None
        assert AuditEventType.CATEGORY_DELETE_BLOCKED in event_types(audit_logger)

    def test_delete_unused_category(self, store):
        assert store.delete_category("cat3")
        assert store.get_category("cat3") is None

    def test_delete_unknown_category(self, store):
        assert not store.delete_category("missing")


class TestGoals:
    """Goal mutations."""

    def test_add_update_delete(self, store):
        goal = store.add_goal(GoalData(name="Reserva", target_amount=10000))
        assert goal.current_amount == 0

        funded = goal.model_copy(update={"current_amount": 2500.0})
        assert store.update_goal(funded)
        assert store.get_goal(goal.id).current_amount == 2500

        assert store.delete_goal(goal.id)
        assert store.get_goal(goal.id) is None
        assert not store.update_goal(funded)
        assert not store.delete_goal(goal.id)


class TestTheme:
    """Theme preference."""

    def test_default_theme(self, store):
        assert store.theme == Theme.DARK

    def test_set_theme_persists(self, store, storage, audit_logger):
        assert store.set_theme("neon") == Theme.NEON
        assert storage.get(THEME_KEY) == "neon"

        reloaded = EntityStore(storage, audit_logger=audit_logger)
        reloaded.load(today=TODAY)
        assert reloaded.theme == Theme.NEON

    def test_unknown_theme_rejected(self, store):
        with pytest.raises(ValueError):
            store.set_theme("sepia")
        assert store.theme == Theme.DARK


class TestStorageFailures:
    """Write failures are audited and swallowed."""

    def test_mutations_survive_write_failures(self, audit_logger):
        store = EntityStore(FailingWriteStorage(), audit_logger=audit_logger)
        store.load(today=TODAY)

        added = store.add_transaction(expense(amount=10))
        assert store.get_transaction(added.id) == added

        failures = [
            event for event in audit_logger.recent_events(limit=100)
            if event.event_type == AuditEventType.STORAGE_WRITE_FAILED
        ]
        assert failures
        assert all(event.severity == AuditSeverity.ERROR for event in failures)

    def test_save_writes_every_key(self, store, storage):
        for key in (TRANSACTIONS_KEY, CATEGORIES_KEY, GOALS_KEY, THEME_KEY):
            storage.delete(key)
        store.save()
        assert storage.keys() == sorted(
            [TRANSACTIONS_KEY, CATEGORIES_KEY, GOALS_KEY, THEME_KEY]
        )


class TestDerivedState:
    """Summaries exposed by the store."""

    def test_chart_series(self, store):
        buckets = list(store.chart_series(months=3, today=TODAY))
        assert [(b.year, b.month) for b in buckets] == [(2024, 3), (2024, 4), (2024, 5)]
        assert buckets[-1].income == 3700
        assert buckets[-1].expense == 1000

    def test_total_balance(self, store):
        assert store.total_balance() == 3700 - 1000


class TestScenario:
    """Form, store and aggregations together."""

    def test_income_and_expense_with_remainder(self, audit_logger):
        store = EntityStore(
            InMemoryStorage({TRANSACTIONS_KEY: "[]"}),
            audit_logger=audit_logger,
        )
        store.load(today=TODAY)

        income = TransactionForm(
            type_=TransactionType.INCOME,
            description="Freela",
            category_id="cat2",
            date_=date(2024, 5, 10),
            rows=[SubItemRow(amount=500)],
        )
        expense_form = TransactionForm(
            type_=TransactionType.EXPENSE,
            description="Restaurante",
            category_id="cat4",
            date_=date(2024, 5, 10),
            initial_amount=200,
            rows=[SubItemRow(description="Lunch", amount=120)],
        )
        store.add_transaction(income.build())
        saved = store.add_transaction(expense_form.build())

        assert saved.amount == 200
        assert saved.remainder_item.amount == 80
        assert monthly_income(store.transactions, 2024, 5) == 500
        assert monthly_expense(store.transactions, 2024, 5) == 200
        assert net_balance_for_month(store.transactions, 2024, 5) == 300

        store.add_transaction(expense(amount=999, when=datetime(2024, 6, 1)))
        assert monthly_expense(store.transactions, 2024, 5) == 200


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
