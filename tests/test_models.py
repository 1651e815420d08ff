"""
Tests for FinDash models

Test strategy:
1. Unit tests for individual components (models, forms, aggregations)
2. Store tests against in-memory storage
3. No real filesystem outside tmp_path
"""

import pytest
from datetime import date, datetime, timezone

from findash.models.finance import (
    Category,
    CategoryIcon,
    Goal,
    SubItem,
    Theme,
    Transaction,
    TransactionData,
    TransactionType,
    ValidationIssue,
    ValidationResult,
)
from findash.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)


class TestTransactionModels:
    """Tests for transaction-related Pydantic models."""

    def test_transaction_creation(self):
        """Test Transaction model creation."""
        transaction = Transaction(
            id="t1",
            category_id="cat1",
            type=TransactionType.INCOME,
            amount=3200,
            description="Salário Mensal",
            date=datetime(2024, 5, 1),
        )
        assert transaction.amount == 3200
        assert transaction.is_income
        assert transaction.signed_amount == 3200

    def test_expense_signed_amount_is_negative(self):
        data = TransactionData(
            category_id="cat4",
            type="expense",
            amount=80,
            description="Feira",
            date=datetime(2024, 5, 2),
        )
        assert data.type == TransactionType.EXPENSE
        assert data.signed_amount == -80

    def test_description_strips_whitespace(self):
        """Test that whitespace is stripped from the description."""
        data = TransactionData(
            category_id="cat1",
            type=TransactionType.INCOME,
            amount=10,
            description="  Pix  ",
            date=datetime(2024, 5, 1),
        )
        assert data.description == "Pix"

    def test_plain_date_becomes_midnight(self):
        data = TransactionData(
            category_id="cat1",
            type=TransactionType.INCOME,
            amount=10,
            description="Pix",
            date=date(2024, 5, 10),
        )
        assert data.date == datetime(2024, 5, 10, 0, 0)

    def test_aware_datetime_is_stored_as_local_naive(self):
        moment = datetime(2024, 5, 10, 12, 0, tzinfo=timezone.utc)
        data = TransactionData(
            category_id="cat1",
            type=TransactionType.INCOME,
            amount=10,
            description="Pix",
            date=moment,
        )
        assert data.date.tzinfo is None
        assert data.date == moment.astimezone().replace(tzinfo=None)

    def test_accepts_camel_case_storage_keys(self):
        """Records read from storage use the camelCase names."""
        transaction = Transaction.model_validate({
            "id": "t2",
            "categoryId": "cat4",
            "type": "expense",
            "amount": 200,
            "description": "Mercado",
            "date": "2024-05-10T00:00:00",
            "initialAmount": 200,
            "subItems": [
                {"id": "a", "description": "Almoço", "amount": 120},
                {"id": "b", "description": "Sobra", "amount": 80},
            ],
        })
        assert transaction.category_id == "cat4"
        assert transaction.initial_amount == 200
        assert [item.amount for item in transaction.sub_items] == [120, 80]

    def test_to_storage_dict_uses_aliases_and_skips_empty_fields(self):
        transaction = Transaction(
            id="t1",
            category_id="cat1",
            type=TransactionType.INCOME,
            amount=500,
            description="Freela",
            date=datetime(2024, 5, 10),
        )
        stored = transaction.to_storage_dict()
        assert stored["categoryId"] == "cat1"
        assert stored["type"] == "income"
        assert stored["date"] == "2024-05-10T00:00:00"
        assert "subItems" not in stored
        assert "notes" not in stored

    def test_remainder_item_is_separated_from_user_items(self):
        transaction = TransactionData(
            category_id="cat4",
            type=TransactionType.EXPENSE,
            amount=200,
            initial_amount=200,
            description="Mercado",
            date=datetime(2024, 5, 10),
            sub_items=[
                SubItem(description="Almoço", amount=120),
                SubItem(description="Sobra", amount=80),
            ],
        )
        assert [item.description for item in transaction.user_sub_items] == ["Almoço"]
        assert transaction.remainder_item.amount == 80
        assert transaction.remainder_item.is_remainder

    def test_income_has_no_remainder_item(self):
        transaction = TransactionData(
            category_id="cat1",
            type=TransactionType.INCOME,
            amount=150,
            description="Salário",
            date=datetime(2024, 5, 10),
            sub_items=[
                SubItem(description="Sobra", amount=100),
                SubItem(description="Salário", amount=50),
            ],
        )
        assert transaction.remainder_item is None
        assert [item.description for item in transaction.user_sub_items] == [
            "Sobra", "Salário",
        ]

    def test_to_data_drops_the_id(self):
        transaction = Transaction(
            id="t1",
            category_id="cat1",
            type=TransactionType.INCOME,
            amount=500,
            description="Freela",
            date=datetime(2024, 5, 10),
        )
        data = transaction.to_data()
        assert not hasattr(data, "id")
        assert data.amount == 500

    def test_transaction_is_immutable(self):
        transaction = Transaction(
            id="t1",
            category_id="cat1",
            type=TransactionType.INCOME,
            amount=500,
            description="Freela",
            date=datetime(2024, 5, 10),
        )
        with pytest.raises(ValueError):
            transaction.amount = 600

    def test_empty_id_is_rejected(self):
        with pytest.raises(ValueError):
            Transaction(
                id="",
                category_id="cat1",
                type=TransactionType.INCOME,
                amount=1,
                description="x",
                date=datetime(2024, 5, 10),
            )


class TestCategoryAndGoalModels:
    """Tests for categories, icons, themes and goals."""

    def test_unknown_icon_resolves_to_default(self):
        category = Category.model_validate({
            "id": "c9",
            "name": "Pets",
            "icon": "PawIcon",
            "type": "expense",
        })
        assert category.icon == CategoryIcon.DEFAULT

    def test_known_icon_key_is_kept(self):
        category = Category(id="c1", name="Mercado", icon="ShoppingCartIcon", type="expense")
        assert category.icon == CategoryIcon.SHOPPING_CART
        assert category.to_storage_dict()["icon"] == "ShoppingCartIcon"

    def test_every_icon_has_a_glyph(self):
        for icon in CategoryIcon:
            assert icon.glyph

    def test_theme_colors(self):
        assert Theme.DARK.color == "#0F172A"
        assert Theme.BRUTALIST.color == "#FDE047"
        assert len(list(Theme)) == 6

    def test_goal_aliases(self):
        goal = Goal.model_validate({
            "id": "g1",
            "name": "Viagem",
            "description": "Dezembro",
            "targetAmount": 5000,
            "currentAmount": 1200,
        })
        assert goal.target_amount == 5000
        stored = goal.to_storage_dict()
        assert stored["targetAmount"] == 5000
        assert stored["currentAmount"] == 1200

    def test_goal_requires_name(self):
        with pytest.raises(ValueError):
            Goal(id="g1", name="", target_amount=100)


class TestAuditModels:
    """Tests for audit event models."""

    def test_audit_event_creation(self):
        """Test AuditEvent model creation."""
        event = AuditEvent(
            event_type=AuditEventType.TRANSACTION_ADDED,
            description="Transaction added: Pix",
        )
        assert event.event_type == AuditEventType.TRANSACTION_ADDED
        assert event.severity == AuditSeverity.INFO
        assert event.event_id is not None

    def test_audit_event_to_log_dict(self):
        """Test conversion to log dictionary."""
        event = AuditEvent(
            event_type=AuditEventType.GOAL_ADDED,
            entity_type="goal",
            entity_id="g1",
            description="Goal added",
        )
        log_dict = event.to_log_dict()
        assert log_dict["event_type"] == "goal_added"
        assert log_dict["entity_id"] == "g1"
        assert "timestamp" in log_dict

    def test_builder_transaction_added(self):
        event = AuditEventBuilder.transaction_added("abc", "Pix", 50.0)
        assert event.event_type == AuditEventType.TRANSACTION_ADDED
        assert event.entity_id == "abc"
        assert event.details["amount"] == 50.0

    def test_builder_not_found_event_type(self):
        assert (
            AuditEventBuilder.entity_not_found("transaction", "x").event_type
            == AuditEventType.TRANSACTION_NOT_FOUND
        )
        event = AuditEventBuilder.entity_not_found("goal", "x")
        assert event.event_type == AuditEventType.GOAL_NOT_FOUND
        assert event.severity == AuditSeverity.WARNING

    def test_builder_goal_changed_description(self):
        event = AuditEventBuilder.goal_changed(AuditEventType.GOAL_UPDATED, "g1", "Viagem")
        assert event.description == "Goal updated: Viagem"

    def test_builder_storage_failures(self):
        read = AuditEventBuilder.storage_read_failed("findash_goals", "bad json")
        write = AuditEventBuilder.storage_write_failed("findash_goals", "disk full")
        assert read.severity == AuditSeverity.WARNING
        assert write.severity == AuditSeverity.ERROR
        assert write.error_message == "disk full"


class TestValidationResult:
    """Tests for ValidationResult logic."""

    def test_validation_result_has_errors(self):
        """Test has_errors property."""
        result = ValidationResult(issues=[
            ValidationIssue(
                field="description",
                issue_type="missing",
                message="Description is required",
                severity="error",
            ),
        ])
        assert result.has_errors
        assert result.error_count == 1
        assert not result.is_valid
        assert result.messages == ["Description is required"]

    def test_validation_result_warnings_only(self):
        """Test validation with only warnings."""
        result = ValidationResult(issues=[
            ValidationIssue(
                field="notes",
                issue_type="long",
                message="Notes are long",
                severity="warning",
            ),
        ])
        assert not result.has_errors
        assert result.error_count == 0
        assert result.is_valid

    def test_invalid_severity_rejected(self):
        with pytest.raises(ValueError):
            ValidationIssue(field="x", issue_type="y", message="z", severity="fatal")


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
