"""
Transaction Form Logic

Turns what the user typed into a TransactionData, or into a list of
issues explaining why it cannot be saved.

DESIGN DECISION: Income and expense sub-items mean different things.

EXPENSE:
- The total is entered on its own (the "initial amount").
- Sub-items allocate parts of it; what is left over becomes a
  synthetic "Sobra" sub-item.
- Allocating more than the initial amount is rejected, by any margin.

INCOME:
- The total is the sum of the sub-items.
- A single row with an amount and no description is just the amount.

Editing reloads the user's own rows only. An expense's old "Sobra" row is
dropped and recomputed on save, so saving twice never stacks remainders.
"""

from datetime import date, datetime, time
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from findash.config import get_settings
from findash.models.finance import (
    SOBRA_DESCRIPTION,
    SubItem,
    Transaction,
    TransactionData,
    TransactionType,
    ValidationIssue,
    ValidationResult,
    new_id,
)


class FormValidationError(ValueError):
    """Raised when building a record from a form that does not validate."""

    def __init__(self, result: ValidationResult):
        self.result = result
        super().__init__("; ".join(result.messages))


class SubItemRow(BaseModel):
    """An editable sub-item row. Rows with no amount are ignored."""
    model_config = ConfigDict(validate_assignment=True)

    id: str = Field(default_factory=new_id)
    description: str = ""
    amount: float = 0.0

    @property
    def is_counted(self) -> bool:
        return self.amount > 0

    def to_sub_item(self) -> SubItem:
        return SubItem(id=self.id, description=self.description, amount=self.amount)


class TransactionForm:
    """
    Mutable state of the add/edit transaction dialog.

    Usage:
        form = TransactionForm(type_=TransactionType.EXPENSE)
        form.description = "Mercado"
        form.category_id = "cat4"
        form.initial_amount = 200
        form.rows[0].description = "Almoço"
        form.rows[0].amount = 120
        data = form.build()   # amount 200, sub-items Almoço 120 + Sobra 80
    """

    def __init__(
        self,
        type_: TransactionType = TransactionType.EXPENSE,
        description: str = "",
        category_id: str = "",
        date_: Optional[date] = None,
        notes: str = "",
        initial_amount: float = 0.0,
        rows: Optional[list[SubItemRow]] = None,
        epsilon: Optional[float] = None,
    ):
        self.type = TransactionType(type_)
        self.description = description
        self.category_id = category_id
        self.date: Optional[date] = date_ if date_ is not None else date.today()
        self.notes = notes
        self.initial_amount = initial_amount
        self.rows: list[SubItemRow] = rows or [SubItemRow()]
        if epsilon is None:
            epsilon = get_settings().app.remainder_epsilon
        self._epsilon = epsilon

    @classmethod
    def from_transaction(
        cls,
        transaction: Transaction,
        epsilon: Optional[float] = None,
    ) -> "TransactionForm":
        """Prefill the form from a saved transaction."""
        user_items = [
            SubItemRow(id=item.id, description=item.description, amount=item.amount)
            for item in transaction.user_sub_items
        ]

        if transaction.type == TransactionType.EXPENSE:
            initial = transaction.initial_amount
            if initial is None:
                initial = transaction.amount
            rows = user_items or [SubItemRow()]
        else:
            initial = 0.0
            rows = user_items or [SubItemRow(amount=transaction.amount)]

        notes = transaction.notes or ""
        return cls(
            type_=transaction.type,
            description=transaction.description,
            category_id=transaction.category_id,
            date_=transaction.date.date(),
            notes=notes,
            initial_amount=initial,
            rows=rows,
            epsilon=epsilon,
        )

    # =========================================================================
    # ROWS
    # =========================================================================

    def add_row(self) -> SubItemRow:
        row = SubItemRow()
        self.rows.append(row)
        return row

    def remove_row(self, index: int) -> bool:
        """Remove a row; the last remaining row is never removed."""
        if len(self.rows) <= 1 or not 0 <= index < len(self.rows):
            return False
        del self.rows[index]
        return True

    def move_row_up(self, index: int) -> bool:
        return self._swap(index, index - 1)

    def move_row_down(self, index: int) -> bool:
        return self._swap(index, index + 1)

    def _swap(self, index: int, other: int) -> bool:
        if not (0 <= index < len(self.rows) and 0 <= other < len(self.rows)):
            return False
        self.rows[index], self.rows[other] = self.rows[other], self.rows[index]
        return True

    # =========================================================================
    # DERIVED VALUES
    # =========================================================================

    @property
    def is_expense(self) -> bool:
        return self.type == TransactionType.EXPENSE

    @property
    def counted_rows(self) -> list[SubItemRow]:
        return [row for row in self.rows if row.is_counted]

    @property
    def sub_items_total(self) -> float:
        return sum(row.amount for row in self.counted_rows)

    @property
    def is_plain_amount(self) -> bool:
        """Income entered as one undescribed amount rather than a breakdown."""
        counted = self.counted_rows
        return (
            not self.is_expense
            and len(counted) == 1
            and not counted[0].description.strip()
        )

    @property
    def remainder(self) -> float:
        """Unallocated part of an expense; 0 for income."""
        if not self.is_expense:
            return 0.0
        # rounded so binary noise from summing cents never reads as negative
        return round((self.initial_amount or 0.0) - self.sub_items_total, 9)

    @property
    def total_amount(self) -> float:
        """The amount that will be stored."""
        if self.is_expense:
            return self.initial_amount or 0.0
        return self.sub_items_total

    # =========================================================================
    # VALIDATION & BUILD
    # =========================================================================

    def validate(self) -> ValidationResult:
        issues = []

        if not self.description.strip():
            issues.append(ValidationIssue(
                field="description",
                issue_type="missing",
                message="Description is required",
            ))

        if not self.category_id:
            issues.append(ValidationIssue(
                field="category_id",
                issue_type="missing",
                message="Category is required",
                suggested_fix=f"Pick one of the {self.type.value} categories",
            ))

        if self.date is None:
            issues.append(ValidationIssue(
                field="date",
                issue_type="missing",
                message="Date is required",
            ))

        if self.total_amount <= 0:
            field = "initial_amount" if self.is_expense else "sub_items"
            issues.append(ValidationIssue(
                field=field,
                issue_type="invalid_value",
                message="Amount must be greater than zero",
            ))

        if not self.is_plain_amount:
            for position, row in enumerate(self.rows, start=1):
                if not row.is_counted:
                    continue
                if not row.description.strip():
                    issues.append(ValidationIssue(
                        field=f"rows[{position - 1}].description",
                        issue_type="missing",
                        message=f"Item {position} needs a description",
                    ))
                elif self.is_expense and row.description.strip() == SOBRA_DESCRIPTION:
                    issues.append(ValidationIssue(
                        field=f"rows[{position - 1}].description",
                        issue_type="reserved",
                        message=f'"{SOBRA_DESCRIPTION}" is computed automatically',
                        suggested_fix="Use a different description",
                    ))

        if self.is_expense and self.remainder < 0:
            issues.append(ValidationIssue(
                field="sub_items",
                issue_type="over_allocated",
                message=(
                    f"Items add up to {self.sub_items_total:.2f}, "
                    f"more than the amount {self.total_amount:.2f}"
                ),
                suggested_fix="Raise the amount or lower the items",
            ))

        return ValidationResult(issues=issues)

    def build(self) -> TransactionData:
        """
        Produce the record to store.

        Raises:
            FormValidationError: If the form does not validate
        """
        result = self.validate()
        if result.has_errors:
            raise FormValidationError(result)

        notes = self.notes.strip() or None
        common = {
            "category_id": self.category_id,
            "type": self.type,
            "description": self.description,
            "date": datetime.combine(self.date, time.min),
            "notes": notes,
        }

        if self.is_plain_amount or not self.counted_rows:
            return TransactionData(amount=self.total_amount, **common)

        sub_items = [row.to_sub_item() for row in self.counted_rows]

        if not self.is_expense:
            return TransactionData(
                amount=self.sub_items_total,
                sub_items=sub_items,
                **common,
            )

        remainder = self.remainder
        if remainder > self._epsilon:
            sub_items.append(SubItem(description=SOBRA_DESCRIPTION, amount=remainder))

        return TransactionData(
            amount=self.initial_amount,
            initial_amount=self.initial_amount,
            sub_items=sub_items,
            **common,
        )
