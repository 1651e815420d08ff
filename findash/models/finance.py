"""
Core Data Models for FinDash

These models define the schemas for everything the entity store owns:
transactions (with their sub-items), categories and savings goals.
They are designed to:
1. Enforce type safety at runtime
2. Round-trip through local storage using the original camelCase keys
3. Keep identifiers immutable once assigned

DESIGN DECISION: Every entity comes in two flavours. The *Data model is what
a form produces (no id yet); the entity subclass adds the id assigned by the
store. Entities are frozen, so edits always go through a full replacement.
"""

from datetime import date, datetime, time
from enum import Enum
from typing import Any, Optional
from uuid import uuid4

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
)


SOBRA_DESCRIPTION = "Sobra"


def new_id() -> str:
    """Generate a fresh entity identifier."""
    return uuid4().hex


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class TransactionType(str, Enum):
    """Direction of a transaction."""
    INCOME = "income"
    EXPENSE = "expense"


class CategoryIcon(str, Enum):
    """
    Icons a category can be drawn with.

    DESIGN DECISION: The set is closed. Keys read from storage are resolved
    once, at load time; anything unknown becomes DEFAULT instead of failing
    the whole collection.
    """
    BRIEFCASE = "BriefcaseIcon"
    BANKNOTES = "BanknotesIcon"
    GIFT = "GiftIcon"
    SHOPPING_CART = "ShoppingCartIcon"
    STOREFRONT = "BuildingStorefrontIcon"
    CREDIT_CARD = "CreditCardIcon"
    WALLET = "WalletIcon"
    CURRENCY = "CurrencyDollarIcon"
    HOME = "HomeIcon"
    DEFAULT = "default"

    @classmethod
    def resolve(cls, key: Any) -> "CategoryIcon":
        """Map a stored icon key to a member, falling back to DEFAULT."""
        if isinstance(key, cls):
            return key
        try:
            return cls(key)
        except ValueError:
            return cls.DEFAULT

    @property
    def glyph(self) -> str:
        return _ICON_GLYPHS[self]


_ICON_GLYPHS = {
    CategoryIcon.BRIEFCASE: "💼",
    CategoryIcon.BANKNOTES: "💵",
    CategoryIcon.GIFT: "🎁",
    CategoryIcon.SHOPPING_CART: "🛒",
    CategoryIcon.STOREFRONT: "🏬",
    CategoryIcon.CREDIT_CARD: "💳",
    CategoryIcon.WALLET: "👛",
    CategoryIcon.CURRENCY: "💲",
    CategoryIcon.HOME: "🏠",
    CategoryIcon.DEFAULT: "🏷️",
}


class Theme(str, Enum):
    """Visual themes the dashboard can be rendered with."""
    DARK = "dark"
    NEON = "neon"
    MINIMAL = "minimal"
    BRUTALIST = "brutalist"
    GLASS = "glass"
    CYBERPUNK = "cyberpunk"

    @property
    def color(self) -> str:
        """Browser theme colour for this theme."""
        return _THEME_COLORS[self]


_THEME_COLORS = {
    Theme.DARK: "#0F172A",
    Theme.NEON: "#0a0a14",
    Theme.MINIMAL: "#FFFFFF",
    Theme.BRUTALIST: "#FDE047",
    Theme.GLASS: "#05040f",
    Theme.CYBERPUNK: "#0D0221",
}


# =============================================================================
# TRANSACTIONS
# =============================================================================

class SubItem(BaseModel):
    """
    A named part of a transaction's total.

    For expenses, a sub-item described as "Sobra" is the derived remainder
    between the initial amount and the user's own items.
    """
    model_config = ConfigDict(str_strip_whitespace=True, frozen=True)

    id: str = Field(
        default_factory=new_id,
        description="Sub-item identifier"
    )
    description: str = Field(
        default="",
        max_length=200,
        description="What this part of the total is"
    )
    amount: float = Field(
        default=0.0,
        description="Amount of this part"
    )

    @property
    def is_remainder(self) -> bool:
        """True for the synthetic 'Sobra' entry."""
        return self.description == SOBRA_DESCRIPTION


class TransactionData(BaseModel):
    """
    A transaction as produced by the form, before the store assigns an id.
    """
    model_config = ConfigDict(
        str_strip_whitespace=True,
        populate_by_name=True,
        frozen=True,
    )

    category_id: str = Field(
        ...,
        alias="categoryId",
        description="Category reference (not enforced)"
    )
    type: TransactionType = Field(
        ...,
        description="Income or expense"
    )
    amount: float = Field(
        ...,
        description="Total value; for expenses with items, the initial amount"
    )
    description: str = Field(
        ...,
        max_length=200,
        description="Main label"
    )
    date: datetime = Field(
        ...,
        description="When the transaction happened (local time)"
    )
    notes: Optional[str] = Field(
        default=None,
        max_length=1000,
        description="Free-form notes"
    )
    sub_items: Optional[list[SubItem]] = Field(
        default=None,
        alias="subItems",
        description="Ordered breakdown of the total"
    )
    initial_amount: Optional[float] = Field(
        default=None,
        alias="initialAmount",
        description="Amount entered before the remainder split (expenses only)"
    )

    @field_validator('date', mode='before')
    @classmethod
    def coerce_date(cls, v: Any) -> Any:
        """Accept plain dates as midnight."""
        if isinstance(v, date) and not isinstance(v, datetime):
            return datetime.combine(v, time.min)
        return v

    @field_validator('date')
    @classmethod
    def to_local_naive(cls, v: datetime) -> datetime:
        """
        Store every timestamp as naive local time.

        Stored ISO strings usually carry a UTC offset; month bucketing
        must happen on the local calendar.
        """
        if v.tzinfo is not None:
            return v.astimezone().replace(tzinfo=None)
        return v

    @property
    def is_income(self) -> bool:
        return self.type == TransactionType.INCOME

    @property
    def signed_amount(self) -> float:
        """+amount for income, -amount for expenses."""
        return self.amount if self.is_income else -self.amount

    @property
    def user_sub_items(self) -> list[SubItem]:
        """
        Sub-items authored by the user.

        Only expenses carry a computed remainder; an income item named
        "Sobra" is the user's own and is kept.
        """
        items = self.sub_items or []
        if self.is_income:
            return list(items)
        return [item for item in items if not item.is_remainder]

    @property
    def remainder_item(self) -> Optional[SubItem]:
        if self.is_income:
            return None
        for item in self.sub_items or []:
            if item.is_remainder:
                return item
        return None

    def to_storage_dict(self) -> dict:
        """Serialize with the camelCase keys used in storage."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class Transaction(TransactionData):
    """A stored transaction."""

    id: str = Field(
        ...,
        min_length=1,
        description="Unique transaction identifier"
    )

    def to_data(self) -> TransactionData:
        """Strip the id, e.g. to duplicate this transaction."""
        return TransactionData.model_validate(self.model_dump(exclude={"id"}))


# =============================================================================
# CATEGORIES
# =============================================================================

class CategoryData(BaseModel):
    """A category before it has an id."""
    model_config = ConfigDict(str_strip_whitespace=True, frozen=True)

    name: str = Field(
        ...,
        min_length=1,
        max_length=100,
        description="Category name"
    )
    icon: CategoryIcon = Field(
        default=CategoryIcon.DEFAULT,
        description="Icon drawn next to the category"
    )
    type: TransactionType = Field(
        ...,
        description="Which transactions this category applies to"
    )

    @field_validator('icon', mode='before')
    @classmethod
    def resolve_icon(cls, v: Any) -> CategoryIcon:
        return CategoryIcon.resolve(v)

    def to_storage_dict(self) -> dict:
        return self.model_dump(mode="json")


class Category(CategoryData):
    """A stored category."""

    id: str = Field(..., min_length=1)


# =============================================================================
# GOALS
# =============================================================================

class GoalData(BaseModel):
    """
    A savings goal before it has an id.

    Goals are tracked independently of transactions; nothing funds them
    automatically.
    """
    model_config = ConfigDict(
        str_strip_whitespace=True,
        populate_by_name=True,
        frozen=True,
    )

    name: str = Field(
        ...,
        min_length=1,
        max_length=100,
        description="Goal name"
    )
    description: str = Field(
        default="",
        max_length=500,
        description="What the goal is for"
    )
    target_amount: float = Field(
        ...,
        alias="targetAmount",
        description="Amount to reach"
    )
    current_amount: float = Field(
        default=0.0,
        alias="currentAmount",
        description="Amount saved so far"
    )

    def to_storage_dict(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)


class Goal(GoalData):
    """A stored goal."""

    id: str = Field(..., min_length=1)


# =============================================================================
# VALIDATION MODELS
# =============================================================================

class ValidationIssue(BaseModel):
    """A single validation issue found in a form."""

    field: str = Field(
        ...,
        description="Field with the issue"
    )
    issue_type: str = Field(
        ...,
        description="Type of issue (e.g., 'missing', 'invalid_value')"
    )
    message: str = Field(
        ...,
        description="Human-readable description of the issue"
    )
    severity: str = Field(
        default="error",
        pattern="^(error|warning)$",
        description="Issue severity"
    )
    suggested_fix: Optional[str] = Field(
        default=None,
        description="Hint shown next to the field"
    )


class ValidationResult(BaseModel):
    """Outcome of validating a form before submission."""

    issues: list[ValidationIssue] = Field(
        default_factory=list,
        description="All validation issues found"
    )

    @property
    def has_errors(self) -> bool:
        """Check if there are any error-level issues."""
        return any(issue.severity == "error" for issue in self.issues)

    @property
    def error_count(self) -> int:
        """Count error-level issues."""
        return sum(1 for issue in self.issues if issue.severity == "error")

    @property
    def is_valid(self) -> bool:
        return not self.has_errors

    @property
    def messages(self) -> list[str]:
        return [issue.message for issue in self.issues]
