"""Goal and category dialogs."""

from typing import Optional

from findash.forms.transaction_form import FormValidationError
from findash.models.finance import (
    CategoryData,
    CategoryIcon,
    Goal,
    GoalData,
    TransactionType,
    ValidationIssue,
    ValidationResult,
)


class GoalForm:
    """
    Add/edit goal dialog.

    New goals always start with nothing saved; only editing lets the user
    set the current amount.
    """

    def __init__(
        self,
        name: str = "",
        description: str = "",
        target_amount: float = 0.0,
        current_amount: float = 0.0,
        editing_id: Optional[str] = None,
    ):
        self.name = name
        self.description = description
        self.target_amount = target_amount
        self.current_amount = current_amount
        self.editing_id = editing_id

    @classmethod
    def from_goal(cls, goal: Goal) -> "GoalForm":
        return cls(
            name=goal.name,
            description=goal.description,
            target_amount=goal.target_amount,
            current_amount=goal.current_amount,
            editing_id=goal.id,
        )

    @property
    def is_editing(self) -> bool:
        return self.editing_id is not None

    def validate(self) -> ValidationResult:
        issues = []
        if not self.name.strip():
            issues.append(ValidationIssue(
                field="name",
                issue_type="missing",
                message="Goal name is required",
            ))
        if self.target_amount is None or self.target_amount <= 0:
            issues.append(ValidationIssue(
                field="target_amount",
                issue_type="invalid_value",
                message="Target amount must be greater than zero",
            ))
        if self.is_editing and self.current_amount < 0:
            issues.append(ValidationIssue(
                field="current_amount",
                issue_type="invalid_value",
                message="Saved amount cannot be negative",
            ))
        return ValidationResult(issues=issues)

    def build(self) -> GoalData:
        """
        Raises:
            FormValidationError: If the form does not validate
        """
        result = self.validate()
        if result.has_errors:
            raise FormValidationError(result)
        return GoalData(
            name=self.name,
            description=self.description,
            target_amount=self.target_amount,
            current_amount=self.current_amount if self.is_editing else 0.0,
        )

    def build_goal(self) -> Goal:
        """The edited goal, keeping its id."""
        if not self.is_editing:
            raise ValueError("build_goal() needs a form opened from an existing goal")
        return Goal.model_validate({**self.build().model_dump(), "id": self.editing_id})


class CategoryForm:
    """Add category dialog."""

    def __init__(
        self,
        name: str = "",
        type_: TransactionType = TransactionType.EXPENSE,
        icon: Optional[CategoryIcon] = CategoryIcon.SHOPPING_CART,
    ):
        self.name = name
        self.type = TransactionType(type_)
        self.icon = icon

    def validate(self) -> ValidationResult:
        issues = []
        if not self.name.strip():
            issues.append(ValidationIssue(
                field="name",
                issue_type="missing",
                message="Category name is required",
            ))
        if self.icon is None:
            issues.append(ValidationIssue(
                field="icon",
                issue_type="missing",
                message="Pick an icon",
            ))
        return ValidationResult(issues=issues)

    def build(self) -> CategoryData:
        """
        Raises:
            FormValidationError: If the form does not validate
        """
        result = self.validate()
        if result.has_errors:
            raise FormValidationError(result)
        return CategoryData(name=self.name, icon=CategoryIcon(self.icon), type=self.type)
