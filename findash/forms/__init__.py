"""Form logic for the add/edit dialogs."""

from findash.forms.editor import (
    EditorState,
    EditorStateError,
    SubmitOutcome,
    TransactionEditor,
)
from findash.forms.entity_forms import CategoryForm, GoalForm
from findash.forms.transaction_form import (
    FormValidationError,
    SubItemRow,
    TransactionForm,
)

__all__ = [
    "CategoryForm",
    "EditorState",
    "EditorStateError",
    "FormValidationError",
    "GoalForm",
    "SubItemRow",
    "SubmitOutcome",
    "TransactionEditor",
    "TransactionForm",
]
