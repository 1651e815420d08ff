"""
Transaction Editor

The add/edit dialog as a small state machine:

    CLOSED --open_create()--> OPEN_CREATE --submit() ok / cancel()--> CLOSED
    CLOSED --open_edit(id)--> OPEN_EDIT   --submit() ok / cancel()--> CLOSED

IMPORTANT: An invalid submit keeps the editor open with the form as typed
and writes nothing to the store.
"""

from datetime import date
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from findash.audit import AuditLogger
from findash.forms.transaction_form import TransactionForm
from findash.models.audit import AuditEventBuilder
from findash.models.finance import Transaction, TransactionType, ValidationResult
from findash.store import EntityStore


class EditorState(str, Enum):
    CLOSED = "closed"
    OPEN_CREATE = "open_create"
    OPEN_EDIT = "open_edit"


class EditorStateError(RuntimeError):
    """Raised when an operation needs an open editor and it is closed."""
    pass


class SubmitOutcome(BaseModel):
    """What happened on submit."""

    saved: bool = Field(..., description="Whether the store was changed")
    transaction: Optional[Transaction] = Field(
        default=None,
        description="The created or updated transaction"
    )
    validation: ValidationResult = Field(default_factory=ValidationResult)


class TransactionEditor:
    """Drives a TransactionForm against an EntityStore."""

    def __init__(
        self,
        store: EntityStore,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._store = store
        self._audit = audit_logger or AuditLogger()
        self._state = EditorState.CLOSED
        self._form: Optional[TransactionForm] = None
        self._editing_id: Optional[str] = None

    @property
    def state(self) -> EditorState:
        return self._state

    @property
    def is_open(self) -> bool:
        return self._state != EditorState.CLOSED

    @property
    def form(self) -> TransactionForm:
        if self._form is None:
            raise EditorStateError("Editor is closed")
        return self._form

    @property
    def editing_id(self) -> Optional[str]:
        return self._editing_id

    def open_create(
        self,
        type_: TransactionType = TransactionType.EXPENSE,
        today: Optional[date] = None,
    ) -> TransactionForm:
        """Open an empty form dated today."""
        self._form = TransactionForm(type_=type_, date_=today or date.today())
        self._editing_id = None
        self._state = EditorState.OPEN_CREATE
        return self._form

    def open_edit(self, transaction_id: str) -> Optional[TransactionForm]:
        """
        Open the form prefilled from a stored transaction.

        Returns None and stays closed if the transaction does not exist.
        """
        transaction = self._store.get_transaction(transaction_id)
        if transaction is None:
            return None
        self._form = TransactionForm.from_transaction(transaction)
        self._editing_id = transaction.id
        self._state = EditorState.OPEN_EDIT
        return self._form

    def cancel(self) -> None:
        self._close()

    def submit(self) -> SubmitOutcome:
        """
        Validate and save.

        Valid: the store is updated and the editor closes.
        Invalid: nothing is saved and the editor stays open.

        Raises:
            EditorStateError: If the editor is closed
        """
        form = self.form
        validation = form.validate()

        if validation.has_errors:
            self._audit.log(AuditEventBuilder.validation_failed(
                "transaction",
                [issue.model_dump() for issue in validation.issues],
            ))
            return SubmitOutcome(saved=False, validation=validation)

        data = form.build()

        if self._state == EditorState.OPEN_CREATE:
            transaction = self._store.add_transaction(data)
            self._close()
            return SubmitOutcome(saved=True, transaction=transaction, validation=validation)

        transaction = Transaction.model_validate({**data.model_dump(), "id": self._editing_id})
        saved = self._store.update_transaction(transaction)
        self._close()
        return SubmitOutcome(
            saved=saved,
            transaction=transaction if saved else None,
            validation=validation,
        )

    def _close(self) -> None:
        self._state = EditorState.CLOSED
        self._form = None
        self._editing_id = None
