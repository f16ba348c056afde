"""Validation check assembled from plain callables.

Lets business rules be plugged into the pipeline without subclassing:

    check = FunctionCheck(
        "approval",
        timeout_seconds=5,
        logic=lambda document, token: document.total_amount < 50_000,
        predicate=lambda state: state.all_succeeded_so_far(),
    )

The logic may return an Outcome, a bool (True for success), or raise
ValidationFailure to reject the document.
"""

from collections.abc import Callable

from doc_validator.document import Document

from .base import ValidationCheck
from .cancellation import CancellationToken
from .models import Outcome
from .state import RunState

CheckLogic = Callable[[Document, CancellationToken], Outcome | bool]
CheckPredicate = Callable[[RunState], bool]
CheckUndo = Callable[[Document], None]


class FunctionCheck(ValidationCheck):
    """ValidationCheck delegating to callables."""

    def __init__(
        self,
        name: str,
        timeout_seconds: float,
        logic: CheckLogic,
        predicate: CheckPredicate | None = None,
        undo: CheckUndo | None = None,
    ):
        """Initialize the check.

        Args:
            name: Name of this check
            timeout_seconds: Execution budget of ``logic``
            logic: Business rule, run on the worker thread
            predicate: Execution predicate, defaults to always run
            undo: Compensating action; providing one enables rollback
        """
        super().__init__(name, timeout_seconds)
        self._logic = logic
        self._predicate = predicate
        self._undo = undo
        self.supports_rollback = undo is not None

    def _execute(self, document: Document, token: CancellationToken) -> Outcome:
        result = self._logic(document, token)
        if isinstance(result, bool):
            return self.success(f"{self.name} passed") if result else self.failed(f"{self.name} failed")
        return result

    def should_run(self, state: RunState) -> bool:
        if self._predicate is None:
            return True
        return self._predicate(state)

    def undo(self, document: Document) -> None:
        if self._undo is not None:
            self._undo(document)
