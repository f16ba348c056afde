"""Base abstractions for validation checks."""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

from loguru import logger

from doc_validator.document import Document

from .cancellation import CancellationToken
from .enums import OutcomeKind
from .models import Outcome

if TYPE_CHECKING:
    from .state import RunState


class ValidationCheck(ABC):
    """Abstract base class for individual validation checks.

    Subclasses implement ``_execute`` with the business rule. They may override
    ``should_run`` to make execution conditional on earlier outcomes, and set
    ``supports_rollback`` together with ``undo`` when the check performs an
    externally visible side effect.

    Checks are constructed once and reused across runs, so they must not keep
    per-run state on the instance.
    """

    supports_rollback: bool = False

    def __init__(self, name: str, timeout_seconds: float):
        """Initialize the validation check.

        Args:
            name: The name of this check (used in outcome.check_name)
            timeout_seconds: Budget for a single execution of ``_execute``

        Raises:
            ValueError: If the name is empty or the timeout is not positive
        """
        if not name:
            raise ValueError("Check name must not be empty")
        if timeout_seconds <= 0:
            raise ValueError(f"Timeout of check '{name}' must be positive, got {timeout_seconds}")
        self.name = name
        self.timeout_seconds = timeout_seconds

    @abstractmethod
    def _execute(self, document: Document, token: CancellationToken) -> Outcome:
        """Run the business rule against the document.

        This method runs on a worker thread. Long-running implementations should
        observe ``token`` and must wrap side effects in ``token.commit()``.

        Returns:
            Outcome: Built with ``success()`` or ``failed()``

        Raises:
            ValidationFailure: To reject the document
        """

    def run(self, document: Document, token: CancellationToken) -> Outcome:
        """Entry point used by the executor on the worker thread."""
        return self._execute(document, token)

    def should_run(self, state: "RunState") -> bool:
        """Execution predicate evaluated before dispatching the check.

        The default always runs.
        """
        return True

    def undo(self, document: Document) -> None:
        """Reverse the side effect of a successful execution.

        Only called for checks with ``supports_rollback``. Must be safe to call
        once per run in which the check succeeded.
        """

    def safe_undo(self, document: Document) -> Exception | None:
        """Call ``undo`` and capture, rather than propagate, any error.

        Returns:
            The exception raised by ``undo``, or None on success
        """
        try:
            self.undo(document)
        except Exception as e:
            logger.error(f"Rollback of check {self.name} failed: {e}")
            return e
        return None

    def success(self, message: str, details: dict[str, Any] | None = None) -> Outcome:
        """Return a successful outcome."""
        return Outcome(check_name=self.name, kind=OutcomeKind.SUCCESS, message=message, details=details or {})

    def failed(self, message: str, details: dict[str, Any] | None = None) -> Outcome:
        """Return a failed outcome."""
        return Outcome(check_name=self.name, kind=OutcomeKind.FAILURE, message=message, details=details or {})

    def __str__(self) -> str:
        return f"{type(self).__name__}(name='{self.name}')"

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(name='{self.name}', "
            f"timeout_seconds={self.timeout_seconds}, supports_rollback={self.supports_rollback})"
        )
