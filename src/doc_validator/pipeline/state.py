"""Per-run ledger of a validation pipeline execution.

A RunState is created at the start of every ``ValidationPipeline.run`` call and
owned exclusively by that run. It records outcomes in execution order, tracks
consecutive failures to drive the circuit breaker, and keeps the checks that
must be compensated if a later check fails.

Breaker Logic:
- Failure and Timeout outcomes increment the consecutive-failure counter
- A Success outcome resets the counter to zero
- Skipped outcomes leave the counter untouched
- Reaching BREAKER_THRESHOLD opens the breaker for the rest of the run
"""

from collections.abc import Iterable

from loguru import logger

from doc_validator.constants import BREAKER_THRESHOLD
from doc_validator.document import Document

from .base import ValidationCheck
from .enums import OutcomeKind
from .events import BreakerTrippedEvent, CompensationCompletedEvent, ValidationListener, notify
from .models import Outcome


class RunState:
    """Mutable ledger of one validation run.

    Attributes:
        document: The document under validation
        consecutive_failures: Failure/Timeout outcomes since the last Success
        breaker_tripped: One-way latch, True once the threshold is reached
        rollback_performed: True once compensation undid at least one check
    """

    def __init__(self, document: Document, listeners: Iterable[ValidationListener] = ()):
        """Initialize an empty ledger for a document.

        Args:
            document: The document under validation
            listeners: Callables notified of breaker and compensation events
        """
        self.document = document
        self.consecutive_failures = 0
        self.breaker_tripped = False
        self.rollback_performed = False
        self._outcomes: list[Outcome] = []
        self._rollback_checks: list[ValidationCheck] = []
        self._compensated_checks: list[str] = []
        self._compensation_errors: list[str] = []
        self._listeners = tuple(listeners)

    @property
    def outcomes(self) -> tuple[Outcome, ...]:
        """Outcomes in the order they were recorded."""
        return tuple(self._outcomes)

    @property
    def rollback_checks(self) -> tuple[ValidationCheck, ...]:
        """Checks registered for compensation, oldest first."""
        return tuple(self._rollback_checks)

    @property
    def compensated_checks(self) -> list[str]:
        """Names of the checks undone by compensation, in undo order."""
        return list(self._compensated_checks)

    @property
    def compensation_errors(self) -> list[str]:
        return list(self._compensation_errors)

    @property
    def success_count(self) -> int:
        return sum(1 for outcome in self._outcomes if outcome.kind == OutcomeKind.SUCCESS)

    @property
    def failure_count(self) -> int:
        """Number of Failure and Timeout outcomes."""
        return sum(1 for outcome in self._outcomes if outcome.is_failure)

    @property
    def timeout_count(self) -> int:
        return sum(1 for outcome in self._outcomes if outcome.kind == OutcomeKind.TIMEOUT)

    @property
    def skipped_count(self) -> int:
        return sum(1 for outcome in self._outcomes if outcome.kind == OutcomeKind.SKIPPED)

    @property
    def requires_compensation(self) -> bool:
        """True if any recorded outcome requested compensation."""
        return any(outcome.requires_compensation for outcome in self._outcomes)

    @property
    def has_rollback_checks(self) -> bool:
        return bool(self._rollback_checks)

    def record_outcome(self, outcome: Outcome) -> None:
        """Append an outcome and update the breaker bookkeeping.

        Args:
            outcome: The outcome to record
        """
        self._outcomes.append(outcome)

        if outcome.is_failure:
            self.consecutive_failures += 1
            if self.consecutive_failures >= BREAKER_THRESHOLD and not self.breaker_tripped:
                self.breaker_tripped = True
                logger.warning(
                    "Circuit breaker opened after {} consecutive failures (last check: {})",
                    self.consecutive_failures,
                    outcome.check_name,
                )
                notify(
                    self._listeners,
                    BreakerTrippedEvent(
                        document_identifier=self.document.identifier,
                        consecutive_failures=self.consecutive_failures,
                        last_check_name=outcome.check_name,
                    ),
                )
        elif outcome.kind == OutcomeKind.SUCCESS:
            self.consecutive_failures = 0

    def all_succeeded_so_far(self) -> bool:
        """True if no Failure or Timeout outcome has been recorded.

        Skipped outcomes do not count as failures.
        """
        return not any(outcome.is_failure for outcome in self._outcomes)

    def register_for_rollback(self, check: ValidationCheck) -> None:
        """Register a successful, rollback-capable check for compensation.

        The pipeline calls this at most once per check per run.

        Raises:
            ValueError: If the check does not support rollback
        """
        if not check.supports_rollback:
            raise ValueError(f"Check '{check.name}' does not support rollback")
        self._rollback_checks.append(check)
        logger.debug(f"Check {check.name} registered for rollback")

    def run_compensation(self) -> None:
        """Undo registered checks in reverse completion order.

        Errors raised by individual undo operations are logged and collected in
        ``compensation_errors``; they never propagate, never touch the breaker
        and never trigger further compensation.
        """
        if self.rollback_performed:
            logger.debug("Compensation already performed for this run")
            return

        if not self._rollback_checks:
            logger.info("Compensation requested but no check requires rollback")
            return

        logger.info(f"Starting compensation of {len(self._rollback_checks)} check(s)")
        for check in reversed(self._rollback_checks):
            logger.info(f"Rolling back check {check.name}")
            error = check.safe_undo(self.document)
            if error is not None:
                self._compensation_errors.append(f"{check.name}: {error}")
            self._compensated_checks.append(check.name)

        self.rollback_performed = True
        logger.info("Compensation completed")
        notify(
            self._listeners,
            CompensationCompletedEvent(
                document_identifier=self.document.identifier,
                compensated_checks=self.compensated_checks,
                errors=self.compensation_errors,
            ),
        )

    def __str__(self) -> str:
        return (
            f"RunState(document='{self.document.identifier}', outcomes={len(self._outcomes)}, "
            f"breaker_tripped={self.breaker_tripped})"
        )
