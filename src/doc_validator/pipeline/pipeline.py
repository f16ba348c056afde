"""Main pipeline implementation for validating documents.

This module provides the ValidationPipeline class, the driver that runs an
ordered sequence of checks against one document and produces a RunState.

Key Features:
- Strictly sequential execution in declaration order
- Every check produces exactly one outcome, even after the breaker opens
- Compensation of registered checks when a later check fails
- Immutable check sequence, safe to share across concurrent runs

Typical Usage:
    pipeline = ValidationPipeline([
        ContentSchemaCheck(),
        SigningCredentialCheck(),
        DuplicateRegistryCheck(registry),
    ])

    state = pipeline.run(document)
    for outcome in state.outcomes:
        print(outcome)
"""

from collections.abc import Iterable, Sequence

import arrow
from loguru import logger

from doc_validator.document import Document

from .base import ValidationCheck
from .calculator import ReportCalculator
from .check_executor import CheckExecutor
from .events import ValidationListener
from .models import Outcome, ValidationRunReport
from .state import RunState


class ValidationPipeline:
    """Pipeline that drives validation checks over a document in sequence.

    The pipeline holds no per-run state: each call to ``run`` creates a fresh
    RunState, so one instance can serve many runs, including concurrent ones.

    Attributes:
        checks: Tuple of checks in execution order
    """

    def __init__(self, checks: Sequence[ValidationCheck], listeners: Iterable[ValidationListener] = ()):
        """Initialize the pipeline with its checks.

        Args:
            checks: Checks to execute, in order
            listeners: Callables notified of breaker and compensation events

        Raises:
            ValueError: If two checks share a name
        """
        names = [check.name for check in checks]
        duplicates = sorted({name for name in names if names.count(name) > 1})
        if duplicates:
            raise ValueError(f"Duplicate check names: {', '.join(duplicates)}")

        self.checks: tuple[ValidationCheck, ...] = tuple(checks)
        self._listeners = tuple(listeners)
        self._executor = CheckExecutor()
        self._calculator = ReportCalculator()

    def run(self, document: Document) -> RunState:
        """Validate a document and return the ledger of the run.

        Args:
            document: The document to validate

        Returns:
            RunState: The finished run, whatever its outcome
        """
        logger.info(f"Starting validation of {document} ({len(self.checks)} checks)")
        state = RunState(document, self._listeners)

        for check in self.checks:
            self._executor.execute_single_check(check, state)

        if state.requires_compensation:
            logger.warning(f"Validation of document {document.identifier} requires compensation")
            state.run_compensation()

        logger.info(
            f"Validation of document {document.identifier} finished: "
            f"{state.success_count} passed, {state.failure_count} failed, {state.skipped_count} skipped"
        )
        return state

    def run_check(self, check: ValidationCheck, state: RunState) -> Outcome:
        """Drive a single check against an existing run state.

        Applies the same breaker, predicate, timeout and rollback rules as
        ``run`` but performs no compensation.
        """
        return self._executor.execute_single_check(check, state)

    def report(self, document: Document) -> ValidationRunReport:
        """Validate a document and summarize the run.

        Returns:
            ValidationRunReport: Snapshot of the run
        """
        start_time = arrow.utcnow().float_timestamp
        state = self.run(document)
        return self._calculator.summarize(state, start_time)

    def summarize(self, state: RunState) -> ValidationRunReport:
        return self._calculator.summarize(state)

    def get_check_names(self) -> list[str]:
        """Get names of all checks in this pipeline.

        Returns:
            List of check names in execution order
        """
        return [check.name for check in self.checks]

    def get_check(self, check_name: str) -> ValidationCheck | None:
        """Get a check by name.

        Args:
            check_name: Name of the check to retrieve

        Returns:
            The check if found, None otherwise
        """
        return next((check for check in self.checks if check.name == check_name), None)

    def __len__(self) -> int:
        return len(self.checks)

    def __str__(self) -> str:
        """String representation of the pipeline."""
        return f"ValidationPipeline(checks={len(self.checks)})"

    def __repr__(self) -> str:
        """Detailed representation of the pipeline."""
        return f"ValidationPipeline(checks={self.get_check_names()})"
