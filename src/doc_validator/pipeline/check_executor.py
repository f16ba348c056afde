"""Check execution components for the validation pipeline.

This module provides the CheckExecutor class responsible for driving a single
ValidationCheck against a RunState. It applies the breaker and predicate
gates, runs the check logic under its timeout budget, converts every error
into an outcome and records the result.

Key Features:
- Breaker and precondition gating without consuming the timeout budget
- Bounded-time execution on a dedicated worker thread
- Cooperative cancellation and result discarding on timeout
- Exception handling and conversion to Failure outcomes
- Rollback registration and compensation flagging

Typical Usage:
    executor = CheckExecutor()
    state = RunState(document)
    outcome = executor.execute_single_check(check, state)
"""

import concurrent.futures
import threading
from typing import Any

import arrow
from loguru import logger

from doc_validator.constants import MESSAGE_BREAKER_SKIP, MESSAGE_PRECONDITION_SKIP
from doc_validator.exceptions import CheckCancelledError, UnexpectedFault, ValidationFailure, ValidationTimeout

from .base import ValidationCheck
from .cancellation import CancellationToken
from .enums import OutcomeKind
from .models import Outcome
from .state import RunState

_RESERVED_KINDS = (OutcomeKind.TIMEOUT, OutcomeKind.SKIPPED)


class CheckExecutor:
    """Handles individual check execution within a validation run.

    The CheckExecutor guarantees that every call produces exactly one Outcome,
    recorded in the RunState, and that no exception raised by check logic ever
    escapes. Checks are executed one at a time; the executor keeps no state
    between calls.
    """

    def execute_single_check(self, check: ValidationCheck, state: RunState) -> Outcome:
        """Execute a check against the run state and record its outcome.

        Steps:
        1. Breaker open: record Skipped without evaluating anything else
        2. Predicate false: record Skipped without dispatching a worker
        3. Run the check logic under its timeout budget
        4. Register successful rollback-capable checks for compensation
        5. Flag non-successful outcomes when compensation candidates exist

        Args:
            check: The check to execute
            state: The ledger of the current run

        Returns:
            Outcome: The recorded outcome
        """
        if state.breaker_tripped:
            logger.debug(f"Skipping check {check.name}: circuit breaker is open")
            return self._record(state, self._skipped(check, MESSAGE_BREAKER_SKIP))

        if not self._evaluate_predicate(check, state):
            logger.debug(f"Skipping check {check.name}: preconditions not met")
            return self._record(state, self._skipped(check, MESSAGE_PRECONDITION_SKIP))

        outcome = self._execute_with_timeout(check, state)

        if not outcome.is_success and state.has_rollback_checks:
            outcome = outcome.model_copy(update={"requires_compensation": True})

        self._record(state, outcome)

        if outcome.is_success and check.supports_rollback:
            state.register_for_rollback(check)

        return outcome

    def _evaluate_predicate(self, check: ValidationCheck, state: RunState) -> bool:
        """Evaluate the execution predicate, treating errors as 'do not run'."""
        try:
            return bool(check.should_run(state))
        except Exception as e:
            logger.error(f"Predicate of check {check.name} raised {type(e).__name__}: {e}")
            return False

    def _execute_with_timeout(self, check: ValidationCheck, state: RunState) -> Outcome:
        """Race the check logic against its timeout budget.

        The logic runs on a daemon worker thread and reports through a Future.
        The wait ends at the token's deadline, so the executor and the logic
        agree on when the budget is spent. If the logic is still running then,
        the token is cancelled and the pending result is discarded. An
        abandoned worker never keeps the process alive.
        """
        logger.debug(f"Running check: {check.name} (timeout: {check.timeout_seconds:g}s)")
        start_time = arrow.utcnow().float_timestamp
        executed_at = arrow.utcnow().isoformat()
        token = CancellationToken(check.timeout_seconds)

        future = _start_worker(check, state, token)
        done, _ = concurrent.futures.wait([future], timeout=token.remaining)

        if future not in done:
            token.cancel()
            return self._handle_timeout(check, state, token, start_time, executed_at)

        try:
            result = future.result()
        except ValidationFailure as e:
            logger.warning(f"Check {check.name} rejected the document: {e}")
            return self._outcome(check, OutcomeKind.FAILURE, str(e), start_time, executed_at, details=e.details)
        except CheckCancelledError as e:
            if token.expired or token.cancelled:
                # The logic noticed the deadline before the wait did
                token.cancel()
                return self._handle_timeout(check, state, token, start_time, executed_at)
            logger.warning(f"Check {check.name} stopped itself: {e}")
            return self._outcome(check, OutcomeKind.FAILURE, str(e), start_time, executed_at)
        except Exception as e:
            return self._handle_check_exception(check, UnexpectedFault(check.name, e), start_time, executed_at)

        return self._normalize_result(check, result, start_time, executed_at)

    def _handle_timeout(
        self,
        check: ValidationCheck,
        state: RunState,
        token: CancellationToken,
        start_time: float,
        executed_at: str,
    ) -> Outcome:
        """Build the Timeout outcome and revert side effects of the abandoned unit.

        A side effect that committed before cancellation belongs to a result
        that will never be reported, so it is undone right away.
        """
        timeout = ValidationTimeout(check.name, check.timeout_seconds)
        logger.warning(f"Check {check.name} timed out after {check.timeout_seconds:g}s")

        if token.committed and check.supports_rollback:
            logger.warning(f"Reverting side effect of abandoned check {check.name}")
            check.safe_undo(state.document)

        return self._outcome(
            check,
            OutcomeKind.TIMEOUT,
            str(timeout),
            start_time,
            executed_at,
            details={"timeout_seconds": check.timeout_seconds},
        )

    def _handle_check_exception(
        self,
        check: ValidationCheck,
        fault: UnexpectedFault,
        start_time: float,
        executed_at: str,
    ) -> Outcome:
        """Convert an unexpected exception from check logic into a Failure outcome.

        Args:
            check: The check that raised
            fault: Wrapper around the original exception
            start_time: Timestamp when the check started, for partial timing
            executed_at: ISO timestamp of the execution start

        Returns:
            Outcome: A Failure outcome with the exception message and type
        """
        logger.error(f"Check {check.name} threw exception: {fault.cause}")
        return self._outcome(
            check,
            OutcomeKind.FAILURE,
            str(fault),
            start_time,
            executed_at,
            details={"exception": str(fault.cause), "type": type(fault.cause).__name__},
        )

    def _normalize_result(self, check: ValidationCheck, result: Any, start_time: float, executed_at: str) -> Outcome:
        """Stamp timing and identity on the logic's result.

        Logic may only report Success or Failure; anything else becomes a
        Failure.
        """
        if not isinstance(result, Outcome):
            fault = UnexpectedFault(check.name, TypeError(f"expected Outcome, got {type(result).__name__}"))
            return self._handle_check_exception(check, fault, start_time, executed_at)

        if result.kind in _RESERVED_KINDS:
            logger.error(f"Check {check.name} returned reserved outcome kind '{result.kind}'")
            return self._outcome(
                check,
                OutcomeKind.FAILURE,
                f"Check returned reserved outcome kind '{result.kind}': {result.message}",
                start_time,
                executed_at,
                details=result.details,
            )

        outcome = self._outcome(check, result.kind, result.message, start_time, executed_at, details=result.details)
        if outcome.is_success:
            logger.debug(f"Check {check.name} passed: {outcome.message}")
        else:
            logger.warning(f"Check {check.name} failed: {outcome.message}")
        return outcome

    def _outcome(
        self,
        check: ValidationCheck,
        kind: OutcomeKind,
        message: str,
        start_time: float,
        executed_at: str,
        details: dict[str, Any] | None = None,
    ) -> Outcome:
        elapsed_ms = max(0.0, (arrow.utcnow().float_timestamp - start_time) * 1000)
        return Outcome(
            check_name=check.name,
            kind=kind,
            message=message,
            execution_time_ms=elapsed_ms,
            executed_at=executed_at,
            details=details or {},
        )

    def _skipped(self, check: ValidationCheck, message: str) -> Outcome:
        return Outcome(check_name=check.name, kind=OutcomeKind.SKIPPED, message=message, execution_time_ms=0.0)

    def _record(self, state: RunState, outcome: Outcome) -> Outcome:
        state.record_outcome(outcome)
        return outcome


def _start_worker(check: ValidationCheck, state: RunState, token: CancellationToken) -> concurrent.futures.Future:
    """Run the check logic on a daemon thread named after the check."""
    future: concurrent.futures.Future = concurrent.futures.Future()

    def work() -> None:
        if not future.set_running_or_notify_cancel():
            return
        try:
            result = check.run(state.document, token)
        except BaseException as e:
            future.set_exception(e)
        else:
            future.set_result(result)

    threading.Thread(target=work, name=f"check-{check.name}", daemon=True).start()
    return future


def active_check_threads() -> list[str]:
    """Names of worker threads still running abandoned or in-flight checks."""
    return [thread.name for thread in threading.enumerate() if thread.name.startswith("check-")]
