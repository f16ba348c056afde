"""Run summary calculation components.

This module provides the ReportCalculator class responsible for turning the
ledger of a finished run into a serializable ValidationRunReport with
aggregated counts and an overall disposition.

Disposition Logic:
- All checks succeeded: ACCEPTED
- At least one check succeeded, at least one did not: PARTIAL
- No check succeeded: REJECTED

The disposition is a presentation aid. Callers that need finer control read
the outcome log directly; partial success is the normal shape of a result.

Typical Usage:
    calculator = ReportCalculator()
    report = calculator.summarize(state, start_time)
    print(report.disposition)
"""

import arrow
from loguru import logger

from .enums import Disposition
from .models import ValidationRunReport
from .state import RunState


class ReportCalculator:
    """Aggregates a RunState into a ValidationRunReport.

    Attributes:
        None (stateless calculator - operates on run states)
    """

    def summarize(self, state: RunState, start_time: float | None = None) -> ValidationRunReport:
        """Calculate counts and disposition for a finished run.

        Args:
            state: The ledger of the finished run
            start_time: Optional Unix timestamp of the run start, used to
                compute the total execution time

        Returns:
            ValidationRunReport: Snapshot of the run
        """
        outcomes = list(state.outcomes)
        total = len(outcomes)
        successful = state.success_count

        if total > 0 and successful == total:
            disposition = Disposition.ACCEPTED
            message = f"All {total} checks passed"
        elif successful > 0:
            disposition = Disposition.PARTIAL
            message = f"{successful}/{total} checks passed"
        else:
            disposition = Disposition.REJECTED
            message = f"No check passed ({total} executed)"

        if state.breaker_tripped:
            message += "; circuit breaker opened"
        if state.rollback_performed:
            message += f"; rolled back {', '.join(state.compensated_checks)}"

        logger.debug(f"Run of document {state.document.identifier} summarized as {disposition.value}")

        report = ValidationRunReport(
            document_identifier=state.document.identifier,
            disposition=disposition,
            message=message,
            outcomes=outcomes,
            total_checks=total,
            successful_checks=successful,
            failed_checks=state.failure_count - state.timeout_count,
            timed_out_checks=state.timeout_count,
            skipped_checks=state.skipped_count,
            breaker_tripped=state.breaker_tripped,
            rollback_performed=state.rollback_performed,
            compensated_checks=state.compensated_checks,
            compensation_errors=state.compensation_errors,
        )
        if start_time is not None:
            report.total_execution_time_ms = max(0.0, (arrow.utcnow().float_timestamp - start_time) * 1000)
        return report
