"""Tests for CheckExecutor class."""

import os
import subprocess
import sys
import threading
import time
from pathlib import Path

from doc_validator.document import Document
from doc_validator.exceptions import CheckCancelledError, ValidationFailure
from doc_validator.pipeline import CancellationToken, FunctionCheck, Outcome, OutcomeKind, RunState, ValidationCheck
from doc_validator.pipeline.check_executor import CheckExecutor, active_check_threads

SRC_DIR = str(Path(__file__).resolve().parents[2] / "src")


class MockValidationCheck(ValidationCheck):
    """Mock validation check for testing."""

    def __init__(
        self,
        name: str,
        timeout_seconds: float = 1.0,
        should_fail: bool = False,
        should_raise: bool = False,
        run: bool = True,
        rollback: bool = False,
    ):
        super().__init__(name, timeout_seconds)
        self.should_fail = should_fail
        self.should_raise = should_raise
        self.run_predicate = run
        self.supports_rollback = rollback
        self.execute_called = False
        self.predicate_called = False

    def should_run(self, state: RunState) -> bool:
        self.predicate_called = True
        return self.run_predicate

    def _execute(self, document: Document, token: CancellationToken) -> Outcome:
        """Mock execute method."""
        self.execute_called = True
        if self.should_raise:
            raise ValueError(f"Mock check {self.name} failed")
        if self.should_fail:
            return self.failed(f"Check {self.name} failed")
        return self.success(f"Check {self.name} passed")


class TestCheckExecutor:
    """Test cases for CheckExecutor."""

    def test_execute_successful_check(self, document):
        """Test executing a successful check."""
        executor = CheckExecutor()
        state = RunState(document)
        check = MockValidationCheck("test_check")

        result = executor.execute_single_check(check, state)

        assert result.kind == OutcomeKind.SUCCESS
        assert result.check_name == "test_check"
        assert result.message == "Check test_check passed"
        assert result.execution_time_ms >= 0
        assert result.executed_at is not None
        assert state.outcomes == (result,)
        assert check.execute_called is True

    def test_execute_failing_check(self, document):
        """Test executing a failing check."""
        executor = CheckExecutor()
        state = RunState(document)
        check = MockValidationCheck("failing_check", should_fail=True)

        result = executor.execute_single_check(check, state)

        assert result.kind == OutcomeKind.FAILURE
        assert result.message == "Check failing_check failed"
        assert state.consecutive_failures == 1

    def test_execute_check_with_exception(self, document):
        """Test that an unexpected exception becomes a Failure outcome."""
        executor = CheckExecutor()
        state = RunState(document)
        check = MockValidationCheck("error_check", should_raise=True)

        result = executor.execute_single_check(check, state)

        assert result.kind == OutcomeKind.FAILURE
        assert "Check execution failed" in result.message
        assert "Mock check error_check failed" in result.message
        assert result.details["exception"] == "Mock check error_check failed"
        assert result.details["type"] == "ValueError"
        assert len(state.outcomes) == 1

    def test_validation_failure_is_a_failure(self, document):
        """Test that ValidationFailure keeps its message and details."""

        def reject(doc, token):
            raise ValidationFailure("rejected by rule", {"rule": "r1"})

        executor = CheckExecutor()
        state = RunState(document)

        result = executor.execute_single_check(FunctionCheck("rule", 1.0, reject), state)

        assert result.kind == OutcomeKind.FAILURE
        assert result.message == "rejected by rule"
        assert result.details == {"rule": "r1"}

    def test_logic_cannot_report_reserved_kinds(self, document):
        """Test that Timeout and Skipped from logic become Failure."""
        executor = CheckExecutor()
        state = RunState(document)
        check = FunctionCheck(
            "sneaky",
            1.0,
            lambda doc, token: Outcome(check_name="sneaky", kind=OutcomeKind.SKIPPED, message="skip me"),
        )

        result = executor.execute_single_check(check, state)

        assert result.kind == OutcomeKind.FAILURE
        assert "reserved outcome kind" in result.message

    def test_logic_returning_non_outcome_is_a_failure(self, document):
        executor = CheckExecutor()
        state = RunState(document)
        check = FunctionCheck("bad_return", 1.0, lambda doc, token: "ok")

        result = executor.execute_single_check(check, state)

        assert result.kind == OutcomeKind.FAILURE
        assert result.details["type"] == "TypeError"

    def test_check_name_is_stamped_on_outcome(self, document):
        """Test that the recorded outcome always carries the check's name."""
        executor = CheckExecutor()
        state = RunState(document)
        check = FunctionCheck(
            "renamed",
            1.0,
            lambda doc, token: Outcome(check_name="other", kind=OutcomeKind.SUCCESS, message="fine"),
        )

        result = executor.execute_single_check(check, state)

        assert result.check_name == "renamed"


class TestSkipping:
    """Test breaker and predicate gates."""

    def test_breaker_open_skips_without_running(self, document):
        """Test that an open breaker skips the check entirely."""
        executor = CheckExecutor()
        state = RunState(document)
        for index in range(3):
            state.record_outcome(Outcome(check_name=f"seed{index}", kind=OutcomeKind.FAILURE, message="seeded"))
        check = MockValidationCheck("after_breaker")

        result = executor.execute_single_check(check, state)

        assert result.kind == OutcomeKind.SKIPPED
        assert "circuit breaker" in result.message
        assert check.execute_called is False
        assert check.predicate_called is False
        assert len(state.outcomes) == 4

    def test_false_predicate_skips_without_budget(self, document):
        """Test that a predicate-false skip records zero execution time."""
        executor = CheckExecutor()
        state = RunState(document)
        check = MockValidationCheck("conditional", run=False)

        result = executor.execute_single_check(check, state)

        assert result.kind == OutcomeKind.SKIPPED
        assert result.message == "Skipped: preconditions not met"
        assert result.execution_time_ms == 0.0
        assert check.execute_called is False
        assert state.consecutive_failures == 0

    def test_raising_predicate_is_treated_as_false(self, document):
        def broken_predicate(state):
            raise KeyError("missing")

        executor = CheckExecutor()
        state = RunState(document)
        check = FunctionCheck("guarded", 1.0, lambda doc, token: True, predicate=broken_predicate)

        result = executor.execute_single_check(check, state)

        assert result.kind == OutcomeKind.SKIPPED


class TestRollbackBookkeeping:
    """Test rollback registration and compensation flagging."""

    def test_successful_rollback_check_is_registered(self, document):
        executor = CheckExecutor()
        state = RunState(document)
        check = MockValidationCheck("storing", rollback=True)

        executor.execute_single_check(check, state)

        assert state.rollback_checks == (check,)

    def test_failed_rollback_check_is_not_registered(self, document):
        executor = CheckExecutor()
        state = RunState(document)

        executor.execute_single_check(MockValidationCheck("storing", rollback=True, should_fail=True), state)

        assert state.rollback_checks == ()

    def test_failure_after_registration_requires_compensation(self, document):
        """Test that a failure flags compensation once a candidate exists."""
        executor = CheckExecutor()
        state = RunState(document)

        executor.execute_single_check(MockValidationCheck("storing", rollback=True), state)
        result = executor.execute_single_check(MockValidationCheck("later", should_fail=True), state)

        assert result.requires_compensation is True
        assert state.requires_compensation is True

    def test_failure_without_candidates_does_not_flag(self, document):
        executor = CheckExecutor()
        state = RunState(document)

        result = executor.execute_single_check(MockValidationCheck("lonely", should_fail=True), state)

        assert result.requires_compensation is False

    def test_skip_after_registration_does_not_flag(self, document):
        """Test that Skipped outcomes never request compensation."""
        executor = CheckExecutor()
        state = RunState(document)

        executor.execute_single_check(MockValidationCheck("storing", rollback=True), state)
        result = executor.execute_single_check(MockValidationCheck("conditional", run=False), state)

        assert result.kind == OutcomeKind.SKIPPED
        assert result.requires_compensation is False


class TestTimeouts:
    """Test bounded-time execution."""

    def test_cooperative_check_times_out_and_stops(self, document):
        """Test that a check waiting on its token is cancelled at the deadline."""
        stopped = threading.Event()

        def slow(doc, token):
            try:
                token.wait(5.0)
            finally:
                stopped.set()
            return True

        executor = CheckExecutor()
        state = RunState(document)
        started = time.monotonic()

        result = executor.execute_single_check(FunctionCheck("slow", 0.1, slow), state)

        assert result.kind == OutcomeKind.TIMEOUT
        assert time.monotonic() - started < 2.0
        assert result.details["timeout_seconds"] == 0.1
        assert stopped.wait(2.0) is True
        assert state.consecutive_failures == 1

    def test_uncooperative_result_is_discarded(self, document):
        """Test that a late result never reaches the ledger."""
        release = threading.Event()
        finished = threading.Event()

        def stubborn(doc, token):
            release.wait(5.0)
            finished.set()
            return True

        executor = CheckExecutor()
        state = RunState(document)

        result = executor.execute_single_check(FunctionCheck("stubborn", 0.1, stubborn), state)
        release.set()

        assert finished.wait(2.0) is True
        assert result.kind == OutcomeKind.TIMEOUT
        assert [o.kind for o in state.outcomes] == [OutcomeKind.TIMEOUT]

    def test_side_effect_refused_after_cancellation(self, document):
        """Test that commit() blocks side effects of an abandoned unit."""
        release = threading.Event()
        refused = threading.Event()
        effects: list[str] = []

        def late_writer(doc, token):
            release.wait(5.0)
            try:
                with token.commit():
                    effects.append("written")
            except Exception:
                refused.set()
                raise
            return True

        executor = CheckExecutor()
        state = RunState(document)

        result = executor.execute_single_check(FunctionCheck("late_writer", 0.1, late_writer), state)
        release.set()

        assert result.kind == OutcomeKind.TIMEOUT
        assert refused.wait(2.0) is True
        assert effects == []

    def test_committed_effect_of_abandoned_unit_is_undone(self, document):
        """Test that a side effect committed before the timeout is reverted."""
        effects: list[str] = []
        release = threading.Event()

        def writer(doc, token):
            with token.commit():
                effects.append("written")
            release.wait(5.0)
            return True

        executor = CheckExecutor()
        state = RunState(document)
        check = FunctionCheck("writer", 0.2, writer, undo=lambda doc: effects.remove("written"))

        result = executor.execute_single_check(check, state)
        release.set()

        assert result.kind == OutcomeKind.TIMEOUT
        assert effects == []
        assert state.rollback_checks == ()

    def test_logic_reaching_commit_after_deadline_times_out(self, document):
        """Test that spending the whole budget is a Timeout even if the logic notices first."""
        effects: list[str] = []

        def overrun(doc, token):
            while not token.expired:
                time.sleep(0.001)
            with token.commit():
                effects.append("written")
            return True

        executor = CheckExecutor()
        kinds = [
            executor.execute_single_check(FunctionCheck("overrun", 0.05, overrun), RunState(document)).kind
            for _ in range(10)
        ]

        assert kinds == [OutcomeKind.TIMEOUT] * 10
        assert effects == []

    def test_self_cancelled_logic_before_deadline_is_a_failure(self, document):
        def give_up(doc, token):
            raise CheckCancelledError("nothing left to do")

        result = CheckExecutor().execute_single_check(FunctionCheck("give_up", 1.0, give_up), RunState(document))

        assert result.kind == OutcomeKind.FAILURE
        assert result.message == "nothing left to do"

    def test_timeout_does_not_block_on_worker(self, document):
        """Test that the executor returns without joining the worker thread."""
        release = threading.Event()

        executor = CheckExecutor()
        state = RunState(document)
        executor.execute_single_check(FunctionCheck("hung", 0.1, lambda doc, token: release.wait(5.0)), state)

        workers = [thread for thread in threading.enumerate() if thread.name == "check-hung"]
        assert "check-hung" in active_check_threads()
        assert workers and all(thread.daemon for thread in workers)
        release.set()

    def test_abandoned_worker_does_not_delay_exit(self):
        """Test that a process exits right after a hung check times out."""
        script = (
            "import time\n"
            "from doc_validator.document import Document\n"
            "from doc_validator.pipeline import FunctionCheck, RunState\n"
            "from doc_validator.pipeline.check_executor import CheckExecutor\n"
            "check = FunctionCheck('hung', 0.1, lambda doc, token: time.sleep(10) or True)\n"
            "outcome = CheckExecutor().execute_single_check(check, RunState(Document(identifier='NFE00001')))\n"
            "print(outcome.kind)\n"
        )
        env = {**os.environ, "PYTHONPATH": os.pathsep.join(filter(None, [SRC_DIR, os.environ.get("PYTHONPATH")]))}
        started = time.monotonic()

        completed = subprocess.run([sys.executable, "-c", script], capture_output=True, text=True, env=env, timeout=30)

        assert completed.returncode == 0, completed.stderr
        assert completed.stdout.strip() == "timeout"
        assert time.monotonic() - started < 8.0
