"""Common exceptions for the document validator.

Check logic raises ``ValidationFailure`` to reject a document. The remaining
classes are raised by the pipeline machinery itself; none of them ever escape
a single check's execution boundary.
"""


class ValidationError(Exception):
    """Base exception for all validation pipeline errors."""


class ValidationFailure(ValidationError):
    """Raised by check logic when a business rule rejects the document.

    This is the expected, recoverable rejection path. The pipeline maps it to a
    Failure outcome carrying the exception message.
    """

    def __init__(self, message: str, details: dict | None = None):
        self.details = details or {}
        super().__init__(message)


class ValidationTimeout(ValidationError):
    """Raised when a check exceeds its timeout budget.

    Treated like a failure for breaker and rollback purposes, but recorded as a
    Timeout outcome.
    """

    def __init__(self, check_name: str, timeout_seconds: float):
        self.check_name = check_name
        self.timeout_seconds = timeout_seconds
        super().__init__(f"Check '{check_name}' timed out after {timeout_seconds:g} seconds")


class CheckCancelledError(ValidationError):
    """Raised inside a worker that observes its cancellation token or deadline.

    When the budget is spent the executor records a Timeout outcome, whichever
    side noticed first. Raised before the deadline, it is a Failure.
    """


class UnexpectedFault(ValidationError):
    """Wraps an exception that check logic did not anticipate.

    The original exception is kept as ``cause`` and its message and type are
    copied into the Failure outcome details.
    """

    def __init__(self, check_name: str, cause: BaseException):
        self.check_name = check_name
        self.cause = cause
        super().__init__(f"Check execution failed: {cause}")
