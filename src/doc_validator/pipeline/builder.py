"""Pipeline builder for constructing validation pipelines."""

from collections.abc import Iterable

from doc_validator.pipeline.base import ValidationCheck
from doc_validator.pipeline.events import ValidationListener
from doc_validator.pipeline.pipeline import ValidationPipeline


class ValidationPipelineBuilder:
    """Builder for constructing validation pipelines with fluent interface."""

    def __init__(self):
        """Initialize the builder."""
        self.checks: list[ValidationCheck] = []
        self.listeners: list[ValidationListener] = []
        self._checks_by_name: dict[str, ValidationCheck] = {}

    def add_check(self, check: ValidationCheck) -> "ValidationPipelineBuilder":
        """Append a check to the execution order.

        Args:
            check: Check to add

        Returns:
            This builder for method chaining

        Raises:
            ValueError: If a check with the same name was already added
        """
        if check.name in self._checks_by_name:
            raise ValueError(f"Check '{check.name}' already exists")

        self.checks.append(check)
        self._checks_by_name[check.name] = check
        return self

    def add_checks(self, checks: Iterable[ValidationCheck]) -> "ValidationPipelineBuilder":
        """Append multiple checks, keeping their order.

        Returns:
            This builder for method chaining
        """
        for check in checks:
            self.add_check(check)
        return self

    def add_listener(self, listener: ValidationListener) -> "ValidationPipelineBuilder":
        """Register a listener for breaker and compensation events.

        Returns:
            This builder for method chaining
        """
        self.listeners.append(listener)
        return self

    def get_check(self, name: str) -> ValidationCheck | None:
        return self._checks_by_name.get(name)

    def build(self) -> ValidationPipeline:
        """Build the final pipeline.

        Returns:
            Configured ValidationPipeline
        """
        return ValidationPipeline(self.checks, self.listeners)

    def __str__(self) -> str:
        """String representation of the builder."""
        return f"ValidationPipelineBuilder(checks={len(self.checks)})"
