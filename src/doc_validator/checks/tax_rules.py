"""Tax rules check for the validation pipeline.

Runs only when every earlier check in the run succeeded.
"""

from doc_validator.constants import CHECK_TAX_RULES
from doc_validator.document import Document
from doc_validator.pipeline import CancellationToken, Outcome, RunState, ValidationCheck


class TaxRulesCheck(ValidationCheck):
    """Compares the declared tax against the expected rate of the total."""

    def __init__(
        self,
        name: str = CHECK_TAX_RULES,
        timeout_seconds: float = 5.0,
        tax_rate: float = 0.35,
        tolerance: float = 0.01,
        latency_seconds: float = 0.0,
    ):
        """Initialize the tax rules check.

        Args:
            name: Name of this check
            timeout_seconds: Execution budget
            tax_rate: Expected tax as a fraction of the total amount
            tolerance: Accepted absolute difference
            latency_seconds: Simulated processing time
        """
        super().__init__(name, timeout_seconds)
        self.tax_rate = tax_rate
        self.tolerance = tolerance
        self.latency_seconds = latency_seconds

    def should_run(self, state: RunState) -> bool:
        return state.all_succeeded_so_far()

    def _execute(self, document: Document, token: CancellationToken) -> Outcome:
        if self.latency_seconds:
            token.wait(self.latency_seconds)

        expected = document.total_amount * self.tax_rate
        difference = abs(expected - document.declared_tax)
        details = {"expected_tax": round(expected, 2), "declared_tax": document.declared_tax}

        if difference > self.tolerance:
            return self.failed(
                f"Incorrect tax. Expected: {expected:.2f}, declared: {document.declared_tax:.2f}",
                details,
            )

        return self.success("Tax calculation correct", details)
