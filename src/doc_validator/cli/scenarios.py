"""Demonstration scenarios for the validation pipeline.

Each scenario exercises one behavior of the pipeline: conditional skips,
compensation, duplicate detection and the circuit breaker. Scenarios run in
order against one shared registry, so the duplicate scenario sees the
identifier accepted by the first one.
"""

from collections.abc import Callable
from dataclasses import dataclass

from doc_validator.checks import ContentSchemaCheck
from doc_validator.document import Document
from doc_validator.pipeline import Outcome, OutcomeKind, RunState, ValidationPipeline

VALID_CONTENT = "<?xml version='1.0'?><NFe><data>content</data></NFe>"
VALID_CREDENTIAL = "CERT_VALID_2025"


@dataclass(frozen=True)
class Scenario:
    """A titled demonstration run."""

    title: str
    execute: Callable[[ValidationPipeline], RunState]


def _document_run(document: Document) -> Callable[[ValidationPipeline], RunState]:
    return lambda pipeline: pipeline.run(document)


def _seeded_breaker_run(pipeline: ValidationPipeline) -> RunState:
    """Seed three failures, then drive a schema check into the open breaker."""
    state = RunState(_document("NFE00007", 1000.00, 100.00, content="invalid xml", signing_credential="CERT_EXPIRED"))
    for index in range(1, 4):
        state.record_outcome(Outcome(check_name=f"seeded_{index}", kind=OutcomeKind.FAILURE, message="Seeded failure"))
    pipeline.run_check(ContentSchemaCheck(), state)
    return state


def _document(
    identifier: str,
    total_amount: float,
    declared_tax: float,
    content: str = VALID_CONTENT,
    signing_credential: str = VALID_CREDENTIAL,
) -> Document:
    return Document(
        identifier=identifier,
        content=content,
        signing_credential=signing_credential,
        total_amount=total_amount,
        declared_tax=declared_tax,
    )


def build_scenarios() -> list[Scenario]:
    """Create the demonstration scenarios in execution order."""
    return [
        Scenario("Fully valid document", _document_run(_document("NFE00001", 10000.00, 3500.00))),
        Scenario(
            "Invalid XML - first check fails",
            _document_run(_document("NFE00002", 5000.00, 1750.00, content="invalid xml without tags")),
        ),
        Scenario(
            "Expired credential - conditional checks are skipped",
            _document_run(_document("NFE00003", 8000.00, 2800.00, signing_credential="CERT_EXPIRED")),
        ),
        Scenario("Incorrect tax calculation", _document_run(_document("NFE00004", 10000.00, 2000.00))),
        Scenario("Duplicate document", _document_run(_document("NFE00001", 10000.00, 3500.00))),
        Scenario(
            "External authority rejects - registration is rolled back",
            _document_run(_document("NFE00999", 15000.00, 5250.00)),
        ),
        Scenario("Circuit breaker after 3 failures", _seeded_breaker_run),
    ]
