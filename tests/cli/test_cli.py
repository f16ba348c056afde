"""Tests for the doc-validator CLI."""

import json

import pytest
from typer.testing import CliRunner

from doc_validator.checks import build_document_pipeline
from doc_validator.cli import app
from doc_validator.cli.scenarios import build_scenarios
from doc_validator.pipeline import OutcomeKind
from doc_validator.storage import AcceptedIdentifierRegistry, get_identifier_registry

runner = CliRunner()


@pytest.fixture(autouse=True)
def clean_registry():
    """The validate command uses the process-wide registry."""
    get_identifier_registry().clear()
    yield
    get_identifier_registry().clear()


@pytest.fixture
def write_document(tmp_path, make_document):
    def write(identifier: str = "NFE00001", **overrides):
        path = tmp_path / f"{identifier}.json"
        path.write_text(make_document(identifier, **overrides).model_dump_json(), encoding="utf-8")
        return path

    return write


class TestValidateCommand:
    def test_valid_document(self, write_document):
        result = runner.invoke(app, ["validate", str(write_document())])

        assert result.exit_code == 0
        assert "Validation summary" in result.output
        assert "accepted" in result.output

    def test_json_report(self, write_document):
        result = runner.invoke(app, ["validate", str(write_document()), "--json"])

        assert result.exit_code == 0
        report = json.loads(result.output)
        assert report["disposition"] == "accepted"
        assert report["total_checks"] == 5

    def test_rejected_document_exits_with_1(self, write_document):
        result = runner.invoke(app, ["validate", str(write_document(content="")), "--json"])

        assert result.exit_code == 1
        report = json.loads(result.output)
        assert report["disposition"] == "partial"
        assert report["outcomes"][0]["kind"] == "failure"

    def test_duplicate_submission(self, write_document):
        path = write_document()
        runner.invoke(app, ["validate", str(path)])

        result = runner.invoke(app, ["validate", str(path), "--json"])

        assert result.exit_code == 1
        assert json.loads(result.output)["outcomes"][3]["details"]["reason"] == "duplicate"

    def test_missing_file(self, tmp_path):
        result = runner.invoke(app, ["validate", str(tmp_path / "missing.json")])

        assert result.exit_code == 2
        assert "does not exist" in result.output

    def test_invalid_document(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text('{"content": "no identifier"}', encoding="utf-8")

        result = runner.invoke(app, ["validate", str(path)])

        assert result.exit_code == 2
        assert "cannot load document" in result.output


class TestDemoCommand:
    def test_demo_runs_all_scenarios(self):
        result = runner.invoke(app, ["demo"])

        assert result.exit_code == 0
        assert "Scenario 1" in result.output
        assert "Scenario 7" in result.output

    def test_demo_leaves_process_registry_untouched(self):
        runner.invoke(app, ["demo"])

        assert len(get_identifier_registry()) == 0


class TestScenarios:
    def test_scenario_outcomes(self):
        """Scenarios share one registry, so the duplicate run sees the first one."""
        pipeline = build_document_pipeline(registry=AcceptedIdentifierRegistry())
        states = [scenario.execute(pipeline) for scenario in build_scenarios()]

        valid, invalid_xml, expired, wrong_tax, duplicate, rejected, breaker = states
        assert all(outcome.is_success for outcome in valid.outcomes)
        assert invalid_xml.outcomes[0].kind == OutcomeKind.FAILURE
        assert expired.outcomes[1].kind == OutcomeKind.FAILURE
        assert expired.outcomes[2].kind == OutcomeKind.SKIPPED
        assert wrong_tax.outcomes[2].kind == OutcomeKind.FAILURE
        assert duplicate.outcomes[3].details["reason"] == "duplicate"
        assert rejected.rollback_performed is True
        assert breaker.breaker_tripped is True
        assert breaker.outcomes[-1].kind == OutcomeKind.SKIPPED
