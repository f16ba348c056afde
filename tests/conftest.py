"""Shared fixtures for the document validator tests."""

import pytest

from doc_validator.document import Document
from doc_validator.settings import Settings
from doc_validator.storage import AcceptedIdentifierRegistry

VALID_CONTENT = "<?xml version='1.0'?><NFe><data>content</data></NFe>"


def _make_document(identifier: str = "NFE00001", **overrides) -> Document:
    """Build a document that passes every default check unless overridden."""
    values = {
        "identifier": identifier,
        "content": VALID_CONTENT,
        "signing_credential": "CERT_VALID_2025",
        "total_amount": 10000.00,
        "declared_tax": 3500.00,
    }
    values.update(overrides)
    return Document(**values)


@pytest.fixture
def make_document():
    """Factory for documents that pass every default check unless overridden."""
    return _make_document


@pytest.fixture
def document() -> Document:
    return _make_document()


@pytest.fixture
def registry() -> AcceptedIdentifierRegistry:
    """Fresh registry, isolated from the process-wide one."""
    return AcceptedIdentifierRegistry()


@pytest.fixture
def settings() -> Settings:
    return Settings(_env_file=None)
