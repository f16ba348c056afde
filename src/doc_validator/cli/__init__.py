"""CLI module for doc-validator.

Provides command-line access to the validation pipeline.
"""

from doc_validator.cli.app import app

__all__ = ["app"]
