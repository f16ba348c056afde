"""CLI entry point.

Usage:
    python -m doc_validator.cli validate document.json
    python -m doc_validator.cli demo
    doc-validator validate document.json --json
"""

from doc_validator.cli.app import app
from doc_validator.logging import setup_logging
from doc_validator.settings import get_settings


def main() -> None:
    """CLI entry point with logging configuration."""
    setup_logging(get_settings().log_level, compact=True)
    app()


if __name__ == "__main__":
    main()
