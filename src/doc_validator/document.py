"""Document model consumed by the validation pipeline.

The pipeline itself only relies on ``identifier``; every other field is
payload for the individual checks.
"""

from datetime import date
from pathlib import Path

from pydantic import BaseModel, Field


class Document(BaseModel):
    """Electronic fiscal document submitted for validation."""

    identifier: str = Field(..., min_length=1, description="Unique document number")
    content: str = Field(default="", description="Raw XML payload")
    signing_credential: str = Field(default="", description="Digital certificate reference")
    total_amount: float = Field(default=0.0, description="Declared document total")
    declared_tax: float = Field(default=0.0, description="Declared tax amount")
    issued_on: date = Field(default_factory=date.today, description="Issue date")

    # Set by the registering check, cleared again by its undo
    stored: bool = False
    storage_id: str | None = None

    @classmethod
    def from_json_file(cls, path: Path) -> "Document":
        """Load a document from a JSON file.

        Raises:
            OSError: If the file cannot be read
            pydantic.ValidationError: If the content does not describe a document
        """
        return cls.model_validate_json(path.read_text(encoding="utf-8"))

    def __str__(self) -> str:
        return f"Document {self.identifier} - total: {self.total_amount:.2f} - issued: {self.issued_on.isoformat()}"
