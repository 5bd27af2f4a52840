"""Pydantic schemas for validation API responses"""

from pydantic import BaseModel, Field


class ValidationIssueResponse(BaseModel):
    """A single rule violation reported for a stage message."""
    valid: bool = False
    code: int
    description: str


class StageValidationResponse(BaseModel):
    """Result of validating one stage message.

    ``valid`` is True only when ``errors`` is empty.
    """
    valid: bool
    errors: list[ValidationIssueResponse] = Field(default_factory=list)
