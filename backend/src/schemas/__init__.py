"""API response schemas."""

from .validation import StageValidationResponse, ValidationIssueResponse

__all__ = ["StageValidationResponse", "ValidationIssueResponse"]
