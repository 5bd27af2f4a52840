"""Validation API router for protocol stage messages"""

from typing import Any

from fastapi import APIRouter, Body, Depends

from dependencies import get_on_select_engine
from domain.validation import OnSelectValidationEngine, issues_to_dicts
from schemas.validation import StageValidationResponse

router = APIRouter(prefix="/validate", tags=["validation"])


@router.post("/on_select", response_model=StageValidationResponse)
async def validate_on_select_message(
    payload: dict[str, Any] = Body(..., description="Raw /on_select call: {context, message}"),
    engine: OnSelectValidationEngine = Depends(get_on_select_engine),
):
    """Validate a seller's /on_select response.

    Every violation found is reported; the endpoint answers 200 whether or
    not the message is valid.

    Args:
        payload: The /on_select call body as received from the seller platform
        engine: Validation engine bound to the shared transaction store

    Returns:
        Validity flag and the ordered list of issues
    """
    issues = await engine.validate(payload)
    return StageValidationResponse(
        valid=not issues,
        errors=issues_to_dicts(issues),
    )
