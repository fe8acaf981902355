"""POST /interpret -- free-text prompt to dashboard interpretations."""
from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field
from fastapi import APIRouter, HTTPException

from src.interpreter.service import interpret
from src.core.logging import get_logger

logger = get_logger(__name__)
router = APIRouter()


class InterpretRequest(BaseModel):
    prompt: str = Field(..., min_length=1, max_length=500, description="Free-text dashboard request")
    mode: str | None = Field(None, description="mock | openai | anthropic (defaults to settings)")
    multi: bool = Field(True, description="One interpretation per mentioned dataset")


class InterpretResponse(BaseModel):
    prompt: str
    interpretations: list[dict[str, Any]]
    source: str
    fallback_reason: str | None
    latency_ms: int


@router.post("", response_model=InterpretResponse)
async def interpret_endpoint(req: InterpretRequest):
    """Interpret a prompt; hosted-model failures fall back to the rule-based interpreter."""
    try:
        result = await interpret(req.prompt, mode=req.mode, multi=req.multi)
    except Exception as exc:
        logger.exception("Interpret failed")
        raise HTTPException(status_code=500, detail=str(exc))

    return InterpretResponse(
        prompt=req.prompt,
        interpretations=[i.to_wire() for i in result.interpretations],
        source=result.source,
        fallback_reason=result.fallback_reason.value if result.fallback_reason else None,
        latency_ms=result.latency_ms,
    )
