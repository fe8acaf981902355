"""
Interpretation service -- request-level entry point used by the API.

Resolves the planner mode, runs single or multi interpretation and records
where the result came from (hosted model or rules) and how long it took.
"""
from __future__ import annotations

from dataclasses import dataclass

from src.core.config import get_settings
from src.core.logging import get_logger
from src.core.utils import timer
from src.interpreter.llm_interpreter import FallbackReason
from src.interpreter.planner import RULES_MODE, plan, plan_multi
from src.interpreter.schema import Interpretation

logger = get_logger(__name__)


@dataclass
class InterpretResult:
    prompt: str
    mode: str
    interpretations: list[Interpretation]
    fallback_reason: FallbackReason | None = None
    latency_ms: int = 0

    @property
    def source(self) -> str:
        """``llm`` when the hosted model's answer was used, else ``rules``."""
        if self.mode == RULES_MODE or self.fallback_reason is not None:
            return "rules"
        return "llm"


async def interpret(prompt: str, mode: str | None = None, multi: bool = True) -> InterpretResult:
    """Interpret *prompt*; never raises for upstream failures."""
    mode = (mode or get_settings().interpret_mode).lower()
    logger.info("Interpret | prompt=%s | mode=%s | multi=%s", prompt, mode, multi)

    with timer() as t:
        if multi:
            interpretations, reason = await plan_multi(prompt, mode=mode)
        else:
            interpretation, reason = await plan(prompt, mode=mode)
            interpretations = [interpretation]

    return InterpretResult(
        prompt=prompt,
        mode=mode,
        interpretations=interpretations,
        fallback_reason=reason,
        latency_ms=t.elapsed_ms,
    )
