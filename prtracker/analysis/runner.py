"""Run a single CI failure diagnosis end to end."""

from __future__ import annotations

import asyncio
import logging

from .llm import LLM, create_llm
from .prompt_builder import build_prompt, truncate_log
from .types import AnalysisRequest

LOGGER = logging.getLogger(__name__)


async def run_analysis(
    request: AnalysisRequest,
    *,
    llm: LLM | None = None,
    timeout: float | None = None,
) -> str:
    """Return the diagnosis text for ``request``.

    The blocking HTTP call runs in a worker thread so only the awaiting task
    is suspended.
    """

    llm = llm or create_llm(request.api_key)
    truncated = truncate_log(request.raw_log)
    if len(truncated) != len(request.raw_log):
        LOGGER.debug(
            "log for %s truncated from %d to %d character(s)",
            request.job_name,
            len(request.raw_log),
            len(truncated),
        )
    prompt = build_prompt(request.job_name, truncated)
    LOGGER.info("triggering llm analysis for job %s", request.job_name)
    text = await asyncio.to_thread(llm.generate, prompt.text, timeout=timeout)
    LOGGER.info("llm analysis succeeded for job %s", request.job_name)
    return text


__all__ = ["run_analysis"]
