"""Failure-analysis pipeline: truncate, prompt, call the model, extract."""

from .extract import extract_text
from .prompt_builder import build_prompt, truncate_log
from .runner import run_analysis
from .types import AnalysisRequest, Prompt

__all__ = [
    "AnalysisRequest",
    "Prompt",
    "build_prompt",
    "extract_text",
    "run_analysis",
    "truncate_log",
]
