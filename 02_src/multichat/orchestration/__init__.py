"""Orchestration module."""

from .coordinator import (
    UNKNOWN_AGENT_ERROR,
    ComparisonPlan,
    IStageCoordinator,
    StageCoordinator,
    unknown_agent_key,
)
from .prompts import (
    COMPARISON_SYSTEM_PROMPT,
    SUMMARY_SYSTEM_PROMPT,
    build_comparison_prompt,
    build_summary_prompt,
)

__all__ = [
    "ComparisonPlan",
    "IStageCoordinator",
    "StageCoordinator",
    "UNKNOWN_AGENT_ERROR",
    "unknown_agent_key",
    "COMPARISON_SYSTEM_PROMPT",
    "SUMMARY_SYSTEM_PROMPT",
    "build_comparison_prompt",
    "build_summary_prompt",
]
