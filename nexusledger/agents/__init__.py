"""AI agents package."""

from nexusledger.agents.analyst import (
    EMPTY_RESPONSE_MESSAGE,
    ERROR_MESSAGE,
    NO_API_KEY_MESSAGE,
    AnalysisContext,
    AnalysisResponse,
    FinancialAnalystAgent,
    build_analysis_context,
    build_prompt,
)

__all__ = [
    "EMPTY_RESPONSE_MESSAGE",
    "ERROR_MESSAGE",
    "NO_API_KEY_MESSAGE",
    "AnalysisContext",
    "AnalysisResponse",
    "FinancialAnalystAgent",
    "build_analysis_context",
    "build_prompt",
]
