from infra.llm.budget import BudgetTracker, BudgetWindow
from infra.llm.cost_estimator import CostEstimator, estimate_tokens
from infra.llm.models import (
    FailureKind,
    GenerationResult,
    GenerationSuccess,
    GenerationFailure,
    GeminiResponse,
)

__all__ = [
    "BudgetTracker",
    "BudgetWindow",
    "CostEstimator",
    "estimate_tokens",
    "FailureKind",
    "GenerationResult",
    "GenerationSuccess",
    "GenerationFailure",
    "GeminiResponse",
]
