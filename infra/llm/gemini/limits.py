from dataclasses import dataclass


@dataclass(frozen=True)
class ModelLimits:
    delay_seconds: float
    tokens_per_minute: int


DEFAULT_MODEL = "gemini-1.5-flash"

# Free tier: fixed delay derived from RPM, ceiling from TPM
MODEL_LIMITS = {
    "gemini-2.5-pro": ModelLimits(delay_seconds=12, tokens_per_minute=250_000),        # 5 RPM
    "gemini-2.5-flash": ModelLimits(delay_seconds=6, tokens_per_minute=250_000),       # 10 RPM
    "gemini-2.5-flash-lite": ModelLimits(delay_seconds=4, tokens_per_minute=250_000),  # 15 RPM
    "gemini-2.0-flash": ModelLimits(delay_seconds=4, tokens_per_minute=1_000_000),     # 15 RPM
    "gemini-1.5-flash": ModelLimits(delay_seconds=6, tokens_per_minute=200_000),
    "gemini-1.5-pro": ModelLimits(delay_seconds=6, tokens_per_minute=200_000),
}

FALLBACK_LIMITS = ModelLimits(delay_seconds=6, tokens_per_minute=200_000)

SUPPORTED_MODELS = list(MODEL_LIMITS)


def get_model_limits(model: str) -> ModelLimits:
    return MODEL_LIMITS.get(model, FALLBACK_LIMITS)
