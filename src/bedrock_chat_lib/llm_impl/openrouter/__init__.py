"""OpenRouter catalogue client used to resolve model capabilities."""

from .client import OpenRouterClient, OpenRouterModel, ModelProperties, normalize_model_id

__all__ = ["OpenRouterClient", "OpenRouterModel", "ModelProperties", "normalize_model_id"]
