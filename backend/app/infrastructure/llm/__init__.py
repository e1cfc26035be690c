"""LLM infrastructure module — concrete LLM-backed implementations."""

from .openrouter_insight_generator import OpenRouterInsightGenerator

__all__ = [
    "OpenRouterInsightGenerator",
]
