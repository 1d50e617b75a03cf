"""
Configuration module for the story context engine.
Manages budget and estimator settings loaded from environment variables.
"""

import logging
import os
from dataclasses import dataclass, field
from functools import lru_cache


@dataclass
class BudgetConfig:
    """Token budget for one assembled context."""
    total_tokens: int = field(
        default_factory=lambda: int(os.getenv("CONTEXT_TOTAL_TOKENS", "1000000"))
    )
    output_reserve_tokens: int = field(
        default_factory=lambda: int(os.getenv("CONTEXT_OUTPUT_RESERVE", "4000"))
    )
    prompt_reserve_tokens: int = field(
        default_factory=lambda: int(os.getenv("CONTEXT_PROMPT_RESERVE", "2000"))
    )


@dataclass
class ContextConfig:
    """Context assembly configuration."""
    prev_tail_chars: int = field(
        default_factory=lambda: int(os.getenv("CONTEXT_PREV_TAIL_CHARS", "500"))
    )
    # heuristic | tiktoken
    token_estimator: str = field(
        default_factory=lambda: os.getenv("CONTEXT_TOKEN_ESTIMATOR", "heuristic")
    )


@dataclass
class Settings:
    """Main settings loaded from environment."""

    LOG_LEVEL: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO"))
    DEBUG: bool = field(default_factory=lambda: os.getenv("DEBUG", "false").lower() == "true")

    # Nested configs
    budget: BudgetConfig = field(default_factory=BudgetConfig)
    context: ContextConfig = field(default_factory=ContextConfig)


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


def configure_logging(level: str = None) -> None:
    """Configure root logging for scripts and services embedding the engine."""
    level_name = (level or get_settings().LOG_LEVEL).upper()
    if get_settings().DEBUG and level is None:
        level_name = "DEBUG"
    logging.basicConfig(
        level=getattr(logging, level_name, logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


settings = get_settings()
