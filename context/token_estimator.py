"""
Token estimation for mixed-script story text.

The default policy approximates how modern tokenizers split text without
needing a model vocabulary:
- each CJK ideograph counts 1.5
- each run of Latin letters/digits counts 1, whatever its length
- punctuation and whitespace count 0

An exact cl100k_base count via tiktoken is available as an alternative
strategy.
"""

import logging
import math
import re
from typing import Callable, Optional

logger = logging.getLogger(__name__)

CJK_WEIGHT = 1.5

_CJK_RE = re.compile(r"[\u4e00-\u9fff\u3400-\u4dbf\uf900-\ufaff]")
_WORD_RUN_RE = re.compile(r"[0-9A-Za-z\u00c0-\u00d6\u00d8-\u00f6\u00f8-\u024f]+")

TokenEstimator = Callable[[str], int]

_enc = None


def estimate_tokens(text: Optional[str]) -> int:
    """
    Estimate the budget size of a text fragment.

    Example:
        >>> estimate_tokens("你好世界你好")
        9
        >>> estimate_tokens("hello world")
        2
    """
    if not text:
        return 0

    cjk_count = len(_CJK_RE.findall(text))
    run_count = len(_WORD_RUN_RE.findall(text))

    return math.ceil(cjk_count * CJK_WEIGHT + run_count)


def _get_encoding():
    """Lazy load the tiktoken encoding (fetched on first use)."""
    global _enc
    if _enc is None:
        import tiktoken

        _enc = tiktoken.get_encoding("cl100k_base")
        logger.info("Loaded tiktoken encoding cl100k_base")
    return _enc


def count_tokens_tiktoken(text: Optional[str]) -> int:
    """Count tokens exactly with the cl100k_base encoding."""
    if not text:
        return 0
    return len(_get_encoding().encode(text))


def get_token_estimator(strategy: str = "heuristic") -> TokenEstimator:
    """
    Resolve an estimator by name.

    Args:
        strategy: "heuristic" (default) or "tiktoken"

    Returns:
        Callable mapping text to a non-negative size
    """
    strategies = {
        "heuristic": estimate_tokens,
        "tiktoken": count_tokens_tiktoken,
    }
    key = (strategy or "heuristic").strip().lower()
    if key not in strategies:
        raise ValueError(f"Unknown token estimator: {strategy}")
    return strategies[key]
