"""Token estimates for the usage block."""
from __future__ import annotations

import math


def estimate_tokens(text: str | None) -> int:
    # ~4 chars per token, rounded up
    if not text:
        return 0
    return math.ceil(len(text) / 4)


def build_usage(prompt: str | None, completion: str | None) -> dict:
    prompt_tokens = estimate_tokens(prompt)
    completion_tokens = estimate_tokens(completion)
    return {
        "prompt_tokens": prompt_tokens,
        "completion_tokens": completion_tokens,
        "total_tokens": prompt_tokens + completion_tokens,
    }
