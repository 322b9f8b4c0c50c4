"""Upstream body probing and OpenAI-compatible completion objects."""
import json
import time
import uuid

from .token_count import build_usage


def extract_completion(body, fields, fallback: str = "error") -> str:
    """Return the first non-empty string among `fields` in the upstream body.

    With `fallback="serialize"` an unmatched dict body is returned as JSON
    text; otherwise an unmatched body yields "".
    """
    if not isinstance(body, dict):
        return ""
    for field in fields:
        value = body.get(field)
        if isinstance(value, str) and value:
            return value
    if fallback == "serialize" and body:
        return json.dumps(body, ensure_ascii=False)
    return ""


def make_completion_id(prefix: str = "youcom-proxy") -> str:
    return f"{prefix}-{int(time.time() * 1000)}-{uuid.uuid4().hex[:8]}"


def wrap_as_completion(prompt: str, completion: str, model: str) -> dict:
    """Package a completion as a `chat.completion` object."""
    return {
        "id": make_completion_id(),
        "object": "chat.completion",
        "created": int(time.time()),
        "model": model,
        "choices": [
            {
                "index": 0,
                "message": {
                    "role": "assistant",
                    "content": completion,
                },
                "finish_reason": "stop",
            }
        ],
        "usage": build_usage(prompt, completion),
    }
