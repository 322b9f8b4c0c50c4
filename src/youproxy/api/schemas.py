"""Pydantic request schema for the proxy endpoint."""
from typing import Any, Optional

from pydantic import BaseModel


class InboundRequest(BaseModel):
    # messages/prompt stay loosely typed; normalize_prompt applies the rules.
    messages: Optional[Any] = None
    prompt: Optional[Any] = None
    model: Optional[str] = None

    class Config:
        # Allow OpenAI fields we do not forward (temperature, stream, ...).
        extra = "allow"
