"""Inbound request normalization into a single upstream prompt."""
from ..core.errors import InvalidRequestError

ASSISTANT_MARKER = "\nassistant:"


def _flatten_message_content(content) -> str:
    if content is None:
        return ""
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        parts = []
        for item in content:
            if isinstance(item, str):
                parts.append(item)
            elif isinstance(item, dict) and "text" in item:
                text = item.get("text")
                if isinstance(text, dict):
                    parts.append(str(text.get("value") or text.get("text") or ""))
                else:
                    parts.append(str(text or ""))
        return "".join(parts)
    if isinstance(content, dict) and "text" in content:
        return str(content.get("text") or "")
    return str(content)


def messages_to_prompt(messages) -> str:
    """Render chat messages as `role: content` lines ending in an assistant cue.

    Anything other than a list renders as an empty string.
    """
    if not isinstance(messages, list):
        return ""
    lines = []
    for message in messages:
        if not isinstance(message, dict):
            continue
        role = message.get("role")
        role = "" if role is None else str(role)
        lines.append(f"{role}: {_flatten_message_content(message.get('content'))}")
    return "\n".join(lines) + ASSISTANT_MARKER


def normalize_prompt(body) -> str:
    """Return the upstream prompt for a decoded request body."""
    if not isinstance(body, dict):
        raise InvalidRequestError("No prompt or messages provided")
    messages = body.get("messages")
    if messages is not None:
        return messages_to_prompt(messages)
    prompt = body.get("prompt")
    if prompt is None:
        raise InvalidRequestError("No prompt or messages provided")
    if isinstance(prompt, str):
        return prompt
    if isinstance(prompt, list) and all(isinstance(item, str) for item in prompt):
        return "\n".join(prompt)
    raise InvalidRequestError("Invalid prompt")
