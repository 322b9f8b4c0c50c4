import json

from youproxy.core.settings import DEFAULT_COMPLETION_FIELDS
from youproxy.utils.completion import extract_completion, wrap_as_completion
from youproxy.utils.token_count import build_usage, estimate_tokens


def test_extract_follows_field_priority():
    body = {"completion": "d", "result": "c", "answer": "b", "message": "a"}

    assert extract_completion(body, DEFAULT_COMPLETION_FIELDS) == "a"


def test_extract_skips_empty_and_non_string_values():
    body = {"message": "", "answer": None, "result": {"text": "nested"}, "completion": "final"}

    assert extract_completion(body, DEFAULT_COMPLETION_FIELDS) == "final"


def test_extract_returns_empty_when_nothing_matches():
    assert extract_completion({"other": "x"}, DEFAULT_COMPLETION_FIELDS) == ""
    assert extract_completion({}, DEFAULT_COMPLETION_FIELDS) == ""
    assert extract_completion(["result"], DEFAULT_COMPLETION_FIELDS) == ""


def test_extract_uses_custom_field_list():
    body = {"message": "ignored", "output": "used"}

    assert extract_completion(body, ("output",)) == "used"


def test_serialize_fallback_returns_whole_body():
    body = {"hits": [1, 2]}

    assert json.loads(extract_completion(body, DEFAULT_COMPLETION_FIELDS, "serialize")) == body


def test_estimate_tokens_rounds_up():
    assert estimate_tokens("") == 0
    assert estimate_tokens(None) == 0
    assert estimate_tokens("Hello") == 2
    assert estimate_tokens("Hi there") == 2
    assert estimate_tokens("abcd") == 1
    assert estimate_tokens("abcde") == 2


def test_usage_total_is_sum_of_parts():
    usage = build_usage("a" * 9, "b" * 3)

    assert usage == {"prompt_tokens": 3, "completion_tokens": 1, "total_tokens": 4}


def test_wrap_as_completion_shape():
    result = wrap_as_completion("Hello", "Hi there!", "my-model")

    assert result["object"] == "chat.completion"
    assert result["model"] == "my-model"
    assert isinstance(result["created"], int)
    assert result["id"].startswith("youcom-proxy-")
    assert result["choices"] == [
        {
            "index": 0,
            "message": {"role": "assistant", "content": "Hi there!"},
            "finish_reason": "stop",
        }
    ]
    assert result["usage"] == {"prompt_tokens": 2, "completion_tokens": 3, "total_tokens": 5}


def test_completion_ids_are_unique():
    ids = {wrap_as_completion("p", "c", "m")["id"] for _ in range(50)}

    assert len(ids) == 50
