"""Unit tests for the shared adaptor helpers."""

from __future__ import annotations

import json

import pytest

from omnirelay.base.errors import DecodeError, RelayError, StreamDecodeError
from omnirelay.base.provider_config import ProviderConfig
from omnirelay.base.utils import (
    first_base,
    format_function_call,
    get_bool_extra,
    get_int_extra,
    get_string_list_extra,
    load_json_object,
    load_stream_chunk,
    marshal_with_override,
    merge_options,
    normalize_schema,
    numeric_option,
    raise_for_error_object,
    set_auth_header,
    split_system_prompt,
    with_path_suffix,
)


def test_split_system_prompt_groups_words() -> None:
    assert split_system_prompt("a b c d e f g", 3) == ["a b c", "d e f", "g"]  # nosec B101
    assert split_system_prompt("one", 3) == ["one"]  # nosec B101
    assert split_system_prompt("a b", 3) == ["a", "b"]  # nosec B101


def test_format_function_call_is_json() -> None:
    rendered = format_function_call("lookup", {"q": "x"})
    assert json.loads(rendered) == {"name": "lookup", "arguments": {"q": "x"}}  # nosec B101


def test_extra_accessors_tolerate_wrong_types() -> None:
    extra = {"flag": "yes", "n": 2.0, "b": True, "items": ["a", 1, "b"]}
    assert get_bool_extra(extra, "flag") == (False, False)  # nosec B101
    assert get_bool_extra(extra, "b") == (True, True)  # nosec B101
    assert get_int_extra(extra, "n") == 2  # nosec B101
    assert get_int_extra(extra, "b") is None  # nosec B101
    assert get_string_list_extra(extra, "items") == ["a", "b"]  # nosec B101
    assert numeric_option({"max_tokens": "10"}, "max_tokens", 5) == 5  # nosec B101


def test_merge_options_skips_keys() -> None:
    payload = {"model": "m"}
    merge_options(payload, {"model": "override", "system_prompt": "x", "top_p": 0.2}, ("system_prompt",))
    assert payload == {"model": "override", "top_p": 0.2}  # nosec B101


def test_marshal_with_override_falls_back_on_unserializable() -> None:
    assert json.loads(marshal_with_override({"a": 1}, {"b": 2})) == {"a": 1}  # nosec B101
    assert json.loads(marshal_with_override({"a": object()}, {"b": 2})) == {"b": 2}  # nosec B101


def test_json_loaders_raise_decode_errors() -> None:
    with pytest.raises(DecodeError):
        load_json_object(b"[1, 2]")
    with pytest.raises(StreamDecodeError):
        load_stream_chunk(b"{broken")
    assert load_stream_chunk(b"[1]") == {}  # nosec B101


def test_normalize_schema_accepts_strings() -> None:
    assert normalize_schema('{"type": "object"}') == {"type": "object"}  # nosec B101


def test_set_auth_header_prefers_configured_header() -> None:
    headers: dict = {}
    set_auth_header(headers, ProviderConfig(api_key="k", auth_header="api-key"))
    assert headers == {"api-key": "k"}  # nosec B101
    headers = {}
    set_auth_header(headers, ProviderConfig(api_key="k"))
    assert headers == {"Authorization": "Bearer k"}  # nosec B101
    headers = {}
    set_auth_header(headers, ProviderConfig())
    assert headers == {}  # nosec B101


def test_in_body_error_uses_http_like_code() -> None:
    cfg = ProviderConfig(name="vendor")
    with pytest.raises(RelayError) as ei:
        raise_for_error_object(cfg, {"error": {"message": "quota", "code": 429}})
    assert ei.value.code == 429 and ei.value.provider == "vendor"  # nosec B101
    with pytest.raises(RelayError) as ei:
        raise_for_error_object(cfg, {"error": {"message": "bad", "code": "invalid"}})
    assert ei.value.code == 400  # nosec B101
    raise_for_error_object(cfg, {"choices": []})


def test_url_helpers() -> None:
    assert first_base("", "http://a/") == "http://a"  # nosec B101
    known = ("/chat/completions", "/images/generations")
    assert with_path_suffix("http://h/v1", "/chat/completions", known) == "http://h/v1/chat/completions"  # nosec B101
    assert (
        with_path_suffix("http://h/v1/images/generations?x=1", "/chat/completions", known)
        == "http://h/v1/chat/completions?x=1"
    )  # nosec B101
    assert with_path_suffix("http://h/v1/chat/completions", "/chat/completions", known).endswith(  # nosec B101
        "/v1/chat/completions"
    )
