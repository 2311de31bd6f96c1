"""Shared helpers for adaptors (options, URLs, JSON, text)."""

from .json_utils import as_list, as_mapping, load_json, load_json_object, load_stream_chunk, normalize_schema
from .options import (
    copy_options,
    dumps,
    extract_payload_map,
    filter_options,
    get_bool_extra,
    get_int_extra,
    get_string_extra,
    get_string_list_extra,
    marshal_with_override,
    merge_options,
    numeric_option,
)
from .headers import IN_BODY_ERROR_STATUS, raise_for_error_object, set_auth_header, set_json_content
from .text import format_function_call, split_system_prompt
from .urls import first_base, with_default_path, with_path_suffix, with_query

__all__ = [
    "as_list",
    "as_mapping",
    "load_json",
    "load_json_object",
    "load_stream_chunk",
    "normalize_schema",
    "copy_options",
    "dumps",
    "extract_payload_map",
    "filter_options",
    "get_bool_extra",
    "get_int_extra",
    "get_string_extra",
    "get_string_list_extra",
    "marshal_with_override",
    "merge_options",
    "numeric_option",
    "IN_BODY_ERROR_STATUS",
    "raise_for_error_object",
    "set_auth_header",
    "set_json_content",
    "format_function_call",
    "split_system_prompt",
    "first_base",
    "with_path_suffix",
    "with_default_path",
    "with_query",
]
