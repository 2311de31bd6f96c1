"""Validation tests for the ``ProviderParams`` DTO and ``ProviderConfig``."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from omnirelay.base.dto import ProviderParams
from omnirelay.base.provider_config import ProviderConfig


def test_defaults() -> None:
    params = ProviderParams(provider="openai")
    assert params.max_retries == 3  # nosec B101
    assert params.retry_delay == 1.0  # nosec B101
    assert params.headers == {} and params.options == {}  # nosec B101


@pytest.mark.parametrize("field,value", [("max_retries", -1), ("timeout_seconds", 0), ("retry_delay", -0.5)])
def test_rejects_out_of_range(field: str, value) -> None:
    with pytest.raises(ValidationError):
        ProviderParams(provider="openai", **{field: value})


def test_derive_copies_headers_without_touching_original() -> None:
    cfg = ProviderConfig(name="openai", headers={"A": "1"})
    clone = cfg.with_headers({"B": "2"})
    assert cfg.headers == {"A": "1"}  # nosec B101
    assert clone.headers == {"A": "1", "B": "2"}  # nosec B101
    assert clone.name == "openai"  # nosec B101


def test_repr_masks_api_key() -> None:
    assert "secret" not in repr(ProviderConfig(api_key="secret"))  # nosec B101
