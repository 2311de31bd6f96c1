"""Header and in-body error helpers shared by adaptors."""
from __future__ import annotations

from typing import Any, Dict, Mapping

from ..constants import CONTENT_TYPE_JSON
from ..errors import RelayError
from ..provider_config import ProviderConfig

# Status reported when a vendor signals an error inside a successful HTTP response.
IN_BODY_ERROR_STATUS = 400


def set_auth_header(
    headers: Dict[str, str],
    config: ProviderConfig,
    *,
    default_header: str = "Authorization",
    default_prefix: str = "Bearer ",
) -> None:
    """Attach the credential.

    A configured ``auth_header`` wins (with ``auth_prefix``, even for an empty
    key). Otherwise the vendor default header is set when a key is present.
    """
    if config.auth_header:
        headers[config.auth_header] = f"{config.auth_prefix}{config.api_key}"
    elif config.api_key:
        headers[default_header] = f"{default_prefix}{config.api_key}"


def set_json_content(headers: Dict[str, str]) -> None:
    headers["Content-Type"] = CONTENT_TYPE_JSON


def raise_for_error_object(config: ProviderConfig, data: Mapping[str, Any]) -> None:
    """Raise ``RelayError`` when ``data`` carries an ``error`` object or string.

    The error's own numeric ``code`` / ``status`` is used as the status when it
    looks like an HTTP status; otherwise ``IN_BODY_ERROR_STATUS``.
    """
    error = data.get("error")
    if not error:
        return
    if isinstance(error, str):
        raise RelayError(code=IN_BODY_ERROR_STATUS, message=error, provider=config.name)
    if not isinstance(error, Mapping):
        return
    message = error.get("message") or error.get("type") or str(dict(error))
    code = IN_BODY_ERROR_STATUS
    for key in ("code", "status"):
        value = error.get(key)
        if isinstance(value, int) and not isinstance(value, bool) and 400 <= value < 600:
            code = value
            break
    raise RelayError(code=code, message=str(message), provider=config.name)


__all__ = ["IN_BODY_ERROR_STATUS", "set_auth_header", "set_json_content", "raise_for_error_object"]
