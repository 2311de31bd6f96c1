"""URL helpers shared by adaptors."""
from __future__ import annotations

from typing import Iterable
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit


def first_base(*candidates: str) -> str:
    """Return the first non-empty candidate with trailing slashes removed."""
    for candidate in candidates:
        base = (candidate or "").rstrip("/")
        if base:
            return base
    return ""


def _swap_suffix(path: str, suffix: str, known: Iterable[str]) -> str:
    path = path.rstrip("/")
    if path.endswith(suffix):
        return path
    for other in known:
        if path.endswith(other):
            path = path[: -len(other)]
            break
    return path.rstrip("/") + suffix


def with_path_suffix(base: str, suffix: str, known_suffixes: Iterable[str]) -> str:
    """Point ``base`` at ``suffix`` idempotently.

    A base whose path already ends in ``suffix`` is returned unchanged; a path
    ending in one of ``known_suffixes`` has it replaced; anything else gets
    ``suffix`` appended. Query strings and fragments are preserved. Values that
    are not absolute URLs are handled as plain strings.
    """
    known = tuple(known_suffixes)
    parts = urlsplit(base)
    if not parts.scheme or not parts.netloc:
        return _swap_suffix(base, suffix, known)
    return urlunsplit(parts._replace(path=_swap_suffix(parts.path, suffix, known)))


def with_default_path(base: str, path: str) -> str:
    """Append ``path`` to a bare host; URLs that carry a path are kept as is."""
    parts = urlsplit(base)
    if not parts.scheme or not parts.netloc or parts.path.strip("/"):
        return base
    return urlunsplit(parts._replace(path=path))


def with_query(base: str, **params: str) -> str:
    """Set ``params`` on the query of ``base``, replacing existing values."""
    parts = urlsplit(base)
    query = [(k, v) for k, v in parse_qsl(parts.query, keep_blank_values=True) if k not in params]
    query.extend(params.items())
    return urlunsplit(parts._replace(query=urlencode(query)))


__all__ = ["first_base", "with_path_suffix", "with_default_path", "with_query"]
