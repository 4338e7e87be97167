"""
Query-string parameter handling.

Parses raw query-string pairs into nested parameter maps, separates the
reserved translator keys from the filter draft and derives the page window.
"""

import re
from typing import Any, Dict, Iterable, List, Optional, Tuple

from devcamper.core.models import PageWindow, TranslatorConfig

# Bracket segments beyond this depth stay part of the last key, literally.
MAX_DEPTH = 5

# Largest accepted page or limit; keeps skip = (page - 1) * limit within a
# signed 64-bit integer.
MAX_PAGE_VALUE = 2**31 - 1

_KEY_PATTERN = re.compile(r"^([^\[\]]+)((?:\[[^\[\]]*\])*)$")
_SEGMENT_PATTERN = re.compile(r"\[([^\[\]]*)\]")


def parse_query_params(items: Iterable[Tuple[str, str]]) -> Dict[str, Any]:
    """
    Build a nested parameter map from query-string pairs.

    ``tuition[gte]=5`` becomes ``{"tuition": {"gte": "5"}}``; repeated keys
    and ``key[]`` collect their values into a list.

    Args:
        items: Decoded ``(name, value)`` pairs in query-string order

    Returns:
        Nested mapping of parameter names to strings, lists or mappings
    """
    params: Dict[str, Any] = {}
    for name, value in items:
        path = _split_key(name)
        _assign(params, path, value)
    return params


def _split_key(name: str) -> List[str]:
    match = _KEY_PATTERN.match(name)
    if not match:
        return [name]

    head, brackets = match.groups()
    segments = _SEGMENT_PATTERN.findall(brackets)
    if len(segments) > MAX_DEPTH:
        overflow = "".join(f"[{s}]" for s in segments[MAX_DEPTH:])
        segments = segments[:MAX_DEPTH - 1] + [segments[MAX_DEPTH - 1] + overflow]
    return [head] + segments


def _assign(target: Dict[str, Any], path: List[str], value: str) -> None:
    node = target
    for i, key in enumerate(path[:-1]):
        if path[i + 1] == "":
            # key[] -> list under key
            existing = node.get(key)
            if isinstance(existing, list):
                existing.append(value)
            elif existing is None:
                node[key] = [value]
            else:
                node[key] = [existing, value]
            return
        child = node.get(key)
        if not isinstance(child, dict):
            child = {}
            node[key] = child
        node = child

    leaf = path[-1]
    existing = node.get(leaf)
    if existing is None:
        node[leaf] = value
    elif isinstance(existing, list):
        existing.append(value)
    else:
        node[leaf] = [existing, value]


def split_reserved(
    params: Dict[str, Any], reserved_fields: Iterable[str]
) -> Tuple[Dict[str, Any], Dict[str, Optional[str]]]:
    """
    Separate reserved translator keys from filter parameters.

    Args:
        params: Parsed parameter map, left unmodified
        reserved_fields: Names with translator-only meaning

    Returns:
        Tuple of (filter draft, reserved values). Reserved values are
        strings; repeated values are joined with commas and nested values
        are dropped.
    """
    draft = dict(params)
    reserved: Dict[str, Optional[str]] = {}
    for name in reserved_fields:
        raw = draft.pop(name, None)
        if isinstance(raw, list):
            raw = ",".join(str(v) for v in raw if not isinstance(v, (dict, list)))
        elif raw is not None and not isinstance(raw, str):
            raw = None
        reserved[name] = raw
    return draft, reserved


def parse_field_list(raw: Optional[str]) -> List[str]:
    """Split a comma-separated field list, dropping blanks."""
    if not raw:
        return []
    return [field.strip() for field in raw.split(",") if field.strip()]


def parse_page_window(
    page: Optional[str], limit: Optional[str], config: TranslatorConfig
) -> PageWindow:
    """
    Derive the page window, falling back to defaults on bad input.

    Non-numeric, non-positive and out-of-range values use the defaults;
    ``config.max_limit`` caps the limit when set.
    """
    page_number = _positive_int(page, config.default_page)
    page_size = _positive_int(limit, config.default_limit)
    if config.max_limit is not None:
        page_size = min(page_size, config.max_limit)
    return PageWindow(page=page_number, limit=page_size)


def _positive_int(raw: Optional[str], default: int) -> int:
    if raw is None:
        return default
    text = str(raw).strip()
    if not (text.isascii() and text.isdigit()) or len(text) > len(str(MAX_PAGE_VALUE)):
        return default
    value = int(text)
    return value if 0 < value <= MAX_PAGE_VALUE else default
