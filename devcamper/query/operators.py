"""
Comparison operator rewriting.

Query strings spell comparisons as bare words (``tuition[gte]=5``); the
store expects its native ``$``-prefixed operators (``{"$gte": 5}``).
"""

import json
import re
from typing import Any, Dict, Iterable

OPERATOR_PREFIX = "$"

# Operators whose operand is a list; a scalar operand is split on commas.
LIST_OPERATORS = {"$in", "$nin"}


def rewrite_operators(filter_draft: Dict[str, Any], operators: Iterable[str]) -> Dict[str, Any]:
    """
    Rewrite operator tokens by walking the filter tree.

    Only mapping keys below the top level are candidates: top-level keys
    are field names and string values are never touched.

    Args:
        filter_draft: Filter parameters with reserved keys removed
        operators: Bare operator tokens to rewrite (``gt``, ``gte``, ...)

    Returns:
        New filter with matching keys prefixed by ``$``
    """
    tokens = frozenset(operators)
    return {field: _rewrite_value(value, tokens) for field, value in filter_draft.items()}


def _rewrite_value(value: Any, tokens: frozenset) -> Any:
    if isinstance(value, dict):
        return {
            (OPERATOR_PREFIX + key if key in tokens else key): _rewrite_value(item, tokens)
            for key, item in value.items()
        }
    if isinstance(value, list):
        return [_rewrite_value(item, tokens) for item in value]
    return value


def rewrite_operators_text(filter_draft: Dict[str, Any], operators: Iterable[str]) -> Dict[str, Any]:
    """
    Rewrite operator tokens with a regex over the serialized filter.

    Kept for callers relying on the lenient rewrite. Known limitation: any
    whole word matching a token is rewritten, including words inside string
    values (``?title=in`` filters on ``"$in"``) and field names.
    """
    alternatives = "|".join(re.escape(op) for op in sorted(set(operators), key=len, reverse=True))
    if not alternatives:
        return dict(filter_draft)
    pattern = re.compile(rf"\b({alternatives})\b")
    serialized = json.dumps(filter_draft)
    return json.loads(pattern.sub(lambda m: OPERATOR_PREFIX + m.group(1), serialized))


def is_operator(key: str) -> bool:
    return key.startswith(OPERATOR_PREFIX)
