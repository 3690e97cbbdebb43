"""In-memory evaluation of where inputs.

Hand-written resolvers working on plain Python data can honor the same
``where`` argument shape as the default resolver.

Example:
    products = [p for p in PRODUCTS if matches_where(p, args.get('where'))]
"""
from __future__ import annotations

import datetime
import re
from typing import Any, Callable, Dict, Mapping, Optional, Sequence

from .constants import AND_OR_OPERATORS

__all__ = ['get_operator_map', 'matches_where']

Predicate = Callable[[Any, Any], bool]


def _is_eq(value: Any, operand: Any) -> bool:
    return value == operand


def _is_in(value: Any, operand: Optional[Sequence[Any]]) -> bool:
    return value is not None and value in (operand or ())


def _is_null(value: Any, operand: bool) -> bool:
    return (value is None) if operand else (value is not None)


def _like_pattern(operand: str) -> 're.Pattern[str]':
    # SQL wildcards: % any sequence, _ any character
    parts = (re.escape(c) if c not in '%_' else ('.*' if c == '%' else '.') for c in operand)
    return re.compile(''.join(parts), re.IGNORECASE | re.DOTALL)


def _is_like(value: Any, operand: str) -> bool:
    if not value:
        return False
    return _like_pattern(operand).fullmatch(str(value)) is not None


def _compare(check: Callable[[Any, Any], bool]) -> Predicate:
    def predicate(value: Any, operand: Any) -> bool:
        if value is None or operand is None:
            return False
        return check(value, operand)

    return predicate


_COMPARABLE = (int, float, datetime.date, datetime.datetime)


def get_operator_map(value: Any) -> Dict[str, Predicate]:
    """Operator name -> ``predicate(value, operand)`` valid for the kind of ``value``."""
    operator_map: Dict[str, Predicate] = {
        'eq': _is_eq,
        'ne': lambda v, o: not _is_eq(v, o),
        'in': _is_in,
        'notIn': lambda v, o: not _is_in(v, o),
        'null': _is_null,
    }
    if isinstance(value, str):
        operator_map['like'] = _is_like
        operator_map['notLike'] = lambda v, o: not _is_like(v, o)
    if isinstance(value, _COMPARABLE) and not isinstance(value, bool):
        operator_map['lt'] = _compare(lambda v, o: v < o)
        operator_map['lte'] = _compare(lambda v, o: v <= o)
        operator_map['gt'] = _compare(lambda v, o: v > o)
        operator_map['gte'] = _compare(lambda v, o: v >= o)
    return operator_map


def _get(entry: Any, key: str) -> Any:
    if isinstance(entry, Mapping):
        return entry.get(key)
    return getattr(entry, key, None)


def matches_where(entry: Any, where: Optional[Mapping[str, Any]]) -> bool:
    """Whether ``entry`` (mapping or object) satisfies a where input.

    Unknown operators for the value kind never match.
    """
    for attr, condition in (where or {}).items():
        if condition is None:
            continue
        if attr in AND_OR_OPERATORS:
            results = [matches_where(entry, nested) for nested in condition]
            if attr == 'and' and not all(results):
                return False
            if attr == 'or' and results and not any(results):
                return False
            continue

        value = _get(entry, attr)
        operator_map = get_operator_map(value)
        for operator, operand in condition.items():
            predicate = operator_map.get(operator)
            if predicate is None or not predicate(value, operand):
                return False
    return True
