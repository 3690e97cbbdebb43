"""``Date``, ``DateTime`` and ``JSON`` scalars.

Pass them through the ``resolvers`` option to declare the scalars in the
generated schema; model columns of those kinds are otherwise exposed as
``String``.

Example:
    generate_schema(types=..., resolvers={'DateTime': DateTime, 'Date': Date, 'JSON': JSON})
"""
from __future__ import annotations

import datetime
import json
from typing import Any, Dict, Optional

from graphql import GraphQLError, GraphQLScalarType, ValueNode, value_from_ast_untyped
from graphql.language import StringValueNode

__all__ = ['Date', 'DateTime', 'JSON', 'SCALARS']


def _serialize_datetime(value: Any) -> str:
    if isinstance(value, datetime.datetime):
        return value.isoformat()
    if isinstance(value, str):
        return _parse_datetime(value).isoformat()
    raise GraphQLError(f'DateTime cannot represent value: {value!r}')


def _parse_datetime(value: Any) -> datetime.datetime:
    if isinstance(value, datetime.datetime):
        return value
    if not isinstance(value, str):
        raise GraphQLError(f'DateTime cannot represent non-string value: {value!r}')
    try:
        return datetime.datetime.fromisoformat(value.replace('Z', '+00:00'))
    except ValueError as e:
        raise GraphQLError(f'DateTime cannot represent invalid value: {value!r}') from e


def _serialize_date(value: Any) -> str:
    if isinstance(value, datetime.datetime):
        return value.date().isoformat()
    if isinstance(value, datetime.date):
        return value.isoformat()
    if isinstance(value, str):
        return _parse_date(value).isoformat()
    raise GraphQLError(f'Date cannot represent value: {value!r}')


def _parse_date(value: Any) -> datetime.date:
    if isinstance(value, datetime.date) and not isinstance(value, datetime.datetime):
        return value
    if not isinstance(value, str):
        raise GraphQLError(f'Date cannot represent non-string value: {value!r}')
    try:
        return datetime.date.fromisoformat(value)
    except ValueError as e:
        raise GraphQLError(f'Date cannot represent invalid value: {value!r}') from e


def _parse_string_literal(parse_value):
    def parse_literal(value_node: ValueNode, _variables: Optional[Dict[str, Any]] = None) -> Any:
        if not isinstance(value_node, StringValueNode):
            raise GraphQLError('Expected a string literal.', value_node)
        return parse_value(value_node.value)

    return parse_literal


def _serialize_json(value: Any) -> Any:
    if isinstance(value, str):
        try:
            return json.loads(value)
        except ValueError:
            return value
    return value


def _parse_json_literal(value_node: ValueNode, variables: Optional[Dict[str, Any]] = None) -> Any:
    return value_from_ast_untyped(value_node, variables)


DateTime = GraphQLScalarType(
    name='DateTime',
    description='ISO 8601 date and time.',
    serialize=_serialize_datetime,
    parse_value=_parse_datetime,
    parse_literal=_parse_string_literal(_parse_datetime),
)

Date = GraphQLScalarType(
    name='Date',
    description='ISO 8601 calendar date.',
    serialize=_serialize_date,
    parse_value=_parse_date,
    parse_literal=_parse_string_literal(_parse_date),
)

JSON = GraphQLScalarType(
    name='JSON',
    description='Arbitrary JSON value.',
    serialize=_serialize_json,
    parse_value=lambda value: value,
    parse_literal=_parse_json_literal,
)

SCALARS = {'Date': Date, 'DateTime': DateTime, 'JSON': JSON}
