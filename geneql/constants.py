from __future__ import annotations

from enum import Enum


class BasicGraphqlType(str, Enum):
    ID = 'ID'
    String = 'String'
    Int = 'Int'
    Float = 'Float'
    Boolean = 'Boolean'
    DateTime = 'DateTime'
    Date = 'Date'
    JSON = 'JSON'


BASIC_GRAPHQL_TYPE_VALUES = frozenset(t.value for t in BasicGraphqlType)

PAGE_ARG_DEFAULT = 1
PER_PAGE_ARG_DEFAULT = 10

# Argument keys receiving a printed default value
ARG_DEFAULTS = {
    'page': PAGE_ARG_DEFAULT,
    'perPage': PER_PAGE_ARG_DEFAULT,
}


class QueryOrder(str, Enum):
    ASC = 'ASC'
    DESC = 'DESC'


QUERY_ORDER_VALUES = tuple(o.value for o in QueryOrder)

AND_OR_OPERATORS = ('and', 'or')

DEFAULT_RESOLVER = 'default'

QUERY_TYPE = 'Query'
MUTATION_TYPE = 'Mutation'

# Audit fields excluded from model types unless `include_timestamps` says otherwise
TIMESTAMP_FIELDS = ('created_at', 'updated_at')

GRAPHQL_VAR_TYPES = ('type', 'enum', 'interface', 'input', 'scalar', 'union')

__all__ = [
    'BasicGraphqlType', 'BASIC_GRAPHQL_TYPE_VALUES', 'PAGE_ARG_DEFAULT', 'PER_PAGE_ARG_DEFAULT',
    'ARG_DEFAULTS', 'QueryOrder', 'QUERY_ORDER_VALUES', 'AND_OR_OPERATORS', 'DEFAULT_RESOLVER',
    'QUERY_TYPE', 'MUTATION_TYPE', 'TIMESTAMP_FIELDS', 'GRAPHQL_VAR_TYPES',
]
