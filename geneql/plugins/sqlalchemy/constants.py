from __future__ import annotations

import datetime
import decimal

from sqlalchemy import not_

DATE_SCALAR = 'Date'
DATE_TIME_SCALAR = 'DateTime'
JSON_SCALAR = 'JSON'

# Scalars falling back to String when the schema does not declare them
OPTIONAL_SCALARS = (DATE_SCALAR, DATE_TIME_SCALAR, JSON_SCALAR)

# SQLAlchemy type class name -> GraphQL type. Looked up along the type's MRO,
# an empty value skips the column.
SQLALCHEMY_TYPE_TO_GRAPHQL = {
    'Enum': 'String',
    'String': 'String',
    'Text': 'String',
    'Unicode': 'String',
    'UnicodeText': 'String',
    'Integer': 'Int',
    'SmallInteger': 'Int',
    'BigInteger': 'Int',
    'Float': 'Float',
    'Double': 'Float',
    'Numeric': 'Float',
    'Boolean': 'Boolean',
    'DateTime': DATE_TIME_SCALAR,
    'Date': DATE_SCALAR,
    'Time': 'String',
    'Interval': 'String',
    'JSON': JSON_SCALAR,
    'Uuid': 'ID',
    'UUID': 'ID',
    'LargeBinary': '',
    'ARRAY': '',
    'PickleType': '',
}

# Return annotations of hybrid properties
PYTHON_TYPE_TO_GRAPHQL = {
    bool: 'Boolean',
    int: 'Int',
    float: 'Float',
    decimal.Decimal: 'Float',
    str: 'String',
    datetime.datetime: DATE_TIME_SCALAR,
    datetime.date: DATE_SCALAR,
    dict: JSON_SCALAR,
}

GENE_TO_SQLALCHEMY_OPERATORS = {
    'eq': lambda column, value: column == value,
    'ne': lambda column, value: column != value,
    'in': lambda column, value: column.in_(value or []),
    'notIn': lambda column, value: column.not_in(value or []),
    'null': lambda column, value: column.is_(None) if value else column.is_not(None),
    'lt': lambda column, value: column < value,
    'lte': lambda column, value: column <= value,
    'gt': lambda column, value: column > value,
    'gte': lambda column, value: column >= value,
    'like': lambda column, value: column.like(value),
    'notLike': lambda column, value: not_(column.like(value)),
}

DEFAULT_SESSION_KEY = 'db_session'
SESSION_LOCK_KEY = '_gene_db_lock'
