"""Default resolver of SQLAlchemy models."""
from __future__ import annotations

import asyncio
import datetime
import logging
import re
from contextlib import asynccontextmanager
from typing import Any, Callable, List, Mapping, Optional

from graphql import GraphQLError
from sqlalchemy import and_, inspect as sa_inspect, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import RelationshipDirection, with_parent
from sqlalchemy.sql.sqltypes import Date, DateTime, Integer

from ...config import ResolverParams
from ...constants import AND_OR_OPERATORS, PAGE_ARG_DEFAULT, PER_PAGE_ARG_DEFAULT, QUERY_ORDER_VALUES
from ...core.signatures import is_list_type
from ...errors import GeneError
from ..base import DefaultResolverOptions
from .constants import DEFAULT_SESSION_KEY, GENE_TO_SQLALCHEMY_OPERATORS, SESSION_LOCK_KEY
from .lookahead import get_loader_options, get_query_include

logger = logging.getLogger(__name__)

__all__ = ['default_session_getter', 'build_where_clause', 'build_order_by', 'build_statement', 'default_resolver']

_ORDER_PATTERN = re.compile(rf"^(.+)_({'|'.join(QUERY_ORDER_VALUES)})$")


def default_session_getter(context: Any) -> Any:
    """Session of the running operation: ``context['db_session']`` or ``context.db_session``."""
    if isinstance(context, Mapping):
        session = context.get(DEFAULT_SESSION_KEY)
    else:
        session = getattr(context, DEFAULT_SESSION_KEY, None)
    if session is None:
        raise GeneError(f'No database session found in the GraphQL context (expected "{DEFAULT_SESSION_KEY}").')
    return session


def _coerce_where_value(column: Any, value: Any) -> Any:
    if isinstance(value, (list, tuple)):
        return [_coerce_where_value(column, v) for v in value]
    if not isinstance(value, str):
        return value
    column_type = getattr(column, 'type', None)
    try:
        if isinstance(column_type, DateTime):
            return datetime.datetime.fromisoformat(value.replace('Z', '+00:00'))
        if isinstance(column_type, Date):
            return datetime.date.fromisoformat(value)
        if isinstance(column_type, Integer):
            return int(value)
    except ValueError:
        return value
    return value


def _resolve_where_column(model: Any, attr: str) -> Any:
    mapper = sa_inspect(model)
    if attr in mapper.relationships:
        relationship = mapper.relationships[attr]
        if relationship.direction is not RelationshipDirection.MANYTOONE:
            raise GraphQLError(f'Cannot filter "{attr}": only many-to-one associations are filterable.')
        return next(iter(relationship.local_columns))
    column = getattr(model, attr, None)
    if column is None:
        raise GraphQLError(f'Unknown where field "{attr}".')
    return column


def build_where_clause(model: Any, where: Optional[Mapping[str, Any]]) -> Any:
    """Translate a where input into a SQLAlchemy boolean clause (``None`` when empty)."""
    clauses = []
    for attr, value in (where or {}).items():
        if value is None:
            continue
        if attr in AND_OR_OPERATORS:
            nested = [c for c in (build_where_clause(model, w) for w in value) if c is not None]
            if nested:
                clauses.append(and_(*nested) if attr == 'and' else or_(*nested))
            continue

        column = _resolve_where_column(model, attr)
        for operator, operand in value.items():
            translate = GENE_TO_SQLALCHEMY_OPERATORS.get(operator)
            if translate is None:
                continue
            clauses.append(translate(column, _coerce_where_value(column, operand)))

    if not clauses:
        return None
    return clauses[0] if len(clauses) == 1 else and_(*clauses)


def build_order_by(model: Any, order: Optional[List[str]]) -> List[Any]:
    order_by = []
    for value in order or []:
        match = _ORDER_PATTERN.match(value)
        column = getattr(model, match.group(1), None) if match else None
        if column is None:
            raise GraphQLError('Invalid order value.')
        order_by.append(column.asc() if match.group(2) == 'ASC' else column.desc())
    return order_by


def _coerce_identifier(model: Any, value: Any) -> Any:
    primary_key = sa_inspect(model).primary_key[0]
    try:
        python_type = primary_key.type.python_type
    except NotImplementedError:
        return value
    if isinstance(value, python_type):
        return value
    try:
        return python_type(value)
    except (TypeError, ValueError):
        return value


def build_statement(options: DefaultResolverOptions, params: ResolverParams) -> Any:
    """Select statement of a default resolved field."""
    model = options.model
    args = options.args
    is_list = is_list_type(options.config.return_type)

    stmt = select(model)
    if options.config.association and options.source is not None:
        stmt = stmt.where(with_parent(options.source, getattr(type(options.source), options.config.association)))

    if is_list:
        page = args.get('page') or PAGE_ARG_DEFAULT
        per_page = args.get('perPage') or PER_PAGE_ARG_DEFAULT
        stmt = stmt.offset(max(page - 1, 0) * per_page).limit(per_page)
    elif args.get('id') is not None:
        primary_key = sa_inspect(model).primary_key[0]
        stmt = stmt.where(primary_key == _coerce_identifier(model, args['id']))

    where_clause = build_where_clause(model, args.get('where'))
    if where_clause is not None:
        stmt = stmt.where(where_clause)

    order_by = build_order_by(model, args.get('order'))
    if order_by:
        stmt = stmt.order_by(*order_by)
    elif is_list:
        # Stable pages
        stmt = stmt.order_by(*sa_inspect(model).primary_key)

    loader_options = get_loader_options(model, get_query_include(options.info))
    if loader_options:
        stmt = stmt.options(*loader_options)

    for find_options in (getattr(options.gene_config, 'find_options', None), options.config.find_options):
        if find_options is not None:
            stmt = find_options(stmt, params)

    if not is_list:
        stmt = stmt.limit(1)
    return stmt


@asynccontextmanager
async def _session_lock(context: Any):
    if isinstance(context, dict):
        lock = context.setdefault(SESSION_LOCK_KEY, asyncio.Lock())
        async with lock:
            yield
    else:
        yield


async def default_resolver(
    options: DefaultResolverOptions,
    session_getter: Callable[[Any], Any] = default_session_getter,
) -> Any:
    context = options.info.context
    params = ResolverParams(source=options.source, args=options.args, context=context, info=options.info)
    stmt = build_statement(options, params)
    session = session_getter(context)

    logger.debug('Default resolver of %s with args %s', options.model_key, options.args)
    # One AsyncSession cannot run concurrent operations
    async with _session_lock(context):
        if isinstance(session, AsyncSession):
            result = await session.execute(stmt)
        else:
            result = session.execute(stmt)
        rows = result.scalars().all()

    if is_list_type(options.config.return_type):
        return list(rows)
    return rows[0] if rows else None
