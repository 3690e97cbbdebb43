"""Field lines of SQLAlchemy mapped classes."""
from __future__ import annotations

import logging
import types
import typing
from typing import Any, Dict, List, Mapping, Optional

from sqlalchemy import Integer, inspect as sa_inspect
from sqlalchemy.ext.hybrid import HybridExtensionType
from sqlalchemy.types import TypeDecorator, TypeEngine

from ...config import FieldConfig
from ...constants import DEFAULT_RESOLVER
from ...core.filters import generate_default_query_filter_type_defs, populate_args_def_for_default_resolver
from ...errors import GeneConfigError
from ..base import PopulateOptions, PopulateResult
from .constants import OPTIONAL_SCALARS, PYTHON_TYPE_TO_GRAPHQL, SQLALCHEMY_TYPE_TO_GRAPHQL

logger = logging.getLogger(__name__)

__all__ = ['populate_type_defs', 'get_graphql_type_of_column_type']

_UNION_ORIGINS = (typing.Union, getattr(types, 'UnionType', typing.Union))


def get_graphql_type_of_column_type(column_type: TypeEngine, type_map: Mapping[str, str]) -> Optional[str]:
    """GraphQL type of a SQLAlchemy column type, ``None`` when unmapped.

    The type's MRO is walked so subclasses (``Unicode`` -> ``String``) and
    custom types resolve through their closest known ancestor; a
    ``TypeDecorator`` falls back to its ``impl``.
    """
    for cls in type(column_type).__mro__:
        if cls.__name__ in type_map:
            return type_map[cls.__name__] or None
    if isinstance(column_type, TypeDecorator):
        return get_graphql_type_of_column_type(column_type.impl_instance, type_map)
    return None


def _with_scalar_fallback(graphql_type: str, options: PopulateOptions) -> str:
    if graphql_type in OPTIONAL_SCALARS and not options.schema_options.has_type(graphql_type):
        return 'String'
    return graphql_type


def _get_hybrid_type(options: PopulateOptions, key: str, fget: Any) -> str:
    try:
        hints = typing.get_type_hints(fget)
    except (NameError, TypeError):
        hints = dict(getattr(fget, '__annotations__', {}))
    annotation = hints.get('return')
    if annotation is None:
        raise GeneConfigError(
            f'Virtual field "{key}" of "{options.type_name}" must declare a return type. '
            f'Example: @hybrid_property def {key}(self) -> str: ...'
        )

    nullable = False
    args = typing.get_args(annotation)
    if typing.get_origin(annotation) in _UNION_ORIGINS and type(None) in args:
        nullable = True
        annotation = next(a for a in args if a is not type(None))

    graphql_type = PYTHON_TYPE_TO_GRAPHQL.get(annotation)
    if graphql_type is None:
        raise GeneConfigError(
            f'Return type {annotation!r} of virtual field "{options.type_name}.{key}" has no GraphQL equivalent.'
        )
    graphql_type = _with_scalar_fallback(graphql_type, options)
    return graphql_type if nullable else f'{graphql_type}!'


def populate_type_defs(options: PopulateOptions, data_type_map: Optional[Mapping[str, str]] = None) -> PopulateResult:
    type_def_lines = options.type_def_lines
    type_name = options.type_name
    type_def_lines.ensure_type(type_name)

    mapper = sa_inspect(options.model)
    type_map: Dict[str, str] = {
        **SQLALCHEMY_TYPE_TO_GRAPHQL,
        **options.schema_options.data_type_map,
        **(data_type_map or {}),
    }

    for prop in mapper.column_attrs:
        key = prop.key
        if not options.is_field_included(key):
            continue
        column = prop.columns[0]

        # Identifier of an association, exposed through the association field
        if column.foreign_keys and isinstance(column.type, Integer):
            continue

        graphql_type = get_graphql_type_of_column_type(column.type, type_map)
        if not graphql_type:
            logger.warning('Column %s.%s of type %r has no GraphQL mapping, skipped', type_name, key, column.type)
            continue
        graphql_type = _with_scalar_fallback(graphql_type, options)

        if graphql_type == 'String' and column.primary_key:
            graphql_type = 'ID'
        if column.nullable is False:
            graphql_type += '!'
        type_def_lines.ensure_field(type_name, key).type_def = graphql_type

    for key, descriptor in mapper.all_orm_descriptors.items():
        if getattr(descriptor, 'extension_type', None) is not HybridExtensionType.HYBRID_PROPERTY:
            continue
        if not options.is_field_included(key):
            continue
        type_def_lines.ensure_field(type_name, key).type_def = _get_hybrid_type(options, key, descriptor.fget)

    return PopulateResult(after_type_def_hooks=_populate_association_fields(options))


def _find_type_name(options: PopulateOptions, model: Any) -> Optional[str]:
    for type_name, declared in options.schema_options.types.items():
        if declared is model:
            return type_name
    return None


def _populate_association_fields(options: PopulateOptions) -> List[Any]:
    type_def_lines = options.type_def_lines
    type_name = options.type_name
    hooks = []

    for relationship in sa_inspect(options.model).relationships:
        key = relationship.key
        if not options.is_field_included(key):
            continue
        target = relationship.mapper.class_
        target_name = _find_type_name(options, target)
        if target_name is None:
            logger.debug('Association %s.%s targets an unexposed model, skipped', type_name, key)
            continue
        line = type_def_lines.ensure_field(type_name, key)

        if not relationship.uselist:
            line.type_def = target_name
            continue

        line.type_def = f'[{target_name}!]'
        populate_args_def_for_default_resolver(line, type_name, key, True)
        options.field_configs[key] = FieldConfig(
            return_type=line.type_def,
            resolver=DEFAULT_RESOLVER,
            model=target,
            association=key,
        )
        # The target type may not be populated yet
        hooks.append(
            lambda key=key, target_name=target_name: generate_default_query_filter_type_defs(
                type_def_lines, type_name, key, target_name, True
            )
        )
    return hooks
