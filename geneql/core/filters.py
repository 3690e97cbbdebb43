"""Default resolver policy: arguments, where-filter inputs and order enums.

Fields using the default resolver receive pagination/identifier/where/order
arguments. Their where input and order enum are derived from the shape of the
returned type, which is why :func:`generate_default_query_filter_type_defs`
runs once every model has populated the registry.
"""
from __future__ import annotations

import logging
from typing import Dict, Optional

from ..constants import AND_OR_OPERATORS, BASIC_GRAPHQL_TYPE_VALUES, QUERY_ORDER_VALUES
from ..errors import GeneConfigError
from .lines import FieldLine, TypeDefLines
from .naming import get_operator_input_name, get_query_order_enum_name, get_where_options_input_name
from .signatures import get_return_type_name, is_list_type

logger = logging.getLogger(__name__)

__all__ = [
    'VALID_RETURN_TYPES_FOR_WHERE',
    'populate_args_def_for_default_resolver',
    'generate_operator_input_lines',
    'generate_default_query_filter_type_defs',
]

VALID_RETURN_TYPES_FOR_WHERE = ('String', 'Int', 'Float', 'Boolean', 'Date', 'DateTime')

_COMPARABLE_TYPES = ('Int', 'Float', 'Date', 'DateTime')


def populate_args_def_for_default_resolver(
    field_line: FieldLine,
    type_name: str,
    field_key: str,
    is_list: bool,
) -> None:
    where_input_name = get_where_options_input_name(type_name, field_key)
    order_enum_name = get_query_order_enum_name(type_name, field_key)

    if is_list:
        args_def = {
            'page': 'Int',
            'perPage': 'Int',
            'locale': 'String',
            'where': where_input_name,
            'order': f'[{order_enum_name}!]',
        }
    else:
        args_def = {
            'id': 'String',
            'locale': 'String',
            'where': where_input_name,
        }
    for arg_key, signature in args_def.items():
        field_line.add_argument(arg_key, signature)


def generate_operator_input_lines(graphql_type: str) -> Dict[str, FieldLine]:
    field_defs = {
        'eq': graphql_type,
        'ne': graphql_type,
        'in': f'[{graphql_type}]',
        'notIn': f'[{graphql_type}]',
        'null': 'Boolean',
    }
    if graphql_type == 'String':
        field_defs.update(like=graphql_type, notLike=graphql_type)
    elif graphql_type in _COMPARABLE_TYPES:
        field_defs.update(lt=graphql_type, lte=graphql_type, gt=graphql_type, gte=graphql_type)
    return {key: FieldLine(type_def=type_def) for key, type_def in field_defs.items()}


def _find_valid_input_type(type_def: str) -> Optional[str]:
    if not type_def:
        return None
    name = get_return_type_name(type_def)
    return name if name in VALID_RETURN_TYPES_FOR_WHERE else None


def _is_sortable(type_def_lines: TypeDefLines, type_def: str) -> bool:
    if not type_def or is_list_type(type_def):
        return False
    related = type_def_lines.get(get_return_type_name(type_def))
    return related is None or related.var_type in ('enum', 'scalar')


def _ensure_operator_input(type_def_lines: TypeDefLines, graphql_type: str) -> str:
    operator_input_name = get_operator_input_name(graphql_type)
    if operator_input_name not in type_def_lines:
        type_def_lines.create('input', operator_input_name).lines = generate_operator_input_lines(graphql_type)
    return operator_input_name


def _drop_empty_order_enum(type_def_lines: TypeDefLines, type_name: str, field_key: str, order_enum_name: str) -> None:
    # An enum without values cannot be printed, so the field loses its order argument
    if type_def_lines.is_populated(order_enum_name):
        return
    type_def_lines.pop(order_enum_name, None)
    owner = type_def_lines.get(type_name)
    line = owner.lines.get(field_key) if owner is not None else None
    if line is not None:
        line.args_def.pop('order', None)
    logger.debug('No sortable field for %s.%s, order argument dropped', type_name, field_key)


def generate_default_query_filter_type_defs(
    type_def_lines: TypeDefLines,
    type_name: str,
    field_key: str,
    field_type: str,
    is_list: bool,
) -> None:
    """Create the where input and order enum of ``type_name.field_key``.

    The ``order`` argument is removed from the field when the returned type
    has nothing to sort on.

    Args:
        type_def_lines: Registry to populate.
        type_name: Type owning the field.
        field_key: Field using the default resolver.
        field_type: Named type returned by the field (no list/non-null markers).
        is_list: Whether the field returns a list (order enum only then).

    Raises:
        GeneConfigError: ``field_type`` is neither a basic scalar nor a type
            present in the registry.
    """
    where_input_name = get_where_options_input_name(type_name, field_key)
    order_enum_name = get_query_order_enum_name(type_name, field_key)

    has_where_input = type_def_lines.is_populated(where_input_name)
    has_order_enum = type_def_lines.is_populated(order_enum_name)

    # First writer wins: several aliases may request the same derived names
    if has_where_input and has_order_enum:
        return

    if not has_where_input:
        where_def = type_def_lines.create('input', where_input_name)
        for operator in AND_OR_OPERATORS:
            where_def.lines[operator] = FieldLine(type_def=f'[{where_input_name}!]')
    if is_list and not has_order_enum:
        type_def_lines.create('enum', order_enum_name)

    if field_type not in BASIC_GRAPHQL_TYPE_VALUES:
        if field_type not in type_def_lines:
            raise GeneConfigError(f'Cannot find "{field_type}" definition used as "returnType".')
        _fill_filters(type_def_lines, where_input_name, order_enum_name, field_type, is_list)

    if is_list:
        _drop_empty_order_enum(type_def_lines, type_name, field_key, order_enum_name)


def _fill_filters(
    type_def_lines: TypeDefLines,
    where_input_name: str,
    order_enum_name: str,
    field_type: str,
    is_list: bool,
) -> None:
    logger.debug('Generating filters %s / %s from %s', where_input_name, order_enum_name, field_type)

    where_lines = type_def_lines[where_input_name].lines
    for return_field_key, return_field in list(type_def_lines[field_type].lines.items()):
        where_type_def = ''
        valid_input_type = _find_valid_input_type(return_field.type_def)

        if valid_input_type:
            where_type_def = _ensure_operator_input(type_def_lines, valid_input_type)
        elif return_field.type_def.rstrip('!') in type_def_lines:
            # Association: filter on the identifier of the related type
            related = type_def_lines[return_field.type_def.rstrip('!')]
            id_line = related.lines.get('id')
            id_input_type = _find_valid_input_type(id_line.type_def) if id_line else None
            if id_input_type:
                where_type_def = _ensure_operator_input(type_def_lines, id_input_type)

        if where_type_def:
            where_lines.setdefault(return_field_key, FieldLine()).type_def = where_type_def
        else:
            type_def_lines.delete_field(where_input_name, return_field_key)

        if is_list and _is_sortable(type_def_lines, return_field.type_def):
            order_lines = type_def_lines[order_enum_name].lines
            for order_value in QUERY_ORDER_VALUES:
                order_lines.setdefault(f'{return_field_key}_{order_value}', FieldLine())
