from __future__ import annotations

__all__ = [
    'pascal',
    'generate_graphql_type_name',
    'get_where_options_input_name',
    'get_query_order_enum_name',
    'get_operator_input_name',
]


def pascal(name: str) -> str:
    """Upper-case the first character only: ``orderItems`` -> ``OrderItems``."""
    if not name:
        return name
    return name[0].upper() + name[1:]


def generate_graphql_type_name(type_name: str, field_name: str, suffix: str) -> str:
    # type, suffix, field: every call site relies on this exact order
    return ''.join(pascal(part) for part in (type_name, suffix, field_name))


def get_where_options_input_name(type_name: str, field_name: str) -> str:
    return generate_graphql_type_name(type_name, field_name, 'WhereOptions')


def get_query_order_enum_name(type_name: str, field_name: str) -> str:
    return generate_graphql_type_name(type_name, field_name, 'SelectOrder')


def get_operator_input_name(graphql_type: str) -> str:
    return f'GeneOperator{graphql_type}Input'
