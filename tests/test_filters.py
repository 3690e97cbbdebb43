import pytest

from geneql import (
    FieldLine,
    GeneConfigError,
    TypeDefLines,
    generate_default_query_filter_type_defs,
    populate_args_def_for_default_resolver,
)
from geneql.core.naming import get_query_order_enum_name, get_where_options_input_name
from geneql.core.printer import stringify_field_lines


@pytest.fixture
def order_lines():
    lines = TypeDefLines()
    lines.ensure_field('Product', 'id').type_def = 'Int!'
    lines.ensure_field('Product', 'name').type_def = 'String!'
    lines.ensure_field('OrderItem', 'id').type_def = 'Int!'
    lines.ensure_field('OrderItem', 'quantity').type_def = 'Int!'
    lines.ensure_field('OrderItem', 'product').type_def = 'Product'
    lines.ensure_field('OrderItem', 'variants').type_def = '[Product!]'
    lines.ensure_field('Order', 'status').type_def = 'String!'
    lines.ensure_field('Order', 'items').type_def = '[OrderItem!]!'
    return lines


def test_where_and_order_names_concatenate_type_suffix_field():
    assert get_where_options_input_name('Order', 'items') == 'OrderWhereOptionsItems'
    assert get_query_order_enum_name('Order', 'items') == 'OrderSelectOrderItems'


def test_list_field_receives_pagination_where_and_order(order_lines):
    line = order_lines['Order'].lines['items']
    populate_args_def_for_default_resolver(line, 'Order', 'items', True)

    printed = stringify_field_lines('Order', order_lines['Order'])
    assert (
        'items(page: Int = 1, perPage: Int = 10, locale: String, '
        'where: OrderWhereOptionsItems, order: [OrderSelectOrderItems!]): [OrderItem!]!'
    ) in printed


def test_single_field_receives_id_locale_where():
    line = FieldLine(type_def='Order')
    populate_args_def_for_default_resolver(line, 'Query', 'order', False)
    assert list(line.args_def) == ['id', 'locale', 'where']
    assert line.args_def['where'] == ['QueryWhereOptionsOrder']


def test_filter_types_follow_returned_type_shape(order_lines):
    generate_default_query_filter_type_defs(order_lines, 'Order', 'items', 'OrderItem', True)

    where = order_lines['OrderWhereOptionsItems']
    assert where.var_type == 'input'
    assert {k: v.type_def for k, v in where.lines.items()} == {
        'and': '[OrderWhereOptionsItems!]',
        'or': '[OrderWhereOptionsItems!]',
        'id': 'GeneOperatorIntInput',
        'quantity': 'GeneOperatorIntInput',
        # association: filtered by the related identifier
        'product': 'GeneOperatorIntInput',
    }

    order_enum = order_lines['OrderSelectOrderItems']
    assert order_enum.var_type == 'enum'
    assert list(order_enum.lines) == ['id_ASC', 'id_DESC', 'quantity_ASC', 'quantity_DESC']


def test_operator_inputs_are_created_once_per_kind(order_lines):
    generate_default_query_filter_type_defs(order_lines, 'Order', 'items', 'OrderItem', True)
    generate_default_query_filter_type_defs(order_lines, 'Query', 'products', 'Product', True)

    operator_inputs = [name for name in order_lines if name.startswith('GeneOperator')]
    assert operator_inputs == ['GeneOperatorIntInput', 'GeneOperatorStringInput']

    assert list(order_lines['GeneOperatorIntInput'].lines) == [
        'eq', 'ne', 'in', 'notIn', 'null', 'lt', 'lte', 'gt', 'gte',
    ]
    string_input = order_lines['GeneOperatorStringInput'].lines
    assert list(string_input) == ['eq', 'ne', 'in', 'notIn', 'null', 'like', 'notLike']
    assert string_input['in'].type_def == '[String]'
    assert string_input['null'].type_def == 'Boolean'


def test_boolean_operator_input_has_no_comparisons():
    lines = TypeDefLines()
    lines.ensure_field('Flag', 'active').type_def = 'Boolean'
    generate_default_query_filter_type_defs(lines, 'Query', 'flags', 'Flag', False)
    assert list(lines['GeneOperatorBooleanInput'].lines) == ['eq', 'ne', 'in', 'notIn', 'null']


def test_single_field_gets_no_order_enum(order_lines):
    generate_default_query_filter_type_defs(order_lines, 'Query', 'order', 'Order', False)
    assert 'QueryWhereOptionsOrder' in order_lines
    assert 'QuerySelectOrderOrder' not in order_lines
    assert list(order_lines['QueryWhereOptionsOrder'].lines) == ['and', 'or', 'status']


def test_existing_where_and_order_are_left_untouched(order_lines):
    generate_default_query_filter_type_defs(order_lines, 'Order', 'items', 'OrderItem', True)
    where_before = dict(order_lines['OrderWhereOptionsItems'].lines)
    order_before = dict(order_lines['OrderSelectOrderItems'].lines)

    order_lines.ensure_field('OrderItem', 'note').type_def = 'String'
    generate_default_query_filter_type_defs(order_lines, 'Order', 'items', 'OrderItem', True)

    assert order_lines['OrderWhereOptionsItems'].lines == where_before
    assert order_lines['OrderSelectOrderItems'].lines == order_before


def test_unfilterable_prefilled_where_field_is_deleted(order_lines):
    order_lines.ensure_field('OrderWhereOptionsItems', 'variants').type_def = 'String'
    generate_default_query_filter_type_defs(order_lines, 'Order', 'items', 'OrderItem', True)
    assert 'variants' not in order_lines['OrderWhereOptionsItems'].lines


def test_basic_scalar_return_type_gets_logical_operators_only():
    lines = TypeDefLines()
    line = lines.ensure_field('Query', 'tags')
    line.type_def = '[String!]'
    populate_args_def_for_default_resolver(line, 'Query', 'tags', True)

    generate_default_query_filter_type_defs(lines, 'Query', 'tags', 'String', True)

    assert list(lines['QueryWhereOptionsTags'].lines) == ['and', 'or']
    assert 'QuerySelectOrderTags' not in lines
    assert 'order' not in line.args_def


def test_list_of_unsortable_type_loses_order_argument(order_lines):
    order_lines.ensure_field('Link', 'order').type_def = 'Order'
    order_lines.ensure_field('Link', 'product').type_def = 'Product!'
    line = order_lines.ensure_field('Order', 'links')
    line.type_def = '[Link!]!'
    populate_args_def_for_default_resolver(line, 'Order', 'links', True)

    generate_default_query_filter_type_defs(order_lines, 'Order', 'links', 'Link', True)

    assert 'OrderSelectOrderLinks' not in order_lines
    assert list(line.args_def) == ['page', 'perPage', 'locale', 'where']
    assert list(order_lines['OrderWhereOptionsLinks'].lines) == ['and', 'or', 'product']


def test_unknown_return_type_is_a_configuration_error():
    lines = TypeDefLines()
    with pytest.raises(GeneConfigError, match='Cannot find "Invoice" definition'):
        generate_default_query_filter_type_defs(lines, 'Query', 'invoices', 'Invoice', True)
