import datetime

import pytest

from geneql import get_operator_map, matches_where

PRODUCTS = [
    {'id': 1, 'name': 'Chair', 'color': 'Gray', 'price': 49.5},
    {'id': 2, 'name': 'Table', 'color': 'Oak', 'price': 199.0},
    {'id': 3, 'name': 'Lamp', 'color': 'White', 'price': 25.0},
    {'id': 4, 'name': 'Shelf', 'color': None, 'price': 80.0},
]


def _names(where):
    return [p['name'] for p in PRODUCTS if matches_where(p, where)]


def test_operator_map_depends_on_value_kind():
    assert set(get_operator_map('x')) == {'eq', 'ne', 'in', 'notIn', 'null', 'like', 'notLike'}
    assert set(get_operator_map(3)) == {'eq', 'ne', 'in', 'notIn', 'null', 'lt', 'lte', 'gt', 'gte'}
    assert set(get_operator_map(datetime.date(2024, 1, 1))) >= {'lt', 'gte'}
    assert set(get_operator_map(True)) == {'eq', 'ne', 'in', 'notIn', 'null'}
    assert set(get_operator_map(None)) == {'eq', 'ne', 'in', 'notIn', 'null'}


@pytest.mark.parametrize('where,expected', [
    ({'name': {'eq': 'Lamp'}}, ['Lamp']),
    ({'name': {'ne': 'Lamp'}}, ['Chair', 'Table', 'Shelf']),
    ({'id': {'in': [1, 3]}}, ['Chair', 'Lamp']),
    ({'id': {'notIn': [1, 3]}}, ['Table', 'Shelf']),
    ({'color': {'null': True}}, ['Shelf']),
    ({'color': {'null': False}}, ['Chair', 'Table', 'Lamp']),
    ({'price': {'gt': 49.5}}, ['Table', 'Shelf']),
    ({'price': {'gte': 49.5}}, ['Chair', 'Table', 'Shelf']),
    ({'price': {'lt': 49.5}}, ['Lamp']),
    ({'price': {'lte': 49.5}}, ['Chair', 'Lamp']),
    ({'name': {'like': '%a%'}}, ['Chair', 'Table', 'Lamp']),
    ({'name': {'like': 'l_mp'}}, ['Lamp']),
    ({'name': {'notLike': '%a%'}}, ['Shelf']),
])
def test_single_operators(where, expected):
    assert _names(where) == expected


def test_conditions_on_several_fields_are_combined():
    assert _names({'name': {'like': '%a%'}, 'price': {'lt': 100}}) == ['Chair', 'Lamp']


def test_and_or():
    assert _names({'or': [{'name': {'eq': 'Lamp'}}, {'price': {'gt': 150}}]}) == ['Table', 'Lamp']
    assert _names({'and': [{'price': {'gt': 30}}, {'price': {'lt': 100}}]}) == ['Chair', 'Shelf']


def test_operator_not_available_for_value_kind_never_matches():
    assert _names({'color': {'gt': 'A'}}) == []


def test_empty_where_matches_everything():
    assert _names(None) == ['Chair', 'Table', 'Lamp', 'Shelf']
    assert _names({'name': None}) == ['Chair', 'Table', 'Lamp', 'Shelf']


def test_objects_are_supported():
    class Product:
        name = 'Desk'

    assert matches_where(Product(), {'name': {'eq': 'Desk'}})
    assert not matches_where(Product(), {'name': {'like': 'chair'}})
