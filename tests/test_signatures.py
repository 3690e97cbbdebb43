import pytest

from geneql.core.signatures import (
    get_return_type_name,
    is_list_type,
    is_non_null_type,
    parse_signature,
    print_signature,
    split_default,
)


@pytest.mark.parametrize('signature', ['Foo', 'Foo!', '[Foo]', '[Foo!]', '[Foo]!', '[Foo!]!'])
def test_parse_then_print_reproduces_signature(signature):
    assert print_signature(parse_signature(signature)) == signature


@pytest.mark.parametrize('signature,expected', [
    ('Foo', False),
    ('Foo!', False),
    ('[Foo]', True),
    ('[Foo!]!', True),
])
def test_is_list_type(signature, expected):
    assert is_list_type(signature) is expected


def test_is_non_null_type():
    assert is_non_null_type('Foo!')
    assert is_non_null_type('[Foo]!')
    assert not is_non_null_type('[Foo!]')


@pytest.mark.parametrize('signature', ['Foo', 'Foo!', '[Foo]', '[Foo!]!', '[[Foo!]]'])
def test_get_return_type_name(signature):
    assert get_return_type_name(signature) == 'Foo'


def test_split_default():
    assert split_default('Int = 1') == ('Int', '1')
    assert split_default('String') == ('String', '')
