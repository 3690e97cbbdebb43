"""Resolver wiring and directive middleware."""

import pytest
from graphql import graphql

from geneql import (
    ClassPlugin,
    Directive,
    FieldConfig,
    GeneConfig,
    define_directive,
    define_type,
    extend_types,
    generate_schema,
    look_deep_in_schema,
)


@pytest.fixture
def calls():
    return []


@pytest.fixture
def track(calls):
    """Directive factory recording when its handler starts and ends."""

    def factory(name, call_resolve=True):
        async def handler(params):
            calls.append(f'{name}:before')
            if call_resolve:
                await params.resolve()
            calls.append(f'{name}:after')

        return Directive(name, handler)

    return factory


async def test_first_declared_directive_runs_first(calls, track):
    def resolver(params):
        calls.append('resolver')
        return 'value'

    schema = generate_schema(types={
        'Query': {
            'value': FieldConfig(return_type='String', resolver=resolver, directives=[track('a'), track('b')]),
        },
    })
    result = await graphql(schema.schema, '{ value }')

    assert result.errors is None
    assert result.data == {'value': 'value'}
    assert calls == ['a:before', 'b:before', 'resolver', 'b:after', 'a:after']


async def test_inner_chain_runs_once_when_handler_skips_resolve(calls, track):
    def resolver(params):
        calls.append('resolver')
        return 'value'

    schema = generate_schema(types={
        'Query': {
            'value': FieldConfig(
                return_type='String',
                resolver=resolver,
                directives=[track('a', call_resolve=False), track('b')],
            ),
        },
    })
    result = await graphql(schema.schema, '{ value }')

    assert result.data == {'value': 'value'}
    assert calls == ['a:before', 'a:after', 'b:before', 'resolver', 'b:after']


async def test_resolve_may_be_called_several_times(calls):
    async def twice(params):
        first = await params.resolve()
        second = await params.resolve()
        calls.append((first, second))

    counter = iter(range(10))
    schema = generate_schema(types={
        'Query': {
            'value': FieldConfig(
                return_type='Int',
                resolver=lambda p: next(counter),
                directives=[Directive('twice', twice)],
            ),
        },
    })
    result = await graphql(schema.schema, '{ value }')

    assert calls == [(0, 1)]
    assert result.data == {'value': 1}


async def test_sync_handlers_are_supported(calls):
    def handler(params):
        calls.append(params.field)

    schema = generate_schema(types={
        'Query': {
            'value': FieldConfig(
                return_type='String',
                resolver=lambda p: 'value',
                directives=[Directive('log', handler)],
            ),
        },
    })
    result = await graphql(schema.schema, '{ value }')
    assert result.data == {'value': 'value'}
    assert calls == ['value']


@define_directive
def exclude_colors(colors):
    async def handler(params):
        params.filter(lambda color: color not in colors)

    return Directive('excludeColors', handler, {'colors': list(colors)})


async def test_filter_removes_rejected_list_entries_and_nulls_rejected_scalars():
    schema = generate_schema(types={
        'Query': {
            'colors': FieldConfig(
                return_type='[String!]!',
                resolver=lambda p: ['Red', 'Blue', 'Green'],
                directives=[exclude_colors(['Blue'])],
            ),
            'rejected': FieldConfig(
                return_type='String',
                resolver=lambda p: 'Blue',
                directives=[exclude_colors(['Blue'])],
            ),
            'accepted': FieldConfig(
                return_type='String',
                resolver=lambda p: 'Red',
                directives=[exclude_colors(['Blue'])],
            ),
        },
    })
    assert 'directive @excludeColors(colors: [String]!)' in schema.schema_string

    result = await graphql(schema.schema, '{ colors rejected accepted }')
    assert result.errors is None
    assert result.data == {'colors': ['Red', 'Green'], 'rejected': None, 'accepted': 'Red'}


async def test_type_level_directive_runs_before_field_level_directive(calls, track):
    schema = generate_schema(types={
        'Product': define_type({'color': 'String'}, GeneConfig(directives=[track('auth')])),
        'Query': {
            'product': FieldConfig(
                return_type='Product',
                resolver=lambda p: {'color': 'Gray'},
                directives=[track('sanitize')],
            ),
            'products': FieldConfig(return_type='[Product!]!', resolver=lambda p: [{'color': 'Oak'}]),
        },
    })
    assert 'type Product @auth {' in schema.type_defs_string

    result = await graphql(schema.schema, '{ product { color } }')
    assert result.data == {'product': {'color': 'Gray'}}
    assert calls == ['auth:before', 'sanitize:before', 'sanitize:after', 'auth:after']

    calls.clear()
    result = await graphql(schema.schema, '{ products { color } }')
    assert result.data == {'products': [{'color': 'Oak'}]}
    assert calls == ['auth:before', 'auth:after']


async def test_alias_runs_primary_then_alias_then_field_directives(calls, track):
    class Member:
        name = 'String!'
        gene_config = GeneConfig(
            directives=[track('member')],
            aliases={'AuthenticatedMember': GeneConfig(directives=[track('authenticated')])},
        )

    schema = generate_schema(
        types={
            'Member': Member,
            'Query': {
                'me': FieldConfig(
                    return_type='AuthenticatedMember',
                    resolver=lambda p: {'name': 'Ada'},
                    directives=[track('field')],
                ),
            },
        },
        plugins=[ClassPlugin()],
    )
    assert 'type AuthenticatedMember @member @authenticated {' in schema.type_defs_string

    result = await graphql(schema.schema, '{ me { name } }')
    assert result.data == {'me': {'name': 'Ada'}}
    assert [c for c in calls if c.endswith(':before')] == ['member:before', 'authenticated:before', 'field:before']


async def test_directives_only_extension_wraps_default_field_resolver():
    async def redact(params):
        params.filter(lambda value: False)

    extend_types({'Note': {'text': FieldConfig(directives=[Directive('redact', redact)])}})
    schema = generate_schema(types={
        'Note': define_type({'text': 'String', 'title': 'String'}),
        'Query': {'note': FieldConfig(return_type='Note', resolver=lambda p: {'text': 'secret', 'title': 'Hi'})},
    })
    assert 'text: String @redact' in schema.type_defs_string

    result = await graphql(schema.schema, '{ note { text title } }')
    assert result.errors is None
    assert result.data == {'note': {'text': None, 'title': 'Hi'}}


async def test_handler_error_is_reported_at_the_field_path():
    async def deny(params):
        raise PermissionError('denied')

    schema = generate_schema(types={
        'Query': {
            'secret': FieldConfig(return_type='String', resolver=lambda p: 'x', directives=[Directive('deny', deny)]),
            'open': FieldConfig(return_type='String', resolver=lambda p: 'ok'),
        },
    })
    result = await graphql(schema.schema, '{ secret open }')

    assert result.data == {'secret': None, 'open': 'ok'}
    assert len(result.errors) == 1
    assert result.errors[0].message == 'denied'
    assert result.errors[0].path == ['secret']


async def test_handlers_receive_resolution_params():
    seen = {}

    async def inspect_params(params):
        seen.update(field=params.field, args=params.args, context=params.context, source=params.source)

    schema = generate_schema(types={
        'Query': {
            'greet': FieldConfig(
                return_type='String',
                args={'name': 'String!'},
                resolver=lambda p: f"hi {p.args['name']}",
                directives=[Directive('inspect', inspect_params)],
            ),
        },
    })
    result = await graphql(schema.schema, '{ greet(name: "Ada") }', context_value={'user': 'ada'})

    assert result.data == {'greet': 'hi Ada'}
    assert seen == {'field': 'greet', 'args': {'name': 'Ada'}, 'context': {'user': 'ada'}, 'source': None}


def test_directive_thunks_are_evaluated_once(calls):
    def auth_thunk():
        calls.append('evaluated')
        return Directive('auth', lambda params: None)

    generate_schema(types={
        'Note': define_type({'text': 'String'}, GeneConfig(directives=[auth_thunk])),
        'Query': {'note': FieldConfig(return_type='Note', resolver=lambda p: None)},
    })
    assert calls == ['evaluated']


def test_schema_walk_visits_each_type_once():
    schema = generate_schema(types={
        'Node': define_type({'parent': 'Node', 'children': '[Node!]!', 'name': 'String'}),
        'Query': {'root': 'Node', 'nodes': '[Node!]!'},
    })
    visited = []
    look_deep_in_schema(schema.schema, lambda visit: visited.append((visit.parent_type, visit.field, visit.is_list)))

    assert visited == [
        ('Query', 'root', False),
        ('Query', 'nodes', True),
        ('Node', 'parent', False),
        ('Node', 'children', True),
        ('Node', 'name', False),
    ]
