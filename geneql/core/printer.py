"""Serialization of the field-line registry to SDL, and schema printing."""
from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional, Set

from graphql import (
    GraphQLNamedType,
    GraphQLSchema,
    is_specified_directive,
    is_specified_scalar_type,
    print_ast,
)
from graphql.utilities.print_schema import print_directive, print_type

from ..config import Directive
from ..constants import MUTATION_TYPE, QUERY_TYPE
from ..errors import GeneConfigError
from .lines import FieldLine, TypeDefinition, TypeDefLines
from .signatures import split_default
from .utils import get_graphql_type

__all__ = [
    'DirectiveDefinition',
    'DirectiveDefs',
    'register_directive',
    'stringify_directive_config',
    'stringify_directive_definition',
    'stringify_field_lines',
    'stringify_type_def_lines',
    'print_schema_with_directives',
]


@dataclass
class DirectiveDefinition:
    """Argument kinds observed across every usage of one directive.

    ``None`` in a kind list means a usage passed ``null`` or omitted the
    argument, which makes it nullable in the printed definition.
    """

    uses: int = 0
    args: Dict[str, List[Optional[str]]] = field(default_factory=dict)


DirectiveDefs = Dict[str, DirectiveDefinition]


def register_directive(defs: DirectiveDefs, directive: Directive) -> str:
    """Record a directive usage and return its serialized invocation."""
    definition = defs.setdefault(directive.name, DirectiveDefinition())
    args = dict(directive.args or {})

    for key, kinds in definition.args.items():
        if key not in args and None not in kinds:
            kinds.append(None)
    for key, value in args.items():
        kinds = definition.args.get(key)
        if kinds is None:
            kinds = definition.args[key] = [None] if definition.uses else []
        kind = None if value is None else get_graphql_type(value)
        if kind not in kinds:
            kinds.append(kind)
    definition.uses += 1

    return stringify_directive_config(directive)


def _literal(value: Any) -> str:
    # JSON literals (strings, numbers, booleans, lists) are valid GraphQL values
    return json.dumps(value)


def stringify_directive_config(directive: Directive) -> str:
    directive_def = f'@{directive.name}'
    # null cannot be expressed in a directive invocation here, drop it
    entries = [(k, v) for k, v in (directive.args or {}).items() if v is not None]
    if entries:
        directive_def += '(' + ', '.join(f'{k}: {_literal(v)}' for k, v in entries) + ')'
    return directive_def


def _merge_kinds(name: str, arg: str, kinds: Iterable[str]) -> str:
    unique = list(dict.fromkeys(kinds))
    if len(unique) == 1:
        return unique[0]
    if set(unique) == {'Int', 'Float'}:
        return 'Float'
    if set(unique) == {'[Int]', '[Float]'}:
        return '[Float]'
    raise GeneConfigError(f'Directive "@{name}" argument "{arg}" is used with incompatible types: {", ".join(unique)}.')


def stringify_directive_definition(name: str, definition: DirectiveDefinition) -> str:
    directive_def = f'directive @{name}'
    arg_lines = []
    for key, kinds in definition.args.items():
        concrete = [k for k in kinds if k is not None]
        if not concrete:
            continue
        signature = _merge_kinds(name, key, concrete)
        if None not in kinds:
            signature += '!'
        arg_lines.append(f'  {key}: {signature}')
    if arg_lines:
        directive_def += '(\n' + '\n'.join(arg_lines) + '\n)'
    return directive_def + ' on OBJECT | FIELD_DEFINITION'


def _reconcile_argument(type_name: str, field_name: str, arg_key: str, candidates: List[str]) -> str:
    if len(candidates) == 1:
        return candidates[0]
    signatures: List[str] = []
    defaults: List[str] = []
    for candidate in candidates:
        sig, default = split_default(candidate)
        signatures.append(sig)
        if default:
            defaults.append(default)
    shapes = {sig.replace('!', '') for sig in signatures}
    if len(shapes) > 1:
        raise GeneConfigError(
            f'Argument "{arg_key}" of "{type_name}.{field_name}" is declared with conflicting types: '
            f'{", ".join(candidates)}.'
        )
    signature = signatures[0] if len(set(signatures)) == 1 else shapes.pop()
    if defaults:
        signature += f' = {defaults[0]}'
    return signature


def _print_directives(directives: List[str]) -> str:
    return f" {' '.join(directives)}" if directives else ''


def stringify_field_lines(type_name: str, type_def: TypeDefinition, *, extend: bool = False) -> str:
    prefix = 'extend ' if extend else ''

    if type_def.var_type == 'scalar':
        return f'{prefix}scalar {type_name}{_print_directives(type_def.directives)}'

    field_lines: List[str] = []
    for attr, line in type_def.lines.items():
        field_lines.append(_stringify_field_line(type_name, attr, line))
    if not field_lines:
        return ''

    if type_def.var_type == 'union':
        return f"{prefix}union {type_name} = {' | '.join(field_lines)}"

    body = '\n'.join(f'  {line}' for line in field_lines)
    return f'{prefix}{type_def.var_type} {type_name}{_print_directives(type_def.directives)} {{\n{body}\n}}'


def _stringify_field_line(type_name: str, attr: str, line: FieldLine) -> str:
    args_def = ''
    if line.args_def:
        args_def = '(' + ', '.join(
            f'{k}: {_reconcile_argument(type_name, attr, k, v)}' for k, v in line.args_def.items()
        ) + ')'
    out = f'{attr}{args_def}'
    if line.type_def:
        out += f': {line.type_def}{_print_directives(line.directives)}'
    return out


def stringify_type_def_lines(
    type_def_lines: TypeDefLines,
    directive_defs: DirectiveDefs,
    *,
    existing_types: Optional[Set[str]] = None,
    existing_directives: Optional[Set[str]] = None,
) -> str:
    """Serialize the registry to SDL.

    Directive definitions come first so every usage refers to a known
    directive; ``Query`` is printed first among the types. Types and
    directives already present in a base schema are printed as extensions or
    skipped.
    """
    existing_types = existing_types or set()
    existing_directives = existing_directives or set()

    ordered: List[str] = [QUERY_TYPE] if QUERY_TYPE in type_def_lines else []
    ordered.extend(name for name in type_def_lines if name != QUERY_TYPE)

    parts: List[str] = [
        stringify_directive_definition(name, definition)
        for name, definition in directive_defs.items()
        if name not in existing_directives
    ]
    for name in ordered:
        type_def = type_def_lines[name]
        extend = name in existing_types
        if extend and type_def.var_type == 'scalar' and not type_def.directives:
            continue
        line = stringify_field_lines(name, type_def, extend=extend)
        if line:
            parts.append(line)
    return '\n\n'.join(parts)


def _sort_key(type_name: str) -> tuple:
    if type_name == QUERY_TYPE:
        return (0, '')
    if type_name == MUTATION_TYPE:
        return (1, '')
    return (2, type_name)


def _print_named_type(named_type: GraphQLNamedType) -> str:
    if named_type.ast_node is None:
        return print_type(named_type)
    nodes = [named_type.ast_node, *(named_type.extension_ast_nodes or ())]
    return '\n\n'.join(print_ast(node) for node in nodes)


def print_schema_with_directives(schema: GraphQLSchema) -> str:
    """Print a schema including custom directive usages.

    graphql-core's ``print_schema`` drops directive usages, so definitions
    are printed from their AST nodes when available.
    """
    chunks: List[str] = []
    for directive in schema.directives:
        if is_specified_directive(directive):
            continue
        chunks.append(print_ast(directive.ast_node) if directive.ast_node else print_directive(directive))

    type_map: Mapping[str, GraphQLNamedType] = schema.type_map
    for type_name in sorted(type_map, key=_sort_key):
        named_type = type_map[type_name]
        if type_name.startswith('__') or is_specified_scalar_type(named_type):
            continue
        chunks.append(_print_named_type(named_type))
    return '\n\n'.join(chunks)
