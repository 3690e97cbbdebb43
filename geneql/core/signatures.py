"""Helpers around GraphQL type signatures (``Foo``, ``[Foo!]!``...).

Parsing and printing are delegated to graphql-core so the grammar is the one of
the SDL itself.
"""
from __future__ import annotations

from typing import Tuple, Union

from graphql import parse_type, print_ast
from graphql.language import ListTypeNode, NonNullTypeNode, TypeNode

__all__ = [
    'parse_signature',
    'print_signature',
    'is_list_type',
    'is_non_null_type',
    'get_return_type_name',
    'find_type_name',
    'split_default',
]


def parse_signature(signature: str) -> TypeNode:
    return parse_type(signature)


def print_signature(node: TypeNode) -> str:
    return print_ast(node)


def _as_node(signature: Union[str, TypeNode]) -> TypeNode:
    return parse_type(signature) if isinstance(signature, str) else signature


def is_list_type(signature: Union[str, TypeNode]) -> bool:
    node = _as_node(signature)
    if isinstance(node, NonNullTypeNode):
        node = node.type
    return isinstance(node, ListTypeNode)


def is_non_null_type(signature: Union[str, TypeNode]) -> bool:
    return isinstance(_as_node(signature), NonNullTypeNode)


def find_type_name(node: TypeNode) -> str:
    while isinstance(node, (ListTypeNode, NonNullTypeNode)):
        node = node.type
    return node.name.value


def get_return_type_name(signature: str) -> str:
    """Return the named type of a signature.

    Example:
        get_return_type_name('[Foo!]!')  # 'Foo'
    """
    return find_type_name(parse_type(signature))


def split_default(signature: str) -> Tuple[str, str]:
    """Split ``'Int = 1'`` into ``('Int', '1')``; the default is ``''`` when absent."""
    sig, sep, default = signature.partition('=')
    return sig.strip(), default.strip() if sep else ''
