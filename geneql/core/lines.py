"""Intermediate representation of the generated type definitions.

Plugins and the synthesis engine accumulate "field lines" here before the whole
registry is serialized to SDL. Candidate signatures and directive invocations
are kept as ordered sets (lists without duplicates) so the printed schema is
deterministic.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from ..constants import ARG_DEFAULTS, GRAPHQL_VAR_TYPES

__all__ = ['FieldLine', 'TypeDefinition', 'TypeDefLines']


def _add_unique(values: List[str], value: str) -> None:
    if value not in values:
        values.append(value)


@dataclass
class FieldLine:
    """One field (or enum value / union member) of a generated type.

    Attributes:
        type_def: Return type signature such as ``[Foo!]!``. Empty for enum
            values and union members, or until a plugin resolves it.
        args_def: Argument name -> candidate signatures. Several declarations
            of the same argument (aliases, extensions) are reconciled when
            printed.
        directives: Serialized directive invocations, e.g. ``@auth(role: "admin")``.
    """

    type_def: str = ''
    args_def: Dict[str, List[str]] = field(default_factory=dict)
    directives: List[str] = field(default_factory=list)

    def add_argument(self, arg_key: str, signature: str) -> None:
        candidates = self.args_def.setdefault(arg_key, [])
        default = ARG_DEFAULTS.get(arg_key)
        if default is not None and '=' not in signature:
            signature = f'{signature} = {default}'
        _add_unique(candidates, signature)

    def add_directive(self, directive_def: str) -> None:
        _add_unique(self.directives, directive_def)


@dataclass
class TypeDefinition:
    var_type: str = 'type'
    directives: List[str] = field(default_factory=list)
    lines: Dict[str, FieldLine] = field(default_factory=dict)

    def add_directive(self, directive_def: str) -> None:
        _add_unique(self.directives, directive_def)


class TypeDefLines(Dict[str, TypeDefinition]):
    """Registry of type name -> :class:`TypeDefinition`, in declaration order.

    Re-declaring a type merges into the existing entry: fields and directives
    are added, never replaced. Only the variant kind is overwritten, by the
    most specific declaration.
    """

    def ensure_type(self, name: str) -> TypeDefinition:
        type_def = self.get(name)
        if type_def is None:
            type_def = self[name] = TypeDefinition()
        return type_def

    def create(self, var_type: str, name: str) -> TypeDefinition:
        if var_type not in GRAPHQL_VAR_TYPES:
            raise ValueError(f'Unknown GraphQL variant kind "{var_type}" for "{name}".')
        type_def = self.ensure_type(name)
        type_def.var_type = var_type
        return type_def

    def ensure_field(self, type_name: str, field_name: str) -> FieldLine:
        lines = self.ensure_type(type_name).lines
        line = lines.get(field_name)
        if line is None:
            line = lines[field_name] = FieldLine()
        return line

    def set_directive_on_type(self, type_name: str, directive_def: str) -> None:
        self.ensure_type(type_name).add_directive(directive_def)

    def set_directive_on_field(self, type_name: str, field_name: str, directive_def: str) -> None:
        self.ensure_field(type_name, field_name).add_directive(directive_def)

    def add_argument(self, type_name: str, field_name: str, arg_key: str, signature: str) -> None:
        self.ensure_field(type_name, field_name).add_argument(arg_key, signature)

    def delete_field(self, type_name: str, field_name: str) -> None:
        type_def = self.get(type_name)
        if type_def is not None:
            type_def.lines.pop(field_name, None)

    def is_populated(self, name: str) -> bool:
        type_def: Optional[TypeDefinition] = self.get(name)
        return type_def is not None and bool(type_def.lines)
