"""Plugin contract between the schema engine and data technologies.

A plugin recognizes the models it can handle (structurally, never by class
identity), describes their fields in the field-line registry and optionally
fetches their data for fields using the default resolver.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence

from graphql import GraphQLSchema

from ..config import FieldConfig, GeneConfig
from ..core.lines import TypeDefinition, TypeDefLines

__all__ = [
    'SchemaOptions',
    'PopulateOptions',
    'PopulateResult',
    'DefaultResolverOptions',
    'BasePlugin',
]


@dataclass
class SchemaOptions:
    """Options of the running ``generate_schema`` call visible to plugins."""

    types: Mapping[str, Any]
    base_schema: Optional[GraphQLSchema] = None
    data_type_map: Mapping[str, str] = field(default_factory=dict)
    scalars: Sequence[str] = ()

    def has_type(self, type_name: str) -> bool:
        """Whether ``type_name`` is declared by the base schema or a provided scalar."""
        if type_name in self.scalars:
            return True
        return self.base_schema is not None and self.base_schema.get_type(type_name) is not None


@dataclass
class PopulateOptions:
    """Arguments of :meth:`BasePlugin.populate_type_defs`.

    Attributes:
        type_def_lines: Registry to populate.
        model: The model being described.
        type_name: Exposed type name (the model key or one of its aliases).
        is_field_included: Inclusion policy of ``type_name``.
        schema_options: Options of the schema being generated.
        field_configs: Field configs of ``type_name`` that need resolver
            wiring (e.g. association fields using the default resolver).
    """

    type_def_lines: TypeDefLines
    model: Any
    type_name: str
    is_field_included: Callable[[str], bool]
    schema_options: SchemaOptions
    field_configs: Dict[str, FieldConfig] = field(default_factory=dict)


@dataclass
class PopulateResult:
    # Run once every model populated the registry (cross-type filter generation)
    after_type_def_hooks: List[Callable[[], None]] = field(default_factory=list)


@dataclass
class DefaultResolverOptions:
    model: Any
    model_key: str
    config: FieldConfig
    args: Dict[str, Any]
    info: Any
    source: Any = None
    gene_config: Optional[GeneConfig] = None


class BasePlugin:
    name = 'base'

    def is_matching(self, model: Any) -> bool:
        raise NotImplementedError

    def populate_type_defs(self, options: PopulateOptions) -> PopulateResult:
        """Populate ``options.type_def_lines[options.type_name]``.

        The default implementation replaces the entry with :meth:`get_type_def`.
        """
        options.type_def_lines[options.type_name] = self.get_type_def(options)
        return PopulateResult()

    def get_type_def(self, options: PopulateOptions) -> TypeDefinition:
        raise NotImplementedError

    def supports_default_resolver(self) -> bool:
        return False

    async def default_resolver(self, options: DefaultResolverOptions) -> Any:
        raise NotImplementedError
