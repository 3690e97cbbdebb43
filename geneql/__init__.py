"""Generate executable GraphQL schemas from data models and declarative configs.

Public API:
- generate_schema, GeneratedSchema
- GeneConfig, FieldConfig, Directive, define_* helpers
- extend_types, get_globally_extended_types
- BasePlugin, ClassPlugin (SQLAlchemy in ``geneql.plugins.sqlalchemy``)
"""
from .config import (
    Directive,
    DirectiveParams,
    FieldConfig,
    GeneConfig,
    ResolverParams,
    define_directive,
    define_enum,
    define_field,
    define_gene_config,
    define_input,
    define_type,
    define_union,
)
from .core.filters import generate_default_query_filter_type_defs, populate_args_def_for_default_resolver
from .core.lines import FieldLine, TypeDefinition, TypeDefLines
from .errors import GeneConfigError, GeneError
from .extend import TypeExtensionRegistry, extend_types, get_globally_extended_types
from .operators import get_operator_map, matches_where
from .plugins import BasePlugin, ClassPlugin, DefaultResolverOptions, PopulateOptions, PopulateResult
from .resolvers import get_resolver_map, look_deep_in_schema
from .schema import GeneratedSchema, generate_schema

__all__ = [
    'generate_schema', 'GeneratedSchema',
    'GeneConfig', 'FieldConfig', 'Directive', 'DirectiveParams', 'ResolverParams',
    'define_directive', 'define_enum', 'define_field', 'define_gene_config', 'define_input', 'define_type',
    'define_union',
    'FieldLine', 'TypeDefinition', 'TypeDefLines',
    'generate_default_query_filter_type_defs', 'populate_args_def_for_default_resolver',
    'GeneError', 'GeneConfigError',
    'TypeExtensionRegistry', 'extend_types', 'get_globally_extended_types',
    'get_operator_map', 'matches_where',
    'BasePlugin', 'ClassPlugin', 'DefaultResolverOptions', 'PopulateOptions', 'PopulateResult',
    'get_resolver_map', 'look_deep_in_schema',
]
