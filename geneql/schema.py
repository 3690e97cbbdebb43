"""Schema synthesis: declared models and types -> executable GraphQL schema.

Generation runs in two phases. Every model, inline type and type extension
first contributes field lines to a :class:`TypeDefLines` registry; filter
inputs and order enums that depend on the shape of other types are produced by
deferred hooks once the registry is complete. The registry is then printed to
SDL, built (or merged into a base schema) with graphql-core and handed to the
resolver wiring.
"""
from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Union

import strawberry
from graphql import (
    DocumentNode,
    GraphQLField,
    GraphQLObjectType,
    GraphQLScalarType,
    GraphQLSchema,
    build_ast_schema,
    build_schema,
    extend_schema,
    parse,
    specified_scalar_types,
)

from .config import FieldConfig, GeneConfig
from .constants import MUTATION_TYPE, QUERY_TYPE
from .core.filters import generate_default_query_filter_type_defs, populate_args_def_for_default_resolver
from .core.lines import TypeDefLines
from .core.printer import (
    DirectiveDefs,
    print_schema_with_directives,
    register_directive,
    stringify_type_def_lines,
)
from .core.signatures import get_return_type_name, is_list_type
from .core.utils import (
    get_gene_config,
    is_enum_config,
    is_field_included,
    is_object_config,
    normalize_field_config,
    resolve_directives,
)
from .errors import GeneConfigError
from .extend import TypeExtensionRegistry, get_globally_extended_types
from .plugins.base import BasePlugin, PopulateOptions, SchemaOptions
from .resolvers import ModelEntry, add_resolvers_to_schema, get_resolver_map

logger = logging.getLogger(__name__)

__all__ = ['GeneratedSchema', 'generate_schema', 'parse_schema_option']

SchemaOption = Union[str, DocumentNode, GraphQLSchema, strawberry.Schema, None]
ResolversOption = Mapping[str, Union[GraphQLScalarType, Mapping[str, Callable[..., Any]]]]

_SPECIFIED_SCALARS = frozenset(specified_scalar_types)


def parse_schema_option(schema: SchemaOption) -> Optional[GraphQLSchema]:
    if schema is None:
        return None
    if isinstance(schema, strawberry.Schema):
        return schema._schema
    if isinstance(schema, GraphQLSchema):
        return schema
    if isinstance(schema, str):
        return build_schema(schema)
    if isinstance(schema, DocumentNode):
        return build_ast_schema(schema)
    raise GeneConfigError(f'Unsupported base schema: {schema!r}')


class _Synthesizer:
    """Accumulates the registry for one ``generate_schema`` call."""

    def __init__(
        self,
        *,
        types: Mapping[str, Any],
        plugins: Sequence[BasePlugin],
        schema_options: SchemaOptions,
        extensions: TypeExtensionRegistry,
    ) -> None:
        self.types = types
        self.plugins = list(plugins)
        self.schema_options = schema_options
        self.extensions = extensions
        self.type_def_lines = TypeDefLines()
        self.directive_defs: DirectiveDefs = {}
        self.after_type_def_hooks: List[Callable[[], None]] = []
        # type name -> field name -> config, consumed by the resolver wiring
        self.field_configs: Dict[str, Dict[str, FieldConfig]] = {}
        self.models: Dict[str, ModelEntry] = {}

    def run(self) -> TypeDefLines:
        base_schema = self.schema_options.base_schema
        for scalar in self.schema_options.scalars:
            if scalar in _SPECIFIED_SCALARS:
                continue
            if base_schema is None or base_schema.get_type(scalar) is None:
                self.type_def_lines.create('scalar', scalar)

        for model_key, model in self.types.items():
            plugin = self._find_plugin(model)
            if plugin is not None:
                self._add_model(plugin, model_key, model)
            elif is_enum_config(model) or is_object_config(model):
                self._generate_type_def_lines(model_key, model)
                if is_object_config(model):
                    self.after_type_def_hooks.append(
                        lambda model_key=model_key, model=model: self._generate_filters(model_key, model)
                    )
            else:
                logger.warning('No plugin matches type %s (%r), skipped', model_key, model)

        self._merge_extensions()

        for hook in self.after_type_def_hooks:
            hook()
        return self.type_def_lines

    def _find_plugin(self, model: Any) -> Optional[BasePlugin]:
        for plugin in self.plugins:
            if plugin.is_matching(model):
                return plugin
        return None

    def _add_model(self, plugin: BasePlugin, model_key: str, model: Any) -> None:
        logger.debug('Populating %s with plugin %s', model_key, plugin.name)
        gene_config = get_gene_config(model)
        self.models[model_key] = ModelEntry(model=model, model_key=model_key, plugin=plugin)
        self._populate(plugin, model_key, model, gene_config)
        self._add_model_types(model, gene_config)

        for alias_key, alias_config in (gene_config.aliases if gene_config else {}).items():
            logger.debug('Populating alias %s of %s', alias_key, model_key)
            self.models[alias_key] = ModelEntry(model=model, model_key=model_key, plugin=plugin)
            self._populate(plugin, alias_key, model, alias_config, alias_of=model_key, primary_config=gene_config)
            self._add_model_types(model, alias_config)

    def _populate(
        self,
        plugin: BasePlugin,
        type_name: str,
        model: Any,
        gene_config: Optional[GeneConfig],
        *,
        alias_of: Optional[str] = None,
        primary_config: Optional[GeneConfig] = None,
    ) -> None:
        self.extensions.set_gene_config_for_type(type_name, gene_config, alias_of=alias_of)

        options = PopulateOptions(
            type_def_lines=self.type_def_lines,
            model=model,
            type_name=type_name,
            is_field_included=lambda field_key: is_field_included(gene_config, field_key),
            schema_options=self.schema_options,
            field_configs=self.field_configs.setdefault(type_name, {}),
        )
        result = plugin.populate_type_defs(options)
        self.after_type_def_hooks.extend(result.after_type_def_hooks)

        # Field configs reported by the plugin carry arguments and directives too
        plugin_configs = dict(options.field_configs)
        for field_key, config in plugin_configs.items():
            self._add_arguments_and_directives(type_name, field_key, config)
        if any(config.uses_default_args for config in plugin_configs.values()):
            self.after_type_def_hooks.append(
                lambda type_name=type_name, plugin_configs=plugin_configs: self._generate_filters(
                    type_name, plugin_configs
                )
            )

        type_def = self.type_def_lines.ensure_type(type_name)
        directives = resolve_directives(primary_config.directives) if primary_config else []
        if gene_config is not None:
            directives += resolve_directives(gene_config.directives)
        for directive in directives:
            type_def.add_directive(register_directive(self.directive_defs, directive))

    def _add_model_types(self, model: Any, gene_config: Optional[GeneConfig]) -> None:
        """Merge the deprecated ``GeneConfig.types`` extensions of a model."""
        if gene_config is None or not gene_config.types:
            return
        for type_name, field_configs in gene_config.types.items():
            self._generate_type_def_lines(type_name, field_configs, owner=model)
            self.after_type_def_hooks.append(
                lambda type_name=type_name, field_configs=field_configs: self._generate_filters(
                    type_name, field_configs
                )
            )

    def _merge_extensions(self) -> None:
        extended = self.extensions.get_all()
        for type_name, field_configs in extended.items():
            self._generate_type_def_lines(type_name, field_configs)
        for type_name, field_configs in extended.items():
            self._generate_filters(type_name, field_configs)

    def _generate_filters(self, type_name: str, field_configs: Mapping[str, Any]) -> None:
        for field_key, value in field_configs.items():
            if field_key == 'gene_config':
                continue
            config = normalize_field_config(value)
            if not config.uses_default_args:
                continue
            signature = config.return_type or self.type_def_lines[type_name].lines[field_key].type_def
            generate_default_query_filter_type_defs(
                self.type_def_lines,
                type_name,
                field_key,
                get_return_type_name(signature),
                is_list_type(signature),
            )

    def _add_arguments_and_directives(self, type_name: str, field_key: str, config: FieldConfig) -> None:
        line = self.type_def_lines.ensure_field(type_name, field_key)
        if config.uses_default_args:
            if not line.type_def:
                raise GeneConfigError(
                    f'Field "{type_name}.{field_key}" using the default resolver must declare a return type.'
                )
            populate_args_def_for_default_resolver(line, type_name, field_key, is_list_type(line.type_def))
        elif isinstance(config.args, Mapping):
            for arg_key, signature in config.args.items():
                if isinstance(signature, str):
                    line.add_argument(arg_key, signature)

        for directive in resolve_directives(config.directives):
            line.add_directive(register_directive(self.directive_defs, directive))

    def _generate_type_def_lines(self, type_name: str, field_configs: Any, owner: Any = None) -> None:
        type_def = self.type_def_lines.ensure_type(type_name)

        if is_enum_config(field_configs):
            type_def.var_type = 'enum'
            for value in field_configs:
                self.type_def_lines.ensure_field(type_name, value)
            return

        gene_config = field_configs.get('gene_config')
        if isinstance(gene_config, GeneConfig):
            if gene_config.var_type:
                self.type_def_lines.create(gene_config.var_type, type_name)
            self.extensions.set_gene_config_for_type(type_name, gene_config)
            for directive in resolve_directives(gene_config.directives):
                type_def.add_directive(register_directive(self.directive_defs, directive))

        for field_key, value in field_configs.items():
            if field_key == 'gene_config':
                continue
            if type_def.var_type == 'union':
                self.type_def_lines.ensure_field(type_name, field_key)
                continue

            config = normalize_field_config(value)
            line = self.type_def_lines.ensure_field(type_name, field_key)
            if config.return_type:
                line.type_def = config.return_type
            self._add_arguments_and_directives(type_name, field_key, config)

            if callable(config.resolver) or config.uses_default_resolver or config.directives:
                configs = self.field_configs.setdefault(type_name, {})
                existing = configs.get(field_key)
                if owner is not None and config.model is None and config.uses_default_resolver:
                    config = dataclasses.replace(config, model=owner)
                elif existing is not None and config.resolver is None and not config.uses_default_resolver:
                    # Directives only: keep how the field was resolved so far
                    config = dataclasses.replace(
                        existing,
                        directives=[*resolve_directives(existing.directives), *resolve_directives(config.directives)],
                    )
                configs[field_key] = config


@dataclass
class GeneratedSchema:
    """Result of :func:`generate_schema`.

    Attributes:
        schema: Executable graphql-core schema.
        type_def_lines: Registry the SDL was printed from.
        type_defs_string: SDL generated from the declarations (without the
            base schema).
    """

    schema: GraphQLSchema
    type_def_lines: TypeDefLines = field(default_factory=TypeDefLines)
    type_defs_string: str = ''

    @property
    def schema_string(self) -> str:
        return print_schema_with_directives(self.schema)

    @property
    def type_defs(self) -> DocumentNode:
        return parse(self.schema_string)

    @property
    def resolvers(self) -> Dict[str, Dict[str, Callable[..., Any]]]:
        return get_resolver_map(self.schema)


def _get_field_definition(schema: GraphQLSchema, parent: str, field_name: str) -> Optional[GraphQLField]:
    parent_type = schema.get_type(parent)
    fields = getattr(parent_type, 'fields', None)
    if not fields:
        return None
    return fields.get(field_name)


def _apply_resolvers_option(schema: GraphQLSchema, resolvers: ResolversOption) -> None:
    type_map = schema.type_map
    for parent_type, type_config in resolvers.items():
        if isinstance(type_config, GraphQLScalarType):
            target = type_map.get(parent_type)
            if not isinstance(target, GraphQLScalarType):
                raise GeneConfigError(f'No scalar definition found for "{parent_type}".')
            target.serialize = type_config.serialize  # type: ignore[method-assign]
            target.parse_value = type_config.parse_value  # type: ignore[method-assign]
            target.parse_literal = type_config.parse_literal  # type: ignore[method-assign]
            continue
        for field_name, resolver in type_config.items():
            field_def = _get_field_definition(schema, parent_type, field_name)
            if field_def is None:
                raise GeneConfigError(f'No field definition found for "{field_name}" of type "{parent_type}".')
            field_def.resolve = resolver


def _check_root_kinds(type_def_lines: TypeDefLines, base_schema: Optional[GraphQLSchema]) -> None:
    # Checked before graphql-core builds the schema
    for name in (QUERY_TYPE, MUTATION_TYPE):
        type_def = type_def_lines.get(name)
        declared_kind = type_def.var_type if type_def is not None and type_def.lines else None
        base_type = base_schema.get_type(name) if base_schema is not None else None
        if (declared_kind and declared_kind != 'type') or (
            base_type is not None and not isinstance(base_type, GraphQLObjectType)
        ):
            raise GeneConfigError(f'{name} type is not a GraphQLObjectType.')


def generate_schema(
    *,
    types: Mapping[str, Any],
    schema: SchemaOption = None,
    resolvers: Optional[ResolversOption] = None,
    plugins: Optional[Sequence[BasePlugin]] = None,
    data_type_map: Optional[Mapping[str, str]] = None,
    extensions: Optional[TypeExtensionRegistry] = None,
) -> GeneratedSchema:
    """Generate an executable schema from model and type declarations.

    Args:
        types: Type name -> model (matched by a plugin), enum value list or
            mapping of field configs (inline type).
        schema: Base schema (SDL, document, graphql-core or strawberry schema)
            extended by the generated definitions.
        resolvers: Type name -> scalar implementation, or mapping of field
            name -> graphql-core resolver ``(source, info, **args)``.
        plugins: Data technology plugins, tried in order.
        data_type_map: Native type name -> GraphQL type overrides for plugins.
        extensions: Type-extension registry (defaults to the global one).

    Raises:
        GeneConfigError: Invalid declarations (missing ``Query`` root,
            unknown where reference, conflicting arguments...).
    """
    resolvers = resolvers or {}
    plugins = list(plugins or [])
    extensions = extensions if extensions is not None else get_globally_extended_types()

    base_schema = parse_schema_option(schema)
    scalars = [name for name, config in resolvers.items() if isinstance(config, GraphQLScalarType)]
    schema_options = SchemaOptions(
        types=types,
        base_schema=base_schema,
        data_type_map=dict(data_type_map or {}),
        scalars=scalars,
    )

    synthesizer = _Synthesizer(
        types=types,
        plugins=plugins,
        schema_options=schema_options,
        extensions=extensions,
    )
    type_def_lines = synthesizer.run()

    existing_types = set(base_schema.type_map) if base_schema else set()
    existing_directives = {d.name for d in base_schema.directives} if base_schema else set()
    type_defs_string = stringify_type_def_lines(
        type_def_lines,
        synthesizer.directive_defs,
        existing_types=existing_types,
        existing_directives=existing_directives,
    )

    _check_root_kinds(type_def_lines, base_schema)
    if base_schema is None:
        built = build_schema(type_defs_string) if type_defs_string else GraphQLSchema()
    elif type_defs_string:
        built = extend_schema(base_schema, parse(type_defs_string))
    else:
        built = base_schema

    query_type = built.get_type(QUERY_TYPE)
    mutation_type = built.get_type(MUTATION_TYPE)
    if query_type is None:
        raise GeneConfigError('Query root type must be provided.')
    if not isinstance(query_type, GraphQLObjectType):
        raise GeneConfigError('Query type is not a GraphQLObjectType.')
    if mutation_type is not None and not isinstance(mutation_type, GraphQLObjectType):
        raise GeneConfigError('Mutation type is not a GraphQLObjectType.')

    _apply_resolvers_option(built, resolvers)

    executable = GraphQLSchema(
        **{
            **built.to_kwargs(),
            'query': query_type,
            'mutation': mutation_type,
        }
    )
    add_resolvers_to_schema(
        executable,
        field_configs=synthesizer.field_configs,
        models=synthesizer.models,
        plugins=plugins,
        extensions=extensions,
    )
    logger.info(
        'Generated schema with %d declared types (%d registry entries, %d directives)',
        len(types),
        len(type_def_lines),
        len(synthesizer.directive_defs),
    )
    return GeneratedSchema(schema=executable, type_def_lines=type_def_lines, type_defs_string=type_defs_string)
