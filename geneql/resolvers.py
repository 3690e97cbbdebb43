"""Resolver wiring of a built schema.

Every field reachable from ``Query`` and ``Mutation`` is visited once (types
are walked breadth first). A field receives a resolver when it was declared
with one, when it uses the default resolver of its model's plugin, or when
directives apply to it. Directives are middleware: the first declared runs
first and decides when the rest of the chain runs through ``resolve()``.
"""
from __future__ import annotations

import inspect
import logging
from collections import deque
from dataclasses import dataclass
from typing import Any, Callable, Deque, Dict, List, Mapping, Optional, Sequence

from graphql import (
    GraphQLField,
    GraphQLInterfaceType,
    GraphQLList,
    GraphQLNamedType,
    GraphQLNonNull,
    GraphQLObjectType,
    GraphQLSchema,
    GraphQLUnionType,
    default_field_resolver,
    get_named_type,
)

from .config import Directive, DirectiveParams, FieldConfig, ResolverParams
from .core.utils import get_gene_config, resolve_directives
from .errors import GeneConfigError
from .extend import TypeExtensionRegistry
from .plugins.base import BasePlugin, DefaultResolverOptions

logger = logging.getLogger(__name__)

__all__ = [
    'FieldVisit',
    'ModelEntry',
    'look_deep_in_schema',
    'add_resolvers_to_schema',
    'compose_directives',
    'get_resolver_map',
]


@dataclass
class ModelEntry:
    """Model exposed under a type name, with the plugin serving it."""

    model: Any
    model_key: str
    plugin: BasePlugin


@dataclass
class FieldVisit:
    field: str
    field_def: GraphQLField
    parent_type: str
    parent_type_def: GraphQLNamedType
    type: str
    type_def: GraphQLNamedType

    @property
    def is_list(self) -> bool:
        field_type = self.field_def.type
        if isinstance(field_type, GraphQLNonNull):
            field_type = field_type.of_type
        return isinstance(field_type, GraphQLList)


def look_deep_in_schema(schema: GraphQLSchema, each: Callable[[FieldVisit], None]) -> None:
    """Call ``each`` for every field reachable from the root operation types.

    Types are visited breadth first, each named type once. Union members are
    walked as well.
    """
    roots = [t for t in (schema.query_type, schema.mutation_type) if t is not None]
    queue: Deque[GraphQLNamedType] = deque(roots)
    checked = set()

    while queue:
        parent = queue.popleft()
        if parent.name in checked:
            continue
        checked.add(parent.name)

        if isinstance(parent, GraphQLUnionType):
            queue.extend(schema.get_possible_types(parent))
            continue

        for field_name, field_def in parent.fields.items():
            named_type = get_named_type(field_def.type)
            each(FieldVisit(
                field=field_name,
                field_def=field_def,
                parent_type=parent.name,
                parent_type_def=parent,
                type=named_type.name,
                type_def=named_type,
            ))
            if isinstance(named_type, (GraphQLObjectType, GraphQLInterfaceType, GraphQLUnionType)):
                queue.append(named_type)


def _to_resolver(fn: Callable[[ResolverParams], Any]) -> Callable[..., Any]:
    def resolve(source, info, **args):
        # graphql-core awaits the result when it is awaitable
        return fn(ResolverParams(source=source, args=args, context=info.context, info=info))

    return resolve


def _apply_filters(result: Any, filters: List[Callable[[Any], Any]]) -> Any:
    if not filters:
        return result
    if isinstance(result, list):
        result[:] = [entry for entry in result if all(pick(entry) for pick in filters)]
        return result
    if isinstance(result, tuple):
        return [entry for entry in result if all(pick(entry) for pick in filters)]
    if result is not None and not all(pick(result) for pick in filters):
        return None
    return result


def _wrap_with_directive(directive: Directive, previous: Callable[..., Any], field_name: str) -> Callable[..., Any]:
    async def resolve(source, info, **args):
        called = False
        result = None
        filters: List[Callable[[Any], Any]] = []

        async def next_resolve():
            nonlocal called, result
            called = True
            result = previous(source, info, **args)
            if inspect.isawaitable(result):
                result = await result
            return result

        params = DirectiveParams(
            source=source,
            args=args,
            context=info.context,
            info=info,
            field=field_name,
            filter=filters.append,
            resolve=next_resolve,
        )
        outcome = directive.handler(params)
        if inspect.isawaitable(outcome):
            await outcome
        if not called:
            await next_resolve()
        return _apply_filters(result, filters)

    return resolve


def compose_directives(
    directives: Sequence[Directive],
    resolve: Optional[Callable[..., Any]],
    field_name: str,
) -> Callable[..., Any]:
    """Wrap ``resolve`` so the first directive of ``directives`` runs first."""
    composed = resolve or default_field_resolver
    for directive in reversed(directives):
        composed = _wrap_with_directive(directive, composed, field_name)
    return composed


def _collect_directives(
    extensions: TypeExtensionRegistry,
    type_name: str,
    config: Optional[FieldConfig],
) -> List[Directive]:
    directives: List[Directive] = []
    primary = extensions.alias_target(type_name)
    if primary is not None:
        primary_config = extensions.get_gene_config_for_type(primary)
        if primary_config is not None:
            directives.extend(resolve_directives(primary_config.directives))
    type_config = extensions.get_gene_config_for_type(type_name)
    if type_config is not None:
        directives.extend(resolve_directives(type_config.directives))
    if config is not None:
        directives.extend(resolve_directives(config.directives))
    return directives


def _find_model_entry(
    visit: FieldVisit,
    config: FieldConfig,
    models: Mapping[str, ModelEntry],
    plugins: Sequence[BasePlugin],
) -> ModelEntry:
    if config.model is not None:
        for entry in models.values():
            if entry.model is config.model:
                return entry
        for plugin in plugins:
            if plugin.is_matching(config.model):
                return ModelEntry(model=config.model, model_key=visit.type, plugin=plugin)
    elif visit.type in models:
        return models[visit.type]
    raise GeneConfigError(
        f'Cannot find a model served by a plugin for the default resolver of '
        f'"{visit.parent_type}.{visit.field}" (returning "{visit.type}").'
    )


def _to_default_resolver(entry: ModelEntry, config: FieldConfig, visit: FieldVisit) -> Callable[..., Any]:
    if not entry.plugin.supports_default_resolver():
        raise GeneConfigError(
            f'Plugin "{entry.plugin.name}" cannot serve the default resolver of "{visit.parent_type}.{visit.field}".'
        )
    plugin = entry.plugin
    gene_config = get_gene_config(entry.model)

    async def resolve(source, info, **args):
        return await plugin.default_resolver(DefaultResolverOptions(
            model=entry.model,
            model_key=entry.model_key,
            config=config,
            args=args,
            info=info,
            source=source,
            gene_config=gene_config,
        ))

    return resolve


def add_resolvers_to_schema(
    schema: GraphQLSchema,
    *,
    field_configs: Mapping[str, Mapping[str, FieldConfig]],
    models: Mapping[str, ModelEntry],
    plugins: Sequence[BasePlugin],
    extensions: TypeExtensionRegistry,
) -> GraphQLSchema:
    """Install resolvers and directive chains on ``schema`` in place."""

    def each(visit: FieldVisit) -> None:
        config = field_configs.get(visit.parent_type, {}).get(visit.field)
        resolve = None
        if config is not None:
            if callable(config.resolver):
                resolve = _to_resolver(config.resolver)
            elif config.uses_default_resolver:
                entry = _find_model_entry(visit, config, models, plugins)
                resolve = _to_default_resolver(entry, config, visit)

        directives = _collect_directives(extensions, visit.type, config)
        if resolve is None and not directives:
            return
        if resolve is not None:
            visit.field_def.resolve = resolve
        if directives:
            logger.debug(
                'Wrapping %s.%s with directives %s',
                visit.parent_type,
                visit.field,
                [d.name for d in directives],
            )
            visit.field_def.resolve = compose_directives(directives, visit.field_def.resolve, visit.field)

    look_deep_in_schema(schema, each)
    return schema


def get_resolver_map(schema: GraphQLSchema) -> Dict[str, Dict[str, Callable[..., Any]]]:
    """Flat ``{type: {field: resolve}}`` view of the wired schema."""
    resolvers: Dict[str, Dict[str, Callable[..., Any]]] = {}

    def each(visit: FieldVisit) -> None:
        if visit.field_def.resolve is None:
            return
        resolvers.setdefault(visit.parent_type, {})[visit.field] = visit.field_def.resolve

    look_deep_in_schema(schema, each)
    return resolvers
