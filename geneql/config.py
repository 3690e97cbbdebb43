"""Declarative configuration objects.

Models, inline types and type extensions are described with plain data: a
:class:`GeneConfig` attached to a model (``gene_config`` attribute) for the
type-level policy, and :class:`FieldConfig` entries for individual fields.

Example:
    class Order(Base):
        __tablename__ = 'orders'
        ...
        gene_config = GeneConfig(include_timestamps=['updated_at'])

    extend_types({
        'Query': {
            'order': FieldConfig(return_type='Order', resolver='default'),
        },
    })
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Mapping, Optional, Pattern, Sequence, Union

from .constants import DEFAULT_RESOLVER

__all__ = [
    'Directive',
    'DirectiveParams',
    'ResolverParams',
    'FieldConfig',
    'GeneConfig',
    'define_directive',
    'define_field',
    'define_gene_config',
    'define_type',
    'define_input',
    'define_enum',
    'define_union',
]

DirectiveArgValue = Union[str, int, float, bool, None, Sequence[Union[str, int, float, bool]]]
FieldFilter = Union[str, Pattern[str]]


@dataclass
class ResolverParams:
    """Arguments handed to field resolvers.

    Attributes:
        source: Parent value (``None`` on root types).
        args: GraphQL arguments of the field.
        context: ``info.context`` of the running operation.
        info: graphql-core ``GraphQLResolveInfo``.
    """

    source: Any
    args: Dict[str, Any]
    context: Any
    info: Any


@dataclass
class DirectiveParams(ResolverParams):
    """Arguments handed to directive handlers.

    Attributes:
        field: Name of the field being resolved.
        filter: ``filter(predicate)`` drops rejected entries of a list result,
            or turns a rejected scalar result into ``None``.
        resolve: Awaitable running the next resolver of the chain. It may be
            called any number of times; when the handler never calls it, it
            runs once after the handler completes.
    """

    field: str = ''
    filter: Callable[[Callable[[Any], Any]], None] = None  # type: ignore[assignment]
    resolve: Callable[[], Any] = None  # type: ignore[assignment]


@dataclass(frozen=True)
class Directive:
    """A directive invocation: name, literal arguments and middleware handler.

    The handler receives a :class:`DirectiveParams` and may be sync or async.
    """

    name: str
    handler: Callable[[DirectiveParams], Any]
    args: Optional[Mapping[str, DirectiveArgValue]] = None


def define_directive(factory: Callable[..., Directive]) -> Callable[..., Directive]:
    """Declare a directive factory; the factory is returned unchanged.

    Example:
        @define_directive
        def sanitize_color(exclude=()):
            async def handler(params):
                params.filter(lambda color: not any(c in (color or '') for c in exclude))
            return Directive('sanitizeColor', handler, {'exclude': list(exclude)})
    """
    return factory


DirectivesOption = Union[
    Sequence[Union[Directive, Callable[[], Directive]]],
    Callable[[], Sequence[Union[Directive, Callable[[], Directive]]]],
    None,
]


@dataclass
class FieldConfig:
    """Configuration of a single field.

    Attributes:
        return_type: GraphQL signature of the field, e.g. ``'[Order!]!'``.
        args: Mapping of argument name to signature, or ``'default'`` to
            receive the default resolver arguments (pagination, where, order).
        resolver: Callable receiving :class:`ResolverParams` (sync or async),
            or ``'default'`` to fetch data through the model's plugin.
        directives: Field-level directives, outermost first.
        find_options: Optional hook ``fn(statement, params)`` returning an
            updated data-fetch statement for the default resolver.
        model: Model served by the default resolver. Defaults to the model
            registered under the return type name.
        association: Name of the model association this field follows. Set by
            plugins for association fields.
    """

    return_type: str = ''
    args: Union[Mapping[str, str], str, None] = None
    resolver: Union[Callable[[ResolverParams], Any], str, None] = None
    directives: DirectivesOption = None
    find_options: Optional[Callable[[Any, ResolverParams], Any]] = None
    model: Any = None
    association: Optional[str] = None

    @property
    def uses_default_resolver(self) -> bool:
        return self.resolver == DEFAULT_RESOLVER or (self.args == DEFAULT_RESOLVER and not callable(self.resolver))

    @property
    def uses_default_args(self) -> bool:
        return self.resolver == DEFAULT_RESOLVER or self.args == DEFAULT_RESOLVER


@dataclass
class GeneConfig:
    """Type-level policy of a model or inline type.

    Attributes:
        include: Field names or regular expressions to keep (default: all).
        exclude: Field names or regular expressions to drop.
        include_timestamps: ``True`` to keep ``created_at``/``updated_at``, or
            a list of the ones to keep (default: both excluded).
        var_type: GraphQL variant kind (``type``, ``input``, ``enum``, ``union``...).
        directives: Type-level directives, or a zero-argument callable returning
            them (evaluated once, useful to break import cycles).
        aliases: Alternate type names exposing the same model with their own
            nested configuration (e.g. ``AuthenticatedUser`` for ``User``).
        types: Deprecated: field extensions scoped to this model. Prefer
            :func:`geneql.extend_types`.
        find_options: Statement hook applied by the default resolver when
            fetching this model.
    """

    include: Optional[List[FieldFilter]] = None
    exclude: Optional[List[FieldFilter]] = None
    include_timestamps: Union[bool, List[str]] = False
    var_type: Optional[str] = None
    directives: DirectivesOption = None
    aliases: Dict[str, 'GeneConfig'] = field(default_factory=dict)
    types: Dict[str, Dict[str, Any]] = field(default_factory=dict)
    find_options: Optional[Callable[[Any, ResolverParams], Any]] = None


def define_gene_config(model: Any = None, **options: Any) -> GeneConfig:
    """Build a :class:`GeneConfig`; the model argument only documents intent."""
    return GeneConfig(**options)


def define_field(
    return_type: str,
    *,
    args: Union[Mapping[str, str], str, None] = None,
    resolver: Union[Callable[[ResolverParams], Any], str, None] = None,
    directives: DirectivesOption = None,
    find_options: Optional[Callable[[Any, ResolverParams], Any]] = None,
) -> FieldConfig:
    return FieldConfig(
        return_type=return_type,
        args=args,
        resolver=resolver,
        directives=directives,
        find_options=find_options,
    )


def define_type(fields: Mapping[str, Any], gene_config: Optional[GeneConfig] = None) -> Dict[str, Any]:
    """Declare an inline object type (not backed by any data technology).

    Example:
        ProductReviewAverage = define_type({'rating': 'Float', 'total': 'Int'})
    """
    config: Dict[str, Any] = dict(fields)
    if gene_config is not None:
        config['gene_config'] = gene_config
    return config


def define_input(fields: Mapping[str, Any]) -> Dict[str, Any]:
    return define_type(fields, GeneConfig(var_type='input'))


def define_enum(values: Sequence[str]) -> List[str]:
    return list(values)


def define_union(members: Sequence[str]) -> Dict[str, Any]:
    config: Dict[str, Any] = {member: '' for member in members}
    config['gene_config'] = GeneConfig(var_type='union')
    return config
