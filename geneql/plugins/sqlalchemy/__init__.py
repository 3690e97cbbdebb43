"""SQLAlchemy plugin: mapped classes as GraphQL types with a default resolver.

Example:
    schema = generate_schema(
        types={'Order': Order, 'OrderItem': OrderItem, 'Product': Product},
        plugins=[SQLAlchemyPlugin()],
    )
    await graphql(schema.schema, query, context_value={'db_session': session})
"""
from __future__ import annotations

import inspect
from typing import Any, Callable, Mapping, Optional

from ..base import BasePlugin, DefaultResolverOptions, PopulateOptions, PopulateResult
from .lookahead import get_loader_options, get_query_include
from .populate import populate_type_defs
from .resolver import default_resolver, default_session_getter

__all__ = ['SQLAlchemyPlugin', 'plugin', 'get_query_include', 'get_loader_options']


class SQLAlchemyPlugin(BasePlugin):
    """Serve SQLAlchemy mapped classes.

    Args:
        session_getter: ``fn(context) -> Session | AsyncSession``. Defaults to
            ``context['db_session']``.
        data_type_map: SQLAlchemy type class name -> GraphQL type overrides.
    """

    name = 'sqlalchemy'

    def __init__(
        self,
        *,
        session_getter: Optional[Callable[[Any], Any]] = None,
        data_type_map: Optional[Mapping[str, str]] = None,
    ) -> None:
        self.session_getter = session_getter or default_session_getter
        self.data_type_map = dict(data_type_map or {})

    def is_matching(self, model: Any) -> bool:
        return inspect.isclass(model) and hasattr(model, '__mapper__') and hasattr(model, '__table__')

    def populate_type_defs(self, options: PopulateOptions) -> PopulateResult:
        return populate_type_defs(options, self.data_type_map)

    def supports_default_resolver(self) -> bool:
        return True

    async def default_resolver(self, options: DefaultResolverOptions) -> Any:
        return await default_resolver(options, self.session_getter)


def plugin(**kwargs: Any) -> SQLAlchemyPlugin:
    return SQLAlchemyPlugin(**kwargs)
