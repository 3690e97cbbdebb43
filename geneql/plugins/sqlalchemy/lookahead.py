from __future__ import annotations

from typing import Any, Dict, List, Optional

from graphql import FieldNode, FragmentSpreadNode, GraphQLResolveInfo, InlineFragmentNode, SelectionSetNode
from sqlalchemy import inspect as sa_inspect
from sqlalchemy.orm import selectinload

__all__ = ['QueryInclude', 'get_query_include', 'get_loader_options']

# Selected field name -> nested selections, for fields with a selection set
QueryInclude = Dict[str, 'QueryInclude']


def _walk(selection_set: Optional[SelectionSetNode], info: GraphQLResolveInfo, out: QueryInclude) -> None:
    if selection_set is None:
        return
    for selection in selection_set.selections:
        if isinstance(selection, FieldNode):
            if selection.selection_set is None or selection.name.value.startswith('__'):
                continue
            _walk(selection.selection_set, info, out.setdefault(selection.name.value, {}))
        elif isinstance(selection, InlineFragmentNode):
            _walk(selection.selection_set, info, out)
        elif isinstance(selection, FragmentSpreadNode):
            fragment = info.fragments.get(selection.name.value)
            if fragment is not None:
                _walk(fragment.selection_set, info, out)


def get_query_include(info: GraphQLResolveInfo) -> QueryInclude:
    """Nested fields requested below the resolved field.

    Example:
        # { orders { items { product { name } } } } resolved at `orders`
        get_query_include(info)  # {'items': {'product': {}}}
    """
    include: QueryInclude = {}
    for field_node in info.field_nodes:
        _walk(field_node.selection_set, info, include)
    return include


def get_loader_options(model: Any, include: QueryInclude) -> List[Any]:
    """``selectinload`` options for the single-valued associations of ``include``.

    Collections are left out: they are fetched by their own field resolver.
    """
    relationships = sa_inspect(model).relationships
    options = []
    for key, nested in include.items():
        if key not in relationships:
            continue
        relationship = relationships[key]
        if relationship.uselist:
            continue
        loader = selectinload(getattr(model, key))
        nested_options = get_loader_options(relationship.mapper.class_, nested)
        if nested_options:
            loader = loader.options(*nested_options)
        options.append(loader)
    return options
