from __future__ import annotations

import re
import weakref
from typing import Any, Callable, List, Mapping, Optional, Sequence

from ..config import Directive, FieldConfig, GeneConfig
from ..constants import TIMESTAMP_FIELDS
from ..errors import GeneConfigError

__all__ = [
    'normalize_field_config',
    'get_gene_config',
    'is_field_included',
    'resolve_directives',
    'get_graphql_type',
    'is_enum_config',
    'is_object_config',
]

_resolved_thunks: 'weakref.WeakKeyDictionary[Callable[[], Any], Any]' = weakref.WeakKeyDictionary()


def _evaluate_thunk(thunk: Callable[[], Any]) -> Any:
    try:
        return _resolved_thunks[thunk]
    except KeyError:
        value = _resolved_thunks[thunk] = thunk()
        return value
    except TypeError:  # not weak-referenceable
        return thunk()


def resolve_directives(directives: Any) -> List[Directive]:
    """Normalize a directive option into a list of :class:`Directive`.

    Accepts a sequence of directives, a zero-argument callable returning one,
    and zero-argument callables in place of individual directives. Every thunk
    is evaluated once and memoized.
    """
    if directives is None:
        return []
    if callable(directives) and not isinstance(directives, Directive):
        directives = _evaluate_thunk(directives)
    out: List[Directive] = []
    for entry in directives or ():
        if not isinstance(entry, Directive) and callable(entry):
            entry = _evaluate_thunk(entry)
        if not isinstance(entry, Directive):
            raise GeneConfigError(f'Expected a Directive, got {entry!r}.')
        out.append(entry)
    return out


def normalize_field_config(field_config: Any) -> FieldConfig:
    """Turn the accepted field config forms into a :class:`FieldConfig`.

    ``'String!'`` -> ``FieldConfig(return_type='String!')``; dicts use the
    ``FieldConfig`` attribute names.
    """
    if isinstance(field_config, FieldConfig):
        return field_config
    if field_config is None or isinstance(field_config, str):
        return FieldConfig(return_type=field_config or '')
    if isinstance(field_config, Mapping):
        try:
            return FieldConfig(**field_config)
        except TypeError as e:
            raise GeneConfigError(f'Invalid field config {dict(field_config)!r}: {e}') from e
    raise GeneConfigError(f'Unsupported field config form: {field_config!r}')


def get_gene_config(model: Any, gene_config: Optional[GeneConfig] = None) -> Optional[GeneConfig]:
    if gene_config is not None:
        return gene_config
    if isinstance(model, Mapping):
        config = model.get('gene_config')
    else:
        config = getattr(model, 'gene_config', None)
    return config if isinstance(config, GeneConfig) else None


def _matches(filters: Sequence[Any], field_key: str) -> bool:
    for key_or_regex in filters:
        if isinstance(key_or_regex, str) and key_or_regex == field_key:
            return True
        if isinstance(key_or_regex, re.Pattern) and key_or_regex.search(field_key):
            return True
    return False


def is_field_included(gene_config: Optional[GeneConfig], field_key: str) -> bool:
    config = gene_config or GeneConfig()

    if config.include is not None and not _matches(config.include, field_key):
        return False

    extra_exclude = set(TIMESTAMP_FIELDS)
    if config.include_timestamps is True:
        extra_exclude = set()
    elif isinstance(config.include_timestamps, (list, tuple, set)):
        extra_exclude.difference_update(config.include_timestamps)

    return not _matches([*(config.exclude or []), *extra_exclude], field_key)


def get_graphql_type(value: Any) -> str:
    """Minimal GraphQL kind of a directive argument literal."""
    # bool before int: bool is an int subclass
    if isinstance(value, bool):
        return 'Boolean'
    if isinstance(value, int):
        return 'Int'
    if isinstance(value, float):
        return 'Float'
    if isinstance(value, str):
        return 'String'
    if isinstance(value, (list, tuple)):
        inner = {get_graphql_type(v) for v in value if v is not None}
        if len(inner) > 1:
            raise GeneConfigError(f'Directive argument list mixes types: {value!r}')
        return f"[{inner.pop() if inner else 'String'}]"
    raise GeneConfigError(f'Unsupported directive argument value: {value!r}')


def is_enum_config(config: Any) -> bool:
    return isinstance(config, (list, tuple)) and all(isinstance(v, str) for v in config)


def is_object_config(config: Any) -> bool:
    return isinstance(config, Mapping)
