"""Type-extension registry.

Fields can be added to any type (``Query``, ``Mutation`` or a model type)
outside of the model declarations with :func:`extend_types`. Registrations
are collected during application bootstrap (single writer phase) and only read
once the schema is generated; the registry takes no locks.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, Mapping, Optional

from .config import GeneConfig
from .errors import GeneConfigError

logger = logging.getLogger(__name__)

__all__ = [
    'TypeExtensionRegistry',
    'get_globally_extended_types',
    'extend_types',
]


class TypeExtensionRegistry:
    """Accumulates field configurations per type name.

    Besides the extensions themselves, the registry keeps the
    :class:`GeneConfig` of every exposed type name (aliases included) so the
    resolver wiring can find type-level directives from a type name alone.
    """

    def __init__(self) -> None:
        self.config: Dict[str, Dict[str, Any]] = {}
        self.gene_config: Dict[str, GeneConfig] = {}
        self.aliases: Dict[str, str] = {}

    def extend(self, type_name: str, field_configs: Mapping[str, Any]) -> None:
        """Merge ``field_configs`` into the fields registered for ``type_name``.

        Existing fields are kept; a field registered again is replaced.
        """
        if not isinstance(field_configs, Mapping):
            raise GeneConfigError(f'Provided field config for type "{type_name}" must be an object.')
        merged = self.config.setdefault(type_name, {})
        merged.update(field_configs)
        logger.debug('Extended type %s with fields %s', type_name, list(field_configs))

    def get_all(self) -> Dict[str, Dict[str, Any]]:
        return self.config

    def set_gene_config_for_type(
        self,
        type_name: str,
        gene_config: Optional[GeneConfig],
        *,
        alias_of: Optional[str] = None,
    ) -> None:
        if alias_of is not None:
            self.aliases[type_name] = alias_of
        if gene_config is None:
            return
        self.gene_config[type_name] = gene_config

    def get_gene_config_for_type(self, type_name: str) -> Optional[GeneConfig]:
        return self.gene_config.get(type_name)

    def alias_target(self, type_name: str) -> Optional[str]:
        """Primary type name of an alias, ``None`` for non-alias types."""
        return self.aliases.get(type_name)

    def clear(self) -> None:
        self.config.clear()
        self.gene_config.clear()
        self.aliases.clear()


_GLOBAL_REGISTRY: Optional[TypeExtensionRegistry] = None


def get_globally_extended_types() -> TypeExtensionRegistry:
    """Process-wide registry, created on first access."""
    global _GLOBAL_REGISTRY
    if _GLOBAL_REGISTRY is None:
        _GLOBAL_REGISTRY = TypeExtensionRegistry()
    return _GLOBAL_REGISTRY


def extend_types(types: Mapping[str, Mapping[str, Any]]) -> None:
    """Add fields to types of the generated schema.

    Example:
        extend_types({
            'Query': {
                'order': FieldConfig(return_type='Order', resolver='default'),
            },
            'Order': {
                'label': FieldConfig(
                    return_type='String!',
                    args={'prefix': 'String!'},
                    resolver=lambda p: f"{p.args['prefix']}{p.source.status}",
                ),
            },
        })
    """
    registry = get_globally_extended_types()
    for type_name, field_configs in types.items():
        registry.extend(type_name, field_configs)
