from __future__ import annotations

import inspect
from typing import Any

from ..config import FieldConfig
from ..core.lines import FieldLine, TypeDefinition
from ..core.utils import normalize_field_config
from .base import BasePlugin, PopulateOptions

__all__ = ['ClassPlugin', 'plugin']


class ClassPlugin(BasePlugin):
    """Describe plain classes whose attributes are field signatures.

    Example:
        class Address:
            street = 'String!'
            city = 'String'
            label = FieldConfig(return_type='String', resolver=lambda p: p.source['street'])
            short = FieldConfig(return_type='String', args={'size': 'Int'}, resolver=...)

    Any class matches, so list this plugin after the technology specific ones.
    """

    name = 'class'

    def is_matching(self, model: Any) -> bool:
        return inspect.isclass(model)

    def get_type_def(self, options: PopulateOptions) -> TypeDefinition:
        type_def = TypeDefinition()
        for field_key, value in vars(options.model).items():
            if field_key.startswith('_') or not isinstance(value, (str, FieldConfig)):
                continue
            if not options.is_field_included(field_key):
                continue
            config = normalize_field_config(value)
            if not config.return_type:
                continue
            type_def.lines[field_key] = FieldLine(type_def=config.return_type)
            if isinstance(value, FieldConfig) and (value.resolver or value.args or value.directives):
                options.field_configs[field_key] = value
        return type_def


def plugin() -> ClassPlugin:
    return ClassPlugin()
