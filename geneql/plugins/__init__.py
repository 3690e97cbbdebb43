from .base import BasePlugin, DefaultResolverOptions, PopulateOptions, PopulateResult, SchemaOptions
from .default import ClassPlugin

__all__ = [
    'BasePlugin', 'ClassPlugin', 'DefaultResolverOptions', 'PopulateOptions', 'PopulateResult', 'SchemaOptions',
]
