"""Error types raised by geneql.

Configuration errors are raised while the schema is generated and are meant to
abort application startup. Errors raised while resolving a field (resolvers,
directives, default data fetching) are left to graphql-core, which reports them
at the field path.
"""
from __future__ import annotations

__all__ = ['GeneError', 'GeneConfigError']


class GeneError(Exception):
    """Base class for geneql errors."""


class GeneConfigError(GeneError, ValueError):
    """Invalid type, field, directive or plugin configuration."""
