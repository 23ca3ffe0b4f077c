from __future__ import annotations


class DomainError(Exception):
    """Base for domain errors."""


class UnsupportedChainError(DomainError):
    """Requested chain is not in the chain registry."""


class PoolNotFoundError(DomainError):
    """Requested pool does not exist on the data source."""


class PoolListInputError(DomainError):
    """Invalid parameters for a pool listing."""


class InvalidPositionInputError(DomainError):
    """Invalid parameters for a position APR estimate."""


class PoolDataSourceError(DomainError):
    """The upstream pool data source failed or returned an unusable payload."""
