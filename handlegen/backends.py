"""
Backend token → driver handle mapping.

This is the single source of truth for which concrete driver types a backend
token stands for. The registry is fixed: generated code references these
types by name, so an unknown token is a hard generation-time failure rather
than something to recover from.
"""

from __future__ import annotations

import logging
from types import MappingProxyType
from typing import Mapping, Tuple

from .errors import UnsupportedBackend
from .ir.spec import BackendMapping

__all__ = ["BACKENDS", "resolve_backend", "supported_backends"]

logger = logging.getLogger(__name__)


BACKENDS: Mapping[str, BackendMapping] = MappingProxyType({
    "Postgres": BackendMapping(
        backend="Postgres",
        direct_handle_type="asyncpg.Connection",
        pooled_handle_type="asyncpg.Pool",
        module="asyncpg",
        requirement="asyncpg>=0.29",
    ),
    "MySql": BackendMapping(
        backend="MySql",
        direct_handle_type="aiomysql.Connection",
        pooled_handle_type="aiomysql.Pool",
        module="aiomysql",
        requirement="aiomysql>=0.2",
    ),
})


def supported_backends() -> Tuple[str, ...]:
    return tuple(BACKENDS)


def resolve_backend(
    token: str,
    *,
    path: str | None = None,
    line: int | None = None,
    symbol: str | None = None,
) -> BackendMapping:
    """Return the mapping for ``token`` (exact, case-sensitive match)."""
    mapping = BACKENDS.get(token)
    if mapping is None:
        raise UnsupportedBackend(token, supported_backends(), path=path, line=line, symbol=symbol)
    logger.debug("Resolved backend %s to %s / %s", token, mapping.direct_handle_type, mapping.pooled_handle_type)
    return mapping
