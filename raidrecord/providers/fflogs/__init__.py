"""FFLogs provider package - transport, batch queries and reconciliation."""

from .client import FFLogsClient
from .query_builder import BatchQuery, VariableSet, build_batch_query
from .transport import AccessTokenProvider, FFLogsTransport

__all__ = [
    "AccessTokenProvider",
    "BatchQuery",
    "FFLogsClient",
    "FFLogsTransport",
    "VariableSet",
    "build_batch_query",
]
