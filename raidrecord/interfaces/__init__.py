"""Protocols for RaidRecord's external collaborators."""

from .query_transport import QueryTransport

__all__ = ["QueryTransport"]
