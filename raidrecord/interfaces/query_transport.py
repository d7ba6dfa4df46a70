"""QueryTransport protocol for RaidRecord - the single network operation the core consumes."""

from typing import Any, Protocol


class QueryTransport(Protocol):
    """Executes GraphQL documents against the FFLogs API.

    Implementations must raise TransportError on a non-success HTTP status or
    on a GraphQL error list accompanied by no data. Partial data with errors is
    returned as-is. Timeouts are the implementation's responsibility.
    """

    async def execute_query(
        self,
        query: str,
        variables: dict[str, Any] | None = None,
        include_rate_limit: bool = False,
    ) -> dict[str, Any]:
        """Execute a query and return its ``data`` object.

        Args:
            query: GraphQL document
            variables: Variable values for the document
            include_rate_limit: Also select ``rateLimitData`` at the root

        Returns:
            The response ``data`` object (possibly partial)
        """
        ...
