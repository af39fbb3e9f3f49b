"""Base class for Cassandra-backed repositories.

Repositories own their prepared statements and expose keyed reads and
upserts. Cassandra's INSERT is an upsert on the full primary key, so a
table whose primary key is the composite uniqueness key can never hold two
rows for the same key, whatever the interleaving of concurrent writers.
"""

from collections.abc import Sequence
from typing import TYPE_CHECKING, Any

import structlog
from cassandra import DriverException
from cassandra.cluster import NoHostAvailable

from src.core.exceptions import StoreError


if TYPE_CHECKING:
    from cassandra.cluster import Session


logger = structlog.get_logger(__name__)


class CassandraRepository:
    """Holds the session and wraps driver failures in ``StoreError``."""

    def __init__(self, session: "Session", keyspace: str):
        """Initialize with Cassandra session and prepare statements."""
        self.session = session
        self.keyspace = keyspace
        self._prepare_statements()

    def _prepare_statements(self) -> None:
        """Prepare CQL statements (implemented by subclasses)."""

    async def _execute(self, statement: Any, params: Sequence[Any]) -> Any:
        """Execute a prepared statement through ``session.aexecute``.

        Raises:
            StoreError: If the driver reports a failure or no host is reachable
        """
        try:
            return await self.session.aexecute(statement, params)
        except (DriverException, NoHostAvailable) as e:
            logger.error(
                "store_execute_failed",
                repository=type(self).__name__,
                error=str(e),
                error_type=type(e).__name__,
            )
            raise StoreError from e
