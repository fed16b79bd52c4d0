from __future__ import annotations

from typing import TYPE_CHECKING

from ..core.enums import EndpointRole
from ..core.exceptions import NoWriterInstanceError
from ..logger import get_logger
from .config import (
    DatabaseCredentials,
    DialectOptions,
    HostConfig,
    PoolSettings,
    ReplicationConfig,
    ReplicationTopology,
    RetrySettings,
)

if TYPE_CHECKING:
    from collections.abc import Sequence

    from structlog.stdlib import BoundLogger

    from ..discovery.models import NormalizedEndpoint

logger: BoundLogger = get_logger(__name__)


def partition_endpoints(
    endpoints: Sequence[NormalizedEndpoint],
    include_global_readers: bool = False,
) -> tuple[NormalizedEndpoint, list[NormalizedEndpoint]]:
    """Split endpoints into the writer and the readers.

    The writer is the first ``write`` endpoint. Readers are all ``read``
    endpoints, plus ``global`` endpoints when ``include_global_readers`` is
    set, in input order.

    Raises
    ------
    NoWriterInstanceError
        If no endpoint has the ``write`` role.
    """
    writer = next((e for e in endpoints if e.role is EndpointRole.WRITE), None)
    if writer is None:
        raise NoWriterInstanceError(len(endpoints))

    reader_roles = {EndpointRole.READ, EndpointRole.GLOBAL} if include_global_readers else {EndpointRole.READ}
    readers = [e for e in endpoints if e.role in reader_roles]
    return writer, readers


def build_config(
    endpoints: Sequence[NormalizedEndpoint],
    credentials: DatabaseCredentials | None = None,
    *,
    pool: PoolSettings | None = None,
    retry: RetrySettings | None = None,
    dialect_options: DialectOptions | None = None,
    include_global_readers: bool = False,
    log_statements: bool = False,
) -> ReplicationConfig:
    """Build the replication config for a set of classified endpoints.

    Parameters
    ----------
    endpoints
        Classified endpoints of one cluster.
    credentials
        Database name and login. When omitted they are read from the
        ``AURORA_DB_*`` environment variables.
    pool, retry, dialect_options
        Overrides for the default pool bounds, retry policy and dialect
        options.
    include_global_readers
        Also route reads to endpoints classified ``global``.
    log_statements
        Value of the config's ``logging`` flag.

    Returns
    -------
    ReplicationConfig
        A new config. Equal inputs always yield equal configs.

    Raises
    ------
    NoWriterInstanceError
        If no endpoint has the ``write`` role.
    CredentialsNotConfiguredError
        If ``credentials`` is None and the environment does not provide them.

    Examples
    --------
    >>> config = build_config(
    ...     endpoints,
    ...     DatabaseCredentials(database="db", username="u", password=SecretStr("p")),
    ... )
    >>> config.replication.write.host
    'w1.example.com'
    """
    writer, readers = partition_endpoints(endpoints, include_global_readers)
    creds = DatabaseCredentials.resolve(credentials)

    config = ReplicationConfig(
        pool=pool or PoolSettings(),
        replication=ReplicationTopology(
            write=HostConfig.with_credentials(writer.endpoint, writer.port, creds),
            read=tuple(HostConfig.with_credentials(r.endpoint, r.port, creds) for r in readers),
        ),
        retry=retry or RetrySettings(),
        logging=log_statements,
        dialect_options=dialect_options or DialectOptions(),
    )

    logger.info(
        "Built replication config",
        writer=writer.id,
        reader_count=len(readers),
        include_global_readers=include_global_readers,
    )
    return config
