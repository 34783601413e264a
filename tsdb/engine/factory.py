"""
Backend selection from a configuration object.
"""

from tsdb.config import LMDBConfig
from tsdb.engine.lmdb_store import LMDBStore
from tsdb.interfaces.time_series_db import TimeSeriesDB
from tsdb.models.exceptions import InvalidArgumentError


def open_db(config: object) -> TimeSeriesDB:
    """
    Open the backend matching the type of ``config``.

    Args:
        config: A backend configuration, currently only LMDBConfig.

    Returns:
        An open store. Close it with ``await db.close()`` or ``async with``.

    Raises:
        InvalidArgumentError: If no backend accepts this configuration type.
    """
    if isinstance(config, LMDBConfig):
        return LMDBStore(config)
    raise InvalidArgumentError(
        f"Unsupported storage configuration: {type(config).__name__}"
    )
