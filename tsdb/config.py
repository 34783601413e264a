"""
Storage configuration.
"""

import os
from dataclasses import dataclass

from tsdb.models.exceptions import InvalidArgumentError
from tsdb.models.key_codec import KeyEncoding

# File permission used when mode is left at 0
DEFAULT_MODE = 0o600

# LMDB map size (upper bound of the data file), 1GB
DEFAULT_MAP_SIZE = 1024 * 1024 * 1024

# Every series is one LMDB named database; LMDB needs the maximum up front
DEFAULT_MAX_DBS = 1024


@dataclass
class LMDBConfig:
    """
    Settings for an LMDB-backed store.

    Attributes:
        path: Data file path. LMDB also creates ``<path>-lock`` beside it.
        mode: File permission bits; 0 selects DEFAULT_MODE (0600).
        map_size: Maximum size of the data file in bytes.
        max_dbs: Maximum number of series the file can hold.
        key_encoding: Timestamp key layout. Must stay the same for the
            lifetime of a data file.
    """

    path: str
    mode: int = 0
    map_size: int = DEFAULT_MAP_SIZE
    max_dbs: int = DEFAULT_MAX_DBS
    key_encoding: KeyEncoding = KeyEncoding.UNSIGNED

    def __post_init__(self) -> None:
        if isinstance(self.path, os.PathLike):
            self.path = os.fspath(self.path)
        if not isinstance(self.path, str) or not self.path.strip():
            raise InvalidArgumentError("path cannot be empty")

        if not 0 <= self.mode <= 0o777:
            raise InvalidArgumentError(f"mode must be within 0..0o777, got {oct(self.mode)}")

        if self.map_size <= 0:
            raise InvalidArgumentError(f"map_size must be positive, got {self.map_size}")

        if self.max_dbs <= 0:
            raise InvalidArgumentError(f"max_dbs must be positive, got {self.max_dbs}")

        try:
            self.key_encoding = KeyEncoding(self.key_encoding)
        except ValueError:
            raise InvalidArgumentError(
                f"Unknown key encoding: {self.key_encoding!r}"
            ) from None

    @property
    def file_mode(self) -> int:
        return self.mode or DEFAULT_MODE
