"""Value types describing one ZIP archive and its entries."""

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import IntEnum
from typing import Tuple

UNIX_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


class Method(IntEnum):
    """Compression methods represented in the table.

    Values are the ZIP method tags and double as the ``item_method`` column value.
    """
    STORE = 0
    DEFLATE = 8


@dataclass(frozen=True)
class ZipItemMeta:
    """Metadata of one archive member."""
    name: str
    comment: str
    method: Method
    modified: datetime  # UTC; UNIX_EPOCH when the archive had no usable timestamp
    crc32: int
    compressed_size: int
    uncompressed_size: int


@dataclass(frozen=True)
class ZipFileMeta:
    """Archive-level comment plus entries in central directory order."""
    comment: str = ""
    files: Tuple[ZipItemMeta, ...] = ()


@dataclass(frozen=True)
class Zip:
    """An archive identifier paired with its metadata."""
    zip_id: str
    meta: ZipFileMeta
