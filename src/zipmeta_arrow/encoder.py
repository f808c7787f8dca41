"""Projection of archive metadata into an Arrow record batch."""

import logging
from datetime import datetime, timedelta, timezone
from typing import List, Optional

import pyarrow as pa

from .errors import EncodingError
from .model import UNIX_EPOCH, Zip

logger = logging.getLogger(__name__)

INT64_MAX = 2**63 - 1

ZIP_META_SCHEMA = pa.schema([
    pa.field("zip_id", pa.dictionary(pa.int8(), pa.string()), nullable=False),
    pa.field("item_name", pa.string(), nullable=False),
    pa.field("item_comment", pa.string(), nullable=False),
    pa.field("item_method", pa.uint8(), nullable=False),
    pa.field("item_modified", pa.timestamp("us"), nullable=True),
    pa.field("item_crc32", pa.uint32(), nullable=False),
    pa.field("item_compressed_size", pa.uint64(), nullable=False),
    pa.field("item_uncompressed_size", pa.uint64(), nullable=False),
])


def datetime_to_unix_duration(dt: datetime) -> Optional[timedelta]:
    """Time elapsed since the epoch, or None for instants before it.

    Naive datetimes are taken as UTC.
    """
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)

    duration = dt - UNIX_EPOCH
    if duration < timedelta(0):
        return None
    return duration


def duration_to_us(duration: timedelta) -> Optional[int]:
    """Whole microseconds in a duration, or None if it exceeds int64."""
    micros = duration // timedelta(microseconds=1)
    if micros > INT64_MAX:
        return None
    return micros


def datetime_to_unix_us(dt: datetime) -> Optional[int]:
    """Microseconds since the epoch, or None when not representable."""
    duration = datetime_to_unix_duration(dt)
    if duration is None:
        return None
    return duration_to_us(duration)


def zip_id_dictionary(zip_id: str, num_rows: int) -> pa.DictionaryArray:
    """Dictionary array holding ``zip_id`` once, referenced by every row."""
    indices = pa.array([0] * num_rows, type=pa.int8())
    dictionary = pa.array([zip_id], type=pa.string())
    return pa.DictionaryArray.from_arrays(indices, dictionary)


def zip_to_record_batch(z: Zip) -> pa.RecordBatch:
    """Encode one archive as a record batch with one row per entry.

    Args:
        z: Archive identifier and metadata

    Returns:
        Record batch matching ``ZIP_META_SCHEMA``

    Raises:
        EncodingError: If Arrow rejects the assembled columns
    """
    files = z.meta.files
    num_rows = len(files)

    item_names: List[str] = []
    item_comments: List[str] = []
    methods: List[int] = []
    item_modified: List[Optional[int]] = []
    crc32s: List[int] = []
    compressed_sizes: List[int] = []
    uncompressed_sizes: List[int] = []

    for f in files:
        item_names.append(f.name)
        item_comments.append(f.comment)
        methods.append(int(f.method))
        item_modified.append(datetime_to_unix_us(f.modified))
        crc32s.append(f.crc32)
        compressed_sizes.append(f.compressed_size)
        uncompressed_sizes.append(f.uncompressed_size)

    try:
        arrays = [
            zip_id_dictionary(z.zip_id, num_rows),
            pa.array(item_names, type=pa.string()),
            pa.array(item_comments, type=pa.string()),
            pa.array(methods, type=pa.uint8()),
            pa.array(item_modified, type=pa.timestamp("us")),
            pa.array(crc32s, type=pa.uint32()),
            pa.array(compressed_sizes, type=pa.uint64()),
            pa.array(uncompressed_sizes, type=pa.uint64()),
        ]
        batch = pa.RecordBatch.from_arrays(arrays, schema=ZIP_META_SCHEMA)
    except (pa.ArrowException, OverflowError) as e:
        raise EncodingError(
            f"Failed to build record batch: {e}", zip_id=z.zip_id, num_rows=num_rows
        ) from e

    logger.debug(f"Encoded {num_rows} rows for {z.zip_id}")
    return batch
