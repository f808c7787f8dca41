"""Reading ZIP archives into metadata and record batches."""

import logging
import zipfile
from pathlib import Path
from typing import BinaryIO, List, Union

import pyarrow as pa

from .adapter import comment_to_str, zipinfo_to_item_meta
from .encoder import zip_to_record_batch
from .errors import ArchiveIOError
from .model import Zip, ZipFileMeta, ZipItemMeta

logger = logging.getLogger(__name__)

# Exceptions zipfile raises for unreadable or malformed containers.
# ValueError covers UnicodeDecodeError from UTF-8 flagged names with invalid bytes.
ZIP_READ_ERRORS = (OSError, EOFError, ValueError, zipfile.BadZipFile, zipfile.LargeZipFile)


def zip_to_meta(zip_id: str, archive: zipfile.ZipFile) -> Zip:
    """Collect the metadata of every entry of an open archive.

    Entries keep central directory order.

    Args:
        zip_id: Identifier stored with the metadata
        archive: Open archive

    Returns:
        Archive metadata

    Raises:
        ArchiveIOError: If an entry cannot be read
    """
    comment = comment_to_str(archive.comment)

    try:
        infos = archive.infolist()
    except ZIP_READ_ERRORS as e:
        raise ArchiveIOError(f"Failed to list entries of {zip_id}: {e}", zip_id=zip_id) from e

    files: List[ZipItemMeta] = []
    for index, info in enumerate(infos):
        files.append(zipinfo_to_item_meta(info))
        logger.debug(
            f"Entry {index + 1}/{len(infos)}: {info.filename}",
            extra={"extra_fields": {"zip_id": zip_id, "entry_index": index}},
        )

    return Zip(zip_id=zip_id, meta=ZipFileMeta(comment=comment, files=tuple(files)))


def zip_archive_to_record_batch(zip_id: str, archive: zipfile.ZipFile) -> pa.RecordBatch:
    """Convert an already open archive; the caller keeps ownership of it."""
    z = zip_to_meta(zip_id, archive)
    return zip_to_record_batch(z)


def zip_source_to_record_batch(zip_id: str, source: BinaryIO) -> pa.RecordBatch:
    """Convert an archive read from a readable, seekable binary stream.

    The stream is not closed.

    Raises:
        ArchiveIOError: If the stream is not a readable ZIP archive
        EncodingError: If the record batch cannot be built
    """
    try:
        archive = zipfile.ZipFile(source, 'r')
    except ZIP_READ_ERRORS as e:
        raise ArchiveIOError(f"Failed to open archive {zip_id}: {e}", zip_id=zip_id) from e

    with archive:
        logger.info(f"Reading {len(archive.infolist())} entries from {zip_id}")
        return zip_archive_to_record_batch(zip_id, archive)


def zipfile_to_record_batch(zip_filename: Union[str, Path]) -> pa.RecordBatch:
    """Convert the archive at ``zip_filename``, using the path as its identifier.

    The file is closed before returning, on success or failure.

    Args:
        zip_filename: Path to the ZIP file

    Returns:
        Record batch with one row per archive entry

    Raises:
        ArchiveIOError: If the file cannot be opened or parsed
        EncodingError: If the record batch cannot be built
    """
    zip_id = str(zip_filename)

    try:
        source = open(zip_filename, 'rb')
    except OSError as e:
        raise ArchiveIOError(f"Failed to open {zip_id}: {e}", zip_id=zip_id, path=zip_id) from e

    with source:
        batch = zip_source_to_record_batch(zip_id, source)

    logger.info(f"Converted {zip_id}: {batch.num_rows} entries")
    return batch
