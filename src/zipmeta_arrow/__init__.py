"""Project ZIP archive entry metadata into Arrow record batches."""

from .model import Method, ZipItemMeta, ZipFileMeta, Zip, UNIX_EPOCH
from .adapter import zipinfo_to_item_meta, method_from_compress_type, comment_to_str
from .encoder import ZIP_META_SCHEMA, zip_to_record_batch, datetime_to_unix_us
from .loader import (
    zip_to_meta,
    zip_archive_to_record_batch,
    zip_source_to_record_batch,
    zipfile_to_record_batch,
)
from .errors import (
    ZipMetaError, ConfigurationError, ArchiveError, ArchiveIOError, EncodingError
)

__version__ = "0.1.0"

__all__ = [
    'Method',
    'ZipItemMeta',
    'ZipFileMeta',
    'Zip',
    'UNIX_EPOCH',
    'zipinfo_to_item_meta',
    'method_from_compress_type',
    'comment_to_str',
    'ZIP_META_SCHEMA',
    'zip_to_record_batch',
    'datetime_to_unix_us',
    'zip_to_meta',
    'zip_archive_to_record_batch',
    'zip_source_to_record_batch',
    'zipfile_to_record_batch',
    'ZipMetaError',
    'ConfigurationError',
    'ArchiveError',
    'ArchiveIOError',
    'EncodingError',
]
