"""Translation of ``zipfile.ZipInfo`` handles into metadata entries.

Adaptation is total: every accessor yields a value or a fallback, never an
exception.
"""

import logging
import zipfile
from datetime import datetime, timezone
from typing import Optional, Sequence

from .model import Method, UNIX_EPOCH, ZipItemMeta

logger = logging.getLogger(__name__)

# General purpose flag bit 11: name and comment are UTF-8
UTF8_FLAG = 0x800


def method_from_compress_type(compress_type: int) -> Method:
    """Map a ZIP compression tag to a Method.

    Anything other than stored or deflated narrows to ``Method.STORE``.
    """
    if compress_type == zipfile.ZIP_STORED:
        return Method.STORE
    if compress_type == zipfile.ZIP_DEFLATED:
        return Method.DEFLATE

    logger.debug(f"Compression method {compress_type} not represented, using STORE")
    return Method.STORE


def naive_to_utc(naive: datetime) -> datetime:
    """Interpret a naive date-time as UTC."""
    return naive.replace(tzinfo=timezone.utc)


def zip_datetime_to_utc(date_time: Optional[Sequence[int]]) -> Optional[datetime]:
    """Convert a DOS ``(Y, M, D, h, m, s)`` tuple to an aware UTC datetime.

    Args:
        date_time: ``ZipInfo.date_time`` or None

    Returns:
        Aware datetime, or None when the tuple is missing or not a valid date
    """
    if date_time is None:
        return None

    try:
        naive = datetime(*date_time[:6])
    except (TypeError, ValueError) as e:
        logger.debug(f"Unusable timestamp {date_time!r}: {e}")
        return None

    return naive_to_utc(naive)


def decode_entry_text(raw: bytes, flag_bits: int = 0) -> str:
    """Decode an entry text field the way zipfile decodes member names.

    UTF-8 when flag bit 11 is set, CP437 otherwise. Never raises.
    """
    if isinstance(raw, str):
        return raw
    if flag_bits & UTF8_FLAG:
        return raw.decode("utf-8", errors="replace")
    return raw.decode("cp437")


def comment_to_str(comment: bytes) -> str:
    """Decode an archive comment; invalid UTF-8 yields an empty string."""
    try:
        return comment.decode("utf-8")
    except UnicodeDecodeError:
        return ""


def zipinfo_to_item_meta(info: zipfile.ZipInfo) -> ZipItemMeta:
    """Build a ZipItemMeta from a ZipInfo handle."""
    flag_bits = getattr(info, "flag_bits", 0)

    modified = zip_datetime_to_utc(getattr(info, "date_time", None))
    if modified is None:
        modified = UNIX_EPOCH

    return ZipItemMeta(
        name=info.filename,
        comment=decode_entry_text(info.comment or b"", flag_bits),
        method=method_from_compress_type(info.compress_type),
        modified=modified,
        crc32=info.CRC,
        compressed_size=info.compress_size,
        uncompressed_size=info.file_size,
    )
