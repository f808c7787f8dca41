"""CLI command for converting ZIP metadata to an Arrow table."""

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import Optional, TextIO

import pyarrow as pa

from .config import ConfigLoader, ZipMetaArrowConfig
from .errors import ConfigurationError, ZipMetaError
from .loader import zipfile_to_record_batch
from .logging import ArchiveLogContext, setup_logging

# Application name derived from package name
_package = __package__ or "zipmeta_arrow"
APP_NAME = _package.replace('_', '-').replace('.', '-')


def resolve_zip_filename(config: ZipMetaArrowConfig, override: Optional[str] = None) -> str:
    """Pick the archive path from the command line, environment, or config.
    
    Raises:
        ConfigurationError: If no source names an archive
    """
    if override:
        return override

    from_env = os.environ.get(config.source.filename_env_var)
    if from_env:
        return from_env

    if config.source.zip_filename:
        return config.source.zip_filename

    raise ConfigurationError(
        f"No archive given: pass a path or set {config.source.filename_env_var}",
        env_var=config.source.filename_env_var,
    )


def print_record_batch(
    batch: pa.RecordBatch,
    max_rows: int = 0,
    show_schema: bool = True,
    out: Optional[TextIO] = None,
) -> None:
    """Print a record batch as a table.
    
    Args:
        batch: Batch to print
        max_rows: Rows to print, 0 for all
        show_schema: Print the schema before the rows
        out: Destination stream (stdout by default)
    """
    out = out or sys.stdout
    if max_rows:
        batch = batch.slice(0, max_rows)

    table = pa.Table.from_batches([batch], schema=batch.schema)
    if show_schema:
        print(table.schema.to_string(show_schema_metadata=False), file=out)
        print(file=out)
    print(_format_rows(table), file=out)


def _format_rows(table: pa.Table) -> str:
    """Render one line per row with column headers."""
    columns = table.column_names
    rows = table.to_pylist()
    lines = ["\t".join(columns)]
    for row in rows:
        lines.append("\t".join("" if row[c] is None else str(row[c]) for c in columns))
    return "\n".join(lines)


def convert_command(
    config: ZipMetaArrowConfig,
    zip_filename_override: Optional[str] = None,
    max_rows_override: Optional[int] = None,
) -> int:
    """Convert one archive and print it.
    
    Args:
        config: Configuration object
        zip_filename_override: Archive path given on the command line
        max_rows_override: Optional override for printed row count
    
    Returns:
        Exit code (0 for success)
    """
    # Use __package__ to avoid __main__ when run as module
    logger_name = __package__ or __name__
    logger = logging.getLogger(logger_name)

    max_rows = max_rows_override if max_rows_override is not None else config.output.max_rows

    try:
        if max_rows < 0:
            raise ConfigurationError(f"max rows must be >= 0, got {max_rows}", max_rows=max_rows)

        zip_filename = resolve_zip_filename(config, zip_filename_override)

        with ArchiveLogContext(zip_filename):
            logger.info(f"Converting archive: {zip_filename}")
            batch = zipfile_to_record_batch(zip_filename)

        print_record_batch(batch, max_rows=max_rows, show_schema=config.output.show_schema)
        return 0

    except ZipMetaError as e:
        logger.error(e.message, extra={"extra_fields": e.context})
        return 1


def main(argv: Optional[list] = None) -> int:
    """Main entry point for the convert command."""
    parser = argparse.ArgumentParser(
        description="Print the entry metadata of a ZIP archive as an Arrow table"
    )
    parser.add_argument(
        "zip_filename",
        nargs="?",
        help="Path to the ZIP archive (overrides environment and config)"
    )
    parser.add_argument(
        "--config",
        type=Path,
        help="Path to config file (defaults.toml)"
    )
    parser.add_argument(
        "--max-rows",
        type=int,
        help="Maximum rows to print, 0 for all (overrides config)"
    )
    
    args = parser.parse_args(argv)
    
    loader = ConfigLoader(
        app_name=APP_NAME,
        config_class=ZipMetaArrowConfig
    )
    try:
        config = loader.load(defaults_path=args.config)
    except ConfigurationError as e:
        # Logging is not configured yet
        print(e.message, file=sys.stderr)
        return 1
    
    log_file = Path(config.logging.file) if config.logging.file else None
    setup_logging(level=config.logging.level, format=config.logging.format, log_file=log_file)
    
    return convert_command(
        config=config,
        zip_filename_override=args.zip_filename,
        max_rows_override=args.max_rows,
    )


if __name__ == "__main__":
    sys.exit(main())
