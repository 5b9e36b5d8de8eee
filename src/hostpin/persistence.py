"""
Atomic-write persistence layer for the known-hosts store.

Every update rewrites the whole store into a temporary file in the same
directory, fsyncs it and renames it over the original. Concurrent readers
and crashed writers therefore only ever observe the old or the new file.
Concurrent writers are not coordinated: the last rename wins.
"""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path
from typing import Optional, TextIO, Union

from hostpin.config.defaults import TEMP_FILE_SUFFIX
from hostpin.trust.errors import StoreIOError
from hostpin.trust.lookup import STORE_ENCODING, STORE_ERRORS, line_matches
from hostpin.trust.models import StoreRecord, validate_fingerprint

logger = logging.getLogger(__name__)


def _fsync_directory(directory: Path) -> None:
    """Sync a directory so a rename inside it survives a crash (POSIX only)."""
    if os.name != "posix":
        return
    dir_fd = os.open(directory, os.O_RDONLY | os.O_DIRECTORY)
    try:
        os.fsync(dir_fd)
    finally:
        os.close(dir_fd)


def _open_existing(path: Path) -> Optional[TextIO]:
    """Open the current store for reading, or return None if it is absent."""
    try:
        return open(
            path, "r", encoding=STORE_ENCODING, errors=STORE_ERRORS, newline=""
        )
    except FileNotFoundError:
        return None
    except OSError as e:
        logger.error(f"Failed to open '{path}': {e.strerror}")
        raise StoreIOError(f"Failed to open '{path}'", path, e) from e


def _rewrite_store(path: Path, host_key: str, record: Optional[StoreRecord]) -> int:
    """
    Rewrite ``path`` without any line for ``host_key``, then append ``record``.

    This function:
    1. Opens the existing store (absence means empty input)
    2. Creates the parent directory if needed
    3. Copies all other records verbatim into a temp file beside the store
    4. Appends the new record, if any
    5. Flushes and fsyncs the temp file
    6. Atomically renames the temp file over the store
    7. Syncs the parent directory so the rename persists (failure is
       logged, not raised, since the store is already replaced)

    On any failure the temp file is removed and the original store is left
    untouched.

    Returns:
        Number of existing lines dropped for ``host_key``.

    Raises:
        StoreIOError: If any step fails.
    """
    in_stream = _open_existing(path)
    temp_path: Optional[str] = None
    dropped = 0

    try:
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.error(f"Failed to create directory '{path.parent}': {e.strerror}")
            raise

        # Create temp file in same directory (for atomic rename)
        fd, temp_path = tempfile.mkstemp(
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=TEMP_FILE_SUFFIX,
        )

        try:
            out = os.fdopen(
                fd, "w", encoding=STORE_ENCODING, errors=STORE_ERRORS, newline=""
            )
        except BaseException:
            os.close(fd)
            raise

        with out:
            if in_stream is not None:
                for line in in_stream:
                    if line_matches(line, host_key):
                        dropped += 1
                        continue
                    if not line.endswith(("\n", "\r")):
                        line += "\n"
                    out.write(line)
                in_stream.close()
                in_stream = None

            if record is not None:
                out.write(record.to_line())

            out.flush()
            os.fsync(out.fileno())

        os.replace(temp_path, path)
        temp_path = None

    except OSError as e:
        logger.error(f"Failed to update '{path}': {e.strerror}")
        raise StoreIOError(f"Failed to update '{path}'", path, e) from e

    finally:
        if in_stream is not None:
            in_stream.close()
        if temp_path is not None:
            try:
                os.unlink(temp_path)
            except FileNotFoundError:
                pass

    # The new store is already in place; a failed sync only weakens durability
    try:
        _fsync_directory(path.parent)
    except OSError as e:
        logger.warning(f"Failed to sync directory '{path.parent}': {e.strerror}")

    return dropped


def update_stored_fingerprint(
    path: Union[str, Path], host_key: str, fingerprint: str
) -> None:
    """
    Persist ``fingerprint`` as the only record for ``host_key``.

    Other records keep their content and relative order; any earlier
    records for ``host_key``, duplicates included, are replaced.

    Args:
        path: Known-hosts store file (created if missing).
        host_key: ``hostname:port`` string.
        fingerprint: Fingerprint to record.

    Raises:
        UsageError: If the fingerprint is empty, too long or contains
            whitespace (checked before any I/O).
        StoreIOError: If the store could not be rewritten. The original
            file is unchanged in that case.
    """
    path = Path(path)
    validate_fingerprint(fingerprint)
    dropped = _rewrite_store(path, host_key, StoreRecord(host_key, fingerprint))
    if dropped:
        logger.info(f"Replaced fingerprint for {host_key} in {path}")
    else:
        logger.info(f"Added fingerprint for {host_key} to {path}")


def remove_stored_fingerprint(path: Union[str, Path], host_key: str) -> bool:
    """
    Drop every record for ``host_key`` from the store.

    Returns:
        True if at least one record was removed. A missing store, or one
        without a record for ``host_key``, is left as is and returns False.

    Raises:
        StoreIOError: If the store could not be read or rewritten.
    """
    path = Path(path)
    in_stream = _open_existing(path)
    if in_stream is None:
        return False

    with in_stream:
        try:
            present = any(line_matches(line, host_key) for line in in_stream)
        except OSError as e:
            logger.error(f"Failed reading '{path}': {e.strerror}")
            raise StoreIOError(f"Failed reading '{path}'", path, e) from e

    if not present:
        return False

    _rewrite_store(path, host_key, None)
    logger.info(f"Removed fingerprint for {host_key} from {path}")
    return True
