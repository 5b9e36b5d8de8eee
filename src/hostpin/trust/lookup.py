"""
Record lookup - read-only scan of the known-hosts store.

Readers never take a lock: updates only become visible through an atomic
rename, so an open handle always sees one complete version of the file.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterator, Optional, Union

from hostpin.config.defaults import MAX_FINGERPRINT_LENGTH

from .errors import StoreIOError
from .models import StoreRecord

logger = logging.getLogger(__name__)

STORE_ENCODING = "utf-8"
# Undecodable bytes round-trip unchanged through read and rewrite
STORE_ERRORS = "surrogateescape"


def line_matches(line: str, host_key: str) -> bool:
    """Return True if ``line`` is a record for ``host_key``.

    The key must be followed by whitespace, so "a.com:80" does not match a
    record for "a.com:8080".
    """
    n = len(host_key)
    return len(line) > n and line.startswith(host_key) and line[n].isspace()


def retrieve_stored_fingerprint(
    path: Union[str, Path],
    host_key: str,
    max_length: int = MAX_FINGERPRINT_LENGTH,
) -> Optional[str]:
    """
    Return the stored fingerprint for ``host_key``, or None if there is none.

    A missing store is not an error. The first matching record wins; later
    duplicates are ignored.

    Args:
        path: Known-hosts store file.
        host_key: ``hostname:port`` string.
        max_length: Cap applied to the returned fingerprint.

    Raises:
        StoreIOError: If the store exists but cannot be opened or read.
    """
    path = Path(path)
    try:
        stream = open(path, "r", encoding=STORE_ENCODING, errors=STORE_ERRORS)
    except FileNotFoundError:
        logger.debug(f"No known-hosts store at {path}")
        return None
    except OSError as e:
        logger.error(f"Failed to open '{path}': {e.strerror}")
        raise StoreIOError(f"Failed to open '{path}'", path, e) from e

    with stream:
        try:
            for line in stream:
                if not line_matches(line, host_key):
                    continue
                fingerprint = line[len(host_key) + 1:].strip()
                if len(fingerprint) > max_length:
                    logger.warning(
                        f"Stored fingerprint for {host_key} in '{path}' is "
                        f"{len(fingerprint)} characters, truncating to {max_length}"
                    )
                    fingerprint = fingerprint[:max_length]
                logger.debug(f"Found stored fingerprint for {host_key}")
                return fingerprint
        except OSError as e:
            logger.error(f"Failed reading '{path}': {e.strerror}")
            raise StoreIOError(f"Failed reading '{path}'", path, e) from e

    return None


def iter_records(path: Union[str, Path]) -> Iterator[StoreRecord]:
    """Yield every well-formed record in the store, in file order.

    Blank lines and lines without a fingerprint are skipped.

    Raises:
        StoreIOError: If the store exists but cannot be opened or read.
    """
    path = Path(path)
    try:
        stream = open(path, "r", encoding=STORE_ENCODING, errors=STORE_ERRORS)
    except FileNotFoundError:
        return
    except OSError as e:
        logger.error(f"Failed to open '{path}': {e.strerror}")
        raise StoreIOError(f"Failed to open '{path}'", path, e) from e

    with stream:
        try:
            for line in stream:
                parts = line.split(None, 1)
                if len(parts) != 2:
                    continue
                yield StoreRecord(host_key=parts[0], fingerprint=parts[1].strip())
        except OSError as e:
            logger.error(f"Failed reading '{path}': {e.strerror}")
            raise StoreIOError(f"Failed reading '{path}'", path, e) from e
