"""Default configuration values for hostpin.

This module centralizes the fixed limits, filenames and environment
variable names used across the package. All modules should import these
constants instead of hard-coding values.

Usage:
    from hostpin.config.defaults import (
        KNOWN_HOSTS_FILENAME,
        MAX_FINGERPRINT_LENGTH,
    )
"""

from __future__ import annotations

import os

# =============================================================================
# Store Layout
# =============================================================================

KNOWN_HOSTS_FILENAME = "known_hosts"
STATE_DIR_NAME = ".hostpin"
XDG_STATE_DIR_NAME = "hostpin"

# Temp files live beside the store so the final rename stays on one filesystem
TEMP_FILE_SUFFIX = ".tmp"


# =============================================================================
# Record Limits
# =============================================================================

# Hostnames must be strictly shorter than this
MAX_HOSTNAME_LENGTH = 256

# Stored fingerprints longer than this are capped on read
MAX_FINGERPRINT_LENGTH = 59

MIN_PORT = 0
MAX_PORT = 65535


# =============================================================================
# Platform Limits
# =============================================================================

PATH_MAX = 260 if os.name == "nt" else 4096


# =============================================================================
# Environment Variables
# =============================================================================

ENV_KNOWN_HOSTS = "HOSTPIN_KNOWN_HOSTS"
ENV_STATE_DIR = "HOSTPIN_STATE_DIR"
ENV_XDG_STATE_HOME = "XDG_STATE_HOME"
