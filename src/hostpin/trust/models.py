"""
Shared types for host verification.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from hostpin.config.defaults import MAX_FINGERPRINT_LENGTH

from .errors import UsageError


class VerificationOutcome(str, Enum):
    """Final answer of a verification call."""
    ACCEPTED = "accepted"
    REJECTED = "rejected"


class MismatchReason(str, Enum):
    """Why the decision policy is being consulted."""
    UNRECOGNIZED = "unrecognized"  # no record for host
    MISMATCH = "mismatch"          # record exists, fingerprint differs


class TrustDecision(str, Enum):
    """Answer returned by a decision policy."""
    TRUST_AND_PERSIST = "trust"
    ACCEPT_ONCE = "once"
    REJECT = "reject"


@dataclass(frozen=True)
class HostKey:
    """Unique store key for a remote endpoint, rendered as ``hostname:port``."""
    hostname: str
    port: int

    def __str__(self) -> str:
        return f"{self.hostname}:{self.port}"


@dataclass(frozen=True)
class StoreRecord:
    """One line of the known-hosts store."""
    host_key: str
    fingerprint: str

    def to_line(self) -> str:
        return f"{self.host_key} {self.fingerprint}\n"


@dataclass
class VerificationResult:
    host_key: str
    outcome: VerificationOutcome
    observed_fingerprint: str
    stored_fingerprint: Optional[str] = None
    reason: Optional[MismatchReason] = None
    decision: Optional[TrustDecision] = None
    persisted: bool = False

    @property
    def accepted(self) -> bool:
        return self.outcome is VerificationOutcome.ACCEPTED


def validate_fingerprint(fingerprint: str) -> str:
    """
    Check that ``fingerprint`` can be stored and read back unchanged.

    Raises:
        UsageError: If it is empty, longer than MAX_FINGERPRINT_LENGTH,
            or contains whitespace.
    """
    if not isinstance(fingerprint, str) or not fingerprint:
        raise UsageError("Fingerprint must be a non-empty string")
    if len(fingerprint) > MAX_FINGERPRINT_LENGTH:
        raise UsageError(
            f"Fingerprint must be at most {MAX_FINGERPRINT_LENGTH} characters "
            f"(got {len(fingerprint)})"
        )
    if any(c.isspace() for c in fingerprint):
        raise UsageError("Fingerprint must not contain whitespace")
    return fingerprint
