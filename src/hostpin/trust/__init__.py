"""
hostpin trust subsystem - fingerprint verification against the known-hosts store.
"""

from __future__ import annotations

from .errors import HostVerificationError, PathError, StoreIOError, UsageError
from .models import (
    HostKey,
    MismatchReason,
    StoreRecord,
    TrustDecision,
    VerificationOutcome,
    VerificationResult,
)
from .lookup import iter_records, retrieve_stored_fingerprint
from .policy import CallbackPolicy, ConsolePolicy, DecisionPolicy, StaticPolicy
from .verifier import HostVerifier, check_known_hosts, make_host_key

__all__ = [
    "HostVerifier",
    "check_known_hosts",
    "make_host_key",
    "retrieve_stored_fingerprint",
    "iter_records",
    "DecisionPolicy",
    "CallbackPolicy",
    "StaticPolicy",
    "ConsolePolicy",
    "HostKey",
    "StoreRecord",
    "MismatchReason",
    "TrustDecision",
    "VerificationOutcome",
    "VerificationResult",
    "HostVerificationError",
    "UsageError",
    "PathError",
    "StoreIOError",
]
