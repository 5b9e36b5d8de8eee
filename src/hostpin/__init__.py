"""
hostpin - trust-on-first-use verification of server fingerprints.

Usage:
    from hostpin import HostVerifier, VerifierConfig, StaticPolicy, TrustDecision

    verifier = HostVerifier(
        VerifierConfig(policy=StaticPolicy(TrustDecision.TRUST_AND_PERSIST))
    )
    outcome = verifier.check("db.example.com", 7687, fingerprint)
"""

from __future__ import annotations

from hostpin.trust import (
    CallbackPolicy,
    ConsolePolicy,
    DecisionPolicy,
    HostVerificationError,
    HostVerifier,
    MismatchReason,
    PathError,
    StaticPolicy,
    StoreIOError,
    TrustDecision,
    UsageError,
    VerificationOutcome,
    VerificationResult,
    check_known_hosts,
)
from hostpin.config.settings import VerifierConfig
from hostpin.persistence import remove_stored_fingerprint, update_stored_fingerprint

__version__ = "0.1.0"

__all__ = [
    "HostVerifier",
    "VerifierConfig",
    "check_known_hosts",
    "update_stored_fingerprint",
    "remove_stored_fingerprint",
    "DecisionPolicy",
    "CallbackPolicy",
    "StaticPolicy",
    "ConsolePolicy",
    "MismatchReason",
    "TrustDecision",
    "VerificationOutcome",
    "VerificationResult",
    "HostVerificationError",
    "UsageError",
    "PathError",
    "StoreIOError",
]
