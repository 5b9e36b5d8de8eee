"""
HostVerifier - trust-on-first-use decision engine.

Compares an observed fingerprint with the known-hosts store and, when the
host is unknown or changed, lets the configured policy decide. A changed
fingerprint is never accepted without an explicit decision.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from hostpin.config.defaults import MAX_HOSTNAME_LENGTH, MAX_PORT, MIN_PORT
from hostpin.config.paths import resolve_store_path
from hostpin.config.settings import VerifierConfig, get_verifier_config
from hostpin.persistence import update_stored_fingerprint

from .errors import UsageError
from .lookup import retrieve_stored_fingerprint
from .models import (
    HostKey,
    MismatchReason,
    TrustDecision,
    VerificationOutcome,
    VerificationResult,
    validate_fingerprint,
)

logger = logging.getLogger(__name__)


def make_host_key(hostname: str, port: int) -> HostKey:
    """
    Validate hostname and port and build the store key.

    Raises:
        UsageError: If hostname is empty or too long, or port is out of range.
    """
    if not hostname:
        raise UsageError("Hostname must not be empty")
    if len(hostname) >= MAX_HOSTNAME_LENGTH:
        raise UsageError(
            f"Hostname must be shorter than {MAX_HOSTNAME_LENGTH} characters "
            f"(got {len(hostname)})"
        )
    if isinstance(port, bool) or not isinstance(port, int):
        raise UsageError(f"Port must be an integer, got {port!r}")
    if not MIN_PORT <= port <= MAX_PORT:
        raise UsageError(f"Port {port} out of range {MIN_PORT}-{MAX_PORT}")
    return HostKey(hostname, port)


class HostVerifier:
    """
    Single entry point for known-hosts verification.

    Each call is self-contained: the store path is resolved, read and
    (optionally) rewritten within the call, and nothing is cached between
    calls.
    """

    def __init__(self, config: Optional[VerifierConfig] = None):
        self.config = config or get_verifier_config()

    @property
    def store_path(self) -> Path:
        """Resolved known-hosts path (may raise PathError)."""
        return resolve_store_path(self.config.known_hosts_file)

    def check(
        self, hostname: str, port: int, fingerprint: str
    ) -> VerificationOutcome:
        """Verify ``fingerprint`` for ``hostname:port`` and return the outcome."""
        return self.verify(hostname, port, fingerprint).outcome

    def verify(
        self, hostname: str, port: int, fingerprint: str
    ) -> VerificationResult:
        """
        Verify ``fingerprint`` for ``hostname:port``.

        Coordinates: validate → lookup → policy → persist

        Returns:
            VerificationResult with the outcome and how it was reached.

        Raises:
            UsageError: Invalid hostname, port or fingerprint (before any I/O).
            PathError: Default store path could not be built.
            StoreIOError: Store could not be read, or a requested trust
                grant could not be persisted.
        """
        host_key = str(make_host_key(hostname, port))
        validate_fingerprint(fingerprint)
        path = self.store_path

        stored = retrieve_stored_fingerprint(path, host_key)
        result = VerificationResult(
            host_key=host_key,
            outcome=VerificationOutcome.REJECTED,
            observed_fingerprint=fingerprint,
            stored_fingerprint=stored,
        )

        if stored is None:
            result.reason = MismatchReason.UNRECOGNIZED
        elif stored == fingerprint:
            logger.debug(f"Fingerprint for {host_key} matches known-hosts store")
            result.outcome = VerificationOutcome.ACCEPTED
            return result
        else:
            result.reason = MismatchReason.MISMATCH
            logger.warning(f"Fingerprint mismatch for {host_key}")

        policy = self.config.policy
        if policy is None:
            logger.info(
                f"Rejecting {result.reason.value} host {host_key}: "
                f"no decision policy configured"
            )
            return result

        decision = policy.decide(host_key, fingerprint, result.reason)
        result.decision = decision

        if decision is TrustDecision.TRUST_AND_PERSIST:
            # Persist before reporting success; a failed write propagates
            update_stored_fingerprint(path, host_key, fingerprint)
            result.persisted = True
            result.outcome = VerificationOutcome.ACCEPTED
        elif decision is TrustDecision.ACCEPT_ONCE:
            result.outcome = VerificationOutcome.ACCEPTED
        elif decision is not TrustDecision.REJECT:
            logger.warning(
                f"Unrecognized decision {decision!r} for {host_key}, rejecting"
            )
            result.decision = None

        logger.info(
            f"Host {host_key} ({result.reason.value}): {result.outcome.value}"
        )
        return result


def check_known_hosts(
    hostname: str,
    port: int,
    fingerprint: str,
    config: Optional[VerifierConfig] = None,
) -> VerificationOutcome:
    """Verify a host against the known-hosts store.

    Uses the global verifier config when ``config`` is not given,
    the same default as ``HostVerifier()``.
    """
    return HostVerifier(config).check(hostname, port, fingerprint)
