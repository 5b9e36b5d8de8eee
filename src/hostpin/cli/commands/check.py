#!/usr/bin/env python
"""
Check command - verify a host fingerprint against the known-hosts store.
"""

from __future__ import annotations

from typing import Optional

from rich.markup import escape

from hostpin.cli.formatting.output import ConsoleOutput
from hostpin.config.settings import VerifierConfig
from hostpin.trust.errors import HostVerificationError
from hostpin.trust.lookup import retrieve_stored_fingerprint
from hostpin.trust.policy import ConsolePolicy, DecisionPolicy, StaticPolicy
from hostpin.trust.models import TrustDecision
from hostpin.trust.verifier import HostVerifier, make_host_key


def _build_policy(decision: Optional[str]) -> Optional[DecisionPolicy]:
    """Map the --trust/--accept-once/--reject/--prompt flags to a policy."""
    if decision is None:
        return None
    if decision == "prompt":
        return ConsolePolicy()
    return StaticPolicy(TrustDecision(decision))


def run(
    hostname: str,
    port: int,
    fingerprint: str,
    decision: Optional[str] = None,
    known_hosts: Optional[str] = None,
) -> int:
    """Run the check command. Returns 0 if accepted, 1 if rejected, 2 on error."""
    console = ConsoleOutput()
    config = VerifierConfig.from_env()
    if known_hosts:
        config.known_hosts_file = known_hosts
    config.policy = _build_policy(decision)

    verifier = HostVerifier(config)
    try:
        if isinstance(config.policy, ConsolePolicy):
            # Show the previously trusted value when prompting about a change
            host_key = str(make_host_key(hostname, port))
            stored = retrieve_stored_fingerprint(verifier.store_path, host_key)
            if stored is not None:
                config.policy.stored_fingerprints[host_key] = stored
        result = verifier.verify(hostname, port, fingerprint)
    except HostVerificationError as e:
        console.print_error(str(e))
        return 2

    if result.accepted:
        if result.persisted:
            console.print_success(f"{result.host_key} trusted and saved")
        elif result.reason is None:
            console.print_success(f"{result.host_key} matches known fingerprint")
        else:
            console.print_success(f"{result.host_key} accepted for this session")
        return 0

    console.print_error(f"{result.host_key} rejected ({result.reason.value})")
    if result.stored_fingerprint is not None:
        console.print(f"  Known:    {escape(result.stored_fingerprint)}")
    console.print(f"  Received: {escape(result.observed_fingerprint)}")
    return 1
