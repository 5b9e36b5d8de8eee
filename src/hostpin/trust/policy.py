"""
Decision policies consulted when a host is unknown or its fingerprint changed.

A policy is any object with a ``decide(host_key, fingerprint, reason)``
method. It runs synchronously on the caller's thread and may block, for
example while prompting a user.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Optional, Protocol

from rich.console import Console
from rich.markup import escape
from rich.prompt import Prompt

from .models import MismatchReason, TrustDecision

logger = logging.getLogger(__name__)


class DecisionPolicy(Protocol):
    """Protocol for deciding what to do with an unverified host."""

    def decide(
        self, host_key: str, fingerprint: str, reason: MismatchReason
    ) -> TrustDecision:
        """Return the decision for ``host_key`` presenting ``fingerprint``.

        Args:
            host_key: ``hostname:port`` being verified
            fingerprint: Fingerprint observed for the host
            reason: UNRECOGNIZED or MISMATCH
        """
        ...


class CallbackPolicy:
    """Adapt a plain ``callback(context, host_key, fingerprint, reason)``.

    The context object is passed through unmodified on every call.
    """

    def __init__(
        self,
        callback: Callable[[Any, str, str, MismatchReason], TrustDecision],
        context: Any = None,
    ):
        self.callback = callback
        self.context = context

    def decide(
        self, host_key: str, fingerprint: str, reason: MismatchReason
    ) -> TrustDecision:
        return self.callback(self.context, host_key, fingerprint, reason)


class StaticPolicy:
    """Always return the same decision."""

    def __init__(self, decision: TrustDecision):
        self.decision = decision

    def decide(
        self, host_key: str, fingerprint: str, reason: MismatchReason
    ) -> TrustDecision:
        return self.decision


class ConsolePolicy:
    """Ask the user on the terminal.

    Mismatches are shown with the previously trusted fingerprint when known,
    and default to reject.
    """

    CHOICES = {
        "trust": TrustDecision.TRUST_AND_PERSIST,
        "once": TrustDecision.ACCEPT_ONCE,
        "reject": TrustDecision.REJECT,
    }

    def __init__(
        self,
        console: Optional[Console] = None,
        stored_fingerprints: Optional[dict[str, str]] = None,
    ):
        self.console = console or Console(stderr=True)
        self.stored_fingerprints = stored_fingerprints or {}

    def decide(
        self, host_key: str, fingerprint: str, reason: MismatchReason
    ) -> TrustDecision:
        if reason is MismatchReason.MISMATCH:
            self.console.print(
                f"[bold red]WARNING:[/bold red] the fingerprint for "
                f"[bold]{escape(host_key)}[/bold] has changed!"
            )
            previous = self.stored_fingerprints.get(host_key)
            if previous:
                self.console.print(f"  Trusted:  {escape(previous)}")
            self.console.print(f"  Received: {escape(fingerprint)}")
            self.console.print(
                "[dim]Someone could be intercepting the connection, "
                "or the server certificate was replaced.[/dim]"
            )
            default = "reject"
        else:
            self.console.print(
                f"Host [bold]{escape(host_key)}[/bold] is not known. "
                f"Its fingerprint is:\n  {escape(fingerprint)}"
            )
            default = "once"

        answer = Prompt.ask(
            "Trust this host?",
            choices=list(self.CHOICES),
            default=default,
            console=self.console,
        )
        logger.debug(f"User answered '{answer}' for {host_key}")
        return self.CHOICES[answer]
