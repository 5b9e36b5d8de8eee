"""Verifier configuration.

Holds the optional store path override and the decision policy consumed by
the verification engine.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from hostpin.config.defaults import ENV_KNOWN_HOSTS
from hostpin.trust.policy import DecisionPolicy


@dataclass
class VerifierConfig:
    """Configuration for host verification."""

    # None means the default path inside the per-user state directory
    known_hosts_file: Optional[Union[str, Path]] = None

    # None rejects every unknown or changed host
    policy: Optional[DecisionPolicy] = None

    @classmethod
    def from_env(cls, policy: Optional[DecisionPolicy] = None) -> "VerifierConfig":
        """Create config from environment variables."""
        return cls(
            known_hosts_file=os.environ.get(ENV_KNOWN_HOSTS) or None,
            policy=policy,
        )


# Global config instance
_config: Optional[VerifierConfig] = None


def get_verifier_config() -> VerifierConfig:
    """Get global verifier config."""
    global _config
    if _config is None:
        _config = VerifierConfig.from_env()
    return _config


def set_verifier_config(config: Optional[VerifierConfig]) -> None:
    """Set global verifier config (None resets to environment defaults)."""
    global _config
    _config = config
