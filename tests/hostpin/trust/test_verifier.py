"""Tests for HostVerifier and check_known_hosts."""

import errno
import os
import tempfile
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from hostpin.config.settings import (
    VerifierConfig,
    get_verifier_config,
    set_verifier_config,
)
from hostpin.trust.errors import StoreIOError, UsageError
from hostpin.trust.lookup import retrieve_stored_fingerprint
from hostpin.trust.models import (
    HostKey,
    MismatchReason,
    TrustDecision,
    VerificationOutcome,
)
from hostpin.trust.policy import CallbackPolicy, StaticPolicy
from hostpin.trust.verifier import HostVerifier, check_known_hosts, make_host_key


@pytest.fixture
def temp_dir():
    """Create a temporary state directory."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def store_path(temp_dir):
    return temp_dir / "known_hosts"


def _verifier(store_path, policy=None):
    return HostVerifier(VerifierConfig(known_hosts_file=store_path, policy=policy))


def _mock_policy(decision):
    policy = MagicMock()
    policy.decide.return_value = decision
    return policy


class TestMakeHostKey:
    """Tests for hostname/port validation."""

    def test_renders_hostname_and_port(self):
        assert str(make_host_key("db.example.com", 7687)) == "db.example.com:7687"
        assert make_host_key("db.example.com", 7687) == HostKey("db.example.com", 7687)

    def test_empty_hostname(self):
        with pytest.raises(UsageError):
            make_host_key("", 7687)

    def test_hostname_length_bound(self):
        make_host_key("a" * 255, 1)
        with pytest.raises(UsageError):
            make_host_key("a" * 256, 1)

    def test_port_out_of_range(self):
        with pytest.raises(UsageError):
            make_host_key("h", 70000)

    def test_port_not_int(self):
        with pytest.raises(UsageError):
            make_host_key("h", "7687")

    def test_usage_error_is_value_error(self):
        with pytest.raises(ValueError):
            make_host_key("", 1)


class TestHostVerifier:
    """Tests for the decision protocol."""

    def test_matching_fingerprint_accepted_without_policy_call(self, store_path):
        store_path.write_text("h.com:7687 AA\n")
        policy = _mock_policy(TrustDecision.REJECT)

        outcome = _verifier(store_path, policy).check("h.com", 7687, "AA")

        assert outcome is VerificationOutcome.ACCEPTED
        policy.decide.assert_not_called()

    def test_unknown_host_without_policy_rejected(self, store_path):
        outcome = _verifier(store_path).check("h.com", 7687, "AA")

        assert outcome is VerificationOutcome.REJECTED
        assert not store_path.exists()

    def test_mismatch_without_policy_rejected(self, store_path):
        store_path.write_text("h.com:7687 AA\n")

        outcome = _verifier(store_path).check("h.com", 7687, "BB")

        assert outcome is VerificationOutcome.REJECTED
        assert store_path.read_text() == "h.com:7687 AA\n"

    def test_trust_and_persist_flow(self, store_path):
        policy = _mock_policy(TrustDecision.TRUST_AND_PERSIST)

        result = _verifier(store_path, policy).verify("db.example.com", 7687, "11:22:33")

        assert result.outcome is VerificationOutcome.ACCEPTED
        assert result.persisted is True
        assert retrieve_stored_fingerprint(store_path, "db.example.com:7687") == "11:22:33"
        policy.decide.assert_called_once_with(
            "db.example.com:7687", "11:22:33", MismatchReason.UNRECOGNIZED
        )

    def test_mismatch_reason_passed_to_policy(self, store_path):
        store_path.write_text("h.com:7687 AA\n")
        policy = _mock_policy(TrustDecision.TRUST_AND_PERSIST)

        result = _verifier(store_path, policy).verify("h.com", 7687, "BB")

        policy.decide.assert_called_once_with("h.com:7687", "BB", MismatchReason.MISMATCH)
        assert result.stored_fingerprint == "AA"
        assert result.reason is MismatchReason.MISMATCH
        assert store_path.read_text() == "h.com:7687 BB\n"

    def test_accept_once_does_not_persist(self, store_path):
        store_path.write_text("h.com:7687 AA\n")
        policy = StaticPolicy(TrustDecision.ACCEPT_ONCE)

        outcome = _verifier(store_path, policy).check("h.com", 7687, "BB")

        assert outcome is VerificationOutcome.ACCEPTED
        assert store_path.read_text() == "h.com:7687 AA\n"

    def test_reject_does_not_persist(self, store_path):
        policy = StaticPolicy(TrustDecision.REJECT)

        outcome = _verifier(store_path, policy).check("h.com", 7687, "BB")

        assert outcome is VerificationOutcome.REJECTED
        assert not store_path.exists()

    def test_unrecognized_decision_rejected(self, store_path):
        policy = _mock_policy(42)

        result = _verifier(store_path, policy).verify("h.com", 7687, "BB")

        assert result.outcome is VerificationOutcome.REJECTED
        assert result.decision is None
        assert not store_path.exists()

    def test_failed_persist_is_not_accepted(self, store_path):
        store_path.write_text("h.com:7687 AA\n")
        policy = StaticPolicy(TrustDecision.TRUST_AND_PERSIST)

        with patch(
            "hostpin.persistence.os.replace",
            side_effect=OSError(errno.EIO, "Simulated fault"),
        ):
            with pytest.raises(StoreIOError):
                _verifier(store_path, policy).check("h.com", 7687, "BB")

        assert store_path.read_text() == "h.com:7687 AA\n"

    def test_lookup_error_propagates(self, temp_dir):
        policy = _mock_policy(TrustDecision.TRUST_AND_PERSIST)

        # The store path is a directory, so it cannot be read
        with pytest.raises(StoreIOError):
            _verifier(temp_dir, policy).check("h.com", 7687, "BB")

        policy.decide.assert_not_called()

    def test_invalid_hostname_fails_before_io(self, store_path):
        policy = _mock_policy(TrustDecision.TRUST_AND_PERSIST)

        with patch("hostpin.trust.verifier.retrieve_stored_fingerprint") as lookup:
            with pytest.raises(UsageError):
                _verifier(store_path, policy).check("", 7687, "BB")

        lookup.assert_not_called()
        policy.decide.assert_not_called()

    def test_callback_policy_context_passed_through(self, store_path):
        context = object()
        calls = []

        def callback(ctx, host_key, fingerprint, reason):
            calls.append((ctx, host_key, fingerprint, reason))
            return TrustDecision.ACCEPT_ONCE

        outcome = _verifier(store_path, CallbackPolicy(callback, context)).check(
            "h.com", 1, "FF"
        )

        assert outcome is VerificationOutcome.ACCEPTED
        assert calls == [(context, "h.com:1", "FF", MismatchReason.UNRECOGNIZED)]

    def test_default_store_path_used(self, temp_dir, monkeypatch):
        monkeypatch.setenv("HOSTPIN_STATE_DIR", str(temp_dir / "state"))
        verifier = HostVerifier(
            VerifierConfig(policy=StaticPolicy(TrustDecision.TRUST_AND_PERSIST))
        )

        verifier.check("h.com", 1, "FF")

        assert (temp_dir / "state" / "known_hosts").read_text() == "h.com:1 FF\n"

    def test_overlong_fingerprint_rejected_before_io(self, store_path):
        policy = _mock_policy(TrustDecision.TRUST_AND_PERSIST)

        with patch("hostpin.trust.verifier.retrieve_stored_fingerprint") as lookup:
            with pytest.raises(UsageError):
                _verifier(store_path, policy).check("h.com", 7687, "AB:" * 23 + "CD")

        lookup.assert_not_called()
        policy.decide.assert_not_called()
        assert not store_path.exists()

    @pytest.mark.parametrize("fingerprint", ["", "AA BB", "AA\nBB"])
    def test_empty_or_whitespace_fingerprint_rejected(self, store_path, fingerprint):
        with pytest.raises(UsageError):
            _verifier(store_path, StaticPolicy(TrustDecision.TRUST_AND_PERSIST)).check(
                "h.com", 7687, fingerprint
            )

        assert not store_path.exists()

    def test_trusted_fingerprint_matches_on_next_check(self, store_path):
        fingerprint = "AB:" * 19 + "CD"
        trusting = _verifier(store_path, StaticPolicy(TrustDecision.TRUST_AND_PERSIST))

        assert trusting.check("h.com", 7687, fingerprint) is VerificationOutcome.ACCEPTED

        outcome = _verifier(store_path).check("h.com", 7687, fingerprint)
        assert outcome is VerificationOutcome.ACCEPTED

    def test_no_config_uses_global_config(self, store_path):
        with patch.dict(os.environ, {"HOSTPIN_KNOWN_HOSTS": str(store_path)}):
            set_verifier_config(None)
            try:
                assert HostVerifier().store_path == store_path
                assert HostVerifier().config is get_verifier_config()
            finally:
                set_verifier_config(None)


class TestCheckKnownHosts:
    """Tests for the functional entry point."""

    def test_explicit_config(self, store_path):
        config = VerifierConfig(
            known_hosts_file=store_path,
            policy=StaticPolicy(TrustDecision.TRUST_AND_PERSIST),
        )

        assert check_known_hosts("h.com", 1, "FF", config) is VerificationOutcome.ACCEPTED
        assert store_path.read_text() == "h.com:1 FF\n"

    def test_global_config(self, store_path):
        set_verifier_config(VerifierConfig(known_hosts_file=store_path))
        try:
            store_path.write_text("h.com:1 FF\n")
            assert check_known_hosts("h.com", 1, "FF") is VerificationOutcome.ACCEPTED
            assert check_known_hosts("h.com", 1, "00") is VerificationOutcome.REJECTED
        finally:
            set_verifier_config(None)
