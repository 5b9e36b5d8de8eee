#!/usr/bin/env python
"""
Store commands - inspect and edit the known-hosts store directly.
"""

from __future__ import annotations

from typing import Optional

from rich.markup import escape

from hostpin.cli.formatting.output import ConsoleOutput
from hostpin.config.paths import resolve_store_path
from hostpin.config.settings import VerifierConfig
from hostpin.persistence import remove_stored_fingerprint, update_stored_fingerprint
from hostpin.trust.errors import HostVerificationError
from hostpin.trust.lookup import iter_records, retrieve_stored_fingerprint
from hostpin.trust.verifier import make_host_key


def _store_path(known_hosts: Optional[str]):
    return resolve_store_path(known_hosts or VerifierConfig.from_env().known_hosts_file)


def run_lookup(hostname: str, port: int, known_hosts: Optional[str] = None) -> int:
    """Print the stored fingerprint for a host."""
    console = ConsoleOutput()
    try:
        host_key = str(make_host_key(hostname, port))
        stored = retrieve_stored_fingerprint(_store_path(known_hosts), host_key)
    except HostVerificationError as e:
        console.print_error(str(e))
        return 2

    if stored is None:
        console.print_warning(f"No fingerprint stored for {host_key}")
        return 1
    console.print(stored, markup=False, highlight=False)
    return 0


def run_trust(
    hostname: str, port: int, fingerprint: str, known_hosts: Optional[str] = None
) -> int:
    """Store a fingerprint for a host, replacing any previous one."""
    console = ConsoleOutput()
    try:
        host_key = str(make_host_key(hostname, port))
        update_stored_fingerprint(_store_path(known_hosts), host_key, fingerprint)
    except HostVerificationError as e:
        console.print_error(str(e))
        return 2

    console.print_success(f"{host_key} trusted")
    return 0


def run_forget(hostname: str, port: int, known_hosts: Optional[str] = None) -> int:
    """Remove a host from the store."""
    console = ConsoleOutput()
    try:
        host_key = str(make_host_key(hostname, port))
        removed = remove_stored_fingerprint(_store_path(known_hosts), host_key)
    except HostVerificationError as e:
        console.print_error(str(e))
        return 2

    if not removed:
        console.print_warning(f"No fingerprint stored for {host_key}")
        return 1
    console.print_success(f"{host_key} removed")
    return 0


def run_list(known_hosts: Optional[str] = None) -> int:
    """List every record in the store."""
    console = ConsoleOutput()
    try:
        path = _store_path(known_hosts)
        records = list(iter_records(path))
    except HostVerificationError as e:
        console.print_error(str(e))
        return 2

    if not records:
        console.print(f"[dim]No known hosts in {escape(str(path))}[/dim]")
        return 0
    console.print_records(records, title=str(path))
    return 0


def run_path(known_hosts: Optional[str] = None) -> int:
    """Print the resolved store path."""
    console = ConsoleOutput()
    try:
        path = _store_path(known_hosts)
    except HostVerificationError as e:
        console.print_error(str(e))
        return 2
    console.print(str(path), markup=False, highlight=False)
    return 0
