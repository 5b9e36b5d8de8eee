#!/usr/bin/env python
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from dotenv import load_dotenv

from hostpin import __version__


def _configure_logging(verbose: bool) -> None:
    # Only configure if no handlers exist (avoid overriding embedding apps)
    if not logging.getLogger().handlers:
        logging.basicConfig(
            level=logging.WARNING,
            format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        )
    logging.getLogger("hostpin").setLevel(logging.DEBUG if verbose else logging.WARNING)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="hostpin",
        description="hostpin - trust-on-first-use server fingerprint verification",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    # Global options
    parser.add_argument(
        "--known-hosts",
        metavar="PATH",
        help="Known-hosts store (default: $HOSTPIN_KNOWN_HOSTS or per-user state dir)",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Verbose logging")

    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")

    # --- Command Definitions ---
    check_p = subparsers.add_parser("check", help="Verify a host fingerprint")
    check_p.add_argument("hostname", help="Server hostname")
    check_p.add_argument("port", type=int, help="Server port")
    check_p.add_argument("fingerprint", help="Observed fingerprint")
    decision = check_p.add_mutually_exclusive_group()
    decision.add_argument(
        "--trust", dest="decision", action="store_const", const="trust",
        help="Trust and save unknown or changed fingerprints",
    )
    decision.add_argument(
        "--accept-once", dest="decision", action="store_const", const="once",
        help="Accept unknown or changed fingerprints without saving",
    )
    decision.add_argument(
        "--reject", dest="decision", action="store_const", const="reject",
        help="Reject unknown or changed fingerprints (default)",
    )
    decision.add_argument(
        "--prompt", dest="decision", action="store_const", const="prompt",
        help="Ask interactively",
    )

    lookup_p = subparsers.add_parser("lookup", help="Show the stored fingerprint for a host")
    lookup_p.add_argument("hostname", help="Server hostname")
    lookup_p.add_argument("port", type=int, help="Server port")

    trust_p = subparsers.add_parser("trust", help="Store a fingerprint for a host")
    trust_p.add_argument("hostname", help="Server hostname")
    trust_p.add_argument("port", type=int, help="Server port")
    trust_p.add_argument("fingerprint", help="Fingerprint to trust")

    forget_p = subparsers.add_parser("forget", help="Remove a host from the store")
    forget_p.add_argument("hostname", help="Server hostname")
    forget_p.add_argument("port", type=int, help="Server port")

    subparsers.add_parser("list", help="List known hosts")
    subparsers.add_parser("path", help="Show the known-hosts store path")
    subparsers.add_parser("version", help="Show version")

    # --- Logic ---
    args = parser.parse_args(argv)
    load_dotenv(Path.cwd() / ".env")
    _configure_logging(args.verbose)

    if args.command is None:
        parser.print_help()
        return 2

    from hostpin.cli.commands import check, store

    if args.command == "check":
        return check.run(
            args.hostname,
            args.port,
            args.fingerprint,
            decision=args.decision,
            known_hosts=args.known_hosts,
        )
    elif args.command == "lookup":
        return store.run_lookup(args.hostname, args.port, known_hosts=args.known_hosts)
    elif args.command == "trust":
        return store.run_trust(
            args.hostname, args.port, args.fingerprint, known_hosts=args.known_hosts
        )
    elif args.command == "forget":
        return store.run_forget(args.hostname, args.port, known_hosts=args.known_hosts)
    elif args.command == "list":
        return store.run_list(known_hosts=args.known_hosts)
    elif args.command == "path":
        return store.run_path(known_hosts=args.known_hosts)
    elif args.command == "version":
        print(f"hostpin {__version__}")
        return 0

    return 0

if __name__ == "__main__":
    sys.exit(main())
