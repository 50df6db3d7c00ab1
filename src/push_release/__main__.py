"""CLI entry-point for push_release.

Usage:
    python -m push_release serve [--host HOST] [--port PORT]
    python -m push_release hash-secret <secret>
    python -m push_release inspect <commit> [--json]
"""

from __future__ import annotations

import argparse
import json
import logging
import sys

from push_release import __version__
from push_release.api import default_fetcher, default_ledger
from push_release.core.config import load_config
from push_release.core.manifest import metadata_source
from push_release.core.network import NetworkResolver
from push_release.core.tracks import TrackResolver
from push_release.core.validation import RequestValidator, keccak_hex
from push_release.errors import (
    ConfigError,
    LedgerRPCError,
    ManifestError,
    MetadataFetchError,
)
from push_release.utils.exit_codes import ExitCode


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="push-release",
        description="Relay CI build and release webhooks to on-chain registries.",
    )
    p.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    p.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=False,
        help="Enable debug logging.",
    )
    sub = p.add_subparsers(dest="command")

    serve_p = sub.add_parser("serve", help="Run the webhook API.")
    serve_p.add_argument("--host", default=None, help="Bind address (default: $HOST or 0.0.0.0).")
    serve_p.add_argument("--port", type=int, default=None, help="Port (default: $PORT or 1337).")

    hash_p = sub.add_parser(
        "hash-secret",
        help="Print the keccak-256 digest to configure as secret_hash.",
    )
    hash_p.add_argument("secret")

    inspect_p = sub.add_parser(
        "inspect",
        help="Fetch and interpret release metadata for a commit (no transactions).",
    )
    inspect_p.add_argument("commit")
    inspect_p.add_argument(
        "--network",
        default=None,
        help="Network key for the fork-block lookup (default: ask the node).",
    )
    inspect_p.add_argument(
        "--json",
        dest="json_out",
        action="store_true",
        default=False,
        help="Print the result as JSON to stdout.",
    )
    return p


def _serve(args: argparse.Namespace) -> int:
    import uvicorn

    from push_release.web_api.config import settings
    from push_release.web_api.dependencies import get_relay_config

    # Fail fast on bad configuration instead of on the first request.
    get_relay_config()
    uvicorn.run(
        "push_release.web_api.main:app",
        host=args.host or settings.HOST,
        port=args.port or settings.PORT,
        log_level=settings.LOG_LEVEL.lower(),
    )
    return ExitCode.SUCCESS


def _inspect(args: argparse.Namespace) -> int:
    config = load_config()
    if not RequestValidator(config.supported_platforms).is_valid("commit", args.commit):
        print(f"error: invalid commit: {args.commit}", file=sys.stderr)
        return ExitCode.ERROR

    source = metadata_source(
        config.metadata_source, default_fetcher(config), config.manifest_path
    )
    metadata = source.load(args.commit)
    track = TrackResolver(config.enabled_tracks).resolve(metadata.track)
    network = args.network or NetworkResolver(default_ledger(config)).resolve_network()
    fork_block = metadata.fork_block(network)

    result = {
        "commit": args.commit,
        "version": str(metadata.version),
        "semver": metadata.version.encode(),
        "track": track.label,
        "raw_track": track.raw_label,
        "track_code": int(track.code),
        "enabled": track.enabled,
        "critical": metadata.critical,
        "network": network,
        "fork_block": fork_block if fork_block is not None else 0,
        "forks": dict(metadata.forks),
    }
    if args.json_out:
        json.dump(result, sys.stdout, indent=2, sort_keys=True)
        sys.stdout.write("\n")
    else:
        print(
            f"{result['commit']}: v{result['version']} (semver {result['semver']})\n"
            f"   Track    : {track.raw_label} => {track.label} ({int(track.code)})"
            f" [enabled: {track.enabled}]\n"
            f"   Network  : {network} (fork block {result['fork_block']})\n"
            f"   Critical : {metadata.critical}"
        )
    return ExitCode.SUCCESS


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command == "hash-secret":
        print(keccak_hex(args.secret))
        return ExitCode.SUCCESS

    try:
        if args.command == "serve":
            return _serve(args)
        if args.command == "inspect":
            return _inspect(args)
    except ConfigError as exc:
        print(f"error: configuration: {exc}", file=sys.stderr)
        return ExitCode.ERROR
    except (MetadataFetchError, ManifestError, LedgerRPCError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return ExitCode.ERROR

    parser.print_help(sys.stderr)
    return ExitCode.ERROR


if __name__ == "__main__":
    raise SystemExit(main())
